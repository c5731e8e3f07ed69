#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Models Package
Значения, которые вычисляет ядро: классификация захвата, серии привычек, метрики

Версия: 1.0.0
Дата: 2026-10-17
"""

from .enums import (
    CaptureType,
    HabitFrequency,
    TaskStatus,
    TaskPriority,
    ProjectStatus,
    SessionType,
    ReadingItemType,
    ReadingStatus,
    GoalType,
    TimeCategory,
    WORK_CATEGORIES
)

from .capture import ClassifiedCapture

from .habit import (
    StreakUpdate,
    HabitStats,
    CompletionResult,
    HabitHistory
)

from .analytics import (
    ProductivityMetrics,
    ProjectStats,
    FocusStats,
    TodayFocusStats
)

__all__ = [
    # Enums
    'CaptureType',
    'HabitFrequency',
    'TaskStatus',
    'TaskPriority',
    'ProjectStatus',
    'SessionType',
    'ReadingItemType',
    'ReadingStatus',
    'GoalType',
    'TimeCategory',
    'WORK_CATEGORIES',

    # Capture
    'ClassifiedCapture',

    # Habits
    'StreakUpdate',
    'HabitStats',
    'CompletionResult',
    'HabitHistory',

    # Analytics
    'ProductivityMetrics',
    'ProjectStats',
    'FocusStats',
    'TodayFocusStats'
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Habit Streak Engine
Расчет серий привычек, окна истории выполнения и сводной статистики

Все функции чистые: никаких обращений к хранилищу, только переданные
значения. Границы суток считаются по UTC.

Версия: 1.0.0
Дата: 2026-10-17
"""

from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Set

from core.exceptions import ValidationError
from models.habit import HabitStats, StreakUpdate
from utils.datetime_utils import DateLike, today_utc, utc_day, utc_now


# Размер окна "последняя неделя" на карточке привычки
WEEK_WINDOW_DAYS = 7


def _field(habit: Any, name: str) -> Any:
    """Поле привычки: поддерживаются и объекты, и словари строк"""
    if isinstance(habit, dict):
        return habit.get(name)
    return getattr(habit, name, None)


def last_completed_day(habit: Any) -> Optional[date]:
    last_completed_at = _field(habit, 'last_completed_at')
    if last_completed_at is None:
        return None
    return utc_day(last_completed_at)


def is_completed_today(habit: Any, today: Optional[date] = None) -> bool:
    today = today or today_utc()
    return last_completed_day(habit) == today


# ===== СЕРИИ =====

def complete_habit(habit: Any, now: Optional[datetime] = None) -> StreakUpdate:
    """Новое значение серии при отметке привычки в момент now.

    - уже отмечена сегодня: серия не меняется
    - последняя отметка вчера: серия +1
    - пропуск 2+ дней или отметок не было: серия начинается с 1
    """
    today = utc_day(now or utc_now())
    last_day = last_completed_day(habit)
    streak_count = _field(habit, 'streak_count') or 0

    if last_day == today:
        return StreakUpdate(new_streak=streak_count, already_completed=True)

    if last_day == today - timedelta(days=1):
        return StreakUpdate(new_streak=streak_count + 1, extended=True)

    return StreakUpdate(new_streak=1)


# ===== ИСТОРИЯ =====

def completion_history(habit_id: str, days: int, completions: Iterable[DateLike],
                       today: Optional[date] = None) -> List[bool]:
    """Окно из days дней, индекс 0 - сегодня, days-1 - days-1 дней назад.

    completions может содержать даты или моменты времени: они усекаются
    до календарного дня UTC.
    """
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValidationError(
            f"days должен быть целым числом >= 1 (habit {habit_id}): {days!r}",
            field='days'
        )

    today = today or today_utc()
    completed_days: Set[date] = {utc_day(value) for value in completions}

    return [
        (today - timedelta(days=offset)) in completed_days
        for offset in range(days)
    ]


def weekly_completions(habit_id: str, completions: Iterable[DateLike],
                       today: Optional[date] = None) -> List[bool]:
    return completion_history(habit_id, WEEK_WINDOW_DAYS, completions, today)


# ===== СТАТИСТИКА =====

def aggregate_stats(habits: Sequence[Any], today: Optional[date] = None) -> HabitStats:
    """Сводка по набору привычек"""
    today = today or today_utc()
    streaks = [_field(habit, 'streak_count') or 0 for habit in habits]

    return HabitStats(
        total_habits=len(habits),
        total_streak=sum(streaks),
        longest_streak=max(streaks, default=0),
        completed_today=sum(1 for habit in habits if is_completed_today(habit, today))
    )

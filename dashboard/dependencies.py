#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Dashboard Dependencies
Провайдеры FastAPI: хранилище, сервисы и пользователь запроса

Хранилище и сервисы живут в app.state и создаются в lifespan;
модульных синглтонов нет.

Версия: 1.0.0
Дата: 2026-10-17
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from services import (
    AnalyticsService,
    CaptureService,
    GoalService,
    HabitService,
    ProjectService,
    ReadingService,
    ServiceManager,
    SessionService,
    SettingsService,
    TaskService,
    TimeBudgetService,
    VitalityService,
)

logger = logging.getLogger(__name__)

USER_ID_MAX_LENGTH = 128


# ===== КОМПОНЕНТЫ =====

def get_services(request: Request) -> ServiceManager:
    return request.app.state.services


# ===== ПОЛЬЗОВАТЕЛЬ =====

async def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Идентификатор пользователя из заголовка X-User-Id"""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Требуется заголовок X-User-Id"
        )
    if len(user_id) > USER_ID_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"X-User-Id длиннее {USER_ID_MAX_LENGTH} символов"
        )
    return user_id


# ===== СЕРВИСЫ =====

def get_capture_service(services: ServiceManager = Depends(get_services)) -> CaptureService:
    return services.captures


def get_habit_service(services: ServiceManager = Depends(get_services)) -> HabitService:
    return services.habits


def get_project_service(services: ServiceManager = Depends(get_services)) -> ProjectService:
    return services.projects


def get_task_service(services: ServiceManager = Depends(get_services)) -> TaskService:
    return services.tasks


def get_reading_service(services: ServiceManager = Depends(get_services)) -> ReadingService:
    return services.reading


def get_session_service(services: ServiceManager = Depends(get_services)) -> SessionService:
    return services.sessions


def get_vitality_service(services: ServiceManager = Depends(get_services)) -> VitalityService:
    return services.vitality


def get_goal_service(services: ServiceManager = Depends(get_services)) -> GoalService:
    return services.goals


def get_time_budget_service(services: ServiceManager = Depends(get_services)) -> TimeBudgetService:
    return services.time_budget


def get_settings_service(services: ServiceManager = Depends(get_services)) -> SettingsService:
    return services.settings


def get_analytics_service(services: ServiceManager = Depends(get_services)) -> AnalyticsService:
    return services.analytics

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Dashboard Configuration
Настройки HTTP API дашборда для разных сред

Версия: 1.0.0
Дата: 2026-10-17
"""

from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardSettings(BaseSettings):
    """Настройки HTTP API Life Cockpit"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="Life Cockpit",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия API"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Режим отладки: включает /api/docs"
    )

    # ===== CORS НАСТРОЙКИ =====

    ALLOWED_ORIGINS: List[str] = Field(
        default=["*"],
        description="Разрешенные источники для CORS"
    )

    ALLOWED_METHODS: List[str] = Field(
        default=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
        description="Разрешенные HTTP методы"
    )

    # ===== ХРАНИЛИЩЕ =====

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///data/cockpit.db",
        description="Async URL SQLAlchemy"
    )

    CREATE_SCHEMA_ON_STARTUP: bool = Field(
        default=True,
        description="Создавать таблицы при старте приложения"
    )

    # ===== ПРИВЫЧКИ =====

    HABIT_COMPLETE_MAX_ATTEMPTS: int = Field(default=3, ge=1)
    HISTORY_MAX_DAYS: int = Field(default=365, ge=7)

    # ===== ВАЛИДАЦИЯ =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        allowed = ['development', 'production', 'testing']
        if v not in allowed:
            raise ValueError(f'ENVIRONMENT должен быть одним из: {allowed}')
        return v

    @model_validator(mode='after')
    def validate_production_settings(self):
        if self.ENVIRONMENT == 'production' and self.DEBUG:
            raise ValueError('DEBUG нельзя включать в production')
        return self


settings = DashboardSettings()

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Configuration
Централизованная конфигурация с валидацией

Версия: 1.0.0
Дата: 2026-10-17
"""

import os
import sys
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass
from enum import Enum


class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class DatabaseConfig:
    """Конфигурация хранилища записей"""
    url: str
    echo: bool = False
    pool_size: int = 5


@dataclass
class ServerConfig:
    """Конфигурация сервера"""
    host: str = "0.0.0.0"
    port: int = 8000
    debug_mode: bool = False


@dataclass
class HabitConfig:
    """Параметры движка привычек"""
    complete_max_attempts: int = 3
    history_max_days: int = 365


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == 'true'


class CockpitConfig:
    """Главный класс конфигурации"""

    def __init__(self, ensure_directories: bool = True):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()
        if ensure_directories:
            self._ensure_directories()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Директории
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        # Хранилище
        self.database = DatabaseConfig(
            url=os.getenv('DATABASE_URL', f"sqlite+aiosqlite:///{self.data_dir / 'cockpit.db'}"),
            echo=_env_bool('DATABASE_ECHO', 'false'),
            pool_size=int(os.getenv('DB_POOL_SIZE', 5))
        )

        # Сервер
        self.server = ServerConfig(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', 8000)),
            debug_mode=_env_bool('DEBUG', 'false')
        )

        # Привычки
        self.habits = HabitConfig(
            complete_max_attempts=int(os.getenv('HABIT_COMPLETE_MAX_ATTEMPTS', 3)),
            history_max_days=int(os.getenv('HISTORY_MAX_DAYS', 365))
        )

        # Логирование
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = _env_bool('LOG_TO_FILE', 'true')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if not self.database.url:
            errors.append("DATABASE_URL не может быть пустым")

        if not 1 <= self.server.port <= 65535:
            errors.append(f"Порт {self.server.port} вне допустимого диапазона (1-65535)")

        if self.database.pool_size < 1:
            errors.append("DB_POOL_SIZE должен быть положительным числом")

        if self.habits.complete_max_attempts < 1:
            errors.append("HABIT_COMPLETE_MAX_ATTEMPTS должен быть не меньше 1")

        if self.habits.history_max_days < 7:
            errors.append("HISTORY_MAX_DAYS должен быть не меньше 7")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    def _ensure_directories(self):
        """Создание необходимых директорий"""
        directories = [self.data_dir]
        if self.log_to_file:
            directories.append(self.log_dir)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования для logging.config.dictConfig"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        handler_configs: Dict[str, Any] = {
            'console': {
                'class': 'logging.StreamHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'stream': sys.stdout
            }
        }
        if self.log_to_file:
            handler_configs['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"cockpit_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': handler_configs,
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'sqlalchemy.engine': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации в словарь (без секретов)"""
        database_url = self.database.url
        if '@' in database_url:
            scheme, _, host = database_url.partition('://')
            database_url = f"{scheme}://***@{host.split('@', 1)[1]}"

        return {
            'environment': self.environment.value,
            'database_url': database_url,
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode
            },
            'habits': {
                'complete_max_attempts': self.habits.complete_max_attempts,
                'history_max_days': self.habits.history_max_days
            },
            'log_level': self.log_level.value
        }


def load_config(ensure_directories: bool = True) -> CockpitConfig:
    """Прочитать конфигурацию из окружения"""
    return CockpitConfig(ensure_directories=ensure_directories)


__all__ = [
    'CockpitConfig',
    'load_config',
    'Environment',
    'LogLevel',
    'DatabaseConfig',
    'ServerConfig',
    'HabitConfig'
]

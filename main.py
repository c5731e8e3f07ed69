#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Точка входа
Запуск JSON API дашборда продуктивности

Версия: 1.0.0
Дата: 2026-10-17
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from config import CockpitConfig, load_config
from dashboard.app import create_app
from dashboard.config import DashboardSettings
from database.migrations import create_schema, drop_schema, ensure_sqlite_directory
from database.store import SqlRecordStore
from utils.logger import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Запуск Life Cockpit API')
    parser.add_argument('--host', default=None, help='Host для запуска (по умолчанию HOST)')
    parser.add_argument('--port', type=int, default=None, help='Port для запуска (по умолчанию PORT)')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка (разработка)')
    parser.add_argument('--init-db', action='store_true', help='Создать таблицы и выйти')
    parser.add_argument('--reset-db', action='store_true',
                        help='Удалить и заново создать таблицы (только development)')
    return parser.parse_args(argv)


async def init_database(config: CockpitConfig, reset: bool = False) -> None:
    """Создать схему хранилища"""
    ensure_sqlite_directory(config.database.url)
    store = SqlRecordStore(config.database.url, echo=config.database.echo,
                           pool_size=config.database.pool_size)
    try:
        if reset:
            await drop_schema(store)
        await create_schema(store)
    finally:
        await store.close()


def build_settings(config: CockpitConfig) -> DashboardSettings:
    return DashboardSettings(
        ENVIRONMENT=config.environment.value,
        DEBUG=config.server.debug_mode,
        DATABASE_URL=config.database.url,
        HABIT_COMPLETE_MAX_ATTEMPTS=config.habits.complete_max_attempts,
        HISTORY_MAX_DAYS=config.habits.history_max_days
    )


def create_app_from_env() -> FastAPI:
    """Фабрика для uvicorn --reload: конфигурация и логирование из окружения"""
    config = load_config()
    configure_logging(config)
    return create_app(app_settings=build_settings(config))


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция запуска"""
    args = parse_args(argv)

    try:
        config = load_config()
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    configure_logging(config)
    logger.info(f"🔧 Конфигурация: {config.to_dict()}")

    if args.reset_db and not config.is_development():
        logger.error("❌ --reset-db доступен только в development")
        return 2

    if args.init_db or args.reset_db:
        asyncio.run(init_database(config, reset=args.reset_db))
        return 0

    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info(f"🌐 Запуск Life Cockpit на http://{host}:{port}")

    if args.reload:
        # Дочерний процесс перезагрузки собирает приложение из окружения сам
        uvicorn.run("main:create_app_from_env", factory=True, host=host, port=port,
                    reload=True, log_config=None)
    else:
        uvicorn.run(create_app(app_settings=build_settings(config)), host=host, port=port,
                    log_config=None, server_header=False)

    logger.info("👋 Life Cockpit остановлен")
    return 0


if __name__ == "__main__":
    sys.exit(main())

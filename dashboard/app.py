#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - FastAPI Application
JSON API дашборда продуктивности: захват, привычки, проекты, фокус, планировщик

Версия: 1.0.0
Дата: 2026-10-17
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from dashboard.api import captures, focus, goals, habits, planner, projects, reading, stats, tasks
from dashboard.config import DashboardSettings, settings as default_settings
from dashboard.dependencies import get_services
from database.migrations import create_schema, ensure_sqlite_directory
from database.store import RecordStore, SqlRecordStore
from services import ServiceManager
from shared.models import HealthCheck

logger = logging.getLogger(__name__)


def _error_response(status_code: int, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "status_code": status_code, **extra}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Исключения сервисов -> HTTP статусы"""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return _error_response(422, exc, field=exc.field)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error_response(404, exc)

    # ConflictError - подкласс StoreError, обработчик выбирается по MRO
    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return _error_response(409, exc)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"❌ Хранилище недоступно: {request.method} {request.url.path}: {exc}")
        return _error_response(503, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors(), "status_code": 422}
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code}
        )


def create_app(store: Optional[RecordStore] = None,
               app_settings: Optional[DashboardSettings] = None) -> FastAPI:
    """Фабрика приложения.

    Если хранилище не передано, оно создается в lifespan по DATABASE_URL
    и закрывается при остановке. Переданное хранилище закрывает вызывающий.
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Запуск {app_settings.APP_NAME} {app_settings.VERSION}...")
        app.state.started_at = time.time()

        owns_store = store is None
        if owns_store:
            ensure_sqlite_directory(app_settings.DATABASE_URL)
            app.state.store = SqlRecordStore(app_settings.DATABASE_URL)
        else:
            app.state.store = store

        if app_settings.CREATE_SCHEMA_ON_STARTUP and isinstance(app.state.store, SqlRecordStore):
            await create_schema(app.state.store)

        app.state.services = ServiceManager(
            app.state.store,
            habit_max_attempts=app_settings.HABIT_COMPLETE_MAX_ATTEMPTS,
            history_max_days=app_settings.HISTORY_MAX_DAYS
        )
        logger.info("✅ Dashboard готов к работе")

        yield

        logger.info("🛑 Остановка Dashboard...")
        if owns_store:
            await app.state.services.close_services()
        logger.info("✅ Ресурсы очищены")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="JSON API дашборда продуктивности Life Cockpit",
        version=app_settings.VERSION,
        docs_url="/api/docs" if app_settings.DEBUG else None,
        redoc_url="/api/redoc" if app_settings.DEBUG else None,
        openapi_url="/api/openapi.json" if app_settings.DEBUG else None,
        lifespan=lifespan
    )

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=app_settings.ALLOWED_METHODS,
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Логирование запросов и время обработки"""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response

    register_exception_handlers(app)

    # ===== РОУТЕРЫ =====

    for module in (captures, habits, tasks, projects, reading, focus, planner, goals, stats):
        app.include_router(module.router)

    # ===== СЛУЖЕБНЫЕ МАРШРУТЫ =====

    @app.get("/health", response_model=HealthCheck)
    async def health_check(services: ServiceManager = Depends(get_services)):
        """Health check для мониторинга"""
        health = await services.health_check()
        if health["status"] != "healthy":
            logger.error("❌ Health check: хранилище недоступно")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "life-cockpit",
                    "version": app_settings.VERSION,
                    "timestamp": time.time()
                }
            )

        return HealthCheck(
            status="healthy",
            service="life-cockpit",
            version=app_settings.VERSION,
            timestamp=time.time()
        )

    return app

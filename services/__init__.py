# services/__init__.py

"""
Модуль сервисов Life Cockpit

Сервисы реализуют сценарии дашборда поверх хранилища записей.
Хранилище передается явно; глобальных экземпляров нет.
"""

import logging
from typing import Any, Dict

from database.store import RecordStore

from .analytics_service import AnalyticsService
from .capture_service import CaptureService
from .goal_service import GoalService
from .habit_service import HabitService
from .project_service import ProjectService
from .reading_service import ReadingService
from .session_service import SessionService
from .settings_service import SettingsService
from .task_service import TaskService
from .time_budget_service import TimeBudgetService
from .vitality_service import VitalityService

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Набор сервисов над одним хранилищем

    Обеспечивает:
    - Создание сервисов в нужном порядке (задачи зависят от проектов)
    - Проверку состояния хранилища
    - Закрытие хранилища
    """

    def __init__(self, store: RecordStore, habit_max_attempts: int = 3,
                 history_max_days: int = 365):
        logger.info("🔧 Инициализация сервисов Life Cockpit...")
        self.store = store

        self.captures = CaptureService(store)
        self.habits = HabitService(store, max_attempts=habit_max_attempts,
                                   history_max_days=history_max_days)
        self.projects = ProjectService(store)
        self.tasks = TaskService(store, project_service=self.projects)
        self.reading = ReadingService(store)
        self.sessions = SessionService(store)
        self.vitality = VitalityService(store)
        self.goals = GoalService(store)
        self.time_budget = TimeBudgetService(store)
        self.settings = SettingsService(store)
        self.analytics = AnalyticsService(store)

        logger.info("✅ Все сервисы инициализированы")

    async def health_check(self) -> Dict[str, Any]:
        """Проверка состояния хранилища"""
        store_ok = await self.store.ping()
        return {
            "status": "healthy" if store_ok else "error",
            "services": {"store": {"status": "healthy" if store_ok else "error"}}
        }

    async def close_services(self) -> None:
        logger.info("🛑 Закрытие сервисов...")
        await self.store.close()
        logger.info("✅ Все сервисы закрыты")


__all__ = [
    'ServiceManager',
    'AnalyticsService',
    'CaptureService',
    'GoalService',
    'HabitService',
    'ProjectService',
    'ReadingService',
    'SessionService',
    'SettingsService',
    'TaskService',
    'TimeBudgetService',
    'VitalityService'
]

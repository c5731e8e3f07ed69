# services/project_service.py

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from core.exceptions import StoreError, ValidationError
from core.metrics import average, calculate_health_score, round_half_up
from models.analytics import ProjectStats
from models.enums import ProjectStatus, TaskStatus
from services.base import BaseService
from shared.models import Project, ProjectCreate, ProjectPatch, ProjectWithStats
from utils.datetime_utils import to_utc, utc_now

logger = logging.getLogger(__name__)

# Окно для суммы минут фокуса в сводке проектов
AGGREGATE_FOCUS_WINDOW_DAYS = 7


class ProjectService(BaseService):
    """
    Сервис проектов

    Возможности:
    - CRUD и архивирование проектов
    - Статистика задач проекта
    - Оценка здоровья проекта по выполнению, свежести и блокерам
    - Сводка по всем проектам для главной панели
    """

    entity = "projects"

    # ===== ЧТЕНИЕ =====

    async def get_project(self, project_id: str, user_id: str) -> Project:
        return Project.model_validate(await self._get_owned(project_id, user_id))

    async def get_active_projects(self, user_id: str) -> List[Project]:
        return await self.get_projects_by_status(user_id, ProjectStatus.ACTIVE)

    async def get_projects_by_status(self, user_id: str,
                                     status: Union[ProjectStatus, str, None] = "all") -> List[Project]:
        where: Dict[str, Any] = {"user_id": user_id}
        if status and status != "all":
            try:
                where["status"] = ProjectStatus(status)
            except ValueError:
                raise ValidationError(f"Неизвестный статус проекта: {status}", field="status")

        rows = await self.store.select(self.entity, where, order_by="updated_at", descending=True)
        return [Project.model_validate(row) for row in rows]

    async def get_project_stats(self, project_id: str) -> ProjectStats:
        """Количество задач проекта по статусам"""
        rows = await self.store.select("tasks", {"project_id": project_id})
        statuses = [row["status"] for row in rows]

        return ProjectStats(
            total=len(statuses),
            done=statuses.count(TaskStatus.DONE.value),
            in_progress=statuses.count(TaskStatus.IN_PROGRESS.value),
            blocked=statuses.count(TaskStatus.BLOCKED.value)
        )

    async def get_projects_with_stats(self, user_id: str) -> List[ProjectWithStats]:
        result = []
        for project in await self.get_active_projects(user_id):
            stats = await self.get_project_stats(project.id)
            result.append(ProjectWithStats(**project.model_dump(), stats=stats.to_dict()))
        return result

    # ===== ЗДОРОВЬЕ =====

    @staticmethod
    def calculate_health_score(stats: ProjectStats, last_updated: datetime,
                               now: Optional[datetime] = None) -> int:
        return calculate_health_score(stats, last_updated, now)

    async def update_project_health(self, project_id: str, now: Optional[datetime] = None) -> int:
        """Пересчитать и сохранить оценку здоровья проекта"""
        try:
            project = await self.store.get(self.entity, project_id)
            stats = await self.get_project_stats(project_id)
            health_score = calculate_health_score(stats, project["updated_at"], now)

            # updated_at не трогаем: от него считается свежесть
            await self.store.update(self.entity, project_id, {
                "health_score": health_score,
                "updated_at": project["updated_at"]
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка обновления здоровья проекта {project_id}: {e}")
            raise

        logger.debug(f"🩺 Здоровье проекта {project_id}: {health_score}")
        return health_score

    # ===== ИЗМЕНЕНИЕ =====

    async def create_project(self, user_id: str, data: ProjectCreate) -> Project:
        try:
            row = await self.store.insert(self.entity, {
                "user_id": user_id,
                **data.model_dump(),
                "status": ProjectStatus.ACTIVE,
                "health_score": 50
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка создания проекта для пользователя {user_id}: {e}")
            raise

        logger.info(f"📁 Создан проект {row['id']} для пользователя {user_id}: {data.name}")
        return Project.model_validate(row)

    async def update_project(self, project_id: str, user_id: str, patch: ProjectPatch) -> Project:
        current = await self._get_owned(project_id, user_id)
        changes = patch.changes()
        if not changes:
            return Project.model_validate(current)

        row = await self.store.update(self.entity, project_id, changes)
        logger.info(f"📝 Проект {project_id} обновлен: {', '.join(changes)}")
        return Project.model_validate(row)

    async def archive_project(self, project_id: str, user_id: str) -> Project:
        """Мягкое удаление: проект остается, статус archived"""
        return await self.update_project(project_id, user_id, ProjectPatch(status=ProjectStatus.ARCHIVED))

    # ===== СВОДКА =====

    async def get_aggregate_stats(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = to_utc(now) if now else utc_now()
        week_ago = now - timedelta(days=AGGREGATE_FOCUS_WINDOW_DAYS)

        projects = await self.store.select(self.entity, {"user_id": user_id})
        tasks = await self.store.select("tasks", {"user_id": user_id})
        sessions = await self.store.select("sessions", {"user_id": user_id}, gte={"started_at": week_ago})

        avg_health = average([project["health_score"] for project in projects])

        return {
            "total_projects": len(projects),
            "active_projects": sum(1 for p in projects if p["status"] == ProjectStatus.ACTIVE.value),
            "total_tasks": len(tasks),
            "completed_tasks": sum(1 for t in tasks if t["status"] == TaskStatus.DONE.value),
            "total_focus_minutes": sum(s["duration_minutes"] or 0 for s in sessions),
            "avg_health_score": round_half_up(avg_health) if avg_health is not None else 0
        }

# services/task_service.py

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.exceptions import StoreError
from models.enums import TaskStatus
from services.base import BaseService
from services.project_service import ProjectService
from shared.models import Task, TaskCreate, TaskPatch
from utils.datetime_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


class TaskService(BaseService):
    """
    Сервис задач проектов

    Возможности:
    - Создание, обновление, удаление задач
    - Отметка времени выполнения при переходе в done
    - Пересчет здоровья связанного проекта после любого изменения
    """

    entity = "tasks"

    def __init__(self, store, project_service: Optional[ProjectService] = None):
        super().__init__(store)
        self.project_service = project_service or ProjectService(store)

    async def get_tasks_for_project(self, project_id: str, user_id: str) -> List[Task]:
        await self._get_owned(project_id, user_id, entity="projects")
        rows = await self.store.select(self.entity, {"project_id": project_id}, order_by="created_at")
        return [Task.model_validate(row) for row in rows]

    async def get_task(self, task_id: str, user_id: str) -> Task:
        return Task.model_validate(await self._get_owned(task_id, user_id))

    async def create_task(self, user_id: str, data: TaskCreate,
                          now: Optional[datetime] = None) -> Task:
        values: Dict[str, Any] = {"user_id": user_id, **data.model_dump()}
        if data.project_id:
            await self._get_owned(data.project_id, user_id, entity="projects")
        if data.status == TaskStatus.DONE:
            values["completed_at"] = to_utc(now) if now else utc_now()

        try:
            async with self.store.transaction():
                row = await self.store.insert(self.entity, values)
                if row["project_id"]:
                    await self.project_service.update_project_health(row["project_id"], now)
        except StoreError as e:
            logger.error(f"❌ Ошибка создания задачи для пользователя {user_id}: {e}")
            raise

        logger.info(f"✅ Создана задача {row['id']} для пользователя {user_id}: {data.title}")
        return Task.model_validate(row)

    async def update_task(self, task_id: str, user_id: str, patch: TaskPatch,
                          now: Optional[datetime] = None) -> Task:
        current = await self._get_owned(task_id, user_id)
        changes = patch.changes()
        if not changes:
            return Task.model_validate(current)

        if changes.get("project_id"):
            await self._get_owned(changes["project_id"], user_id, entity="projects")

        if "status" in changes:
            was_done = current["status"] == TaskStatus.DONE.value
            is_done = changes["status"] == TaskStatus.DONE
            if is_done and not was_done:
                changes["completed_at"] = to_utc(now) if now else utc_now()
            elif was_done and not is_done:
                changes["completed_at"] = None

        try:
            async with self.store.transaction():
                row = await self.store.update(self.entity, task_id, changes)
                for project_id in {current["project_id"], row["project_id"]}:
                    if project_id:
                        await self.project_service.update_project_health(project_id, now)
        except StoreError as e:
            logger.error(f"❌ Ошибка обновления задачи {task_id}: {e}")
            raise

        logger.info(f"📝 Задача {task_id} обновлена: {', '.join(changes)}")
        return Task.model_validate(row)

    async def delete_task(self, task_id: str, user_id: str, now: Optional[datetime] = None) -> None:
        task = await self._get_owned(task_id, user_id)

        try:
            async with self.store.transaction():
                await self.store.delete(self.entity, task_id)
                if task["project_id"]:
                    await self.project_service.update_project_health(task["project_id"], now)
        except StoreError as e:
            logger.error(f"❌ Ошибка удаления задачи {task_id}: {e}")
            raise

        logger.info(f"🗑️ Задача {task_id} удалена")

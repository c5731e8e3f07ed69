# services/goal_service.py

import logging
from typing import List

from core.exceptions import StoreError
from services.base import BaseService
from shared.models import Goal, GoalCreate

logger = logging.getLogger(__name__)


class GoalService(BaseService):
    """Цели с числовым прогрессом"""

    entity = "goals"

    async def create_goal(self, user_id: str, data: GoalCreate) -> Goal:
        try:
            row = await self.store.insert(self.entity, {
                "user_id": user_id,
                **data.model_dump(),
                "current_value": 0,
                "completed": False
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка создания цели для пользователя {user_id}: {e}")
            raise

        logger.info(f"🎯 Создана цель {row['id']}: {data.title}")
        return Goal.model_validate(row)

    async def update_goal_progress(self, goal_id: str, user_id: str, value: float) -> Goal:
        """Цель выполнена, только если задан target_value и он достигнут"""
        goal = await self._get_owned(goal_id, user_id)
        target = goal["target_value"]
        completed = bool(target) and value >= target

        row = await self.store.update(self.entity, goal_id, {
            "current_value": value,
            "completed": completed
        })
        if completed and not goal["completed"]:
            logger.info(f"🏆 Цель {goal_id} достигнута")
        return Goal.model_validate(row)

    async def get_goals(self, user_id: str) -> List[Goal]:
        rows = await self.store.select(self.entity, {"user_id": user_id}, order_by="created_at")
        return [Goal.model_validate(row) for row in rows]

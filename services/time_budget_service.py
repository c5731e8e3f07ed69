# services/time_budget_service.py

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from core.exceptions import StoreError, ValidationError
from core.timeblocks import calculate_duration, check_overlap, summarize_by_category
from models.enums import TimeCategory
from services.base import BaseService
from shared.models import (
    TemplateCreate,
    TimeAllocation,
    TimeBlockCreate,
    TimeBlockPatch,
    TimeTemplate,
    TimeTemplateBlock,
)
from utils.datetime_utils import today_utc

logger = logging.getLogger(__name__)

# Время для блоков шаблона, у которых оно не задано
TEMPLATE_DEFAULT_START = "09:00"
TEMPLATE_DEFAULT_END = "10:00"


class TimeBudgetService(BaseService):
    """
    Планировщик дня

    Возможности:
    - Блоки времени на дату с проверкой пересечений
    - Сводка минут по категориям
    - Шаблоны дня: сохранение и загрузка на дату
    """

    entity = "time_allocations"

    # ===== БЛОКИ =====

    async def get_time_budgets(self, user_id: str, day: Optional[date] = None) -> List[TimeAllocation]:
        rows = await self.store.select(
            self.entity,
            {"user_id": user_id, "allocation_date": day or today_utc()},
            order_by="start_time"
        )
        return [TimeAllocation.model_validate(row) for row in rows]

    async def save_time_budget(self, user_id: str, data: TimeBlockCreate) -> TimeAllocation:
        day = data.allocation_date or today_utc()
        duration = calculate_duration(data.start_time, data.end_time)

        if data.project_id:
            await self._get_owned(data.project_id, user_id, entity="projects")

        existing = await self.get_time_budgets(user_id, day)
        if check_overlap(existing, data.start_time, data.end_time):
            raise ValidationError(
                f"Блок {data.start_time}-{data.end_time} пересекается с существующим", field="start_time"
            )

        try:
            row = await self.store.insert(self.entity, {
                "user_id": user_id,
                "project_id": data.project_id,
                "label": data.label,
                "category": data.category,
                "start_time": data.start_time,
                "end_time": data.end_time,
                "duration_minutes": duration,
                "allocation_date": day
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка сохранения блока времени для пользователя {user_id}: {e}")
            raise

        logger.info(f"🗓️ Блок {data.start_time}-{data.end_time} ({data.category.value}) на {day}")
        return TimeAllocation.model_validate(row)

    async def update_time_budget(self, allocation_id: str, user_id: str,
                                 patch: TimeBlockPatch) -> TimeAllocation:
        current = await self._get_owned(allocation_id, user_id)
        changes = patch.changes()
        if not changes:
            return TimeAllocation.model_validate(current)

        if changes.get("project_id"):
            await self._get_owned(changes["project_id"], user_id, entity="projects")

        if "start_time" in changes or "end_time" in changes:
            start = changes.get("start_time", current["start_time"])
            end = changes.get("end_time", current["end_time"])
            if start and end:
                changes["duration_minutes"] = calculate_duration(start, end)
                existing = await self.get_time_budgets(user_id, current["allocation_date"])
                if check_overlap(existing, start, end, exclude_id=allocation_id):
                    raise ValidationError(f"Блок {start}-{end} пересекается с существующим",
                                          field="start_time")

        row = await self.store.update(self.entity, allocation_id, changes)
        logger.info(f"📝 Блок времени {allocation_id} обновлен: {', '.join(changes)}")
        return TimeAllocation.model_validate(row)

    async def delete_time_budget(self, allocation_id: str, user_id: str) -> None:
        await self._get_owned(allocation_id, user_id)
        await self.store.delete(self.entity, allocation_id)
        logger.info(f"🗑️ Блок времени {allocation_id} удален")

    async def get_daily_summary(self, user_id: str, day: Optional[date] = None) -> List[Dict[str, Any]]:
        return summarize_by_category(await self.get_time_budgets(user_id, day))

    # ===== ШАБЛОНЫ =====

    async def save_as_template(self, user_id: str, data: TemplateCreate) -> TimeTemplate:
        allocations = await self.get_time_budgets(user_id, data.allocation_date)
        blocks = [
            TimeTemplateBlock(
                label=allocation.label or "",
                category=allocation.category or TimeCategory.OTHER,
                start_time=allocation.start_time or TEMPLATE_DEFAULT_START,
                end_time=allocation.end_time or TEMPLATE_DEFAULT_END,
                project_id=allocation.project_id
            ).model_dump(mode="json")
            for allocation in allocations
        ]

        row = await self.store.insert("time_templates", {"user_id": user_id, "name": data.name, "blocks": blocks})
        logger.info(f"💾 Шаблон дня {row['id']} ({len(blocks)} блоков): {data.name}")
        return TimeTemplate.model_validate(row)

    async def get_templates(self, user_id: str) -> List[TimeTemplate]:
        rows = await self.store.select("time_templates", {"user_id": user_id},
                                       order_by="created_at", descending=True)
        return [TimeTemplate.model_validate(row) for row in rows]

    async def load_template(self, template_id: str, user_id: str,
                            day: Optional[date] = None) -> List[TimeAllocation]:
        """Заменить блоки даты блоками шаблона одной транзакцией"""
        template = TimeTemplate.model_validate(
            await self._get_owned(template_id, user_id, entity="time_templates")
        )
        day = day or today_utc()

        try:
            async with self.store.transaction():
                removed = await self.store.delete_where(self.entity, {"user_id": user_id, "allocation_date": day})
                for block in template.blocks:
                    await self.store.insert(self.entity, {
                        "user_id": user_id,
                        "project_id": block.project_id,
                        "label": block.label or None,
                        "category": block.category,
                        "start_time": block.start_time,
                        "end_time": block.end_time,
                        "duration_minutes": calculate_duration(block.start_time, block.end_time),
                        "allocation_date": day
                    })
        except StoreError as e:
            logger.error(f"❌ Ошибка загрузки шаблона {template_id} на {day}: {e}")
            raise

        logger.info(f"📋 Шаблон {template_id} загружен на {day}: удалено {removed}, добавлено {len(template.blocks)}")
        return await self.get_time_budgets(user_id, day)

# services/reading_service.py

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.exceptions import StoreError
from models.enums import ReadingItemType, ReadingStatus
from services.base import BaseService
from shared.models import ReadingItem, ReadingItemCreate, ReadingItemPatch
from utils.datetime_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


class ReadingService(BaseService):
    """Список чтения: книги, статьи, курсы и прогресс по страницам"""

    entity = "reading_items"

    async def get_reading_items(self, user_id: str) -> List[ReadingItem]:
        rows = await self.store.select(self.entity, {"user_id": user_id},
                                       order_by="updated_at", descending=True)
        return [ReadingItem.model_validate(row) for row in rows]

    async def get_active_items(self, user_id: str) -> List[ReadingItem]:
        rows = await self.store.select(self.entity, {"user_id": user_id, "status": ReadingStatus.READING},
                                       order_by="updated_at", descending=True)
        return [ReadingItem.model_validate(row) for row in rows]

    async def add_item(self, user_id: str, data: ReadingItemCreate,
                       now: Optional[datetime] = None) -> ReadingItem:
        now = to_utc(now) if now else utc_now()
        values: Dict[str, Any] = {"user_id": user_id, **data.model_dump()}
        if data.status == ReadingStatus.READING:
            values["started_at"] = now
        elif data.status == ReadingStatus.COMPLETED:
            values["completed_at"] = now

        try:
            row = await self.store.insert(self.entity, values)
        except StoreError as e:
            logger.error(f"❌ Ошибка добавления в список чтения для пользователя {user_id}: {e}")
            raise

        logger.info(f"📚 Добавлено в список чтения {row['id']}: {data.title}")
        return ReadingItem.model_validate(row)

    async def update_item(self, item_id: str, user_id: str, patch: ReadingItemPatch,
                          now: Optional[datetime] = None) -> ReadingItem:
        current = await self._get_owned(item_id, user_id)
        changes = patch.changes()
        if not changes:
            return ReadingItem.model_validate(current)

        now = to_utc(now) if now else utc_now()
        status = changes.get("status")
        if status == ReadingStatus.READING and current["started_at"] is None:
            changes["started_at"] = now
        elif status == ReadingStatus.COMPLETED and current["status"] != ReadingStatus.COMPLETED.value:
            changes["completed_at"] = now

        row = await self.store.update(self.entity, item_id, changes)
        logger.info(f"📝 Элемент чтения {item_id} обновлен: {', '.join(changes)}")
        return ReadingItem.model_validate(row)

    async def update_progress(self, item_id: str, user_id: str, progress: int,
                              total: Optional[int] = None,
                              now: Optional[datetime] = None) -> ReadingItem:
        """Записать прогресс; при progress >= total элемент завершается"""
        current = await self._get_owned(item_id, user_id)

        changes: Dict[str, Any] = {"progress_pages": progress}
        if total:
            changes["total_pages"] = total

        if total and progress >= total and current["status"] != ReadingStatus.COMPLETED.value:
            changes["status"] = ReadingStatus.COMPLETED
            changes["completed_at"] = to_utc(now) if now else utc_now()
            logger.info(f"🎉 Элемент чтения {item_id} завершен")

        row = await self.store.update(self.entity, item_id, changes)
        return ReadingItem.model_validate(row)

    async def delete_item(self, item_id: str, user_id: str) -> None:
        await self._get_owned(item_id, user_id)
        await self.store.delete(self.entity, item_id)
        logger.info(f"🗑️ Элемент чтения {item_id} удален")

    async def get_reading_stats(self, user_id: str) -> Dict[str, int]:
        rows = await self.store.select(self.entity, {"user_id": user_id})
        completed = [row for row in rows if row["status"] == ReadingStatus.COMPLETED.value]

        return {
            "total_books": sum(1 for row in completed if row["item_type"] == ReadingItemType.BOOK.value),
            "total_articles": sum(1 for row in completed if row["item_type"] == ReadingItemType.ARTICLE.value),
            "currently_reading": sum(1 for row in rows if row["status"] == ReadingStatus.READING.value),
            "to_read": sum(1 for row in rows if row["status"] == ReadingStatus.TO_READ.value),
            "total_pages_read": sum(row["progress_pages"] or 0 for row in rows)
        }

# services/capture_service.py

import logging
from typing import List

from core.capture import classify
from core.exceptions import StoreError, ValidationError
from services.base import BaseService
from shared.models import Capture

logger = logging.getLogger(__name__)


class CaptureService(BaseService):
    """Входящие: быстрый захват текста с определением типа по префиксу"""

    entity = "captures"

    async def create_capture(self, user_id: str, raw: str) -> Capture:
        classified = classify(raw)
        if classified.is_empty:
            raise ValidationError("Текст захвата не может быть пустым", field="content")

        try:
            row = await self.store.insert(self.entity, {
                "user_id": user_id,
                "content": classified.clean_content,
                "capture_type": classified.stored_type,
                "processed": False
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка сохранения захвата для пользователя {user_id}: {e}")
            raise

        logger.info(f"📥 Захват {row['id']} ({classified.type.value}) для пользователя {user_id}")
        return Capture.model_validate(row)

    async def get_unprocessed(self, user_id: str) -> List[Capture]:
        """Необработанные записи, новые первыми"""
        rows = await self.store.select(
            self.entity,
            {"user_id": user_id, "processed": False},
            order_by="created_at",
            descending=True
        )
        return [Capture.model_validate(row) for row in rows]

    async def mark_processed(self, capture_id: str, user_id: str) -> Capture:
        await self._get_owned(capture_id, user_id)
        row = await self.store.update(self.entity, capture_id, {"processed": True})
        logger.info(f"✅ Захват {capture_id} обработан")
        return Capture.model_validate(row)

    async def delete_capture(self, capture_id: str, user_id: str) -> None:
        await self._get_owned(capture_id, user_id)
        await self.store.delete(self.entity, capture_id)
        logger.info(f"🗑️ Захват {capture_id} удален")

# services/vitality_service.py

import logging
from datetime import datetime
from typing import List, Optional

from core.exceptions import StoreError
from services.base import BaseService
from shared.models import VitalityCreate, VitalityLog
from utils.datetime_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


class VitalityService(BaseService):
    """Журнал самочувствия: энергия, настроение, сон"""

    entity = "vitality"

    async def log_vitality(self, user_id: str, data: VitalityCreate,
                           now: Optional[datetime] = None) -> VitalityLog:
        try:
            row = await self.store.insert(self.entity, {
                "user_id": user_id,
                **data.model_dump(),
                "logged_at": to_utc(now) if now else utc_now()
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка записи самочувствия для пользователя {user_id}: {e}")
            raise

        logger.info(
            f"💚 Самочувствие пользователя {user_id}: энергия {data.energy_level}, "
            f"настроение {data.mood_score}, сон {data.sleep_quality}"
        )
        return VitalityLog.model_validate(row)

    async def get_vitality_history(self, user_id: str, limit: int = 30) -> List[VitalityLog]:
        rows = await self.store.select(self.entity, {"user_id": user_id},
                                       order_by="logged_at", descending=True, limit=limit)
        return [VitalityLog.model_validate(row) for row in rows]

# services/settings_service.py

import logging

from core.exceptions import StoreError, ValidationError
from core.timeblocks import time_to_minutes
from services.base import BaseService
from shared.models import PreferencesPatch, UserPreferences

logger = logging.getLogger(__name__)


class SettingsService(BaseService):
    """Настройки пользователя: границы дня и длительности таймеров"""

    entity = "user_preferences"

    async def get_user_preferences(self, user_id: str) -> UserPreferences:
        """Настройки пользователя; при первом чтении создаются значения по умолчанию"""
        rows = await self.store.select(self.entity, {"user_id": user_id}, limit=1)
        if rows:
            return UserPreferences.model_validate(rows[0])

        try:
            row = await self.store.insert(self.entity, {"user_id": user_id})
        except StoreError as e:
            logger.error(f"❌ Ошибка создания настроек по умолчанию для {user_id}: {e}")
            raise

        logger.info(f"⚙️ Созданы настройки по умолчанию для пользователя {user_id}")
        return UserPreferences.model_validate(row)

    async def update_user_preferences(self, user_id: str, patch: PreferencesPatch) -> UserPreferences:
        current = await self.get_user_preferences(user_id)
        changes = patch.changes()
        if not changes:
            return current

        day_start_time = changes.get("day_start_time", current.day_start_time)
        day_end_time = changes.get("day_end_time", current.day_end_time)
        if time_to_minutes(day_end_time) <= time_to_minutes(day_start_time):
            raise ValidationError("Конец дня должен быть позже начала", field="day_end_time")

        row = await self.store.update(self.entity, current.id, changes)
        logger.info(f"⚙️ Настройки пользователя {user_id} обновлены: {', '.join(changes)}")
        return UserPreferences.model_validate(row)

# services/base.py

import logging
from typing import Any, Dict, Optional

from core.exceptions import NotFoundError
from database.store import RecordStore

logger = logging.getLogger(__name__)


class BaseService:
    """Общая основа сервисов: хранилище передается явно"""

    entity: str = ""

    def __init__(self, store: RecordStore):
        self.store = store

    async def _get_owned(self, record_id: str, user_id: str,
                         entity: Optional[str] = None) -> Dict[str, Any]:
        """Запись пользователя; чужая запись выглядит как отсутствующая"""
        entity = entity or self.entity
        row = await self.store.get(entity, record_id)
        if row["user_id"] != user_id:
            logger.warning(f"⚠️ Попытка доступа к чужой записи {entity} {record_id} (user {user_id})")
            raise NotFoundError(entity, record_id)
        return row

# database/migrations.py

import logging
from pathlib import Path

from sqlalchemy.engine import make_url

from database.store import SqlRecordStore
from database.tables import Base

logger = logging.getLogger(__name__)


def ensure_sqlite_directory(database_url: str) -> None:
    """Для файловой SQLite создать каталог базы"""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def create_schema(store: SqlRecordStore) -> None:
    """
    Создает недостающие таблицы. Существующие таблицы не изменяются.
    """
    await store.create_schema()


async def drop_schema(store: SqlRecordStore) -> None:
    """Удаляет все таблицы хранилища (только для разработки)"""
    async with store.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("🗑️ Схема хранилища удалена")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Record Store
Хранилище записей пользователя: абстрактный интерфейс и реализация на SQLAlchemy

Сервисы получают хранилище явно (через конструктор), глобального
клиента нет. Все ошибки SQLAlchemy превращаются в StoreError,
нарушения ограничений целостности - в ValidationError.

Версия: 1.0.0
Дата: 2026-10-17
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import date, datetime
from enum import Enum
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import delete as sql_delete
from sqlalchemy import event, select, text, update as sql_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.exceptions import NotFoundError, StoreError, ValidationError
from database.tables import TABLES, Base, HabitCompletionRow, HabitRow, new_id
from shared.models import Habit
from utils.datetime_utils import day_start, utc_day, utc_now

logger = logging.getLogger(__name__)

# Ожидаемое состояние привычки для условного обновления: (streak_count, last_completed_at)
ExpectedStreak = Tuple[int, Optional[datetime]]

# Сессия открытой транзакции: (id хранилища, сессия)
_active_session: ContextVar[Optional[Tuple[int, AsyncSession]]] = ContextVar(
    "record_store_session", default=None
)


# ===== ИНТЕРФЕЙС =====

class RecordStore(ABC):
    """Долговременное хранилище записей, принадлежащих пользователям"""

    # --- Привычки ---

    @abstractmethod
    async def read_habit(self, habit_id: str) -> Habit:
        """Прочитать привычку; NotFoundError если ее нет"""

    @abstractmethod
    async def write_habit_completion(self, habit_id: str, user_id: str,
                                     completed_at: datetime, notes: Optional[str] = None) -> str:
        """Добавить запись в журнал выполнений, вернуть ее id"""

    @abstractmethod
    async def update_habit_streak(self, habit_id: str, new_streak: int, last_completed_at: datetime,
                                  expected: Optional[ExpectedStreak] = None) -> bool:
        """Записать серию; с expected - только если строка не менялась"""

    @abstractmethod
    async def list_completions(self, habit_id: str, since_date: date) -> Set[date]:
        """Дни UTC, в которые привычка выполнялась начиная с since_date"""

    @abstractmethod
    async def list_habits(self, user_id: str) -> List[Habit]:
        """Все привычки пользователя"""

    @abstractmethod
    def transaction(self):
        """Асинхронный контекст: все операции внутри фиксируются вместе"""

    # --- Общие операции над сущностями ---

    @abstractmethod
    async def insert(self, entity: str, values: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get(self, entity: str, record_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update(self, entity: str, record_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def delete(self, entity: str, record_id: str) -> None:
        pass

    @abstractmethod
    async def select(self, entity: str, where: Optional[Dict[str, Any]] = None, *,
                     gte: Optional[Dict[str, Any]] = None,
                     lte: Optional[Dict[str, Any]] = None,
                     not_null: Iterable[str] = (),
                     order_by: Optional[str] = None,
                     descending: bool = False,
                     limit: Optional[int] = None) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def delete_where(self, entity: str, where: Dict[str, Any]) -> int:
        pass

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass


# ===== SQLALCHEMY =====

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _plain(value: Any) -> Any:
    """Enum -> значение колонки"""
    if isinstance(value, Enum):
        return value.value
    return value


class SqlRecordStore(RecordStore):
    """
    Хранилище на SQLAlchemy async ORM

    Возможности:
    - SQLite (aiosqlite) по умолчанию, любой async URL SQLAlchemy в продакшене
    - Транзакции через contextvar: вложенные вызовы используют одну сессию
    - Условное обновление серии привычки (compare-and-swap)
    """

    def __init__(self, database_url: str, echo: bool = False, pool_size: Optional[int] = None):
        self.database_url = database_url

        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if pool_size and not database_url.startswith("sqlite"):
            engine_kwargs["pool_size"] = pool_size

        self.engine = create_async_engine(database_url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(self.engine, expire_on_commit=False)
        logger.info(f"🗄️ RecordStore: {self.engine.url.render_as_string(hide_password=True)}")

    # ----- сессии и транзакции -----

    def _current_session(self) -> Optional[AsyncSession]:
        active = _active_session.get()
        if active is not None and active[0] == id(self):
            return active[1]
        return None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        current = self._current_session()
        if current is not None:
            yield current
            return

        async with self._session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except IntegrityError as e:
                logger.warning(f"⚠️ Нарушение ограничения целостности: {e.orig}")
                raise ValidationError(f"Нарушение ограничения целостности: {e.orig}") from e
            except SQLAlchemyError as e:
                logger.error(f"❌ Ошибка хранилища: {e}")
                raise StoreError(str(e)) from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlRecordStore"]:
        if self._current_session() is not None:
            yield self
            return

        async with self._session() as session:
            token = _active_session.set((id(self), session))
            try:
                yield self
            finally:
                _active_session.reset(token)

    # ----- служебные -----

    @staticmethod
    def _table(entity: str):
        try:
            return TABLES[entity]
        except KeyError:
            raise ValidationError(f"Неизвестная сущность: {entity}")

    @staticmethod
    def _column(table, name: str):
        column = table.__table__.columns.get(name)
        if column is None:
            raise ValidationError(f"Неизвестное поле {table.__tablename__}.{name}", field=name)
        return getattr(table, name)

    def _apply_filters(self, stmt, table, where, gte, lte, not_null):
        for name, value in (where or {}).items():
            column = self._column(table, name)
            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_([_plain(v) for v in value]))
            else:
                stmt = stmt.where(column == _plain(value))

        for name, value in (gte or {}).items():
            stmt = stmt.where(self._column(table, name) >= _plain(value))

        for name, value in (lte or {}).items():
            stmt = stmt.where(self._column(table, name) <= _plain(value))

        for name in not_null:
            stmt = stmt.where(self._column(table, name).is_not(None))

        return stmt

    # ----- общие операции -----

    async def insert(self, entity: str, values: Dict[str, Any]) -> Dict[str, Any]:
        table = self._table(entity)
        for name in values:
            self._column(table, name)

        row = table(**{name: _plain(value) for name, value in values.items()})
        if row.id is None:
            row.id = new_id()

        async with self._session() as session:
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return row.to_dict()

    async def get(self, entity: str, record_id: str) -> Dict[str, Any]:
        table = self._table(entity)
        async with self._session() as session:
            row = await session.get(table, record_id)
            if row is None:
                raise NotFoundError(entity, record_id)
            return row.to_dict()

    async def update(self, entity: str, record_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        table = self._table(entity)
        for name in values:
            if name in ("id", "user_id"):
                raise ValidationError(f"Поле {name} нельзя изменить", field=name)
            self._column(table, name)

        async with self._session() as session:
            row = await session.get(table, record_id)
            if row is None:
                raise NotFoundError(entity, record_id)

            for name, value in values.items():
                setattr(row, name, _plain(value))
            if "updated_at" in table.__table__.columns and "updated_at" not in values:
                row.updated_at = utc_now()

            await session.flush()
            return row.to_dict()

    async def delete(self, entity: str, record_id: str) -> None:
        table = self._table(entity)
        async with self._session() as session:
            row = await session.get(table, record_id)
            if row is None:
                raise NotFoundError(entity, record_id)
            await session.delete(row)

    async def select(self, entity: str, where: Optional[Dict[str, Any]] = None, *,
                     gte: Optional[Dict[str, Any]] = None,
                     lte: Optional[Dict[str, Any]] = None,
                     not_null: Iterable[str] = (),
                     order_by: Optional[str] = None,
                     descending: bool = False,
                     limit: Optional[int] = None) -> List[Dict[str, Any]]:
        table = self._table(entity)
        stmt = self._apply_filters(select(table), table, where, gte, lte, not_null)

        if order_by:
            column = self._column(table, order_by)
            stmt = stmt.order_by(column.desc().nulls_last() if descending else column.asc().nulls_last())
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [row.to_dict() for row in rows]

    async def delete_where(self, entity: str, where: Dict[str, Any]) -> int:
        if not where:
            raise ValidationError("Удаление без условий запрещено")

        table = self._table(entity)
        stmt = self._apply_filters(sql_delete(table), table, where, None, None, ())

        async with self._session() as session:
            result = await session.execute(stmt.execution_options(synchronize_session=False))
            return result.rowcount or 0

    # ----- привычки -----

    async def read_habit(self, habit_id: str) -> Habit:
        async with self._session() as session:
            row = await session.get(HabitRow, habit_id, populate_existing=True)
            if row is None:
                raise NotFoundError("habit", habit_id)
            return Habit.model_validate(row)

    async def write_habit_completion(self, habit_id: str, user_id: str,
                                     completed_at: datetime, notes: Optional[str] = None) -> str:
        async with self._session() as session:
            if await session.get(HabitRow, habit_id) is None:
                raise NotFoundError("habit", habit_id)

            row = HabitCompletionRow(
                id=new_id(),
                habit_id=habit_id,
                user_id=user_id,
                completed_at=completed_at,
                notes=notes
            )
            session.add(row)
            await session.flush()
            return row.id

    async def update_habit_streak(self, habit_id: str, new_streak: int, last_completed_at: datetime,
                                  expected: Optional[ExpectedStreak] = None) -> bool:
        if new_streak < 0:
            raise ValidationError("streak_count не может быть отрицательным", field="streak_count")

        stmt = (
            sql_update(HabitRow)
            .where(HabitRow.id == habit_id)
            .values(streak_count=new_streak, last_completed_at=last_completed_at, updated_at=utc_now())
        )
        if expected is not None:
            expected_streak, expected_last = expected
            stmt = stmt.where(HabitRow.streak_count == expected_streak)
            if expected_last is None:
                stmt = stmt.where(HabitRow.last_completed_at.is_(None))
            else:
                stmt = stmt.where(HabitRow.last_completed_at == expected_last)

        async with self._session() as session:
            result = await session.execute(stmt.execution_options(synchronize_session=False))
            updated = result.rowcount

        if updated == 0:
            if expected is None:
                raise NotFoundError("habit", habit_id)
            return False
        return True

    async def list_completions(self, habit_id: str, since_date: date) -> Set[date]:
        stmt = (
            select(HabitCompletionRow.completed_at)
            .where(HabitCompletionRow.habit_id == habit_id)
            .where(HabitCompletionRow.completed_at >= day_start(since_date))
        )
        async with self._session() as session:
            values = (await session.execute(stmt)).scalars().all()
        return {utc_day(value) for value in values}

    async def list_habits(self, user_id: str) -> List[Habit]:
        stmt = select(HabitRow).where(HabitRow.user_id == user_id).order_by(HabitRow.created_at.asc())
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [Habit.model_validate(row) for row in rows]

    # ----- жизненный цикл -----

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ Схема хранилища создана")

    async def ping(self) -> bool:
        try:
            async with self._session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except StoreError:
            return False

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("🧹 RecordStore закрыт")

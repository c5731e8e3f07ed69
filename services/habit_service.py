# services/habit_service.py

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import List, Optional

from core import habits as engine
from core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from database.store import RecordStore
from models.habit import CompletionResult, HabitHistory, HabitStats
from services.base import BaseService
from shared.models import Habit, HabitCreate, HabitPatch, HabitWithStatus
from utils.datetime_utils import day_start, to_utc, today_utc, utc_day, utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_HISTORY_MAX_DAYS = 365


class HabitService(BaseService):
    """
    Сервис привычек пользователя

    Возможности:
    - CRUD привычек
    - Отметка выполнения: журнал + серия в одной транзакции,
      серия пишется условно (compare-and-swap) с повтором
    - Недельное окно выполнения и сводная статистика
    """

    entity = "habits"

    def __init__(self, store: RecordStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 history_max_days: int = DEFAULT_HISTORY_MAX_DAYS):
        super().__init__(store)
        if max_attempts < 1:
            raise ValueError("max_attempts должен быть >= 1")
        self.max_attempts = max_attempts
        self.history_max_days = history_max_days

    # ===== CRUD =====

    async def get_habits(self, user_id: str) -> List[Habit]:
        return await self.store.list_habits(user_id)

    async def get_habit(self, habit_id: str, user_id: str) -> Habit:
        habit = await self.store.read_habit(habit_id)
        if habit.user_id != user_id:
            raise NotFoundError("habit", habit_id)
        return habit

    async def create_habit(self, user_id: str, data: HabitCreate) -> Habit:
        try:
            row = await self.store.insert(self.entity, {"user_id": user_id, **data.model_dump()})
        except StoreError as e:
            logger.error(f"❌ Ошибка создания привычки для пользователя {user_id}: {e}")
            raise

        logger.info(f"✅ Создана привычка {row['id']} для пользователя {user_id}: {data.name}")
        return Habit.model_validate(row)

    async def update_habit(self, habit_id: str, user_id: str, patch: HabitPatch) -> Habit:
        current = await self._get_owned(habit_id, user_id)
        changes = patch.changes()
        if not changes:
            return Habit.model_validate(current)

        row = await self.store.update(self.entity, habit_id, changes)
        logger.info(f"📝 Привычка {habit_id} обновлена: {', '.join(changes)}")
        return Habit.model_validate(row)

    async def delete_habit(self, habit_id: str, user_id: str) -> None:
        await self._get_owned(habit_id, user_id)
        await self.store.delete(self.entity, habit_id)
        logger.info(f"🗑️ Привычка {habit_id} удалена")

    # ===== ВЫПОЛНЕНИЕ =====

    async def complete_habit(self, habit_id: str, user_id: str, notes: Optional[str] = None,
                             now: Optional[datetime] = None) -> CompletionResult:
        """Отметить привычку выполненной.

        Чтение, расчет серии, условная запись серии и запись в журнал идут
        одной транзакцией. Если условная запись не прошла (строку изменили
        параллельно), привычка перечитывается и серия пересчитывается,
        не более max_attempts раз. Повторная отметка в тот же день UTC
        не меняет серию и не пишет журнал.
        """
        now = to_utc(now) if now else utc_now()

        for attempt in range(1, self.max_attempts + 1):
            try:
                async with self.store.transaction():
                    habit = await self.store.read_habit(habit_id)
                    if habit.user_id != user_id:
                        raise NotFoundError("habit", habit_id)

                    update = engine.complete_habit(habit, now)
                    if update.already_completed:
                        logger.info(f"ℹ️ Привычка {habit_id} уже отмечена сегодня, серия {update.new_streak}")
                        return CompletionResult(habit_id, update.new_streak, None, attempt)

                    swapped = await self.store.update_habit_streak(
                        habit_id,
                        update.new_streak,
                        now,
                        expected=(habit.streak_count, habit.last_completed_at)
                    )
                    if not swapped:
                        logger.warning(
                            f"⚠️ Привычка {habit_id} изменена параллельно, "
                            f"попытка {attempt}/{self.max_attempts}"
                        )
                        continue

                    completion_id = await self.store.write_habit_completion(habit_id, user_id, now, notes)

            except StoreError as e:
                logger.error(f"❌ Ошибка отметки привычки {habit_id}: {e}")
                raise

            logger.info(f"🔥 Привычка {habit_id} выполнена, серия {update.new_streak}")
            return CompletionResult(habit_id, update.new_streak, completion_id, attempt)

        logger.error(f"❌ Привычка {habit_id}: серия не записана за {self.max_attempts} попыток")
        raise ConflictError(
            f"Привычка {habit_id} изменялась параллельно, повторите попытку"
        )

    # ===== ПРЕДСТАВЛЕНИЯ =====

    async def get_habits_with_status(self, user_id: str,
                                     today: Optional[date] = None) -> List[HabitWithStatus]:
        """Привычки с отметкой за сегодня и окном последних 7 дней"""
        today = today or today_utc()
        since = today - timedelta(days=engine.WEEK_WINDOW_DAYS - 1)

        habits = await self.store.list_habits(user_id)
        if not habits:
            return []

        # Журнал за неделю по всем привычкам одним запросом
        rows = await self.store.select(
            "habit_completions",
            {"habit_id": [habit.id for habit in habits]},
            gte={"completed_at": day_start(since)}
        )
        days_by_habit = defaultdict(set)
        for row in rows:
            days_by_habit[row["habit_id"]].add(utc_day(row["completed_at"]))

        return [
            HabitWithStatus(
                **habit.model_dump(),
                completed_today=engine.is_completed_today(habit, today),
                weekly_completions=engine.weekly_completions(habit.id, days_by_habit[habit.id], today)
            )
            for habit in habits
        ]

    async def get_habit_stats(self, user_id: str, today: Optional[date] = None) -> HabitStats:
        habits = await self.store.list_habits(user_id)
        return engine.aggregate_stats(habits, today or today_utc())

    async def get_completion_history(self, habit_id: str, user_id: str, days: int = 7,
                                     today: Optional[date] = None) -> HabitHistory:
        if not isinstance(days, bool) and isinstance(days, int) and days > self.history_max_days:
            raise ValidationError(
                f"days не может превышать {self.history_max_days}", field='days'
            )

        today = today or today_utc()
        # Проверка days до обращения к хранилищу
        engine.completion_history(habit_id, days, (), today)

        await self.get_habit(habit_id, user_id)
        completions = await self.store.list_completions(habit_id, today - timedelta(days=days - 1))
        return HabitHistory(
            habit_id=habit_id,
            days=days,
            completions=engine.completion_history(habit_id, days, completions, today)
        )


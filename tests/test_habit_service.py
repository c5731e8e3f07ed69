"""Tests for HabitService: completion transaction, retries, history."""

from datetime import timedelta

import pytest

from core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from database.store import SqlRecordStore
from services.habit_service import HabitService
from shared.models import HabitCreate, HabitPatch

from tests.conftest import NOW, OTHER_USER_ID, TODAY, USER_ID, sqlite_url


class ContendedStore(SqlRecordStore):
    """Store whose conditional streak writes lose to a concurrent writer.

    For the first `misses` calls another writer is simulated: the habit row
    is moved to (`rival_streak`, yesterday) and the conditional write fails.
    """

    def __init__(self, *args, misses=0, rival_streak=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.misses = misses
        self.rival_streak = rival_streak
        self.calls = 0

    async def update_habit_streak(self, habit_id, new_streak, last_completed_at, expected=None):
        self.calls += 1
        if expected is not None and self.misses > 0:
            self.misses -= 1
            if self.rival_streak is not None:
                await super().update_habit_streak(
                    habit_id, self.rival_streak, last_completed_at - timedelta(days=1)
                )
            return False
        return await super().update_habit_streak(habit_id, new_streak, last_completed_at, expected)


@pytest.fixture
async def contended_store(tmp_path):
    store = ContendedStore(sqlite_url(tmp_path / "contended.db"))
    await store.create_schema()
    yield store
    await store.close()


class FailingLogStore(SqlRecordStore):
    """Store whose completion log write fails after the streak is updated."""

    async def write_habit_completion(self, habit_id, user_id, completed_at, notes=None):
        raise StoreError("disk I/O error")


@pytest.fixture
async def failing_log_store(tmp_path):
    store = FailingLogStore(sqlite_url(tmp_path / "failing.db"))
    await store.create_schema()
    yield store
    await store.close()


async def completions_count(store, habit_id):
    return len(await store.select("habit_completions", {"habit_id": habit_id}))


class TestHabitCrud:
    """Tests for habit CRUD."""

    async def test_create_and_list(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="  Meditate "))
        assert habit.name == "Meditate"
        assert habit.streak_count == 0
        assert [h.id for h in await services.habits.get_habits(USER_ID)] == [habit.id]
        assert await services.habits.get_habits(OTHER_USER_ID) == []

    async def test_update(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Run"))
        updated = await services.habits.update_habit(habit.id, USER_ID, HabitPatch(description="5k"))
        assert updated.description == "5k"
        assert updated.name == "Run"

    async def test_other_user_sees_not_found(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Run"))
        with pytest.raises(NotFoundError):
            await services.habits.get_habit(habit.id, OTHER_USER_ID)
        with pytest.raises(NotFoundError):
            await services.habits.delete_habit(habit.id, OTHER_USER_ID)
        with pytest.raises(NotFoundError):
            await services.habits.complete_habit(habit.id, OTHER_USER_ID, now=NOW)

    async def test_delete_removes_completions(self, services, store):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Run"))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW)
        await services.habits.delete_habit(habit.id, USER_ID)
        with pytest.raises(NotFoundError):
            await services.habits.get_habit(habit.id, USER_ID)
        assert await completions_count(store, habit.id) == 0


class TestCompleteHabit:
    """Tests for HabitService.complete_habit()."""

    async def test_first_completion(self, services, store):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))

        result = await services.habits.complete_habit(habit.id, USER_ID, notes="20 pages", now=NOW)

        assert result.new_streak == 1
        assert result.completion_id
        assert result.attempts == 1
        stored = await services.habits.get_habit(habit.id, USER_ID)
        assert stored.streak_count == 1
        assert stored.last_completed_at == NOW
        log = await store.get("habit_completions", result.completion_id)
        assert log["notes"] == "20 pages"

    async def test_consecutive_days_extend_streak(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        for offset in range(3):
            result = await services.habits.complete_habit(habit.id, USER_ID, now=NOW + timedelta(days=offset))
        assert result.new_streak == 3

    async def test_same_day_is_idempotent(self, services, store):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW)

        again = await services.habits.complete_habit(habit.id, USER_ID, now=NOW + timedelta(hours=2))

        assert again.new_streak == 1
        assert again.completion_id is None
        assert await completions_count(store, habit.id) == 1

    async def test_gap_resets_streak(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW - timedelta(days=4))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW - timedelta(days=3))
        result = await services.habits.complete_habit(habit.id, USER_ID, now=NOW)
        assert result.new_streak == 1

    async def test_missing_habit(self, services):
        with pytest.raises(NotFoundError):
            await services.habits.complete_habit("missing", USER_ID, now=NOW)

    async def test_retry_recomputes_from_fresh_state(self, contended_store):
        service = HabitService(contended_store, max_attempts=3)
        habit = await service.create_habit(USER_ID, HabitCreate(name="Read"))
        contended_store.misses = 1
        contended_store.rival_streak = 7

        result = await service.complete_habit(habit.id, USER_ID, now=NOW)

        # Соперник оставил серию 7 со вчерашней отметкой: повтор продлевает ее
        assert result.attempts == 2
        assert result.new_streak == 8
        assert (await service.get_habit(habit.id, USER_ID)).streak_count == 8
        assert await completions_count(contended_store, habit.id) == 1

    async def test_conflict_after_max_attempts(self, contended_store):
        service = HabitService(contended_store, max_attempts=2)
        habit = await service.create_habit(USER_ID, HabitCreate(name="Read"))
        contended_store.misses = 5

        with pytest.raises(ConflictError):
            await service.complete_habit(habit.id, USER_ID, now=NOW)

        assert contended_store.calls == 2
        stored = await service.get_habit(habit.id, USER_ID)
        assert stored.streak_count == 0
        assert await completions_count(contended_store, habit.id) == 0

    async def test_log_failure_rolls_back_streak(self, failing_log_store):
        service = HabitService(failing_log_store)
        habit = await service.create_habit(USER_ID, HabitCreate(name="Read"))

        with pytest.raises(StoreError):
            await service.complete_habit(habit.id, USER_ID, now=NOW)

        stored = await service.get_habit(habit.id, USER_ID)
        assert stored.streak_count == 0
        assert stored.last_completed_at is None
        assert await completions_count(failing_log_store, habit.id) == 0

    def test_max_attempts_must_be_positive(self, store):
        with pytest.raises(ValueError):
            HabitService(store, max_attempts=0)


class TestHabitViews:
    """Tests for status, stats and history views."""

    async def test_habits_with_status(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW - timedelta(days=2))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW)

        [status] = await services.habits.get_habits_with_status(USER_ID, TODAY)

        assert status.completed_today
        assert status.weekly_completions == [True, False, True, False, False, False, False]

    async def test_status_reads_completions_in_one_query(self, services, store, monkeypatch):
        read = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        run = await services.habits.create_habit(USER_ID, HabitCreate(name="Run"))
        # Вне окна недели
        await services.habits.complete_habit(run.id, USER_ID, now=NOW - timedelta(days=9))
        await services.habits.complete_habit(run.id, USER_ID, now=NOW - timedelta(days=1))
        await services.habits.complete_habit(read.id, USER_ID, now=NOW)

        async def per_habit_query(*args, **kwargs):
            raise AssertionError("completions must be read for all habits at once")

        monkeypatch.setattr(store, "list_completions", per_habit_query)

        statuses = {s.name: s for s in await services.habits.get_habits_with_status(USER_ID, TODAY)}

        assert statuses["Read"].weekly_completions == [True] + [False] * 6
        assert statuses["Run"].weekly_completions == [False, True] + [False] * 5
        assert statuses["Read"].completed_today
        assert not statuses["Run"].completed_today

    async def test_status_without_habits(self, services):
        assert await services.habits.get_habits_with_status(USER_ID, TODAY) == []

    async def test_stats(self, services):
        first = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        await services.habits.create_habit(USER_ID, HabitCreate(name="Run"))
        await services.habits.complete_habit(first.id, USER_ID, now=NOW - timedelta(days=1))
        await services.habits.complete_habit(first.id, USER_ID, now=NOW)

        stats = await services.habits.get_habit_stats(USER_ID, TODAY)

        assert stats.total_habits == 2
        assert stats.total_streak == 2
        assert stats.longest_streak == 2
        assert stats.completed_today == 1
        assert stats.completion_rate_today == 50

    async def test_completion_history(self, services):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        await services.habits.complete_habit(habit.id, USER_ID, now=NOW - timedelta(days=1))

        history = await services.habits.get_completion_history(habit.id, USER_ID, days=3, today=TODAY)

        assert history.days == 3
        assert history.completions == [False, True, False]

    @pytest.mark.parametrize("days", [0, 366])
    async def test_history_days_bounds(self, services, days):
        habit = await services.habits.create_habit(USER_ID, HabitCreate(name="Read"))
        with pytest.raises(ValidationError):
            await services.habits.get_completion_history(habit.id, USER_ID, days=days, today=TODAY)

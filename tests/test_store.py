"""Tests for the SQLAlchemy record store."""

from datetime import timedelta

import pytest

from core.exceptions import NotFoundError, ValidationError
from database.migrations import ensure_sqlite_directory

from tests.conftest import NOW, OTHER_USER_ID, TODAY, USER_ID


async def make_habit(store, user_id=USER_ID, **values):
    return await store.insert("habits", {"user_id": user_id, "name": "Read", **values})


class TestGenericOperations:
    """Tests for insert/get/update/delete/select."""

    async def test_insert_assigns_id_and_defaults(self, store):
        row = await store.insert("captures", {"user_id": USER_ID, "content": "idea"})
        assert row["id"]
        assert row["processed"] is False
        assert row["created_at"].tzinfo is not None

    async def test_get_missing_raises(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await store.get("captures", "missing")
        assert exc_info.value.entity == "captures"

    async def test_update_sets_updated_at(self, store):
        row = await make_habit(store)
        updated = await store.update("habits", row["id"], {"name": "Write"})
        assert updated["name"] == "Write"
        assert updated["updated_at"] >= row["updated_at"]

    async def test_update_cannot_change_owner(self, store):
        row = await make_habit(store)
        with pytest.raises(ValidationError):
            await store.update("habits", row["id"], {"user_id": OTHER_USER_ID})

    async def test_unknown_entity_and_field(self, store):
        with pytest.raises(ValidationError):
            await store.select("nope")
        with pytest.raises(ValidationError) as exc_info:
            await store.insert("habits", {"user_id": USER_ID, "name": "x", "colour": "red"})
        assert exc_info.value.field == "colour"

    async def test_delete(self, store):
        row = await make_habit(store)
        await store.delete("habits", row["id"])
        with pytest.raises(NotFoundError):
            await store.delete("habits", row["id"])

    async def test_select_filters_and_ordering(self, store):
        for minutes, day in ((30, 3), (45, 1), (20, 0)):
            await store.insert("sessions", {
                "user_id": USER_ID,
                "duration_minutes": minutes,
                "started_at": NOW - timedelta(days=day),
            })
        await store.insert("sessions", {"user_id": OTHER_USER_ID, "duration_minutes": 99, "started_at": NOW})

        rows = await store.select("sessions", {"user_id": USER_ID},
                                  gte={"started_at": NOW - timedelta(days=2)},
                                  order_by="started_at", descending=True)
        assert [row["duration_minutes"] for row in rows] == [20, 45]

        limited = await store.select("sessions", {"user_id": USER_ID}, order_by="started_at", limit=1)
        assert limited[0]["duration_minutes"] == 30

    async def test_select_in_list_and_not_null(self, store):
        await store.insert("sessions", {"user_id": USER_ID, "duration_minutes": 10,
                                        "started_at": NOW, "flow_state": 4})
        await store.insert("sessions", {"user_id": USER_ID, "duration_minutes": 20, "started_at": NOW})

        rows = await store.select("sessions", {"duration_minutes": [10, 20, 30]}, not_null=("flow_state",))
        assert [row["duration_minutes"] for row in rows] == [10]

    async def test_delete_where_requires_conditions(self, store):
        with pytest.raises(ValidationError):
            await store.delete_where("captures", {})

    async def test_foreign_key_violation_is_validation_error(self, store):
        with pytest.raises(ValidationError):
            await store.insert("tasks", {"user_id": USER_ID, "title": "x", "project_id": "missing"})


class TestTransactions:
    """Tests for store.transaction()."""

    async def test_commit(self, store):
        async with store.transaction():
            await store.insert("captures", {"user_id": USER_ID, "content": "a"})
            await store.insert("captures", {"user_id": USER_ID, "content": "b"})
        assert len(await store.select("captures", {"user_id": USER_ID})) == 2

    async def test_rollback_on_error(self, store):
        with pytest.raises(ValidationError):
            async with store.transaction():
                await store.insert("captures", {"user_id": USER_ID, "content": "a"})
                raise ValidationError("boom")
        assert await store.select("captures", {"user_id": USER_ID}) == []

    async def test_nested_transaction_shares_session(self, store):
        with pytest.raises(ValidationError):
            async with store.transaction():
                async with store.transaction():
                    await store.insert("captures", {"user_id": USER_ID, "content": "inner"})
                raise ValidationError("outer fails")
        assert await store.select("captures", {"user_id": USER_ID}) == []


class TestHabitOperations:
    """Tests for habit-specific store operations."""

    async def test_read_habit(self, store):
        row = await make_habit(store)
        habit = await store.read_habit(row["id"])
        assert habit.id == row["id"]
        assert habit.streak_count == 0
        assert habit.last_completed_at is None

    async def test_read_missing_habit(self, store):
        with pytest.raises(NotFoundError):
            await store.read_habit("missing")

    async def test_conditional_streak_update(self, store):
        row = await make_habit(store)

        assert await store.update_habit_streak(row["id"], 1, NOW, expected=(0, None))
        habit = await store.read_habit(row["id"])
        assert habit.streak_count == 1
        assert habit.last_completed_at == NOW

        # Состояние уже изменилось: условие не выполняется
        assert not await store.update_habit_streak(row["id"], 5, NOW, expected=(0, None))
        assert (await store.read_habit(row["id"])).streak_count == 1

        assert await store.update_habit_streak(row["id"], 2, NOW + timedelta(days=1), expected=(1, NOW))

    async def test_unconditional_update_of_missing_habit(self, store):
        with pytest.raises(NotFoundError):
            await store.update_habit_streak("missing", 1, NOW)

    async def test_negative_streak_rejected(self, store):
        row = await make_habit(store)
        with pytest.raises(ValidationError):
            await store.update_habit_streak(row["id"], -1, NOW)

    async def test_completions_by_day(self, store):
        row = await make_habit(store)
        for offset in (0, 2, 10):
            await store.write_habit_completion(row["id"], USER_ID, NOW - timedelta(days=offset))
        await store.write_habit_completion(row["id"], USER_ID, NOW - timedelta(hours=1))

        days = await store.list_completions(row["id"], TODAY - timedelta(days=6))
        assert days == {TODAY, TODAY - timedelta(days=2)}

    async def test_completion_for_missing_habit(self, store):
        with pytest.raises(NotFoundError):
            await store.write_habit_completion("missing", USER_ID, NOW)

    async def test_list_habits_is_per_user(self, store):
        await make_habit(store, name="A")
        await make_habit(store, name="B")
        await make_habit(store, user_id=OTHER_USER_ID, name="C")
        assert [habit.name for habit in await store.list_habits(USER_ID)] == ["A", "B"]

    async def test_ping(self, store):
        assert await store.ping()


class TestEnsureSqliteDirectory:
    """Tests for ensure_sqlite_directory()."""

    def test_creates_parent(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "cockpit.db"
        ensure_sqlite_directory(f"sqlite+aiosqlite:///{target}")
        assert target.parent.is_dir()

    def test_ignores_memory_and_other_backends(self, tmp_path):
        ensure_sqlite_directory("sqlite+aiosqlite:///:memory:")
        ensure_sqlite_directory("postgresql+asyncpg://user:pw@localhost/cockpit")

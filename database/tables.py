# database/tables.py

"""
Схема хранилища Life Cockpit на SQLAlchemy ORM.
"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from utils.datetime_utils import to_utc, utc_now


class UTCDateTime(TypeDecorator):
    """Хранит naive UTC, отдает aware UTC: SQLite теряет часовой пояс"""
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return to_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return to_utc(value)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    def to_dict(self) -> Dict[str, Any]:
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}


class UserOwned:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), index=True)


class ProjectRow(UserOwned, Base):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(7), default="#4a90e2")
    status: Mapped[str] = mapped_column(String(20), default="active")
    health_score: Mapped[int] = mapped_column(Integer, default=50)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class TaskRow(UserOwned, Base):
    __tablename__ = "tasks"

    project_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="todo")
    priority: Mapped[str] = mapped_column(String(20), default="medium")
    due_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class SessionRow(UserOwned, Base):
    __tablename__ = "sessions"

    project_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="SET NULL"), index=True
    )
    session_type: Mapped[str] = mapped_column(String(20), default="pomodoro")
    duration_minutes: Mapped[int] = mapped_column(Integer)
    started_at: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
    ended_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    flow_state: Mapped[Optional[int]] = mapped_column(Integer)
    distraction_level: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class HabitRow(UserOwned, Base):
    __tablename__ = "habits"

    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text)
    frequency: Mapped[str] = mapped_column(String(20), default="daily")
    streak_count: Mapped[int] = mapped_column(Integer, default=0)
    last_completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class HabitCompletionRow(UserOwned, Base):
    __tablename__ = "habit_completions"
    __table_args__ = (
        Index("idx_habit_completions_habit_date", "habit_id", "completed_at"),
    )

    habit_id: Mapped[str] = mapped_column(String(36), ForeignKey("habits.id", ondelete="CASCADE"))
    completed_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class GoalRow(UserOwned, Base):
    __tablename__ = "goals"

    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[Optional[str]] = mapped_column(Text)
    goal_type: Mapped[str] = mapped_column(String(20), default="weekly")
    target_value: Mapped[Optional[float]] = mapped_column(Float)
    current_value: Mapped[float] = mapped_column(Float, default=0)
    unit: Mapped[Optional[str]] = mapped_column(String(50))
    deadline: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class ReadingItemRow(UserOwned, Base):
    __tablename__ = "reading_items"

    title: Mapped[str] = mapped_column(String(300))
    author: Mapped[Optional[str]] = mapped_column(String(200))
    item_type: Mapped[str] = mapped_column(String(20), default="book")
    status: Mapped[str] = mapped_column(String(20), default="reading")
    progress_pages: Mapped[int] = mapped_column(Integer, default=0)
    total_pages: Mapped[Optional[int]] = mapped_column(Integer)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    rating: Mapped[Optional[int]] = mapped_column(Integer)
    link: Mapped[Optional[str]] = mapped_column(Text)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    started_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class CaptureRow(UserOwned, Base):
    __tablename__ = "captures"

    content: Mapped[str] = mapped_column(Text)
    capture_type: Mapped[Optional[str]] = mapped_column(String(20))
    processed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class VitalityRow(UserOwned, Base):
    __tablename__ = "vitality"

    energy_level: Mapped[int] = mapped_column(Integer)
    mood_score: Mapped[int] = mapped_column(Integer)
    sleep_quality: Mapped[int] = mapped_column(Integer)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    logged_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, index=True)


class TimeAllocationRow(UserOwned, Base):
    __tablename__ = "time_allocations"

    project_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="SET NULL")
    )
    label: Mapped[Optional[str]] = mapped_column(String(200))
    category: Mapped[Optional[str]] = mapped_column(String(20))
    start_time: Mapped[Optional[str]] = mapped_column(String(5))
    end_time: Mapped[Optional[str]] = mapped_column(String(5))
    duration_minutes: Mapped[int] = mapped_column(Integer)
    allocation_date: Mapped[date] = mapped_column(Date, index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class TimeTemplateRow(UserOwned, Base):
    __tablename__ = "time_templates"

    name: Mapped[str] = mapped_column(String(200))
    blocks: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


class UserPreferencesRow(UserOwned, Base):
    __tablename__ = "user_preferences"
    __table_args__ = (UniqueConstraint("user_id", name="uq_user_preferences_user"),)

    day_start_time: Mapped[str] = mapped_column(String(5), default="06:00")
    day_end_time: Mapped[str] = mapped_column(String(5), default="23:00")
    pomo_duration: Mapped[int] = mapped_column(Integer, default=25)
    short_break_duration: Mapped[int] = mapped_column(Integer, default=5)
    long_break_duration: Mapped[int] = mapped_column(Integer, default=15)
    deep_work_duration: Mapped[int] = mapped_column(Integer, default=50)
    timer_sound: Mapped[bool] = mapped_column(Boolean, default=True)
    auto_archive_captures: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)


# Имя сущности -> таблица; сервисы обращаются к хранилищу по имени
TABLES = {
    "projects": ProjectRow,
    "tasks": TaskRow,
    "sessions": SessionRow,
    "habits": HabitRow,
    "habit_completions": HabitCompletionRow,
    "goals": GoalRow,
    "reading_items": ReadingItemRow,
    "captures": CaptureRow,
    "vitality": VitalityRow,
    "time_allocations": TimeAllocationRow,
    "time_templates": TimeTemplateRow,
    "user_preferences": UserPreferencesRow,
}

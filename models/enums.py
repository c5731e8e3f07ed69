# models/enums.py

from enum import Enum


class CaptureType(str, Enum):
    """Тип записи быстрого захвата"""
    TASK = "task"
    NOTE = "note"
    READING = "reading"
    PROJECT = "project"
    NONE = "none"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    COMPLETED = "completed"


class SessionType(str, Enum):
    POMODORO = "pomodoro"
    DEEP_WORK = "deep_work"
    CUSTOM = "custom"


class ReadingItemType(str, Enum):
    BOOK = "book"
    ARTICLE = "article"
    PAPER = "paper"
    COURSE = "course"


class ReadingStatus(str, Enum):
    TO_READ = "to_read"
    READING = "reading"
    COMPLETED = "completed"


class GoalType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TimeCategory(str, Enum):
    """Категории блоков планировщика дня"""
    WORK = "work"
    DEEP_WORK = "deep_work"
    HEALTH = "health"
    PERSONAL = "personal"
    LEARNING = "learning"
    ADMIN = "admin"
    SLEEP = "sleep"
    MEALS = "meals"
    COMMUTE = "commute"
    OTHER = "other"


# Категории, которые считаются рабочим временем при сравнении плана и факта
WORK_CATEGORIES = (TimeCategory.WORK, TimeCategory.DEEP_WORK)

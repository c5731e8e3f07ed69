from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, ClassVar, Dict, List, Optional, Tuple
from datetime import date, datetime

from models.enums import (
    CaptureType,
    GoalType,
    HabitFrequency,
    ProjectStatus,
    ReadingItemType,
    ReadingStatus,
    SessionType,
    TaskPriority,
    TaskStatus,
    TimeCategory,
)
from utils.validators import is_valid_color, is_valid_hhmm


def _clean_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError('Значение не может быть пустым')
    return value


def _check_hhmm(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_hhmm(value):
        raise ValueError('Время должно быть в формате HH:MM')
    return value


# ===== ЗАПИСИ ХРАНИЛИЩА =====

class Record(BaseModel):
    """Строка хранилища, принадлежащая одному пользователю"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str


class Habit(Record):
    name: str
    description: Optional[str] = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    streak_count: int = Field(0, ge=0)
    last_completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HabitWithStatus(Habit):
    """Привычка с отметкой за сегодня и окном последних 7 дней"""
    completed_today: bool = False
    weekly_completions: List[bool] = Field(default_factory=list)


class Project(Record):
    name: str
    description: Optional[str] = None
    color: str = '#4a90e2'
    status: ProjectStatus = ProjectStatus.ACTIVE
    health_score: int = Field(50, ge=0, le=100)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectWithStats(Project):
    stats: Dict[str, int] = Field(default_factory=dict)


class Task(Record):
    project_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FocusSession(Record):
    project_id: Optional[str] = None
    session_type: SessionType = SessionType.POMODORO
    duration_minutes: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    notes: Optional[str] = None
    flow_state: Optional[int] = None
    distraction_level: Optional[int] = None
    created_at: Optional[datetime] = None


class VitalityLog(Record):
    energy_level: int
    mood_score: int
    sleep_quality: int
    notes: Optional[str] = None
    logged_at: Optional[datetime] = None


class ReadingItem(Record):
    title: str
    author: Optional[str] = None
    item_type: ReadingItemType = ReadingItemType.BOOK
    status: ReadingStatus = ReadingStatus.READING
    progress_pages: int = 0
    total_pages: Optional[int] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    link: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Capture(Record):
    content: str
    capture_type: Optional[CaptureType] = None
    processed: bool = False
    created_at: Optional[datetime] = None


class Goal(Record):
    title: str
    description: Optional[str] = None
    goal_type: GoalType = GoalType.WEEKLY
    target_value: Optional[float] = None
    current_value: float = 0
    unit: Optional[str] = None
    deadline: Optional[datetime] = None
    completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TimeAllocation(Record):
    project_id: Optional[str] = None
    label: Optional[str] = None
    category: Optional[TimeCategory] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_minutes: int
    allocation_date: date
    created_at: Optional[datetime] = None


class TimeTemplateBlock(BaseModel):
    label: str = ''
    category: TimeCategory = TimeCategory.OTHER
    start_time: str
    end_time: str
    project_id: Optional[str] = None

    validate_times = field_validator('start_time', 'end_time')(_check_hhmm)


class TimeTemplate(Record):
    name: str
    blocks: List[TimeTemplateBlock] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class UserPreferences(Record):
    day_start_time: str = '06:00'
    day_end_time: str = '23:00'
    pomo_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    deep_work_duration: int = 50
    timer_sound: bool = True
    auto_archive_captures: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ===== ЗАПРОСЫ НА СОЗДАНИЕ =====

class HabitCreate(BaseModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    frequency: HabitFrequency = HabitFrequency.DAILY

    normalize_name = field_validator('name')(_clean_title)


class CompleteHabitRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=1000)


class ProjectCreate(BaseModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    color: str = '#4a90e2'

    normalize_name = field_validator('name')(_clean_title)

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        if not is_valid_color(v):
            raise ValueError('Цвет должен быть в формате #rrggbb')
        return v


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=300)
    description: Optional[str] = Field(None, max_length=2000)
    project_id: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None

    normalize_title = field_validator('title')(_clean_title)


class SessionCreate(BaseModel):
    session_type: SessionType = SessionType.POMODORO
    duration_minutes: int = Field(..., gt=0, le=24 * 60)
    started_at: datetime
    project_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)
    flow_state: Optional[int] = Field(None, ge=1, le=5)
    distraction_level: Optional[int] = Field(None, ge=1, le=5)


class VitalityCreate(BaseModel):
    energy_level: int = Field(..., ge=1, le=10)
    mood_score: int = Field(..., ge=1, le=10)
    sleep_quality: int = Field(..., ge=1, le=10)
    notes: Optional[str] = Field(None, max_length=1000)


class ReadingItemCreate(BaseModel):
    title: str = Field(..., max_length=300)
    author: Optional[str] = None
    item_type: ReadingItemType = ReadingItemType.BOOK
    status: ReadingStatus = ReadingStatus.READING
    progress_pages: int = Field(0, ge=0)
    total_pages: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None
    link: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    normalize_title = field_validator('title')(_clean_title)


class ReadingProgressUpdate(BaseModel):
    progress: int = Field(..., ge=0)
    total: Optional[int] = Field(None, gt=0)


class CaptureCreate(BaseModel):
    content: str = Field(..., max_length=5000)


class GoalCreate(BaseModel):
    title: str = Field(..., max_length=300)
    description: Optional[str] = None
    goal_type: GoalType = GoalType.WEEKLY
    target_value: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    deadline: Optional[datetime] = None

    normalize_title = field_validator('title')(_clean_title)


class GoalProgressUpdate(BaseModel):
    value: float = Field(..., ge=0)


class TimeBlockCreate(BaseModel):
    category: TimeCategory
    start_time: str
    end_time: str
    label: Optional[str] = None
    project_id: Optional[str] = None
    allocation_date: Optional[date] = None

    validate_times = field_validator('start_time', 'end_time')(_check_hhmm)


class TemplateCreate(BaseModel):
    name: str = Field(..., max_length=200)
    allocation_date: Optional[date] = None

    normalize_name = field_validator('name')(_clean_title)


class TemplateLoad(BaseModel):
    allocation_date: Optional[date] = None


# ===== ЧАСТИЧНЫЕ ОБНОВЛЕНИЯ =====

class Patch(BaseModel):
    """Частичное обновление: только перечисленные поля, лишние запрещены"""
    model_config = ConfigDict(extra='forbid')

    # Поля, которые можно не передавать, но нельзя обнулить
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode='after')
    def reject_null_required(self):
        for name in self.NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} не может быть null')
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class HabitPatch(Patch):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ('name', 'frequency')

    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    frequency: Optional[HabitFrequency] = None

    normalize_name = field_validator('name')(_clean_title)


class ProjectPatch(Patch):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ('name', 'color', 'status')

    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    color: Optional[str] = None
    status: Optional[ProjectStatus] = None

    normalize_name = field_validator('name')(_clean_title)

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        if v is not None and not is_valid_color(v):
            raise ValueError('Цвет должен быть в формате #rrggbb')
        return v


class TaskPatch(Patch):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ('title', 'status', 'priority')

    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = Field(None, max_length=2000)
    project_id: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    normalize_title = field_validator('title')(_clean_title)


class ReadingItemPatch(Patch):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ('title', 'item_type', 'status', 'progress_pages')

    title: Optional[str] = Field(None, max_length=300)
    author: Optional[str] = None
    item_type: Optional[ReadingItemType] = None
    status: Optional[ReadingStatus] = None
    progress_pages: Optional[int] = Field(None, ge=0)
    total_pages: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = None
    rating: Optional[int] = Field(None, ge=0, le=5)
    link: Optional[str] = None
    tags: Optional[List[str]] = None

    normalize_title = field_validator('title')(_clean_title)


class TimeBlockPatch(Patch):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ('category', 'start_time', 'end_time')

    label: Optional[str] = None
    project_id: Optional[str] = None
    category: Optional[TimeCategory] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    validate_times = field_validator('start_time', 'end_time')(_check_hhmm)


class PreferencesPatch(Patch):
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = (
        'day_start_time', 'day_end_time', 'pomo_duration', 'short_break_duration',
        'long_break_duration', 'deep_work_duration', 'timer_sound', 'auto_archive_captures'
    )

    day_start_time: Optional[str] = None
    day_end_time: Optional[str] = None
    pomo_duration: Optional[int] = Field(None, ge=1, le=180)
    short_break_duration: Optional[int] = Field(None, ge=1, le=60)
    long_break_duration: Optional[int] = Field(None, ge=1, le=120)
    deep_work_duration: Optional[int] = Field(None, ge=1, le=480)
    timer_sound: Optional[bool] = None
    auto_archive_captures: Optional[bool] = None

    validate_times = field_validator('day_start_time', 'day_end_time')(_check_hhmm)


# ===== СЛУЖЕБНЫЕ МОДЕЛИ =====

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float

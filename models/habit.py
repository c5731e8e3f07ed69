# models/habit.py

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class StreakUpdate:
    """Результат расчета серии после отметки привычки"""
    new_streak: int
    extended: bool = False  # серия продлена со вчерашнего дня
    already_completed: bool = False  # привычка уже отмечена сегодня


@dataclass
class HabitStats:
    """Сводная статистика по привычкам пользователя"""
    total_habits: int = 0
    total_streak: int = 0
    longest_streak: int = 0
    completed_today: int = 0

    @property
    def completion_rate_today(self) -> int:
        """Процент привычек, выполненных сегодня"""
        if self.total_habits == 0:
            return 0
        return round(self.completed_today / self.total_habits * 100)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['completion_rate_today'] = self.completion_rate_today
        return data


@dataclass
class CompletionResult:
    """Итог отметки привычки: новая серия и запись в журнале"""
    habit_id: str
    new_streak: int
    completion_id: Optional[str] = None
    attempts: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HabitHistory:
    habit_id: str
    days: int
    completions: List[bool] = field(default_factory=list)

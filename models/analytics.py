# models/analytics.py

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class ProductivityMetrics:
    """Метрики продуктивности за период"""
    total_focus_minutes: int = 0
    session_count: int = 0
    avg_energy: float = 0.0
    avg_mood: float = 0.0
    tasks_completed: int = 0
    productivity_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectStats:
    """Статистика задач проекта"""
    total: int = 0
    done: int = 0
    in_progress: int = 0
    blocked: int = 0

    @property
    def completion_rate(self) -> float:
        return self.done / self.total if self.total else 0.0

    @property
    def blocked_rate(self) -> float:
        return self.blocked / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FocusStats:
    total_sessions: int = 0
    total_minutes: int = 0
    avg_flow_state: Optional[float] = None
    avg_distraction: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TodayFocusStats:
    sessions_today: int = 0
    minutes_today: int = 0
    streak: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

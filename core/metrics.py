# core/metrics.py

"""
Производные метрики дашборда: оценка продуктивности и здоровье проекта.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from models.analytics import ProjectStats
from utils.datetime_utils import to_utc, utc_now

Number = Union[int, float]

# Веса оценки продуктивности
FOCUS_HOUR_WEIGHT = 10
TASK_WEIGHT = 5
ENERGY_WEIGHT = 2

# Здоровье проекта
HEALTH_BASE_SCORE = 50
HEALTH_COMPLETION_WEIGHT = 50
HEALTH_BLOCKED_PENALTY = 20
HEALTH_ACTIVITY_BONUSES = (
    (0, 30),  # обновлен сегодня
    (3, 20),
    (7, 10),
)


def round_half_up(value: Number) -> int:
    """Округление до целого, половина уходит от нуля: 2.5 -> 3, -2.5 -> -3"""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def productivity_score(total_focus_minutes: Number, tasks_completed_count: int,
                       avg_energy: Number) -> int:
    """(минуты фокуса / 60) * 10 + задачи * 5 + средняя энергия * 2"""
    raw = (
        (total_focus_minutes / 60) * FOCUS_HOUR_WEIGHT
        + tasks_completed_count * TASK_WEIGHT
        + avg_energy * ENERGY_WEIGHT
    )
    return round_half_up(raw)


def calculate_health_score(stats: ProjectStats, last_updated: datetime,
                           now: Optional[datetime] = None) -> int:
    """Оценка здоровья проекта 0-100: выполнение, свежесть, блокеры"""
    now = now or utc_now()
    score = float(HEALTH_BASE_SCORE)

    if stats.total > 0:
        score += stats.completion_rate * HEALTH_COMPLETION_WEIGHT

    days_since_update = int((to_utc(now) - to_utc(last_updated)).total_seconds() // 86400)
    for max_days, bonus in HEALTH_ACTIVITY_BONUSES:
        if days_since_update <= max_days:
            score += bonus
            break

    if stats.total > 0:
        score -= stats.blocked_rate * HEALTH_BLOCKED_PENALTY

    return max(0, min(100, round_half_up(score)))


def average(values, default: Optional[float] = None) -> Optional[float]:
    values = [v for v in values if v is not None]
    if not values:
        return default
    return sum(values) / len(values)

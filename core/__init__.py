"""
Life Cockpit - Core
Чистые вычисления: классификация захвата, серии привычек, метрики, планировщик
"""

from .exceptions import (
    CockpitError,
    ValidationError,
    NotFoundError,
    StoreError,
    ConflictError
)
from .capture import classify, time_ago
from .habits import complete_habit, completion_history, aggregate_stats
from .metrics import productivity_score, calculate_health_score, round_half_up

__all__ = [
    'CockpitError',
    'ValidationError',
    'NotFoundError',
    'StoreError',
    'ConflictError',
    'classify',
    'time_ago',
    'complete_habit',
    'completion_history',
    'aggregate_stats',
    'productivity_score',
    'calculate_health_score',
    'round_half_up'
]

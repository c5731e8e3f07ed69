# core/timeblocks.py

"""
Арифметика блоков планировщика дня в формате "HH:MM".
"""

from typing import Any, Dict, Iterable, List, Optional

from core.exceptions import ValidationError
from models.enums import TimeCategory
from utils.validators import is_valid_hhmm


def time_to_minutes(value: str) -> int:
    """'09:30' -> 570"""
    if not isinstance(value, str) or not is_valid_hhmm(value):
        raise ValidationError(f"Время должно быть в формате HH:MM: {value!r}", field='time')
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def calculate_duration(start: str, end: str) -> int:
    duration = time_to_minutes(end) - time_to_minutes(start)
    if duration <= 0:
        raise ValidationError(f"Конец блока {end} должен быть позже начала {start}", field='end_time')
    return duration


def _get(block: Any, name: str) -> Any:
    if isinstance(block, dict):
        return block.get(name)
    return getattr(block, name, None)


def check_overlap(blocks: Iterable[Any], new_start: str, new_end: str,
                  exclude_id: Optional[str] = None) -> bool:
    """Пересекается ли [new_start, new_end) с каким-либо блоком.

    Блоки без времени начала или конца не учитываются.
    """
    start = time_to_minutes(new_start)
    end = time_to_minutes(new_end)

    for block in blocks:
        if exclude_id and _get(block, 'id') == exclude_id:
            continue
        block_start, block_end = _get(block, 'start_time'), _get(block, 'end_time')
        if not block_start or not block_end:
            continue
        if start < time_to_minutes(block_end) and end > time_to_minutes(block_start):
            return True

    return False


def summarize_by_category(blocks: Iterable[Any]) -> List[Dict[str, Any]]:
    """Минуты по категориям, блоки без категории идут в 'other'"""
    summary: Dict[str, int] = {}
    for block in blocks:
        category = _get(block, 'category') or TimeCategory.OTHER
        category = TimeCategory(category).value
        summary[category] = summary.get(category, 0) + (_get(block, 'duration_minutes') or 0)

    return [{"category": category, "minutes": minutes} for category, minutes in summary.items()]

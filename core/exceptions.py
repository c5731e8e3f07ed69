# core/exceptions.py

"""
Иерархия исключений Life Cockpit.

ValidationError - некорректный ввод, NotFoundError - запись не найдена,
StoreError - сбой хранилища записей, ConflictError - конкурентное
обновление не удалось применить после повторных попыток.
"""

from typing import Optional


class CockpitError(Exception):
    """Базовое исключение приложения"""
    pass


class ValidationError(CockpitError):
    """Ошибка валидации входных данных"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(CockpitError):
    """Запрошенная запись отсутствует"""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} {record_id} не найден(а)")
        self.entity = entity
        self.record_id = record_id


class StoreError(CockpitError):
    """Ошибка транспорта или запроса в хранилище записей"""
    pass


class ConflictError(StoreError):
    """Условное обновление не применилось: запись изменена параллельно"""
    pass


__all__ = [
    'CockpitError',
    'ValidationError',
    'NotFoundError',
    'StoreError',
    'ConflictError',
]

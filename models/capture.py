# models/capture.py

from dataclasses import dataclass
from typing import Optional

from models.enums import CaptureType


@dataclass(frozen=True)
class ClassifiedCapture:
    """Результат классификации текста быстрого захвата"""
    type: CaptureType
    clean_content: str

    @property
    def is_empty(self) -> bool:
        return not self.clean_content

    @property
    def stored_type(self) -> Optional[str]:
        """Значение для колонки capture_type: без типа хранится как NULL"""
        if self.type is CaptureType.NONE:
            return None
        return self.type.value

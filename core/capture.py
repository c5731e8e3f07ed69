#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Cockpit - Capture Classifier
Разбор текста быстрого захвата по префиксу: задача, заметка, чтение, проект

Правила проверяются по порядку на обрезанной строке:
    []        -> task
    #         -> note
    *         -> reading
    project:  -> project (с учетом регистра)
    иначе     -> none, текст без изменений

Версия: 1.0.0
Дата: 2026-10-17
"""

from datetime import datetime
from typing import Optional, Tuple

from models.capture import ClassifiedCapture
from models.enums import CaptureType
from utils.datetime_utils import to_utc, utc_now

# Порядок важен: первое совпадение определяет тип
CAPTURE_PREFIXES: Tuple[Tuple[str, CaptureType], ...] = (
    ("[]", CaptureType.TASK),
    ("#", CaptureType.NOTE),
    ("*", CaptureType.READING),
    ("project:", CaptureType.PROJECT),
)


def classify(raw: Optional[str]) -> ClassifiedCapture:
    """Определить тип захвата и очистить текст от префикса.

    Функция тотальна: любая строка, включая пустую, дает результат.
    Отклонять пустой ввод должен вызывающий код.
    """
    trimmed = (raw or "").strip()

    for prefix, capture_type in CAPTURE_PREFIXES:
        if trimmed.startswith(prefix):
            return ClassifiedCapture(
                type=capture_type,
                clean_content=trimmed[len(prefix):].strip()
            )

    return ClassifiedCapture(type=CaptureType.NONE, clean_content=trimmed)


def time_ago(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Человекочитаемый возраст записи входящих"""
    now = now or utc_now()
    seconds = int((to_utc(now) - to_utc(created_at)).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    if seconds < 86400:
        return f"{seconds // 3600} hr ago"
    if seconds < 604800:
        return f"{seconds // 86400} days ago"
    return to_utc(created_at).date().isoformat()

# database/__init__.py

from .store import RecordStore, SqlRecordStore, ExpectedStreak
from .migrations import create_schema, drop_schema, ensure_sqlite_directory

__all__ = [
    'RecordStore',
    'SqlRecordStore',
    'ExpectedStreak',
    'create_schema',
    'drop_schema',
    'ensure_sqlite_directory',
]

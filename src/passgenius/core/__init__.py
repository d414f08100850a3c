"""PassGenius Core - the password record store and its storage backends.

This module provides the data model, the key-value storage interface with its
memory and file backends, and the observable password store built on them.
"""

from .models import PasswordRecord, ArchivedPasswordRecord, Snapshot
from .storage import KeyValueStorage, MemoryStorage, FileStorage, StorageError
from .store import (
    PasswordStore,
    StoreError,
    DuplicateIdError,
    PASSWORD_STORAGE_KEY,
    ARCHIVE_STORAGE_KEY,
)
from .session import LocalSession

__all__ = [
    'PasswordRecord',
    'ArchivedPasswordRecord',
    'Snapshot',
    'KeyValueStorage',
    'MemoryStorage',
    'FileStorage',
    'StorageError',
    'PasswordStore',
    'StoreError',
    'DuplicateIdError',
    'PASSWORD_STORAGE_KEY',
    'ARCHIVE_STORAGE_KEY',
    'LocalSession',
]

"""Key-value storage backends for the password store.

Values are plain strings, the way browser local storage holds them; the
store is responsible for encoding records as JSON.
"""
import os
import re
import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9._-]+$')


class StorageError(Exception):
    """Raised when a storage backend cannot read or write a key."""
    pass


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStorage:
    """Dictionary-backed storage, for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileStorage:
    """Stores each key as a UTF-8 file inside a data directory."""

    def __init__(self, data_dir: Union[str, Path]):
        """Initialize the storage.

        Args:
            data_dir: Directory holding one file per key. Created on first write.
        """
        self.data_dir = Path(data_dir).expanduser()

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key or ''):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.data_dir / key

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file so a crash never leaves a half-written value
            fd, tmp_name = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e
        logger.debug(f"Wrote {len(value)} bytes to {path}")

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e

import json
import logging
from datetime import datetime, timezone
from itertools import count
from typing import Callable, Dict, List, Optional

from .models import PasswordRecord, ArchivedPasswordRecord, Snapshot, as_utc
from .storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

PASSWORD_STORAGE_KEY = 'passgenius-passwords'
ARCHIVE_STORAGE_KEY = 'passgenius-archive'

Observer = Callable[[], None]


class StoreError(Exception):
    """Base exception for password store errors."""
    pass


class DuplicateIdError(StoreError):
    """Raised when a record id is already present in the store."""
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PasswordStore:
    """Shared, persisted list of password records with change notification.

    Every view that needs the records subscribes to the store and re-reads
    ``get_snapshot()`` when notified. Mutations persist both sequences to the
    storage backend before notifying; persistence is best effort.
    """

    def __init__(self, storage: KeyValueStorage, clock: Callable[[], datetime] = utc_now):
        """Initialize the store.

        Args:
            storage: Key-value backend holding the JSON-encoded sequences
            clock: Returns the current time, used to stamp archived records
        """
        self.storage = storage
        self.clock = clock
        self._snapshot = Snapshot()
        self._loaded = False
        self._observers: Dict[int, Observer] = {}
        self._tokens = count()

    # ---- Subscription ----
    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a callback invoked with no arguments after every change.

        Returns:
            A function that removes this registration. Calling it more than
            once is harmless.
        """
        token = next(self._tokens)
        self._observers[token] = observer

        def unsubscribe() -> None:
            self._observers.pop(token, None)

        return unsubscribe

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _broadcast(self) -> None:
        for observer in list(self._observers.values()):
            try:
                observer()
            except Exception:
                logger.exception("Store observer raised during notification")

    # ---- Reading ----
    def get_snapshot(self) -> Snapshot:
        """Return the current state, loading it from storage on first use."""
        if not self._loaded:
            self._read_storage()
        return self._snapshot

    def load(self) -> Snapshot:
        """Reload both sequences from storage and notify observers.

        Malformed stored data is logged and treated as an empty store.
        """
        self._read_storage()
        self._broadcast()
        return self._snapshot

    def _read_storage(self) -> None:
        self._loaded = True
        try:
            active = [PasswordRecord.from_dict(item)
                      for item in self._read_list(PASSWORD_STORAGE_KEY)]
            archived = [ArchivedPasswordRecord.from_dict(item)
                        for item in self._read_list(ARCHIVE_STORAGE_KEY)]
            self._check_unique_ids(active + archived)
        except (StorageError, OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load password records, starting empty: {e}")
            self._snapshot = Snapshot()
            return
        self._snapshot = Snapshot(active=tuple(active), archived=tuple(archived))
        logger.debug(f"Loaded {len(active)} active and {len(archived)} archived records")

    @staticmethod
    def _check_unique_ids(records: List[PasswordRecord]) -> None:
        seen = set()
        for record in records:
            if record.id in seen:
                raise ValueError(f"Record id {record.id} is stored more than once")
            seen.add(record.id)

    def _read_list(self, key: str) -> List[dict]:
        raw = self.storage.get(key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array under {key}, got {type(data).__name__}")
        return data

    # ---- Mutations ----
    def add_record(self, record: PasswordRecord) -> None:
        """Add a record to the front of the active list.

        Raises:
            DuplicateIdError: If the id is already active or archived
        """
        current = self.get_snapshot()
        if current.find(record.id) is not None:
            raise DuplicateIdError(f"Record with ID {record.id} already exists")

        self._update(Snapshot(active=(record,) + current.active, archived=current.archived))
        logger.debug(f"Added record {record.id}")

    def archive_record(self, record_id: str) -> Optional[ArchivedPasswordRecord]:
        """Move an active record to the front of the archive.

        Returns:
            The archived record, or None if no active record has that id
        """
        current = self.get_snapshot()
        record = next((r for r in current.active if r.id == record_id), None)
        if record is None:
            return None

        archived = record.archive(max(as_utc(self.clock()), as_utc(record.date)))
        self._update(Snapshot(
            active=tuple(r for r in current.active if r.id != record_id),
            archived=(archived,) + current.archived,
        ))
        logger.debug(f"Archived record {record_id}")
        return archived

    def _update(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._persist(snapshot)
        self._broadcast()

    def _persist(self, snapshot: Snapshot) -> None:
        try:
            self.storage.set(PASSWORD_STORAGE_KEY,
                             json.dumps([r.to_dict() for r in snapshot.active]))
            self.storage.set(ARCHIVE_STORAGE_KEY,
                             json.dumps([r.to_dict() for r in snapshot.archived]))
        except (StorageError, OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save password records: {e}")

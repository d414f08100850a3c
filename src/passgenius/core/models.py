from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Tuple

PASSWORD_MASK = '•' * 12


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601, using a ``Z`` suffix for UTC."""
    text = as_utc(value).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _text_field(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken to be UTC."""
    if not isinstance(text, str):
        raise ValueError(f"Timestamp must be a string, got {type(text).__name__}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


@dataclass(frozen=True)
class PasswordRecord:
    """A generated password for a username or application."""
    id: str
    username: str
    password: str
    date: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a dictionary for serialization."""
        return {
            'id': self.id,
            'username': self.username,
            'password': self.password,
            'date': format_timestamp(self.date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PasswordRecord':
        """Create a PasswordRecord from a dictionary."""
        return cls(
            id=str(data['id']),
            username=_text_field(data, 'username'),
            password=_text_field(data, 'password'),
            date=parse_timestamp(data['date']),
        )

    def archive(self, deletion_date: datetime) -> 'ArchivedPasswordRecord':
        """Return an archived copy of this record."""
        return ArchivedPasswordRecord(
            id=self.id,
            username=self.username,
            password=self.password,
            date=self.date,
            deletion_date=deletion_date,
        )


@dataclass(frozen=True)
class ArchivedPasswordRecord(PasswordRecord):
    """A soft-deleted record, kept with the time it was archived."""
    deletion_date: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['deletionDate'] = format_timestamp(self.deletion_date)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArchivedPasswordRecord':
        return cls(
            id=str(data['id']),
            username=_text_field(data, 'username'),
            password=_text_field(data, 'password'),
            date=parse_timestamp(data['date']),
            deletion_date=parse_timestamp(data['deletionDate']),
        )


@dataclass(frozen=True)
class Snapshot:
    """The complete state of a store at one point in time, newest first."""
    active: Tuple[PasswordRecord, ...] = ()
    archived: Tuple[ArchivedPasswordRecord, ...] = ()

    def find(self, record_id: str) -> Optional[PasswordRecord]:
        """Find a record by id in either sequence."""
        for record in self.active:
            if record.id == record_id:
                return record
        for record in self.archived:
            if record.id == record_id:
                return record
        return None

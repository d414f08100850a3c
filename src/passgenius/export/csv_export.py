from typing import Iterable

from ..core.models import PasswordRecord, format_timestamp

CSV_HEADERS = ['Username', 'Date', 'Password']


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def records_to_csv(records: Iterable[PasswordRecord]) -> str:
    """Render records as CSV text.

    Username and password are always quoted; the ISO-8601 date never is.
    Rows are separated by a bare newline with none after the last row.
    """
    rows = [','.join(CSV_HEADERS)]
    for record in records:
        rows.append(','.join([
            _quote(record.username),
            format_timestamp(record.date),
            _quote(record.password),
        ]))
    return '\n'.join(rows)

import logging
from pathlib import Path
from typing import Iterable, List, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ..core.models import PasswordRecord

logger = logging.getLogger(__name__)

SHEET_TITLE = "Passwords"
XLSX_HEADERS = ['Username', 'Password', 'Date of Generation']
COLUMN_MARGIN = 2


def format_local_datetime(record: PasswordRecord) -> str:
    """The record's creation time in the local timezone and locale format."""
    return record.date.astimezone().strftime("%x %X")


def build_workbook(records: Iterable[PasswordRecord]) -> Workbook:
    """Build a single-sheet workbook with auto-sized columns."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    rows: List[List[str]] = [list(XLSX_HEADERS)]
    for record in records:
        rows.append([record.username, record.password, format_local_datetime(record)])
    for row in rows:
        ws.append(row)

    for cell in ws[1]:
        cell.font = Font(bold=True)

    for index, header in enumerate(XLSX_HEADERS, start=1):
        longest = max(len(str(row[index - 1])) for row in rows)
        ws.column_dimensions[get_column_letter(index)].width = longest + COLUMN_MARGIN

    return wb


def write_xlsx(records: Iterable[PasswordRecord], path: Union[str, Path]) -> Path:
    """Write records to an .xlsx file and return its path."""
    path = Path(path)
    build_workbook(records).save(str(path))
    logger.debug(f"Wrote spreadsheet backup to {path}")
    return path

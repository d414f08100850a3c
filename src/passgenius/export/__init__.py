"""Backup exports (CSV and XLSX) of the active password records."""

import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Union

from ..core.models import PasswordRecord
from .csv_export import records_to_csv, CSV_HEADERS
from .xlsx_export import build_workbook, write_xlsx, XLSX_HEADERS, SHEET_TITLE

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "xlsx")


def backup_filename(fmt: str, today: Optional[date] = None) -> str:
    """File name for a backup, e.g. ``passgenius_backup_2024-01-31.csv``."""
    today = today or date.today()
    return f"passgenius_backup_{today.isoformat()}.{fmt}"


def write_backup(
    records: Iterable[PasswordRecord],
    directory: Union[str, Path],
    fmt: str = "csv",
    today: Optional[date] = None,
) -> Path:
    """Write a backup file into a directory.

    Args:
        records: Records to export, in display order
        directory: Target directory, created if missing
        fmt: ``csv`` or ``xlsx``
        today: Date used in the file name

    Returns:
        Path of the written file

    Raises:
        ValueError: If the format is not supported
    """
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / backup_filename(fmt, today)
    records = list(records)

    if fmt == "csv":
        path.write_text(records_to_csv(records), encoding='utf-8')
    else:
        write_xlsx(records, path)

    logger.info(f"Exported {len(records)} records to {path}")
    return path


__all__ = [
    'EXPORT_FORMATS',
    'CSV_HEADERS',
    'XLSX_HEADERS',
    'SHEET_TITLE',
    'backup_filename',
    'records_to_csv',
    'build_workbook',
    'write_xlsx',
    'write_backup',
]

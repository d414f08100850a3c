import tempfile
import unittest
from datetime import date, datetime, timezone
from pathlib import Path

from openpyxl import load_workbook

from passgenius.core.models import PasswordRecord
from passgenius.export import (
    backup_filename,
    build_workbook,
    records_to_csv,
    write_backup,
)
from passgenius.export.xlsx_export import COLUMN_MARGIN, format_local_datetime

RECORDS = [
    PasswordRecord("2", 'Bank "Main"', 'p"w,1!A', datetime(2024, 1, 2, tzinfo=timezone.utc)),
    PasswordRecord("1", "Gmail", "Xy9!zQ2@", datetime(2024, 1, 1, tzinfo=timezone.utc)),
]


class TestCsvExport(unittest.TestCase):
    def test_header_and_rows(self):
        self.assertEqual(records_to_csv(RECORDS), "\n".join([
            "Username,Date,Password",
            '"Bank ""Main""",2024-01-02T00:00:00Z,"p""w,1!A"',
            '"Gmail",2024-01-01T00:00:00Z,"Xy9!zQ2@"',
        ]))

    def test_empty_export_is_just_the_header(self):
        self.assertEqual(records_to_csv([]), "Username,Date,Password")


class TestXlsxExport(unittest.TestCase):
    def test_sheet_layout(self):
        ws = build_workbook(RECORDS).active
        self.assertEqual(ws.title, "Passwords")
        rows = list(ws.iter_rows(values_only=True))
        self.assertEqual(rows[0], ("Username", "Password", "Date of Generation"))
        self.assertEqual(rows[1], ('Bank "Main"', 'p"w,1!A', format_local_datetime(RECORDS[0])))
        self.assertEqual(rows[2][0], "Gmail")
        self.assertEqual(len(rows), 3)

    def test_column_widths_fit_longest_value(self):
        ws = build_workbook(RECORDS).active
        self.assertEqual(ws.column_dimensions['A'].width, len('Bank "Main"') + COLUMN_MARGIN)
        self.assertEqual(ws.column_dimensions['B'].width, len("Password") + COLUMN_MARGIN)
        longest_date = max(len("Date of Generation"), len(format_local_datetime(RECORDS[0])))
        self.assertEqual(ws.column_dimensions['C'].width, longest_date + COLUMN_MARGIN)


class TestWriteBackup(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.today = date(2024, 1, 31)

    def tearDown(self):
        self.tmp.cleanup()

    def test_backup_filename(self):
        self.assertEqual(backup_filename("csv", self.today), "passgenius_backup_2024-01-31.csv")
        self.assertEqual(backup_filename("xlsx", self.today), "passgenius_backup_2024-01-31.xlsx")

    def test_writes_csv(self):
        path = write_backup(RECORDS, self.tmp.name, "csv", today=self.today)
        self.assertEqual(path.name, "passgenius_backup_2024-01-31.csv")
        self.assertEqual(path.read_text(encoding="utf-8"), records_to_csv(RECORDS))

    def test_writes_xlsx_into_new_directory(self):
        target = Path(self.tmp.name) / "backups"
        path = write_backup(RECORDS, target, "XLSX", today=self.today)
        self.assertEqual(path, target / "passgenius_backup_2024-01-31.xlsx")
        ws = load_workbook(path)["Passwords"]
        self.assertEqual(ws["A2"].value, 'Bank "Main"')
        self.assertEqual(ws["B3"].value, "Xy9!zQ2@")

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            write_backup(RECORDS, self.tmp.name, "pdf")


if __name__ == '__main__':
    unittest.main()

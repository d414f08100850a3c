import os
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from passgenius.cli.main import cli
from passgenius.core.storage import FileStorage
from passgenius.core.store import PasswordStore

CLEAN_ENV = {
    "PASSGENIUS_DATA_DIR": None,
    "PASSGENIUS_GENERATOR": None,
    "PASSGENIUS_PASSWORD_LENGTH": None,
    "PASSGENIUS_SMTP_HOST": None,
    "PASSGENIUS_SMTP_USERNAME": None,
    "PASSGENIUS_SMTP_SENDER": None,
    "GEMINI_API_KEY": None,
    "GOOGLE_API_KEY": None,
}


class TestPassGeniusCLI(unittest.TestCase):
    def setUp(self):
        """Set up a fresh data directory for each test"""
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = os.path.join(self.tmp.name, "data")

    def tearDown(self):
        self.tmp.cleanup()

    def invoke(self, *args, **kwargs):
        env = dict(CLEAN_ENV)
        env.update(kwargs.pop("env", {}))
        return self.runner.invoke(cli, ["--data-dir", self.data_dir, *args], env=env, **kwargs)

    def store(self):
        return PasswordStore(FileStorage(self.data_dir))

    def login_and_generate(self, *usernames):
        self.assertEqual(self.invoke("login").exit_code, 0)
        for username in usernames:
            result = self.invoke("generate", username)
            self.assertEqual(result.exit_code, 0, result.output)

    def test_help_without_command(self):
        result = self.invoke()
        self.assertEqual(result.exit_code, 0)
        self.assertIn("generate", result.output)

    def test_commands_require_login(self):
        result = self.invoke("list")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Not logged in", result.output)

    def test_logout(self):
        self.invoke("login")
        result = self.invoke("logout")
        self.assertIn("successfully logged out", result.output)
        self.assertEqual(self.invoke("list").exit_code, 2)

    def test_generate_saves_record(self):
        self.login_and_generate("Gmail")
        active = self.store().get_snapshot().active
        self.assertEqual(len(active), 1)
        self.assertEqual(active[0].username, "Gmail")
        self.assertEqual(len(active[0].password), 16)

    def test_generate_output(self):
        self.invoke("login")
        result = self.invoke("generate", "Gmail", "--length", "20")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("has been generated and saved", result.output)
        password = self.store().get_snapshot().active[0].password
        self.assertEqual(len(password), 20)
        self.assertIn(password, result.output)

    def test_generate_blank_username_fails_validation(self):
        self.invoke("login")
        result = self.invoke("generate", "   ")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Username is required.", result.output)
        self.assertEqual(self.store().get_snapshot().active, ())

    def test_generate_invalid_length(self):
        self.invoke("login")
        result = self.invoke("generate", "Gmail", "--length", "4")
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.store().get_snapshot().active, ())

    def test_generate_with_ai(self):
        self.invoke("login")
        with mock.patch("passgenius.generation.memorable.MemorableGenerator.generate",
                        return_value="HappyDolphin!8"):
            result = self.invoke("generate", "Google", "--generator", "ai",
                                 env={"GEMINI_API_KEY": "test-key"})
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.store().get_snapshot().active[0].password, "HappyDolphin!8")

    def test_generate_uses_configured_generator(self):
        self.invoke("login")
        env = {"PASSGENIUS_GENERATOR": "ai", "GEMINI_API_KEY": "test-key"}
        with mock.patch("passgenius.generation.memorable.MemorableGenerator.generate",
                        return_value="HappyDolphin!8"):
            self.assertEqual(self.invoke("generate", "Google", env=env).exit_code, 0)
            result = self.invoke("generate", "Bank", "-g", "rules", env=env)
        self.assertEqual(result.exit_code, 0, result.output)
        passwords = [r.password for r in self.store().get_snapshot().active]
        self.assertEqual(passwords[1], "HappyDolphin!8")
        self.assertEqual(len(passwords[0]), 16)

    def test_generate_with_ai_failure(self):
        self.invoke("login")
        result = self.invoke("generate", "Google", "--generator", "ai")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("An unexpected error occurred.", result.output)
        self.assertEqual(self.store().get_snapshot().active, ())

    def test_list_masks_passwords(self):
        self.login_and_generate("Gmail", "Bank")
        password = self.store().get_snapshot().active[0].password

        result = self.invoke("list")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Gmail", result.output)
        self.assertIn("Bank", result.output)
        self.assertNotIn(password, result.output)

        revealed = self.invoke("list", "--reveal")
        self.assertIn(password, revealed.output)

    def test_list_empty(self):
        self.invoke("login")
        result = self.invoke("list")
        self.assertIn("No passwords generated yet.", result.output)

    def test_archive(self):
        self.login_and_generate("Gmail", "Bank")
        record_id = self.store().get_snapshot().active[1].id

        result = self.invoke("archive", record_id, "--yes")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Archived record for Gmail", result.output)

        snapshot = self.store().get_snapshot()
        self.assertEqual([r.username for r in snapshot.active], ["Bank"])
        self.assertEqual([r.id for r in snapshot.archived], [record_id])

        archived = self.invoke("list", "--archived")
        self.assertIn("Gmail", archived.output)

    def test_archive_by_username_with_confirmation(self):
        self.login_and_generate("Gmail")
        result = self.invoke("archive", "gmail", input="y\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.store().get_snapshot().active, ())

    def test_archive_cancelled(self):
        self.login_and_generate("Gmail")
        result = self.invoke("archive", "Gmail", input="n\n")
        self.assertIn("Cancelled", result.output)
        self.assertEqual(len(self.store().get_snapshot().active), 1)

    def test_archive_missing_record(self):
        self.login_and_generate("Gmail")
        result = self.invoke("archive", "missing", "--yes")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No active record", result.output)

    def test_export_csv(self):
        self.login_and_generate("Gmail")
        out_dir = Path(self.tmp.name) / "out"
        result = self.invoke("export", "--output-dir", str(out_dir))
        self.assertEqual(result.exit_code, 0, result.output)
        path = out_dir / f"passgenius_backup_{date.today().isoformat()}.csv"
        lines = path.read_text(encoding="utf-8").split("\n")
        self.assertEqual(lines[0], "Username,Date,Password")
        self.assertTrue(lines[1].startswith('"Gmail",'))

    def test_export_xlsx(self):
        self.login_and_generate("Gmail")
        out_dir = Path(self.tmp.name) / "out"
        result = self.invoke("export", "--format", "xlsx", "--output-dir", str(out_dir))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue((out_dir / f"passgenius_backup_{date.today().isoformat()}.xlsx").exists())

    def test_export_nothing(self):
        self.invoke("login")
        result = self.invoke("export", "--output-dir", self.tmp.name)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("no passwords to export", result.output)

    def test_email_invalid_address(self):
        self.login_and_generate("Gmail")
        result = self.invoke("email", "Gmail", "--to", "nobody")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("valid email address", result.output)

    def test_email_sends(self):
        self.login_and_generate("Gmail")
        env = {"PASSGENIUS_SMTP_HOST": "smtp.example.com", "PASSGENIUS_SMTP_USERNAME": "bot@example.com"}
        with mock.patch("passgenius.mail.smtplib.SMTP") as smtp_cls:
            result = self.invoke("email", "Gmail", "--to", "user@example.com", env=env)
        self.assertEqual(result.exit_code, 0, result.output)
        smtp_cls.return_value.__enter__.return_value.send_message.assert_called_once()

    def test_copy_password(self):
        self.login_and_generate("Gmail")
        password = self.store().get_snapshot().active[0].password
        with mock.patch("pyperclip.copy") as copy:
            result = self.invoke("copy-password", "Gmail")
        self.assertEqual(result.exit_code, 0, result.output)
        copy.assert_called_once_with(password)

    def test_ambiguous_identifier(self):
        self.login_and_generate("Gmail", "Gmail")
        result = self.invoke("archive", "Gmail", "--yes")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Multiple records match", result.output)


if __name__ == '__main__':
    unittest.main()

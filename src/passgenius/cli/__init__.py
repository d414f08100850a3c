"""
PassGenius CLI - Command Line Interface for the PassGenius password store.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence
import logging

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn

from ..config import Settings
from ..core.models import PASSWORD_MASK, PasswordRecord, ArchivedPasswordRecord
from ..core.session import LocalSession
from ..core.storage import FileStorage
from ..core.store import PasswordStore
from ..export import write_backup
from ..generation import generate_password_action, make_generator, new_record
from ..mail import EmailSender

logger = logging.getLogger(__name__)

# Create console for rich output
console = Console()


class PassGeniusCLI:
    """State shared by the CLI commands: settings, store and session flag."""

    def __init__(self, settings: Settings, debug: bool = False):
        self.settings = settings
        self.debug = debug
        self.storage = FileStorage(settings.data_dir)
        self.store = PasswordStore(self.storage)
        self.session = LocalSession(self.storage)

        if debug:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug("Debug mode enabled")

    def ensure_authenticated(self) -> None:
        """Refuse to touch the store until the local login flag is set."""
        if not self.session.is_authenticated():
            raise click.UsageError("Not logged in. Use 'passgenius login' first.")

    @contextmanager
    def _progress_spinner(self, description: str) -> Iterator[None]:
        """Show a transient spinner while the block runs."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            progress.add_task(description, total=None)
            yield

    def get_record(self, identifier: str, archived: bool = False) -> PasswordRecord:
        """Find a record by id, unique id prefix, or unique username."""
        snapshot = self.store.get_snapshot()
        records: Sequence[PasswordRecord] = snapshot.archived if archived else snapshot.active

        for record in records:
            if record.id == identifier:
                return record

        matches = [r for r in records if r.id.startswith(identifier)]
        if not matches:
            matches = [r for r in records if r.username.lower() == identifier.lower()]
        if not matches:
            kind = "archived" if archived else "active"
            raise click.ClickException(f"No {kind} record matches '{identifier}'")
        if len(matches) > 1:
            raise click.ClickException(
                f"Multiple records match '{identifier}'. Please use the record ID instead."
            )
        return matches[0]

    def generate(self, username: str, kind: Optional[str] = None, length: Optional[int] = None) -> PasswordRecord:
        """Generate a password for a username and add it to the store."""
        self.ensure_authenticated()
        settings = self.settings.with_overrides(password_length=length)
        try:
            generator = make_generator(settings, kind)
        except ValueError as e:
            raise click.ClickException(str(e))

        with self._progress_spinner("Generating password..."):
            result = generate_password_action(username, generator)

        if not result.ok:
            if result.errors:
                raise click.ClickException('; '.join(m for msgs in result.errors.values() for m in msgs))
            raise click.ClickException(result.message)

        record = new_record(username.strip(), result.password)
        self.store.add_record(record)
        return record

    def list_records(self, archived: bool = False) -> List[PasswordRecord]:
        self.ensure_authenticated()
        snapshot = self.store.get_snapshot()
        return list(snapshot.archived if archived else snapshot.active)

    def archive(self, identifier: str) -> ArchivedPasswordRecord:
        self.ensure_authenticated()
        record = self.get_record(identifier)
        archived = self.store.archive_record(record.id)
        if archived is None:
            raise click.ClickException(f"No active record matches '{identifier}'")
        return archived

    def export(self, fmt: str, output_dir: str) -> Path:
        self.ensure_authenticated()
        records = self.store.get_snapshot().active
        if not records:
            raise click.ClickException("There are no passwords to export.")
        with self._progress_spinner(f"Exporting {len(records)} records..."):
            return write_backup(records, output_dir, fmt)

    def email(self, identifier: str, recipient: str):
        self.ensure_authenticated()
        record = self.get_record(identifier)
        with self._progress_spinner(f"Sending password to {recipient}..."):
            return EmailSender(self.settings).send_record(recipient, record)


def print_record_table(records: Sequence[PasswordRecord], reveal: bool = False, archived: bool = False) -> None:
    """Print a table of password records."""
    if not records:
        console.print("[yellow]No passwords generated yet.[/]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=8)
    table.add_column("Username")
    table.add_column("Date Generated", style="dim")
    table.add_column("Password")
    if archived:
        table.add_column("Archived", style="dim")

    for record in records:
        row = [
            record.id[:8],
            escape(record.username),
            record.date.astimezone().strftime("%Y-%m-%d"),
            escape(record.password) if reveal else PASSWORD_MASK,
        ]
        if isinstance(record, ArchivedPasswordRecord):
            row.append(record.deletion_date.astimezone().strftime("%Y-%m-%d"))
        table.add_row(*row)

    console.print(table)

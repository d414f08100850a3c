"""
Main TUI application for PassGenius.
"""
from typing import Callable, Optional, Set
import logging

from rich.markup import escape
from rich.text import Text
from rich.traceback import install as install_rich_traceback
from textual import work
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Header, Footer, Button, Static, Input, Label, DataTable

from ..core.models import PASSWORD_MASK, ArchivedPasswordRecord
from ..core.store import PasswordStore
from ..generation import (
    ActionResult,
    PasswordGenerator,
    generate_password_action,
    new_record,
    validate_username,
)

# Set up rich traceback for better error messages
install_rich_traceback(show_locals=False)
logger = logging.getLogger(__name__)


class RecordTable(DataTable):
    """A table view over one of the store's sequences.

    Subscribes while mounted, so every table showing the same store stays in
    step no matter which widget changed it.
    """

    def __init__(self, store: PasswordStore, archived: bool = False, **kwargs):
        super().__init__(cursor_type="row", **kwargs)
        self.store = store
        self.archived = archived
        self.revealed: Set[str] = set()
        self._unsubscribe: Optional[Callable[[], None]] = None

    def on_mount(self) -> None:
        columns = ["Username", "Date Generated", "Password"]
        if self.archived:
            columns.append("Archived")
        self.add_columns(*columns)
        self._unsubscribe = self.store.subscribe(self.refresh_records)
        self.refresh_records()

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh_records(self) -> None:
        snapshot = self.store.get_snapshot()
        records = snapshot.archived if self.archived else snapshot.active
        cursor_row = self.cursor_row
        self.clear()
        for record in records:
            row = [
                Text(record.username),
                record.date.astimezone().strftime("%Y-%m-%d"),
                Text(record.password) if record.id in self.revealed else PASSWORD_MASK,
            ]
            if isinstance(record, ArchivedPasswordRecord):
                row.append(record.deletion_date.astimezone().strftime("%Y-%m-%d"))
            self.add_row(*row, key=record.id)
        if self.row_count:
            self.move_cursor(row=min(cursor_row, self.row_count - 1))

    def toggle_reveal(self, record_id: str) -> bool:
        """Show or hide one row's password. Returns True if now shown."""
        if record_id in self.revealed:
            self.revealed.discard(record_id)
        else:
            self.revealed.add(record_id)
        self.refresh_records()
        return record_id in self.revealed

    def selected_record_id(self) -> Optional[str]:
        if self.row_count == 0:
            return None
        row_key, _ = self.coordinate_to_cell_key(self.cursor_coordinate)
        return row_key.value


class PassGeniusTUI(App):
    """Main TUI application for PassGenius."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #generator {
        height: auto;
        border: solid $accent;
        padding: 0 1;
    }

    #generator-row {
        height: auto;
    }

    #username {
        width: 1fr;
    }

    .section-title {
        padding: 1 1 0 1;
        text-style: bold;
    }

    RecordTable {
        height: 1fr;
        border: solid $accent;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("a", "archive", "Archive Selected"),
        ("c", "copy_password", "Copy Password"),
        ("v", "toggle_reveal", "Show/Hide Password"),
        ("r", "reload", "Reload"),
    ]

    def __init__(self, store: PasswordStore, generator: PasswordGenerator, **kwargs):
        super().__init__(**kwargs)
        self.store = store
        self.generator = generator
        self.generated_password: Optional[str] = None

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Header()
        with Container(id="generator"):
            yield Label("Create a Secure Password", classes="section-title")
            with Horizontal(id="generator-row"):
                yield Input(placeholder="e.g., Google Account", id="username")
                yield Button("Generate Password", variant="primary", id="generate-button")
            yield Static("", id="generated-password")
        yield Label("Password Vault", classes="section-title")
        yield RecordTable(self.store, id="active-table")
        yield Label("Archive", classes="section-title")
        yield RecordTable(self.store, archived=True, id="archive-table")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#username", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "generate-button":
            self.submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "username":
            self.submit()

    def submit(self) -> None:
        """Validate the form and start a generation in the background."""
        button = self.query_one("#generate-button", Button)
        if button.disabled:
            return

        username = self.query_one("#username", Input).value
        errors = validate_username(username)
        if errors:
            self.notify(errors["username"][0], severity="error")
            return

        button.disabled = True
        button.label = "Generating..."
        self.run_generation(username.strip())

    @work(thread=True, exclusive=True)
    def run_generation(self, username: str) -> None:
        result = generate_password_action(username, self.generator)
        self.call_from_thread(self.finish_generation, username, result)

    def finish_generation(self, username: str, result: ActionResult) -> None:
        button = self.query_one("#generate-button", Button)
        button.disabled = False
        button.label = "Generate Password"

        if not result.ok:
            self.notify(
                result.message or "Failed to generate password.",
                title="Uh oh! Something went wrong.",
                severity="error",
            )
            return

        self.generated_password = result.password
        self.store.add_record(new_record(username, result.password))
        self.query_one("#generated-password", Static).update(Text(f"Generated password: {result.password}"))
        self.notify("A new secure password has been generated and saved.", title="Success!")

    def action_archive(self) -> None:
        """Archive the record selected in the vault table."""
        record_id = self.query_one("#active-table", RecordTable).selected_record_id()
        if record_id is None:
            self.notify("No record selected", severity="warning")
            return
        archived = self.store.archive_record(record_id)
        if archived is not None:
            self.notify(f"Archived record for {escape(archived.username)}")

    def action_copy_password(self) -> None:
        """Copy the selected record's password, or the last generated one."""
        password = self.generated_password
        record_id = self.query_one("#active-table", RecordTable).selected_record_id()
        if record_id is not None:
            record = self.store.get_snapshot().find(record_id)
            password = record.password if record else password
        if not password:
            self.notify("No password to copy", severity="warning")
            return

        try:
            import pyperclip
            pyperclip.copy(password)
            self.notify("Password copied to clipboard.", title="Copied!")
        except Exception as e:
            logger.exception("Error copying to clipboard")
            self.notify(f"Failed to copy to clipboard: {escape(str(e))}", severity="error")

    def action_toggle_reveal(self) -> None:
        """Show or hide the password of the selected row in the focused table."""
        table = self.focused if isinstance(self.focused, RecordTable) else self.query_one("#active-table", RecordTable)
        record_id = table.selected_record_id()
        if record_id is None:
            self.notify("No record selected", severity="warning")
            return
        table.toggle_reveal(record_id)

    def action_reload(self) -> None:
        """Reload records from storage."""
        self.store.load()
        self.notify("Records reloaded")

"""
PassGenius CLI - Command Line Interface for the PassGenius password store.
"""
import os
import sys
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import PassGeniusCLI, print_record_table
from ..config import Settings, ConfigError, GENERATORS
from ..export import EXPORT_FORMATS

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("passgenius")

# Create console for rich output
console = Console()


def _fail(cli: Optional[PassGeniusCLI], action: str, error: Exception) -> None:
    console.print(f"[red]✗[/] Failed to {action}: {escape(str(error))}")
    if cli is not None and cli.debug:
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, dir_okay=True, writable=True),
    default=None,
    help="Directory to store password data [default: $PASSGENIUS_DATA_DIR or ~/.passgenius]",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output",
    show_default=True
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str], debug: bool) -> None:
    """PassGenius - generate, keep and export strong passwords."""
    try:
        settings = Settings.from_env().with_overrides(
            data_dir=os.path.expanduser(data_dir) if data_dir else None
        )
    except ConfigError as e:
        raise click.ClickException(str(e))

    # Store the CLI instance in the context
    ctx.obj = PassGeniusCLI(settings=settings, debug=debug)

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.pass_obj
def login(cli: PassGeniusCLI) -> None:
    """Mark this profile as logged in."""
    try:
        cli.session.login()
        console.print("[green]✓[/] Logged in.")
    except Exception as e:
        _fail(cli, "log in", e)


@cli.command()
@click.pass_obj
def logout(cli: PassGeniusCLI) -> None:
    """Clear the logged-in flag."""
    try:
        cli.session.logout()
        console.print("[green]✓[/] You have been successfully logged out.")
    except Exception as e:
        _fail(cli, "log out", e)


@cli.command()
@click.argument("username")
@click.option(
    "--generator",
    "-g",
    "kind",
    type=click.Choice(list(GENERATORS)),
    default=None,
    help="'rules' for a random password, 'ai' for a memorable Gemini phrase [default: configured generator]"
)
@click.option(
    "--length",
    "-l",
    type=int,
    default=None,
    help="Length of rule-based passwords"
)
@click.pass_obj
def generate(cli: PassGeniusCLI, username: str, kind: Optional[str], length: Optional[int]) -> None:
    """Generate and save a password for USERNAME (a username or app name)."""
    try:
        record = cli.generate(username, kind=kind, length=length)
    except click.UsageError:
        raise
    except Exception as e:
        console.print(f"[red]✗[/] Uh oh! Something went wrong. {escape(str(e))}")
        if cli.debug:
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)

    console.print(f"[green]✓[/] A new secure password has been generated and saved for [bold]{escape(record.username)}[/bold].")
    console.print(f"Password: [yellow]{escape(record.password)}[/]")
    console.print(f"[dim]ID: {record.id}[/]")


@cli.command("list")
@click.option("--archived", is_flag=True, default=False, help="Show archived records instead")
@click.option("--reveal", is_flag=True, default=False, help="Show passwords in clear text")
@click.pass_obj
def list_records(cli: PassGeniusCLI, archived: bool, reveal: bool) -> None:
    """List saved password records, newest first."""
    try:
        records = cli.list_records(archived=archived)
    except click.UsageError:
        raise
    except Exception as e:
        _fail(cli, "list records", e)
    print_record_table(records, reveal=reveal, archived=archived)


@cli.command()
@click.argument("identifier")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation")
@click.pass_obj
def archive(cli: PassGeniusCLI, identifier: str, yes: bool) -> None:
    """Move a record to the archive."""
    try:
        cli.ensure_authenticated()
        record = cli.get_record(identifier)
        if not yes and not click.confirm(f"Archive the password record for {record.username}?"):
            console.print("[yellow]Cancelled.[/]")
            return
        archived = cli.archive(record.id)
        console.print(f"[green]✓[/] Archived record for [bold]{escape(archived.username)}[/]")
    except click.UsageError:
        raise
    except Exception as e:
        _fail(cli, "archive record", e)


@cli.command()
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(list(EXPORT_FORMATS), case_sensitive=False),
    default="csv",
    show_default=True,
    help="Export format"
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, dir_okay=True),
    default=".",
    show_default=True,
    help="Directory for the backup file"
)
@click.pass_obj
def export(cli: PassGeniusCLI, fmt: str, output_dir: str) -> None:
    """Export active records to a CSV or XLSX backup."""
    try:
        path = cli.export(fmt, output_dir)
        console.print(f"[green]✓[/] Exported passwords to {escape(str(path))}")
    except click.UsageError:
        raise
    except Exception as e:
        _fail(cli, "export passwords", e)


@cli.command()
@click.argument("identifier")
@click.option("--to", "recipient", required=True, help="Recipient email address")
@click.pass_obj
def email(cli: PassGeniusCLI, identifier: str, recipient: str) -> None:
    """Email a password record to an address."""
    try:
        result = cli.email(identifier, recipient)
    except click.UsageError:
        raise
    except Exception as e:
        _fail(cli, "send email", e)

    if result.success:
        console.print(f"[green]✓[/] {escape(result.message)}")
    else:
        console.print(f"[red]✗[/] {escape(result.message)}")
        sys.exit(1)


@cli.command()
@click.argument("identifier")
@click.pass_obj
def copy_password(cli: PassGeniusCLI, identifier: str) -> None:
    """Copy a password to the clipboard."""
    try:
        cli.ensure_authenticated()
        record = cli.get_record(identifier)

        import pyperclip
        pyperclip.copy(record.password)

        console.print(f"[green]✓[/] Password for [bold]{escape(record.username)}[/] copied to clipboard")
    except click.UsageError:
        raise
    except Exception as e:
        _fail(cli, "copy password", e)


@cli.command()
@click.pass_obj
def tui(cli: PassGeniusCLI) -> None:
    """Launch the Terminal User Interface."""
    cli.ensure_authenticated()
    from ..tui import main as tui_main
    tui_main(cli.settings)


def main() -> None:
    """Entry point for the PassGenius CLI."""
    try:
        cli()
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""CLI application for obsctl using Rich and Typer."""

import json
import logging
from enum import Enum
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from obsctl import __version__
from obsctl.core.config import (
    AppContext,
    ConfigManager,
    default_config_path,
    get_env,
    setup_logging,
)
from obsctl.core.errors import ObsctlError
from obsctl.vault.records import NewTask, Priority, TaskFilter

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="obsctl",
    help="obsctl - local knowledge and task CLI for a markdown vault",
    no_args_is_help=True,
)
note_app = typer.Typer(help="Daily journal notes.", no_args_is_help=True)
task_app = typer.Typer(help="Tasks in Tasks/tasks.md.", no_args_is_help=True)
search_app = typer.Typer(help="Search the vault.", no_args_is_help=True)
config_app = typer.Typer(help="Vault location and config.", no_args_is_help=True)

app.add_typer(note_app, name="note")
app.add_typer(task_app, name="task")
app.add_typer(search_app, name="search")
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    OPEN = "open"
    DONE = "done"


def _context(ctx: typer.Context) -> AppContext:
    """Load the app context once per invocation."""
    obj = ctx.ensure_object(dict)
    if "app_context" not in obj:
        obj["app_context"] = AppContext.load(vault_override=obj.get("vault"))
    return obj["app_context"]


def _fail(err: Exception) -> None:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error: {escape(str(err))}[/red]")
    raise typer.Exit(1)


def _echo(text: str) -> None:
    # Ledger lines contain "[x]", which Rich would read as markup.
    console.print(text, markup=False, highlight=False, soft_wrap=True)


# --- note ---


@note_app.command("add")
def note_add(
    ctx: typer.Context,
    entry: list[str] = typer.Argument(..., help="Content to append into the daily note"),
):
    """Append a line to today's daily note."""
    try:
        journal = _context(ctx).journal()
        journal.append_today(" ".join(entry))
        _echo(f"Appended to {journal.today_path()}")
    except ObsctlError as e:
        _fail(e)


@note_app.command("open")
def note_open(
    ctx: typer.Context,
    date: Optional[str] = typer.Option(
        None, "--date", help="ISO date (YYYY-MM-DD) to open"
    ),
):
    """Print the path to today's (or a specific date's) note."""
    try:
        _echo(str(_context(ctx).journal().path_for(date)))
    except ObsctlError as e:
        _fail(e)


@note_app.command("list")
def note_list(
    ctx: typer.Context,
    limit: int = typer.Option(5, "--limit", help="Number of recent notes to list"),
):
    """List the most recent daily notes."""
    try:
        for path in _context(ctx).journal().list_recent(limit):
            _echo(str(path))
    except ObsctlError as e:
        _fail(e)


# --- task ---


@task_app.command("add")
def task_add(
    ctx: typer.Context,
    title: list[str] = typer.Argument(..., help="Task description"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    repeat: Optional[str] = typer.Option(
        None, "--repeat", help="Recurrence, e.g. 'every week'"
    ),
    priority: Optional[TaskPriority] = typer.Option(
        None, "--priority", help="Priority marker", case_sensitive=False
    ),
):
    """Add a new task to the vault."""
    try:
        new_task = NewTask(
            title=" ".join(title),
            due_date=due,
            recurrence=repeat,
            priority=Priority(priority.value) if priority else None,
        )
    except ValueError as e:
        _fail(e)
    try:
        task_id = _context(ctx).task_ledger().add(new_task)
        _echo(f"Added task #{task_id}")
    except ObsctlError as e:
        _fail(e)


@task_app.command("done")
def task_done(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task identifier to mark as done"),
):
    """Mark an existing task as complete."""
    try:
        _context(ctx).task_ledger().complete(task_id)
        _echo(f"Marked task #{task_id} as done")
    except ObsctlError as e:
        _fail(e)


@task_app.command("reopen")
def task_reopen(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task identifier to reopen"),
):
    """Mark a completed task as open again."""
    try:
        _context(ctx).task_ledger().reopen(task_id)
        _echo(f"Reopened task #{task_id}")
    except ObsctlError as e:
        _fail(e)


@task_app.command("list")
def task_list(
    ctx: typer.Context,
    status: Optional[TaskStatus] = typer.Option(
        None, "--status", help="Filter tasks by completion status", case_sensitive=False
    ),
):
    """List tasks, optionally filtered by status."""
    task_filter = TaskFilter(status.value) if status else TaskFilter.ALL
    try:
        for line in _context(ctx).task_ledger().list_tasks(task_filter):
            _echo(line)
    except ObsctlError as e:
        _fail(e)


@task_app.command("clean")
def task_clean(ctx: typer.Context):
    """Remove completed tasks from the task list."""
    try:
        removed = _context(ctx).task_ledger().purge()
        _echo(f"Removed {removed} completed task(s)")
    except ObsctlError as e:
        _fail(e)


# --- search ---


@search_app.command("grep")
def search_grep(
    ctx: typer.Context,
    query: list[str] = typer.Argument(..., help="Query string to search for"),
):
    """Run a fast literal/regex search using ripgrep."""
    try:
        if not _context(ctx).search().grep(" ".join(query)):
            err_console.print("[dim]No matches.[/dim]")
    except ObsctlError as e:
        _fail(e)


@search_app.command("fzf")
def search_fzf(
    ctx: typer.Context,
    query: list[str] = typer.Argument(..., help="Query string to search for"),
):
    """Fuzzy-find note paths using fzf."""
    try:
        _context(ctx).search().fuzzy(" ".join(query))
    except ObsctlError as e:
        _fail(e)


# --- config ---


@config_app.command("init")
def config_init(
    vault: Optional[str] = typer.Option(
        None, "--vault", help="Explicit vault directory path"
    ),
):
    """Initialize the vault layout and default config."""
    try:
        config = ConfigManager(default_config_path()).ensure_initialized(vault)
        _echo(f"Vault initialized at {config.vault.path}")
    except ObsctlError as e:
        _fail(e)


@config_app.command("path")
def config_path(
    ctx: typer.Context,
    set_path: Optional[str] = typer.Option(
        None, "--set", help="Update the vault path to the provided location"
    ),
):
    """Show or update the configured vault path."""
    try:
        if set_path:
            context = _context(ctx)
            ConfigManager(context.config_file).update_vault_path(set_path)
            _echo(f"Updated vault path to {set_path}")
        else:
            _echo(str(_context(ctx).vault_root))
    except ObsctlError as e:
        _fail(e)


# --- misc ---


@app.command()
def version(
    as_json: bool = typer.Option(False, "--json", help="Output version information as JSON"),
    verbose: bool = typer.Option(False, "--verbose", help="Show build metadata"),
):
    """Show the obsctl version."""
    info = {
        "name": "obsctl",
        "version": __version__,
        "description": "Local AI knowledge and task CLI",
        "git_commit": get_env("OBSCTL_GIT_COMMIT"),
        "build_timestamp": get_env("OBSCTL_BUILD_TS"),
    }
    info = {k: v for k, v in info.items() if v is not None}

    if as_json:
        _echo(json.dumps(info, indent=2))
        return

    _echo(f"{info['name']} {info['version']}")
    if verbose:
        _echo(info["description"])
        if "git_commit" in info:
            _echo(f"commit: {info['git_commit']}")
        if "build_timestamp" in info:
            _echo(f"built: {info['build_timestamp']}")


@app.command("mcp")
def serve_mcp(ctx: typer.Context):
    """Serve the MCP tools over stdio."""
    from obsctl.core.tools.vault_tools import VaultTools, set_vault_tools
    from obsctl.mcp.server import run_server

    try:
        set_vault_tools(VaultTools(_context(ctx)))
    except ObsctlError as e:
        _fail(e)
    run_server()


@app.callback()
def main(
    ctx: typer.Context,
    vault: Optional[str] = typer.Option(
        None,
        "--vault",
        help="Path to vault directory (default: configured path or $OBSCTL_VAULT)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
):
    """obsctl - local knowledge and task CLI for a markdown vault."""
    setup_logging("DEBUG" if debug else None)
    if debug:
        logger.debug("Debug logging enabled")
    ctx.ensure_object(dict)["vault"] = vault


def run_cli(args: list[str] | None = None):
    """Entry point for the CLI."""
    app(args=args)


if __name__ == "__main__":
    run_cli()

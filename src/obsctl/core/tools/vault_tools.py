"""Vault tools for appending notes, updating tasks, searching and summarizing.

These tools provide the interface between protocol front ends (the MCP
server) and the vault data layer. Each call builds fresh ledger/journal
objects, so every request re-reads the files it touches.
"""

import logging
from pathlib import Path

from obsctl.core.config import AppContext
from obsctl.core.errors import InvalidStatusError, TaskNotFoundError

logger = logging.getLogger(__name__)

DONE_WORDS = frozenset({"done", "complete", "completed", "finished"})
OPEN_WORDS = frozenset({"open", "todo", "pending", "reopen", "reopened"})

DEFAULT_QUERY_LIMIT = 5
MAX_QUERY_LIMIT = 50
SUMMARY_MAX_LINES = 12


def normalize_status(value: str) -> bool:
    """
    Map a status word to a done flag.

    Raises:
        InvalidStatusError: If the word is not a known status.
    """
    word = value.strip().lower()
    if word in DONE_WORDS:
        return True
    if word in OPEN_WORDS:
        return False
    raise InvalidStatusError(word)


def summarize_text(content: str, max_lines: int = SUMMARY_MAX_LINES) -> str:
    """Headings and bullet lines from a note, at most ``max_lines`` of them."""
    highlights = []
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith(("#", "- ", "* ")):
            highlights.append(stripped)
        if len(highlights) >= max_lines:
            break
    if not highlights:
        return "No notable entries found for today."
    return "\n".join(highlights)


class VaultTools:
    """Tools for vault operations."""

    def __init__(self, context: AppContext):
        """
        Initialize vault tools.

        Args:
            context: Loaded application context (vault root and settings)
        """
        self.context = context

    @property
    def vault_root(self) -> Path:
        return self.context.vault_root

    def append_daily_note(self, entry: str) -> str:
        """
        Append text to today's daily note.

        Args:
            entry: Freeform text

        Returns:
            Confirmation naming the note file
        """
        journal = self.context.journal()
        journal.append_today(entry)
        return f"Appended entry to {journal.today_path()}"

    def update_task_status(
        self,
        status: str,
        task_id: int | None = None,
        title: str | None = None,
    ) -> str:
        """
        Mark a task as done or reopen it.

        Args:
            status: Status word (done, completed, open, todo, ...)
            task_id: Task id; takes precedence over title
            title: Task title, matched case-insensitively

        Returns:
            Confirmation message

        Raises:
            InvalidStatusError: Unknown status word
            ValueError: Neither id nor title given
            TaskNotFoundError: No matching task
        """
        done = normalize_status(status)
        if task_id is None and not title:
            raise ValueError("either `id` or `title` must be provided")

        ledger = self.context.task_ledger()
        if task_id is not None:
            target = next((t for t in ledger.records() if t.id == task_id), None)
        else:
            target = ledger.find_by_title(title)
        if target is None:
            raise TaskNotFoundError(task_id=task_id, title=title)

        ledger.set_status(target.id, done)
        return f"Task #{target.id} marked as {'done' if done else 'open'}"

    def query_knowledge(self, query: str, limit: int | None = None) -> str:
        """
        Search the vault for matching lines.

        Args:
            query: ripgrep pattern
            limit: Maximum matches (1-50, default 5)

        Returns:
            One ``path:line: text`` per match, or a no-match message
        """
        if limit is None:
            limit = DEFAULT_QUERY_LIMIT
        limit = min(max(limit, 1), MAX_QUERY_LIMIT)
        matches = self.context.search().grep_matches(query, limit)
        if not matches:
            return f'No matches for "{query}"'
        return "\n".join(str(m) for m in matches)

    def summarize_today(self) -> str:
        """Today's note path followed by its headings and bullets."""
        journal = self.context.journal()
        path = journal.path_for(None)
        content = journal.read(None)
        return f"{path}\n{'-' * 40}\n{summarize_text(content)}"


# Default instance
_vault_tools: VaultTools | None = None


def get_vault_tools() -> VaultTools:
    """Get or create the default vault tools instance."""
    global _vault_tools
    if _vault_tools is None:
        _vault_tools = VaultTools(AppContext.load())
        logger.info("Vault tools bound to %s", _vault_tools.vault_root)
    return _vault_tools


def set_vault_tools(tools: VaultTools | None) -> None:
    """Set the default vault tools instance (for testing)."""
    global _vault_tools
    _vault_tools = tools

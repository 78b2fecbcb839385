"""Task ledger backed by a single markdown file (Tasks/tasks.md).

Every operation re-reads the whole file; mutations rewrite it in full.
There is no cross-process lock: two concurrent writers race and the last
full-file write wins. Lines that are not task records are never touched.
"""

import logging
from pathlib import Path

from obsctl.core.errors import TaskNotFoundError, VaultIOError
from obsctl.vault.layout import get_tasks_file
from obsctl.vault.records import (
    NewTask,
    TaskFilter,
    TaskRecord,
    parse_lines,
    with_status,
)
from obsctl.vault.templates import TemplateProvider

logger = logging.getLogger(__name__)


class TaskLedger:
    """Add, complete, reopen, list and purge tasks in the ledger file."""

    def __init__(self, vault_root: Path, templates: TemplateProvider | None = None):
        """
        Bind the ledger to a vault.

        Args:
            vault_root: Root path of the vault
            templates: Source of the skeleton for a new ledger file
        """
        self.vault_root = Path(vault_root)
        self.path = get_tasks_file(self.vault_root)
        self.templates = templates or TemplateProvider(self.vault_root)

    def add(self, task: NewTask) -> int:
        """
        Append a new open task.

        Returns:
            The assigned id: one more than the largest existing id.
        """
        content = self._read_text()
        records = parse_lines(_split_lines(content))
        next_id = max((r.id for r in records), default=0) + 1

        # Keep the previous last line intact when it lacks a newline.
        prefix = "\n" if content and not content.endswith("\n") else ""
        self._append(prefix + task.render(next_id) + "\n")
        logger.info("Added task #%d to %s", next_id, self.path)
        return next_id

    def set_status(self, task_id: int, done: bool) -> None:
        """
        Mark a task done or open, editing only its status bracket.

        Raises:
            TaskNotFoundError: If no record has ``task_id``; the file is left
                unchanged.
        """
        lines = self._read_lines()
        for index, line in enumerate(lines):
            record = TaskRecord.parse(line)
            if record is None or record.id != task_id:
                continue
            updated = with_status(line, done)
            if updated == line:
                logger.debug("Task #%d already %s", task_id, _label(done))
                return
            lines[index] = updated
            self._write_lines(lines)
            logger.info("Task #%d marked as %s", task_id, _label(done))
            return
        raise TaskNotFoundError(task_id)

    def complete(self, task_id: int) -> None:
        self.set_status(task_id, True)

    def reopen(self, task_id: int) -> None:
        self.set_status(task_id, False)

    def list_tasks(self, task_filter: TaskFilter = TaskFilter.ALL) -> list[str]:
        """Raw text of matching records, top to bottom."""
        return [r.raw_text for r in self.records() if task_filter.matches(r)]

    def purge(self) -> int:
        """
        Remove every done task; other lines stay in place.

        Returns:
            Number of removed task lines.
        """
        lines = self._read_lines()
        kept = [
            line
            for line in lines
            if (record := TaskRecord.parse(line)) is None or not record.done
        ]
        removed = len(lines) - len(kept)
        if removed:
            self._write_lines(kept)
        logger.info("Purged %d completed task(s) from %s", removed, self.path)
        return removed

    def find_by_title(self, title: str) -> TaskRecord | None:
        """First record whose title equals ``title``, ignoring case."""
        wanted = title.casefold()
        for record in self.records():
            if record.title.casefold() == wanted:
                return record
        return None

    def get(self, task_id: int) -> TaskRecord:
        """
        Look a record up by id.

        Raises:
            TaskNotFoundError: If no record has ``task_id``.
        """
        for record in self.records():
            if record.id == task_id:
                return record
        raise TaskNotFoundError(task_id)

    def records(self) -> list[TaskRecord]:
        """Every record in file order."""
        return parse_lines(self._read_lines())

    # ---- file access ----

    def _ensure_file(self) -> None:
        if self.path.exists():
            return
        template = self.templates.task_template()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(template)
        except OSError as e:
            raise VaultIOError("create tasks file", self.path, e) from e
        logger.info("Created task ledger %s", self.path)

    def _read_text(self) -> str:
        self._ensure_file()
        try:
            with open(self.path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise VaultIOError("read tasks file", self.path, e) from e

    def _read_lines(self) -> list[str]:
        return _split_lines(self._read_text())

    def _write_lines(self, lines: list[str]) -> None:
        text = "\n".join(lines) + "\n" if lines else ""
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise VaultIOError("write tasks file", self.path, e) from e

    def _append(self, text: str) -> None:
        try:
            with open(self.path, "a", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise VaultIOError("open tasks file", self.path, e) from e


def _split_lines(content: str) -> list[str]:
    # "\n" only; a trailing newline does not start another line.
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _label(done: bool) -> str:
    return "done" if done else "open"

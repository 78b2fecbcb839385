"""Task record codec for the markdown task ledger.

A task line looks like::

    - [ ] (12) Water the plants 📅 2024-05-01 🔁 every week ⏫

The bracket holds the status (``x``/``X`` = done), the parenthesised integer
is the task id, and the remainder is the title followed by optional marker
glyphs for due date, recurrence and priority. Lines that do not match are
not records and are passed through untouched by every ledger rewrite.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum

from pydantic import BaseModel, field_validator

OPEN_TOKEN = "[ ]"
DONE_TOKEN = "[x]"

# "- [" + status char + "]"
_PREFIX = "- ["
_STATUS_INDEX = 3
_CLOSE_INDEX = 4


class Marker(StrEnum):
    """Inline metadata glyphs."""

    DUE = "📅"
    RECURRENCE = "🔁"
    PRIORITY_LOW = "⬇️"
    PRIORITY_MEDIUM = "⏫"
    PRIORITY_HIGH = "🔥"


class Priority(Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def marker(self) -> Marker:
        return _PRIORITY_MARKERS[self]


_PRIORITY_MARKERS = {
    Priority.LOW: Marker.PRIORITY_LOW,
    Priority.MEDIUM: Marker.PRIORITY_MEDIUM,
    Priority.HIGH: Marker.PRIORITY_HIGH,
}
_MARKER_PRIORITIES = {marker: priority for priority, marker in _PRIORITY_MARKERS.items()}


class TaskFilter(Enum):
    """Which records a listing returns."""

    ALL = "all"
    OPEN = "open"
    DONE = "done"

    def matches(self, record: "TaskRecord") -> bool:
        if self is TaskFilter.OPEN:
            return not record.done
        if self is TaskFilter.DONE:
            return record.done
        return True


class NewTask(BaseModel, frozen=True):
    """A task about to be added to the ledger."""

    title: str
    due_date: str | None = None
    recurrence: str | None = None
    priority: Priority | None = None

    @field_validator("title")
    @classmethod
    def _validate_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("title", "due_date", "recurrence")
    @classmethod
    def _single_line(cls, value: str | None) -> str | None:
        if value is not None and ("\n" in value or "\r" in value):
            raise ValueError("task fields must be a single line")
        return value

    @field_validator("title", "due_date", "recurrence")
    @classmethod
    def _no_markers(cls, value: str | None) -> str | None:
        # A glyph here would end the field early when the line is parsed back.
        if value is not None and any(marker in value for marker in Marker):
            raise ValueError("task fields must not contain marker glyphs")
        return value

    def render(self, task_id: int) -> str:
        """Render as a ledger line: title, then due, recurrence, priority."""
        line = f"- {OPEN_TOKEN} ({task_id}) {self.title}"
        if self.due_date:
            line += f" {Marker.DUE} {self.due_date}"
        if self.recurrence:
            line += f" {Marker.RECURRENCE} {self.recurrence}"
        if self.priority is not None:
            line += f" {self.priority.marker}"
        return line


@dataclass(frozen=True)
class TaskRecord:
    """One parsed ledger line."""

    id: int
    done: bool
    title: str
    raw_text: str
    due_date: str | None = None
    recurrence: str | None = None
    priority: Priority | None = None

    @classmethod
    def parse(cls, line: str) -> "TaskRecord | None":
        """Parse a line, returning None for anything that is not a task record."""
        trimmed = line.strip()
        if not trimmed.startswith(_PREFIX) or len(trimmed) <= _CLOSE_INDEX:
            return None
        # The status bracket must hold exactly one character.
        if trimmed[_CLOSE_INDEX] != "]":
            return None
        done = trimmed[_STATUS_INDEX] in ("x", "X")

        after_bracket = trimmed[_CLOSE_INDEX + 1 :].strip()
        if not after_bracket.startswith("("):
            return None
        end = after_bracket.find(")")
        if end < 0:
            return None
        id_text = after_bracket[1:end]
        if not (id_text.isascii() and id_text.isdigit()):
            return None

        remainder = after_bracket[end + 1 :].strip()
        due_date, recurrence, priority = _parse_markers(remainder)
        return cls(
            id=int(id_text),
            done=done,
            title=extract_title(remainder),
            raw_text=trimmed,
            due_date=due_date,
            recurrence=recurrence,
            priority=priority,
        )


def extract_title(remainder: str) -> str:
    """Text before the earliest marker glyph, trimmed."""
    end = len(remainder)
    for marker in Marker:
        idx = remainder.find(marker)
        if idx >= 0:
            end = min(end, idx)
    return remainder[:end].strip()


def _parse_markers(
    remainder: str,
) -> tuple[str | None, str | None, Priority | None]:
    found = sorted(
        (idx, marker)
        for marker in Marker
        if (idx := remainder.find(marker)) >= 0
    )
    due_date = recurrence = None
    priority = None
    for pos, (idx, marker) in enumerate(found):
        start = idx + len(marker)
        stop = found[pos + 1][0] if pos + 1 < len(found) else len(remainder)
        value = remainder[start:stop].strip() or None
        if marker is Marker.DUE:
            due_date = value
        elif marker is Marker.RECURRENCE:
            recurrence = value
        elif priority is None:
            priority = _MARKER_PRIORITIES[marker]
    return due_date, recurrence, priority


def with_status(line: str, done: bool) -> str:
    """Flip the status bracket of a record line, leaving every other byte alone.

    Marking done always yields ``[x]``. Reopening an already open line (which
    may carry a custom status character such as ``[/]``) leaves it unchanged.
    """
    start = len(line) - len(line.lstrip())
    bracket = line[start + 2 : start + _CLOSE_INDEX + 1]
    if done:
        target = DONE_TOKEN
    elif bracket in ("[x]", "[X]"):
        target = OPEN_TOKEN
    else:
        return line
    return line[: start + 2] + target + line[start + _CLOSE_INDEX + 1 :]


def parse_lines(lines: list[str]) -> list[TaskRecord]:
    """All records in ``lines``, in order."""
    return [record for line in lines if (record := TaskRecord.parse(line))]

"""Daily journal notes: one markdown file per day under Journal/.

Files are named ``YYYY-MM-DD.md`` and created lazily from the daily template.
Existing days are only ever appended to.
"""

import logging
from datetime import date, datetime
from pathlib import Path

from obsctl.core.errors import InvalidDateError, VaultIOError
from obsctl.vault.layout import get_journal_dir
from obsctl.vault.templates import TemplateProvider

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """
    Parse an ISO ``YYYY-MM-DD`` date.

    Raises:
        InvalidDateError: If ``value`` is not a valid date.
    """
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateError(value) from e


def filename_for(target_date: date) -> str:
    return f"{target_date.isoformat()}.md"


class JournalStore:
    """Locate, create, append to and list daily notes."""

    def __init__(self, vault_root: Path, templates: TemplateProvider | None = None):
        """
        Bind the store to a vault.

        Args:
            vault_root: Root path of the vault
            templates: Source of the daily note skeleton
        """
        self.vault_root = Path(vault_root)
        self.journal_dir = get_journal_dir(self.vault_root)
        self.templates = templates or TemplateProvider(self.vault_root)

    def append_today(self, text: str) -> Path:
        """Append a line to today's note, creating it if needed."""
        return self.append_for_date(date.today(), text)

    def append_for_date(self, target_date: date | str, text: str) -> Path:
        """
        Append ``text`` plus a newline to the note for ``target_date``.

        Args:
            target_date: A date, or an ISO date string
            text: Content to append

        Returns:
            Path of the note written to
        """
        if isinstance(target_date, str):
            target_date = parse_date(target_date)
        path = self._path(target_date)
        self._ensure_daily_file(path, target_date)
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{text}\n")
        except OSError as e:
            raise VaultIOError("open daily note", path, e) from e
        logger.info("Appended %d chars to %s", len(text), path)
        return path

    def path_for(self, target_date: date | str | None = None) -> Path:
        """
        Path to the note for a day (today when omitted), creating it if missing.

        Raises:
            InvalidDateError: If a date string is malformed.
        """
        if target_date is None:
            target_date = date.today()
        elif isinstance(target_date, str):
            target_date = parse_date(target_date)
        path = self._path(target_date)
        self._ensure_daily_file(path, target_date)
        return path

    def today_path(self) -> Path:
        """Path to today's note. Does not create it."""
        return self._path(date.today())

    def list_recent(self, limit: int) -> list[Path]:
        """Newest-first journal files, at most ``limit`` of them."""
        if limit <= 0:
            return []
        try:
            self.journal_dir.mkdir(parents=True, exist_ok=True)
            entries = [
                p for p in self.journal_dir.iterdir() if p.is_file() and p.suffix == ".md"
            ]
        except OSError as e:
            raise VaultIOError("list journal directory", self.journal_dir, e) from e
        # ISO file names sort chronologically.
        entries.sort(key=lambda p: p.name, reverse=True)
        return entries[:limit]

    def read(self, target_date: date | str | None = None) -> str:
        """Contents of a day's note, creating it from the template if missing."""
        path = self.path_for(target_date)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise VaultIOError("read daily note", path, e) from e

    def _path(self, target_date: date) -> Path:
        return self.journal_dir / filename_for(target_date)

    def _ensure_daily_file(self, path: Path, target_date: date) -> None:
        if path.exists():
            return
        filled = self.templates.render_daily(target_date.isoformat())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(filled, encoding="utf-8")
        except OSError as e:
            raise VaultIOError("create daily note", path, e) from e
        logger.info("Created daily note %s", path)

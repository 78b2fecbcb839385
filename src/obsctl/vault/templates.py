"""Default file skeletons for daily notes and the task ledger."""

import logging
from pathlib import Path

from obsctl.core.errors import VaultIOError

logger = logging.getLogger(__name__)

DATE_PLACEHOLDER = "{{date}}"

DAILY_TEMPLATE = (
    "# Daily {{date}}\n"
    "\n"
    "## Highlights\n"
    "\n"
    "- \n"
    "\n"
    "## Tasks\n"
    "\n"
    "- [ ] \n"
    "\n"
    "## Notes\n"
    "\n"
    "- \n"
)

TASK_TEMPLATE = """# Tasks

- [ ] Example task
"""


class TemplateProvider:
    """Supplies template contents, writing the built-in default first if missing."""

    def __init__(
        self,
        vault_root: Path,
        daily_path: Path | str | None = None,
        task_path: Path | str | None = None,
    ):
        """
        Initialize the provider.

        Args:
            vault_root: Root path of the vault
            daily_path: Daily note template (default: templates/daily.md)
            task_path: Task ledger template (default: templates/task.md)
        """
        templates_dir = Path(vault_root) / "templates"
        self.daily_path = Path(daily_path or templates_dir / "daily.md").expanduser()
        self.task_path = Path(task_path or templates_dir / "task.md").expanduser()

    def daily_template(self) -> str:
        return self._load(self.daily_path, DAILY_TEMPLATE)

    def task_template(self) -> str:
        return self._load(self.task_path, TASK_TEMPLATE)

    def render_daily(self, date_text: str) -> str:
        """Daily template with the date placeholder filled in."""
        return self.daily_template().replace(DATE_PLACEHOLDER, date_text)

    def install_defaults(self) -> None:
        """Write both default templates unless they already exist."""
        _ensure_file(self.daily_path, DAILY_TEMPLATE)
        _ensure_file(self.task_path, TASK_TEMPLATE)

    def _load(self, path: Path, default: str) -> str:
        _ensure_file(path, default)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise VaultIOError("read template", path, e) from e


def _ensure_file(path: Path, default: str) -> None:
    if path.exists():
        return
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(default, encoding="utf-8")
    except OSError as e:
        raise VaultIOError("write template", path, e) from e
    logger.info("Installed default template %s", path)

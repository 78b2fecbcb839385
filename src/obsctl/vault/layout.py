"""Vault layout and path helpers.

    <vault>/
        Journal/YYYY-MM-DD.md
        Tasks/tasks.md
        Projects/
        templates/daily.md, templates/task.md
"""

import logging
from pathlib import Path

from obsctl.core.errors import VaultIOError
from obsctl.vault.templates import TemplateProvider

logger = logging.getLogger(__name__)

JOURNAL_DIR = "Journal"
TASKS_DIR = "Tasks"
TASKS_FILENAME = "tasks.md"
PROJECTS_DIR = "Projects"
TEMPLATES_DIR = "templates"

# Seed for a ledger created while initializing a vault.
TASKS_SEED = "# Tasks\n\n"


def get_journal_dir(vault_root: Path) -> Path:
    """
    Get the journal folder path.

    Args:
        vault_root: Root path of the vault

    Returns:
        Path to the folder holding one file per day
    """
    return Path(vault_root) / JOURNAL_DIR


def get_tasks_file(vault_root: Path) -> Path:
    """
    Get the task ledger path.

    Args:
        vault_root: Root path of the vault

    Returns:
        Path to Tasks/tasks.md
    """
    return Path(vault_root) / TASKS_DIR / TASKS_FILENAME


def get_projects_dir(vault_root: Path) -> Path:
    """Get the projects folder path."""
    return Path(vault_root) / PROJECTS_DIR


def get_templates_dir(vault_root: Path) -> Path:
    """Get the templates folder path."""
    return Path(vault_root) / TEMPLATES_DIR


def ensure_vault_structure(
    vault_root: Path, templates: TemplateProvider | None = None
) -> None:
    """
    Ensure the vault directory structure exists.

    Creates the standard folders, seeds an empty task ledger and installs the
    default templates. Existing files are never overwritten, so this is safe
    to call multiple times.
    """
    vault_root = Path(vault_root)
    try:
        for folder in (
            get_journal_dir(vault_root),
            get_tasks_file(vault_root).parent,
            get_projects_dir(vault_root),
            get_templates_dir(vault_root),
        ):
            folder.mkdir(parents=True, exist_ok=True)

        tasks_file = get_tasks_file(vault_root)
        if not tasks_file.exists():
            tasks_file.write_text(TASKS_SEED, encoding="utf-8")
    except OSError as e:
        raise VaultIOError("initialize vault", vault_root, e) from e

    (templates or TemplateProvider(vault_root)).install_defaults()
    logger.debug("Vault structure ensured at %s", vault_root)


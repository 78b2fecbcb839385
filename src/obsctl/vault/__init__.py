"""Vault data layer: the markdown task ledger and the daily journal.

The vault is a directory of plain markdown files that stays editable by hand
(VS Code, Obsidian, git). This package treats two kinds of files as a small
flat-file database:
- Tasks/tasks.md, an append-growing ledger of numbered checkbox lines
- Journal/YYYY-MM-DD.md, one note per day
"""

from obsctl.vault.journal import JournalStore
from obsctl.vault.layout import ensure_vault_structure
from obsctl.vault.records import NewTask, Priority, TaskFilter, TaskRecord
from obsctl.vault.tasks import TaskLedger
from obsctl.vault.templates import TemplateProvider

__all__ = [
    "JournalStore",
    "NewTask",
    "Priority",
    "TaskFilter",
    "TaskLedger",
    "TaskRecord",
    "TemplateProvider",
    "ensure_vault_structure",
]

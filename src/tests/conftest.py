"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

import obsctl.core.config as config
from obsctl.core.config import AppContext
from obsctl.vault.journal import JournalStore
from obsctl.vault.tasks import TaskLedger
from obsctl.vault.templates import TemplateProvider


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.obsctl and environment."""
    home = tmp_path / "obsctl-home"
    monkeypatch.setattr(config, "OBSCTL_HOME", home)
    monkeypatch.delenv("OBSCTL_VAULT", raising=False)
    monkeypatch.delenv("OBSCTL_GIT_COMMIT", raising=False)
    monkeypatch.delenv("OBSCTL_BUILD_TS", raising=False)
    return home


@pytest.fixture
def vault_root(tmp_path) -> Path:
    """An empty vault directory."""
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def templates(vault_root) -> TemplateProvider:
    return TemplateProvider(vault_root)


@pytest.fixture
def ledger(vault_root, templates) -> TaskLedger:
    return TaskLedger(vault_root, templates)


@pytest.fixture
def journal(vault_root, templates) -> JournalStore:
    return JournalStore(vault_root, templates)


@pytest.fixture
def write_ledger(ledger):
    """Write raw text to the ledger file."""

    def _write(text: str) -> Path:
        ledger.path.parent.mkdir(parents=True, exist_ok=True)
        ledger.path.write_bytes(text.encode("utf-8"))
        return ledger.path

    return _write


@pytest.fixture
def read_ledger(ledger):
    """Read the ledger file exactly as stored."""

    def _read() -> str:
        return ledger.path.read_bytes().decode("utf-8")

    return _read


@pytest.fixture
def app_context(tmp_path, vault_root) -> AppContext:
    """Context loaded from a config file in a temporary home."""
    config_file = tmp_path / "obsctl-home" / "config.yaml"
    manager = config.ConfigManager(config_file)
    manager.ensure_initialized(vault_root)
    return AppContext.load(config_file)


@pytest.fixture
def sample_ledger() -> str:
    """Ledger with a heading, blank lines, prose and three tasks."""
    return (
        "# Tasks\n"
        "\n"
        "- [ ] (1) Buy milk\n"
        "Some prose between tasks.\n"
        "- [x] (2) Pay rent 📅 2024-02-01\n"
        "\n"
        "- [ ] (3) Call mom 🔁 every week 🔥\n"
    )

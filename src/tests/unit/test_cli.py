"""Tests for the obsctl CLI."""

import json
from datetime import date

import pytest
from typer.testing import CliRunner

from obsctl import __version__
from obsctl.interfaces.cli.app import app
from obsctl.search import SearchService

runner = CliRunner()


@pytest.fixture
def invoke(vault_root):
    """Run the CLI against the test vault."""

    def _invoke(*args: str):
        return runner.invoke(app, ["--vault", str(vault_root), *args])

    return _invoke


@pytest.fixture
def tasks_file(vault_root):
    return vault_root / "Tasks" / "tasks.md"


class TestNoteCommands:
    """Tests for `obsctl note`."""

    def test_add(self, invoke, vault_root):
        result = invoke("note", "add", "Met", "Ana")

        assert result.exit_code == 0
        today = vault_root.resolve() / "Journal" / f"{date.today().isoformat()}.md"
        assert f"Appended to {today}" in result.output
        assert today.read_text(encoding="utf-8").endswith("Met Ana\n")

    def test_open_specific_date(self, invoke, vault_root):
        result = invoke("note", "open", "--date", "2024-02-03")

        path = vault_root.resolve() / "Journal" / "2024-02-03.md"
        assert result.exit_code == 0
        assert result.output.strip() == str(path)
        assert path.exists()

    def test_open_invalid_date(self, invoke):
        result = invoke("note", "open", "--date", "03/02/2024")

        assert result.exit_code == 1
        assert "invalid date format" in result.output

    def test_list(self, invoke, vault_root):
        for day in ("2024-01-01", "2024-01-03", "2024-01-02"):
            invoke("note", "open", "--date", day)

        result = invoke("note", "list", "--limit", "2")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            str(vault_root.resolve() / "Journal" / "2024-01-03.md"),
            str(vault_root.resolve() / "Journal" / "2024-01-02.md"),
        ]


class TestTaskCommands:
    """Tests for `obsctl task`."""

    def test_add_and_list(self, invoke, tasks_file):
        result = invoke(
            "task", "add", "Water", "plants",
            "--due", "2024-05-01", "--repeat", "every week", "--priority", "high",
        )

        assert result.exit_code == 0
        assert "Added task #1" in result.output
        assert tasks_file.read_text(encoding="utf-8").endswith(
            "- [ ] (1) Water plants 📅 2024-05-01 🔁 every week 🔥\n"
        )

        listed = invoke("task", "list")
        assert listed.output.splitlines() == [
            "- [ ] (1) Water plants 📅 2024-05-01 🔁 every week 🔥"
        ]

    def test_add_blank_title(self, invoke):
        result = invoke("task", "add", "   ")

        assert result.exit_code == 1
        assert "title must not be empty" in result.output

    def test_add_title_with_marker(self, invoke, tasks_file):
        result = invoke("task", "add", "Fix", "🔥", "alarm")

        assert result.exit_code == 1
        assert "marker glyphs" in result.output
        assert not tasks_file.exists()

    def test_add_bad_priority(self, invoke):
        result = invoke("task", "add", "x", "--priority", "urgent")

        assert result.exit_code != 0

    def test_done_and_reopen(self, invoke, tasks_file):
        invoke("task", "add", "First")
        invoke("task", "add", "Second")

        done = invoke("task", "done", "2")
        assert done.exit_code == 0
        assert "Marked task #2 as done" in done.output
        assert "- [x] (2) Second\n" in tasks_file.read_text(encoding="utf-8")

        reopened = invoke("task", "reopen", "2")
        assert reopened.exit_code == 0
        assert "Reopened task #2" in reopened.output
        assert "- [ ] (2) Second\n" in tasks_file.read_text(encoding="utf-8")

    def test_done_unknown_id(self, invoke, tasks_file):
        invoke("task", "add", "Only")
        before = tasks_file.read_text(encoding="utf-8")

        result = invoke("task", "done", "99")

        assert result.exit_code == 1
        assert "task #99 was not found" in result.output
        assert tasks_file.read_text(encoding="utf-8") == before

    def test_list_by_status(self, invoke):
        invoke("task", "add", "A")
        invoke("task", "add", "B")
        invoke("task", "done", "1")

        assert invoke("task", "list", "--status", "done").output.splitlines() == [
            "- [x] (1) A"
        ]
        assert invoke("task", "list", "--status", "open").output.splitlines() == [
            "- [ ] (2) B"
        ]

    def test_clean(self, invoke, tasks_file):
        invoke("task", "add", "A")
        invoke("task", "add", "B")
        invoke("task", "done", "1")

        result = invoke("task", "clean")

        assert result.exit_code == 0
        assert "Removed 1 completed task(s)" in result.output
        assert tasks_file.read_text(encoding="utf-8") == (
            "# Tasks\n\n- [ ] Example task\n- [ ] (2) B\n"
        )


class TestSearchCommands:
    """Tests for `obsctl search`."""

    def test_grep_no_matches(self, invoke, monkeypatch):
        monkeypatch.setattr(SearchService, "grep", lambda self, query: False)

        result = invoke("search", "grep", "zebra")

        assert result.exit_code == 0
        assert "No matches." in result.output

    def test_grep_passes_joined_query(self, invoke, monkeypatch):
        seen = []
        monkeypatch.setattr(
            SearchService, "grep", lambda self, query: seen.append(query) or True
        )

        result = invoke("search", "grep", "water", "plants")

        assert result.exit_code == 0
        assert seen == ["water plants"]

    def test_missing_tool(self, invoke, monkeypatch):
        monkeypatch.setattr(SearchService, "_rg_args", lambda self: ["obsctl-no-such-rg"])

        result = invoke("search", "grep", "anything")

        assert result.exit_code == 1
        assert "was not found in PATH" in result.output


class TestConfigCommands:
    """Tests for `obsctl config`."""

    def test_init_with_vault(self, tmp_path, isolated_home):
        target = tmp_path / "fresh"

        result = runner.invoke(app, ["config", "init", "--vault", str(target)])

        assert result.exit_code == 0
        assert "Vault initialized at" in result.output
        assert (target / "Tasks" / "tasks.md").exists()
        assert (isolated_home / "config.yaml").exists()

    def test_path_shows_vault(self, invoke, vault_root):
        result = invoke("config", "path")

        assert result.exit_code == 0
        assert result.output.strip() == str(vault_root.resolve())

    def test_path_set(self, tmp_path, isolated_home):
        runner.invoke(app, ["config", "init"])
        target = tmp_path / "moved"

        result = runner.invoke(app, ["config", "path", "--set", str(target)])

        assert result.exit_code == 0
        assert f"Updated vault path to {target}" in result.output
        shown = runner.invoke(app, ["config", "path"])
        assert shown.output.strip() == str(target.resolve())


class TestVersion:
    """Tests for `obsctl version`."""

    def test_plain(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"obsctl {__version__}"

    def test_json(self, monkeypatch):
        monkeypatch.setenv("OBSCTL_GIT_COMMIT", "abc123")

        result = runner.invoke(app, ["version", "--json"])

        info = json.loads(result.output)
        assert info["name"] == "obsctl"
        assert info["version"] == __version__
        assert info["git_commit"] == "abc123"
        assert "build_timestamp" not in info

    def test_verbose(self, monkeypatch):
        monkeypatch.setenv("OBSCTL_BUILD_TS", "2024-01-01T00:00:00Z")

        result = runner.invoke(app, ["version", "--verbose"])

        assert "built: 2024-01-01T00:00:00Z" in result.output
        assert "commit:" not in result.output

"""Tests for obsctl.main module."""

import sys
from unittest.mock import MagicMock

import pytest

from obsctl.main import main


@pytest.fixture
def mock_cli_app(monkeypatch):
    """Provide a mocked CLI app module."""
    module = MagicMock()
    module.run_cli = MagicMock()
    monkeypatch.setitem(sys.modules, "obsctl.interfaces.cli.app", module)
    return module


@pytest.fixture
def mock_mcp_server(monkeypatch):
    """Provide a mocked MCP server module."""
    module = MagicMock()
    module.main = MagicMock()
    monkeypatch.setitem(sys.modules, "obsctl.mcp.server", module)
    return module


class TestMainEntryPoint:
    """Tests for the main entry point and interface selection."""

    def test_main_defaults_to_cli(self, monkeypatch, mock_cli_app):
        """Without an interface name all arguments go to the CLI."""
        monkeypatch.setattr(sys, "argv", ["obsctl", "task", "list"])

        main()

        mock_cli_app.run_cli.assert_called_once_with(["task", "list"])

    def test_main_accepts_cli_arg(self, mock_cli_app):
        """Explicit cli argument is stripped before dispatch."""
        main(["cli", "--vault", "/tmp/v", "note", "add", "hi"])

        mock_cli_app.run_cli.assert_called_once_with(
            ["--vault", "/tmp/v", "note", "add", "hi"]
        )

    def test_main_accepts_mcp_arg(self, mock_cli_app, mock_mcp_server):
        """mcp argument starts the MCP server instead of the CLI."""
        main(["mcp"])

        mock_mcp_server.main.assert_called_once()
        mock_cli_app.run_cli.assert_not_called()

    def test_main_empty_argv(self, mock_cli_app):
        """No arguments still reach the CLI, which prints its help."""
        main([])

        mock_cli_app.run_cli.assert_called_once_with([])

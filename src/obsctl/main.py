"""Unified entry point for obsctl.

This module provides a unified entry point that can start different interfaces:
- CLI (default)
- MCP stdio server

Examples:
  python -m obsctl.main task list          # CLI command
  python -m obsctl.main cli note add hi    # explicit CLI
  python -m obsctl.main mcp                # MCP server
"""

import sys

INTERFACES = ("cli", "mcp")


def main(argv: list[str] | None = None):
    """Main entry point with interface selection."""
    argv = list(sys.argv[1:] if argv is None else argv)
    interface = argv.pop(0) if argv and argv[0] in INTERFACES else "cli"

    if interface == "mcp":
        from obsctl.mcp.server import main as run_mcp

        run_mcp()

    else:
        from obsctl.interfaces.cli.app import run_cli

        run_cli(argv)


if __name__ == "__main__":
    main()

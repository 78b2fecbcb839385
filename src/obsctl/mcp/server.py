"""obsctl MCP server.

Exposes daily note append, task updates, search and summaries as MCP tools
over stdio. Tool handlers run one at a time against the vault; each call
re-reads the files it touches.
"""

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from obsctl.core.config import setup_logging
from obsctl.core.errors import ObsctlError
from obsctl.core.tools.vault_tools import get_vault_tools

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "obsctl",
    instructions=(
        "Tools expose daily note append, task updates, search, and summaries."
    ),
)


@mcp.tool(
    annotations=ToolAnnotations(
        title="Append Daily Note", destructiveHint=False, idempotentHint=False
    ),
)
def append_daily_note(
    entry: Annotated[
        str,
        Field(description="Freeform text that will be appended to today's daily note."),
    ],
) -> str:
    """Append text to today's daily note."""
    try:
        return get_vault_tools().append_daily_note(entry)
    except ObsctlError as e:
        logger.error("append_daily_note failed: %s", e)
        raise ToolError(f"append daily note failed: {e}") from e


@mcp.tool(
    annotations=ToolAnnotations(
        title="Update Task Status", destructiveHint=False, idempotentHint=True
    ),
)
def update_task_status(
    status: Annotated[
        str, Field(description="done, completed, complete, open, todo or pending")
    ],
    id: Annotated[int | None, Field(ge=1, description="Task id")] = None,
    title: Annotated[str | None, Field(description="Task title")] = None,
) -> str:
    """Mark a task as done or reopen it."""
    try:
        return get_vault_tools().update_task_status(status, task_id=id, title=title)
    except (ObsctlError, ValueError) as e:
        logger.warning("update_task_status failed: %s", e)
        raise ToolError(str(e)) from e


@mcp.tool(
    annotations=ToolAnnotations(
        title="Query Knowledge", readOnlyHint=True, idempotentHint=True
    ),
)
def query_knowledge(
    query: str,
    limit: Annotated[int, Field(ge=1, le=50)] = 5,
) -> str:
    """Search the vault for matching lines."""
    try:
        return get_vault_tools().query_knowledge(query, limit)
    except ObsctlError as e:
        logger.error("query_knowledge failed: %s", e)
        raise ToolError(f"run search failed: {e}") from e


@mcp.tool(
    annotations=ToolAnnotations(
        title="Summarize Today", readOnlyHint=True, idempotentHint=True
    ),
)
def summarize_today(scope: str = "today") -> str:
    """Summarize today's daily note in plain text."""
    if scope.lower() != "today":
        raise ToolError('scope must be "today"')
    try:
        return get_vault_tools().summarize_today()
    except ObsctlError as e:
        logger.error("summarize_today failed: %s", e)
        raise ToolError(f"summarize today failed: {e}") from e


def run_server() -> None:
    """Serve the tools over stdio until the client disconnects."""
    tools = get_vault_tools()
    logger.info("Starting obsctl MCP server for vault %s", tools.vault_root)
    mcp.run(transport="stdio")


def main() -> None:
    """Entry point for the obsctl-mcp script."""
    setup_logging()
    run_server()


if __name__ == "__main__":
    main()

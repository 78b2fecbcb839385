"""Full-text search over the vault via ripgrep, with fzf for fuzzy file picking."""

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from obsctl.core.errors import SearchError

logger = logging.getLogger(__name__)

# Config names that differ from the executable
_TOOL_BINARIES = {"ripgrep": "rg"}
_TOOL_PACKAGES = {binary: package for package, binary in _TOOL_BINARIES.items()}

_INSTALL_HINT = """`{binary}` was not found in PATH. Please install it before using `obsctl search`. For example:
  - macOS (Homebrew): brew install {package}
  - Ubuntu/Debian:   sudo apt-get install {package}
  - Arch Linux:      sudo pacman -S {package}"""


@dataclass(frozen=True)
class SearchMatch:
    """A single matching line."""

    path: str
    line_number: int
    line: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line_number}: {self.line}"


class SearchService:
    """Runs ripgrep (and fzf) with the vault as working directory."""

    def __init__(self, vault_root: Path, tool: str = "ripgrep", fzf_preview: bool = True):
        self.root = Path(vault_root)
        self.tool = tool
        self.rg = _TOOL_BINARIES.get(tool, tool)
        self.fzf_preview = fzf_preview

    def grep(self, query: str) -> bool:
        """
        Print matching lines straight to the terminal.

        Returns:
            False when ripgrep found nothing.
        """
        result = self._run([*self._rg_args(), "-e", query, "."])
        if result.returncode == 1:
            return False
        if result.returncode != 0:
            raise SearchError(f"ripgrep exited with {result.returncode}")
        return True

    def fuzzy(self, query: str) -> None:
        """Pipe the vault's file list into fzf for interactive picking."""
        fzf_args = ["fzf", "--ansi", "--query", query]
        if self.fzf_preview:
            fzf_args += ["--preview", "head -100 {}"]

        rg = self._spawn([self.rg, "--files"], stdout=subprocess.PIPE)
        try:
            fzf = self._spawn(fzf_args, stdin=rg.stdout)
        except SearchError:
            rg.kill()
            rg.wait()
            raise
        # Let rg see SIGPIPE if fzf exits first.
        rg.stdout.close()

        fzf_status = fzf.wait()
        rg_status = rg.wait()
        if rg_status != 0:
            raise SearchError(f"ripgrep --files exited with {rg_status}")
        if fzf_status != 0:
            raise SearchError(f"fzf exited with {fzf_status}")

    def grep_matches(self, query: str, limit: int) -> list[SearchMatch]:
        """
        Collect up to ``limit`` matches as structured results.

        Args:
            query: Pattern passed to ripgrep
            limit: Maximum number of matches

        Returns:
            Matches in ripgrep's output order
        """
        if limit <= 0:
            return []
        result = self._run(
            [*self._rg_args(), "--json", "-e", query, "."], capture_output=True
        )
        if result.returncode not in (0, 1):
            raise SearchError(f"ripgrep exited with {result.returncode}")

        matches: list[SearchMatch] = []
        for raw in result.stdout.splitlines():
            if len(matches) >= limit:
                break
            match = _parse_rg_message(raw)
            if match is not None:
                matches.append(match)
        logger.debug("Search %r returned %d match(es)", query, len(matches))
        return matches

    def _rg_args(self) -> list[str]:
        return [self.rg, "--hidden", "--glob", "!.git"]

    def _run(self, args: list[str], capture_output: bool = False):
        logger.debug("Running %s in %s", args, self.root)
        try:
            return subprocess.run(
                args,
                cwd=self.root,
                capture_output=capture_output,
                check=False,
            )
        except FileNotFoundError as e:
            raise SearchError(self._install_hint(args[0])) from e
        except OSError as e:
            raise SearchError(f"failed to execute {args[0]}: {e}") from e

    def _spawn(self, args: list[str], **kwargs) -> subprocess.Popen:
        try:
            return subprocess.Popen(args, cwd=self.root, **kwargs)
        except FileNotFoundError as e:
            raise SearchError(self._install_hint(args[0])) from e
        except OSError as e:
            raise SearchError(f"failed to execute {args[0]}: {e}") from e

    def _install_hint(self, binary: str) -> str:
        tool = self.tool if binary == self.rg else binary
        package = _TOOL_PACKAGES.get(tool, tool)
        return _INSTALL_HINT.format(binary=binary, package=package)


def _parse_rg_message(raw: bytes) -> SearchMatch | None:
    if not raw.strip():
        return None
    try:
        message = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(message, dict) or message.get("type") != "match":
        return None
    data = message.get("data") or {}
    try:
        return SearchMatch(
            path=data["path"]["text"],
            line_number=int(data["line_number"]),
            line=data["lines"]["text"].rstrip("\n"),
        )
    except (KeyError, TypeError, ValueError):
        return None

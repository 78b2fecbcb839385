"""Configuration management for obsctl.

Process settings come from environment variables (optionally via a ``.env``
file). The vault location and collaborator settings live in a YAML file,
``$OBSCTL_HOME/config.yaml``:

    vault:
      path: ~/.obsctl/vault
    templates:
      daily: ~/.obsctl/vault/templates/daily.md
      task: ~/.obsctl/vault/templates/task.md
    search:
      tool: ripgrep
      fzf_preview: true
"""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from obsctl.core.errors import ConfigError
from obsctl.search import SearchService
from obsctl.vault.journal import JournalStore
from obsctl.vault.layout import ensure_vault_structure, get_templates_dir
from obsctl.vault.tasks import TaskLedger
from obsctl.vault.templates import TemplateProvider

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


# obsctl home directory (holds config.yaml and the default vault)
OBSCTL_HOME = Path(
    get_env("OBSCTL_HOME", os.path.expanduser("~/.obsctl"))
    or os.path.expanduser("~/.obsctl")
).expanduser()

CONFIG_FILENAME = "config.yaml"

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "WARNING")


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Configure and return logger.

    Logs always go to stderr; stdout belongs to command output and to the
    MCP stdio transport.
    """
    if level is None:
        level = LOG_LEVEL or "WARNING"
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )
    return logging.getLogger("obsctl")


def default_config_path() -> Path:
    """Location of config.yaml under the obsctl home directory."""
    return OBSCTL_HOME / CONFIG_FILENAME


def default_vault_path() -> Path:
    """Vault used when no config exists yet."""
    return OBSCTL_HOME / "vault"


# --- Typed Configuration Models ---


class VaultSection(BaseModel):
    """Where the vault lives."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str


class TemplateSection(BaseModel):
    """Template file locations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    daily: str
    task: str


class SearchSection(BaseModel):
    """External search tool settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tool: str = "ripgrep"
    fzf_preview: bool = True


class AppConfig(BaseModel):
    """Typed contents of config.yaml.

    Frozen to prevent accidental mutation; use ``with_vault`` to derive an
    updated copy. Extra fields are forbidden to catch typos in config.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    vault: VaultSection
    templates: TemplateSection
    search: SearchSection = Field(default_factory=SearchSection)

    @classmethod
    def for_vault(cls, vault_root: Path) -> "AppConfig":
        """Default config pointing at ``vault_root``."""
        templates_dir = get_templates_dir(vault_root)
        return cls(
            vault=VaultSection(path=str(vault_root)),
            templates=TemplateSection(
                daily=str(templates_dir / "daily.md"),
                task=str(templates_dir / "task.md"),
            ),
        )

    def with_vault(self, vault_root: Path) -> "AppConfig":
        """Copy of this config pointing at another vault.

        Template paths follow the vault when they are the old vault's defaults.
        """
        templates = self.templates
        if templates == AppConfig.for_vault(Path(self.vault.path).expanduser()).templates:
            templates = AppConfig.for_vault(vault_root).templates
        return self.model_copy(
            update={"vault": VaultSection(path=str(vault_root)), "templates": templates}
        )


class ConfigManager:
    """Reads and writes config.yaml and initializes the vault it points to."""

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> AppConfig:
        """Load and validate the config file.

        Raises:
            ConfigError: If the file is missing, unreadable or invalid.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read config file {self.path}: {e}") from e
        except yaml.YAMLError as e:
            logger.error("Invalid YAML in %s: %s", self.path, e)
            raise ConfigError(f"Invalid YAML in {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(
                f"{self.path.name} must be a mapping, got {type(raw).__name__}"
            )

        try:
            return AppConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {self.path}: {e}") from e

    def save(self, config: AppConfig) -> None:
        """Write ``config`` to disk, creating the parent directory."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(config.model_dump(), f, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to write config file {self.path}: {e}") from e
        logger.debug("Saved config to %s", self.path)

    def ensure_initialized(self, vault: Path | str | None = None) -> AppConfig:
        """Make sure a config file and its vault exist.

        Args:
            vault: Explicit vault directory. When given, it replaces the vault
                path of an existing config.

        Returns:
            The config now on disk.
        """
        explicit = Path(vault).expanduser().resolve() if vault is not None else None

        if self.path.exists():
            config = self.load()
            if explicit is not None:
                config = config.with_vault(explicit)
                self.save(config)
        else:
            config = AppConfig.for_vault(explicit or default_vault_path())
            self.save(config)
            logger.info("Wrote default config to %s", self.path)

        vault_root = Path(config.vault.path).expanduser()
        ensure_vault_structure(vault_root, self._templates_for(config, vault_root))
        return config

    def update_vault_path(self, new_path: Path | str) -> AppConfig:
        """Point the config at ``new_path`` and initialize the vault there."""
        vault_root = Path(new_path).expanduser().resolve()
        config = self.load().with_vault(vault_root)
        self.save(config)
        ensure_vault_structure(vault_root, self._templates_for(config, vault_root))
        logger.info("Vault path updated to %s", vault_root)
        return config

    @staticmethod
    def _templates_for(config: AppConfig, vault_root: Path) -> TemplateProvider:
        return TemplateProvider(
            vault_root,
            daily_path=config.templates.daily,
            task_path=config.templates.task,
        )


class AppContext:
    """Resolved configuration handed to command and tool handlers.

    Example:
        ctx = AppContext.load()
        ledger = ctx.task_ledger()
        ledger.list_tasks()
    """

    def __init__(self, config_file: Path, config: AppConfig, vault_root: Path):
        self.config_file = config_file
        self.config = config
        self.vault_root = vault_root

    @classmethod
    def load(
        cls,
        config_path: Path | str | None = None,
        vault_override: Path | str | None = None,
    ) -> "AppContext":
        """Load config, initializing it and the vault on first use.

        Args:
            config_path: Config file (defaults to $OBSCTL_HOME/config.yaml)
            vault_override: Vault directory for this process only (falls back
                to $OBSCTL_VAULT, then to the configured path)
        """
        path = Path(config_path).expanduser() if config_path else default_config_path()
        manager = ConfigManager(path)
        if not path.exists():
            manager.ensure_initialized()
        config = manager.load()

        override = vault_override or get_env("OBSCTL_VAULT")
        vault_root = Path(override or config.vault.path).expanduser().resolve()
        if override:
            # An overridden vault carries its own templates directory.
            config = AppConfig.for_vault(vault_root).model_copy(
                update={"search": config.search}
            )
        if not vault_root.exists():
            ensure_vault_structure(
                vault_root, ConfigManager._templates_for(config, vault_root)
            )

        logger.debug("Using vault %s (config %s)", vault_root, path)
        return cls(config_file=path, config=config, vault_root=vault_root)

    def templates(self) -> TemplateProvider:
        return ConfigManager._templates_for(self.config, self.vault_root)

    def task_ledger(self) -> TaskLedger:
        return TaskLedger(self.vault_root, self.templates())

    def journal(self) -> JournalStore:
        return JournalStore(self.vault_root, self.templates())

    def search(self) -> SearchService:
        return SearchService(
            self.vault_root,
            tool=self.config.search.tool,
            fzf_preview=self.config.search.fzf_preview,
        )

    def __repr__(self) -> str:
        return f"AppContext({self.vault_root})"

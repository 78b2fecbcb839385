"""Tool subsystem exposed to protocol front ends."""

from obsctl.core.tools.vault_tools import VaultTools

__all__ = [
    "VaultTools",
]

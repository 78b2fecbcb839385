"""obsctl - a markdown vault for daily notes and tasks."""

__version__ = "0.1.0"

"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through properties.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import LoreMapCLI


class BaseCommand:
    """
    Base class for CLI commands with access to shared resources.

    Commands don't reinitialize resources — they access them via the CLI instance.
    """

    def __init__(self, cli: 'LoreMapCLI'):
        self._cli = cli

    @property
    def project_dir(self):
        """Project root directory."""
        return self._cli.project_dir

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def lore_dir(self):
        """Directory holding the source markdown."""
        return self._cli.lore_dir

    @property
    def data(self):
        """Project data directory (DataDir with all stores)."""
        return self._cli.data

    @property
    def curation(self):
        """Curation session over the work-queue and pin stores."""
        return self._cli.curation

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

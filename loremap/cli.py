"""
CLI -- Command interface for the lore-to-map pipeline

    loremap extract            parse lore files into the work queue
    loremap queue              show the next entry to curate
    loremap pin <id> ...       pin an entry to map coordinates
    loremap skip <id>          mark an entry as not a map location
    loremap jump <file>        move to a source file's first pending entry
    loremap back <index>       undo the previous decision
    loremap finalize           build locations.json with cross-references
    loremap config             view or set configuration
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .core.classifier import InvalidHeaderLevel
from .core.curation import CurationSession
from .core.store import DataDir, MissingStoreError
from .presentation.symbols import get_symbols
from .commands.extract import ExtractCommand
from .commands.curate import CurateCommand
from .commands.finalize import FinalizeCommand
from .commands.config_cmd import ConfigCommand
from . import __version__


class LoreMapCLI:
    """Command-line interface for the loremap pipeline."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)

        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        # Initialize symbols based on config
        self.symbols = get_symbols(self.config.display.symbols)

        self.lore_dir = self.config_manager.lore_dir
        self.data = DataDir(self.config_manager.data_dir)
        self.curation = CurationSession(self.data)

        # Command handlers
        self._extract_cmd = ExtractCommand(self)
        self._curate_cmd = CurateCommand(self)
        self._finalize_cmd = FinalizeCommand(self)
        self._config_cmd = ConfigCommand(self)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for loremap CLI.

    Uses command registry pattern for modular command handling.
    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = argparse.ArgumentParser(
        description="loremap -- Lore files to interactive map locations",
        epilog="Extract, pin, finalize."
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("LOREMAP_PROJECT_PATH", "."),
        help='Project directory (default: LOREMAP_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'loremap {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        cli = LoreMapCLI(Path(args.project))
        return dispatch(args.command, cli, args) or 0
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()
        return 1
    except (MissingStoreError, InvalidHeaderLevel) as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        # Malformed or invalid config, or a malformed store document
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())

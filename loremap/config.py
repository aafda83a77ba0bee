"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.loremap/config.yaml)
  3. User config (~/.loremap/config.yaml)
  4. Defaults

Relative paths resolve against the project directory.
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .core.resolver import ResolverPolicy, DEFAULT_ANCESTRY_DEPTH, DEFAULT_MIN_NAME_LENGTH, DEFAULT_SKIP_NAMES
from .presentation.symbols import get_symbols


# Continent/region documents, in processing order (geographic content only)
DEFAULT_SOURCE_FILES = [
    "Ve.md",
    "Clueanda.md",
    "Aboyinzu.md",
    "Rimihuica.md",
    "Upoceax.md",
    "Western_Isles.md",
    "Greenwater_Isles.md",
    "City_States.md",
]


@dataclass
class PathsConfig:
    """Where the corpus lives and where stores are written."""
    lore_dir: str = "lore"
    data_dir: str = "data"

    def validate(self) -> Optional[str]:
        if not self.lore_dir:
            return "paths.lore_dir must not be empty"
        if not self.data_dir:
            return "paths.data_dir must not be empty"
        return None


@dataclass
class CorpusConfig:
    """Source documents to extract."""
    source_files: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_FILES))

    def validate(self) -> Optional[str]:
        if not self.source_files:
            return "corpus.source_files must list at least one file"
        if len(set(self.source_files)) != len(self.source_files):
            return "corpus.source_files contains duplicates"
        return None


@dataclass
class ResolverConfig:
    """Cross-reference matching thresholds."""
    ancestry_depth: int = DEFAULT_ANCESTRY_DEPTH
    min_name_length: int = DEFAULT_MIN_NAME_LENGTH
    skip_names: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_NAMES))

    def validate(self) -> Optional[str]:
        if self.ancestry_depth < 1:
            return f"resolver.ancestry_depth must be >= 1, got {self.ancestry_depth}"
        if self.min_name_length < 1:
            return f"resolver.min_name_length must be >= 1, got {self.min_name_length}"
        return None

    def policy(self) -> ResolverPolicy:
        return ResolverPolicy(
            ancestry_depth=self.ancestry_depth,
            min_name_length=self.min_name_length,
            skip_names={name.lower() for name in self.skip_names},
        )


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> Optional[str]:
        for section in (self.paths, self.corpus, self.resolver, self.display):
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "paths": {
                "lore_dir": self.paths.lore_dir,
                "data_dir": self.paths.data_dir
            },
            "corpus": {
                "source_files": list(self.corpus.source_files)
            },
            "resolver": {
                "ancestry_depth": self.resolver.ancestry_depth,
                "min_name_length": self.resolver.min_name_length,
                "skip_names": list(self.resolver.skip_names)
            },
            "display": {
                "symbols": self.display.symbols
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        paths_data = data.get("paths", {})
        corpus_data = data.get("corpus", {})
        resolver_data = data.get("resolver", {})
        display_data = data.get("display", {})

        return cls(
            paths=PathsConfig(
                lore_dir=str(paths_data.get("lore_dir", "lore")),
                data_dir=str(paths_data.get("data_dir", "data"))
            ),
            corpus=CorpusConfig(
                source_files=list(corpus_data.get("source_files", DEFAULT_SOURCE_FILES))
            ),
            resolver=ResolverConfig(
                ancestry_depth=int(resolver_data.get("ancestry_depth", DEFAULT_ANCESTRY_DEPTH)),
                min_name_length=int(resolver_data.get("min_name_length", DEFAULT_MIN_NAME_LENGTH)),
                skip_names=list(resolver_data.get("skip_names", DEFAULT_SKIP_NAMES))
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            )
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (LOREMAP_LORE_DIR, LOREMAP_DATA_DIR)
      2. Project config (.loremap/config.yaml)
      3. User config (~/.loremap/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".loremap"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".loremap"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("LOREMAP_LORE_DIR"):
            config_data.setdefault("paths", {})["lore_dir"] = os.environ["LOREMAP_LORE_DIR"]
        if os.environ.get("LOREMAP_DATA_DIR"):
            config_data.setdefault("paths", {})["data_dir"] = os.environ["LOREMAP_DATA_DIR"]

        config = Config.from_dict(config_data)
        error = config.validate()
        if error:
            raise ValueError(f"Invalid configuration: {error}")

        self._config = config
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed config file {path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    @property
    def lore_dir(self) -> Path:
        return self.resolve_path(self.load().paths.lore_dir)

    @property
    def data_dir(self) -> Path:
        return self.resolve_path(self.load().paths.data_dir)

    def resolve_path(self, value: str) -> Path:
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "resolver.ancestry_depth")
            value: Value to set (lists are comma-separated)
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'paths.lore_dir')"

        section, setting = parts

        if section == "paths":
            if setting in ("lore_dir", "data_dir"):
                setattr(config.paths, setting, value)
            else:
                return f"Unknown paths setting: {setting}. Valid: lore_dir, data_dir"
            error = config.paths.validate()

        elif section == "corpus":
            if setting == "source_files":
                config.corpus.source_files = _split_list(value)
            else:
                return f"Unknown corpus setting: {setting}. Valid: source_files"
            error = config.corpus.validate()

        elif section == "resolver":
            if setting in ("ancestry_depth", "min_name_length"):
                try:
                    setattr(config.resolver, setting, int(value))
                except ValueError:
                    return f"resolver.{setting} must be an integer, got '{value}'"
            elif setting == "skip_names":
                config.resolver.skip_names = [n.lower() for n in _split_list(value)]
            else:
                return f"Unknown resolver setting: {setting}. Valid: ancestry_depth, min_name_length, skip_names"
            error = config.resolver.validate()

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols"
            error = config.display.validate()

        else:
            return f"Unknown section: {section}. Valid: paths, corpus, resolver, display"

        if error:
            self._config = None  # drop the invalid in-memory change
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value as display text."""
        data = self.load().to_dict()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        value = data.get(section, {}).get(setting)
        if value is None:
            return None
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        return str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        lore_status = f"{symbols.check_pass} Found" if self.lore_dir.exists() else f"{symbols.check_fail} Missing"
        lines = [
            "Configuration:",
            "",
            "Paths:",
            f"  Lore dir: {self.lore_dir} ({lore_status})",
            f"  Data dir: {self.data_dir}",
            "",
            "Corpus:",
            f"  Source files: {', '.join(config.corpus.source_files)}",
            "",
            "Resolver:",
            f"  Ancestry depth: {config.resolver.ancestry_depth}",
            f"  Min name length: {config.resolver.min_name_length}",
            f"  Skip names: {', '.join(config.resolver.skip_names)}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()

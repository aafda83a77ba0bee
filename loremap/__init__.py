"""
loremap — Lore files to interactive map locations

Turns a corpus of worldbuilding markdown into map location records:
headers become a curation queue, a human pins each entry to pixel
coordinates, and finalize cross-references the pinned locations by
scanning their lore text for each other's names.

Usage:
    loremap extract
    loremap queue
    loremap pin 12 --x 1024 --y 768 --zoom 3 --type city
    loremap skip 13
    loremap finalize
    loremap config
"""

__version__ = "0.1.0"

from .core.entries import (
    LocationType, EntryStatus, LoreEntry, WorkQueue, PinnedLocation, Location, AmbiguousReference,
)
from .core.parser import MarkdownParser, parse_corpus
from .core.resolver import CrossReferenceResolver, ResolverPolicy
from .core.store import DataDir, MissingStoreError
from .core.curation import CurationSession, CurationError
from .core.pipeline import extract_locations, finalize_locations
from .config import Config, ConfigManager, get_config

__all__ = [
    "__version__",
    "LocationType", "EntryStatus", "LoreEntry", "WorkQueue", "PinnedLocation",
    "Location", "AmbiguousReference",
    "MarkdownParser", "parse_corpus",
    "CrossReferenceResolver", "ResolverPolicy",
    "DataDir", "MissingStoreError",
    "CurationSession", "CurationError",
    "extract_locations", "finalize_locations",
    "Config", "ConfigManager", "get_config",
]

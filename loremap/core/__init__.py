"""
Core — Lore extraction and cross-reference pipeline

Contains the data layer and algorithms:
- Entries: Data model (LoreEntry, WorkQueue, PinnedLocation, Location)
- Parser: Markdown headers -> entries with parent links
- Classifier: Suggested type and zoom level
- Merger: Carry curation decisions across re-extractions
- Sections: Full body text keyed by header line
- Resolver: Name mentions -> cross-references / ambiguity report
- Store: Atomic whole-document JSON stores
- Curation: Pin / skip / jump / back operations
- Pipeline: extract and finalize stages
"""

from .entries import (
    LocationType, EntryStatus, LoreEntry, QueueStats, WorkQueue,
    PinnedLocation, PinnedData, Location, AmbiguousReference,
)
from .classifier import (
    suggest_type, suggest_zoom_level, type_for_tag, InvalidHeaderLevel,
    TAG_TYPE_RULES, CONTENT_PATTERNS,
)
from .parser import MarkdownParser, parse_corpus, parse_tags_line, is_skippable_header, SKIP_HEADERS
from .merger import merge_statuses, find_current_index
from .sections import ContentSection, extract_sections, associate_content
from .resolver import CrossReferenceResolver, ResolverPolicy, ResolutionResult, DEFAULT_SKIP_NAMES
from .store import (
    DataDir, JsonStore, WorkQueueStore, PinnedStore, LocationsStore,
    AmbiguityReportStore, MissingStoreError,
)
from .curation import CurationSession, CurationState, CurationError
from .pipeline import extract_locations, finalize_locations, ExtractResult, FinalizeResult

__all__ = [
    # Entries
    "LocationType", "EntryStatus", "LoreEntry", "QueueStats", "WorkQueue",
    "PinnedLocation", "PinnedData", "Location", "AmbiguousReference",
    # Classifier
    "suggest_type", "suggest_zoom_level", "type_for_tag", "InvalidHeaderLevel",
    "TAG_TYPE_RULES", "CONTENT_PATTERNS",
    # Parser
    "MarkdownParser", "parse_corpus", "parse_tags_line", "is_skippable_header", "SKIP_HEADERS",
    # Merger
    "merge_statuses", "find_current_index",
    # Sections
    "ContentSection", "extract_sections", "associate_content",
    # Resolver
    "CrossReferenceResolver", "ResolverPolicy", "ResolutionResult", "DEFAULT_SKIP_NAMES",
    # Store
    "DataDir", "JsonStore", "WorkQueueStore", "PinnedStore", "LocationsStore",
    "AmbiguityReportStore", "MissingStoreError",
    # Curation
    "CurationSession", "CurationState", "CurationError",
    # Pipeline
    "extract_locations", "finalize_locations", "ExtractResult", "FinalizeResult",
]

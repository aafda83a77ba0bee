"""
Pipeline — The two batch stages

extract:  source markdown -> parse -> merge prior statuses -> work queue
finalize: work queue + pins -> content re-association -> cross-references
          -> locations (+ ambiguity report)

Both stages read every store up front and write every store at the end.
A stage that fails midway leaves earlier outputs untouched, so re-running
from the start is always safe.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Optional, Callable, Tuple

import xxhash

from .entries import LoreEntry, WorkQueue, Location, AmbiguousReference
from .parser import MarkdownParser
from .merger import merge_statuses, find_current_index
from .sections import extract_sections, associate_content, ContentSection
from .resolver import CrossReferenceResolver, ResolverPolicy
from .store import DataDir


Progress = Callable[[str], None]


def _noop(message: str) -> None:
    pass


def split_lines(text: str) -> List[str]:
    """Split on newline only, so line numbers stay 1:1 with the file."""
    return text.split("\n")


def digest_text(text: str) -> str:
    return xxhash.xxh64(text.encode("utf-8")).hexdigest()


# =============================================================================
# Extract
# =============================================================================

@dataclass
class ExtractResult:
    queue: WorkQueue
    counts_by_file: Dict[str, int] = field(default_factory=dict)
    missing_files: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    previous_pinned: int = 0
    previous_entries: int = 0

    @property
    def type_distribution(self) -> List[Tuple[str, int]]:
        counts = Counter(e.suggested_type.value for e in self.queue.entries)
        return counts.most_common()


def extract_locations(
    lore_dir: Path,
    source_files: List[str],
    data: DataDir,
    on_progress: Optional[Progress] = None
) -> ExtractResult:
    """
    Parse the corpus and rebuild the work queue, keeping prior decisions.

    Args:
        lore_dir: Directory holding the source documents
        source_files: Document names, in processing order
        data: Project data directory
        on_progress: Callback for progress lines

    Returns:
        ExtractResult (the queue has already been written)
    """
    report = on_progress or _noop
    lore_dir = Path(lore_dir)

    pinned = data.pinned.load()
    if pinned:
        report(f"Loaded {len(pinned)} existing pinned locations")

    previous_queue = data.work_queue.load()
    if previous_queue is not None:
        report(f"Loaded existing work queue with {len(previous_queue.entries)} entries")

    result = ExtractResult(
        queue=WorkQueue(source_files=list(source_files)),
        previous_pinned=len(pinned),
        previous_entries=len(previous_queue.entries) if previous_queue else 0,
    )

    parser = MarkdownParser()
    entries: List[LoreEntry] = []

    for file_name in source_files:
        path = lore_dir / file_name
        if not path.exists():
            result.missing_files.append(file_name)
            result.warnings.append(f"{file_name} not found, skipping")
            continue

        report(f"Processing {file_name}...")
        text = path.read_text(encoding="utf-8")
        file_entries = parser.parse(split_lines(text), file_name)
        merge_statuses(file_entries, pinned, previous_queue)

        entries.extend(file_entries)
        result.counts_by_file[file_name] = len(file_entries)
        result.queue.source_digests[file_name] = digest_text(text)
        report(f"  Found {len(file_entries)} location entries")

    result.queue.entries = entries
    result.queue.current_index = find_current_index(entries)

    data.work_queue.save(result.queue)
    data.pinned.initialize()

    return result


# =============================================================================
# Finalize
# =============================================================================

@dataclass
class FinalizeResult:
    locations: List[Location] = field(default_factory=list)
    ambiguous: List[AmbiguousReference] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    duplicate_names: int = 0
    matched_content: int = 0
    auto_resolved: int = 0
    changed_files: List[str] = field(default_factory=list)

    @property
    def by_zoom(self) -> List[Tuple[int, int]]:
        return sorted(Counter(loc.zoom_level for loc in self.locations).items())

    @property
    def by_type(self) -> List[Tuple[str, int]]:
        return Counter(loc.type.value for loc in self.locations).most_common()

    @property
    def with_parent(self) -> int:
        return sum(1 for loc in self.locations if loc.parent_id)

    @property
    def with_related(self) -> int:
        return sum(1 for loc in self.locations if loc.related_ids)

    @property
    def total_links(self) -> int:
        return sum(len(loc.related_ids) for loc in self.locations)


def _id_order(entry_id: str) -> Tuple[int, str]:
    return (int(entry_id), entry_id) if entry_id.isdigit() else (0, entry_id)


def load_sections(
    lore_dir: Path,
    queue: WorkQueue,
    result: FinalizeResult
) -> Dict[str, List[ContentSection]]:
    """Re-split every source file referenced by the queue."""
    sections_by_file: Dict[str, List[ContentSection]] = {}
    for file_name in dict.fromkeys(e.source_file for e in queue.entries):
        path = Path(lore_dir) / file_name
        if not path.exists():
            result.warnings.append(f"{file_name} not found, its entries get no content")
            continue
        text = path.read_text(encoding="utf-8")
        recorded = queue.source_digests.get(file_name)
        if recorded and recorded != digest_text(text):
            result.changed_files.append(file_name)
            result.warnings.append(
                f"{file_name} changed since extraction; re-run extract to refresh line numbers"
            )
        sections_by_file[file_name] = extract_sections(split_lines(text))
    return sections_by_file


def finalize_locations(
    lore_dir: Path,
    data: DataDir,
    policy: Optional[ResolverPolicy] = None,
    on_progress: Optional[Progress] = None
) -> FinalizeResult:
    """
    Build final location records from pinned entries.

    Raises:
        MissingStoreError: extract has not been run
    """
    report = on_progress or _noop

    data.work_queue.require("Run 'loremap extract' first.")
    data.pinned.require("Run 'loremap extract' first.")

    queue = data.work_queue.load()
    pinned = data.pinned.load()
    report(f"Loaded {len(queue.entries)} entries from work queue")
    report(f"Loaded {len(pinned)} pinned locations")

    result = FinalizeResult()
    resolver = CrossReferenceResolver(queue.entries, pinned.keys(), policy)
    result.duplicate_names = len(resolver.duplicate_names)
    report(f"Found {result.duplicate_names} names with multiple pinned locations")

    report("Loading source content...")
    sections_by_file = load_sections(lore_dir, queue, result)
    content_by_id = associate_content(queue.entries, sections_by_file)
    result.matched_content = len(content_by_id)
    report(f"Matched content for {result.matched_content} entries")

    report("Finding related locations...")
    resolution = resolver.resolve(content_by_id)
    result.auto_resolved = resolution.auto_resolved
    result.ambiguous = resolution.ambiguous
    report(f"Found {resolution.auto_resolved} auto-resolved related references")
    report(f"Found {len(resolution.ambiguous)} ambiguous references for manual review")

    entry_map = queue.by_id()
    for entry_id in sorted(pinned, key=_id_order):
        entry = entry_map.get(entry_id)
        if entry is None:
            result.warnings.append(f"Pinned entry {entry_id} not found in work queue, skipping")
            continue
        pin = pinned[entry_id]
        result.locations.append(Location(
            id=entry.id,
            name=entry.name,
            type=pin.type,
            coordinates=pin.coordinates,
            zoom_level=pin.zoom_level,
            parent_id=resolver.find_pinned_parent(entry.id),
            related_ids=[i for i in resolution.related.get(entry.id, []) if i != entry.id],
            lore_file=entry.source_file,
            tags=list(entry.tags),
        ))

    result.locations.sort(key=lambda loc: (loc.zoom_level, loc.name, _id_order(loc.id)))

    data.locations.save(result.locations)
    if result.ambiguous:
        data.ambiguous.save(result.ambiguous)
    else:
        data.ambiguous.remove()

    return result

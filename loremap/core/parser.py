"""
Markdown Parser — Header-delimited lore entries with parent links

Streams a document line by line. Each header opens a region; the next
header flushes it as a LoreEntry. Structural headers ("Geography",
"Overview", ...) are dropped along with their content.

Parent tracking uses a fixed depth-slot table (levels 1-6) holding the
last entry id seen at each depth. Skipped headers never occupy a slot,
so their children attach to whatever parent was valid before them.

Ids come from a counter owned by the MarkdownParser session. Parsing the
same corpus in the same order always yields the same ids.

Usage:
    parser = MarkdownParser()
    entries = parser.parse(lines, "Ve.md")
    entries += parser.parse(more_lines, "Clueanda.md")
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Iterable, Tuple

from .entries import LoreEntry, EntryStatus
from .classifier import suggest_type, suggest_zoom_level


HEADER_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
TAGS_PREFIX = "Tags:"
TAGS_PATTERN = re.compile(r"^Tags:\s*(.+)$", re.I)

MAX_DEPTH = 6
PREVIEW_LINES = 5
PREVIEW_CHARS = 500

# Headers that organize a document rather than name a place
SKIP_HEADERS = {
    'geography',
    'political climate',
    'what makes it interesting',
    'what will go wrong',
    'government & peoples',
    'economy',
    'military',
    'political geography',
    'primary conflicts',
    'history',
    'culture',
    'religion',
    'notable figures',
    'notable locations',  # children are the locations
    'settlements',
    'features',
    'overview',
    'surrounding waters',
    'continental layout',
    'todo',
}


def is_skippable_header(name: str) -> bool:
    return name.strip().lower() in SKIP_HEADERS


def parse_header(line: str) -> Optional[Tuple[int, str]]:
    """Return (level, trimmed name) for a header line, else None."""
    match = HEADER_PATTERN.match(line)
    if not match:
        return None
    return len(match.group(1)), match.group(2).strip()


def parse_tags_line(line: str) -> List[str]:
    """Split 'Tags: a, B ,c' into ['a', 'b', 'c']."""
    match = TAGS_PATTERN.match(line)
    if not match:
        return []
    return [t.strip().lower() for t in match.group(1).split(",") if t.strip()]


def build_preview(content_lines: List[str]) -> str:
    """First few meaningful body lines, joined and capped."""
    meaningful = [
        line for line in content_lines
        if line.strip() and not line.startswith("#") and not line.startswith(TAGS_PREFIX)
    ]
    return " ".join(meaningful[:PREVIEW_LINES])[:PREVIEW_CHARS]


@dataclass
class _Region:
    """Header region being accumulated."""
    level: int
    name: str
    line_number: int
    tags: List[str]
    content: List[str]


class MarkdownParser:
    """
    Parser session. Owns the id counter shared across every file
    parsed through it.
    """

    def __init__(self, next_id: int = 1):
        self.next_id = next_id

    def _allocate_id(self) -> str:
        entry_id = str(self.next_id)
        self.next_id += 1
        return entry_id

    def parse(self, lines: Iterable[str], source_file: str) -> List[LoreEntry]:
        """
        Parse one document into entries in line order.

        Args:
            lines: Document lines (without trailing newlines)
            source_file: Name recorded on each entry

        Returns:
            LoreEntry list with parent links resolved
        """
        entries: List[LoreEntry] = []
        # slots[level] = id of last entry at that depth (index 0 unused)
        slots: List[Optional[str]] = [None] * (MAX_DEPTH + 1)
        region: Optional[_Region] = None

        for index, line in enumerate(lines):
            header = parse_header(line)
            if header:
                if region:
                    self._flush(region, source_file, slots, entries)
                level, name = header
                region = _Region(level=level, name=name, line_number=index + 1,
                                 tags=[], content=[])
                continue

            if line.startswith(TAGS_PREFIX):
                if region:
                    region.tags = parse_tags_line(line)
                continue

            if region:
                region.content.append(line)

        if region:
            self._flush(region, source_file, slots, entries)

        return entries

    def _flush(
        self,
        region: _Region,
        source_file: str,
        slots: List[Optional[str]],
        entries: List[LoreEntry]
    ):
        if is_skippable_header(region.name):
            return

        preview = build_preview(region.content)

        parent_entry_id = None
        for level in range(region.level - 1, 0, -1):
            if slots[level] is not None:
                parent_entry_id = slots[level]
                break

        entry_id = self._allocate_id()

        slots[region.level] = entry_id
        for level in range(region.level + 1, MAX_DEPTH + 1):
            slots[level] = None

        entries.append(LoreEntry(
            id=entry_id,
            name=region.name,
            header_level=region.level,
            line_number=region.line_number,
            source_file=source_file,
            tags=region.tags,
            suggested_type=suggest_type(region.tags, preview, region.level),
            suggested_zoom_level=suggest_zoom_level(region.level),
            content_preview=preview,
            parent_entry_id=parent_entry_id,
            status=EntryStatus.PENDING,
        ))


def parse_corpus(
    documents: Iterable[Tuple[str, List[str]]],
    start_id: int = 1
) -> Tuple[List[LoreEntry], int]:
    """
    Parse (source_file, lines) documents in the given order.

    Returns:
        (entries, next_id) so callers can continue numbering
    """
    parser = MarkdownParser(next_id=start_id)
    entries: List[LoreEntry] = []
    for source_file, lines in documents:
        entries.extend(parser.parse(lines, source_file))
    return entries, parser.next_id

"""
Curation — Operator actions on the work queue

The pinning interface drives these operations:
    current()            -> first pending entry + stats
    pin(id, ...)         -> record coordinates/zoom/type, mark pinned
    skip(id)             -> mark skipped
    jump_to_file(name)   -> first pending entry in one source file
    back(from_index)     -> undo the nearest earlier decision

Each mutating call reads both stores, applies the change and writes
both back, so a concurrent reader only sees complete documents.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from rapidfuzz import process, fuzz

from .entries import (
    LoreEntry, EntryStatus, LocationType, PinnedLocation, QueueStats, WorkQueue, PinnedData
)
from .merger import find_current_index
from .store import DataDir


MIN_FILE_SUGGESTION_SCORE = 60


class CurationError(ValueError):
    """Request cannot be applied to the current work queue."""


@dataclass
class CurationState:
    """Cursor position after an operation. index is -1 when nothing is pending."""
    entry: Optional[LoreEntry]
    index: int
    stats: QueueStats

    def to_dict(self):
        return {
            "currentEntry": self.entry.to_dict() if self.entry else None,
            "currentIndex": self.index,
            "stats": self.stats.to_dict(),
        }


def _is_integer(value) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return _is_integer(value) or isinstance(value, float)


def first_pending(queue: WorkQueue) -> Tuple[Optional[LoreEntry], int]:
    for i, entry in enumerate(queue.entries):
        if entry.status == EntryStatus.PENDING:
            return entry, i
    return None, -1


def suggest_source_file(queue: WorkQueue, name: str) -> Optional[str]:
    """Closest known source file name, if any is reasonably close."""
    choices = list(dict.fromkeys(queue.source_files or [e.source_file for e in queue.entries]))
    if not choices:
        return None
    match = process.extractOne(name.lower(), [c.lower() for c in choices], scorer=fuzz.WRatio)
    if match and match[1] >= MIN_FILE_SUGGESTION_SCORE:
        return choices[match[2]]
    return None


class CurationSession:
    """
    Library surface for the pinning tool.

    Args:
        data: Project data directory holding the work-queue and pin stores
    """

    def __init__(self, data: DataDir):
        self.data = data

    def _load(self) -> Tuple[WorkQueue, PinnedData]:
        self.data.work_queue.require("Run 'loremap extract' first.")
        return self.data.work_queue.load(), self.data.pinned.load()

    def _save(self, queue: WorkQueue, pinned: PinnedData):
        queue.current_index = find_current_index(queue.entries)
        self.data.work_queue.save(queue)
        self.data.pinned.save(pinned)

    def _entry(self, queue: WorkQueue, entry_id: str) -> LoreEntry:
        entry = queue.get(entry_id)
        if entry is None:
            raise CurationError(f"Entry not found: {entry_id}")
        return entry

    def _state(self, queue: WorkQueue) -> CurationState:
        entry, index = first_pending(queue)
        return CurationState(entry=entry, index=index, stats=queue.stats())

    # =========================================================================
    # Operations
    # =========================================================================

    def current(self) -> CurationState:
        queue, _ = self._load()
        return self._state(queue)

    def pin(
        self,
        entry_id: str,
        coordinates: Optional[Tuple[float, float]],
        zoom_level: Optional[int],
        location_type: Optional[Union[LocationType, str]]
    ) -> CurationState:
        """Pin an entry. Coordinates, zoom level and type are all required."""
        if coordinates is None or zoom_level is None or not location_type:
            raise CurationError("Missing required fields: coordinates, zoomLevel, type")
        if len(coordinates) != 2 or not all(_is_number(c) for c in coordinates):
            raise CurationError(f"Coordinates must be [x, y] numbers, got {list(coordinates)}")
        if not _is_integer(zoom_level) or not 1 <= zoom_level <= 5:
            raise CurationError(f"Zoom level must be an integer 1-5, got {zoom_level!r}")
        if not isinstance(location_type, LocationType):
            try:
                location_type = LocationType(location_type)
            except ValueError:
                valid = ", ".join(t.value for t in LocationType)
                raise CurationError(f"Unknown location type '{location_type}'. Valid: {valid}")

        queue, pinned = self._load()
        entry = self._entry(queue, entry_id)

        x, y = coordinates
        pinned[entry.id] = PinnedLocation(
            coordinates=(x, y),
            zoom_level=zoom_level,
            type=location_type,
        )
        entry.status = EntryStatus.PINNED

        self._save(queue, pinned)
        return self._state(queue)

    def skip(self, entry_id: str) -> CurationState:
        """Mark an entry skipped. A pin recorded for it is removed."""
        queue, pinned = self._load()
        entry = self._entry(queue, entry_id)
        entry.status = EntryStatus.SKIPPED
        pinned.pop(entry.id, None)
        self._save(queue, pinned)
        return self._state(queue)

    def jump_to_file(self, source_file: str) -> CurationState:
        """Cursor at the first pending entry of one source file."""
        queue, _ = self._load()
        for i, entry in enumerate(queue.entries):
            if entry.source_file == source_file and entry.status == EntryStatus.PENDING:
                return CurationState(entry=entry, index=i, stats=queue.stats())

        message = f"No pending entries in {source_file}"
        suggestion = suggest_source_file(queue, source_file)
        if suggestion and suggestion != source_file:
            message += f". Did you mean {suggestion}?"
        raise CurationError(message)

    def back(self, from_index: int) -> CurationState:
        """
        Revert the nearest pinned/skipped entry before from_index to pending.

        A reverted pin is removed from the pin store.
        """
        queue, pinned = self._load()
        if from_index <= 0:
            raise CurationError("No previous entry to go back to")

        for i in range(min(from_index, len(queue.entries)) - 1, -1, -1):
            entry = queue.entries[i]
            if entry.status == EntryStatus.PENDING:
                continue
            entry.status = EntryStatus.PENDING
            pinned.pop(entry.id, None)
            self._save(queue, pinned)
            return CurationState(entry=entry, index=i, stats=queue.stats())

        raise CurationError("No previous entry to go back to")

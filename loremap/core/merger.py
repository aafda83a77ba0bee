"""
Merger — Carry curation decisions across re-extractions

A fresh parse marks everything pending. Decisions recorded earlier are
restored by id: a pin always wins, then a recorded skip.
"""

from typing import List, Optional, Dict

from .entries import LoreEntry, EntryStatus, WorkQueue, PinnedData


def previous_statuses(queue: Optional[WorkQueue]) -> Dict[str, EntryStatus]:
    if queue is None:
        return {}
    return {entry.id: entry.status for entry in queue.entries}


def merge_statuses(
    entries: List[LoreEntry],
    pinned: PinnedData,
    previous_queue: Optional[WorkQueue] = None
) -> List[LoreEntry]:
    """
    Restore statuses on freshly parsed entries (in place).

    Args:
        entries: Parser output (all pending)
        pinned: Authoritative pin store
        previous_queue: Work queue from the last extraction, if any

    Returns:
        The same entries, for chaining
    """
    previous = previous_statuses(previous_queue)

    for entry in entries:
        if entry.id in pinned:
            entry.status = EntryStatus.PINNED
        elif previous.get(entry.id) == EntryStatus.SKIPPED:
            entry.status = EntryStatus.SKIPPED
        else:
            entry.status = EntryStatus.PENDING

    return entries


def find_current_index(entries: List[LoreEntry], default: int = 0) -> int:
    """Position of the first pending entry, or default when none remain."""
    for i, entry in enumerate(entries):
        if entry.status == EntryStatus.PENDING:
            return i
    return default

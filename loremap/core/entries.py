"""
Entries — Data model for the lore pipeline

Records flow through the pipeline in this order:
    LoreEntry (parsed) -> WorkQueue (curation cursor)
    PinnedLocation (human decision) -> Location (final map record)
    AmbiguousReference (unresolved mention, for manual review)

All records serialize to camelCase dicts, matching the JSON stores
consumed by the map application.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple
from enum import Enum


class LocationType(Enum):
    REGION = "region"
    CITY = "city"
    TOWN = "town"
    FORTRESS = "fortress"
    RUINS = "ruins"
    WILDERNESS = "wilderness"
    WATER = "water"
    POI = "poi"


class EntryStatus(Enum):
    """Curation status. Only operator actions move an entry off PENDING."""
    PENDING = "pending"
    PINNED = "pinned"
    SKIPPED = "skipped"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class LoreEntry:
    """One header-delimited unit of source lore text, pre-curation."""
    id: str
    name: str
    header_level: int
    line_number: int
    source_file: str
    tags: List[str] = field(default_factory=list)
    suggested_type: LocationType = LocationType.POI
    suggested_zoom_level: int = 5
    content_preview: str = ""
    parent_entry_id: Optional[str] = None
    status: EntryStatus = EntryStatus.PENDING

    @property
    def header_text(self) -> str:
        return "#" * self.header_level + " " + self.name

    @property
    def location_label(self) -> str:
        """Name with source position, e.g. 'Ravenhold (Ve.md:42)'."""
        return f"{self.name} ({self.source_file}:{self.line_number})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "headerLevel": self.header_level,
            "headerText": self.header_text,
            "lineNumber": self.line_number,
            "sourceFile": self.source_file,
            "tags": list(self.tags),
            "suggestedType": self.suggested_type.value,
            "suggestedZoomLevel": self.suggested_zoom_level,
            "contentPreview": self.content_preview,
            "parentEntryId": self.parent_entry_id,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoreEntry':
        return cls(
            id=str(data["id"]),
            name=data["name"],
            header_level=data["headerLevel"],
            line_number=data["lineNumber"],
            source_file=data["sourceFile"],
            tags=data.get("tags", []),
            suggested_type=LocationType(data.get("suggestedType", "poi")),
            suggested_zoom_level=data.get("suggestedZoomLevel", 5),
            content_preview=data.get("contentPreview", ""),
            parent_entry_id=data.get("parentEntryId"),
            status=EntryStatus(data.get("status", "pending")),
        )


@dataclass
class QueueStats:
    total: int = 0
    pending: int = 0
    pinned: int = 0
    skipped: int = 0

    @classmethod
    def from_entries(cls, entries: List[LoreEntry]) -> 'QueueStats':
        stats = cls(total=len(entries))
        for entry in entries:
            if entry.status == EntryStatus.PENDING:
                stats.pending += 1
            elif entry.status == EntryStatus.PINNED:
                stats.pinned += 1
            else:
                stats.skipped += 1
        return stats

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "pending": self.pending,
            "pinned": self.pinned,
            "skipped": self.skipped,
        }


@dataclass
class WorkQueue:
    """
    Full parsed entry list plus a review cursor.

    Rebuilt wholesale on each extraction; statuses survive by id.
    """
    entries: List[LoreEntry] = field(default_factory=list)
    source_files: List[str] = field(default_factory=list)
    current_index: int = 0
    extracted_at: str = field(default_factory=utc_now)
    source_digests: Dict[str, str] = field(default_factory=dict)
    version: int = 1

    def get(self, entry_id: str) -> Optional[LoreEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def by_id(self) -> Dict[str, LoreEntry]:
        return {entry.id: entry for entry in self.entries}

    def stats(self) -> QueueStats:
        return QueueStats.from_entries(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "extractedAt": self.extracted_at,
            "sourceFiles": list(self.source_files),
            "sourceDigests": dict(self.source_digests),
            "entries": [entry.to_dict() for entry in self.entries],
            "currentIndex": self.current_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WorkQueue':
        return cls(
            entries=[LoreEntry.from_dict(e) for e in data.get("entries", [])],
            source_files=data.get("sourceFiles", []),
            current_index=data.get("currentIndex", 0),
            extracted_at=data.get("extractedAt", ""),
            source_digests=data.get("sourceDigests", {}),
            version=data.get("version", 1),
        )


@dataclass
class PinnedLocation:
    """Human-supplied curation record. Presence implies status PINNED."""
    coordinates: Tuple[float, float]
    zoom_level: int
    type: LocationType
    pinned_at: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coordinates": list(self.coordinates),
            "zoomLevel": self.zoom_level,
            "type": self.type.value,
            "pinnedAt": self.pinned_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PinnedLocation':
        x, y = data["coordinates"]
        return cls(
            coordinates=(x, y),
            zoom_level=data["zoomLevel"],
            type=LocationType(data["type"]),
            pinned_at=data.get("pinnedAt", ""),
        )


# id -> PinnedLocation
PinnedData = Dict[str, PinnedLocation]


@dataclass
class Location:
    """Final map record. parent_id is always a pinned id or None."""
    id: str
    name: str
    type: LocationType
    coordinates: Tuple[float, float]
    zoom_level: int
    parent_id: Optional[str] = None
    related_ids: List[str] = field(default_factory=list)
    lore_file: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "coordinates": list(self.coordinates),
            "zoomLevel": self.zoom_level,
            "parentId": self.parent_id,
            "relatedIds": list(self.related_ids),
            "loreFile": self.lore_file,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Location':
        x, y = data["coordinates"]
        return cls(
            id=data["id"],
            name=data["name"],
            type=LocationType(data["type"]),
            coordinates=(x, y),
            zoom_level=data["zoomLevel"],
            parent_id=data.get("parentId"),
            related_ids=data.get("relatedIds", []),
            lore_file=data.get("loreFile"),
            tags=data.get("tags", []),
        )


@dataclass
class AmbiguousReference:
    """A name mention that could not be resolved to exactly one target."""
    source_id: str
    source_name: str
    mentioned_name: str
    candidate_ids: List[str]
    candidate_names: List[str]
    context: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceId": self.source_id,
            "sourceName": self.source_name,
            "mentionedName": self.mentioned_name,
            "candidateIds": list(self.candidate_ids),
            "candidateNames": list(self.candidate_names),
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AmbiguousReference':
        return cls(
            source_id=data["sourceId"],
            source_name=data["sourceName"],
            mentioned_name=data["mentionedName"],
            candidate_ids=data.get("candidateIds", []),
            candidate_names=data.get("candidateNames", []),
            context=data.get("context", ""),
        )

"""
Stores — Whole-document JSON persistence

Each store is one JSON file read wholesale and written wholesale.
Writes go through a temp file + os.replace, so readers never observe a
partially written document.

Layout (under the data directory):
    work-queue.json            -> WorkQueue
    pinned.json                -> {id: PinnedLocation}
    locations.json             -> [Location]
    ambiguous-references.json  -> [AmbiguousReference]
"""

import os
from pathlib import Path
from typing import Any, Optional, List, Dict

import orjson

from .entries import WorkQueue, PinnedLocation, PinnedData, Location, AmbiguousReference


WORK_QUEUE_FILE = "work-queue.json"
PINNED_FILE = "pinned.json"
LOCATIONS_FILE = "locations.json"
AMBIGUOUS_FILE = "ambiguous-references.json"


class MissingStoreError(FileNotFoundError):
    """A store required by this stage has not been produced yet."""


class JsonStore:
    """Single JSON document on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def read_raw(self) -> Any:
        return orjson.loads(self.path.read_bytes())

    def write_raw(self, data: Any):
        """Serialize and write atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        temp_path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2) + b"\n")
        os.replace(temp_path, self.path)

    def remove(self):
        if self.path.exists():
            self.path.unlink()

    def require(self, hint: str = ""):
        if not self.exists():
            message = f"{self.path.name} not found at {self.path}."
            if hint:
                message += f" {hint}"
            raise MissingStoreError(message)


class WorkQueueStore(JsonStore):

    def load(self) -> Optional[WorkQueue]:
        if not self.exists():
            return None
        return WorkQueue.from_dict(self.read_raw())

    def save(self, queue: WorkQueue):
        self.write_raw(queue.to_dict())


class PinnedStore(JsonStore):

    def load(self) -> PinnedData:
        if not self.exists():
            return {}
        return {
            str(entry_id): PinnedLocation.from_dict(record)
            for entry_id, record in self.read_raw().items()
        }

    def save(self, pinned: PinnedData):
        self.write_raw({entry_id: record.to_dict() for entry_id, record in pinned.items()})

    def initialize(self):
        """Create an empty store if none exists."""
        if not self.exists():
            self.write_raw({})


class LocationsStore(JsonStore):

    def load(self) -> List[Location]:
        if not self.exists():
            return []
        return [Location.from_dict(d) for d in self.read_raw()]

    def save(self, locations: List[Location]):
        self.write_raw([location.to_dict() for location in locations])


class AmbiguityReportStore(JsonStore):

    def load(self) -> List[AmbiguousReference]:
        if not self.exists():
            return []
        return [AmbiguousReference.from_dict(d) for d in self.read_raw()]

    def save(self, references: List[AmbiguousReference]):
        self.write_raw([reference.to_dict() for reference in references])


class DataDir:
    """All stores of one project data directory."""

    def __init__(self, data_dir: Path):
        self.path = Path(data_dir)
        self.work_queue = WorkQueueStore(self.path / WORK_QUEUE_FILE)
        self.pinned = PinnedStore(self.path / PINNED_FILE)
        self.locations = LocationsStore(self.path / LOCATIONS_FILE)
        self.ambiguous = AmbiguityReportStore(self.path / AMBIGUOUS_FILE)

    def paths(self) -> Dict[str, Path]:
        return {
            "work_queue": self.work_queue.path,
            "pinned": self.pinned.path,
            "locations": self.locations.path,
            "ambiguous": self.ambiguous.path,
        }

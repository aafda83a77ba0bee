"""
Cross-Reference Resolver — Name mentions between pinned entries

For each pinned entry's body, finds mentions of other pinned entries'
names. A name shared by several pinned entries is disambiguated by
structural ancestry (parentEntryId chains):

  one candidate                -> link
  several, one shares ancestry -> link
  several share ancestry       -> link the direct parent/child if exactly one,
                                  otherwise report as ambiguous
  none share ancestry          -> report as ambiguous (full candidate list)

Relations are not forced symmetric. Ambiguities are never dropped; they
go to the report for manual review.
"""

import re
from dataclasses import dataclass, field
from typing import List, Dict, Set, Optional, Iterable, Pattern

from .entries import LoreEntry, AmbiguousReference


DEFAULT_ANCESTRY_DEPTH = 3
DEFAULT_MIN_NAME_LENGTH = 4
SNIPPET_RADIUS = 50

# Short or common words that coincide with place names
DEFAULT_SKIP_NAMES = (
    'the', 'and', 'for', 'but', 'bay', 'sea', 'lake', 'hill', 'port', 'fort',
    'east', 'west', 'north', 'south', 'old', 'new', 'great', 'little',
    'upper', 'lower',
)


@dataclass
class ResolverPolicy:
    """Tunable matching thresholds."""
    ancestry_depth: int = DEFAULT_ANCESTRY_DEPTH
    min_name_length: int = DEFAULT_MIN_NAME_LENGTH
    skip_names: Set[str] = field(default_factory=lambda: set(DEFAULT_SKIP_NAMES))

    def accepts(self, name: str) -> bool:
        return len(name) >= self.min_name_length and name not in self.skip_names


@dataclass
class ResolutionResult:
    related: Dict[str, List[str]] = field(default_factory=dict)
    ambiguous: List[AmbiguousReference] = field(default_factory=list)
    auto_resolved: int = 0


def mention_pattern(name: str) -> Pattern:
    return re.compile(rf"\b{re.escape(name)}\b", re.I)


def snippet_around(content: str, name: str, radius: int = SNIPPET_RADIUS) -> str:
    """Up to `radius` chars either side of the first mention, same line."""
    match = re.search(rf".{{0,{radius}}}{re.escape(name)}.{{0,{radius}}}", content, re.I)
    return match.group(0).strip() if match else ""


class CrossReferenceResolver:
    """
    Resolves mentions among pinned entries.

    Args:
        entries: Every entry in the work queue (pinned or not), in queue order
        pinned_ids: Ids present in the pin store
        policy: Matching thresholds
    """

    def __init__(
        self,
        entries: Iterable[LoreEntry],
        pinned_ids: Iterable[str],
        policy: Optional[ResolverPolicy] = None
    ):
        self.entries: List[LoreEntry] = list(entries)
        self.entry_map: Dict[str, LoreEntry] = {e.id: e for e in self.entries}
        pinned = set(pinned_ids)
        self.pinned_ids: Set[str] = {i for i in pinned if i in self.entry_map}
        self.policy = policy or ResolverPolicy()
        self.name_index = self._build_name_index()

    def _build_name_index(self) -> Dict[str, List[str]]:
        index: Dict[str, List[str]] = {}
        for entry in self.entries:
            if entry.id in self.pinned_ids:
                index.setdefault(entry.name.lower(), []).append(entry.id)
        return index

    @property
    def duplicate_names(self) -> List[str]:
        return [name for name, ids in self.name_index.items() if len(ids) > 1]

    # =========================================================================
    # Ancestry
    # =========================================================================

    def ancestors(self, entry_id: str, max_depth: Optional[int] = None) -> List[str]:
        """Up to max_depth ancestor ids, nearest first."""
        if max_depth is None:
            max_depth = self.policy.ancestry_depth
        chain: List[str] = []
        current = self.entry_map.get(entry_id)
        while current and current.parent_entry_id and len(chain) < max_depth:
            chain.append(current.parent_entry_id)
            current = self.entry_map.get(current.parent_entry_id)
        return chain

    def share_ancestor(self, first_id: str, second_id: str) -> bool:
        """One is an ancestor of the other, or both share one (within depth)."""
        first = set(self.ancestors(first_id))
        second = set(self.ancestors(second_id))
        if second_id in first or first_id in second:
            return True
        return bool(first & second)

    def is_direct_relation(self, source_id: str, candidate_id: str) -> bool:
        source = self.entry_map.get(source_id)
        candidate = self.entry_map.get(candidate_id)
        if source is None or candidate is None:
            return False
        return candidate.parent_entry_id == source_id or source.parent_entry_id == candidate_id

    def find_pinned_parent(self, entry_id: str) -> Optional[str]:
        """Nearest pinned ancestor, skipping unpinned entries in between."""
        seen: Set[str] = set()
        current = self.entry_map.get(entry_id)
        while current and current.parent_entry_id and current.parent_entry_id not in seen:
            parent_id = current.parent_entry_id
            if parent_id in self.pinned_ids:
                return parent_id
            seen.add(parent_id)
            current = self.entry_map.get(parent_id)
        return None

    # =========================================================================
    # Resolution
    # =========================================================================

    def candidate_names(self) -> List[str]:
        """Indexed names, longest first."""
        return sorted(self.name_index.keys(), key=len, reverse=True)

    def resolve(self, content_by_id: Dict[str, str]) -> ResolutionResult:
        """
        Scan every pinned entry with known content.

        Args:
            content_by_id: Full body text per entry id

        Returns:
            ResolutionResult with related ids per pinned entry and
            the ambiguity report
        """
        result = ResolutionResult(related={i: [] for i in self.pinned_ids})
        names = [n for n in self.candidate_names() if self.policy.accepts(n)]
        patterns = {name: mention_pattern(name) for name in names}

        for entry in self.entries:
            source_id = entry.id
            if source_id not in self.pinned_ids or source_id not in content_by_id:
                continue
            content = content_by_id[source_id]
            for name in names:
                if not patterns[name].search(content):
                    continue
                self._resolve_mention(entry, name, content, result)

        return result

    def _resolve_mention(
        self,
        source: LoreEntry,
        name: str,
        content: str,
        result: ResolutionResult
    ):
        others = [i for i in self.name_index[name] if i != source.id]
        if not others:
            return

        if len(others) == 1:
            self._link(source.id, others[0], result)
            return

        survivors = [i for i in others if self.share_ancestor(source.id, i)]

        if len(survivors) == 1:
            self._link(source.id, survivors[0], result)
            return

        if survivors:
            direct = [i for i in survivors if self.is_direct_relation(source.id, i)]
            if len(direct) == 1:
                self._link(source.id, direct[0], result)
                return
            candidates = survivors
        else:
            # Likely a same-named place in an unrelated region
            candidates = others

        result.ambiguous.append(AmbiguousReference(
            source_id=source.id,
            source_name=source.name,
            mentioned_name=name,
            candidate_ids=list(candidates),
            candidate_names=[self._label(i) for i in candidates],
            context=snippet_around(content, name),
        ))

    def _link(self, source_id: str, target_id: str, result: ResolutionResult):
        if target_id == source_id:
            return
        related = result.related.setdefault(source_id, [])
        if target_id not in related:
            related.append(target_id)
            result.auto_resolved += 1

    def _label(self, entry_id: str) -> str:
        entry = self.entry_map.get(entry_id)
        return entry.location_label if entry else entry_id

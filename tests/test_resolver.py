"""
Tests for CrossReferenceResolver — name mentions between pinned entries

These tests validate:
- Unique names link directly
- Shared names narrowed by ancestry, then by direct parent/child
- Unresolvable mentions reported, never linked
- Pinned-parent lookup through unpinned ancestors
"""

from loremap.core.entries import LoreEntry
from loremap.core.resolver import (
    CrossReferenceResolver, ResolverPolicy, snippet_around, SNIPPET_RADIUS,
)


def entry(entry_id, name, parent=None, level=2, source_file="Ve.md"):
    return LoreEntry(id=entry_id, name=name, header_level=level,
                     line_number=int(entry_id) * 10, source_file=source_file,
                     parent_entry_id=parent)


class TestUniqueMatch:

    def test_unique_name_links(self):
        entries = [entry("1", "Kyagos"), entry("2", "Harbor Ward")]
        resolver = CrossReferenceResolver(entries, ["1", "2"])
        result = resolver.resolve({
            "1": "Kyagos is the great port capital of the north.",
            "2": "The Council of Tides governs from Kyagos.",
        })
        assert result.related["2"] == ["1"]
        assert result.related["1"] == []
        assert result.ambiguous == []
        assert result.auto_resolved == 1

    def test_mention_is_case_insensitive(self):
        entries = [entry("1", "Kyagos"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["1", "2"]).resolve({"2": "ships bound for KYAGOS"})
        assert result.related["2"] == ["1"]

    def test_mention_must_be_whole_word(self):
        entries = [entry("1", "Kyagos"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["1", "2"]).resolve({"2": "Kyagosian merchants"})
        assert result.related["2"] == []

    def test_no_self_reference(self):
        entries = [entry("1", "Kyagos")]
        result = CrossReferenceResolver(entries, ["1"]).resolve({"1": "Kyagos, Kyagos, Kyagos."})
        assert result.related["1"] == []

    def test_repeated_mentions_link_once(self):
        entries = [entry("1", "Kyagos"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["1", "2"]).resolve(
            {"2": "Kyagos. More Kyagos. Always Kyagos."}
        )
        assert result.related["2"] == ["1"]

    def test_unpinned_entries_are_not_targets(self):
        entries = [entry("1", "Kyagos"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["2"]).resolve({"2": "Governed from Kyagos."})
        assert result.related == {"2": []}

    def test_unpinned_entries_are_not_scanned(self):
        entries = [entry("1", "Kyagos"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["1"]).resolve({"2": "Governed from Kyagos."})
        assert "2" not in result.related

    def test_pins_for_unknown_ids_are_ignored(self):
        resolver = CrossReferenceResolver([entry("1", "Kyagos")], ["1", "99"])
        assert resolver.pinned_ids == {"1"}


class TestPolicy:

    def test_short_names_are_not_matched(self):
        entries = [entry("1", "Ash"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["1", "2"]).resolve({"2": "Beyond Ash lies the sea."})
        assert result.related["2"] == []

    def test_skip_names_are_not_matched(self):
        entries = [entry("1", "North"), entry("2", "Harbor Ward")]
        result = CrossReferenceResolver(entries, ["1", "2"]).resolve({"2": "Far to the north."})
        assert result.related["2"] == []

    def test_custom_policy(self):
        entries = [entry("1", "Ash"), entry("2", "Harbor Ward")]
        policy = ResolverPolicy(min_name_length=3, skip_names=set())
        result = CrossReferenceResolver(entries, ["1", "2"], policy).resolve({"2": "Beyond Ash."})
        assert result.related["2"] == ["1"]

    def test_candidate_names_longest_first(self):
        entries = [entry("1", "Ravenhold"), entry("2", "Ravenhold Keep"), entry("3", "Kyagos")]
        resolver = CrossReferenceResolver(entries, ["1", "2", "3"])
        assert resolver.candidate_names() == ["ravenhold keep", "ravenhold", "kyagos"]


class TestAmbiguity:

    def ravenholds(self):
        return [
            entry("1", "Clueanda", level=1, source_file="Clueanda.md"),
            entry("2", "Ravenhold", parent="1", source_file="Clueanda.md"),
            entry("3", "Aboyinzu", level=1, source_file="Aboyinzu.md"),
            entry("4", "Ravenhold", parent="3", source_file="Aboyinzu.md"),
            entry("5", "Upoceax", level=1, source_file="Upoceax.md"),
            entry("6", "Ravenhold", parent="5", source_file="Upoceax.md"),
        ]

    def test_unrelated_duplicates_are_reported(self):
        entries = self.ravenholds() + [
            entry("7", "Rimihuica", level=1, source_file="Rimihuica.md"),
            entry("8", "Tidewatch", parent="7", source_file="Rimihuica.md"),
        ]
        resolver = CrossReferenceResolver(entries, ["2", "4", "6", "8"])
        result = resolver.resolve({"8": "Traders from Ravenhold come every spring."})

        assert all(related == [] for related in result.related.values())
        assert len(result.ambiguous) == 1
        ref = result.ambiguous[0]
        assert ref.source_id == "8"
        assert ref.source_name == "Tidewatch"
        assert ref.mentioned_name == "ravenhold"
        assert ref.candidate_ids == ["2", "4", "6"]
        assert ref.candidate_names == [
            "Ravenhold (Clueanda.md:20)",
            "Ravenhold (Aboyinzu.md:40)",
            "Ravenhold (Upoceax.md:60)",
        ]
        assert "Ravenhold" in ref.context

    def test_shared_ancestry_picks_one(self):
        entries = self.ravenholds() + [
            entry("7", "Tidewatch", parent="1", source_file="Clueanda.md"),
        ]
        result = CrossReferenceResolver(entries, ["2", "4", "6", "7"]).resolve(
            {"7": "Tidewatch answers to Ravenhold."}
        )
        assert result.related["7"] == ["2"]
        assert result.ambiguous == []

    def test_direct_child_breaks_tie(self):
        entries = [
            entry("1", "Clueanda", level=1),
            entry("2", "Greywater", parent="1"),
            entry("3", "Ravenhold", parent="2", level=3),
            entry("4", "Ravenhold", parent="1"),
        ]
        result = CrossReferenceResolver(entries, ["2", "3", "4"]).resolve(
            {"2": "The keep of Ravenhold watches the river."}
        )
        assert result.related["2"] == ["3"]
        assert result.ambiguous == []

    def test_two_direct_children_stay_ambiguous(self):
        entries = [
            entry("1", "Greywater", level=1),
            entry("2", "Ravenhold", parent="1"),
            entry("3", "Ravenhold", parent="1"),
        ]
        result = CrossReferenceResolver(entries, ["1", "2", "3"]).resolve(
            {"1": "Two towers named Ravenhold."}
        )
        assert result.related["1"] == []
        assert [ref.candidate_ids for ref in result.ambiguous] == [["2", "3"]]

    def test_duplicate_names(self):
        resolver = CrossReferenceResolver(self.ravenholds(), ["2", "4", "6"])
        assert resolver.duplicate_names == ["ravenhold"]


class TestAncestry:

    def chain(self):
        # 1 <- 2 <- 3 <- 4 <- 5
        return [entry(str(i), f"Place {i}", parent=str(i - 1) if i > 1 else None, level=i)
                for i in range(1, 6)]

    def test_ancestors_bounded_by_depth(self):
        resolver = CrossReferenceResolver(self.chain(), [])
        assert resolver.ancestors("5") == ["4", "3", "2"]
        assert resolver.ancestors("5", max_depth=10) == ["4", "3", "2", "1"]

    def test_share_ancestor_within_depth(self):
        resolver = CrossReferenceResolver(self.chain(), [])
        assert resolver.share_ancestor("5", "2")
        assert not resolver.share_ancestor("5", "1")

    def test_pinned_parent_skips_unpinned(self):
        resolver = CrossReferenceResolver(self.chain(), ["1", "4"])
        assert resolver.find_pinned_parent("4") == "1"
        assert resolver.find_pinned_parent("5") == "4"

    def test_no_pinned_ancestor(self):
        resolver = CrossReferenceResolver(self.chain(), ["3"])
        assert resolver.find_pinned_parent("3") is None

    def test_pinned_parent_tolerates_cycles(self):
        entries = [entry("1", "Loop A", parent="2"), entry("2", "Loop B", parent="1")]
        resolver = CrossReferenceResolver(entries, [])
        assert resolver.find_pinned_parent("1") is None


class TestSnippet:

    def test_snippet_is_bounded(self):
        content = "x" * 100 + " Kyagos " + "y" * 100
        snippet = snippet_around(content, "kyagos")
        assert "Kyagos" in snippet
        assert len(snippet) <= 2 * SNIPPET_RADIUS + len("Kyagos")

    def test_snippet_stays_on_one_line(self):
        snippet = snippet_around("first line\nsee Kyagos here\nlast line", "Kyagos")
        assert snippet == "see Kyagos here"

    def test_snippet_escapes_name(self):
        assert snippet_around("the St. Elmo (old) gate", "St. Elmo (old)") == "the St. Elmo (old) gate"

"""
Classifier — Suggested type and zoom level for lore entries

Layered heuristics, first match wins at every layer:
  1. Tags, in declared order, against TAG_TYPE_RULES
  2. Content preview against CONTENT_PATTERNS
  3. Header-level fallback

Suggestions are advisory. A curator's pin always overrides them.
"""

import re
from typing import List, Tuple, Pattern

from .entries import LocationType


# Ordered (tags, type) rules. Order matters: first matching rule wins.
TAG_TYPE_RULES: List[Tuple[Tuple[str, ...], LocationType]] = [
    (("sea", "ocean", "lake", "river", "bay", "strait", "water"), LocationType.WATER),
    (("dungeon", "crypt", "lair", "tomb", "cavern", "catacomb"), LocationType.POI),
    (("ruins", "ruin", "abandoned", "ancient"), LocationType.RUINS),
    (("fortress", "fort", "castle", "stronghold", "military"), LocationType.FORTRESS),
    (("temple", "shrine", "magical", "portal", "sacred"), LocationType.POI),
    (("city", "capital", "citystate", "metropolis"), LocationType.CITY),
    (("settlement", "village", "town", "hamlet", "outpost"), LocationType.TOWN),
    (("forest", "jungle", "swamp", "rainforest", "woods"), LocationType.WILDERNESS),
    (("mountains", "mountain", "hills", "plains", "desert", "cliffs",
      "canyon", "valley", "peaks"), LocationType.WILDERNESS),
    (("state", "nation", "region", "island", "archipelago", "continent"), LocationType.REGION),
    (("poi",), LocationType.POI),
]

CONTENT_PATTERNS: List[Tuple[Pattern, LocationType]] = [
    (re.compile(r"\b(temple|shrine|sacred|holy|divine|altar)\b", re.I), LocationType.POI),
    (re.compile(r"\b(ruins?|ancient|abandoned|crumbl|decay|fallen)\b", re.I), LocationType.RUINS),
    (re.compile(r"\b(dungeon|crypt|tomb|lair|cavern|catacomb)\b", re.I), LocationType.POI),
    (re.compile(r"\b(fortress|castle|fort|stronghold|citadel|keep)\b", re.I), LocationType.FORTRESS),
    (re.compile(r"\b(capital|metropolis|great city)\b", re.I), LocationType.CITY),
    (re.compile(r"\b(village|hamlet|settlement|small town)\b", re.I), LocationType.TOWN),
    (re.compile(r"\b(forest|jungle|swamp|marsh|woods|grove)\b", re.I), LocationType.WILDERNESS),
    (re.compile(r"\b(mountain|peak|hill|canyon|valley|cliff|ridge)\b", re.I), LocationType.WILDERNESS),
    (re.compile(r"\b(sea|ocean|lake|river|bay|strait|gulf|waters)\b", re.I), LocationType.WATER),
]

# header level -> zoom level
ZOOM_BY_HEADER_LEVEL = {1: 1, 2: 2, 3: 3, 4: 4, 5: 5, 6: 5}


class InvalidHeaderLevel(ValueError):
    """Header level outside 1-6 reached the classifier."""


def type_for_tag(tag: str):
    """Return the LocationType for a single tag, or None."""
    tag = tag.lower()
    for tags, location_type in TAG_TYPE_RULES:
        if tag in tags:
            return location_type
    return None


def suggest_type(tags: List[str], content_preview: str, header_level: int) -> LocationType:
    """
    Suggest a location type for an entry.

    Args:
        tags: Entry tags in declared order
        content_preview: Short body excerpt
        header_level: Markdown header depth (1-6)

    Returns:
        Exactly one LocationType
    """
    for tag in tags:
        location_type = type_for_tag(tag)
        if location_type is not None:
            return location_type

    for pattern, location_type in CONTENT_PATTERNS:
        if pattern.search(content_preview):
            return location_type

    if header_level <= 2:
        return LocationType.REGION
    if header_level == 3:
        return LocationType.CITY
    if header_level == 4:
        return LocationType.TOWN
    return LocationType.POI


def suggest_zoom_level(header_level: int) -> int:
    """Map header depth to map zoom level. Raises InvalidHeaderLevel outside 1-6."""
    zoom = ZOOM_BY_HEADER_LEVEL.get(header_level)
    if zoom is None:
        raise InvalidHeaderLevel(f"Invalid header level: {header_level}. Expected 1-6.")
    return zoom

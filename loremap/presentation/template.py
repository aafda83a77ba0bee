"""
OutputTemplate — Layout shared by every loremap command

    ==========================================
    LOREMAP FINALIZE - Finalization Complete
    ==========================================
    212 locations | 37 related links

    BY ZOOM LEVEL
    -------------
      Level 1: 4
    ------------------------------------------
    Summary: [OK] Generated 212 locations
    -> Locations ready for the map
    ==========================================

Stage summaries (extract, finalize), the curation card and config output
all go through this builder so the operator sees one layout. The hint
line comes from succession.RULES for the command that just ran.
"""

import shutil
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .symbols import SymbolSet, get_symbols
from .succession import get_hint


HEADER_CHAR = "="
SECTION_CHAR = "-"
DEFAULT_WIDTH = 80


class OutputTemplate:
    """
    Collects the parts of one command's output, then renders them.

    Args:
        symbols: Status glyphs (defaults to the detected terminal set)
        width: Border width (defaults to the terminal width)
        full: Disable truncation of previews and snippets (--verbose)
    """

    def __init__(
        self,
        symbols: Optional[SymbolSet] = None,
        width: Optional[int] = None,
        full: bool = False
    ):
        self.symbols = symbols or get_symbols()
        self.width = width or shutil.get_terminal_size().columns or DEFAULT_WIDTH
        self.full = full

        self._title = ""
        self._legend: Dict[str, str] = {}
        self._scope: Optional[str] = None
        self._sections: List[Tuple[str, str]] = []
        self._summary: Optional[str] = None

    def header(self, title: str, subtitle: Optional[str] = None) -> "OutputTemplate":
        self._title = f"{title} - {subtitle}" if subtitle else title
        return self

    def legend(self, items: Dict[str, str]) -> "OutputTemplate":
        """Glyph -> status name, shown under the header."""
        self._legend = dict(items)
        return self

    def scope(self, text: str) -> "OutputTemplate":
        """What the output covers, e.g. "412 entries | 8 file(s) from lore"."""
        self._scope = text
        return self

    def section(self, title: str, content: str) -> "OutputTemplate":
        self._sections.append((title, content))
        return self

    def footer(self, summary: Optional[str] = None) -> "OutputTemplate":
        self._summary = summary
        return self

    def render(self, command: Optional[str] = None, context: Optional[Dict[str, Any]] = None) -> str:
        """
        Join everything into the final text.

        command/context select the next-step hint; without a command the
        footer carries only the summary line.
        """
        border = HEADER_CHAR * self.width
        lines: List[str] = []

        if self._title:
            lines += [border, self._title, border]
            if self._legend:
                lines.append("Legend: " + "  ".join(f"{glyph} {name}" for glyph, name in self._legend.items()))
            if self._scope:
                lines.append(self._scope)
            lines.append("")

        for title, content in self._sections:
            if title:
                lines += [title, SECTION_CHAR * len(title)]
            if content:
                lines.append(content)
            lines.append("")

        lines.append(SECTION_CHAR * self.width)
        if self._summary:
            lines.append(f"Summary: {self._summary}")
        hint = get_hint(command, context) if command else None
        if hint:
            lines.append(hint)
        lines.append(border)

        return "\n".join(lines)

    # =========================================================================
    # Content helpers
    # =========================================================================

    def truncate(self, text: str, length: Optional[int] = None) -> str:
        """Shorten a preview or snippet to fit the border, unless full."""
        if not text or self.full:
            return text or ""
        max_len = length or (self.width - 4)
        if len(text) <= max_len:
            return text
        ellipsis = self.symbols.ellipsis
        return text[:max_len - len(ellipsis)] + ellipsis

    def format_counts(self, counts: Iterable[Tuple[Any, int]], label: str = "{}") -> str:
        """Indented distribution lines: format_counts(by_zoom, "Level {}")."""
        return "\n".join(f"  {label.format(key)}: {count}" for key, count in counts)

    def format_list(self, items: List[str], bullet: Optional[str] = None) -> str:
        bullet = bullet or self.symbols.bullet
        return "\n".join(f"{bullet} {item}" for item in items)

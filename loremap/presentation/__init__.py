"""
Presentation — Terminal output for loremap commands

- Symbols: Unicode/ASCII symbol sets, safe_print, warn
- Template: OutputTemplate builder (header, sections, footer)
- Succession: Next-step hints per command
"""

from .symbols import (
    SymbolSet, UNICODE, ASCII, get_symbols, supports_unicode,
    safe_print, warn, truncate, symbol_for_status,
)
from .template import OutputTemplate
from .succession import get_hint

__all__ = [
    "SymbolSet", "UNICODE", "ASCII", "get_symbols", "supports_unicode",
    "safe_print", "warn", "truncate", "symbol_for_status",
    "OutputTemplate", "get_hint",
]

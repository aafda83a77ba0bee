"""
Symbols — Visual vocabulary for curation states

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe output utilities:
- safe_print(): Encoding-safe printing for lore text (names, snippets)
- warn(): Warning line on stderr
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '←': '<-',
    '…': '...',
    '–': '-',
    '—': '--',
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
    '•': '*',
    '·': '.',
    '×': 'x',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Lore files carry arbitrary Unicode (diacritics in place names, typographic
    quotes). Unencodable characters are replaced with ASCII equivalents, or
    '?' as last resort.

    Args:
        text: Text to print
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


def warn(message: str) -> None:
    """Print a warning line to stderr."""
    safe_print(f"Warning: {message}", file=sys.stderr)


SUMMARY_LENGTH = 120


def truncate(text: str, length: int = SUMMARY_LENGTH, full: bool = False) -> str:
    """
    Truncate text with ellipsis, respecting full mode.

    Examples:
        truncate("Short", 50)                 -> "Short"
        truncate("Any length", 5, full=True)  -> "Any length"
    """
    if not text:
        return ""
    if full or len(text) <= length:
        return text
    if length <= 3:
        return text[:length]
    return text[:length - 3] + "..."


@dataclass(frozen=True)
class SymbolSet:
    """Symbols for entry states and output structure."""
    # Entry states
    pending: str
    pinned: str
    skipped: str
    ambiguous: str

    # Status markers
    check_pass: str
    check_warn: str
    check_fail: str
    arrow: str

    # Tree/structure markers
    tree_branch: str
    tree_end: str
    bullet: str

    # Text truncation
    ellipsis: str


UNICODE = SymbolSet(
    pending='○',
    pinned='●',
    skipped='⊘',
    ambiguous='?',
    check_pass='✓',
    check_warn='⚠',
    check_fail='✗',
    arrow='→',
    tree_branch='├─',
    tree_end='└─',
    bullet='•',
    ellipsis='…',
)

ASCII = SymbolSet(
    pending='o',
    pinned='*',
    skipped='-',
    ambiguous='?',
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[X]',
    arrow='->',
    tree_branch='|-',
    tree_end='`-',
    bullet='*',
    ellipsis='...',
)

STATUS_TO_SYMBOL = {
    'pending': 'pending',
    'pinned': 'pinned',
    'skipped': 'skipped',
}


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    if os.environ.get('LOREMAP_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('LOREMAP_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False
        if 'utf' in encoding_lower:
            return True

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang or 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII


def symbol_for_status(symbols: SymbolSet, status: str) -> str:
    """Get symbol for an entry status."""
    attr = STATUS_TO_SYMBOL.get(status, 'ambiguous')
    return getattr(symbols, attr)

"""
Sections — Full body text for entries, keyed by header line

Independent of the parser: every header (structural ones included) starts
a section, and entries claim a section only when their recorded line
number equals the section's start line.
"""

from dataclasses import dataclass
from typing import List, Dict, Iterable

from .entries import LoreEntry
from .parser import parse_header


@dataclass
class ContentSection:
    name: str
    content: str
    line_start: int  # 1-indexed header line
    line_end: int


def extract_sections(lines: List[str]) -> List[ContentSection]:
    """Split a document into header-bounded sections."""
    sections: List[ContentSection] = []

    name = None
    line_start = 0
    body: List[str] = []

    for index, line in enumerate(lines):
        header = parse_header(line)
        if header:
            if name is not None:
                sections.append(ContentSection(
                    name=name,
                    content="\n".join(body),
                    line_start=line_start,
                    line_end=index,
                ))
            _, name = header
            line_start = index + 1
            body = []
        elif name is not None:
            body.append(line)

    if name is not None:
        sections.append(ContentSection(
            name=name,
            content="\n".join(body),
            line_start=line_start,
            line_end=len(lines),
        ))

    return sections


def associate_content(
    entries: Iterable[LoreEntry],
    sections_by_file: Dict[str, List[ContentSection]]
) -> Dict[str, str]:
    """
    Map entry id -> full section content.

    Entries whose file is missing, or whose line matches no section,
    are left out.
    """
    starts_by_file = {
        file_name: {section.line_start: section for section in sections}
        for file_name, sections in sections_by_file.items()
    }

    content_by_id: Dict[str, str] = {}
    for entry in entries:
        starts = starts_by_file.get(entry.source_file)
        if not starts:
            continue
        section = starts.get(entry.line_number)
        if section is not None:
            content_by_id[entry.id] = section.content

    return content_by_id

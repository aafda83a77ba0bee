"""
Command Succession — Data-driven next-step guidance

Main loop: extract -> queue -> pin/skip (repeat) -> finalize
Recovery:  back (undo), jump (switch source file)

Each command knows its successors + conditions for context-aware hints.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class NextStep:
    """Single next-step hint with optional condition."""
    command: Optional[str]    # None = terminal
    label: str
    condition: str = None     # When to show (None = always)
    why: str = None


@dataclass
class Succession:
    """Succession rules for a command."""
    default: NextStep
    alternatives: List[NextStep] = field(default_factory=list)


RULES: Dict[str, Succession] = {
    "extract": Succession(
        default=NextStep("queue", "loremap queue",
                         why="Review pending entries"),
        alternatives=[
            NextStep("finalize", "loremap finalize", condition="all_reviewed",
                     why="Nothing left to curate"),
        ]
    ),

    "queue": Succession(
        default=NextStep("pin", "loremap pin <id> --x X --y Y --zoom Z --type T",
                         condition="has_pending",
                         why="Place the current entry on the map"),
        alternatives=[
            NextStep("finalize", "loremap finalize", condition="all_reviewed",
                     why="Build location records"),
        ]
    ),

    "pin": Succession(
        default=NextStep("pin", "loremap queue",
                         why="Continue with the next entry"),
        alternatives=[
            NextStep("finalize", "loremap finalize", condition="all_reviewed",
                     why="Build location records"),
        ]
    ),

    "back": Succession(
        default=NextStep("pin", "loremap pin <id> ... | loremap skip <id>",
                         why="Decide the reverted entry again"),
    ),

    "jump": Succession(
        default=NextStep("pin", "loremap pin <id> ... | loremap skip <id>",
                         why="Curate this file's entries"),
    ),

    "finalize": Succession(
        default=NextStep(None, "Locations ready for the map",
                         why="Cross-references resolved"),
        alternatives=[
            NextStep(None, "Review ambiguous-references.json", condition="has_ambiguous",
                     why="Unresolved mentions need a human"),
        ]
    ),
}


def get_hint(command: str, context: dict = None) -> Optional[str]:
    """
    Get contextual next-step hint for command.

    Args:
        command: Command that just ran (e.g., "extract")
        context: Result state flags (e.g., {"has_pending": True})

    Returns:
        Formatted hint string or None
    """
    context = context or {}
    rules = RULES.get(command)

    if not rules:
        return None

    for alt in rules.alternatives:
        if alt.condition and context.get(alt.condition):
            return _format_hint(alt)

    if rules.default.condition and not context.get(rules.default.condition):
        return None

    return _format_hint(rules.default)


def _format_hint(step: NextStep) -> str:
    if not step.command:
        return f"-> {step.label}" + (f"  ({step.why})" if step.why else "")

    hint = f"-> Next: {step.label}"
    if step.why:
        hint += f"  ({step.why})"
    return hint

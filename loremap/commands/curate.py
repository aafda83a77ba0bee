"""
CurateCommand — Work through the pinning queue from the terminal

Handles the curation loop:
- Showing the current pending entry and queue stats
- Pinning an entry (coordinates, zoom level, type)
- Skipping an entry
- Jumping to a source file
- Going back (undo the previous decision)
"""

from typing import Optional

from ..commands.base import BaseCommand
from ..core.curation import CurationState, CurationError
from ..core.entries import LocationType
from ..presentation.symbols import safe_print, symbol_for_status
from ..presentation.template import OutputTemplate


class CurateCommand(BaseCommand):
    """Command for the human curation loop."""

    def _render_state(
        self,
        state: CurationState,
        title: str,
        subtitle: str,
        command: str,
        message: Optional[str] = None
    ):
        symbols = self.symbols
        stats = state.stats

        template = OutputTemplate(symbols=symbols)
        template.header(title, subtitle)
        template.scope(
            f"{stats.total} entries | {symbols.pending} {stats.pending} pending | "
            f"{symbols.pinned} {stats.pinned} pinned | {symbols.skipped} {stats.skipped} skipped"
        )

        if message:
            template.section("RESULT", message)

        if state.entry is not None:
            template.section(f"ENTRY [{state.entry.id}] at index {state.index}",
                             self._format_entry(state, template))
        else:
            template.section("ENTRY", "No pending entries.")

        template.footer(f"{stats.pinned + stats.skipped}/{stats.total} reviewed")
        safe_print(template.render(command=command, context={
            "has_pending": stats.pending > 0,
            "all_reviewed": stats.total > 0 and stats.pending == 0,
        }))

    def _format_entry(self, state: CurationState, template: OutputTemplate) -> str:
        entry = state.entry
        symbols = self.symbols
        lines = [
            f"{symbol_for_status(symbols, entry.status.value)} {entry.header_text}",
            f"  Source: {entry.source_file}:{entry.line_number}",
            f"  Suggested: {entry.suggested_type.value} (zoom {entry.suggested_zoom_level})",
        ]
        if entry.tags:
            lines.append(f"  Tags: {', '.join(entry.tags)}")
        if entry.parent_entry_id:
            parent = self.data.work_queue.load().get(entry.parent_entry_id)
            if parent is not None:
                lines.append(f"  Parent: [{parent.id}] {parent.name}")
        if entry.content_preview:
            lines.append(f"  {template.truncate(entry.content_preview, 300)}")
        return "\n".join(lines)

    def _render_error(self, title: str, error: Exception) -> int:
        template = OutputTemplate(symbols=self.symbols)
        template.header(title, "Error")
        template.section("ERROR", str(error))
        safe_print(template.render())
        return 1

    # =========================================================================
    # Operations
    # =========================================================================

    def show_queue(self) -> int:
        state = self.curation.current()
        self._render_state(state, "LOREMAP QUEUE", "Current Entry", command="queue")
        return 0

    def pin(self, entry_id: str, x: float, y: float, zoom_level: int, location_type: str) -> int:
        try:
            state = self.curation.pin(entry_id, (x, y), zoom_level, location_type)
        except CurationError as e:
            return self._render_error("LOREMAP PIN", e)
        self._render_state(state, "LOREMAP PIN", "Entry Pinned", command="pin",
                           message=f"{self.symbols.pinned} Pinned [{entry_id}] at ({x}, {y}), "
                                   f"zoom {zoom_level}, {location_type}")
        return 0

    def skip(self, entry_id: str) -> int:
        try:
            state = self.curation.skip(entry_id)
        except CurationError as e:
            return self._render_error("LOREMAP SKIP", e)
        self._render_state(state, "LOREMAP SKIP", "Entry Skipped", command="pin",
                           message=f"{self.symbols.skipped} Skipped [{entry_id}]")
        return 0

    def jump(self, source_file: str) -> int:
        try:
            state = self.curation.jump_to_file(source_file)
        except CurationError as e:
            return self._render_error("LOREMAP JUMP", e)
        self._render_state(state, "LOREMAP JUMP", source_file, command="jump")
        return 0

    def back(self, from_index: int) -> int:
        try:
            state = self.curation.back(from_index)
        except CurationError as e:
            return self._render_error("LOREMAP BACK", e)
        self._render_state(state, "LOREMAP BACK", "Decision Reverted", command="back",
                           message=f"{self.symbols.pending} [{state.entry.id}] is pending again")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAMES = ['queue', 'pin', 'skip', 'jump', 'back']


def register_parser(subparsers):
    """Register queue, pin, skip, jump and back command parsers."""
    p1 = subparsers.add_parser('queue', help='Show the current pending entry and stats')

    p2 = subparsers.add_parser('pin', help='Pin an entry to map coordinates')
    p2.add_argument('entry_id', help='Entry ID')
    p2.add_argument('--x', type=float, required=True, help='Pixel x coordinate')
    p2.add_argument('--y', type=float, required=True, help='Pixel y coordinate')
    p2.add_argument('--zoom', type=int, required=True, choices=range(1, 6),
                    help='Zoom level at which the location appears (1-5)')
    p2.add_argument('--type', dest='location_type', required=True,
                    choices=[t.value for t in LocationType],
                    help='Location type')

    p3 = subparsers.add_parser('skip', help='Skip an entry (not a map location)')
    p3.add_argument('entry_id', help='Entry ID')

    p4 = subparsers.add_parser('jump', help='Jump to the first pending entry of a source file')
    p4.add_argument('source_file', help='Source file name (e.g., Ve.md)')

    p5 = subparsers.add_parser('back', help='Revert the previous pinned/skipped entry')
    p5.add_argument('from_index', type=int, help='Current queue index')

    return p1, p2, p3, p4, p5


def handle(cli, args):
    """Handle curation command dispatch."""
    cmd = cli._curate_cmd
    if args.command == 'queue':
        return cmd.show_queue()
    elif args.command == 'pin':
        return cmd.pin(args.entry_id, args.x, args.y, args.zoom, args.location_type)
    elif args.command == 'skip':
        return cmd.skip(args.entry_id)
    elif args.command == 'jump':
        return cmd.jump(args.source_file)
    elif args.command == 'back':
        return cmd.back(args.from_index)

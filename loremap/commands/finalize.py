"""
FinalizeCommand — Pinned entries -> location records

Resolves name mentions between pinned entries into relatedIds and writes
locations.json, plus ambiguous-references.json when some mentions could
not be disambiguated.
"""

from ..commands.base import BaseCommand
from ..core.pipeline import finalize_locations
from ..presentation.symbols import safe_print, warn
from ..presentation.template import OutputTemplate


# Ambiguities listed inline before pointing at the report file
MAX_AMBIGUOUS_SHOWN = 10


class FinalizeCommand(BaseCommand):
    """Command for the finalize stage."""

    def finalize(self, verbose: bool = False) -> int:
        symbols = self.symbols

        result = finalize_locations(
            self.lore_dir,
            self.data,
            policy=self.config.resolver.policy(),
            on_progress=safe_print
        )

        for message in result.warnings:
            warn(message)

        total = len(result.locations)

        template = OutputTemplate(symbols=symbols, full=verbose)
        template.header("LOREMAP FINALIZE", "Finalization Complete")
        template.scope(f"{total} locations | {result.total_links} related links")

        template.section("BY ZOOM LEVEL", template.format_counts(result.by_zoom, label="Level {}"))
        template.section("BY TYPE", template.format_counts(result.by_type))
        template.section("LINKS", "\n".join([
            f"Locations with parent: {result.with_parent}/{total}",
            f"Locations with related: {result.with_related}/{total}",
            f"Total related links: {result.total_links}",
        ]))

        if result.ambiguous:
            shown = result.ambiguous if verbose else result.ambiguous[:MAX_AMBIGUOUS_SHOWN]
            lines = []
            for ref in shown:
                lines.append(f"{symbols.ambiguous} {ref.source_name} mentions \"{ref.mentioned_name}\"")
                for name in ref.candidate_names:
                    lines.append(f"    {symbols.arrow} {name}")
                if ref.context:
                    lines.append(f"    \"{template.truncate(ref.context)}\"")
            hidden = len(result.ambiguous) - len(shown)
            if hidden > 0:
                lines.append(f"... and {hidden} more (see {self.data.ambiguous.path.name})")
            template.section(f"AMBIGUOUS REFERENCES ({len(result.ambiguous)})", "\n".join(lines))

        outputs = [str(self.data.locations.path)]
        if result.ambiguous:
            outputs.append(str(self.data.ambiguous.path))
        template.section("SAVED TO", "\n".join(outputs))

        template.footer(
            f"{symbols.check_pass} Generated {total} locations"
            + (f" | {symbols.check_warn} {len(result.ambiguous)} to review" if result.ambiguous else "")
        )
        # Lore snippets may carry characters the terminal can't encode
        safe_print(template.render(command="finalize", context={
            "has_ambiguous": bool(result.ambiguous),
        }))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register finalize command parser."""
    p = subparsers.add_parser('finalize', help='Build locations.json from pinned entries')
    p.add_argument('-v', '--verbose', action='store_true',
                   help='List every ambiguous reference without truncation')
    return p


def handle(cli, args):
    """Handle finalize command dispatch."""
    return cli._finalize_cmd.finalize(verbose=args.verbose)

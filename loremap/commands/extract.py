"""
ExtractCommand — Parse the lore corpus into the work queue

Re-runnable at any time: entry ids are stable for an unchanged corpus
and earlier pin/skip decisions are carried over by id.
"""

from ..commands.base import BaseCommand
from ..core.pipeline import extract_locations
from ..presentation.symbols import safe_print, warn
from ..presentation.template import OutputTemplate


class ExtractCommand(BaseCommand):
    """Command for the extraction stage."""

    def extract(self) -> int:
        symbols = self.symbols

        result = extract_locations(
            self.lore_dir,
            self.config.corpus.source_files,
            self.data,
            on_progress=safe_print
        )

        for message in result.warnings:
            warn(message)

        stats = result.queue.stats()

        template = OutputTemplate(symbols=symbols)
        template.header("LOREMAP EXTRACT", "Extraction Complete")
        template.legend({
            symbols.pending: "pending",
            symbols.pinned: "pinned",
            symbols.skipped: "skipped",
        })
        template.scope(f"{stats.total} entries | {len(result.counts_by_file)} file(s) from {self.lore_dir}")

        template.section("STATUS", "\n".join([
            f"Total entries: {stats.total}",
            f"  {symbols.pending} Pending: {stats.pending}",
            f"  {symbols.pinned} Pinned: {stats.pinned}",
            f"  {symbols.skipped} Skipped: {stats.skipped}",
        ]))

        if result.type_distribution:
            template.section(
                "SUGGESTED TYPE DISTRIBUTION",
                template.format_counts(result.type_distribution)
            )

        if result.missing_files:
            template.section(
                "MISSING FILES",
                template.format_list(result.missing_files, bullet=symbols.check_warn)
            )

        template.section("SAVED TO", str(self.data.work_queue.path))
        template.footer(f"{symbols.check_pass} Work queue saved ({stats.pending} pending)")
        safe_print(template.render(command="extract", context={
            "all_reviewed": stats.total > 0 and stats.pending == 0,
        }))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register extract command parser."""
    p = subparsers.add_parser('extract', help='Parse lore files into the work queue')
    return p


def handle(cli, args):
    """Handle extract command dispatch."""
    return cli._extract_cmd.extract()

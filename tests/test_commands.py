"""
Tests for the CLI commands — extract, queue/pin/skip/jump/back, finalize, config

Commands run against real stores in tmp_path through a CLI mock.
"""

import io
import sys

import pytest

from loremap.commands.extract import ExtractCommand
from loremap.commands.curate import CurateCommand
from loremap.commands.finalize import FinalizeCommand
from loremap.commands.config_cmd import ConfigCommand
from loremap.config import ConfigManager
from loremap.core.entries import EntryStatus
from tests.factories import VE, KYAGOS, HARBOR_WARD, CLUEANDA, RAVENHOLD


# =============================================================================
# Extract
# =============================================================================

class TestExtractCommand:

    def test_extract_summary(self, lore_factory, capsys):
        lore_factory.create_sample_corpus()
        cmd = lore_factory.create_command(ExtractCommand)

        assert cmd.extract() == 0

        out = capsys.readouterr().out
        assert "Processing Ve.md..." in out
        assert "LOREMAP EXTRACT - Extraction Complete" in out
        assert "Total entries: 5" in out
        assert "region: 2" in out
        assert "-> Next: loremap queue" in out
        assert lore_factory.data.work_queue.exists()

    def test_missing_file_warning(self, lore_factory, capsys):
        lore_factory.create_sample_corpus()
        lore_factory.source_files.append("Missing.md")
        cmd = lore_factory.create_command(ExtractCommand)

        assert cmd.extract() == 0

        captured = capsys.readouterr()
        assert "Warning: Missing.md not found, skipping" in captured.err
        assert "MISSING FILES" in captured.out

    def test_non_ascii_file_name_on_ascii_terminal(self, lore_factory, monkeypatch):
        lore_factory.write_lore("Zürich.md", "# Zürich\n\nA walled city on the lake.\n")
        stream = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
        monkeypatch.setattr(sys, "stdout", stream)
        cmd = lore_factory.create_command(ExtractCommand)

        assert cmd.extract() == 0

        stream.flush()
        out = stream.buffer.getvalue().decode("ascii")
        assert "Processing Z?rich.md..." in out
        assert "LOREMAP EXTRACT - Extraction Complete" in out
        assert lore_factory.queue().entries[0].name == "Zürich"


# =============================================================================
# Curation
# =============================================================================

class TestCurateCommand:

    @pytest.fixture
    def cmd(self, lore_env):
        return lore_env.create_command(CurateCommand)

    def test_queue_shows_current_entry(self, cmd, capsys):
        assert cmd.show_queue() == 0
        out = capsys.readouterr().out
        assert "ENTRY [1] at index 0" in out
        assert "# Ve" in out
        assert "Source: Ve.md:1" in out
        assert "Suggested: region (zoom 1)" in out
        assert "Tags: continent" in out
        assert "-> Next: loremap pin" in out

    def test_queue_shows_parent(self, cmd, lore_env, capsys):
        lore_env.curation.skip(VE)
        cmd.show_queue()
        assert "Parent: [1] Ve" in capsys.readouterr().out

    def test_pin(self, cmd, lore_env, capsys):
        assert cmd.pin(VE, 512.0, 256.0, 1, "region") == 0
        out = capsys.readouterr().out
        assert "Pinned [1] at (512.0, 256.0), zoom 1, region" in out
        assert "ENTRY [2] at index 1" in out
        assert lore_env.queue().get(VE).status == EntryStatus.PINNED

    def test_pin_error(self, cmd, capsys):
        assert cmd.pin("99", 1.0, 2.0, 1, "region") == 1
        assert "Entry not found: 99" in capsys.readouterr().out

    def test_skip(self, cmd, lore_env, capsys):
        assert cmd.skip(VE) == 0
        assert "Skipped [1]" in capsys.readouterr().out
        assert lore_env.queue().get(VE).status == EntryStatus.SKIPPED

    def test_all_reviewed_suggests_finalize(self, cmd, capsys):
        for entry_id in (VE, KYAGOS, HARBOR_WARD, CLUEANDA):
            cmd.skip(entry_id)
        capsys.readouterr()
        cmd.pin(RAVENHOLD, 1.0, 2.0, 3, "fortress")
        out = capsys.readouterr().out
        assert "No pending entries." in out
        assert "-> Next: loremap finalize" in out

    def test_jump(self, cmd, capsys):
        assert cmd.jump("Clueanda.md") == 0
        assert "ENTRY [4] at index 3" in capsys.readouterr().out

    def test_jump_error_suggests(self, cmd, capsys):
        assert cmd.jump("clueanda") == 1
        assert "Did you mean Clueanda.md?" in capsys.readouterr().out

    def test_back(self, cmd, lore_env, capsys):
        cmd.skip(VE)
        capsys.readouterr()
        assert cmd.back(1) == 0
        assert "[1] is pending again" in capsys.readouterr().out
        assert lore_env.queue().get(VE).status == EntryStatus.PENDING

    def test_back_error(self, cmd, capsys):
        assert cmd.back(0) == 1
        assert "No previous entry to go back to" in capsys.readouterr().out


# =============================================================================
# Finalize
# =============================================================================

class TestFinalizeCommand:

    def test_finalize_summary(self, lore_env, capsys):
        lore_env.pin(KYAGOS, zoom_level=2)
        lore_env.pin(HARBOR_WARD, zoom_level=4)
        cmd = lore_env.create_command(FinalizeCommand)

        assert cmd.finalize() == 0

        out = capsys.readouterr().out
        assert "Loaded 2 pinned locations" in out
        assert "Level 2: 1" in out
        assert "Level 4: 1" in out
        assert "Locations with parent: 1/2" in out
        assert "Total related links: 1" in out
        assert "Generated 2 locations" in out
        assert "-> Locations ready for the map" in out
        assert lore_env.data.locations.exists()

    def test_finalize_lists_ambiguities(self, lore_factory, capsys):
        lore_factory.write_lore("Aboyinzu.md", "# Aboyinzu\n## Ravenhold\n")
        lore_factory.write_lore("Upoceax.md", "# Upoceax\n## Ravenhold\n")
        lore_factory.write_lore("Rimihuica.md", "# Rimihuica\n## Tidewatch\nTraders from Ravenhold.\n")
        lore_factory.extract()
        for entry_id in ("2", "4", "6"):
            lore_factory.pin(entry_id)
        cmd = lore_factory.create_command(FinalizeCommand)

        assert cmd.finalize() == 0

        out = capsys.readouterr().out
        assert "AMBIGUOUS REFERENCES (1)" in out
        assert 'Tidewatch mentions "ravenhold"' in out
        assert "Ravenhold (Aboyinzu.md:2)" in out
        assert "ambiguous-references.json" in out
        assert "Review ambiguous-references.json" in out

    def test_finalize_warns_on_orphan_pin(self, lore_env, capsys):
        lore_env.write_pins({"99": (1, 2, 5, "poi")})
        lore_env.create_command(FinalizeCommand).finalize()
        assert "Warning: Pinned entry 99 not found" in capsys.readouterr().err


# =============================================================================
# Config
# =============================================================================

class TestConfigCommand:

    @pytest.fixture
    def cmd(self, lore_factory):
        cli = lore_factory.create_cli_mock()
        cli.config_manager = ConfigManager(lore_factory.tmp_path)
        return lore_factory.create_command(ConfigCommand, cli)

    def test_show_config(self, cmd, capsys):
        assert cmd.show_config() == 0
        out = capsys.readouterr().out
        assert "LOREMAP CONFIG - Current Configuration" in out
        assert "Ancestry depth: 3" in out

    def test_set_config(self, cmd, lore_factory, capsys):
        assert cmd.set_config("resolver.ancestry_depth", "5") == 0
        out = capsys.readouterr().out
        assert "Set resolver.ancestry_depth = 5" in out
        assert str(lore_factory.tmp_path / ".loremap" / "config.yaml") in out

    def test_set_config_error(self, cmd, capsys):
        assert cmd.set_config("display.symbols", "emoji") == 1
        assert "Unknown symbols setting 'emoji'" in capsys.readouterr().out

"""
Tests for the loremap entry point — argument parsing, dispatch, exit codes
"""

import pytest
import yaml

from loremap import __version__
from loremap.cli import main, LoreMapCLI
from loremap.commands import get_registered_commands
from loremap.core.store import DataDir
from tests.factories import VE_MD, CLUEANDA_MD


@pytest.fixture
def project(tmp_path):
    """Project dir with lore/, a two-file corpus and a project config."""
    lore = tmp_path / "lore"
    lore.mkdir()
    (lore / "Ve.md").write_text(VE_MD, encoding="utf-8")
    (lore / "Clueanda.md").write_text(CLUEANDA_MD, encoding="utf-8")

    config_path = tmp_path / ".loremap" / "config.yaml"
    config_path.parent.mkdir()
    config_path.write_text(yaml.safe_dump({
        "corpus": {"source_files": ["Ve.md", "Clueanda.md"]},
        "display": {"symbols": "ascii"},
    }))
    return tmp_path


def run(project, *args):
    return main(["--project", str(project), *args])


class TestMain:

    def test_no_command_prints_help(self, project, capsys):
        assert run(project) == 0
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_all_commands_registered(self, project):
        run(project)
        assert set(get_registered_commands()) == {
            "extract", "queue", "pin", "skip", "jump", "back", "finalize", "config",
        }

    def test_full_workflow(self, project, capsys):
        assert run(project, "extract") == 0
        assert run(project, "pin", "2", "--x", "300", "--y", "120", "--zoom", "2", "--type", "city") == 0
        assert run(project, "pin", "3", "--x", "310", "--y", "125", "--zoom", "4", "--type", "town") == 0
        assert run(project, "skip", "4") == 0
        assert run(project, "finalize") == 0

        locations = DataDir(project / "data").locations.load()
        assert [loc.name for loc in locations] == ["Kyagos", "Harbor Ward"]
        assert locations[1].related_ids == ["2"]

    def test_finalize_before_extract_fails(self, project, capsys):
        assert run(project, "finalize") == 1
        assert "Error: work-queue.json not found" in capsys.readouterr().out

    def test_queue_before_extract_fails(self, project, capsys):
        assert run(project, "queue") == 1
        assert "Run 'loremap extract' first." in capsys.readouterr().out

    def test_curation_error_exit_code(self, project):
        run(project, "extract")
        assert run(project, "skip", "99") == 1

    def test_back_and_jump(self, project, capsys):
        run(project, "extract")
        run(project, "skip", "1")
        assert run(project, "back", "1") == 0
        assert run(project, "jump", "Clueanda.md") == 0

    def test_invalid_zoom_rejected_by_parser(self, project):
        with pytest.raises(SystemExit) as excinfo:
            run(project, "pin", "1", "--x", "1", "--y", "1", "--zoom", "9", "--type", "city")
        assert excinfo.value.code == 2

    def test_invalid_type_rejected_by_parser(self, project):
        with pytest.raises(SystemExit):
            run(project, "pin", "1", "--x", "1", "--y", "1", "--zoom", "1", "--type", "castle")

    def test_config_set(self, project, capsys):
        assert run(project, "config", "--set", "resolver.ancestry_depth=4") == 0
        saved = yaml.safe_load((project / ".loremap" / "config.yaml").read_text())
        assert saved["resolver"]["ancestry_depth"] == 4

    def test_config_set_requires_equals(self, project, capsys):
        assert run(project, "config", "--set", "resolver.ancestry_depth") == 1
        assert "KEY=VALUE" in capsys.readouterr().out

    def test_malformed_config_fails_cleanly(self, project, capsys):
        (project / ".loremap" / "config.yaml").write_text("paths: [unclosed")
        assert run(project, "extract") == 1
        assert "Malformed config file" in capsys.readouterr().out

    def test_invalid_config_value_fails_cleanly(self, project, capsys):
        (project / ".loremap" / "config.yaml").write_text("resolver:\n  ancestry_depth: 0\n")
        assert run(project, "extract") == 1
        assert "Invalid configuration: resolver.ancestry_depth" in capsys.readouterr().out
        assert not (project / "data" / "work-queue.json").exists()

    def test_project_from_environment(self, project, monkeypatch):
        monkeypatch.setenv("LOREMAP_PROJECT_PATH", str(project))
        assert main(["extract"]) == 0
        assert (project / "data" / "work-queue.json").exists()


class TestLoreMapCLI:

    def test_paths_from_config(self, project):
        cli = LoreMapCLI(project)
        assert cli.lore_dir == project / "lore"
        assert cli.data.path == project / "data"
        assert cli.symbols.check_pass == "[OK]"

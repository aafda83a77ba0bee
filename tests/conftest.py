"""
Shared pytest fixtures for the loremap test suite.

Usage in tests:
    def test_something(lore_factory):
        lore_factory.write_lore("Ve.md", "# Ve\\n")
        result = lore_factory.extract()

    def test_with_data(lore_env):
        # lore_env comes with the sample corpus already extracted
        queue = lore_env.queue()
"""

import pytest

from loremap.config import ConfigManager
from tests.factories import LoreTestFactory


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.loremap and LOREMAP_* environment."""
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "home" / "config.yaml")
    for name in ("LOREMAP_LORE_DIR", "LOREMAP_DATA_DIR", "LOREMAP_PROJECT_PATH",
                 "LOREMAP_ASCII_ONLY", "LOREMAP_UNICODE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def lore_factory(tmp_path):
    """
    Empty project: lore/ and data/ directories, no documents.

    Use this when you need fine-grained control over the corpus.
    """
    return LoreTestFactory(tmp_path)


@pytest.fixture
def lore_env(tmp_path):
    """
    Project with the sample corpus extracted.

    Entries (ids in order): Ve, Kyagos, Harbor Ward, Clueanda, Ravenhold.
    All pending, pinned.json empty.
    """
    factory = LoreTestFactory(tmp_path)
    factory.create_sample_corpus()
    factory.extract()
    return factory

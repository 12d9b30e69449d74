"""Shared test fixtures for stickerjournal."""

import os
import tempfile

import pytest


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
            "storage_dir": os.path.join(tmp_dir, "data", "storage"),
        },
        "ocr": {
            "models": ["gemini/gemini-2.5-flash"],
            "api_key": "test-key",
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def memory_store():
    from stickerjournal.core.storage import MemoryKeyValueStore

    return MemoryKeyValueStore()


@pytest.fixture
def persistence(memory_store):
    from stickerjournal.journal.persistence import LocalPersistence

    return LocalPersistence(memory_store)


@pytest.fixture
def make_entry():
    """Factory for entries with sensible defaults."""
    from stickerjournal.journal.models import Entry

    def _make(entry_id=1, title="Title", content="Body", date_label="Jan 5, 2024", **kwargs):
        return Entry(id=entry_id, title=title, content=content, date_label=date_label, **kwargs)

    return _make

"""Tests for stickerjournal.core.config_schema."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stickerjournal.core.config_schema import AppConfig, OCRConfig, StorageConfig


class TestConfigSchema:
    def test_valid_config_roundtrip(self):
        data = {
            "paths": {"data_dir": "/tmp/test-data", "storage_dir": "/tmp/test-data/storage"},
            "storage": {"namespace": "journal", "quota_bytes": 1024},
            "ocr": {"models": ["gemini/gemini-2.0-flash"], "timeout": 30},
            "weather": {"default_latitude": 51.5, "default_longitude": -0.12},
            "server": {"port": 8000},
        }
        cfg = AppConfig.model_validate(data)
        assert cfg.paths.data_dir == Path("/tmp/test-data")
        assert cfg.paths.storage_dir == Path("/tmp/test-data/storage")
        assert cfg.storage.quota_bytes == 1024
        assert cfg.ocr.models == ["gemini/gemini-2.0-flash"]
        assert cfg.weather.default_latitude == 51.5
        assert cfg.server.port == 8000
        assert cfg.logging.level == "WARNING"

    def test_path_expansion(self):
        cfg = AppConfig.model_validate({"paths": {"data_dir": "~/.stickerjournal-data"}, "ocr": {"models": ["m"]}})
        assert "~" not in str(cfg.paths.data_dir)

    def test_ocr_section_required(self):
        with pytest.raises(ValidationError):
            AppConfig.model_validate({})

    def test_empty_model_list_rejected(self):
        with pytest.raises(ValidationError):
            OCRConfig(models=[])

    def test_models_from_csv_string(self):
        assert OCRConfig.model_validate({"models": "a, b,,c"}).models == ["a", "b", "c"]

    def test_negative_quota_rejected(self):
        with pytest.raises(ValidationError):
            StorageConfig(quota_bytes=-5)

    def test_extra_sections_allowed(self):
        cfg = AppConfig.model_validate({"ocr": {"models": ["m"]}, "custom": {"x": 1}})
        assert cfg.model_extra["custom"] == {"x": 1}

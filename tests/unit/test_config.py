"""
Unit tests for settings
"""

import pytest
from pydantic import ValidationError

from sizefit.config import Settings


class TestSettings:
    """Test settings loading"""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.default_quality == 80
        assert settings.min_target_size_bytes == 1024
        assert settings.max_concurrent_formats == 4

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SIZEFIT_MAX_CONCURRENT_FORMATS", "2")
        monkeypatch.setenv("SIZEFIT_JSON_LOGS", "true")
        settings = Settings(_env_file=None)
        assert settings.max_concurrent_formats == 2
        assert settings.json_logs is True

    def test_quality_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_quality=0)

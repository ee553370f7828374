"""
Tests for configuration validation
"""

import pytest

from chatbond import config


def test_defaults_are_valid(monkeypatch):
    monkeypatch.setattr(config, "USE_ENRICHMENT", False)
    monkeypatch.setattr(config, "DEFAULT_DATE_FORMAT", "DMY")
    valid, msg = config.validate_config()
    assert valid, msg


def test_enrichment_needs_key(monkeypatch):
    monkeypatch.setattr(config, "USE_ENRICHMENT", True)
    monkeypatch.setattr(config, "ENRICHMENT_API_KEY", "")

    valid, msg = config.validate_config()

    assert not valid
    assert "ENRICHMENT_API_KEY" in msg


def test_bad_date_format(monkeypatch):
    monkeypatch.setattr(config, "USE_ENRICHMENT", False)
    monkeypatch.setattr(config, "DEFAULT_DATE_FORMAT", "YMD")
    assert config.validate_config()[0] is False


def test_level_weights_must_sum_to_one(monkeypatch):
    monkeypatch.setattr(config, "USE_ENRICHMENT", False)
    monkeypatch.setattr(config, "DEFAULT_DATE_FORMAT", "DMY")
    monkeypatch.setattr(config, "LEVEL_WEIGHTS", {"frequency": 0.5, "positivity": 0.1,
                                                  "engagement": 0.1, "conflict": 0.1})
    valid, msg = config.validate_config()

    assert not valid
    assert "weights" in msg


def test_config_summary_hides_key(monkeypatch):
    monkeypatch.setattr(config, "ENRICHMENT_API_KEY", "secret")
    summary = config.get_config_summary()

    assert summary["enrichment"]["api_key_set"] is True
    assert "secret" not in str(summary)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

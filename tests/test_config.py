"""Tests for YAML config loading."""

import pytest

from kickstarter_pamphlet.utils.config import DEFAULT_CONFIG, load_config


def test_load_config_merges_defaults(tmp_path):
    path = tmp_path / "pamphlet.yaml"
    path.write_text("api:\n  rate_limit_rps: 0.5\nlogging:\n  level: DEBUG\n")

    config = load_config(path)

    assert config["api"]["rate_limit_rps"] == 0.5
    assert config["api"]["base_url"] == DEFAULT_CONFIG["api"]["base_url"]
    assert config["logging"]["level"] == "DEBUG"
    assert config["logging"]["log_file"] == "pamphlet.log"
    assert DEFAULT_CONFIG["api"]["rate_limit_rps"] == 1.0


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == DEFAULT_CONFIG


def test_load_config_keeps_unknown_sections(tmp_path):
    path = tmp_path / "extra.yaml"
    path.write_text("tracking:\n  enabled: false\n")
    assert load_config(path)["tracking"] == {"enabled": False}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")

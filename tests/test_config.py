"""Tests for security policy configuration."""

import tempfile
from pathlib import Path

import pytest

from smartconnect.security.config import CategoryLimit, SecurityConfig, load_config


def test_defaults():
    config = load_config()
    assert config.limit_for("complaints") == CategoryLimit(5, 60)
    assert config.limit_for("comments") == CategoryLimit(10, 60)
    assert config.limit_for("chat") == CategoryLimit(20, 60)
    assert config.limit_for("general") == CategoryLimit(50, 60)
    assert config.limit_for("upvotes") == CategoryLimit(30, 60)
    assert config.block_duration_seconds == 1800
    assert config.warning_threshold == 3
    assert config.duplicate_window_seconds == 300
    assert config.activity_log_capacity == 1000
    assert not config.shared_counters


def test_unknown_category():
    with pytest.raises(KeyError):
        SecurityConfig().limit_for("uploads")


def test_yaml_overrides():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "security.yaml"
        path.write_text(
            "block_duration_seconds: 900\n"
            "categories:\n"
            "  complaints: {max_requests: 3}\n"
            "  uploads: {max_requests: 2, window_seconds: 30}\n"
        )
        config = load_config(path)

    assert config.block_duration_seconds == 900
    assert config.limit_for("complaints") == CategoryLimit(3, 60)
    assert config.limit_for("uploads") == CategoryLimit(2, 30)
    assert config.limit_for("chat") == CategoryLimit(20, 60)


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="block_minutes"):
        SecurityConfig.from_dict({"block_minutes": 5})


def test_non_positive_limit_rejected():
    with pytest.raises(ValueError):
        SecurityConfig.from_dict({"categories": {"chat": {"max_requests": 0}}})


def test_empty_yaml_gives_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "empty.yaml"
        path.write_text("")
        assert load_config(path) == SecurityConfig()

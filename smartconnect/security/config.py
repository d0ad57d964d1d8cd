"""Static rate-limit and abuse policy configuration.

Defaults are the production values.  An optional YAML file may override any
of them::

    block_duration_seconds: 900
    categories:
      complaints: {max_requests: 3, window_seconds: 60}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class CategoryLimit:
    """Request budget for one action category."""

    max_requests: int
    window_seconds: int


def _default_categories() -> dict[str, CategoryLimit]:
    return {
        "complaints": CategoryLimit(max_requests=5, window_seconds=60),
        "comments": CategoryLimit(max_requests=10, window_seconds=60),
        "chat": CategoryLimit(max_requests=20, window_seconds=60),
        "general": CategoryLimit(max_requests=50, window_seconds=60),
        "upvotes": CategoryLimit(max_requests=30, window_seconds=60),
    }


@dataclass(frozen=True)
class SecurityConfig:
    """Abuse-mitigation policy."""

    categories: dict[str, CategoryLimit] = field(default_factory=_default_categories)
    block_duration_seconds: int = 30 * 60
    warning_threshold: int = 3
    duplicate_window_seconds: int = 5 * 60
    activity_log_capacity: int = 1000
    activity_stats_window_seconds: int = 24 * 60 * 60
    idle_entry_seconds: int = 5 * 60
    sweep_interval_seconds: int = 60
    # One counter per identity across all categories instead of one per
    # (identity, category) pair.
    shared_counters: bool = False

    def limit_for(self, category: str) -> CategoryLimit:
        """Return the limit for *category*; raises ``KeyError`` if unknown."""
        try:
            return self.categories[category]
        except KeyError:
            raise KeyError(f"Unknown rate-limit category: {category!r}") from None

    # -- loading -------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityConfig":
        """Build a config from a mapping, keeping defaults for missing keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown security config keys: {', '.join(sorted(unknown))}")

        overrides: dict[str, Any] = {k: v for k, v in data.items() if k != "categories"}
        config = replace(cls(), **overrides)

        if "categories" in data:
            categories = dict(config.categories)
            for name, raw in (data["categories"] or {}).items():
                base = categories.get(name)
                categories[name] = CategoryLimit(
                    max_requests=int(raw.get("max_requests", base.max_requests if base else 0)),
                    window_seconds=int(raw.get("window_seconds", base.window_seconds if base else 60)),
                )
            config = replace(config, categories=categories)

        for name, limit in config.categories.items():
            if limit.max_requests < 1 or limit.window_seconds < 1:
                raise ValueError(f"Category {name!r} needs positive max_requests and window_seconds")
        if config.warning_threshold < 1:
            raise ValueError("warning_threshold must be at least 1")
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SecurityConfig":
        """Load overrides from a YAML file."""
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Security config {path} must contain a mapping")
        return cls.from_dict(raw)


def load_config(path: Optional[str | Path] = None) -> SecurityConfig:
    """Return the default config, or the one in *path* when given."""
    if path is None:
        return SecurityConfig()
    return SecurityConfig.from_yaml(path)

"""Minimal strict schema for the YAML pipeline config."""

from __future__ import annotations

from pactometro.common.errors import ConfigurationError

_TOP_KNOWN = {"feed", "store", "candidacies"}
_FEED_KNOWN = {"host", "election_code", "layout", "timeout"}
_TIMEOUT_KNOWN = {"connect", "read"}
_STORE_KNOWN = {"region_table", "province_table"}
_CANDIDACIES_KNOWN = {"display_name_overrides"}


def _assert_mapping(obj, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigurationError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigurationError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str) -> None:
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigurationError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_pipeline_config(cfg, *, known_layouts: set[str]) -> dict:
    cfg = _assert_mapping(cfg, "pipeline config")
    _assert_required_keys(cfg, _TOP_KNOWN, "pipeline config")
    _assert_no_unknown_keys(cfg, _TOP_KNOWN, "pipeline config")

    feed = _assert_mapping(cfg["feed"], "feed")
    _assert_required_keys(feed, {"election_code", "layout", "timeout"}, "feed")
    _assert_no_unknown_keys(feed, _FEED_KNOWN, "feed")
    if not str(feed["election_code"]).strip():
        raise ConfigurationError("feed.election_code must not be empty")
    if feed["layout"] not in known_layouts:
        known_str = ", ".join(sorted(known_layouts))
        raise ConfigurationError(f"Unknown feed.layout {feed['layout']!r}; expected one of: {known_str}")

    timeout = _assert_mapping(feed["timeout"], "feed.timeout")
    _assert_required_keys(timeout, _TIMEOUT_KNOWN, "feed.timeout")
    _assert_no_unknown_keys(timeout, _TIMEOUT_KNOWN, "feed.timeout")
    for key in sorted(_TIMEOUT_KNOWN):
        value = timeout[key]
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise ConfigurationError(f"feed.timeout.{key} must be a positive number")

    store = _assert_mapping(cfg["store"], "store")
    _assert_required_keys(store, _STORE_KNOWN, "store")
    _assert_no_unknown_keys(store, _STORE_KNOWN, "store")
    for key in sorted(_STORE_KNOWN):
        if not isinstance(store[key], str) or not store[key].strip():
            raise ConfigurationError(f"store.{key} must be a non-empty string")

    candidacies = _assert_mapping(cfg["candidacies"], "candidacies")
    _assert_no_unknown_keys(candidacies, _CANDIDACIES_KNOWN, "candidacies")
    overrides = _assert_mapping(candidacies.get("display_name_overrides") or {}, "candidacies.display_name_overrides")
    for short_name, display_name in overrides.items():
        if not isinstance(short_name, str) or not isinstance(display_name, str):
            raise ConfigurationError("candidacies.display_name_overrides must map strings to strings")

    return cfg

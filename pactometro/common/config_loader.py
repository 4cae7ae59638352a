"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from pactometro.common.constants import (
    DEFAULT_DISPLAY_NAME_OVERRIDES,
    DEFAULT_ELECTION_CODE,
    DEFAULT_PROVINCE_TABLE,
    DEFAULT_REGION_TABLE,
    ENV_FEED_HOST,
    ENV_FEED_PASS,
    ENV_FEED_USER,
    ENV_STORE_KEY,
    ENV_STORE_URL,
)
from pactometro.common.errors import ConfigurationError
from pactometro.common.fs import read_yaml
from pactometro.common.schema import validate_pipeline_config
from pactometro.feed.layout import FEED_LAYOUTS, FeedLayout, get_layout

DEFAULT_CONFIG: dict[str, Any] = {
    "feed": {
        "host": None,
        "election_code": DEFAULT_ELECTION_CODE,
        "layout": "v1",
        "timeout": {"connect": 20.0, "read": 120.0},
    },
    "store": {
        "region_table": DEFAULT_REGION_TABLE,
        "province_table": DEFAULT_PROVINCE_TABLE,
    },
    "candidacies": {
        "display_name_overrides": dict(DEFAULT_DISPLAY_NAME_OVERRIDES),
    },
}


@dataclass(frozen=True)
class FeedSettings:
    host: str
    user: str
    password: str = field(repr=False)
    election_code: str
    layout: FeedLayout
    connect_timeout: float
    read_timeout: float


@dataclass(frozen=True)
class StoreSettings:
    url: str
    service_key: str = field(repr=False)
    region_table: str
    province_table: str


@dataclass(frozen=True)
class PipelineConfig:
    feed: FeedSettings
    store: StoreSettings | None
    display_name_overrides: dict[str, str]


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_optional_yaml(path: Path | None) -> dict:
    if path is None or not path.exists():
        return {}
    payload = read_yaml(path)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return payload


def load_config_file(config_path: Path | None, overlay_path: Path | None = None) -> dict:
    merged = _deep_merge(DEFAULT_CONFIG, _read_optional_yaml(config_path))
    merged = _deep_merge(merged, _read_optional_yaml(overlay_path))
    return validate_pipeline_config(merged, known_layouts=set(FEED_LAYOUTS))


def _env_value(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_pipeline_config(
    config_path: Path | None = None,
    *,
    overlay_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    require_store: bool = True,
) -> PipelineConfig:
    """Build the run configuration from YAML plus environment credentials.

    Every missing variable is reported at once, before any network call.
    """
    environ = os.environ if environ is None else environ
    cfg = load_config_file(config_path, overlay_path)

    host = _env_value(environ, ENV_FEED_HOST) or (cfg["feed"].get("host") or None)
    user = _env_value(environ, ENV_FEED_USER)
    password = _env_value(environ, ENV_FEED_PASS)
    store_url = _env_value(environ, ENV_STORE_URL)
    store_key = _env_value(environ, ENV_STORE_KEY)

    missing: list[str] = []
    if not host:
        missing.append(ENV_FEED_HOST)
    if not user:
        missing.append(ENV_FEED_USER)
    if not password:
        missing.append(ENV_FEED_PASS)
    if require_store:
        if not store_url:
            missing.append(ENV_STORE_URL)
        if not store_key:
            missing.append(ENV_STORE_KEY)
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    feed = FeedSettings(
        host=str(host).rstrip("/"),
        user=user,
        password=password,
        election_code=str(cfg["feed"]["election_code"]).strip(),
        layout=get_layout(cfg["feed"]["layout"]),
        connect_timeout=float(cfg["feed"]["timeout"]["connect"]),
        read_timeout=float(cfg["feed"]["timeout"]["read"]),
    )

    store = None
    if store_url and store_key:
        store = StoreSettings(
            url=store_url.rstrip("/"),
            service_key=store_key,
            region_table=cfg["store"]["region_table"],
            province_table=cfg["store"]["province_table"],
        )

    overrides = dict(cfg["candidacies"].get("display_name_overrides") or {})
    return PipelineConfig(feed=feed, store=store, display_name_overrides=overrides)

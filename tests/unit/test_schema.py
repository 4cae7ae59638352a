import copy

import pytest

from pactometro.common.config_loader import DEFAULT_CONFIG
from pactometro.common.errors import ConfigurationError
from pactometro.common.schema import validate_pipeline_config

LAYOUTS = {"v1"}


def _cfg() -> dict:
    return copy.deepcopy(DEFAULT_CONFIG)


def test_defaults_are_valid():
    assert validate_pipeline_config(_cfg(), known_layouts=LAYOUTS)["feed"]["layout"] == "v1"


def test_unknown_top_level_key_is_rejected():
    cfg = _cfg()
    cfg["extra"] = {}
    with pytest.raises(ConfigurationError, match="Unknown keys"):
        validate_pipeline_config(cfg, known_layouts=LAYOUTS)


def test_unknown_layout_is_rejected():
    cfg = _cfg()
    cfg["feed"]["layout"] = "v2"
    with pytest.raises(ConfigurationError, match="feed.layout"):
        validate_pipeline_config(cfg, known_layouts=LAYOUTS)


@pytest.mark.parametrize("value", [0, -1, "20", True])
def test_timeouts_must_be_positive_numbers(value):
    cfg = _cfg()
    cfg["feed"]["timeout"]["read"] = value
    with pytest.raises(ConfigurationError):
        validate_pipeline_config(cfg, known_layouts=LAYOUTS)


def test_blank_table_name_is_rejected():
    cfg = _cfg()
    cfg["store"]["province_table"] = " "
    with pytest.raises(ConfigurationError):
        validate_pipeline_config(cfg, known_layouts=LAYOUTS)


def test_overrides_must_map_strings():
    cfg = _cfg()
    cfg["candidacies"]["display_name_overrides"] = {"PP": 3}
    with pytest.raises(ConfigurationError):
        validate_pipeline_config(cfg, known_layouts=LAYOUTS)


def test_section_must_be_a_mapping():
    cfg = _cfg()
    cfg["store"] = None
    with pytest.raises(ConfigurationError):
        validate_pipeline_config(cfg, known_layouts=LAYOUTS)

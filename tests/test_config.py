import json

import pytest

from obfuscation.config import (
    DEFAULT_CONFIG,
    ObfuscatorConfig,
    config_from_dict,
    config_to_dict,
    load_config_from_json,
    merge_config,
    validate_config,
)


def test_defaults():
    assert DEFAULT_CONFIG.coefficient == 0.917
    assert DEFAULT_CONFIG.date_offset_days == -42
    assert DEFAULT_CONFIG.ip_style == "keep_ends"
    assert DEFAULT_CONFIG.name_style == "readable"


def test_config_is_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.coefficient = 2.0  # type: ignore[misc]


def test_merge_config_overrides_single_fields():
    merged = merge_config(DEFAULT_CONFIG, ip_style="private_range", date_offset_days=7)
    assert merged.ip_style == "private_range"
    assert merged.date_offset_days == 7
    assert merged.coefficient == DEFAULT_CONFIG.coefficient
    assert DEFAULT_CONFIG.ip_style == "keep_ends"


@pytest.mark.parametrize(
    "overrides",
    [
        {"coefficient": 0},
        {"coefficient": -1.5},
        {"coefficient": float("nan")},
        {"coefficient": "1"},
        {"date_offset_days": 1.5},
        {"date_offset_days": True},
        {"ip_style": "random"},
        {"name_style": "fancy"},
    ],
)
def test_invalid_values_raise_value_error(overrides):
    with pytest.raises(ValueError):
        merge_config(DEFAULT_CONFIG, **overrides)


def test_unknown_keys_raise_value_error():
    with pytest.raises(ValueError):
        merge_config(DEFAULT_CONFIG, seed=42)
    with pytest.raises(ValueError):
        config_from_dict({"coefficent": 0.5})


def test_validate_config_accepts_int_coefficient():
    validate_config(ObfuscatorConfig(coefficient=2))


def test_load_config_from_json(tmp_path):
    path = tmp_path / "obfuscator.json"
    path.write_text(json.dumps({"coefficient": 0.5, "name_style": "hash_prefixed"}), encoding="utf-8")

    config = load_config_from_json(str(path))

    assert config == ObfuscatorConfig(coefficient=0.5, name_style="hash_prefixed")


def test_load_config_from_json_rejects_non_object(tmp_path):
    path = tmp_path / "obfuscator.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_from_json(str(path))


def test_config_to_dict():
    assert config_to_dict(DEFAULT_CONFIG) == {
        "coefficient": 0.917,
        "date_offset_days": -42,
        "ip_style": "keep_ends",
        "name_style": "readable",
    }

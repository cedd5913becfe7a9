"""Tests for reshape defaults and YAML configuration loading."""

import pytest

from tidyshape import ConfigError, DEFAULT_CONFIG, ReshapeConfig, Table, gather, exclude, load_config
from tidyshape.config import config_from_mapping


def _write(tmp_path, text: str):
    path = tmp_path / "tidyshape.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestReshapeConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.key_name == "key"
        assert DEFAULT_CONFIG.value_name == "value"
        assert DEFAULT_CONFIG.na_rm is False
        assert DEFAULT_CONFIG.fill is None

    def test_merged_applies_non_none(self):
        merged = DEFAULT_CONFIG.merged(key_name="roadtype", value_name=None, na_rm=True)
        assert merged.key_name == "roadtype"
        assert merged.value_name == "value"
        assert merged.na_rm is True

    def test_merged_without_changes_is_same_object(self):
        assert DEFAULT_CONFIG.merged(key_name=None) is DEFAULT_CONFIG

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.key_name = "other"


class TestLoadConfig:
    def test_top_level_options(self, tmp_path):
        path = _write(tmp_path, "key_name: roadtype\nvalue_name: mpg\nna_rm: true\n")
        config = load_config(path)
        assert config == ReshapeConfig(key_name="roadtype", value_name="mpg", na_rm=True)

    def test_nested_section(self, tmp_path):
        path = _write(tmp_path, "reshape:\n  convert: true\n  fill: 0\n")
        config = load_config(path)
        assert config.convert is True
        assert config.fill == 0
        assert config.key_name == "key"

    def test_empty_file(self, tmp_path):
        assert load_config(_write(tmp_path, "")) == DEFAULT_CONFIG

    def test_empty_section(self, tmp_path):
        assert load_config(_write(tmp_path, "reshape:\n")) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "- key_name\n- value_name\n"))

    def test_section_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "reshape: [1, 2]\n"))

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ConfigError, match="factor_key"):
            load_config(_write(tmp_path, "factor_key: true\n"))

    def test_bad_bool(self, tmp_path):
        with pytest.raises(ConfigError, match="na_rm"):
            load_config(_write(tmp_path, "na_rm: sometimes\n"))

    def test_bad_name(self, tmp_path):
        with pytest.raises(ConfigError, match="key_name"):
            load_config(_write(tmp_path, "key_name: 3\n"))

    def test_same_key_and_value(self):
        with pytest.raises(ConfigError, match="must differ"):
            config_from_mapping({"key_name": "x", "value_name": "x"})

    def test_config_error_is_value_error(self, tmp_path):
        with pytest.raises(ValueError):
            load_config(tmp_path / "absent.yaml")

    def test_loaded_config_drives_gather(self, tmp_path, cars: Table):
        config = load_config(_write(tmp_path, "reshape:\n  key_name: roadtype\n  value_name: mpg\n"))
        result = gather(cars, selector=exclude("id"), config=config)
        assert result.column_names == ("id", "roadtype", "mpg")

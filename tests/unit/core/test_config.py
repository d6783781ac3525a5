"""
test_config.py
--------------
Unit tests for YAML configuration loading.
"""
import pytest

from drinklog.core.config import (
    STANDARD_UNITS,
    LedgerConfig,
    StandardUnit,
    load_config,
)
from drinklog.core.exceptions import ConfigError


class TestStandardUnit:
    def test_uk_density(self):
        assert STANDARD_UNITS["uk"].density_constant == pytest.approx(0.1)

    def test_mass_presets_use_ethanol_density(self):
        assert STANDARD_UNITS["us"].ml_per_unit == pytest.approx(17.74, abs=0.01)
        assert STANDARD_UNITS["au"].ml_per_unit == pytest.approx(12.67, abs=0.01)

    @pytest.mark.parametrize("ml", [0, -5, float("nan")])
    def test_invalid_volume(self, ml):
        with pytest.raises(ConfigError):
            StandardUnit("broken", ml)


class TestLedgerConfig:
    def test_defaults(self):
        config = LedgerConfig()
        assert config.standard_unit.name == "uk"
        assert config.approx_modifier == 0.1
        assert config.default_person_id == 1
        assert config.density_constant == pytest.approx(0.1)

    def test_from_dict_preset(self):
        config = LedgerConfig.from_dict({"standard_unit": "US"})
        assert config.standard_unit is STANDARD_UNITS["us"]

    def test_from_dict_explicit_ml(self):
        config = LedgerConfig.from_dict({"standard_unit": {"ml_per_unit": 12.5}})
        assert config.standard_unit.name == "custom"
        assert config.density_constant == pytest.approx(0.08)

    def test_from_dict_grams(self):
        config = LedgerConfig.from_dict({"standard_unit": {"grams_per_unit": 8}})
        assert config.standard_unit.ml_per_unit == pytest.approx(8 / 0.789)

    @pytest.mark.parametrize(
        "data",
        [
            {"standard_unit": "mars"},
            {"standard_unit": {"ml_per_unit": "lots"}},
            {"standard_unit": {"pints": 1}},
            {"standard_unit": 10},
            {"approx_modifier": 1.5},
            {"approx_modifier": "small"},
            {"approx_modifier": True},
            {"default_person_id": "me"},
            {"default_person_id": False},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            LedgerConfig.from_dict(data)


class TestLoadConfig:
    def test_none_gives_defaults(self):
        assert load_config(None) == LedgerConfig()

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == LedgerConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "drinklog.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == LedgerConfig()

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "drinklog.yaml"
        path.write_text(
            "standard_unit: legacy\napprox_modifier: 0.2\ndefault_person_id: 3\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.standard_unit.name == "legacy"
        assert config.approx_modifier == 0.2
        assert config.default_person_id == 3

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "drinklog.yaml"
        path.write_text("standard_unit: [uk\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "drinklog.yaml"
        path.write_text("- uk\n- us\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

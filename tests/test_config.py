# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for the engine configuration and YAML loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from carbon_esg.config import EngineConfig, LadderConfig, PillarWeights, load_config
from carbon_esg.data.models import Gas
from carbon_esg.errors import ConfigError
from carbon_esg.uncertainty.gum import MissingUncertaintyPolicy

FIXTURES = Path(__file__).parent / "fixtures"


class TestDefaults:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.coverage_factor == 2.0
        assert cfg.missing_uncertainty_policy is MissingUncertaintyPolicy.INVALIDATE
        assert cfg.pillar_weights.as_dict() == {"E": 0.40, "S": 0.30, "G": 0.30}
        assert cfg.gwp == {}
        assert cfg.sector is None

    def test_auto_coverage_factor(self):
        assert EngineConfig(coverage_factor="auto").coverage_factor == "auto"

    def test_non_positive_coverage_factor(self):
        with pytest.raises(ValidationError):
            EngineConfig(coverage_factor=0)

    def test_ladder_must_be_ordered(self):
        with pytest.raises(ValidationError, match="non-decreasing"):
            LadderConfig(a_ratio=1.3, b_plus_ratio=1.0, b_ratio=1.2, c_ratio=1.5)

    def test_pillar_weight_bounds(self):
        with pytest.raises(ValidationError):
            PillarWeights(E=1.5)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_fixture(self):
        cfg = load_config(FIXTURES / "config.yaml")
        assert cfg.organisation == "Atelier Test SARL"
        assert cfg.sector == "services"
        assert cfg.revenue_thousands == 1000
        assert cfg.gwp[Gas.CH4] == 28
        assert cfg.missing_uncertainty_policy is MissingUncertaintyPolicy.ZERO
        assert cfg.pillar_weights.E == 0.5
        assert [s.key for s in cfg.extra_sectors] == ["hospitality"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_values(self):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(FIXTURES / "config_invalid.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("gwp: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == EngineConfig()

    def test_unknown_gas_rejected(self, tmp_path):
        path = tmp_path / "gas.yaml"
        path.write_text("gwp:\n  XYZ: 3\n")
        with pytest.raises(ConfigError):
            load_config(path)

"""Unit tests for Config and related Pydantic models (create_divi_extension.config).

Tests cover:
- ToolchainConfig / NetworkConfig defaults and validation
- Config defaults and reserved_names
- Config save/load round trip
- Config.from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from create_divi_extension.config import Config, NetworkConfig, ToolchainConfig


class TestToolchainConfig:
    @pytest.mark.unit
    def test_defaults(self):
        cfg = ToolchainConfig()
        assert cfg.min_node == "6.0.0"
        assert cfg.min_npm == "3.0.0"
        assert cfg.legacy_scripts_package == "react-scripts@0.9.x"


class TestNetworkConfig:
    @pytest.mark.unit
    def test_defaults(self):
        cfg = NetworkConfig()
        assert cfg.registry_host == "registry.yarnpkg.com"
        assert cfg.probe_timeout == 5.0

    @pytest.mark.unit
    def test_probe_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            NetworkConfig(probe_timeout=0)


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        cfg = Config()
        assert cfg.scripts_package == "react-scripts"
        assert cfg.runtime_packages == ["react", "react-dom"]
        assert cfg.prefix_word == "divi"
        assert cfg.prefix_length == 4
        assert cfg.scaffold_files == [
            "template.php",
            "module/loader.php",
            "module/__Prefix_Custom.php",
        ]

    @pytest.mark.unit
    def test_template_dir_ships_with_package(self):
        cfg = Config()
        assert cfg.template_dir.name == "template"
        assert cfg.template_dir.parent.name == "create_divi_extension"

    @pytest.mark.unit
    def test_reserved_names_sorted(self):
        assert Config().reserved_names == ["react", "react-dom", "react-scripts"]

    @pytest.mark.unit
    def test_reserved_names_follow_scripts_package(self):
        cfg = Config(scripts_package="divi-scripts")
        assert "divi-scripts" in cfg.reserved_names
        assert "react-scripts" not in cfg.reserved_names

    @pytest.mark.unit
    def test_prefix_length_must_be_positive(self):
        with pytest.raises(ValidationError):
            Config(prefix_length=0)

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        cfg = Config(scripts_package="divi-scripts", network=NetworkConfig(probe_timeout=2.5))
        path = cfg.save(tmp_path / "nested" / "config.json")
        assert path.exists()

        loaded = Config.load(path)
        assert loaded.scripts_package == "divi-scripts"
        assert loaded.network.probe_timeout == 2.5


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_empty_env_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config.from_env()
        assert cfg == Config()

    @pytest.mark.unit
    def test_reads_overrides(self, tmp_path: Path):
        env = {
            "CDE_SCRIPTS_PACKAGE": "divi-scripts",
            "CDE_TEMPLATE_DIR": str(tmp_path),
            "CDE_PREFIX_WORD": "et",
            "CDE_REGISTRY_HOST": "registry.npmjs.org",
            "CDE_PROBE_TIMEOUT": "1.5",
            "CDE_DOWNLOAD_TIMEOUT": "30",
            "CDE_MIN_NODE": "8.0.0",
            "CDE_MIN_NPM": "5.0.0",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = Config.from_env()

        assert cfg.scripts_package == "divi-scripts"
        assert cfg.template_dir == tmp_path
        assert cfg.prefix_word == "et"
        assert cfg.network.registry_host == "registry.npmjs.org"
        assert cfg.network.probe_timeout == 1.5
        assert cfg.network.download_timeout == 30.0
        assert cfg.toolchain.min_node == "8.0.0"
        assert cfg.toolchain.min_npm == "5.0.0"

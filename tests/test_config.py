"""Tests for configuration loading and merging."""

import logging
from pathlib import Path
from unittest.mock import patch

import yaml

from kickstart.config.loader import (
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    load_config,
    load_yaml_config,
    local_config_exists,
    save_config,
)
from kickstart.config.schema import DEFAULT_CONFIG, DEFAULT_INSTALL_TIMEOUT, KickstartConfig
from kickstart.config.wizard import config_sources


class TestKickstartConfig:
    """Tests for KickstartConfig dataclass."""

    def test_default_config_values(self) -> None:
        """Test that DEFAULT_CONFIG has expected values."""
        assert DEFAULT_CONFIG.environment == "development"
        assert DEFAULT_CONFIG.skip_install is False
        assert DEFAULT_CONFIG.skip_git is False
        assert DEFAULT_CONFIG.install_timeout == DEFAULT_INSTALL_TIMEOUT == 600
        assert DEFAULT_CONFIG.parallel is False
        assert DEFAULT_CONFIG.template is None
        assert DEFAULT_CONFIG.package_manager is None

    def test_merge_prefers_other_values(self) -> None:
        base = KickstartConfig(template="nextjs-saas", install_timeout=60)
        override = KickstartConfig(template="express-api", install_timeout=120)
        merged = base.merge(override)

        assert merged.template == "express-api"
        assert merged.install_timeout == 120

    def test_merge_preserves_base_when_other_is_none(self) -> None:
        base = KickstartConfig(template="nextjs-saas", package_manager="pnpm")
        override = KickstartConfig(template="express-api")
        merged = base.merge(override)

        assert merged.template == "express-api"
        assert merged.package_manager == "pnpm"

    def test_merge_keeps_explicit_false(self) -> None:
        """False is a value, not 'unset'."""
        merged = KickstartConfig(skip_git=True).merge(KickstartConfig(skip_git=False))
        assert merged.skip_git is False

    def test_merge_returns_new_instance(self) -> None:
        base = KickstartConfig(template="nextjs-saas")
        override = KickstartConfig(parallel=True)
        merged = base.merge(override)

        assert merged is not base
        assert merged is not override
        assert base.parallel is None
        assert override.template is None

    def test_to_dict_excludes_none(self) -> None:
        data = KickstartConfig(template="express-api", skip_git=True).to_dict()
        assert data == {"template": "express-api", "skip_git": True}

    def test_from_dict_creates_config(self) -> None:
        data = {
            "template": "nextjs-saas",
            "environment": "production",
            "package_manager": "PNPM",
            "skip_install": True,
            "install_timeout": 300,
        }
        config = KickstartConfig.from_dict(data)

        assert config.template == "nextjs-saas"
        assert config.environment == "production"
        assert config.package_manager == "pnpm"
        assert config.skip_install is True
        assert config.install_timeout == 300
        assert config.skip_git is None

    def test_from_dict_ignores_invalid_values(self) -> None:
        data = {
            "environment": "staging",
            "package_manager": "cargo",
            "install_timeout": "soon",
            "unknown_key": "value",
        }
        config = KickstartConfig.from_dict(data)

        assert config.environment is None
        assert config.package_manager is None
        assert config.install_timeout is None
        assert not hasattr(config, "unknown_key")

    def test_from_dict_coerces_types(self) -> None:
        config = KickstartConfig.from_dict({"install_timeout": "90", "parallel": 1})
        assert config.install_timeout == 90
        assert config.parallel is True


class TestConfigPaths:
    """Tests for config path functions."""

    def test_get_home_config_path(self) -> None:
        path = get_home_config_path()
        assert path.name == "config.yaml"
        assert path.parent.name == ".kickstart"
        assert path.parent.parent == Path.home()

    def test_get_local_config_path(self, tmp_path: Path) -> None:
        with patch("kickstart.config.loader.Path.cwd", return_value=tmp_path):
            path = get_local_config_path()
            assert path.name == "config.yaml"
            assert path.parent.name == ".kickstart"
            assert path.parent.parent == tmp_path


class TestConfigLoading:
    """Tests for config file loading."""

    def test_load_yaml_config_returns_dict(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("template: express-api\ninstall_timeout: 30\n")

        assert load_yaml_config(config_file) == {
            "template": "express-api",
            "install_timeout": 30,
        }

    def test_load_yaml_config_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        assert load_yaml_config(tmp_path / "nonexistent.yaml") is None

    def test_load_yaml_config_returns_none_for_empty_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_yaml_config(config_file) is None

    def test_load_yaml_config_returns_none_for_invalid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")
        assert load_yaml_config(config_file) is None

    def test_load_yaml_config_returns_none_for_non_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")
        assert load_yaml_config(config_file) is None

    def test_config_exists_helpers(self, tmp_path: Path) -> None:
        config_file = tmp_path / ".kickstart" / "config.yaml"
        missing = tmp_path / "missing" / "config.yaml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("template: express-api\n")

        with patch("kickstart.config.loader.get_home_config_path", return_value=config_file):
            assert home_config_exists() is True
        with patch("kickstart.config.loader.get_local_config_path", return_value=missing):
            assert local_config_exists() is False

    def test_load_config_layers_local_over_home(self, tmp_path: Path) -> None:
        """Local config wins over global, which wins over defaults."""
        home = tmp_path / "home.yaml"
        local = tmp_path / "local.yaml"
        home.write_text("template: nextjs-saas\npackage_manager: yarn\nskip_git: true\n")
        local.write_text("template: express-api\n")

        with (
            patch("kickstart.config.loader.get_home_config_path", return_value=home),
            patch("kickstart.config.loader.get_local_config_path", return_value=local),
        ):
            config = load_config()

        assert config.template == "express-api"
        assert config.package_manager == "yarn"
        assert config.skip_git is True
        assert config.environment == "development"  # from DEFAULT_CONFIG
        assert config.install_timeout == 600

    def test_load_config_without_files(self, tmp_path: Path) -> None:
        with (
            patch(
                "kickstart.config.loader.get_home_config_path",
                return_value=tmp_path / "a.yaml",
            ),
            patch(
                "kickstart.config.loader.get_local_config_path",
                return_value=tmp_path / "b.yaml",
            ),
        ):
            assert load_config() == DEFAULT_CONFIG

    def test_save_config_writes_only_set_values(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        save_config(KickstartConfig(template="nextjs-saas", skip_install=True), path)

        data = yaml.safe_load(path.read_text())
        assert data == {"template": "nextjs-saas", "skip_install": True}


class TestConfigDiagnostics:
    """Tests for warnings and per-key sources."""

    def test_unknown_keys_are_reported(self, tmp_path: Path, caplog) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("template: express-api\ntemplat: typo\n")

        with caplog.at_level(logging.WARNING, logger="kickstart.config.loader"):
            data = load_yaml_config(config_file)

        assert data is not None
        assert "templat" in caplog.text

    def test_invalid_yaml_is_reported(self, tmp_path: Path, caplog) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with caplog.at_level(logging.WARNING, logger="kickstart.config.loader"):
            assert load_yaml_config(config_file) is None

        assert "not valid YAML" in caplog.text

    def test_saved_file_round_trips_through_loader(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        save_config(KickstartConfig(package_manager="pnpm", parallel=True), path)

        assert path.read_text().startswith("#")
        assert KickstartConfig.from_dict(load_yaml_config(path) or {}) == KickstartConfig(
            package_manager="pnpm", parallel=True
        )

    def test_config_sources(self, tmp_path: Path) -> None:
        home = tmp_path / "home.yaml"
        local = tmp_path / "local.yaml"
        home.write_text("package_manager: yarn\nskip_git: true\n")
        local.write_text("skip_git: false\n")

        with (
            patch("kickstart.config.loader.get_home_config_path", return_value=home),
            patch("kickstart.config.loader.get_local_config_path", return_value=local),
        ):
            sources = config_sources()

        assert sources["package_manager"] == "global"
        assert sources["skip_git"] == "local"
        assert sources["environment"] == "default"

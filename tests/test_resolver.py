"""Tests for option/prompt/config/detection resolution."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from kickstart.config import CliOptions, ConfigResolver, KickstartConfig
from kickstart.detection import EnvironmentDetector
from kickstart.errors import (
    AbortedByUserError,
    InvalidEnvironmentError,
    InvalidProjectNameError,
    InvalidTemplateError,
    UnknownPackageManagerError,
)
from kickstart.package_managers import BUN, NPM, PNPM, YARN
from kickstart.templates import default_registry


@pytest.fixture
def resolver() -> ConfigResolver:
    return ConfigResolver(default_registry(), EnvironmentDetector(environ={}))


@pytest.fixture
def prompter() -> MagicMock:
    mock = MagicMock()
    mock.project_name.return_value = "prompted-app"
    mock.select_template.side_effect = lambda registry, default=None: registry.get(
        "nextjs-saas"
    )
    mock.confirm_overwrite.return_value = True
    mock.confirm_config.return_value = True
    return mock


def test_non_interactive_defaults(resolver: ConfigResolver, tmp_path: Path) -> None:
    """With --yes and no name, every field falls back to a default."""
    config = resolver.resolve(CliOptions(yes=True), cwd=tmp_path)

    assert config.name == "my-app"
    assert config.path == tmp_path / "my-app"
    assert config.path.is_absolute()
    assert config.template.id == "nextjs-ecommerce"
    assert config.environment == "development"
    assert config.package_manager is NPM
    assert config.skip_install is False
    assert config.skip_git is False
    assert config.overwrite is False
    assert config.install_timeout == 600
    assert config.api_key is None


def test_cli_options_are_used(resolver: ConfigResolver, tmp_path: Path) -> None:
    options = CliOptions(
        template="express-api",
        environment="production",
        yes=True,
        skip_install=True,
        skip_git=True,
        package_manager="bun",
        install_timeout=30,
        api_key="zfi_test_123",
    )
    config = resolver.resolve(options, project_name="api", cwd=tmp_path)

    assert config.template.id == "express-api"
    assert config.environment == "production"
    assert config.package_manager is BUN
    assert config.skip_install is True
    assert config.skip_git is True
    assert config.install_timeout == 30
    assert config.api_key == "zfi_test_123"


def test_unknown_template(resolver: ConfigResolver, tmp_path: Path) -> None:
    with pytest.raises(InvalidTemplateError):
        resolver.resolve(CliOptions(template="rails", yes=True), cwd=tmp_path)


@pytest.mark.parametrize("name", ["", "../escape", "Bad Name"])
def test_invalid_name(resolver: ConfigResolver, tmp_path: Path, name: str) -> None:
    with pytest.raises(InvalidProjectNameError) as exc_info:
        resolver.resolve(CliOptions(yes=True), project_name=name, cwd=tmp_path)
    assert exc_info.value.exit_code == 4


def test_invalid_environment(resolver: ConfigResolver, tmp_path: Path) -> None:
    with pytest.raises(InvalidEnvironmentError) as exc_info:
        resolver.resolve(CliOptions(environment="staging", yes=True), cwd=tmp_path)
    assert exc_info.value.environment == "staging"
    assert exc_info.value.exit_code == 9


def test_unknown_package_manager(resolver: ConfigResolver, tmp_path: Path) -> None:
    with pytest.raises(UnknownPackageManagerError) as exc_info:
        resolver.resolve(CliOptions(package_manager="deno", yes=True), cwd=tmp_path)
    assert exc_info.value.name == "deno"
    assert "pnpm" in exc_info.value.available
    assert exc_info.value.exit_code == 10


def test_scoped_name_uses_bare_directory(resolver: ConfigResolver, tmp_path: Path) -> None:
    config = resolver.resolve(CliOptions(yes=True), project_name="@acme/store", cwd=tmp_path)
    assert config.name == "@acme/store"
    assert config.path == tmp_path / "store"


def test_explicit_destination(resolver: ConfigResolver, tmp_path: Path) -> None:
    config = resolver.resolve(
        CliOptions(yes=True), project_name="shop", cwd=tmp_path, destination=Path("out/here")
    )
    assert config.path == tmp_path / "out" / "here"


def test_package_manager_detected_from_cwd(resolver: ConfigResolver, tmp_path: Path) -> None:
    (tmp_path / "yarn.lock").touch()
    config = resolver.resolve(CliOptions(yes=True), cwd=tmp_path)
    assert config.package_manager is YARN


def test_user_agent_hint(tmp_path: Path) -> None:
    detector = EnvironmentDetector(environ={"npm_config_user_agent": "pnpm/9.0.0 npm/?"})
    resolver = ConfigResolver(default_registry(), detector)
    config = resolver.resolve(CliOptions(yes=True), cwd=tmp_path)
    assert config.package_manager is PNPM


class TestPrecedence:
    """CLI > prompt > config file > detection > default."""

    def test_config_file_beats_detection(self, tmp_path: Path) -> None:
        (tmp_path / "yarn.lock").touch()
        defaults = KickstartConfig(package_manager="pnpm", template="express-api")
        resolver = ConfigResolver(
            default_registry(), EnvironmentDetector(environ={}), defaults=defaults
        )

        config = resolver.resolve(CliOptions(yes=True), cwd=tmp_path)

        assert config.package_manager is PNPM
        assert config.template.id == "express-api"

    def test_cli_beats_config_file(self, tmp_path: Path) -> None:
        defaults = KickstartConfig(package_manager="pnpm", skip_git=True, install_timeout=5)
        resolver = ConfigResolver(
            default_registry(), EnvironmentDetector(environ={}), defaults=defaults
        )

        config = resolver.resolve(
            CliOptions(yes=True, package_manager="npm", install_timeout=90), cwd=tmp_path
        )

        assert config.package_manager is NPM
        assert config.install_timeout == 90
        assert config.skip_git is True  # not given on the CLI

    def test_prompt_beats_config_file(self, prompter: MagicMock, tmp_path: Path) -> None:
        defaults = KickstartConfig(template="express-api")
        resolver = ConfigResolver(
            default_registry(), EnvironmentDetector(environ={}), prompter, defaults
        )

        config = resolver.resolve(CliOptions(), cwd=tmp_path)

        assert config.name == "prompted-app"
        assert config.template.id == "nextjs-saas"
        prompter.select_template.assert_called_once()
        assert prompter.select_template.call_args.kwargs["default"] == "express-api"

    def test_cli_beats_prompt(self, prompter: MagicMock, tmp_path: Path) -> None:
        resolver = ConfigResolver(default_registry(), EnvironmentDetector(environ={}), prompter)

        config = resolver.resolve(
            CliOptions(template="express-api"), project_name="given", cwd=tmp_path
        )

        assert config.name == "given"
        assert config.template.id == "express-api"
        prompter.project_name.assert_not_called()
        prompter.select_template.assert_not_called()


class TestPrompts:
    def test_yes_disables_prompts(self, prompter: MagicMock, tmp_path: Path) -> None:
        resolver = ConfigResolver(default_registry(), EnvironmentDetector(environ={}), prompter)
        resolver.resolve(CliOptions(yes=True), cwd=tmp_path)

        prompter.project_name.assert_not_called()
        prompter.confirm_config.assert_not_called()

    def test_declined_confirmation_aborts(self, prompter: MagicMock, tmp_path: Path) -> None:
        prompter.confirm_config.return_value = False
        resolver = ConfigResolver(default_registry(), EnvironmentDetector(environ={}), prompter)

        with pytest.raises(AbortedByUserError):
            resolver.resolve(CliOptions(), project_name="shop", cwd=tmp_path)

    def test_overwrite_prompt_for_non_empty_destination(
        self, prompter: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / "shop").mkdir()
        (tmp_path / "shop" / "keep.txt").write_text("x")
        resolver = ConfigResolver(default_registry(), EnvironmentDetector(environ={}), prompter)

        config = resolver.resolve(CliOptions(), project_name="shop", cwd=tmp_path)

        prompter.confirm_overwrite.assert_called_once_with(tmp_path / "shop")
        assert config.overwrite is True

    def test_no_overwrite_prompt_for_empty_destination(
        self, prompter: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / "shop").mkdir()
        resolver = ConfigResolver(default_registry(), EnvironmentDetector(environ={}), prompter)

        resolver.resolve(CliOptions(), project_name="shop", cwd=tmp_path)

        prompter.confirm_overwrite.assert_not_called()


@pytest.mark.parametrize(("given", "expected"), [(0, None), (-1, None), (45, 45)])
def test_timeout_normalization(
    resolver: ConfigResolver, tmp_path: Path, given: int, expected
) -> None:
    config = resolver.resolve(CliOptions(yes=True, install_timeout=given), cwd=tmp_path)
    assert config.install_timeout == expected


def test_project_config_to_dict_hides_credentials(
    resolver: ConfigResolver, tmp_path: Path
) -> None:
    config = resolver.resolve(CliOptions(yes=True, api_key="secret-key"), cwd=tmp_path)
    data = config.to_dict()
    assert data["api_key"] == "set"
    assert "secret-key" not in str(data)

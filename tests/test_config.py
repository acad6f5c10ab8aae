from __future__ import annotations

import os
from pathlib import Path

import pytest

from dotboot import config


@pytest.fixture
def tmp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("DOTBOOT_CONFIG", raising=False)
    return home


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data = tmp_path / "dotboot_data_home"
    data.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("DOTBOOT_DATA_HOME", str(data))
    return data


def test_get_data_root_prefers_dotboot_data_home(data_home: Path) -> None:
    """
    DOTBOOT_DATA_HOME wins when present.
    """
    assert config.get_data_root() == data_home


def test_get_data_root_defaults_to_local_share_and_ignores_xdg(
    tmp_home: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("DOTBOOT_DATA_HOME", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_home / "xdg_should_be_ignored"))

    expected = Path(os.path.expanduser("~")) / ".local" / "share"
    assert config.get_data_root() == expected
    assert expected.is_dir()


def test_logs_dir_is_under_data_root(data_home: Path) -> None:
    assert config.logs_dir(data_home) == data_home / "dotboot" / "logs"


# ----------------------------------------------------------------
# Packaged defaults
# ----------------------------------------------------------------


def test_packaged_defaults_describe_stock_dotfiles(tmp_home: Path) -> None:
    cfg = config.load_bootstrap_config()

    assert cfg.repo_url == "https://github.com/DeveloperJosh/dotfiles.git"
    assert cfg.units == ["hypr", "kitty", "waybar", "fastfetch"]
    assert cfg.dotfiles_dir == tmp_home / ".dotfiles"
    assert cfg.config_dir == tmp_home / ".config"
    assert cfg.backup_parent == tmp_home
    assert cfg.backup_prefix == ".config_backups_"
    assert cfg.timestamp_format == "%Y%m%d_%H%M%S"
    assert cfg.clone_timeout > 0


def test_missing_defaults_yaml_raises() -> None:
    with pytest.raises(FileNotFoundError):
        config.load_defaults_yaml("does-not-exist.yaml")


# ----------------------------------------------------------------
# Overrides
# ----------------------------------------------------------------


def test_user_config_in_config_home_is_merged(tmp_home: Path) -> None:
    override = tmp_home / ".config" / "dotboot" / "bootstrap.yaml"
    override.parent.mkdir(parents=True)
    override.write_text(
        "paths:\n  config_dir: /srv/cfg\nunits: [nvim, tmux]\n",
        encoding="utf-8",
    )

    cfg = config.load_bootstrap_config()

    assert cfg.config_dir == Path("/srv/cfg")
    # untouched nested keys keep their defaults
    assert cfg.dotfiles_dir == tmp_home / ".dotfiles"
    assert cfg.units == ["nvim", "tmux"]


def test_dotboot_config_env_wins(
    tmp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    explicit = tmp_path / "custom.yaml"
    explicit.write_text(
        "repository:\n  url: https://example.invalid/dots.git\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DOTBOOT_CONFIG", str(explicit))

    cfg = config.load_bootstrap_config()

    assert cfg.repo_url == "https://example.invalid/dots.git"


def test_explicit_override_must_exist(
    tmp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DOTBOOT_CONFIG", str(tmp_path / "missing.yaml"))

    with pytest.raises(FileNotFoundError):
        config.load_bootstrap_config()


def test_override_must_be_mapping(tmp_home: Path, tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        config.load_bootstrap_config(override_path=bad)


def test_paths_expand_environment_variables(
    tmp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DOTS_ROOT", str(tmp_path / "dots"))
    override = tmp_path / "env.yaml"
    override.write_text(
        "paths:\n  dotfiles_dir: $DOTS_ROOT/main\n", encoding="utf-8"
    )

    cfg = config.load_bootstrap_config(override_path=override)

    assert cfg.dotfiles_dir == tmp_path / "dots" / "main"


# ----------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", 42])
def test_validate_units_rejects_bad_names(name) -> None:
    with pytest.raises(ValueError):
        config.validate_units([name])


def test_validate_units_requires_list() -> None:
    with pytest.raises(ValueError):
        config.validate_units("hypr")


def test_deep_merge_does_not_mutate_base() -> None:
    base = {"paths": {"a": 1, "b": 2}, "units": ["x"]}
    merged = config.deep_merge(base, {"paths": {"b": 3}, "units": ["y"]})

    assert merged == {"paths": {"a": 1, "b": 3}, "units": ["y"]}
    assert base == {"paths": {"a": 1, "b": 2}, "units": ["x"]}


def test_get_path_returns_default_for_missing_keys() -> None:
    cfg = config.BootstrapConfig({"paths": {"config_dir": "/c"}, "units": []})

    assert cfg.get_path("paths.config_dir") == "/c"
    assert cfg.get_path("paths.nope", "fallback") == "fallback"
    assert cfg.get_path("paths.config_dir.deeper", None) is None
    assert cfg.get_path("", "x") == "x"


def test_override_with_yaml_syntax_error_is_value_error(
    tmp_home: Path, tmp_path: Path
) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("units: [hypr\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        config.load_bootstrap_config(override_path=broken)


@pytest.mark.parametrize("value", ["soon", 0, -5, 1.5, True, None])
def test_clone_timeout_must_be_positive_int(value) -> None:
    with pytest.raises(ValueError, match="clone.timeout"):
        config.BootstrapConfig({"clone": {"timeout": value}, "units": []})


def test_clone_timeout_is_validated_at_load(
    tmp_home: Path, tmp_path: Path
) -> None:
    override = tmp_path / "timeout.yaml"
    override.write_text("clone:\n  timeout: soon\n", encoding="utf-8")

    with pytest.raises(ValueError):
        config.load_bootstrap_config(override_path=override)


def test_clone_timeout_defaults_when_unset() -> None:
    cfg = config.BootstrapConfig({"units": []})

    assert cfg.clone_timeout == 600

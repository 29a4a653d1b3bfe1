"""Tests for config path resolution helpers."""

from pathlib import Path

from clopctl.config.paths import (
    channel_socket_path,
    default_config_path,
    default_log_file,
    default_runtime_dir,
    resolve_overridable_path,
)


def test_explicit_path_wins(tmp_path: Path) -> None:
    resolved = resolve_overridable_path(
        explicit_path=tmp_path / "explicit.toml",
        env={"X": str(tmp_path / "env.toml")},
        env_var="X",
        default_factory=lambda: tmp_path / "default.toml",
    )
    assert resolved == (tmp_path / "explicit.toml").resolve()


def test_blank_env_value_falls_back_to_default(tmp_path: Path) -> None:
    resolved = resolve_overridable_path(
        explicit_path=None,
        env={"X": "   "},
        env_var="X",
        default_factory=lambda: tmp_path / "default.toml",
    )
    assert resolved == (tmp_path / "default.toml").resolve()


def test_config_and_log_locations_honor_environment(tmp_path: Path) -> None:
    env = {
        "CLOPCTL_CONFIG": str(tmp_path / "custom.toml"),
        "CLOPCTL_LOG_DIR": str(tmp_path / "logs"),
    }
    assert default_config_path(env) == (tmp_path / "custom.toml").resolve()
    assert default_log_file(env) == (tmp_path / "logs" / "clopctl.log").resolve()


def test_runtime_dir_prefers_xdg_runtime_dir(tmp_path: Path) -> None:
    assert default_runtime_dir({"XDG_RUNTIME_DIR": str(tmp_path)}) == (tmp_path / "clop").resolve()


def test_runtime_dir_without_xdg_is_per_user_temp_dir() -> None:
    runtime_dir = default_runtime_dir({})
    assert runtime_dir.name.startswith("clop-")


def test_channel_socket_path_appends_sock_suffix(tmp_path: Path) -> None:
    path = channel_socket_path(tmp_path, "com.example.channel")
    assert path == tmp_path / "com.example.channel.sock"

"""Shared path utilities for configuration, logs and channel sockets.

This module centralizes how the client discovers locations for
its config file, log file and the runtime directory holding the
local channel sockets.

Policy:
- Config: ``$CLOPCTL_CONFIG`` or ``~/.config/clopctl/config.toml``
- Logs: ``$CLOPCTL_LOG_DIR`` or ``~/.cache/clopctl/logs``
- Runtime: ``$XDG_RUNTIME_DIR/clop`` or ``<tmp>/clop-<uid>``
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from collections.abc import Mapping
from typing import Callable, Final


_ENV_CONFIG_FILE: Final[str] = "CLOPCTL_CONFIG"
_ENV_LOG_DIR: Final[str] = "CLOPCTL_LOG_DIR"
_ENV_RUNTIME_DIR: Final[str] = "XDG_RUNTIME_DIR"


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Resolve a configuration path honoring explicit and environment overrides."""

    if explicit_path is not None:
        return Path(explicit_path).expanduser().resolve()

    mapping = env if env is not None else os.environ
    if env_var:
        candidate = mapping.get(env_var) or ""
        candidate = candidate.strip()
        if candidate:
            return Path(candidate).expanduser().resolve()

    default_path = default_factory()
    return default_path.expanduser().resolve()


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the path to the TOML config file."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=_ENV_CONFIG_FILE,
        default_factory=lambda: Path.home() / ".config" / "clopctl" / "config.toml",
    )


def default_log_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the default directory for log files."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=_ENV_LOG_DIR,
        default_factory=lambda: Path.home() / ".cache" / "clopctl" / "logs",
    )


def default_log_file(env: Mapping[str, str] | None = None) -> Path:
    """Get the default log file path."""

    return (default_log_dir(env) / "clopctl.log").resolve()


def default_runtime_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the directory where the service exposes its channel sockets."""

    mapping = env if env is not None else os.environ
    runtime_root = (mapping.get(_ENV_RUNTIME_DIR) or "").strip()
    if runtime_root:
        return (Path(runtime_root) / "clop").resolve()

    uid = os.getuid() if hasattr(os, "getuid") else 0
    return (Path(tempfile.gettempdir()) / f"clop-{uid}").resolve()


def channel_socket_path(runtime_dir: Path, channel_name: str) -> Path:
    """Map a well-known channel name onto its socket file."""

    return runtime_dir / f"{channel_name}.sock"


__all__ = [
    "channel_socket_path",
    "default_config_path",
    "default_log_dir",
    "default_log_file",
    "default_runtime_dir",
    "resolve_overridable_path",
]

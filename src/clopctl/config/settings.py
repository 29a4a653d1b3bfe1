"""Where: src/clopctl/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to feature layers without file I/O.
Assumptions: - Non-positive timing values mean "use the default".
Trade-offs: - Validation is limited to simple boundary checks.
"""

from __future__ import annotations

from pathlib import Path

from clopctl.config.config import config as app_config
from clopctl.config.paths import default_runtime_dir

# Well-known channel identifiers ---------------------------------------------

# Submissions and stop requests flow to the service on this channel.
OPTIMISATION_CHANNEL: str = "com.lowtechguys.Clop.optimisationService"

# Responses, errors and progress snapshots flow back to the client here.
OPTIMISATION_RESPONSE_CHANNEL: str = "com.lowtechguys.Clop.optimisationServiceResponse"

# Tag stamped on every request so the service can tell where it came from.
REQUEST_SOURCE: str = "cli"


def _positive(value: object, default: float) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return default


# Channel timing ---------------------------------------------------------------

SEND_TIMEOUT_DEFAULT: float = 30.0
SEND_TIMEOUT: float = _positive(app_config.send_timeout, SEND_TIMEOUT_DEFAULT)

POLL_INTERVAL_DEFAULT: float = 0.1
POLL_INTERVAL: float = _positive(app_config.poll_interval, POLL_INTERVAL_DEFAULT)

COMPLETION_TIMEOUT_DEFAULT: float = 600.0


def _completion_timeout(value: object) -> float | None:
    """Zero or negative opts out of the bound; anything non-numeric gets the default."""

    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return COMPLETION_TIMEOUT_DEFAULT
    return float(value) if value > 0 else None


# None waits forever for outstanding items.
COMPLETION_TIMEOUT: float | None = _completion_timeout(app_config.completion_timeout)

# Service discovery ------------------------------------------------------------

RUNTIME_DIR: Path = app_config.runtime_dir or default_runtime_dir()

SERVICE_COMMAND: tuple[str, ...] = tuple(str(part) for part in app_config.service_command)

LAUNCH_GRACE_DEFAULT: float = 1.0
LAUNCH_GRACE: float = _positive(app_config.launch_grace, LAUNCH_GRACE_DEFAULT)

# Progress rendering -----------------------------------------------------------

PROGRESS_BAR_SEGMENTS: int = 20
PROGRESS_LABEL_WIDTH: int = 50


__all__ = [
    "COMPLETION_TIMEOUT",
    "LAUNCH_GRACE",
    "OPTIMISATION_CHANNEL",
    "OPTIMISATION_RESPONSE_CHANNEL",
    "POLL_INTERVAL",
    "PROGRESS_BAR_SEGMENTS",
    "PROGRESS_LABEL_WIDTH",
    "REQUEST_SOURCE",
    "RUNTIME_DIR",
    "SEND_TIMEOUT",
    "SERVICE_COMMAND",
]

"""Configuration management for clopctl."""

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar

from clopctl.config.paths import default_config_path
from clopctl.platform.logging import logger


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Client configuration."""

    # Log file path
    log_file: Path | None = _path_field()

    # Directory holding the service channel sockets
    runtime_dir: Path | None = _path_field()

    # Seconds to wait for the service to acknowledge a submission
    send_timeout: float = 30.0

    # Seconds to wait for every item to resolve (0 or less waits forever)
    completion_timeout: float = 600.0

    # Seconds between completion checks
    poll_interval: float = 0.1

    # Command used to start the service when it is not reachable
    service_command: list[str] = field(default_factory=list)

    # Seconds to wait after launching the service before probing again
    launch_grace: float = 1.0

    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata."""
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value).expanduser() if value.strip() else None)

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Config":
        """Load configuration from file.

        Args:
            config_file: Explicit file to read. Defaults to ``default_config_path()``.

        Returns:
            Config: Loaded configuration object. Missing files yield defaults.
        """
        target = config_file or default_config_path()

        # If config is already loaded from the same file, return cached instance
        if cls._instance is not None and cls._loaded_from == target:
            return cls._instance

        if not target.exists():
            instance = cls()
        else:
            try:
                with open(target, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.error("Failed to load configuration: %s", e)
                raise

            known = {f.name for f in fields(cls)}
            unknown = sorted(set(config_dict) - known)
            if unknown:
                logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
            instance = cls(**{key: value for key, value in config_dict.items() if key in known})
            logger.debug("Configuration loaded from %s", target)

        cls._instance = instance
        cls._loaded_from = target
        return instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached instance so the next ``load`` re-reads the file."""
        cls._instance = None
        cls._loaded_from = None


# Global configuration instance
config = Config.load()

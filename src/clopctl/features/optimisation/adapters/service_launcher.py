"""Start the optimisation service when it is not already listening."""

from __future__ import annotations

import subprocess
import time
from collections.abc import Callable, Sequence
from typing import final

from clopctl.features.optimisation.domain import ChannelUnreachableError
from clopctl.features.optimisation.usecases.ports import RequestChannel
from clopctl.platform.logging import logger


@final
class SubprocessServiceLauncher:
    """Probe the request channel and, if nobody answers, spawn ``command`` detached."""

    def __init__(
        self,
        channel: RequestChannel,
        command: Sequence[str],
        *,
        grace: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._channel = channel
        self._command = tuple(command)
        self._grace = grace
        self._sleep = sleep

    def ensure_service_available(self) -> None:
        if self._channel.is_reachable():
            return

        if not self._command:
            raise ChannelUnreachableError(self._channel.name)

        logger.info("Starting optimisation service: %s", " ".join(self._command))
        try:
            _ = subprocess.Popen(
                self._command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("Could not start the optimisation service: %s", exc)
            raise ChannelUnreachableError(self._channel.name) from exc

        self._sleep(self._grace)
        if not self._channel.is_reachable():
            raise ChannelUnreachableError(self._channel.name)


@final
class NoopServiceLauncher:
    """Assume the service is reachable; failures surface on the first send."""

    def ensure_service_available(self) -> None:
        return None


__all__ = ["NoopServiceLauncher", "SubprocessServiceLauncher"]

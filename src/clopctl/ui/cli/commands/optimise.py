"""src/clopctl/ui/cli/commands/optimise.py
What: Wire concrete channels, progress and displays into the session driver.
Why: Keep adapter construction out of the application service.
"""

from __future__ import annotations

from clopctl.application.services.cancellation import CancellationController
from clopctl.application.services.optimise_service import (
    OptimiseOutcome,
    OptimiseService,
    OptimiseServiceRequest,
)
from clopctl.config.paths import channel_socket_path
from clopctl.config.settings import (
    COMPLETION_TIMEOUT,
    LAUNCH_GRACE,
    OPTIMISATION_CHANNEL,
    OPTIMISATION_RESPONSE_CHANNEL,
    POLL_INTERVAL,
    RUNTIME_DIR,
    SEND_TIMEOUT,
    SERVICE_COMMAND,
)
from clopctl.features.optimisation.adapters import ChannelProgressSource, SubprocessServiceLauncher
from clopctl.platform.ipc import LocalChannel
from clopctl.ui.cli.args.options import OptimiseArgs
from clopctl.ui.cli.display.progress import TerminalProgressView
from clopctl.ui.cli.display.result import ResultDisplay


class OptimiseCommand:
    """Execute the ``optimise`` subcommand."""

    args: OptimiseArgs
    service: OptimiseService
    result_display: ResultDisplay

    def __init__(self, args: OptimiseArgs) -> None:
        """Initialize command executor.

        Args:
            args: Command line arguments.
        """
        self.args = args
        request_channel = LocalChannel(
            OPTIMISATION_CHANNEL,
            channel_socket_path(RUNTIME_DIR, OPTIMISATION_CHANNEL),
        )
        response_channel = LocalChannel(
            OPTIMISATION_RESPONSE_CHANNEL,
            channel_socket_path(RUNTIME_DIR, OPTIMISATION_RESPONSE_CHANNEL),
        )
        show_view = args.progress and not args.quiet
        self.service = OptimiseService(
            request_channel=request_channel,
            response_channel=response_channel,
            progress_source=ChannelProgressSource(),
            launcher=SubprocessServiceLauncher(request_channel, SERVICE_COMMAND, grace=LAUNCH_GRACE),
            view=TerminalProgressView() if show_view else None,
            cancellation=CancellationController(request_channel),
            send_timeout=SEND_TIMEOUT,
            completion_timeout=COMPLETION_TIMEOUT,
            poll_interval=POLL_INTERVAL,
        )
        self.result_display = ResultDisplay()

    def execute(self) -> OptimiseOutcome:
        """Run the batch and print the JSON report in synchronous mode."""
        outcome = self.service.run(
            OptimiseServiceRequest(
                items=self.args.items,
                size=self.args.crop_size,
                downscale_factor=self.args.downscale_factor,
                speed_up_factor=self.args.speed_up_factor,
                show_floating_result=self.args.gui,
                copy_to_clipboard=self.args.copy,
                aggressive=self.args.aggressive,
                asynchronous=self.args.asynchronous,
                show_progress=self.args.progress and not self.args.quiet,
            )
        )
        if outcome.report is not None:
            self.result_display.show_report(outcome.report)
        return outcome

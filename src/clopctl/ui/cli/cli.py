"""Command line interface for clopctl."""

import sys
from typing import final

from clopctl.features.optimisation.domain import ClopError, IncompleteError
from clopctl.platform.logging import logger
from clopctl.ui.cli.args import ArgumentParser
from clopctl.ui.cli.args.options import CLIArgs
from clopctl.ui.cli.commands import OptimiseCommand


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)
            outcome = OptimiseCommand(args).execute()
            if outcome.report is not None and not outcome.report.complete:
                logger.error("%s", IncompleteError(f"{len(outcome.report.pending)} item(s) did not finish"))
                sys.exit(IncompleteError.exit_code)
            return

        except ClopError as e:
            logger.error("%s", e)
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            sys.exit(130)
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            sys.exit(1)


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code (0 on success). Failures leave through
        ``sys.exit(...)`` with the matching error's exit code.
    """
    CommandProcessor.process_command()
    return 0

"""Command line argument parser."""

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import final

from clopctl.config.config import Config
from clopctl.features.optimisation.domain import CropSize, ValidationError
from clopctl.features.optimisation.usecases import collect_items, parse_crop_size, validate_factor
from clopctl.platform.logging import DEFAULT_LOG_FILE, logger, setup_logger
from clopctl.ui.cli.args.options import CLIArgs, OptimiseArgs


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            prog="clopctl",
            description="Submit images, videos, PDFs or URLs to the local optimisation service.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        optimise_parser = subparsers.add_parser(
            "optimise",
            aliases=["optimize"],
            help="Optimise files or URLs and print the results as JSON",
        )
        ArgumentParser._configure_optimise_parser(optimise_parser)

        return parser

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.

        Raises:
            SystemExit: If an item is missing or an option is malformed.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        # Set log level based on verbosity flags
        if parsed_args.quiet:
            log_level = logging.ERROR
        elif parsed_args.verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        configuration = Config.load()
        log_file_path = configuration.log_file or DEFAULT_LOG_FILE
        _ = setup_logger(log_file=log_file_path, console_level=log_level)

        try:
            return ArgumentParser._process_optimise(parsed_args)
        except ValidationError as e:
            logger.error("%s", e)
            sys.exit(e.exit_code)

    @staticmethod
    def _configure_optimise_parser(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "items",
            nargs="+",
            help="Images, videos, PDFs or URLs to optimise",
            metavar="ITEM",
        )
        _ = parser.add_argument(
            "-g",
            "--gui",
            action="store_true",
            help="Show the floating result (the usual app UI)",
        )
        _ = parser.add_argument(
            "-p",
            "--progress",
            action=argparse.BooleanOptionalAction,
            default=True,
            help="Print progress to stderr",
        )
        _ = parser.add_argument(
            "-a",
            "--aggressive",
            action="store_true",
            help="Use aggressive optimisation",
        )
        _ = parser.add_argument(
            "-c",
            "--copy",
            "--copy-to-clipboard",
            dest="copy",
            action="store_true",
            help="Copy file to clipboard after optimisation",
        )
        _ = parser.add_argument(
            "-s",
            "--skip-errors",
            action="store_true",
            help="Skip missing files instead of failing",
        )
        _ = parser.add_argument(
            "-r",
            "--recursive",
            action="store_true",
            help="Optimise every file inside the given directories",
        )
        _ = parser.add_argument(
            "--async",
            dest="asynchronous",
            action="store_true",
            help="Queue the items and exit without waiting for results",
        )
        _ = parser.add_argument(
            "--speed-up-factor",
            type=float,
            metavar="FACTOR",
            help="Speed up videos (1 means no change, 2 twice as fast, 0.5 twice as slow)",
        )
        _ = parser.add_argument(
            "--downscale-factor",
            type=float,
            metavar="FACTOR",
            help="Make the result smaller (1.0 means no resize, 0.5 half the size)",
        )
        _ = parser.add_argument(
            "--crop",
            type=str,
            metavar="SIZE",
            help="Downscale and crop to a specific size, e.g. 1200x630, or 50 for a 50x50 square",
        )
        _ = parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug logging",
        )
        _ = parser.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

    @staticmethod
    def _process_optimise(parsed_args: argparse.Namespace) -> OptimiseArgs:
        crop_size: CropSize | None = None
        if parsed_args.crop is not None:
            crop_size = parse_crop_size(parsed_args.crop)

        downscale_factor = validate_factor("downscale factor", parsed_args.downscale_factor)
        speed_up_factor = validate_factor("speed up factor", parsed_args.speed_up_factor)

        items = collect_items(
            parsed_args.items,
            recursive=parsed_args.recursive,
            skip_errors=parsed_args.skip_errors,
        )

        return OptimiseArgs(
            command="optimise",
            items=items,
            crop_size=crop_size,
            downscale_factor=downscale_factor,
            speed_up_factor=speed_up_factor,
            gui=parsed_args.gui,
            progress=parsed_args.progress,
            aggressive=parsed_args.aggressive,
            copy=parsed_args.copy,
            skip_errors=parsed_args.skip_errors,
            recursive=parsed_args.recursive,
            asynchronous=parsed_args.asynchronous,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
        )

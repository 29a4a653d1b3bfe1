"""Tests for the CLI entry point and its exit codes."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from clopctl.application.services.optimise_service import DriverState, OptimiseOutcome
from clopctl.features.optimisation.domain import (
    FinalReport,
    OptimisationError,
    OptimisationRequest,
    OptimisationResponse,
    WorkItem,
)
from clopctl.shared.errors import ChannelError, ChannelTimeoutError, ChannelUnreachableError
from clopctl.ui.cli import CommandProcessor, main

ITEM = WorkItem("file:///tmp/a.png")


@pytest.fixture
def image(tmp_path: Path) -> Path:
    path = tmp_path / "a.png"
    path.touch()
    return path


@pytest.fixture(autouse=True)
def quiet_setup(mocker: MockerFixture) -> None:
    mock_config = mocker.patch("clopctl.ui.cli.args.parser.Config")
    mock_config.load.return_value.log_file = None
    _ = mocker.patch("clopctl.ui.cli.args.parser.setup_logger")


@pytest.fixture
def mock_command(mocker: MockerFixture) -> MagicMock:
    return mocker.patch("clopctl.ui.cli.cli.OptimiseCommand")


def _outcome(report: FinalReport | None) -> OptimiseOutcome:
    return OptimiseOutcome(
        state=DriverState.DONE,
        request=OptimisationRequest(request_id="1", items=(ITEM,)),
        report=report,
    )


def test_successful_batch_returns(image: Path, mock_command: MagicMock) -> None:
    mock_command.return_value.execute.return_value = _outcome(
        FinalReport(done=[OptimisationResponse(path="/out/a.png", for_item=ITEM)])
    )

    CommandProcessor.process_command(["optimise", str(image)])

    args = mock_command.call_args.args[0]
    assert args.items == [WorkItem.from_path(image)]
    mock_command.return_value.execute.assert_called_once()


def test_async_batch_returns(image: Path, mock_command: MagicMock) -> None:
    mock_command.return_value.execute.return_value = _outcome(None)

    CommandProcessor.process_command(["optimise", "--async", str(image)])

    assert mock_command.call_args.args[0].asynchronous


def test_incomplete_batch_exits_5(image: Path, mock_command: MagicMock) -> None:
    mock_command.return_value.execute.return_value = _outcome(FinalReport(pending=[ITEM]))

    with pytest.raises(SystemExit) as excinfo:
        CommandProcessor.process_command(["optimise", str(image)])

    assert excinfo.value.code == 5


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ChannelUnreachableError("svc"), 3),
        (ChannelTimeoutError("svc", 30.0), 4),
        (OptimisationError("rejected"), 6),
        (ChannelError("socket closed mid-frame"), 7),
        (KeyboardInterrupt(), 130),
        (RuntimeError("boom"), 1),
    ],
)
def test_errors_map_to_exit_codes(image: Path, mock_command: MagicMock, error: BaseException, code: int) -> None:
    mock_command.return_value.execute.side_effect = error

    with pytest.raises(SystemExit) as excinfo:
        CommandProcessor.process_command(["optimise", str(image)])

    assert excinfo.value.code == code


def test_validation_error_sends_nothing(tmp_path: Path, mock_command: MagicMock) -> None:
    with pytest.raises(SystemExit) as excinfo:
        CommandProcessor.process_command(["optimise", str(tmp_path / "missing.png")])

    assert excinfo.value.code == 1
    mock_command.assert_not_called()


def test_main_returns_zero(mocker: MockerFixture) -> None:
    mock_process = mocker.patch("clopctl.ui.cli.cli.CommandProcessor.process_command")

    assert main() == 0
    mock_process.assert_called_once_with()

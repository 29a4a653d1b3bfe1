"""Tests for wiring the optimise command."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from clopctl.application.services.optimise_service import DriverState, OptimiseOutcome
from clopctl.features.optimisation.domain import (
    CropSize,
    FinalReport,
    OptimisationRequest,
    WorkItem,
)
from clopctl.ui.cli.args.options import OptimiseArgs
from clopctl.ui.cli.commands import OptimiseCommand
from clopctl.ui.cli.display.progress import TerminalProgressView

ITEM = WorkItem("file:///tmp/a.png")


def _args(**overrides: object) -> OptimiseArgs:
    values: dict[str, object] = {
        "command": "optimise",
        "items": [ITEM],
        "crop_size": CropSize(10, 20),
        "downscale_factor": None,
        "speed_up_factor": 1.5,
        "gui": True,
        "progress": True,
        "aggressive": True,
        "copy": False,
        "skip_errors": False,
        "recursive": False,
        "asynchronous": False,
        "verbose": False,
        "quiet": False,
    }
    values.update(overrides)
    return OptimiseArgs(**values)  # pyright: ignore[reportArgumentType]


@pytest.fixture
def mock_service(mocker: MockerFixture) -> MagicMock:
    return mocker.patch("clopctl.ui.cli.commands.optimise.OptimiseService")


def test_execute_passes_options_and_shows_report(mock_service: MagicMock, mocker: MockerFixture) -> None:
    report = FinalReport()
    mock_service.return_value.run.return_value = OptimiseOutcome(
        state=DriverState.DONE,
        request=OptimisationRequest(request_id="1", items=(ITEM,)),
        report=report,
    )
    command = OptimiseCommand(_args())
    show_report = mocker.patch.object(command.result_display, "show_report")

    _ = command.execute()

    request = mock_service.return_value.run.call_args.args[0]
    assert request.items == [ITEM]
    assert request.size == CropSize(10, 20)
    assert request.speed_up_factor == 1.5
    assert request.show_floating_result and request.aggressive
    assert not request.copy_to_clipboard
    assert request.show_progress
    show_report.assert_called_once_with(report)
    assert isinstance(mock_service.call_args.kwargs["view"], TerminalProgressView)


def test_async_outcome_prints_nothing(mock_service: MagicMock, mocker: MockerFixture) -> None:
    mock_service.return_value.run.return_value = OptimiseOutcome(
        state=DriverState.DONE,
        request=OptimisationRequest(request_id="1", items=(ITEM,)),
    )
    command = OptimiseCommand(_args(asynchronous=True))
    show_report = mocker.patch.object(command.result_display, "show_report")

    _ = command.execute()

    show_report.assert_not_called()


@pytest.mark.parametrize("overrides", [{"progress": False}, {"quiet": True}])
def test_progress_view_is_disabled(mock_service: MagicMock, overrides: dict[str, object]) -> None:
    _ = OptimiseCommand(_args(**overrides))

    assert mock_service.call_args.kwargs["view"] is None

"""Tests for service discovery and launch."""

from __future__ import annotations

import subprocess

import pytest
from pytest_mock import MockerFixture

from clopctl.features.optimisation.adapters import NoopServiceLauncher, SubprocessServiceLauncher
from clopctl.shared.errors import ChannelUnreachableError

from conftest import FakeRequestChannel


def test_reachable_service_is_left_alone(request_channel: FakeRequestChannel, mocker: MockerFixture) -> None:
    popen = mocker.patch("clopctl.features.optimisation.adapters.service_launcher.subprocess.Popen")

    SubprocessServiceLauncher(request_channel, ["clop-service"]).ensure_service_available()

    popen.assert_not_called()


def test_unreachable_without_command_fails(request_channel: FakeRequestChannel) -> None:
    request_channel.reachable = False

    with pytest.raises(ChannelUnreachableError):
        SubprocessServiceLauncher(request_channel, []).ensure_service_available()


def test_launches_and_waits_for_the_service(request_channel: FakeRequestChannel, mocker: MockerFixture) -> None:
    request_channel.reachable = False
    sleeps: list[float] = []

    def fake_popen(*args: object, **kwargs: object) -> object:
        request_channel.reachable = True
        return mocker.Mock()

    popen = mocker.patch(
        "clopctl.features.optimisation.adapters.service_launcher.subprocess.Popen",
        side_effect=fake_popen,
    )

    launcher = SubprocessServiceLauncher(request_channel, ["clop-service", "--daemon"], grace=0.5, sleep=sleeps.append)
    launcher.ensure_service_available()

    popen.assert_called_once()
    assert popen.call_args.args[0] == ("clop-service", "--daemon")
    assert popen.call_args.kwargs["stdout"] is subprocess.DEVNULL
    assert popen.call_args.kwargs["start_new_session"] is True
    assert sleeps == [0.5]


def test_service_that_never_comes_up_is_unreachable(
    request_channel: FakeRequestChannel, mocker: MockerFixture
) -> None:
    request_channel.reachable = False
    _ = mocker.patch("clopctl.features.optimisation.adapters.service_launcher.subprocess.Popen")

    launcher = SubprocessServiceLauncher(request_channel, ["clop-service"], sleep=lambda _: None)

    with pytest.raises(ChannelUnreachableError):
        launcher.ensure_service_available()


def test_missing_executable_is_unreachable(request_channel: FakeRequestChannel, mocker: MockerFixture) -> None:
    request_channel.reachable = False
    _ = mocker.patch(
        "clopctl.features.optimisation.adapters.service_launcher.subprocess.Popen",
        side_effect=FileNotFoundError("clop-service"),
    )

    with pytest.raises(ChannelUnreachableError):
        SubprocessServiceLauncher(request_channel, ["clop-service"], sleep=lambda _: None).ensure_service_available()


def test_noop_launcher_does_nothing() -> None:
    assert NoopServiceLauncher().ensure_service_available() is None

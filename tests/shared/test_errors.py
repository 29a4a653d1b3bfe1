"""Tests for the error taxonomy."""

from clopctl.shared.errors import (
    ChannelError,
    ChannelTimeoutError,
    ChannelUnreachableError,
    ClopError,
    IncompleteError,
    OptimisationError,
    ValidationError,
)


def test_fatal_errors_have_distinct_exit_codes() -> None:
    fatal = [
        ValidationError,
        ChannelError,
        ChannelUnreachableError,
        ChannelTimeoutError,
        OptimisationError,
        IncompleteError,
    ]

    codes = [error.exit_code for error in fatal]

    assert len(set(codes)) == len(codes)
    assert 0 not in codes and 2 not in codes


def test_suggestion_is_appended_to_the_message() -> None:
    assert str(ClopError("Nothing to optimise", "Check the paths")) == "Nothing to optimise\nSuggestion: Check the paths"
    assert str(ChannelTimeoutError("svc", 1.5)) == "Timed out after 1.5s waiting for a reply on 'svc'"

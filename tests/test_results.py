"""Tests for result accumulators."""

import pytest

from return_notification.results import ChannelSendResult, Result, ResultError


def test_result_starts_successful_without_data() -> None:
    result: Result[dict] = Result()

    assert result.success is True
    assert result.data is None
    assert result.errors == []


def test_add_error_is_monotonic() -> None:
    result: Result[str] = Result()

    result.add_error("first", "E1")
    result.set_result("payload")
    result.add_error("second", "E2", {"recipient": "a@example.com"})

    assert result.success is False
    assert result.data == "payload"
    assert [error.code for error in result.errors] == ["E1", "E2"]
    assert result.errors[1].data == {"recipient": "a@example.com"}


def test_channel_is_sent_only_with_true_outcome_and_no_errors() -> None:
    fresh = ChannelSendResult()
    assert fresh.is_effectively_sent() is False

    rejected = ChannelSendResult()
    rejected.set_result(False)
    assert rejected.success is True
    assert rejected.is_effectively_sent() is False

    delivered = ChannelSendResult()
    delivered.set_result(True)
    assert delivered.is_effectively_sent() is True

    failed = ChannelSendResult()
    failed.set_result(True)
    failed.add_error("boom", "TRANSPORT_ERROR")
    assert failed.is_effectively_sent() is False


def test_channel_result_dict_shape() -> None:
    result = ChannelSendResult()
    result.add_error("Client has no email address", "CLIENT_EMAIL_MISSING")

    assert result.as_dict() == {
        "success": False,
        "attempted": True,
        "errors": [{"message": "Client has no email address", "code": "CLIENT_EMAIL_MISSING"}],
    }


def test_not_attempted_result() -> None:
    result = ChannelSendResult.not_attempted()

    assert result.as_dict() == {"success": False, "attempted": False, "errors": []}


def test_errors_cannot_be_injected_at_construction() -> None:
    with pytest.raises(TypeError):
        ChannelSendResult(data=True, errors=[ResultError("boom", "E")])

    result = ChannelSendResult(data=True)
    result.add_error("boom", "E")
    assert result.success is False
    assert result.is_effectively_sent() is False

"""Tests for template data assembly and rendering."""

import pytest

from return_notification.entities import status_name
from return_notification.errors import TemplateDataError
from return_notification.templates import ResolvedNames, TemplateDataBuilder, render_template


NAMES = ResolvedNames(creator_name="Ivan 11", expert_name="Olga 12", client_name="Anna 21")


def _payload(**overrides: object) -> dict:
    base: dict[str, object] = {
        "notificationType": 2,
        "complaintId": 101,
        "complaintNumber": "RT-101",
        "creatorId": 11,
        "expertId": 12,
        "clientId": 21,
        "consumptionId": 301,
        "consumptionNumber": "CN_301",
        "agreementNumber": "AG-2026-9",
        "date": "2026-10-01",
        "differences": {"from": 1, "to": 0},
    }
    return base | overrides


def _builder() -> TemplateDataBuilder:
    return TemplateDataBuilder(status_name=status_name, render=render_template)


def test_status_change_describes_both_statuses() -> None:
    data = _builder().build(_payload(), NAMES)

    assert data.differences == "status changed from Pending to Completed"
    assert data.as_vars()["CLIENT_NAME"] == "Anna 21"
    assert data.as_vars()["COMPLAINT_NUMBER"] == "RT-101"
    assert len(data.as_vars()) == 13


def test_new_position_uses_fixed_phrase() -> None:
    payload = _payload(notificationType=1)
    del payload["differences"]

    data = _builder().build(payload, NAMES)

    assert data.differences == "new position added"


def test_unknown_status_leaves_differences_empty_and_fails() -> None:
    with pytest.raises(TemplateDataError) as exc_info:
        _builder().build(_payload(differences={"from": 1, "to": 9}), NAMES)

    assert exc_info.value.empty_keys == ["DIFFERENCES"]
    assert exc_info.value.status_code == 500


def test_all_empty_keys_are_listed() -> None:
    payload = _payload(consumptionId=0)
    del payload["complaintNumber"]
    names = ResolvedNames(creator_name="Ivan 11", expert_name="", client_name="Anna 21")

    with pytest.raises(TemplateDataError) as exc_info:
        _builder().build(payload, names)

    assert exc_info.value.empty_keys == ["COMPLAINT_NUMBER", "EXPERT_NAME", "CONSUMPTION_ID"]
    assert "COMPLAINT_NUMBER, EXPERT_NAME, CONSUMPTION_ID" in exc_info.value.message


def test_status_lookup_receives_both_ids() -> None:
    seen: list[int] = []

    def lookup(status_id: int) -> str | None:
        seen.append(status_id)
        return {1: "Open", 2: "Closed"}.get(status_id)

    builder = TemplateDataBuilder(status_name=lookup, render=render_template)
    data = builder.build(_payload(differences={"from": 1, "to": 2}), NAMES)

    assert seen == [1, 2]
    assert data.differences == "status changed from Open to Closed"


def test_render_keeps_unknown_placeholders() -> None:
    assert render_template("PositionStatusHasChanged", {"FROM": "Pending"}) == (
        "status changed from Pending to {TO}"
    )
    assert render_template("unknownKey", {}) == "unknownKey"

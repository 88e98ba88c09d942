"""Template variables and message rendering for return notifications."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping

from .entities import NotificationKind
from .errors import TemplateDataError


class _SafeMap(dict[str, object]):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


TRANSLATIONS: dict[str, str] = {
    "complaintEmployeeEmailSubject": "Return {COMPLAINT_NUMBER}: {DIFFERENCES}",
    "complaintEmployeeEmailBody": (
        "Return {COMPLAINT_NUMBER} (id {COMPLAINT_ID}) for client {CLIENT_NAME} "
        "was updated on {DATE}: {DIFFERENCES}.\n"
        "Consumption {CONSUMPTION_NUMBER}, agreement {AGREEMENT_NUMBER}.\n"
        "Created by {CREATOR_NAME}, expert {EXPERT_NAME}."
    ),
    "complaintClientEmailSubject": "Your return {COMPLAINT_NUMBER}: {DIFFERENCES}",
    "complaintClientEmailBody": (
        "Dear {CLIENT_NAME},\n"
        "your return {COMPLAINT_NUMBER} under agreement {AGREEMENT_NUMBER} "
        "was updated on {DATE}: {DIFFERENCES}."
    ),
    "NewPositionAdded": "new position added",
    "PositionStatusHasChanged": "status changed from {FROM} to {TO}",
}


def render_template(key: str, variables: Mapping[str, Any] | None = None) -> str:
    """Render one translation key; unknown keys render as the key itself."""

    template = TRANSLATIONS.get(key, key)
    return template.format_map(_SafeMap(variables or {}))


@dataclass(frozen=True)
class TemplateData:
    """Complete set of template variables for one notification."""

    complaint_id: int
    complaint_number: str
    creator_id: int
    creator_name: str
    expert_id: int
    expert_name: str
    client_id: int
    client_name: str
    consumption_id: int
    consumption_number: str
    agreement_number: str
    date: str
    differences: str

    def as_vars(self) -> dict[str, Any]:
        return {item.name.upper(): getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True)
class ResolvedNames:
    creator_name: str
    expert_name: str
    client_name: str


StatusNameFn = Callable[[int], str | None]
TemplateRenderer = Callable[[str, Mapping[str, Any]], str]


class TemplateDataBuilder:
    """Builds template variables from a validated payload and resolved names."""

    def __init__(self, *, status_name: StatusNameFn, render: TemplateRenderer) -> None:
        self._status_name = status_name
        self._render = render

    def build(self, payload: Mapping[str, Any], names: ResolvedNames) -> TemplateData:
        """Return complete template data or raise ``TemplateDataError`` naming every empty key."""

        data = TemplateData(
            complaint_id=payload.get("complaintId"),
            complaint_number=payload.get("complaintNumber"),
            creator_id=payload.get("creatorId"),
            creator_name=names.creator_name,
            expert_id=payload.get("expertId"),
            expert_name=names.expert_name,
            client_id=payload.get("clientId"),
            client_name=names.client_name,
            consumption_id=payload.get("consumptionId"),
            consumption_number=payload.get("consumptionNumber"),
            agreement_number=payload.get("agreementNumber"),
            date=payload.get("date"),
            differences=self._differences(payload),
        )

        empty_keys = [key for key, value in data.as_vars().items() if _is_empty(value)]
        if empty_keys:
            raise TemplateDataError(empty_keys)
        return data

    def _differences(self, payload: Mapping[str, Any]) -> str:
        kind = payload.get("notificationType")
        if kind == NotificationKind.NEW:
            return self._render("NewPositionAdded", {})

        differences = payload.get("differences")
        if kind == NotificationKind.CHANGE and isinstance(differences, Mapping):
            from_id = differences.get("from")
            to_id = differences.get("to")
            if from_id is None or to_id is None:
                return ""
            from_name = self._status_name(from_id)
            to_name = self._status_name(to_id)
            if from_name and to_name:
                return self._render("PositionStatusHasChanged", {"FROM": from_name, "TO": to_name})
        return ""


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, int) and value == 0)

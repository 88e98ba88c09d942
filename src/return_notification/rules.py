"""Field rules for the return status changed request payload."""

from __future__ import annotations

from .validation import FieldKind, FieldRule

_CODE = r"[\w-]+"
_DATE = r"\d{4}-\d{2}-\d{2}"

REQUEST_FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("resellerId", True, FieldKind.INT),
    FieldRule("notificationType", True, FieldKind.INT),
    FieldRule("complaintId", True, FieldKind.INT),
    FieldRule("complaintNumber", True, FieldKind.STRING, pattern=_CODE),
    FieldRule("creatorId", True, FieldKind.INT),
    FieldRule("creatorName", False, FieldKind.STRING),
    FieldRule("expertId", True, FieldKind.INT),
    FieldRule("expertName", False, FieldKind.STRING),
    FieldRule("clientId", True, FieldKind.INT),
    FieldRule("clientName", False, FieldKind.STRING),
    FieldRule("consumptionId", True, FieldKind.INT),
    FieldRule("consumptionNumber", True, FieldKind.STRING, pattern=_CODE),
    FieldRule("agreementNumber", True, FieldKind.STRING, pattern=_CODE),
    FieldRule("date", True, FieldKind.STRING, pattern=_DATE),
)

# Status ids start at 0 (Completed), so zero is a valid value here.
STATUS_CHANGE_RULES: tuple[FieldRule, ...] = (
    FieldRule("differences.from", True, FieldKind.INT, allow_zero=True),
    FieldRule("differences.to", True, FieldKind.INT, allow_zero=True),
)

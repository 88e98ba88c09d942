"""Domain error primitives and the HTTP error envelope."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from fastapi.responses import JSONResponse


class DomainError(Exception):
    """Aborting business error carrying a machine-checkable code and status hint."""

    code = "DOMAIN_ERROR"
    status_code = 400

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRulesError(DomainError):
    code = "INVALID_FIELD_RULES"
    status_code = 500


class ValidationError(DomainError):
    """A payload field failed its rule. Only the first offending field is reported."""

    code = "VALIDATION_FAILED"

    NOT_FOUND = "not found"
    WRONG_TYPE = "wrong type"
    PATTERN_MISMATCH = "pattern mismatch"
    UNSUPPORTED_VALUE = "unsupported value"
    NOT_A_MAPPING = "payload is not a mapping"

    def __init__(self, field: str, reason: str, *, pattern: str | None = None) -> None:
        detail: dict[str, Any] = {"field": field, "issue": reason}
        if pattern is not None:
            detail["pattern"] = pattern
        super().__init__(_validation_message(field, reason, pattern), details=[detail])
        self.field = field
        self.reason = reason
        self.pattern = pattern


def _validation_message(field: str, reason: str, pattern: str | None) -> str:
    if reason == ValidationError.NOT_FOUND:
        return f"Field {field} not found."
    if reason == ValidationError.PATTERN_MISMATCH:
        return f"Value of field '{field}' does not match '{pattern}'."
    return f"Field {field}: {reason}."


class ClientNotFound(DomainError):
    code = "CLIENT_NOT_FOUND"


class InvalidClientType(DomainError):
    code = "INVALID_CLIENT_TYPE"


class ClientIsSeller(DomainError):
    code = "CLIENT_IS_SELLER"


class CreatorNotFound(DomainError):
    code = "CREATOR_NOT_FOUND"


class ExpertNotFound(DomainError):
    code = "EXPERT_NOT_FOUND"


class TemplateDataError(DomainError):
    """Template variables resolved empty; nothing may be sent."""

    code = "EMPTY_TEMPLATE_DATA"
    status_code = 500

    def __init__(self, empty_keys: list[str]) -> None:
        super().__init__(
            f"Empty template data: {', '.join(empty_keys)}",
            details=[{"field": key, "issue": "empty"} for key in empty_keys],
        )
        self.empty_keys = empty_keys


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build standard error envelope response."""

    payload: dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "trace_id": trace_id or f"trc_{uuid4().hex[:8]}",
        }
    }
    if details:
        payload["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=payload)

"""Pydantic schemas for return notification service APIs."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ReturnStatusRequest(BaseModel):
    """Inbound request; ``data`` is validated by the field rules, not by pydantic."""

    data: dict[str, Any]


class ChannelError(BaseModel):
    message: str
    code: str
    data: dict[str, Any] | None = None


class ChannelResult(BaseModel):
    """One channel's outcome in the notification report."""

    success: bool
    attempted: bool
    errors: list[ChannelError] = Field(default_factory=list)


class NotificationReportResponse(BaseModel):
    """Outcome for all three channels."""

    model_config = ConfigDict(populate_by_name=True)

    employee_email: ChannelResult = Field(alias="employeeEmail")
    client_email: ChannelResult = Field(alias="clientEmail")
    client_sms: ChannelResult = Field(alias="clientSms")


class HealthResponse(BaseModel):
    """Health endpoint response."""

    status: Literal["ok"] = "ok"
    service: str
    version: str
    timestamp: datetime


ContractorKind = Literal["customer", "seller", "employee"]


class ContractorRecord(BaseModel):
    """Contractor registered in the lookup directory."""

    id: int = Field(ge=1)
    type: ContractorKind = "customer"
    name: str = Field(default="", max_length=256)
    email: str = Field(default="", max_length=256)
    mobile: str = Field(default="", max_length=32)

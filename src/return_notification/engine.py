"""Return status notification use case.

One ``ReturnStatusNotifier`` handles one request: it validates the payload,
resolves the client, creator and expert, builds template data, then sends the
employee email and, for status changes, the client email and SMS. Anything
that goes wrong before sending raises a ``DomainError``; anything that goes
wrong while sending is recorded on that channel's result.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Mapping

from .collaborators import Collaborators, EmailContext, EmailMessage
from .entities import (
    EMAILS_TYPE_PERMITTED,
    Contractor,
    ContractorType,
    NotificationEvent,
    NotificationKind,
)
from .errors import (
    ClientIsSeller,
    ClientNotFound,
    CreatorNotFound,
    ExpertNotFound,
    InvalidClientType,
    ValidationError,
)
from .observability import log_event
from .results import ChannelSendResult
from .rules import REQUEST_FIELD_RULES, STATUS_CHANGE_RULES
from .templates import ResolvedNames, TemplateData, TemplateDataBuilder
from .validation import Payload, resolve, validate

logger = logging.getLogger("return_notification")

EMPLOYEE_EMAIL = "employee_email"
CLIENT_EMAIL = "client_email"
CLIENT_SMS = "client_sms"


@dataclass(frozen=True)
class NotificationReport:
    """Per-channel outcome; every channel is always present."""

    employee_email: ChannelSendResult
    client_email: ChannelSendResult
    client_sms: ChannelSendResult

    def channels(self) -> dict[str, ChannelSendResult]:
        return {
            EMPLOYEE_EMAIL: self.employee_email,
            CLIENT_EMAIL: self.client_email,
            CLIENT_SMS: self.client_sms,
        }

    def as_dict(self) -> dict[str, Any]:
        return {
            "employeeEmail": self.employee_email.as_dict(),
            "clientEmail": self.client_email.as_dict(),
            "clientSms": self.client_sms.as_dict(),
        }


@dataclass(frozen=True)
class PreparedNotification:
    """Validated, resolved data ready for dispatch."""

    payload: Payload
    kind: NotificationKind
    event: NotificationEvent
    reseller_id: int
    client: Contractor
    template_data: TemplateData
    to_status: int | None

    @property
    def notifies_client(self) -> bool:
        return self.kind is NotificationKind.CHANGE and self.to_status is not None

    @property
    def template_vars(self) -> dict[str, Any]:
        return self.template_data.as_vars()


class ReturnStatusNotifier:
    """Runs the return status notification for a single request."""

    def __init__(self, collaborators: Collaborators) -> None:
        self._collaborators = collaborators
        self._templates = TemplateDataBuilder(
            status_name=collaborators.status_name,
            render=collaborators.render,
        )

    def run(self, raw_payload: Any) -> NotificationReport:
        """Prepare the notification, then attempt every applicable channel."""

        prepared = self.prepare(raw_payload)

        employee_email = self._attempt(EMPLOYEE_EMAIL, prepared, self._send_employee_email)
        if prepared.notifies_client:
            client_email = self._attempt(CLIENT_EMAIL, prepared, self._send_client_email)
            client_sms = self._attempt(CLIENT_SMS, prepared, self._send_client_sms)
        else:
            client_email = ChannelSendResult.not_attempted()
            client_sms = ChannelSendResult.not_attempted()

        return NotificationReport(
            employee_email=employee_email,
            client_email=client_email,
            client_sms=client_sms,
        )

    def prepare(self, raw_payload: Any) -> PreparedNotification:
        """Validate, resolve entities and build template data. Raises ``DomainError``."""

        payload = validate(REQUEST_FIELD_RULES, raw_payload)
        kind = _notification_kind(payload["notificationType"])
        if kind is NotificationKind.CHANGE:
            validate(STATUS_CHANGE_RULES, payload)

        client = self._resolve_client(payload["clientId"])
        creator = self._collaborators.find_employee(payload["creatorId"])
        if creator is None:
            raise CreatorNotFound("Creator not found!")
        expert = self._collaborators.find_employee(payload["expertId"])
        if expert is None:
            raise ExpertNotFound("Expert not found!")

        names = ResolvedNames(
            creator_name=creator.full_name(),
            expert_name=expert.full_name(),
            client_name=client.full_name(),
        )
        template_data = self._templates.build(payload, names)

        return PreparedNotification(
            payload=payload,
            kind=kind,
            event=NotificationEvent.for_kind(kind),
            reseller_id=payload["resellerId"],
            client=client,
            template_data=template_data,
            to_status=resolve(payload, "differences.to"),
        )

    def _resolve_client(self, client_id: int) -> Contractor:
        client = self._collaborators.find_client(client_id)
        if client is None:
            raise ClientNotFound("Client not found!")
        if client.type is ContractorType.SELLER:
            raise ClientIsSeller("The client is a seller!")
        if client.type is not ContractorType.CUSTOMER:
            raise InvalidClientType("Client has no valid type!")
        return client

    def _attempt(
        self,
        channel: str,
        prepared: PreparedNotification,
        send: Callable[[PreparedNotification, ChannelSendResult], None],
    ) -> ChannelSendResult:
        result = ChannelSendResult()
        try:
            send(prepared, result)
        except Exception as exc:
            result.add_error(str(exc) or type(exc).__name__, "TRANSPORT_ERROR", {"exception": type(exc).__name__})

        if result.errors:
            log_event(
                logger,
                "return_notification_channel_failed",
                channel=channel,
                client_id=prepared.client.id,
                errors=[error.as_dict() for error in result.errors],
            )
        return result

    def _send_employee_email(self, prepared: PreparedNotification, result: ChannelSendResult) -> None:
        email_from = self._collaborators.reseller_email_from(prepared.reseller_id)
        recipients = self._collaborators.permitted_emails(prepared.reseller_id, EMAILS_TYPE_PERMITTED)
        if not email_from:
            result.add_error("Reseller sender address is empty", "EMAIL_FROM_MISSING")
        if not recipients:
            result.add_error("No permitted employee recipients", "NO_PERMITTED_RECIPIENTS")
        if not result.success:
            return

        variables = prepared.template_vars
        subject = self._collaborators.render("complaintEmployeeEmailSubject", variables)
        body = self._collaborators.render("complaintEmployeeEmailBody", variables)
        context = EmailContext(
            reseller_id=prepared.reseller_id,
            client_id=prepared.client.id,
            event=prepared.event,
        )
        for recipient in recipients:
            message = EmailMessage(email_from=email_from, email_to=recipient, subject=subject, body=body)
            try:
                self._collaborators.send_email(message, context)
            except Exception as exc:
                result.add_error(str(exc) or type(exc).__name__, "TRANSPORT_ERROR", {"recipient": recipient})

        result.set_result(result.success)

    def _send_client_email(self, prepared: PreparedNotification, result: ChannelSendResult) -> None:
        email_from = self._collaborators.reseller_email_from(prepared.reseller_id)
        if not email_from:
            result.add_error("Reseller sender address is empty", "EMAIL_FROM_MISSING")
        if not prepared.client.email:
            result.add_error("Client has no email address", "CLIENT_EMAIL_MISSING", {"client_id": prepared.client.id})
        if not result.success:
            return

        variables = prepared.template_vars
        message = EmailMessage(
            email_from=email_from,
            email_to=prepared.client.email,
            subject=self._collaborators.render("complaintClientEmailSubject", variables),
            body=self._collaborators.render("complaintClientEmailBody", variables),
        )
        context = EmailContext(
            reseller_id=prepared.reseller_id,
            client_id=prepared.client.id,
            event=prepared.event,
            status_code=prepared.to_status,
        )
        self._collaborators.send_email(message, context)
        result.set_result(True)

    def _send_client_sms(self, prepared: PreparedNotification, result: ChannelSendResult) -> None:
        if not prepared.client.has_mobile:
            result.add_error("Client has no mobile number", "CLIENT_MOBILE_MISSING", {"client_id": prepared.client.id})
            return

        sent, error = self._collaborators.send_sms(
            prepared.reseller_id,
            prepared.client.id,
            prepared.event,
            prepared.to_status,
            prepared.template_vars,
        )
        if error:
            result.add_error(error, "SMS_REJECTED")
        result.set_result(bool(sent))


def _notification_kind(value: int) -> NotificationKind:
    try:
        return NotificationKind(value)
    except ValueError as exc:
        raise ValidationError("notificationType", ValidationError.UNSUPPORTED_VALUE) from exc


def notification_summary(report: NotificationReport) -> Mapping[str, Any]:
    """Compact per-channel view used in completion logs."""

    return {
        channel: {"attempted": result.attempted, "sent": result.is_effectively_sent()}
        for channel, result in report.channels().items()
    }

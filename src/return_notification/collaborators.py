"""Interfaces to external collaborators plus in-memory defaults.

Entity lookup, status names, translations and the email/SMS transports live
outside this service. The orchestrator only sees the callables bundled in
``Collaborators``; ``default_collaborators`` wires stand-ins suitable for
local runs and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock
from typing import Any, Callable, Mapping

from .config import Settings
from .entities import Contractor, ContractorType, NotificationEvent, status_name
from .observability import log_event
from .templates import StatusNameFn, TemplateRenderer, render_template

logger = logging.getLogger("return_notification.transport")


@dataclass(frozen=True)
class EmailMessage:
    email_from: str
    email_to: str
    subject: str
    body: str


@dataclass(frozen=True)
class EmailContext:
    reseller_id: int
    client_id: int
    event: NotificationEvent
    status_code: int | None = None


EntityLookup = Callable[[int], Contractor | None]
EmailSender = Callable[[EmailMessage, EmailContext], None]
SmsSender = Callable[
    [int, int, NotificationEvent, int, Mapping[str, Any]],
    tuple[bool, str | None],
]
PermittedEmailsLookup = Callable[[int, str], list[str]]
ResellerFromAddressLookup = Callable[[int], str]


class InMemoryContractorDirectory:
    """Thread-safe contractor registry keyed by id."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._records: dict[int, Contractor] = {}

    def put(self, contractor: Contractor) -> None:
        with self._lock:
            self._records[contractor.id] = contractor

    def get(self, contractor_id: int) -> Contractor | None:
        with self._lock:
            return self._records.get(contractor_id)

    def get_employee(self, contractor_id: int) -> Contractor | None:
        contractor = self.get(contractor_id)
        if contractor is None or contractor.type is not ContractorType.EMPLOYEE:
            return None
        return contractor


@dataclass
class Collaborators:
    """Everything the orchestrator calls out to."""

    find_client: EntityLookup
    find_employee: EntityLookup
    status_name: StatusNameFn
    render: TemplateRenderer
    send_email: EmailSender
    send_sms: SmsSender
    permitted_emails: PermittedEmailsLookup
    reseller_email_from: ResellerFromAddressLookup


def log_email_sender(message: EmailMessage, context: EmailContext) -> None:
    log_event(
        logger,
        "email_dispatched",
        email_from=message.email_from,
        email_to=message.email_to,
        subject=message.subject,
        reseller_id=context.reseller_id,
        client_id=context.client_id,
        notification_event=context.event.value,
        status_code=context.status_code,
    )


def log_sms_sender(
    reseller_id: int,
    client_id: int,
    event: NotificationEvent,
    status_code: int,
    template_vars: Mapping[str, Any],
) -> tuple[bool, str | None]:
    del template_vars
    log_event(
        logger,
        "sms_dispatched",
        reseller_id=reseller_id,
        client_id=client_id,
        notification_event=event.value,
        status_code=status_code,
    )
    return True, None


def default_collaborators(
    settings: Settings,
    directory: InMemoryContractorDirectory | None = None,
) -> Collaborators:
    """Wire in-memory collaborators backed by ``settings`` and ``directory``."""

    contractors = directory or InMemoryContractorDirectory()

    def permitted_emails(reseller_id: int, permit: str) -> list[str]:
        del reseller_id, permit
        return list(settings.permitted_emails)

    def reseller_email_from(reseller_id: int) -> str:
        del reseller_id
        return settings.reseller_email_from

    return Collaborators(
        find_client=contractors.get,
        find_employee=contractors.get_employee,
        status_name=status_name,
        render=render_template,
        send_email=log_email_sender,
        send_sms=log_sms_sender,
        permitted_emails=permitted_emails,
        reseller_email_from=reseller_email_from,
    )

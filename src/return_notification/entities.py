"""Reference entities and enumerations for return notifications."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ContractorType(IntEnum):
    CUSTOMER = 0
    SELLER = 1
    EMPLOYEE = 2


class ReturnStatus(IntEnum):
    COMPLETED = 0
    PENDING = 1
    REJECTED = 2

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class NotificationKind(IntEnum):
    NEW = 1
    CHANGE = 2


class NotificationEvent(str, Enum):
    CHANGE_RETURN_STATUS = "changeReturnStatus"
    NEW_RETURN_STATUS = "newReturnStatus"

    @classmethod
    def for_kind(cls, kind: NotificationKind) -> NotificationEvent:
        """Transport event name for a notification kind.

        NEW notifications are sent under ``newReturnStatus``; everything else,
        including every CHANGE, goes out under ``changeReturnStatus``.
        """
        if kind is NotificationKind.NEW:
            return cls.NEW_RETURN_STATUS
        return cls.CHANGE_RETURN_STATUS


EMAILS_TYPE_PERMITTED = "tsGoodsReturn"


@dataclass(frozen=True)
class Contractor:
    """Client, seller or employee record; ``type`` tells them apart."""

    id: int
    type: ContractorType = ContractorType.CUSTOMER
    name: str = ""
    email: str = ""
    mobile: str = ""

    @property
    def has_mobile(self) -> bool:
        return bool(self.mobile.strip())

    def full_name(self) -> str:
        name = self.name.strip()
        return f"{name} {self.id}" if name else str(self.id)


def status_name(status_id: int) -> str | None:
    """Display name for a return status id, None when unknown."""

    try:
        return ReturnStatus(status_id).display_name
    except ValueError:
        return None

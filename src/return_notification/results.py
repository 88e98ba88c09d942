"""Success/error accumulators shared by every channel outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class ResultError:
    """One recorded failure."""

    message: str
    code: str
    data: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.data:
            payload["data"] = self.data
        return payload


@dataclass
class Result(Generic[T]):
    """Data-or-errors accumulator.

    Starts successful with no data. ``add_error`` flips success off for good.
    """

    data: T | None = None
    errors: list[ResultError] = field(default_factory=list, init=False)
    _success: bool = field(default=True, init=False, repr=False)

    @property
    def success(self) -> bool:
        return self._success

    def add_error(self, message: str, code: str, data: dict[str, Any] | None = None) -> None:
        self._success = False
        self.errors.append(ResultError(message=message, code=code, data=data))

    def set_result(self, data: T) -> None:
        self.data = data


@dataclass
class ChannelSendResult(Result[bool]):
    """Outcome of one channel send.

    A channel counts as sent only when nothing went wrong and the transport
    reported delivery via ``set_result(True)``.
    """

    attempted: bool = True

    @classmethod
    def not_attempted(cls) -> ChannelSendResult:
        return cls(attempted=False)

    def is_effectively_sent(self) -> bool:
        return self.success and self.data is True

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.is_effectively_sent(),
            "attempted": self.attempted,
            "errors": [error.as_dict() for error in self.errors],
        }

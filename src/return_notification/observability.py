"""Structured logging and in-memory metrics for return notification service."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from threading import Lock
from typing import Any


CHANNELS = ("employee_email", "client_email", "client_sms")


def configure_logging(level: str) -> None:
    """Configure service logging format once."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
    )


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Emit one structured JSON log line."""

    payload = {
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "event": event,
        **fields,
    }
    logger.info(json.dumps(payload, default=str, separators=(",", ":")))


class NotificationMetrics:
    """Thread-safe in-memory metrics for notification runs."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.requests_total = 0
            self.rejected_total = 0
            self.channel_sent_total = {channel: 0 for channel in CHANNELS}
            self.channel_failed_total = {channel: 0 for channel in CHANNELS}
            self.channel_skipped_total = {channel: 0 for channel in CHANNELS}
            self.latency_ms_sum = 0.0
            self.latency_ms_count = 0

    def record_request(self) -> None:
        with self._lock:
            self.requests_total += 1

    def record_rejected(self, latency_ms: float) -> None:
        with self._lock:
            self.rejected_total += 1
            self.latency_ms_sum += max(latency_ms, 0.0)
            self.latency_ms_count += 1

    def record_channel(self, channel: str, *, attempted: bool, sent: bool) -> None:
        with self._lock:
            if not attempted:
                self.channel_skipped_total[channel] += 1
            elif sent:
                self.channel_sent_total[channel] += 1
            else:
                self.channel_failed_total[channel] += 1

    def record_completed(self, latency_ms: float) -> None:
        with self._lock:
            self.latency_ms_sum += max(latency_ms, 0.0)
            self.latency_ms_count += 1

    def render_prometheus(self) -> str:
        with self._lock:
            lines = [
                "# HELP returns_notification_requests_total Total return status notification requests.",
                "# TYPE returns_notification_requests_total counter",
                f"returns_notification_requests_total {self.requests_total}",
                "# HELP returns_notification_rejected_total Requests aborted before any channel send.",
                "# TYPE returns_notification_rejected_total counter",
                f"returns_notification_rejected_total {self.rejected_total}",
                "# HELP returns_notification_channel_sent_total Channel sends reported as delivered.",
                "# TYPE returns_notification_channel_sent_total counter",
            ]
            lines.extend(
                f'returns_notification_channel_sent_total{{channel="{channel}"}} {count}'
                for channel, count in self.channel_sent_total.items()
            )
            lines.extend(
                [
                    "# HELP returns_notification_channel_failed_total Channel sends that failed.",
                    "# TYPE returns_notification_channel_failed_total counter",
                ]
            )
            lines.extend(
                f'returns_notification_channel_failed_total{{channel="{channel}"}} {count}'
                for channel, count in self.channel_failed_total.items()
            )
            lines.extend(
                [
                    "# HELP returns_notification_channel_skipped_total Channels not attempted.",
                    "# TYPE returns_notification_channel_skipped_total counter",
                ]
            )
            lines.extend(
                f'returns_notification_channel_skipped_total{{channel="{channel}"}} {count}'
                for channel, count in self.channel_skipped_total.items()
            )
            lines.extend(
                [
                    "# HELP returns_notification_latency_ms_sum Sum of request latency in milliseconds.",
                    "# TYPE returns_notification_latency_ms_sum counter",
                    f"returns_notification_latency_ms_sum {self.latency_ms_sum:.3f}",
                    "# HELP returns_notification_latency_ms_count Number of latency observations.",
                    "# TYPE returns_notification_latency_ms_count counter",
                    f"returns_notification_latency_ms_count {self.latency_ms_count}",
                ]
            )
        return "\n".join(lines) + "\n"


_metrics = NotificationMetrics()


def get_metrics() -> NotificationMetrics:
    """Return singleton metrics collector."""

    return _metrics

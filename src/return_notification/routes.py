"""HTTP routes for return notification service."""

from datetime import datetime, timezone
import logging
from time import perf_counter

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from .collaborators import InMemoryContractorDirectory, default_collaborators
from .config import get_settings
from .entities import Contractor, ContractorType
from .engine import ReturnStatusNotifier, notification_summary
from .errors import DomainError
from .observability import get_metrics, log_event
from .schemas import (
    ContractorRecord,
    HealthResponse,
    NotificationReportResponse,
    ReturnStatusRequest,
)

router = APIRouter()
logger = logging.getLogger("return_notification")

_settings = get_settings()
_metrics = get_metrics()
_directory = InMemoryContractorDirectory()
_collaborators = default_collaborators(_settings, _directory)


def _to_contractor_record(contractor: Contractor) -> ContractorRecord:
    return ContractorRecord(
        id=contractor.id,
        type=contractor.type.name.lower(),
        name=contractor.name,
        email=contractor.email,
        mobile=contractor.mobile,
    )


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        service=_settings.service_name,
        version=_settings.service_version,
        timestamp=datetime.now(tz=timezone.utc),
    )


@router.get("/metrics", response_class=PlainTextResponse)
def metrics() -> str:
    if not _settings.metrics_enabled:
        raise HTTPException(status_code=404, detail="metrics endpoint disabled")
    return _metrics.render_prometheus()


@router.post(
    "/notifications/return-status",
    response_model=NotificationReportResponse,
    response_model_exclude_none=True,
)
def notify_return_status(request: ReturnStatusRequest) -> NotificationReportResponse:
    started = perf_counter()
    if _settings.metrics_enabled:
        _metrics.record_request()

    log_event(
        logger,
        "return_notification_requested",
        complaint_id=request.data.get("complaintId"),
        client_id=request.data.get("clientId"),
        notification_type=request.data.get("notificationType"),
    )

    notifier = ReturnStatusNotifier(_collaborators)
    try:
        report = notifier.run(request.data)
    except DomainError as exc:
        latency_ms = (perf_counter() - started) * 1000.0
        if _settings.metrics_enabled:
            _metrics.record_rejected(latency_ms)
        log_event(
            logger,
            "return_notification_rejected",
            code=exc.code,
            status_code=exc.status_code,
            message=exc.message,
            latency_ms=round(latency_ms, 3),
        )
        raise

    latency_ms = (perf_counter() - started) * 1000.0
    if _settings.metrics_enabled:
        for channel, result in report.channels().items():
            _metrics.record_channel(
                channel,
                attempted=result.attempted,
                sent=result.is_effectively_sent(),
            )
        _metrics.record_completed(latency_ms)

    log_event(
        logger,
        "return_notification_completed",
        complaint_id=request.data.get("complaintId"),
        channels=notification_summary(report),
        latency_ms=round(latency_ms, 3),
    )

    return NotificationReportResponse.model_validate(report.as_dict())


@router.put("/contractors/{contractor_id}", response_model=ContractorRecord)
def put_contractor(contractor_id: int, payload: ContractorRecord) -> ContractorRecord:
    if payload.id != contractor_id:
        raise HTTPException(status_code=400, detail="contractor id does not match path")
    contractor = Contractor(
        id=payload.id,
        type=ContractorType[payload.type.upper()],
        name=payload.name,
        email=payload.email,
        mobile=payload.mobile,
    )
    _directory.put(contractor)
    log_event(logger, "contractor_registered", contractor_id=contractor.id, contractor_type=payload.type)
    return _to_contractor_record(contractor)


@router.get("/contractors/{contractor_id}", response_model=ContractorRecord)
def get_contractor(contractor_id: int) -> ContractorRecord:
    contractor = _directory.get(contractor_id)
    if contractor is None:
        raise HTTPException(status_code=404, detail="contractor not found")
    return _to_contractor_record(contractor)

"""FastAPI app for return notification service."""

from fastapi import FastAPI, Request

from .config import get_settings
from .errors import DomainError, error_response
from .observability import configure_logging
from .routes import router

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.service_name, version=settings.service_version)
app.include_router(router)


@app.exception_handler(DomainError)
async def handle_domain_error(request: Request, exc: DomainError):
    return error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        trace_id=request.headers.get("x-trace-id"),
        details=exc.details,
    )

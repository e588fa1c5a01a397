import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from visitor_training.core.exceptions import ConfigurationError, TrainingServiceError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, details) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "details": details},
    )


async def training_error_handler(request: Request, exc: TrainingServiceError):
    if isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error on {request.url.path}: {exc.details}")
    elif exc.status_code >= 500:
        logger.error(f"{exc.error} on {request.url.path}: {exc.details}")
    else:
        logger.info(f"{exc.error} on {request.url.path}: {exc.details}")
    return _error_response(exc.status_code, exc.error, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request body",
        "; ".join(messages),
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(TrainingServiceError, training_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

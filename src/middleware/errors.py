import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.conf.config import settings
from src.errors import AppError, ErrorClassification, ValidationFailure, classify
from src.schemas.error import ErrorResponse, FieldViolation

logger = logging.getLogger(__name__)


def log_error(request: Request, exc: BaseException, classification: ErrorClassification) -> None:
    """
    Log an error together with the request that caused it.
    """
    error_log = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": classification.status_code,
        "message": str(exc),
        "method": request.method,
        "url": str(request.url),
        "ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }
    if classification.code:
        error_log["code"] = classification.code
    if classification.details:
        error_log["details"] = [detail.model_dump() for detail in classification.details]
    if classification.status_code >= 500:
        logger.error(f"Error: {error_log}", exc_info=exc)
    else:
        logger.warning(f"Error: {error_log}")


def error_response(request: Request, exc: BaseException) -> JSONResponse:
    """
    Classify, log and render an error as a JSON response.

    :param request: The request being answered.
    :param exc: The error raised while handling it.
    :return: The sanitized error response.
    """
    classification = classify(exc, match_messages=settings.match_error_messages)
    log_error(request, exc, classification)

    body = ErrorResponse(error=classification.message, details=classification.details or None)
    if settings.is_development:
        body.stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        body.original_message = str(exc)
    return JSONResponse(
        status_code=classification.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


def _request_validation_details(exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append(FieldViolation(field=".".join(location) or "body", message=error.get("msg", "Invalid value")))
    return details


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return error_response(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    failure = ValidationFailure(details=_request_validation_details(exc))
    return error_response(request, failure)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.warning(f"Route not found: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Route not found", "path": request.url.path},
        )
    return error_response(request, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the error handlers every response goes through.

    :param app: The FastAPI application.
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

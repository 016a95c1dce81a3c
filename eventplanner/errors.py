"""
Domain error taxonomy and the FastAPI handlers that render it.

Services raise these close to the violated rule; the handlers turn them into
a stable JSON shape: {"detail": <message>, ...extra}.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EventPlannerError(Exception):
    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, **self.extra}


class Unauthenticated(EventPlannerError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(EventPlannerError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(EventPlannerError):
    status_code = 404
    default_message = "Not found"


class ValidationError(EventPlannerError):
    status_code = 400
    default_message = "Invalid input"


class InvalidState(EventPlannerError):
    status_code = 400
    default_message = "Operation not allowed in the resource's current state"


class Conflict(EventPlannerError):
    status_code = 400
    default_message = "Resource already exists"


class DuplicateGuest(Conflict):
    default_message = "This email is already invited to this event"


class InvalidTransition(EventPlannerError):
    status_code = 400

    def __init__(self, current_status: str, target_status: str, allowed: list[str]):
        super().__init__(
            f"Invalid status transition. Cannot change from {current_status} to {target_status}.",
            currentStatus=current_status,
            allowedTransitions=allowed,
        )
        self.current_status = current_status
        self.target_status = target_status
        self.allowed = allowed


class Gone(EventPlannerError):
    status_code = 410
    default_message = "Resource is no longer available"


class ConfigurationError(EventPlannerError):
    status_code = 500
    default_message = "Service not configured"

    def __init__(self, message: Optional[str] = None, details: str = "", troubleshooting=None):
        super().__init__(message, details=details, troubleshooting=list(troubleshooting or []))


class TransportError(ConfigurationError):
    default_message = "External service unavailable"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EventPlannerError)
    async def domain_error_handler(request: Request, exc: EventPlannerError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path} - {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Convert validation errors on the Authorization header into 401s;
        everything else is a 400 with the pydantic issues attached.
        """
        for error in exc.errors():
            if error.get("loc") and "authorization" in str(error.get("loc")).lower():
                logger.warning(
                    f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
                )
                return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation error", "issues": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ {request.method} {request.url.path} - Unhandled error: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

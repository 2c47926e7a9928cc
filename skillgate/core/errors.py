"""
Error taxonomy for the portal.

Services raise these; a single FastAPI exception handler turns them into
JSON responses of the form {"detail": "<message>"}.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class PortalError(Exception):
    """Base class. Carries a user-facing message and an HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND


class EligibilityError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query validation failures are client errors (400), not 422."""
    errors = exc.errors()
    message = "Please fill all required fields"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message, "errors": jsonable_encoder(errors)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

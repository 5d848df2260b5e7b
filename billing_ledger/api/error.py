"""HTTP error translation

Use cases return ``Result`` errors; routes raise ``ClientError`` with them
and the handlers below render ``{"error": {...}}`` bodies.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from libs.result import Error

logger = logging.getLogger(__name__)

CATEGORY_STATUS = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "concurrency": status.HTTP_409_CONFLICT,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or CATEGORY_STATUS.get(
            error.category, status.HTTP_400_BAD_REQUEST
        )

    def to_body(self) -> dict:
        body = {"code": self.error.code, "message": self.error.message}
        if self.error.reason:
            body["reason"] = self.error.reason
        if self.error.details:
            body["details"] = self.error.details
        if self.error.category == "concurrency":
            body["retryable"] = True
        return {"error": body}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg", "")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request parameters",
                "details": {"errors": errors},
            }
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


def build_dto(dto_cls, **fields):
    """Build a command or query DTO, reporting invalid input as a 422 ClientError"""
    try:
        return dto_cls(**fields)
    except PydanticValidationError as e:
        raise ClientError(
            Error(
                code="VALIDATION_ERROR",
                message="Invalid request parameters",
                category="validation",
                details={"errors": [err.get("msg", "") for err in e.errors()]},
            )
        )

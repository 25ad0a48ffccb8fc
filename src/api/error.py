"""HTTP error mapping

Use case errors are raised as ClientError and rendered as
{"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error
from src.domain.errors import ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT.value: status.HTTP_409_CONFLICT,
    ErrorKind.LIMIT_EXCEEDED.value: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def status_for(error: Error) -> int:
    """HTTP status for an error kind; unknown kinds and unexpected failures are 400"""
    return STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST)


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error)


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError):
        if exc.error.kind is None:
            logger.error(
                f"{request.method} {request.url.path} failed: "
                f"{exc.error.code} {exc.error.reason}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error.code, exc.error.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', []))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("VALIDATION_ERROR", details or "Invalid request parameters"),
        )

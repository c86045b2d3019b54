"""Turn service errors into ``{"error", "reason"}`` JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from collection_server.errors import PaymentFlowError


def error_response(status_code: int, message: str, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": message, "reason": reason}
    )


async def payment_flow_error_handler(request: Request, exc: PaymentFlowError):
    return error_response(exc.status_code, exc.message, exc.reason)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Invalid request body", "invalid_body"
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "Not found", "not_found")
    return error_response(exc.status_code, str(exc.detail), "http_error")


async def unhandled_error_handler(request: Request, exc: Exception):
    logging.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "internal_error",
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PaymentFlowError, payment_flow_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

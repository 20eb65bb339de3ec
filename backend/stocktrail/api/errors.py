import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stocktrail.core.errors import InventoryError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went very wrong! Please try again later."


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    body = {"status": "fail" if status_code < 500 else "error", "message": message}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _describe(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{where}: {first.get('msg')}" if where else str(first.get("msg"))


async def handle_inventory_error(request: Request, exc: InventoryError):
    return _error(exc.status_code, exc.message)


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    return _error(400, _describe(exc))


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, GENERIC_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, handle_inventory_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

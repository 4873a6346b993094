"""
Exception handlers rendering errors as JSON payloads
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import CBSError
from .logging_config import get_logger, log_action

logger = get_logger("cbs.api")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application"""

    @app.exception_handler(CBSError)
    async def cbs_error_handler(request: Request, exc: CBSError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            content = {
                "error": "Not found",
                "path": request.url.path,
                "message": "The requested endpoint does not exist"
            }
        else:
            content = {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log_action(
            logger, "error", f"Unhandled error on {request.method} {request.url.path}: {exc}",
            action="unhandled_error", resource=request.url.path
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)}
        )

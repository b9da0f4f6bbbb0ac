"""Entry point for the Explorer service."""

import os
import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from explorer import __version__, config
from explorer.dependencies import get_renderer
from explorer.exceptions import REASON_PHRASES, ErrorKind, ExplorerError
from explorer.logging_config import setup_logging
from explorer.rendering import render_error_page
from explorer.routes.browse_routes import router as browse_router

logger = setup_logging('explorer', root_path=config.EXPLORER_ROOT)

app = FastAPI(
    title="Explorer",
    description="Browsable directory listings and file downloads for a single root directory",
    version=__version__,
    docs_url=None,
    redoc_url=None,
    openapi_url=None
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Check the root directory and load the template once.
    """
    logger.info(f"Explorer starting with root {config.EXPLORER_ROOT}")

    if not os.path.isdir(config.EXPLORER_ROOT):
        logger.warning(f"Explorer root {config.EXPLORER_ROOT} is not a directory; listings will return 404")

    get_renderer()


def error_response(status_code: int, message: str, headers=None) -> HTMLResponse:
    reason = REASON_PHRASES.get(status_code, "Error")
    return HTMLResponse(
        render_error_page(status_code, reason, message),
        status_code=status_code,
        headers=headers
    )


@app.exception_handler(ExplorerError)
async def explorer_error_handler(request: Request, exc: ExplorerError):
    request_id = getattr(request.state, 'request_id', 'unknown')

    if exc.status_code >= 500:
        logger.error(
            f"Explorer error: {exc.kind.value}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc.__cause__ or exc
        )
    else:
        logger.warning(
            f"Explorer error: {exc.kind.value}: {exc} [request_id={request_id}] path={request.url.path}"
        )

    headers = {"Allow": "GET"} if exc.kind == ErrorKind.METHOD_NOT_ALLOWED else None
    return error_response(exc.status_code, exc.message, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"HTTP error: {exc.status_code} [request_id={request_id}] path={request.url.path}"
    )
    return error_response(exc.status_code, REASON_PHRASES.get(exc.status_code, "Error"), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Unhandled exception [request_id={request_id}] path={request.url.path}",
        exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, REASON_PHRASES[500])


app.include_router(browse_router)


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "explorer.main:app",
        host=config.EXPLORER_HOST,
        port=config.EXPLORER_PORT
    )


if __name__ == "__main__":
    main()

"""Structured error responses"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from debate_core import DebateError

logger = logging.getLogger("api_server")


def error_response(status_code: int, message: str) -> JSONResponse:
    """Failure envelope shared by every endpoint"""
    return JSONResponse(status_code=status_code, content={"result": False, "message": message})


async def debate_error_handler(request: Request, exc: DebateError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} rejected: {type(exc).__name__}")
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} invalid body: {exc.errors()}")
    return error_response(400, "リクエストの形式が正しくありません。")


def setup_error_handlers(app: FastAPI) -> None:
    """Render domain and validation errors as {"result": false, "message": ...}"""
    app.add_exception_handler(DebateError, debate_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

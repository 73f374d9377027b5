from fastapi import Request
from fastapi.responses import JSONResponse

from practice.system.exceptions.base_exception import BaseHTTPException


async def common_exception_handler(request: Request, exc: BaseHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "path": str(request.url)}
    )

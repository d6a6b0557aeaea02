from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)


def _error_body(message: str, status_code: int, request: Request) -> dict:
    return {
        "error": {
            "message": message,
            "status_code": status_code,
            "path": str(request.url.path),
        }
    }


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except StarletteHTTPException as e:
            return JSONResponse(
                status_code=e.status_code,
                content=_error_body(e.detail, e.status_code, request),
            )
        except Exception as e:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: {e}",
                exc_info=True,
            )

            error_detail = str(e) if request.app.debug else "Internal server error"

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=_error_body(error_detail, 500, request),
            )

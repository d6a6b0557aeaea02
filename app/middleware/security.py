from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from jose import jwt
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class TokenForwardingMiddleware(BaseHTTPMiddleware):
    """
    Picks up the bearer token issued by the banking login flow.

    The token is not verified here; the ledger API does that when the token
    is forwarded. Only its subject is read for logging and metrics.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.access_token = None
        request.state.user_id = None

        token = self._bearer_token(request.headers.get("Authorization"))
        if token:
            try:
                claims = jwt.get_unverified_claims(token)
            except jwt.JWTError as e:
                logger.warning(f"Invalid token: {e}")
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={
                        "error": {
                            "message": "Invalid authentication token",
                            "status_code": status.HTTP_401_UNAUTHORIZED,
                            "path": str(request.url.path),
                        }
                    },
                )

            request.state.access_token = token
            request.state.user_id = claims.get("sub")

        return await call_next(request)

    @staticmethod
    def _bearer_token(header: Optional[str]) -> Optional[str]:
        if not header:
            return None
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() != "bearer" or not credentials.strip():
            return None
        return credentials.strip()

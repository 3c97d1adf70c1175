import logging
from typing import Mapping, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..errors import Unauthorized

API_KEY_HEADER = "X-API-Key"
PUBLIC_PATHS = frozenset({"/health"})


def extract_api_key(headers: Mapping[str, str]) -> Optional[str]:
    """X-API-Key wins; otherwise the Authorization header minus a Bearer prefix."""
    key = headers.get(API_KEY_HEADER)
    if key:
        return key

    authorization = headers.get("Authorization")
    if authorization:
        return authorization.replace("Bearer ", "", 1)
    return None


def is_authorized(headers: Mapping[str, str], expected_key: str) -> bool:
    provided = extract_api_key(headers)
    return bool(provided) and provided == expected_key


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Rejects every request except PUBLIC_PATHS that lacks the configured key."""

    def __init__(self, app, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next):
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        if not is_authorized(request.headers, self.api_key):
            logging.warning(f"[Auth] Rejected {request.method} {request.url.path}")
            rejection = Unauthorized("Unauthorized")
            return JSONResponse(status_code=rejection.status_code, content=rejection.to_dict())

        return await call_next(request)

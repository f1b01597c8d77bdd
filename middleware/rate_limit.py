# middleware/rate_limit.py
"""
Rate limiting configuration using slowapi.

Usage in route files:
    from middleware.rate_limit import limiter

    @router.post("/reports")
    @limiter.limit("10/minute")
    async def my_endpoint(request: Request):
        ...
"""
import logging
import os

from jose import JWTError, jwt
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

logger = logging.getLogger(__name__)


def _get_rate_limit_key(request: Request) -> str:
    """
    Bucket by Supabase user id (JWT sub) when a bearer token is present,
    otherwise by client IP.
    """
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        try:
            # Unverified on purpose: only the bucket key comes from here,
            # auth is enforced by Depends(get_current_db_user).
            sub = jwt.get_unverified_claims(token).get("sub")
        except JWTError:
            sub = None
        if sub:
            return f"user:{sub}"

    return get_remote_address(request)


# Env-overridable so limits can be tuned per environment without a deploy.
DEFAULT_RATE_LIMIT = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")

limiter = Limiter(
    key_func=_get_rate_limit_key,
    default_limits=[DEFAULT_RATE_LIMIT],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
    enabled=os.getenv("RATE_LIMIT_ENABLED", "1").lower() not in ("0", "false", "no"),
)

"""
rate_limit.py — Global rate limiter instance.

Uses slowapi (a Starlette-compatible wrapper around the `limits` library).
Requests are keyed by client IP address. Every analysis fans out to up to
seven paid upstream calls, so the analyze route opts in with
settings.analyze_rate_limit.

Usage in routes:
    from fastapi import Request
    from app.core.rate_limit import limiter

    @router.post("/some-endpoint")
    @limiter.limit("10/minute")
    async def my_endpoint(request: Request, ...):
        ...
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Key requests by client IP. RATE_LIMIT_ENABLED=false switches it off (tests).
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

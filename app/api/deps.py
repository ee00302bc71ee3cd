from __future__ import annotations

import hashlib

from fastapi import Request

from app.config import settings
from app.models.context import Preferences, RequestContext


def get_request_context(request: Request) -> RequestContext:
    """Build the explicit per-request context from request headers.

    Authentication happens upstream. The bearer token is reduced to a short
    digest so it can identify the caller in logs without being stored.
    """
    user = None
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        if token:
            user = hashlib.sha1(token.encode("utf-8")).hexdigest()[:12]

    region = request.headers.get("x-region", "").strip().upper() or settings.default_region
    return RequestContext(user=user, preferences=Preferences(region=region))

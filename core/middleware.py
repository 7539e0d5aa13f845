# core/middleware.py
from __future__ import annotations

import uuid


def _set_header(resp, name: str, value: str) -> None:
    try:
        resp.headers[name] = value
    except AttributeError:
        resp[name] = value


class RequestIDMiddleware:
    """Attach a request ID and echo it back in the response as X-Request-ID."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        rid = request.META.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex
        request.request_id = rid
        resp = self.get_response(request)
        _set_header(resp, "X-Request-ID", rid)
        return resp


def get_request_id(request) -> str:
    """Request id set by RequestIDMiddleware, or "" outside a request."""
    return getattr(request, "request_id", "") or ""

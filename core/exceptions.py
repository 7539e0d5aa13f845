from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from .errors import DomainError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """DRF exception handler that renders domain errors with a stable ``kind``.

    Anything that is not a ``DomainError`` falls through to DRF's default
    handling (validation errors, auth failures, 404s from get_object_or_404).
    """
    if isinstance(exc, DomainError):
        request = context.get("request")
        logger.info(
            "domain error kind=%s code=%s path=%s rid=%s",
            exc.kind,
            exc.code,
            getattr(request, "path", ""),
            getattr(request, "request_id", ""),
        )
        set_rollback()
        return Response(exc.as_dict(), status=exc.status_code)
    return exception_handler(exc, context)

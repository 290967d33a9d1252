"""HTTP middleware and the per-request context read by the JSON log formatter."""

from __future__ import annotations

from .request_id import QUIET_PATHS, RequestIdMiddleware, principal_ctx_var, request_id_ctx_var
from .security_headers import DOCS_PATHS, SecurityHeadersMiddleware

__all__ = [
    "DOCS_PATHS",
    "QUIET_PATHS",
    "RequestIdMiddleware",
    "SecurityHeadersMiddleware",
    "principal_ctx_var",
    "request_id_ctx_var",
]

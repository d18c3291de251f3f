"""
Application error taxonomy.

Services raise these; the exception handlers registered in
`tango_crm.core.application` turn them into JSON responses.
"""

from __future__ import annotations


class TangoError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidArgument(TangoError):
    status_code = 400
    default_detail = "Invalid argument"


class Unauthorized(TangoError):
    status_code = 401
    default_detail = "Unauthorized"


class Forbidden(TangoError):
    status_code = 403
    default_detail = "Forbidden"


class InternalError(TangoError):
    status_code = 500

"""Errors raised by the external provider gateways."""

from typing import Optional


class NotConfiguredError(Exception):
    """A provider credential is missing; the call was not attempted."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UpstreamError(Exception):
    """The provider answered with a failure or returned nothing usable."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

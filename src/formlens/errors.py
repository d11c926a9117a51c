"""Exception types shared across gateways, discovery and the HTTP layer."""

from typing import Optional


class FormlensError(Exception):
    """Base class for all formlens errors."""


class BackendError(FormlensError):
    """Transport, auth or query-build failure talking to a data backend."""

    def __init__(self, message: str, source_id: Optional[str] = None):
        super().__init__(message)
        self.source_id = source_id


class SourceProbeError(FormlensError):
    """A single discovery candidate could not be probed."""

    def __init__(self, source_id: str, message: str):
        super().__init__(f"{source_id}: {message}")
        self.source_id = source_id


class NotFoundInput(FormlensError, ValueError):
    """A required request parameter is missing."""

    def __init__(self, parameter: str, message: Optional[str] = None):
        super().__init__(message or f"{parameter.capitalize()} is required")
        self.parameter = parameter

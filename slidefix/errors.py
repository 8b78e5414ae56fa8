"""
Exceptions raised by SlideFix.
"""

from typing import Optional


class SlideFixError(Exception):
    """Base class for SlideFix errors."""


class MalformedResponse(SlideFixError):
    """Every repair strategy failed to turn a response into structured data."""

    def __init__(self, raw: str, error: Optional[str] = None):
        self.raw = raw
        self.error = error
        message = "Could not interpret response"
        if error:
            message = f"{message}: {error}"
        super().__init__(message)


class CollaboratorUnavailable(SlideFixError):
    """
    The text-generation call itself failed.

    The convergence loop attaches its partial report as ``report`` before
    re-raising, so callers can still show (and save) what was applied.
    """

    def __init__(self, message: str, report=None):
        super().__init__(message)
        self.report = report

"""
Custom exceptions for the Harmonograph Studio backend.
"""


class HarmonographError(Exception):
    """Base exception for all Harmonograph errors."""

    def __init__(self, message: str, code: str = "HARMONOGRAPH_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(HarmonographError):
    """Unknown parameters or malformed control input."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR")


class RenderError(HarmonographError):
    """Path smoothing or SVG export failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="RENDER_ERROR")


class SessionError(HarmonographError):
    """Canvas session management errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="SESSION_ERROR")

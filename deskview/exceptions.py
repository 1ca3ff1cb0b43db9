from __future__ import annotations


class DeskViewError(Exception):
    """Base class for errors raised by the desk gallery core."""


class InvalidTransition(DeskViewError, ValueError):
    """
    Raised when a viewer action is not legal from the current state.
    """

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"{action}: {reason}")
        self.action = action
        self.reason = reason


class CatalogLoadError(DeskViewError):
    """Raised by data sources when desk records cannot be fetched or parsed."""


class ImageLoadError(DeskViewError):
    """Raised when an image cannot be preloaded."""


class SubmissionError(DeskViewError, ValueError):
    """Raised when a desk submission is malformed or refers to an unknown desk."""


__all__ = ["DeskViewError", "InvalidTransition", "CatalogLoadError", "ImageLoadError", "SubmissionError"]

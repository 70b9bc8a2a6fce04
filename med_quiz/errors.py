"""Exceptions raised by the quiz engine and its collaborators."""
from __future__ import annotations


class QuizError(Exception):
    """Base class for errors reported back to the caller as a message."""


class InsufficientContent(QuizError):
    """The text is too short or no sentence survives filtering."""


class NoSuitableContent(QuizError):
    """No sentence can seed a question."""


class ShapeFailed(Exception):
    """A question shape could not be built; recovered by the generic shape."""


class FetchError(Exception):
    def __init__(self, message: str, status_code: int = 422):
        super().__init__(message)
        self.status_code = status_code

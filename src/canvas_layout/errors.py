"""Exception types raised by canvas-layout."""

from __future__ import annotations

from typing import Optional


class CanvasError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(CanvasError, ValueError):
    """Input that can never form a valid canvas.

    Raised for duplicate node or edge ids, edges whose endpoints are not
    registered, and malformed node/edge records.  ``item_id`` names the
    offending node or edge when there is one.
    """

    def __init__(self, message: str, item_id: Optional[str] = None):
        super().__init__(message)
        self.item_id = item_id


class InvariantViolation(CanvasError, RuntimeError):
    """The engine was asked to do something its geometry cannot support.

    Examples: making a node its own parent, or routing an edge when every
    side pair has been eliminated.  Retrying with the same geometry will
    fail the same way.
    """

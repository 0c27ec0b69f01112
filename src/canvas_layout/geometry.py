"""
Geometric primitives for canvas-layout.

Every element on a canvas is an axis-aligned rectangle with integer
coordinates.  This module defines that rectangle (``Rect``) together with
the two small vocabularies the rest of the engine speaks:

    Side     — top / right / bottom / left, used for edge anchors and
               touch detection
    EdgeEnd  — none / arrow, the marker drawn at an edge endpoint

All predicates here are total functions over well-formed rectangles
(width and height ≥ 0).  Edges of a rectangle are *closed*: a point on
the border is inside, and two rectangles sharing a border intersect.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Side(str, Enum):
    """A side of a rectangle."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def opposite(self) -> Side:
        return _OPPOSITES[self]


_OPPOSITES = {
    Side.TOP: Side.BOTTOM,
    Side.BOTTOM: Side.TOP,
    Side.LEFT: Side.RIGHT,
    Side.RIGHT: Side.LEFT,
}

# Iteration order used whenever "every side" is tried.
ALL_SIDES: tuple[Side, ...] = (Side.TOP, Side.BOTTOM, Side.LEFT, Side.RIGHT)


class EdgeEnd(str, Enum):
    """Marker drawn at one end of an edge."""

    NONE = "none"
    ARROW = "arrow"


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle.

    Attributes:
        x:      Left edge.
        y:      Top edge (y grows downward).
        width:  Horizontal extent, never negative.
        height: Vertical extent, never negative.
    """
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rect size must be non-negative, got {self.width}x{self.height}"
            )

    @classmethod
    def from_edges(cls, left: int, top: int, right: int, bottom: int) -> Rect:
        return cls(left, top, right - left, bottom - top)

    # --- Edges and corners ---

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def top_left(self) -> tuple[int, int]:
        return (self.left, self.top)

    @property
    def top_right(self) -> tuple[int, int]:
        return (self.right, self.top)

    @property
    def bottom_left(self) -> tuple[int, int]:
        return (self.left, self.bottom)

    @property
    def bottom_right(self) -> tuple[int, int]:
        return (self.right, self.bottom)

    @property
    def area(self) -> int:
        return self.width * self.height

    def side_midpoint(self, side: Side) -> tuple[int, int]:
        """Midpoint of one side, flooring odd dimensions."""
        if side is Side.TOP:
            return (self.left + self.width // 2, self.top)
        if side is Side.BOTTOM:
            return (self.left + self.width // 2, self.bottom)
        if side is Side.LEFT:
            return (self.left, self.top + self.height // 2)
        return (self.right, self.top + self.height // 2)

    # --- Predicates ---

    def contains(self, inner: Rect) -> bool:
        """True if ``inner`` lies entirely within this rectangle, borders included."""
        return (
            inner.left >= self.left
            and inner.top >= self.top
            and inner.right <= self.right
            and inner.bottom <= self.bottom
        )

    def contains_point(self, x: int, y: int) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def intersects(self, other: Rect) -> bool:
        """True if the closed rectangles overlap on both axes."""
        return (
            self.left <= other.right
            and other.left <= self.right
            and self.top <= other.bottom
            and other.top <= self.bottom
        )

    # --- Derived rectangles ---

    def expand(self, margin: int) -> Rect:
        """Grow outward by ``margin`` on every side."""
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def union(self, other: Rect) -> Rect:
        return Rect.from_edges(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )


def bounding_rect(rects) -> Optional[Rect]:
    """Tight union of an iterable of rectangles, or None when it is empty."""
    result = None
    for rect in rects:
        result = rect if result is None else result.union(rect)
    return result


# ---------------------------------------------------------------------------
# Relative position
# ---------------------------------------------------------------------------

def is_left_of(a: Rect, b: Rect) -> bool:
    return a.right <= b.left


def is_right_of(a: Rect, b: Rect) -> bool:
    return a.left >= b.right


def is_above(a: Rect, b: Rect) -> bool:
    return a.bottom <= b.top


def is_below(a: Rect, b: Rect) -> bool:
    return a.top >= b.bottom


def touching_side(a: Rect, b: Rect) -> Optional[Side]:
    """Side of ``a`` that lies flush against the facing side of ``b``.

    The sides must coincide exactly and the rectangles must overlap by a
    positive amount along that side; corner-to-corner contact is not a
    touch.  Returns None when the rectangles do not touch.
    """
    overlaps_horizontally = a.left < b.right and a.right > b.left
    overlaps_vertically = a.top < b.bottom and a.bottom > b.top

    if a.bottom == b.top and overlaps_horizontally:
        return Side.BOTTOM
    if a.top == b.bottom and overlaps_horizontally:
        return Side.TOP
    if a.right == b.left and overlaps_vertically:
        return Side.RIGHT
    if a.left == b.right and overlaps_vertically:
        return Side.LEFT
    return None

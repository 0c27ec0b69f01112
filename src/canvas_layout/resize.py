"""
Group auto-resize for canvas-layout.

A group grows when a child ends up partly or wholly outside it.  Growth
keeps the group's width:height ratio: whenever one edge is pushed out to
a margin beyond the child, the opposite dimension is recomputed from the
ratio.  Edges are checked in the order right, bottom, left, top and only
ever move outward.

A pass over the four edges always leaves the child inside, because
ratio recomputation only pushes the right and bottom edges further out
and never undoes an earlier fix.  ``resize_for_node`` still loops until
the child is contained so the postcondition does not depend on that
argument.

After a group grows, two things can follow:

- its own parent may no longer contain it, so the parent grows in turn
  (all the way up the chain)
- it may now fully cover nodes that sat beside it, which become its
  children
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

from .geometry import Rect
from .models import CanvasNode, GroupNode

if TYPE_CHECKING:
    from .canvas import Canvas

logger = logging.getLogger(__name__)


def _grow_towards(rect: Rect, target: Rect, margin: int, ratio: Optional[float]) -> Rect:
    """One ratio-preserving pass enlarging ``rect`` towards ``target``."""
    left, top, right, bottom = rect.left, rect.top, rect.right, rect.bottom

    def height_for_width() -> int:
        return max(bottom, top + math.ceil((right - left) / ratio)) if ratio else bottom

    def width_for_height() -> int:
        return max(right, left + math.ceil((bottom - top) * ratio)) if ratio else right

    if target.right > right:
        right = target.right + margin
        bottom = height_for_width()
    if target.bottom > bottom:
        bottom = target.bottom + margin
        right = width_for_height()
    if target.left < left:
        left = target.left - margin
        bottom = height_for_width()
    if target.top < top:
        top = target.top - margin
        right = width_for_height()

    return Rect.from_edges(left, top, right, bottom)


def resize_for_node(canvas: Canvas, group: GroupNode, node: CanvasNode) -> None:
    """Grow ``group`` until it contains ``node``, then fix up around it.

    Does nothing when ``node`` already fits.  Otherwise the group is
    enlarged (ratio preserved), sibling-level nodes it now covers are
    adopted, and every ancestor that no longer contains it grows as well.
    """
    if group.bounds.contains(node.bounds):
        return

    margin = canvas.config.margin
    ratio = group.width / group.height if group.width and group.height else None

    rect = group.bounds
    while not rect.contains(node.bounds):
        rect = _grow_towards(rect, node.bounds, margin, ratio)

    logger.debug(f"Resized group {group.id} from {group.bounds} to {rect} for {node.id}")
    canvas.set_bounds(group, rect)

    resize_for_children(canvas, group)

    parent = canvas.parent_of(group)
    if parent is not None:
        resize_for_node(canvas, parent, group)


def resize_for_children(canvas: Canvas, group: GroupNode) -> None:
    """Make sure ``group`` still encloses its children and re-admit neighbours.

    Every child outside the group's bounds makes it grow.  Afterwards any
    node at the group's own level (same parent, or both top level) that
    the group now fully covers is adopted as a child.
    """
    for child in canvas.children_of(group):
        if not group.bounds.contains(child.bounds):
            resize_for_node(canvas, group, child)

    for other in canvas.nodes_contained_by(group.bounds):
        if other.id == group.id or other.parent_id != group.parent_id:
            continue
        logger.debug(f"Group {group.id} grew around {other.id}; adopting it")
        canvas.set_parent(other, group)
        canvas.raise_z(other, group.z + 1)

"""
Free-space search for canvas-layout.

Two searches find a spot for a box of a given size without overlapping
anything already there:

  1. Canvas scope (``find_space_for_boundary``) — used for new top-level
     nodes and for nodes pushed out of the way at top level.
  2. Group scope (``find_space_in_group``) — used when a node has to
     move inside a group's interior.

Neither search optimizes anything.  Both are deterministic functions of
the current document (registry order included), so replaying the same
insertions always yields the same layout.

Canvas-scope search
-------------------
For each node N in registry order, try the slot just right of N:
``(N.right + margin, N.top)``.  The first slot that intersects no node
at all wins.  If every such slot is blocked, scan rightward from the
canvas boundary's top-left corner in margin-sized steps.

Group-scope search
------------------
Scan the group's interior row by row starting at
``(group.left + margin, group.top + margin)``.  When the candidate hits
siblings (or any other node lying over the group), jump past the one
reaching farthest right.  Running off the right edge wraps to the next
row one margin lower.  Running off the bottom means the group is full;
the node then goes in a new column to the right or a new row below,
clear of anything already there, and the caller grows the group around
it.

Both loops terminate by geometry: the cursor advances monotonically and
every registry is finite.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from .geometry import Rect
from .models import CanvasNode, GroupNode

if TYPE_CHECKING:
    from .canvas import Canvas

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canvas scope
# ---------------------------------------------------------------------------

def find_space_for_boundary(
    canvas: Canvas,
    width: int,
    height: int,
    ignore: Iterable[str] = (),
) -> tuple[int, int]:
    """Find a top-left corner for a ``width`` x ``height`` box on the canvas.

    Args:
        canvas: The document to search.
        width:  Box width.
        height: Box height.
        ignore: Ids of nodes that do not count as obstacles (typically the
                node being moved and everything nested inside it).

    Returns:
        (x, y) of a position intersecting no other node.
    """
    margin = canvas.config.margin
    ignored = set(ignore)
    obstacles = [node for node in canvas.nodes if node.id not in ignored]

    def is_free(rect: Rect) -> bool:
        return not any(node.bounds.intersects(rect) for node in obstacles)

    # --- Step 1: right of each existing node ---
    for node in obstacles:
        candidate = Rect(node.right + margin, node.top, width, height)
        if is_free(candidate):
            logger.debug(f"Placed {width}x{height} right of {node.id} at {candidate.top_left}")
            return candidate.top_left

    # --- Step 2: scan along the top of the canvas ---
    if canvas.boundary is None:
        return (0, 0)

    x = canvas.boundary.left
    y = canvas.boundary.top
    while not is_free(Rect(x, y, width, height)):
        x += margin

    logger.debug(f"Placed {width}x{height} by scanning at ({x}, {y})")
    return (x, y)


# ---------------------------------------------------------------------------
# Group scope
# ---------------------------------------------------------------------------

def children_overlapping(
    canvas: Canvas,
    group: GroupNode,
    rect: Rect,
    ignore_groups: bool = False,
) -> list[CanvasNode]:
    """Direct children of ``group`` whose bounds intersect ``rect``."""
    return [
        child for child in canvas.children_of(group)
        if not (ignore_groups and child.is_group)
        and child.bounds.intersects(rect)
    ]


def _excluded_ids(canvas: Canvas, group: GroupNode, child: CanvasNode) -> set[str]:
    """Ids that never block ``child``: its own subtree and the groups around it."""
    excluded = {child.id, group.id}
    excluded.update(node.id for node in canvas.descendants_of(child))
    excluded.update(node.id for node in canvas.ancestors_of(child))
    excluded.update(node.id for node in canvas.ancestors_of(group))
    return excluded


def _blockers(canvas: Canvas, rect: Rect, excluded: set[str]) -> list[CanvasNode]:
    return [node for node in canvas.nodes_overlapping(rect) if node.id not in excluded]


def find_space_in_group(
    canvas: Canvas,
    group: GroupNode,
    child: CanvasNode,
    keep_overlapping: bool = True,
) -> tuple[int, int]:
    """Find a top-left corner for ``child`` inside ``group``.

    Siblings block the child, and so does any other node lying over the
    group's interior (a node that just covered the child, for instance).
    The child's own subtree, the group and the group's ancestors never do.

    Args:
        canvas:           The document both nodes belong to.
        group:            The group that should hold ``child``.
        child:            The node to place; its size is kept.
        keep_overlapping: If True and ``child`` already intersects the
                          group, its current position is returned as-is.

    Returns:
        (x, y) for the child.  When the group has no room left the
        position lies outside the group's current bounds, and the caller
        is expected to grow the group (see ``resize.resize_for_node``).
    """
    if keep_overlapping and group.bounds.intersects(child.bounds):
        return child.top_left

    margin = canvas.config.margin
    excluded = _excluded_ids(canvas, group, child)

    x = group.left + margin
    y = group.top + margin

    while True:
        overlapping = _blockers(canvas, Rect(x, y, child.width, child.height), excluded)

        if not overlapping:
            logger.debug(f"Placed {child.id} in group {group.id} at ({x}, {y})")
            return (x, y)

        # Jump past the node reaching farthest right.  Y positions are
        # ignored so a gap below a nearer sibling is not skipped.
        farthest_right = max(overlapping, key=lambda node: node.right)
        x = farthest_right.right + margin

        # Off the right edge: wrap to the next row
        if x + child.width > group.right + margin:
            x = group.left + margin
            y += margin

        # Off the bottom: the group is full
        if y + child.height > group.bottom + margin:
            return _position_outside_full_group(canvas, group, child, excluded)


def _position_outside_full_group(
    canvas: Canvas,
    group: GroupNode,
    child: CanvasNode,
    excluded: set[str],
) -> tuple[int, int]:
    """Choose between a new column and a new row for a full group.

    The group will grow keeping its width:height ratio.  If the width
    that growth adds comfortably fits the child, the child starts a new
    column at the top right; otherwise it starts a new row at the bottom.
    Nodes already sitting on that spot push the column further right or
    the row further down.
    """
    margin = canvas.config.margin
    ratio = group.width / group.height if group.height else 1.0
    grown_height = group.height + child.height + 2 * margin
    grown_width = int(ratio * grown_height)
    added_width = grown_width - group.width
    new_column = added_width > child.width + 2 * margin

    if new_column:
        x, y = group.right + margin, group.top + margin
    else:
        x, y = group.left + margin, group.bottom + margin

    while True:
        overlapping = _blockers(canvas, Rect(x, y, child.width, child.height), excluded)
        if not overlapping:
            break
        if new_column:
            x = max(node.right for node in overlapping) + margin
        else:
            y = max(node.bottom for node in overlapping) + margin

    layout = "column" if new_column else "row"
    logger.debug(f"Group {group.id} is full; {child.id} starts a new {layout} at ({x}, {y})")
    return (x, y)

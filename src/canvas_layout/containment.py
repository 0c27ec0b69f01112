"""
Group containment for canvas-layout.

Which group a node belongs to is never stored as an independent fact:
it is re-derived from geometry every time a node is inserted.  A node is
a child of group G when G's bounds contain it and no smaller enclosing
group exists (equal areas go to the group registered later, which is the
one nested deeper).

On every insertion ``resolve_containment`` runs three steps:

  1. Depth — the node's z is the number of groups enclosing it, so
     nested content draws above its ancestors.
  2. Parent — enclosing groups are visited innermost first.  The first
     one adopts the node.  For the rest, the *root* of the node's current
     chain is attached instead, so whole subtrees move together and an
     existing nesting is never broken.
  3. Contents — a new group adopts everything it fully covers (taking
     the topmost covered ancestor of each node) and lifts those subtrees
     above itself.  A new non-group node cannot hold anything, so every
     node it fully covers is moved out of the way by the placement
     engine.

Adopting a node that does not fit runs the group-scope placement search
and, failing that, grows the group (``resize``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import CanvasNode, GroupNode
from .placement import find_space_for_boundary, find_space_in_group
from .resize import resize_for_node

if TYPE_CHECKING:
    from .canvas import Canvas

logger = logging.getLogger(__name__)


def _innermost_first(canvas: Canvas, groups: list[GroupNode]) -> list[GroupNode]:
    """Order groups smallest area first; on equal area, later registration first."""
    order = {node.id: index for index, node in enumerate(canvas.nodes)}
    return sorted(groups, key=lambda group: (group.bounds.area, -order[group.id]))


def _enclosing_groups(canvas: Canvas, node: CanvasNode) -> list[GroupNode]:
    return [
        group for group in canvas.nodes_containing(node.bounds)
        if group.is_group and group.id != node.id
    ]


# ---------------------------------------------------------------------------
# Attaching
# ---------------------------------------------------------------------------

def attach_child(canvas: Canvas, group: GroupNode, child: CanvasNode) -> None:
    """Make ``child`` (and its subtree) a direct child of ``group``.

    If the child does not fit inside the group it is moved by the
    group-scope search, and if it still does not fit the group grows.
    The child's subtree is lifted to draw above the group.

    Raises:
        InvariantViolation: ``group`` is ``child`` or nested inside it.
    """
    canvas.set_parent(child, group)

    if not group.bounds.contains(child.bounds):
        x, y = find_space_in_group(canvas, group, child)
        canvas.move_node(child, x, y)
        resize_for_node(canvas, group, child)

    canvas.raise_z(child, group.z + 1)


def relocate(canvas: Canvas, node: CanvasNode) -> None:
    """Move ``node`` (with its subtree) to free space at its own level."""
    parent = canvas.parent_of(node)
    if parent is not None:
        x, y = find_space_in_group(canvas, parent, node, keep_overlapping=False)
        canvas.move_node(node, x, y)
        resize_for_node(canvas, parent, node)
    else:
        subtree = [node.id] + [d.id for d in canvas.descendants_of(node)]
        x, y = find_space_for_boundary(canvas, node.width, node.height, ignore=subtree)
        canvas.move_node(node, x, y)
    logger.debug(f"Relocated {node.id} to ({node.x}, {node.y})")


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------

def resolve_containment(canvas: Canvas, node: CanvasNode) -> None:
    """Fold a newly registered ``node`` into the group hierarchy."""

    # --- Step 1: depth ---
    containing = _enclosing_groups(canvas, node)
    node.z = len(containing)

    # --- Step 2: parent ---
    for group in _innermost_first(canvas, containing):
        if node.parent_id is None:
            attach_child(canvas, group, node)
            continue

        root = canvas.root_of(node)
        if root.id == group.id:
            continue
        if any(ancestor.id == root.id for ancestor in canvas.ancestors_of(group)):
            continue
        attach_child(canvas, group, root)

    # --- Step 3: contents ---
    ancestor_ids = {ancestor.id for ancestor in canvas.ancestors_of(node)}
    covered = [
        other for other in canvas.nodes_contained_by(node.bounds)
        if other.id != node.id and other.id not in ancestor_ids
    ]

    if node.is_group:
        _adopt_covered(canvas, node, covered, ancestor_ids)
    else:
        _push_out_covered(canvas, node, covered)


def _adopt_covered(
    canvas: Canvas,
    group: GroupNode,
    covered: list[CanvasNode],
    ancestor_ids: set[str],
) -> None:
    for other in covered:
        # Climb to the outermost ancestor this group still covers
        top = other
        parent = canvas.parent_of(top)
        while (
            parent is not None
            and parent.id != group.id
            and parent.id not in ancestor_ids
            and group.bounds.contains(parent.bounds)
        ):
            top = parent
            parent = canvas.parent_of(top)

        if top.parent_id == group.id:
            continue
        if (
            parent is not None
            and parent.id not in ancestor_ids
            and parent.bounds.area < group.bounds.area
        ):
            # Already held by a smaller group that overlaps this one
            continue

        logger.debug(f"Group {group.id} adopts {top.id}")
        canvas.set_parent(top, group)
        canvas.raise_z(top, group.z + 1)


def _push_out_covered(canvas: Canvas, node: CanvasNode, covered: list[CanvasNode]) -> None:
    covered_ids = {other.id for other in covered}
    for other in covered:
        # Nested nodes travel with their covered ancestor
        if any(ancestor.id in covered_ids for ancestor in canvas.ancestors_of(other)):
            continue
        logger.debug(f"{node.id} covers {other.id}; moving it out of the way")
        relocate(canvas, other)


# ---------------------------------------------------------------------------
# Bulk derivation
# ---------------------------------------------------------------------------

def rebuild_hierarchy(canvas: Canvas) -> None:
    """Derive every parent link and z-order from geometry, moving nothing.

    Used when a canvas is built from existing nodes whose positions must
    be kept exactly as given.
    """
    order = {node.id: index for index, node in enumerate(canvas.nodes)}

    for node in canvas.nodes:
        node.parent_id = None
        node.z = 0
        if node.is_group:
            node.children = []

    for node in canvas.nodes:
        candidates = [
            group for group in _enclosing_groups(canvas, node)
            # Identical bounds: only a group registered earlier may enclose
            if not node.bounds.contains(group.bounds) or order[group.id] < order[node.id]
        ]
        node.z = len(candidates)
        if candidates:
            canvas.set_parent(node, _innermost_first(canvas, candidates)[0])

    for node in canvas.nodes:
        if node.parent_id is None:
            canvas.raise_z(node, node.z)

"""
Edge side routing for canvas-layout.

Given two placed nodes, pick the side of each that an edge between them
should attach to.  The search space is tiny (4 x 4 side pairs), so the
router narrows it with a few heuristics and then scores what is left by
straight-line distance:

  1. Direction hints — a source left of its destination starts from its
     right side and lands on the destination's left side (likewise for
     right/above/below).  When the nodes overlap on an axis, both sides
     of that axis stay in play.
  2. Touching — when the nodes share a border, an edge along that border
     is useless: the touching side is dropped at the source and its
     opposite at the destination.
  3. Busy sides — sides already used by the source's outgoing edges and
     by the destination's incoming edges are skipped, spreading
     connectors over different faces.
  4. Distance — the pair with the shortest midpoint-to-midpoint distance
     wins (first one found on ties).  A zero-length pair is invisible:
     both of its sides are struck for the rest of the search and scoring
     restarts.

If the hinted sides run out, every side not struck or busy is tried.  If
that fails too, the geometry is degenerate and ``InvariantViolation`` is
raised rather than guessing.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable, Optional, Union

from .errors import InvariantViolation
from .geometry import (
    ALL_SIDES,
    EdgeEnd,
    Side,
    is_above,
    is_below,
    is_left_of,
    is_right_of,
    touching_side,
)
from .models import CanvasEdge, CanvasNode, new_id

if TYPE_CHECKING:
    from .canvas import Canvas

logger = logging.getLogger(__name__)


def _closest_pair(
    source: CanvasNode,
    destination: CanvasNode,
    from_sides: list[Side],
    to_sides: list[Side],
    from_struck: set[Side],
    to_struck: set[Side],
) -> Optional[tuple[Side, Side]]:
    """Score every allowed pair; strike zero-length pairs and rescore.

    ``from_struck`` and ``to_struck`` are updated in place.
    """
    while True:
        best: Optional[tuple[Side, Side]] = None
        best_distance = math.inf
        struck_something = False

        for from_side in from_sides:
            if from_side in from_struck:
                continue
            fx, fy = source.side_position(from_side)

            for to_side in to_sides:
                if to_side in to_struck:
                    continue
                tx, ty = destination.side_position(to_side)

                distance = math.hypot(fx - tx, fy - ty)
                logger.debug(f"{from_side.value} -> {to_side.value}: {distance:.1f}")

                if distance == 0:
                    logger.debug(
                        f"{from_side.value} -> {to_side.value} is not a visible edge; "
                        "striking both sides"
                    )
                    from_struck.add(from_side)
                    to_struck.add(to_side)
                    struck_something = True
                    break

                if distance < best_distance:
                    best_distance = distance
                    best = (from_side, to_side)

            if struck_something:
                break

        if not struck_something:
            return best


def shortest_sides(
    source: CanvasNode,
    destination: CanvasNode,
    from_hints: Optional[Iterable[Side]] = None,
    to_hints: Optional[Iterable[Side]] = None,
    from_excluded: Iterable[Side] = (),
    to_excluded: Iterable[Side] = (),
) -> tuple[Side, Side]:
    """Shortest visible side pair between two nodes.

    Args:
        source:        Node the edge leaves.
        destination:   Node the edge enters.
        from_hints:    Preferred source sides (all sides when empty).
        to_hints:      Preferred destination sides (all sides when empty).
        from_excluded: Source sides that may never be chosen.
        to_excluded:   Destination sides that may never be chosen.

    Raises:
        InvariantViolation: no allowed pair has a non-zero length.
    """
    from_struck = set(from_excluded)
    to_struck = set(to_excluded)
    from_sides = list(from_hints or ()) or list(ALL_SIDES)
    to_sides = list(to_hints or ()) or list(ALL_SIDES)

    result = _closest_pair(source, destination, from_sides, to_sides, from_struck, to_struck)
    if result is None:
        logger.debug("No visible pair among the hinted sides; trying every remaining side")
        result = _closest_pair(
            source,
            destination,
            [side for side in ALL_SIDES if side not in from_struck],
            [side for side in ALL_SIDES if side not in to_struck],
            from_struck,
            to_struck,
        )

    if result is None:
        raise InvariantViolation(
            f"No visible edge sides between {source.id} and {destination.id}"
        )

    logger.debug(f"{result[0].value} -> {result[1].value} wins for {source.id} -> {destination.id}")
    return result


def choose_sides(canvas: Canvas, source: CanvasNode, destination: CanvasNode) -> tuple[Side, Side]:
    """Pick (from_side, to_side) for a new edge from ``source`` to ``destination``."""
    src = source.bounds
    dst = destination.bounds
    from_hints: list[Side] = []
    to_hints: list[Side] = []

    # --- Horizontal hint ---
    if is_left_of(src, dst):
        from_hints.append(Side.RIGHT)
        to_hints.append(Side.LEFT)
    elif is_right_of(src, dst):
        from_hints.append(Side.LEFT)
        to_hints.append(Side.RIGHT)
    else:
        from_hints += [Side.LEFT, Side.RIGHT]
        to_hints += [Side.LEFT, Side.RIGHT]

    # --- Vertical hint ---
    if is_below(src, dst):
        from_hints.append(Side.TOP)
        to_hints.append(Side.BOTTOM)
    elif is_above(src, dst):
        from_hints.append(Side.BOTTOM)
        to_hints.append(Side.TOP)
    else:
        from_hints += [Side.BOTTOM, Side.TOP]
        to_hints += [Side.BOTTOM, Side.TOP]

    # --- Busy sides ---
    from_excluded = {
        edge.from_side for edge in canvas.edges_of(source)
        if edge.from_node_id == source.id and edge.from_side is not None
    }
    to_excluded = {
        edge.to_side for edge in canvas.edges_of(destination)
        if edge.to_node_id == destination.id and edge.to_side is not None
    }

    # --- Touching ---
    touching = touching_side(src, dst)
    if touching is not None:
        logger.debug(f"{source.id} touches {destination.id} on its {touching.value} side")
        from_excluded.add(touching)
        to_excluded.add(touching.opposite)

    logger.debug(
        f"Routing {source.id} -> {destination.id}: "
        f"from {[s.value for s in from_hints]}, to {[s.value for s in to_hints]}"
    )
    return shortest_sides(
        source,
        destination,
        from_hints=from_hints,
        to_hints=to_hints,
        from_excluded=from_excluded,
        to_excluded=to_excluded,
    )


def connect_nodes(
    canvas: Canvas,
    source: Union[CanvasNode, dict, str],
    destination: Union[CanvasNode, dict, str],
    edge_id: Optional[str] = None,
    label: Optional[str] = None,
    color: Optional[str] = None,
) -> CanvasEdge:
    """Create and register an edge between two nodes on their closest sides.

    ``source`` and ``destination`` may be nodes, node records or bare ids;
    both are registered first if needed.  The edge has no marker at
    the source and an arrow at the destination.  An ``edge_id`` already
    on the canvas returns the stored edge unchanged.
    """
    source = canvas.add_or_get_node(source)
    destination = canvas.add_or_get_node(destination)

    if edge_id is not None and canvas.get_edge(edge_id) is not None:
        return canvas.get_edge(edge_id)

    from_side, to_side = choose_sides(canvas, source, destination)
    edge = CanvasEdge(
        id=edge_id or new_id(),
        from_node_id=source.id,
        to_node_id=destination.id,
        from_side=from_side,
        from_end=EdgeEnd.NONE,
        to_side=to_side,
        to_end=EdgeEnd.ARROW,
        color=color,
        label=label,
    )
    return canvas.add_or_get_edge(edge)

"""
The Canvas — document registry for nodes and edges.

The Canvas is the single owner of every element.  It keeps:

- an ordered node registry (insertion order is significant: placement
  scans and tie-breaks follow it) with lookup by id
- an ordered edge registry with lookup by id
- ``boundary`` — a running rectangle around all nodes, padded by the
  configured margin on every side a node pushes it out
- the ``LayoutConfig`` the layout engine uses for this document

Nodes only know ids (their parent's, their children's, their edges'); the
Canvas resolves those ids and is passed explicitly to every engine
function in ``placement``, ``containment``, ``resize`` and ``routing``.

Insertion
---------
``add_or_get_node`` and ``add_or_get_edge`` are idempotent on id: adding
an id that is already present returns the stored element untouched.  A
new node is folded into the group hierarchy by the containment resolver
before it is returned, which may move it (or the nodes it covers) and
may grow enclosing groups.

``add_node``, ``add_nodes``, ``add_edge`` and ``add_edges`` are the strict
counterparts: a taken id, or an edge endpoint that is not registered,
raises ``ValidationError`` instead.

Spatial queries are linear scans; documents hold tens to low hundreds of
nodes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from .config import LayoutConfig
from .containment import rebuild_hierarchy, resolve_containment
from .errors import InvariantViolation, ValidationError
from .geometry import Rect, bounding_rect
from .models import (
    CanvasEdge,
    CanvasNode,
    GroupNode,
    TextNode,
    edge_from_record,
    node_from_record,
)
from .placement import find_space_for_boundary

logger = logging.getLogger(__name__)


class Canvas:
    """A node/edge document with automatic layout.

    Args:
        nodes:  Existing nodes.  Their positions are kept as-is; the group
                hierarchy and z-order are derived from geometry.
        edges:  Existing edges.  Both endpoints must be among ``nodes``.
        config: Layout parameters.  Defaults to ``LayoutConfig()``.

    Raises:
        ValidationError: duplicate node ids, duplicate edge ids, or an
            edge referencing a node that is not in ``nodes``.
    """

    def __init__(
        self,
        nodes: Optional[Iterable[CanvasNode]] = None,
        edges: Optional[Iterable[CanvasEdge]] = None,
        config: Optional[LayoutConfig] = None,
    ):
        self.config = config or LayoutConfig()
        self.boundary: Optional[Rect] = None
        self._nodes: dict[str, CanvasNode] = {}
        self._edges: dict[str, CanvasEdge] = {}

        for node in nodes or []:
            self._check_new_node(node)
            node.edge_ids = []
            self._nodes[node.id] = node
            self._expand_boundary(node.bounds)

        rebuild_hierarchy(self)

        for edge in edges or []:
            self._check_new_edge(edge)
            self._register_edge(edge)

    def __repr__(self) -> str:
        return f"Canvas(nodes={len(self._nodes)}, edges={len(self._edges)})"

    # --- Registry access ---

    @property
    def nodes(self) -> list[CanvasNode]:
        """Every node, in insertion order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> list[CanvasEdge]:
        """Every edge, in insertion order."""
        return list(self._edges.values())

    @property
    def groups(self) -> list[GroupNode]:
        return [node for node in self._nodes.values() if node.is_group]

    def get_node(self, node_id: str) -> Optional[CanvasNode]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[CanvasEdge]:
        return self._edges.get(edge_id)

    # --- Insertion ---

    def add_or_get_node(self, node: Union[CanvasNode, dict, str]) -> CanvasNode:
        """Register a node, or return the one already stored under its id.

        ``node`` may be a node model, a node record (dict), or a bare id.
        A bare id that is not registered yet becomes a default-sized
        ``TextNode`` placed in free space at canvas scope.
        """
        if isinstance(node, str):
            existing = self._nodes.get(node)
            if existing is not None:
                return existing
            width = self.config.default_width
            height = self.config.default_height
            x, y = find_space_for_boundary(self, width, height)
            node = TextNode(id=node, x=x, y=y, width=width, height=height)
        elif isinstance(node, dict):
            node = node_from_record(node)

        existing = self._nodes.get(node.id)
        if existing is not None:
            return existing

        node.parent_id = None
        node.z = 0
        node.edge_ids = []
        if node.is_group:
            node.children = []

        self._nodes[node.id] = node
        self._expand_boundary(node.bounds)
        logger.debug(f"Added node {node.id} at {node.bounds}")

        resolve_containment(self, node)
        return node

    def add_or_get_edge(self, edge: Union[CanvasEdge, dict]) -> CanvasEdge:
        """Register an edge, or return the one already stored under its id.

        Endpoints that are not registered yet are created by id, so an
        edge can never point at a missing node.
        """
        if isinstance(edge, dict):
            edge = edge_from_record(edge)

        existing = self._edges.get(edge.id)
        if existing is not None:
            return existing

        self.add_or_get_node(edge.from_node_id)
        self.add_or_get_node(edge.to_node_id)
        self._register_edge(edge)
        logger.debug(f"Added edge {edge.id}: {edge.from_node_id} -> {edge.to_node_id}")
        return edge

    def _register_edge(self, edge: CanvasEdge) -> None:
        self._edges[edge.id] = edge
        for node_id in dict.fromkeys((edge.from_node_id, edge.to_node_id)):
            self._nodes[node_id].edge_ids.append(edge.id)

    # --- Strict insertion ---

    def add_node(self, node: Union[CanvasNode, dict]) -> CanvasNode:
        """Register a node whose id must not be taken yet.

        Raises:
            ValidationError: a node with the same id is already registered.
        """
        if isinstance(node, dict):
            node = node_from_record(node)
        self._check_new_node(node)
        return self.add_or_get_node(node)

    def add_nodes(self, nodes: Iterable[Union[CanvasNode, dict]]) -> list[CanvasNode]:
        """Register several new nodes in order.

        Every id is checked, against the registry and within the batch,
        before anything is inserted.
        """
        batch = [node_from_record(node) if isinstance(node, dict) else node for node in nodes]
        seen = set()
        for node in batch:
            self._check_new_node(node)
            if node.id in seen:
                raise ValidationError(
                    f"Two nodes have the same id! Node ids must be unique: {node.id}", node.id
                )
            seen.add(node.id)
        return [self.add_or_get_node(node) for node in batch]

    def add_edge(self, edge: Union[CanvasEdge, dict]) -> CanvasEdge:
        """Register a new edge between nodes that are already on the canvas.

        Raises:
            ValidationError: the edge id is taken, or an endpoint is not
                registered.
        """
        if isinstance(edge, dict):
            edge = edge_from_record(edge)
        self._check_new_edge(edge)
        self._register_edge(edge)
        logger.debug(f"Added edge {edge.id}: {edge.from_node_id} -> {edge.to_node_id}")
        return edge

    def add_edges(self, edges: Iterable[Union[CanvasEdge, dict]]) -> list[CanvasEdge]:
        """Register several new edges, checking all of them first."""
        batch = [edge_from_record(edge) if isinstance(edge, dict) else edge for edge in edges]
        seen = set()
        for edge in batch:
            self._check_new_edge(edge)
            if edge.id in seen:
                raise ValidationError(
                    f"Two edges have the same id! Edge ids must be unique: {edge.id}", edge.id
                )
            seen.add(edge.id)
        return [self.add_edge(edge) for edge in batch]

    def _check_new_node(self, node: CanvasNode) -> None:
        if node.id in self._nodes:
            raise ValidationError(
                f"Two nodes have the same id! Node ids must be unique: {node.id}", node.id
            )

    def _check_new_edge(self, edge: CanvasEdge) -> None:
        if edge.id in self._edges:
            raise ValidationError(
                f"Two edges have the same id! Edge ids must be unique: {edge.id}", edge.id
            )
        if edge.from_node_id not in self._nodes:
            raise ValidationError(
                f"Edge {edge.id} begins at non-existent node {edge.from_node_id}", edge.id
            )
        if edge.to_node_id not in self._nodes:
            raise ValidationError(
                f"Edge {edge.id} ends at non-existent node {edge.to_node_id}", edge.id
            )

    # --- Removal ---

    def remove_node(self, node_id: str) -> bool:
        """Remove a node and every edge touching it.

        A removed group's children move up to the group's own parent (or
        to top level).  The boundary is recomputed as the tight union of
        the remaining nodes, or None when the canvas becomes empty.

        Returns True if a node was removed.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return False

        for edge_id in list(node.edge_ids):
            self.remove_edge(edge_id)

        parent = self.parent_of(node)
        self.set_parent(node, None)

        if node.is_group:
            for child in self.children_of(node):
                self.set_parent(child, parent)
                self._lower_z(child)

        del self._nodes[node_id]
        self.boundary = bounding_rect(n.bounds for n in self._nodes.values())
        logger.debug(f"Removed node {node_id}")
        return True

    def remove_edge(self, edge_id: str) -> bool:
        """Remove an edge from the canvas and from both endpoints."""
        edge = self._edges.pop(edge_id, None)
        if edge is None:
            return False
        for node_id in (edge.from_node_id, edge.to_node_id):
            node = self._nodes.get(node_id)
            if node is not None and edge_id in node.edge_ids:
                node.edge_ids.remove(edge_id)
        return True

    # --- Hierarchy ---

    def parent_of(self, node: CanvasNode) -> Optional[GroupNode]:
        if node.parent_id is None:
            return None
        return self._nodes.get(node.parent_id)

    def children_of(self, group: CanvasNode) -> list[CanvasNode]:
        if not group.is_group:
            return []
        return [self._nodes[child_id] for child_id in group.children]

    def ancestors_of(self, node: CanvasNode) -> list[GroupNode]:
        """Enclosing groups, nearest first."""
        ancestors = []
        parent = self.parent_of(node)
        while parent is not None:
            ancestors.append(parent)
            parent = self.parent_of(parent)
        return ancestors

    def descendants_of(self, node: CanvasNode) -> list[CanvasNode]:
        """Every node nested under ``node``, depth first."""
        descendants = []
        stack = list(reversed(self.children_of(node)))
        while stack:
            current = stack.pop()
            descendants.append(current)
            stack.extend(reversed(self.children_of(current)))
        return descendants

    def root_of(self, node: CanvasNode) -> CanvasNode:
        """Outermost ancestor of ``node``, or the node itself at top level."""
        ancestors = self.ancestors_of(node)
        return ancestors[-1] if ancestors else node

    def set_parent(self, child: CanvasNode, group: Optional[GroupNode]) -> None:
        """Make ``group`` the direct parent of ``child`` (None detaches).

        Keeps ``group.children`` and ``child.parent_id`` in agreement.
        Does not move or resize anything.

        Raises:
            InvariantViolation: ``group`` is not a group, is ``child``
                itself, or is nested inside ``child``.
        """
        if group is not None:
            if not group.is_group:
                raise InvariantViolation(f"Node {group.id} is not a group and cannot hold children")
            if group.id == child.id:
                raise InvariantViolation(f"Node {child.id} cannot be its own parent")
            if any(ancestor.id == child.id for ancestor in self.ancestors_of(group)):
                raise InvariantViolation(
                    f"Node {child.id} cannot be placed inside its own descendant {group.id}"
                )

        new_parent_id = group.id if group is not None else None
        if child.parent_id == new_parent_id:
            return

        old_parent = self.parent_of(child)
        if old_parent is not None:
            old_parent.children.remove(child.id)
        child.parent_id = new_parent_id
        if group is not None:
            group.children.append(child.id)
        logger.debug(f"Parent of {child.id} is now {new_parent_id}")

    def raise_z(self, node: CanvasNode, minimum: int) -> None:
        """Lift ``node`` to at least ``minimum`` and keep its subtree above it."""
        if node.z < minimum:
            node.z = minimum
        for child in self.children_of(node):
            self.raise_z(child, node.z + 1)

    def _lower_z(self, node: CanvasNode) -> None:
        node.z = max(0, node.z - 1)
        for child in self.children_of(node):
            self._lower_z(child)

    # --- Geometry mutation ---

    def move_node(self, node: CanvasNode, x: int, y: int) -> None:
        """Move ``node`` so its top-left is (x, y), carrying its subtree along."""
        dx = x - node.x
        dy = y - node.y
        if dx == 0 and dy == 0:
            return
        for moved in [node, *self.descendants_of(node)]:
            moved.move_to(moved.x + dx, moved.y + dy)
            self._expand_boundary(moved.bounds)
        logger.debug(f"Moved {node.id} by ({dx}, {dy})")

    def set_bounds(self, node: CanvasNode, rect: Rect) -> None:
        """Replace a node's bounds without moving its children."""
        node.x, node.y = rect.x, rect.y
        node.width, node.height = rect.width, rect.height
        self._expand_boundary(rect)

    def _expand_boundary(self, rect: Rect) -> None:
        margin = self.config.margin
        if self.boundary is None:
            self.boundary = rect.expand(margin)
            return

        current = self.boundary
        left = rect.left - margin if rect.left < current.left else current.left
        top = rect.top - margin if rect.top < current.top else current.top
        right = rect.right + margin if rect.right > current.right else current.right
        bottom = rect.bottom + margin if rect.bottom > current.bottom else current.bottom
        self.boundary = Rect.from_edges(left, top, right, bottom)

    # --- Spatial queries ---

    def edges_of(self, node: CanvasNode) -> list[CanvasEdge]:
        return [self._edges[edge_id] for edge_id in node.edge_ids]

    def nodes_at(self, x: int, y: int, ignore_groups: bool = False) -> list[CanvasNode]:
        """Every node whose bounds include the point (x, y)."""
        return [
            node for node in self._nodes.values()
            if not (ignore_groups and node.is_group)
            and node.bounds.contains_point(x, y)
        ]

    def node_at(self, x: int, y: int, ignore_groups: bool = False) -> Optional[CanvasNode]:
        """The topmost node at (x, y): highest z, later insertion on ties."""
        topmost = None
        for node in self.nodes_at(x, y, ignore_groups=ignore_groups):
            if topmost is None or node.z >= topmost.z:
                topmost = node
        return topmost

    def nodes_overlapping(self, rect: Rect, ignore_groups: bool = False) -> list[CanvasNode]:
        return [
            node for node in self._nodes.values()
            if not (ignore_groups and node.is_group)
            and node.bounds.intersects(rect)
        ]

    def nodes_contained_by(self, rect: Rect) -> list[CanvasNode]:
        return [node for node in self._nodes.values() if rect.contains(node.bounds)]

    def nodes_containing(self, rect: Rect) -> list[CanvasNode]:
        return [node for node in self._nodes.values() if node.bounds.contains(rect)]

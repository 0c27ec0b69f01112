"""
Data models for canvas-layout — the canvas element vocabulary.

A canvas holds two kinds of elements:

    Node — a positioned rectangle.  Four variants, discriminated by
           ``type``:
             text   — inline text
             file   — a reference to a file (optionally a subpath in it)
             link   — a URL
             group  — a container that visually holds other nodes
    Edge — a directed connector between two nodes, optionally anchored
           to a side of each

Nodes and edges are pydantic models, so a plain record such as::

    {"id": "a", "type": "text", "x": 0, "y": 0,
     "width": 250, "height": 120, "text": "hello"}

validates straight into a ``TextNode`` through ``NODE_ADAPTER``.

Hierarchy and draw order
------------------------
Nodes never hold references to other nodes or to their canvas.  The
engine keeps the hierarchy as ids: ``parent_id`` on every node and the
ordered ``children`` list on groups.  ``z`` is the draw order (higher
draws above lower) and ``edge_ids`` lists the edges touching the node.
These fields are maintained by the owning ``Canvas`` and are excluded
from record dumps.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .geometry import EdgeEnd, Rect, Side


def new_id() -> str:
    """Generate a fresh element id."""
    return str(uuid.uuid4())


class BackgroundStyle(str, Enum):
    """How a group's background image is fitted."""

    COVER = "cover"
    RATIO = "ratio"
    REPEAT = "repeat"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class CanvasNode(BaseModel):
    """Fields and geometry shared by every node variant.

    Attributes:
        id:       Unique within a canvas; generated when omitted and
                  immutable afterwards.
        x, y:     Top-left corner.
        width:    Horizontal extent (≥ 0).  Records should always give a
                  size; nodes made from a bare id get
                  ``LayoutConfig.default_width`` / ``default_height``.
        height:   Vertical extent (≥ 0).
        color:    Opaque color value, passed through untouched.
        parent_id: Id of the enclosing group, or None at top level.
        z:        Draw order; nesting depth drives it upward.
        edge_ids: Ids of edges that start or end here.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id, frozen=True)
    x: int = 0
    y: int = 0
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    color: Optional[str] = None

    # Maintained by the canvas
    parent_id: Optional[str] = Field(default=None, exclude=True)
    z: int = Field(default=0, exclude=True)
    edge_ids: list[str] = Field(default_factory=list, exclude=True)

    # --- Geometry ---

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

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

    def side_position(self, side: Side) -> tuple[int, int]:
        """Anchor point for an edge attached to ``side``."""
        return self.bounds.side_midpoint(side)

    def move_to(self, x: int, y: int) -> None:
        """Move the top-left corner.  Does not touch children; see ``Canvas.move_node``."""
        self.x = x
        self.y = y

    # --- Relationships ---

    @property
    def is_group(self) -> bool:
        return False

    def overlaps(self, other: CanvasNode) -> bool:
        return self.bounds.intersects(other.bounds)

    def is_in_group(self, group: GroupNode) -> bool:
        """True if ``group`` is this node's direct parent."""
        return self.parent_id == group.id


class TextNode(CanvasNode):
    """A node holding inline text."""
    type: Literal["text"] = "text"
    text: str = ""


class FileNode(CanvasNode):
    """A node referencing a file, optionally a heading/block inside it."""
    type: Literal["file"] = "file"
    file: str
    subpath: Optional[str] = None


class LinkNode(CanvasNode):
    """A node referencing a URL."""
    type: Literal["link"] = "link"
    url: str


class GroupNode(CanvasNode):
    """A container for other nodes.

    A node belongs to a group when the group's bounds enclose it and no
    smaller enclosing group exists.  ``children`` holds the direct
    children's ids in adoption order; it is derived from geometry by the
    canvas and never read from records.
    """
    type: Literal["group"] = "group"
    label: Optional[str] = None
    background: Optional[str] = None
    background_style: Optional[BackgroundStyle] = Field(default=None, alias="backgroundStyle")

    children: list[str] = Field(default_factory=list, exclude=True)

    @property
    def is_group(self) -> bool:
        return True

    def contains(self, node: CanvasNode) -> bool:
        """True if ``node`` is a direct child of this group."""
        return node.id in self.children


AnyNode = Annotated[
    Union[TextNode, FileNode, LinkNode, GroupNode],
    Field(discriminator="type"),
]

NODE_ADAPTER: TypeAdapter[AnyNode] = TypeAdapter(AnyNode)


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------

class CanvasEdge(BaseModel):
    """A directed connector between two nodes.

    Endpoints are stored as node ids and resolved through the owning
    canvas.  Sides and end markers are optional; an edge without sides
    is drawn between whatever points the renderer prefers.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id, frozen=True)
    from_node_id: str = Field(alias="fromNodeId", frozen=True)
    to_node_id: str = Field(alias="toNodeId", frozen=True)
    from_side: Optional[Side] = Field(default=None, alias="fromSide")
    from_end: Optional[EdgeEnd] = Field(default=None, alias="fromEnd")
    to_side: Optional[Side] = Field(default=None, alias="toSide")
    to_end: Optional[EdgeEnd] = Field(default=None, alias="toEnd")
    color: Optional[str] = None
    label: Optional[str] = None

    def touches(self, node_id: str) -> bool:
        return node_id in (self.from_node_id, self.to_node_id)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def node_from_record(record: dict) -> CanvasNode:
    """Validate a plain node record into the matching node variant.

    Raises:
        ValidationError: the record is missing fields, has an unknown
            ``type``, or carries values of the wrong shape.
    """
    try:
        return NODE_ADAPTER.validate_python(record)
    except PydanticValidationError as e:
        node_id = record.get("id") if isinstance(record, dict) else None
        raise ValidationError(f"Invalid node record {node_id!r}: {e}", node_id) from e


def edge_from_record(record: dict) -> CanvasEdge:
    """Validate a plain edge record.

    Raises:
        ValidationError: the record is missing endpoints or has an
            invalid side or end value.
    """
    try:
        return CanvasEdge.model_validate(record)
    except PydanticValidationError as e:
        edge_id = record.get("id") if isinstance(record, dict) else None
        raise ValidationError(f"Invalid edge record {edge_id!r}: {e}", edge_id) from e

"""Record and YAML recipe conversion for canvas-layout.

Supports two inputs:
1. Plain records — lists of node dicts and edge dicts (the format the
   surrounding system hands over)
2. YAML recipes — the same records written as a YAML mapping with
   ``nodes`` and ``edges`` keys

Records can be loaded two ways.  By default the canvas keeps every
position exactly as given and only derives the group hierarchy.  With
``layout=True`` nodes are inserted one at a time through
``Canvas.add_nodes``, so overlaps are resolved and groups grow as
needed.
"""

from __future__ import annotations

from typing import Iterable, Optional

import yaml

from .canvas import Canvas
from .config import LayoutConfig
from .errors import ValidationError
from .models import edge_from_record, node_from_record


def canvas_from_records(
    nodes: Iterable[dict],
    edges: Optional[Iterable[dict]] = None,
    config: Optional[LayoutConfig] = None,
    layout: bool = False,
) -> Canvas:
    """Build a Canvas from node and edge records.

    Raises:
        ValidationError: a malformed record, a duplicate id, or an edge
            pointing at a node that is not among ``nodes``.
    """
    node_models = [node_from_record(record) for record in nodes]
    edge_models = [edge_from_record(record) for record in edges or []]

    if not layout:
        return Canvas(nodes=node_models, edges=edge_models, config=config)

    canvas = Canvas(config=config)
    canvas.add_nodes(node_models)
    canvas.add_edges(edge_models)
    return canvas


def canvas_to_records(canvas: Canvas) -> dict[str, list[dict]]:
    """Dump a Canvas to ``{"nodes": [...], "edges": [...]}`` records.

    Unset optional fields and engine-maintained fields (parent, z,
    children, edge ids) are left out.
    """
    return {
        "nodes": [
            node.model_dump(mode="json", by_alias=True, exclude_none=True)
            for node in canvas.nodes
        ],
        "edges": [
            edge.model_dump(mode="json", by_alias=True, exclude_none=True)
            for edge in canvas.edges
        ],
    }


def parse_yaml(
    yaml_str: str,
    config: Optional[LayoutConfig] = None,
    layout: bool = False,
) -> Canvas:
    """Parse a YAML recipe string into a Canvas.

    Example:
        nodes:
          - id: start
            type: text
            x: 0
            y: 0
            width: 250
            height: 120
            text: "Begin here"
          - id: box
            type: group
            x: -40
            y: -40
            width: 600
            height: 400
            label: Pipeline
        edges:
          - id: e1
            fromNodeId: start
            toNodeId: box
    """
    data = yaml.safe_load(yaml_str)
    if not data:
        raise ValidationError("Empty YAML input")
    if not isinstance(data, dict):
        raise ValidationError("YAML recipe must be a mapping with 'nodes' and 'edges'")

    return canvas_from_records(
        data.get("nodes") or [],
        data.get("edges") or [],
        config=config,
        layout=layout,
    )


def canvas_to_yaml(canvas: Canvas) -> str:
    """Serialize a Canvas back to a YAML recipe."""
    return yaml.dump(canvas_to_records(canvas), default_flow_style=False, sort_keys=False)

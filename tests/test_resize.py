"""Tests for ratio-preserving group growth."""

from canvas_layout.canvas import Canvas
from canvas_layout.geometry import Rect
from canvas_layout.resize import resize_for_children, resize_for_node

from invariants import assert_canvas_invariants


def test_no_change_when_node_fits(make_text, make_group):
    group = make_group("g", 0, 0, 400, 400)
    child = make_text("c", 10, 10)
    canvas = Canvas(nodes=[group, child])

    resize_for_node(canvas, group, child)
    assert group.bounds == Rect(0, 0, 400, 400)


def test_growth_keeps_ratio(make_text, make_group):
    group = make_group("g", 0, 0, 200, 100)
    node = make_text("n", 150, 20, 100, 50)
    canvas = Canvas(nodes=[group, node])

    resize_for_node(canvas, group, node)

    assert group.bounds == Rect(0, 0, 260, 130)
    assert group.width / group.height == 2


def test_growth_to_the_left_and_top(make_text, make_group):
    group = make_group("g", 100, 100, 100, 100)
    node = make_text("n", 50, 50, 20, 20)
    canvas = Canvas(nodes=[group, node])

    resize_for_node(canvas, group, node)

    assert group.bounds.contains(node.bounds)
    assert (group.left, group.top) == (40, 40)
    assert group.right >= 200 and group.bottom >= 200


def test_growth_only_enlarges(make_text, make_group):
    group = make_group("g", 0, 0, 300, 100)
    node = make_text("n", 10, 50, 20, 100)
    canvas = Canvas(nodes=[group, node])

    resize_for_node(canvas, group, node)

    assert group.left == 0 and group.top == 0
    assert group.width >= 300 and group.height >= 100
    assert group.bounds.contains(node.bounds)


def test_growth_propagates_to_ancestors(make_text, make_group):
    outer = make_group("outer", 0, 0, 300, 300)
    inner = make_group("inner", 10, 10, 100, 100)
    leaf = make_text("leaf", 20, 20, 50, 50)
    canvas = Canvas(nodes=[outer, inner, leaf])
    assert leaf.parent_id == "inner"

    canvas.move_node(leaf, 250, 250)
    resize_for_node(canvas, inner, leaf)

    assert inner.bounds.contains(leaf.bounds)
    assert outer.bounds.contains(inner.bounds)
    assert_canvas_invariants(canvas)


def test_grown_group_adopts_covered_neighbour(make_text, make_group):
    group = make_group("g", 0, 0, 100, 100)
    child = make_text("c", 10, 10, 50, 50)
    neighbour = make_text("nb", 150, 20, 30, 30)
    canvas = Canvas(nodes=[group, child, neighbour])
    assert neighbour.parent_id is None

    canvas.move_node(child, 120, 120)
    resize_for_children(canvas, group)

    assert group.bounds.contains(child.bounds)
    assert neighbour.parent_id == "g"
    assert neighbour.z == group.z + 1
    assert_canvas_invariants(canvas)

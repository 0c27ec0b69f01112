"""Tests for the canvas-scope and group-scope free-space searches."""

from canvas_layout.canvas import Canvas
from canvas_layout.containment import attach_child
from canvas_layout.geometry import Rect
from canvas_layout.placement import (
    children_overlapping,
    find_space_for_boundary,
    find_space_in_group,
)

from invariants import assert_canvas_invariants


# --- Canvas scope ---


def test_empty_canvas_places_at_origin(canvas):
    assert find_space_for_boundary(canvas, 100, 100) == (0, 0)


def test_first_free_slot_right_of_a_node(make_text):
    canvas = Canvas(nodes=[make_text("a", 0, 0), make_text("b", 110, 0)])
    # Right of "a" is taken by "b", so the slot right of "b" wins
    assert find_space_for_boundary(canvas, 100, 100) == (220, 0)


def test_slot_follows_registry_order(make_text):
    canvas = Canvas(nodes=[make_text("low", 0, 500), make_text("high", 0, 0)])
    assert find_space_for_boundary(canvas, 100, 100) == (110, 500)


def test_scan_from_boundary_when_everything_is_ignored(make_text):
    canvas = Canvas(nodes=[make_text("a", 0, 0)])
    assert find_space_for_boundary(canvas, 50, 50, ignore=["a"]) == (-10, -10)


def test_placed_box_never_overlaps(canvas):
    for i in range(8):
        canvas.add_or_get_node(f"n{i}")
    nodes = canvas.nodes
    for i, a in enumerate(nodes):
        for b in nodes[i + 1:]:
            assert not a.overlaps(b)


# --- Group scope ---


def test_children_overlapping(make_text, make_group):
    group = make_group("g", 0, 0, 400, 400)
    a = make_text("a", 10, 10)
    nested = make_group("inner", 200, 200, 150, 150)
    canvas = Canvas(nodes=[group, a, nested])

    region = Rect(0, 0, 400, 400)
    assert {n.id for n in children_overlapping(canvas, group, region)} == {"a", "inner"}
    assert [n.id for n in children_overlapping(canvas, group, region, ignore_groups=True)] == ["a"]


def test_overlapping_child_keeps_its_position(make_text, make_group):
    group = make_group("g", 0, 0, 400, 400)
    child = make_text("c", 350, 350)
    canvas = Canvas(nodes=[group, child])
    assert find_space_in_group(canvas, group, child) == (350, 350)


def test_search_skips_past_siblings(make_text, make_group):
    group = make_group("g", 0, 0, 400, 400)
    sibling = make_text("a", 10, 10)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, sibling, newcomer])

    assert sibling.parent_id == "g"
    assert find_space_in_group(canvas, group, newcomer) == (120, 10)


def test_keep_overlapping_false_searches_anyway(make_text, make_group):
    group = make_group("g", 0, 0, 400, 400)
    a = make_text("a", 10, 10)
    b = make_text("b", 50, 50)
    canvas = Canvas(nodes=[group, a, b])

    x, y = find_space_in_group(canvas, group, b, keep_overlapping=False)
    assert not Rect(x, y, b.width, b.height).intersects(a.bounds)
    assert group.bounds.contains(Rect(x, y, b.width, b.height))


def test_full_group_starts_new_row(make_text, make_group):
    group = make_group("g", 0, 0, 100, 100)
    filler = make_text("a", 10, 10, 80, 80)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, filler, newcomer])

    assert find_space_in_group(canvas, group, newcomer) == (10, 110)


def test_full_wide_group_starts_new_column(make_text, make_group):
    group = make_group("g", 0, 0, 400, 100)
    filler = make_text("a", 10, 10, 380, 80)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, filler, newcomer])

    assert find_space_in_group(canvas, group, newcomer) == (410, 10)


def test_attach_to_full_group_grows_it(make_text, make_group):
    group = make_group("g", 0, 0, 100, 100)
    filler = make_text("a", 10, 10, 80, 80)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, filler, newcomer])

    attach_child(canvas, group, newcomer)

    assert newcomer.top_left == (10, 110)
    assert group.bounds == Rect(0, 0, 170, 170)
    assert newcomer.parent_id == "g"
    assert newcomer.z == 1
    assert not newcomer.overlaps(filler)
    assert_canvas_invariants(canvas)


def test_node_lying_over_group_blocks_search(make_text, make_group):
    group = make_group("g", 0, 0, 400, 400)
    overlay = make_text("top", -50, -50, 150, 150)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, overlay, newcomer])
    assert overlay.parent_id is None

    assert find_space_in_group(canvas, group, newcomer) == (110, 10)


def test_new_row_moves_below_outside_node(make_text, make_group):
    group = make_group("g", 0, 0, 100, 100)
    filler = make_text("a", 10, 10, 80, 80)
    neighbour = make_text("nb", 10, 115, 40, 40)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, filler, neighbour, newcomer])

    assert find_space_in_group(canvas, group, newcomer) == (10, 165)


def test_new_column_moves_right_of_outside_node(make_text, make_group):
    group = make_group("g", 0, 0, 400, 100)
    filler = make_text("a", 10, 10, 380, 80)
    neighbour = make_text("nb", 405, 0, 60, 60)
    newcomer = make_text("n", 1000, 1000, 50, 50)
    canvas = Canvas(nodes=[group, filler, neighbour, newcomer])

    assert find_space_in_group(canvas, group, newcomer) == (475, 10)

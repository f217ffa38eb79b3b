import random

import pytest

from flowedit.graph_editor.config_schema import defaults_for
from flowedit.graph_editor.graph_model import GraphModel, counter_ids
from flowedit.graph_editor.interaction import InteractionController, InteractionState
from flowedit.graph_editor.routing import Rect
from flowedit.graph_editor.surface import HitTarget, PointerEvent, PointerKind, TargetKind

from conftest import NODE_H, NODE_W, FakePanel, FakeSurface


def down(x, y, target):
    return PointerEvent(PointerKind.DOWN, x, y, target)


def move(x, y):
    return PointerEvent(PointerKind.MOVE, x, y)


def up(x, y, target=HitTarget()):
    return PointerEvent(PointerKind.UP, x, y, target)


def on_node(node, kind=TargetKind.NODE):
    return HitTarget(kind, node.node_id)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def test_first_node_selected_and_panel_shown(model, surface, panel, controller):
    a = model.create_node(200, 200, "start")
    assert surface.created == [f"h:{a.node_id}"]
    assert surface.selected == f"h:{a.node_id}"
    assert panel.last == (a.node_id, ["message", "delay"])
    assert a.config == {"message": "Welcome", "delay": "0"}


def test_attaches_to_existing_graph():
    m = GraphModel(id_factory=counter_ids())
    a = m.create_node(0, 0)
    b = m.create_node(300, 0)
    m.create_connection(a.node_id, b.node_id)
    s, p = FakeSurface(), FakePanel()
    InteractionController(m, s, p)
    assert len(s.created) == 2
    assert len(s.paths) == 1
    assert s.selected == f"h:{a.node_id}"
    assert p.last[0] == a.node_id


# ---------------------------------------------------------------------------
# Drag
# ---------------------------------------------------------------------------

def test_drag_moves_node_by_pointer_offset(model, surface, controller):
    a = model.create_node(100, 100)
    controller.handle_pointer(down(110, 120, on_node(a)))
    assert controller.state is InteractionState.DRAGGING
    assert controller.drag_session.offset_x == 10
    assert controller.drag_session.offset_y == 20
    assert f"h:{a.node_id}" in surface.dragging

    controller.handle_pointer(move(310, 220))
    assert a.position == (300, 200)
    assert surface.positions[f"h:{a.node_id}"] == (300, 200)

    controller.handle_pointer(up(310, 220))
    assert controller.state is InteractionState.IDLE
    assert controller.drag_session is None
    assert surface.dragging == set()


def test_drag_selects_node(model, controller):
    model.create_node(0, 0)
    b = model.create_node(300, 300)
    controller.handle_pointer(down(310, 310, on_node(b)))
    assert model.selected_id == b.node_id


@pytest.mark.parametrize("px, py", [
    (-5000, -5000), (5000, 5000), (-1, 9999), (9999, -1), (500, 350),
])
def test_drag_is_clamped_to_container(model, surface, controller, px, py):
    a = model.create_node(100, 100)
    controller.handle_pointer(down(105, 105, on_node(a)))
    controller.handle_pointer(move(px, py))
    cw, ch = surface.container.width, surface.container.height
    assert 0 <= a.x <= cw - NODE_W
    assert 0 <= a.y <= ch - NODE_H


def test_clamp_reads_container_live(model, surface, controller):
    a = model.create_node(100, 100)
    controller.handle_pointer(down(100, 100, on_node(a)))
    controller.handle_pointer(move(900, 600))
    assert a.position == (850, 600)
    surface.container = Rect(0, 0, 400, 300)
    controller.handle_pointer(move(901, 601))
    assert a.position == (250, 250)


def test_move_within_threshold_is_ignored(model, controller):
    a = model.create_node(100, 100)
    controller.handle_pointer(down(110, 110, on_node(a)))
    controller.handle_pointer(move(112, 111))
    assert a.position == (100, 100)


def test_move_without_drag_is_ignored(model, controller):
    a = model.create_node(100, 100)
    controller.handle_pointer(move(500, 500))
    assert a.position == (100, 100)


def test_drag_recomputes_connectors(model, surface, controller):
    a = model.create_node(100, 100)
    b = model.create_node(400, 100)
    model.create_connection(a.node_id, b.node_id)
    controller.handle_pointer(down(100, 100, on_node(a)))
    controller.handle_pointer(move(100, 300))
    (path,) = surface.paths
    assert (path.sx, path.sy) == (100 + NODE_W, 300 + NODE_H / 2)
    assert (path.tx, path.ty) == (400, 100 + NODE_H / 2)


def test_many_moves_leave_no_stale_geometry(model, surface, controller):
    a = model.create_node(0, 0)
    b = model.create_node(500, 0)
    model.create_connection(a.node_id, b.node_id)
    for i in range(10):
        model.set_position(a.node_id, i * 10, i * 20)
    (path,) = surface.paths
    assert (path.sx, path.sy) == (90 + NODE_W, 180 + NODE_H / 2)


def test_missing_up_ends_previous_drag(model, surface, controller):
    a = model.create_node(100, 100)
    b = model.create_node(400, 100)
    controller.handle_pointer(down(100, 100, on_node(a)))
    controller.handle_pointer(down(400, 100, on_node(b)))
    assert surface.dragging == {f"h:{b.node_id}"}
    assert controller.drag_session.node_id == b.node_id


# ---------------------------------------------------------------------------
# Clicks
# ---------------------------------------------------------------------------

def test_click_node_selects_and_refreshes_panel(model, panel, controller):
    model.create_node(0, 0)
    b = model.create_node(300, 0, "end")
    controller.handle_pointer(down(310, 10, on_node(b)))
    controller.handle_pointer(up(310, 10, on_node(b)))
    assert model.selected_id == b.node_id
    assert panel.last == (b.node_id, ["status", "cleanup"])


def test_click_title_opens_name_editor(model, surface, controller):
    a = model.create_node(0, 0)
    title = on_node(a, TargetKind.TITLE)
    controller.handle_pointer(down(10, 5, title))
    controller.handle_pointer(up(10, 5, title))
    assert surface.name_edits == [f"h:{a.node_id}"]


def test_dragging_title_does_not_open_editor(model, surface, controller):
    a = model.create_node(0, 0)
    title = on_node(a, TargetKind.TITLE)
    controller.handle_pointer(down(10, 5, title))
    controller.handle_pointer(move(200, 200))
    controller.handle_pointer(up(200, 200))
    assert surface.name_edits == []


def test_click_canvas_clears_selection(model, surface, panel, controller):
    model.create_node(0, 0)
    controller.handle_pointer(down(800, 600, HitTarget()))
    controller.handle_pointer(up(800, 600))
    assert model.selected_id is None
    assert surface.selected is None
    assert panel.last is None


def test_controls_do_not_start_drag(model, controller):
    a = model.create_node(100, 100)
    model.create_node(400, 400)
    controller.handle_pointer(down(110, 130, on_node(a, TargetKind.CONTROL)))
    assert controller.state is InteractionState.IDLE
    controller.handle_pointer(down(110, 110, on_node(a, TargetKind.NAME_EDIT)))
    assert controller.state is InteractionState.IDLE


def test_click_on_control_selects_its_node(model, controller):
    model.create_node(0, 0)
    b = model.create_node(300, 0)
    ctl = on_node(b, TargetKind.CONTROL)
    controller.handle_pointer(down(310, 30, ctl))
    controller.handle_pointer(up(310, 30, ctl))
    assert model.selected_id == b.node_id


# ---------------------------------------------------------------------------
# Growth and insertion
# ---------------------------------------------------------------------------

def test_connection_point_click_grows(model, surface, controller):
    a = model.create_node(200, 200, "start")
    cp = HitTarget(TargetKind.CONNECTION_POINT, a.node_id, side="right")
    controller.handle_pointer(down(350, 225, cp))
    controller.handle_pointer(up(350, 225, cp))
    assert len(model.nodes) == 2
    assert len(model.connections) == 1
    assert len(surface.affordances) == 1
    assert len(surface.paths) == 1
    assert model.selected_id == a.node_id


def test_connection_point_release_elsewhere_does_nothing(model, controller):
    a = model.create_node(200, 200)
    cp = HitTarget(TargetKind.CONNECTION_POINT, a.node_id)
    controller.handle_pointer(down(350, 225, cp))
    controller.handle_pointer(up(600, 600))
    assert len(model.nodes) == 1


def test_affordance_expires(model, surface, scheduler, controller):
    a = model.create_node(200, 200)
    controller.grow_from(a.node_id)
    assert scheduler.pending[0][0] == 3.0
    scheduler.run_all()
    assert surface.affordances == {}
    assert controller.affordances == {}


def test_expiry_after_use_is_harmless(model, surface, scheduler, controller):
    a = model.create_node(200, 200)
    controller.grow_from(a.node_id)
    (aff_id,) = controller.affordances
    controller.insert_at_affordance(aff_id)
    hidden_before = list(surface.hidden)
    scheduler.run_all()
    assert surface.hidden == hidden_before
    assert len(model.nodes) == 3


def test_affordance_click_inserts(model, surface, controller):
    a = model.create_node(200, 200)
    b = controller.grow_from(a.node_id)
    (aff,) = controller.affordances.values()
    target = HitTarget(TargetKind.AFFORDANCE, affordance_id=aff.affordance_id)
    controller.handle_pointer(down(aff.x, aff.y, target))
    controller.handle_pointer(up(aff.x, aff.y, target))

    c = model.nodes[-1]
    assert c.position == (aff.x - 75, aff.y - 25)
    assert model.connections_between(a.node_id, b.node_id) == []
    assert model.connections_between(a.node_id, c.node_id)
    assert model.connections_between(c.node_id, b.node_id)
    assert surface.affordances == {}
    assert len(surface.paths) == 2


def test_used_affordance_cannot_be_reused(model, controller):
    a = model.create_node(200, 200)
    controller.grow_from(a.node_id)
    (aff_id,) = controller.affordances
    assert controller.insert_at_affordance(aff_id) is not None
    assert controller.insert_at_affordance(aff_id) is None
    assert len(model.nodes) == 3


def test_grow_from_unknown_node(model, surface, controller):
    assert controller.grow_from("ghost") is None
    assert surface.affordances == {}


def test_end_to_end_scenario(model, surface, controller):
    a = model.create_node(200, 200, "start")
    assert model.selected_id == a.node_id
    assert a.config == {"message": "Welcome", "delay": "0"}

    b = controller.grow_from(a.node_id, "right")
    assert b.x == 450
    assert 150 <= b.y <= 250
    assert model.connections_between(a.node_id, b.node_id)
    assert len(controller.affordances) == 1

    c = controller.insert_between(a.node_id, b.node_id, 325, 210)
    assert abs(c.x + 75 - 325) < 1 and abs(c.y + 25 - 210) < 1
    assert model.connections_between(a.node_id, b.node_id) == []
    assert len(model.connections_between(a.node_id, c.node_id)) == 1
    assert len(model.connections_between(c.node_id, b.node_id)) == 1
    assert len(model.connections) == 2


# ---------------------------------------------------------------------------
# Model edits reach the view
# ---------------------------------------------------------------------------

def test_type_change_refreshes_visual_and_panel(model, surface, panel, controller):
    a = model.create_node(0, 0)
    model.update_node_type(a.node_id, "data")
    assert surface.refreshed[-1] == (f"h:{a.node_id}", "Node 1", "data")
    assert panel.last == (a.node_id, ["format", "source", "cache"])
    assert a.config == defaults_for("data")


def test_name_change_of_unselected_node_leaves_panel(model, panel, controller):
    a = model.create_node(0, 0)
    b = model.create_node(300, 0)
    shown = len(panel.shown)
    model.update_node_name(b.node_id, "Other")
    assert len(panel.shown) == shown
    assert model.selected_id == a.node_id


def test_dangling_connection_not_drawn(model, surface, controller):
    a = model.create_node(0, 0)
    model.create_connection(a.node_id, "ghost")
    assert surface.paths == []


def test_deterministic_growth_with_seeded_rng():
    def run():
        m = GraphModel(id_factory=counter_ids())
        c = InteractionController(m, FakeSurface(), rng=random.Random(42))
        a = m.create_node(200, 200)
        return c.grow_from(a.node_id).position
    assert run() == run()

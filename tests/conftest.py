import random

import pytest

from flowedit.graph_editor.graph_model import GraphModel, counter_ids
from flowedit.graph_editor.interaction import InteractionController
from flowedit.graph_editor.routing import Rect

NODE_W = 150.0
NODE_H = 50.0


class FakeSurface:
    """Records everything the controller asks of a RenderSurface."""

    def __init__(self, width=1000.0, height=700.0):
        self.container = Rect(0.0, 0.0, width, height)
        self.positions = {}
        self.created = []
        self.refreshed = []
        self.paths = []
        self.clear_count = 0
        self.dragging = set()
        self.selected = None
        self.affordances = {}
        self.hidden = []
        self.name_edits = []

    def create_node_visual(self, node):
        handle = f"h:{node.node_id}"
        self.positions[handle] = (node.x, node.y)
        self.created.append(handle)
        return handle

    def remove_visual(self, handle):
        self.positions.pop(handle, None)

    def set_visual_position(self, handle, x, y):
        self.positions[handle] = (x, y)

    def refresh_node_visual(self, handle, node):
        self.refreshed.append((handle, node.name, node.node_type))

    def measure_visual_box(self, handle):
        x, y = self.positions[handle]
        return Rect(x, y, NODE_W, NODE_H)

    def measure_container_box(self):
        return self.container

    def draw_connector_path(self, path):
        self.paths.append(path)

    def clear_all_connector_paths(self):
        self.paths = []
        self.clear_count += 1

    def set_dragging(self, handle, active):
        if active:
            self.dragging.add(handle)
        else:
            self.dragging.discard(handle)

    def set_selected(self, handle):
        self.selected = handle

    def show_affordance(self, affordance):
        self.affordances[affordance.affordance_id] = affordance

    def hide_affordance(self, affordance):
        self.affordances.pop(affordance.affordance_id, None)
        self.hidden.append(affordance.affordance_id)

    def begin_name_edit(self, handle):
        self.name_edits.append(handle)


class FakePanel:
    def __init__(self):
        self.shown = []

    def show_node(self, node, fields):
        self.shown.append((node.node_id, [f.key for f in fields]))

    def show_placeholder(self):
        self.shown.append(None)

    @property
    def last(self):
        return self.shown[-1] if self.shown else "never shown"


class ManualScheduler:
    """Collects deferred callbacks; fire them with run_all()."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, cb in pending:
            cb()


@pytest.fixture
def model():
    return GraphModel(id_factory=counter_ids())


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def panel():
    return FakePanel()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(model, surface, panel, scheduler):
    return InteractionController(model, surface, panel,
                                 scheduler=scheduler, rng=random.Random(7))

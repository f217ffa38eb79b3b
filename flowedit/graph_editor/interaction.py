"""Pointer interaction core: drag/selection state machine.

Pure Python, no Qt dependency.  The host widget hit-tests raw mouse input
into PointerEvents and feeds them to handle_pointer(); the controller
mutates the GraphModel and drives the RenderSurface / ConfigPanelView in
response to the model's change notifications.

States:
  IDLE      – nothing held
  DRAGGING  – pointer went down on a node body/title; a DragSession exists
              until the next pointer-up

Pointer-down:
  node body / title   → select, start a DragSession (offset = pointer - node)
  empty canvas        → clear selection, panel shows its placeholder
  anything else       → remembered; acted on at pointer-up if released on
                        the same target (a click)

Pointer-move while DRAGGING:
  position = pointer - offset, each axis clamped to
  [0, container_extent - node_extent] using live measurements.  Travel
  below click_threshold from the press point is ignored so a plain click
  never nudges a node.

Pointer-up:
  ends the DragSession.  If the node never moved it was a click: select and
  refresh the panel, and on the title also open the inline name editor.
  Click on a connection point grows a new node from it; click on an
  "insert here" marker splits its edge.

Every change is applied synchronously: by the time handle_pointer() returns
the model, connector paths and config panel are consistent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from . import config_schema
from .graph_model import GraphModel, GraphNode, counter_ids
from .routing import Rect, route_all
from .surface import (
    Affordance, ConfigPanelView, HitTarget, PointerEvent, PointerKind,
    RenderSurface, TargetKind,
)
from ..core.settings import DEFAULTS
from ..ops import growth

log = logging.getLogger(__name__)

# scheduler(delay_seconds, callback) – run callback once, later, on this thread
Scheduler = Callable[[float, Callable[[], None]], None]

_DRAG_TARGETS = (TargetKind.NODE, TargetKind.TITLE)


class InteractionState(Enum):
    IDLE     = "idle"
    DRAGGING = "dragging"


@dataclass
class DragSession:
    node_id: str
    handle: Any
    offset_x: float
    offset_y: float
    press_x: float
    press_y: float
    moved: bool = False


class InteractionController:
    """Owns selection gestures, node dragging and insert-here markers.

    Parameters
    ----------
    model      GraphModel to mutate; the controller subscribes to it.
    surface    RenderSurface that shows nodes and connectors.
    panel      Optional ConfigPanelView refreshed on selection changes.
    settings   Settings (or None for DEFAULTS).
    scheduler  One-shot deferred call used to expire markers.  None means
               markers stay until clicked.
    rng        random.Random-like source for grow_from jitter.
    """

    def __init__(self, model: GraphModel, surface: RenderSurface,
                 panel: Optional[ConfigPanelView] = None, settings=None,
                 scheduler: Optional[Scheduler] = None, rng=None,
                 id_factory: Optional[Callable[[str], str]] = None):
        self.model = model
        self.surface = surface
        self.panel = panel
        self.settings = settings
        self._scheduler = scheduler
        self._rng = rng
        self._new_id = id_factory or counter_ids()

        self._handles: dict[str, Any] = {}
        self._drag: Optional[DragSession] = None
        self._pressed: Optional[HitTarget] = None
        self.affordances: dict[str, Affordance] = {}

        for node in self.model.nodes:
            self._handles[node.node_id] = self.surface.create_node_visual(node)
        self.model.on_change(self._on_model_changed)
        self.refresh_connections()
        self.surface.set_selected(self._handles.get(self.model.selected_id))
        self.refresh_panel()

    # -----------------------------------------------------------------------
    # State
    # -----------------------------------------------------------------------

    @property
    def state(self) -> InteractionState:
        return InteractionState.DRAGGING if self._drag else InteractionState.IDLE

    @property
    def drag_session(self) -> Optional[DragSession]:
        return self._drag

    @property
    def selection(self) -> Optional[str]:
        return self.model.selected_id

    def handle_for(self, node_id: str) -> Any:
        return self._handles.get(node_id)

    # -----------------------------------------------------------------------
    # Pointer input
    # -----------------------------------------------------------------------

    def handle_pointer(self, event: PointerEvent) -> None:
        if event.kind is PointerKind.DOWN:
            self._on_down(event)
        elif event.kind is PointerKind.MOVE:
            self._on_move(event)
        elif event.kind is PointerKind.UP:
            self._on_up(event)

    def _on_down(self, ev: PointerEvent) -> None:
        if self._drag is not None:
            # Lost the matching pointer-up (e.g. focus change mid-drag)
            self._end_drag()

        target = ev.target
        self._pressed = target

        if target.kind in _DRAG_TARGETS:
            self._start_drag(target.node_id, ev.x, ev.y)
        elif target.kind is TargetKind.CANVAS:
            self.model.set_selection(None)

    def _on_move(self, ev: PointerEvent) -> None:
        drag = self._drag
        if drag is None:
            return
        if not drag.moved:
            travel = ((ev.x - drag.press_x) ** 2 + (ev.y - drag.press_y) ** 2) ** 0.5
            if travel <= self._setting("click_threshold"):
                return
            drag.moved = True

        x, y = self._clamp(drag.handle, ev.x - drag.offset_x, ev.y - drag.offset_y)
        self.model.set_position(drag.node_id, x, y)

    def _on_up(self, ev: PointerEvent) -> None:
        pressed, self._pressed = self._pressed, None

        drag = self._drag
        if drag is not None:
            self._end_drag()
            if not drag.moved:
                self._click_node(drag.node_id,
                                 edit_name=(pressed is not None and
                                            pressed.kind is TargetKind.TITLE))
            return

        if pressed is None or pressed != ev.target:
            return

        if pressed.kind is TargetKind.CONNECTION_POINT:
            self.grow_from(pressed.node_id, pressed.side)
            self._click_node(pressed.node_id)
        elif pressed.kind is TargetKind.AFFORDANCE:
            self.insert_at_affordance(pressed.affordance_id)
        elif pressed.kind is TargetKind.CONTROL:
            self._click_node(pressed.node_id)

    # -----------------------------------------------------------------------
    # Drag
    # -----------------------------------------------------------------------

    def _start_drag(self, node_id: Optional[str], px: float, py: float) -> None:
        node = self.model.get_node(node_id) if node_id else None
        handle = self._handles.get(node_id) if node_id else None
        if node is None or handle is None:
            log.debug("pointer-down on unknown node %r ignored", node_id)
            return

        self.model.set_selection(node_id)
        self._drag = DragSession(
            node_id=node_id, handle=handle,
            offset_x=px - node.x, offset_y=py - node.y,
            press_x=px, press_y=py,
        )
        self.surface.set_dragging(handle, True)
        log.debug("drag start %s offset=(%.1f, %.1f)",
                  node_id, self._drag.offset_x, self._drag.offset_y)

    def _end_drag(self) -> None:
        drag, self._drag = self._drag, None
        self.surface.set_dragging(drag.handle, False)
        log.debug("drag end %s (moved=%s)", drag.node_id, drag.moved)

    def _clamp(self, handle: Any, x: float, y: float) -> tuple[float, float]:
        container = self.surface.measure_container_box()
        box = self.surface.measure_visual_box(handle)
        max_x = container.width - box.width
        max_y = container.height - box.height
        return (max(0.0, min(x, max_x)), max(0.0, min(y, max_y)))

    def _click_node(self, node_id: Optional[str], edit_name: bool = False) -> None:
        if node_id is None or self.model.get_node(node_id) is None:
            return
        if self.model.selected_id != node_id:
            self.model.set_selection(node_id)
        else:
            self.refresh_panel()
        if edit_name:
            self.surface.begin_name_edit(self._handles[node_id])

    # -----------------------------------------------------------------------
    # Graph growth
    # -----------------------------------------------------------------------

    def grow_from(self, node_id: str, side: str = "right") -> Optional[GraphNode]:
        """Grow a connected node from node_id and offer an insert marker."""
        result = growth.grow_from(self.model, node_id, side,
                                  rng=self._rng, settings=self.settings)
        if result is None:
            return None
        node, (ax, ay) = result

        aff = Affordance(self._new_id("aff"), node_id, node.node_id, ax, ay)
        self.affordances[aff.affordance_id] = aff
        self.surface.show_affordance(aff)
        if self._scheduler is not None:
            self._scheduler(self._setting("affordance_expiry"),
                            lambda: self.expire_affordance(aff.affordance_id))
        return node

    def expire_affordance(self, affordance_id: str) -> None:
        # May fire after the marker was already used; only retract if present
        aff = self.affordances.pop(affordance_id, None)
        if aff is None:
            return
        self.surface.hide_affordance(aff)
        log.debug("affordance %s expired", affordance_id)

    def insert_at_affordance(self, affordance_id: Optional[str]) -> Optional[GraphNode]:
        aff = self.affordances.pop(affordance_id, None)
        if aff is None:
            return None
        self.surface.hide_affordance(aff)
        return self.insert_between(aff.from_node, aff.to_node, aff.x, aff.y)

    def insert_between(self, from_id: str, to_id: str,
                       x: float, y: float) -> GraphNode:
        return growth.insert_between(self.model, from_id, to_id, x, y,
                                     settings=self.settings)

    # -----------------------------------------------------------------------
    # Model → view
    # -----------------------------------------------------------------------

    def _on_model_changed(self, source: str, subject_id: Optional[str]) -> None:
        if source == "add_node":
            node = self.model.get_node(subject_id)
            self._handles[subject_id] = self.surface.create_node_visual(node)
            self.refresh_connections()
        elif source == "move":
            node = self.model.get_node(subject_id)
            handle = self._handles.get(subject_id)
            if node is not None and handle is not None:
                self.surface.set_visual_position(handle, node.x, node.y)
            self.refresh_connections()
        elif source in ("node_type", "node_name"):
            node = self.model.get_node(subject_id)
            handle = self._handles.get(subject_id)
            if node is not None and handle is not None:
                self.surface.refresh_node_visual(handle, node)
            if subject_id == self.model.selected_id:
                self.refresh_panel()
            # A type change may resize the visual
            self.refresh_connections()
        elif source == "connections":
            self.refresh_connections()
        elif source == "selection":
            self.surface.set_selected(self._handles.get(subject_id) if subject_id else None)
            self.refresh_panel()

    def refresh_connections(self) -> None:
        """Recompute and redraw every connector from scratch."""
        self.surface.clear_all_connector_paths()
        for path in route_all(self.model.connections, self._box_for):
            self.surface.draw_connector_path(path)

    def refresh_panel(self) -> None:
        if self.panel is None:
            return
        node = self.model.selected_node
        if node is None:
            self.panel.show_placeholder()
        else:
            self.panel.show_node(node, config_schema.fields_for(node.node_type))

    def _box_for(self, node_id: str) -> Optional[Rect]:
        handle = self._handles.get(node_id)
        if handle is None or self.model.get_node(node_id) is None:
            return None
        return self.surface.measure_visual_box(handle)

    def _setting(self, key: str):
        return getattr(self.settings, key) if self.settings is not None else DEFAULTS[key]

"""Interfaces between the interaction core and whatever draws it.

The InteractionController never touches Qt.  It talks to a RenderSurface
(node visuals, connectors, measuring) and a ConfigPanelView (the per-node
form), and it is fed PointerEvents that the host has already hit-tested.
NodeGraphCanvas and ConfigPanel are the Qt implementations; the tests use
recording fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

from .config_schema import ConfigField
from .graph_model import GraphNode
from .routing import ConnectorPath, Rect


# ---------------------------------------------------------------------------
# Pointer input
# ---------------------------------------------------------------------------

class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP   = "up"


class TargetKind(Enum):
    CANVAS           = "canvas"             # empty background
    NODE             = "node"               # node body, draggable
    TITLE            = "title"              # node header text; drag, or click to rename
    CONTROL          = "control"            # interactive child (type combo)
    CONNECTION_POINT = "connection_point"
    NAME_EDIT        = "name_edit"          # active inline name editor
    AFFORDANCE       = "affordance"         # "insert here" marker


@dataclass(frozen=True)
class HitTarget:
    kind: TargetKind = TargetKind.CANVAS
    node_id: Optional[str] = None
    side: str = "right"                     # CONNECTION_POINT only
    affordance_id: Optional[str] = None     # AFFORDANCE only


CANVAS = HitTarget()


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    x: float
    y: float
    target: HitTarget = CANVAS


# ---------------------------------------------------------------------------
# Insert-here marker
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Affordance:
    affordance_id: str
    from_node: str
    to_node: str
    x: float
    y: float


# ---------------------------------------------------------------------------
# Host capabilities
# ---------------------------------------------------------------------------

class RenderSurface(Protocol):
    """Creates, positions and measures node visuals; draws connectors."""

    def create_node_visual(self, node: GraphNode) -> Any: ...
    def remove_visual(self, handle: Any) -> None: ...
    def set_visual_position(self, handle: Any, x: float, y: float) -> None: ...
    def refresh_node_visual(self, handle: Any, node: GraphNode) -> None: ...
    def measure_visual_box(self, handle: Any) -> Rect: ...    # container-relative
    def measure_container_box(self) -> Rect: ...

    def draw_connector_path(self, path: ConnectorPath) -> None: ...
    def clear_all_connector_paths(self) -> None: ...

    def set_dragging(self, handle: Any, active: bool) -> None: ...
    def set_selected(self, handle: Optional[Any]) -> None: ...
    def show_affordance(self, affordance: Affordance) -> None: ...
    def hide_affordance(self, affordance: Affordance) -> None: ...
    def begin_name_edit(self, handle: Any) -> None: ...


class ConfigPanelView(Protocol):
    def show_node(self, node: GraphNode, fields: list[ConfigField]) -> None: ...
    def show_placeholder(self) -> None: ...

"""Flow graph editor package.

Public surface:
  GraphModel, GraphNode, GraphConnection  – data model
  counter_ids, uuid_ids                   – id factories for GraphModel
  defaults_for, fields_for, ConfigField   – per-type configuration schema
  route, route_all, ConnectorPath, Rect   – connector geometry
  InteractionController                   – pointer drag/selection state machine
  PointerEvent, HitTarget, ...            – controller input types
  SetNodeType, SetNodeConfig, SetNodeName, apply_command – edit commands

The Qt widgets (NodeGraphCanvas, ConfigPanel, GraphEditorWindow) are not
imported here so the core stays importable without PySide6.
"""

from .config_schema import (
    ConfigField, NODE_TYPES, DEFAULT_NODE_TYPE,
    defaults_for, fields_for, type_label, is_valid_value,
)
from .graph_model import (
    GraphModel, GraphNode, GraphConnection, counter_ids, uuid_ids,
)
from .routing import ConnectorPath, Rect, route, route_all
from .commands import SetNodeType, SetNodeConfig, SetNodeName, apply_command
from .surface import (
    Affordance, HitTarget, PointerEvent, PointerKind, TargetKind,
    RenderSurface, ConfigPanelView,
)
from .interaction import InteractionController, InteractionState, DragSession

__all__ = [
    "ConfigField", "NODE_TYPES", "DEFAULT_NODE_TYPE",
    "defaults_for", "fields_for", "type_label", "is_valid_value",
    "GraphModel", "GraphNode", "GraphConnection", "counter_ids", "uuid_ids",
    "ConnectorPath", "Rect", "route", "route_all",
    "SetNodeType", "SetNodeConfig", "SetNodeName", "apply_command",
    "Affordance", "HitTarget", "PointerEvent", "PointerKind", "TargetKind",
    "RenderSurface", "ConfigPanelView",
    "InteractionController", "InteractionState", "DragSession",
]

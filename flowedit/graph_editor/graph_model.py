"""Flow graph data model.

Pure Python, no Qt dependency.  Owns the nodes, connections and the current
selection that the editor canvas and config panel read and mutate.

The model is deliberately tolerant:
  - operations that name an unknown node id are silent no-ops
  - connections are never validated (self-loops, duplicates and dangling
    endpoints are all accepted; dangling ones are simply not routed)
  - blank names are ignored and the previous name kept

Listeners registered with on_change() are called synchronously after every
mutation as callback(source, subject_id).  Sources:

  add_node      – subject is the new node id
  node_type     – type changed (config was reset to the new type's defaults)
  node_config   – a single config value changed
  node_name     – name changed
  move          – position changed
  connections   – a connection was added or removed (subject is None)
  selection     – selection changed (subject is the new selection or None)
"""

from __future__ import annotations

import itertools
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from . import config_schema

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Id factories
# ---------------------------------------------------------------------------

def uuid_ids() -> Callable[[str], str]:
    """Id factory producing "<prefix>_<uuid4 hex>"."""
    def _next(prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex}"
    return _next


def counter_ids(start: int = 1) -> Callable[[str], str]:
    """Deterministic id factory: node_1, conn_2, node_3, ...

    One counter is shared across prefixes so ids never collide even if two
    prefixes were ever made equal.
    """
    counter = itertools.count(start)

    def _next(prefix: str) -> str:
        return f"{prefix}_{next(counter)}"
    return _next


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------

@dataclass
class GraphConnection:
    id: str
    from_node: str
    to_node: str


# ---------------------------------------------------------------------------
# Graph node
# ---------------------------------------------------------------------------

@dataclass
class GraphNode:
    """One node in the flow graph.

    node_id    – unique among live nodes.
    node_type  – one of config_schema.NODE_TYPES.
    name       – shown in the node header; never empty.
    x, y       – top-left corner, canvas coordinates.
    config     – key → value, keys from config_schema.fields_for(node_type).
    """
    node_id: str
    node_type: str = config_schema.DEFAULT_NODE_TYPE
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    config: dict = field(default_factory=dict)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


# ---------------------------------------------------------------------------
# Graph model
# ---------------------------------------------------------------------------

class GraphModel:
    """Mutable flow graph: nodes + connections + single selection."""

    def __init__(self, id_factory: Optional[Callable[[str], str]] = None):
        self.nodes: list[GraphNode] = []
        self.connections: list[GraphConnection] = []
        self.selected_id: Optional[str] = None

        self._new_id = id_factory or uuid_ids()
        self._created_count = 0
        self._listeners: list[Callable] = []

    # -- Observers --

    def on_change(self, callback: Callable) -> None:
        self._listeners.append(callback)

    def notify(self, source: str, subject_id: Optional[str] = None) -> None:
        for cb in list(self._listeners):
            cb(source, subject_id)

    # -- Node accessors --

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return next((n for n in self.nodes if n.node_id == node_id), None)

    def _lookup(self, node_id: str, op: str) -> Optional[GraphNode]:
        node = self.get_node(node_id)
        if node is None:
            log.debug("%s: unknown node %r ignored", op, node_id)
        return node

    @property
    def selected_node(self) -> Optional[GraphNode]:
        return self.get_node(self.selected_id) if self.selected_id else None

    # -- Node operations --

    def create_node(self, x: float, y: float,
                    node_type: str = config_schema.DEFAULT_NODE_TYPE) -> GraphNode:
        """Append a new node at (x, y).  The very first node becomes selected."""
        self._created_count += 1
        node = GraphNode(
            node_id=self._new_id("node"),
            node_type=node_type,
            name=f"Node {self._created_count}",
            x=x, y=y,
            config=config_schema.defaults_for(node_type),
        )
        self.nodes.append(node)
        log.debug("created %s (%s) at (%.1f, %.1f)", node.node_id, node_type, x, y)
        self.notify("add_node", node.node_id)

        if self._created_count == 1:
            self.set_selection(node.node_id)
        return node

    def update_node_type(self, node_id: str, new_type: str) -> None:
        node = self._lookup(node_id, "update_node_type")
        if node is None:
            return
        node.node_type = new_type
        node.config = config_schema.defaults_for(new_type)
        self.notify("node_type", node_id)

    def update_node_config(self, node_id: str, key: str, value: str) -> None:
        node = self._lookup(node_id, "update_node_config")
        if node is None:
            return
        node.config[key] = value
        self.notify("node_config", node_id)

    def update_node_name(self, node_id: str, new_name: str) -> None:
        node = self._lookup(node_id, "update_node_name")
        if node is None:
            return
        trimmed = new_name.strip()
        if not trimmed:
            return
        node.name = trimmed
        self.notify("node_name", node_id)

    def set_position(self, node_id: str, x: float, y: float) -> None:
        node = self._lookup(node_id, "set_position")
        if node is None:
            return
        node.x = x
        node.y = y
        self.notify("move", node_id)

    # -- Selection --

    def set_selection(self, node_id: Optional[str]) -> None:
        if node_id is not None and self._lookup(node_id, "set_selection") is None:
            return
        self.selected_id = node_id
        self.notify("selection", node_id)

    # -- Connection operations --

    def get_connection(self, conn_id: str) -> Optional[GraphConnection]:
        return next((c for c in self.connections if c.id == conn_id), None)

    def create_connection(self, from_id: str, to_id: str) -> GraphConnection:
        """Append from_id → to_id.  Never rejects (see module docstring)."""
        conn = GraphConnection(id=self._new_id("conn"),
                               from_node=from_id, to_node=to_id)
        self.connections.append(conn)
        self.notify("connections")
        return conn

    def remove_connections_matching(self, from_id: str, to_id: str) -> int:
        """Remove every from_id → to_id connection.  Returns how many went."""
        before = len(self.connections)
        self.connections = [
            c for c in self.connections
            if not (c.from_node == from_id and c.to_node == to_id)
        ]
        removed = before - len(self.connections)
        if removed:
            self.notify("connections")
        return removed

    def connections_between(self, from_id: str, to_id: str) -> list[GraphConnection]:
        return [c for c in self.connections
                if c.from_node == from_id and c.to_node == to_id]

    def connections_for_node(self, node_id: str) -> list[GraphConnection]:
        return [c for c in self.connections
                if c.from_node == node_id or c.to_node == node_id]

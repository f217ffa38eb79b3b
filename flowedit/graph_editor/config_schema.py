"""Per-node-type configuration schema.

Static tables describing which config keys each node type exposes, their
display labels, the legal values for each, and the defaults a freshly
created (or re-typed) node starts with.

Node types:
  start     – entry point of a flow
  process   – a unit of work (the default type for grown nodes)
  decision  – a branch on a comparison
  end       – terminal node
  data      – a data source / sink

Every value is a string.  The registry does not enforce that a node's config
only holds legal values: the config panel only ever offers the options listed
here, so callers are trusted.  is_valid_value() exists for callers that want
to check anyway.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Field definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfigField:
    key: str
    label: str
    options: tuple[str, ...]


# ---------------------------------------------------------------------------
# Node types, in menu order
# ---------------------------------------------------------------------------

NODE_TYPES = [
    ("start",    "Start Node"),
    ("process",  "Process Node"),
    ("decision", "Decision Node"),
    ("end",      "End Node"),
    ("data",     "Data Node"),
]

DEFAULT_NODE_TYPE = "process"


# ---------------------------------------------------------------------------
# Per-type field tables
# ---------------------------------------------------------------------------

START_FIELDS = [
    ConfigField("message", "Welcome Message",
                ("Welcome", "Hello", "Start Here", "Begin")),
    ConfigField("delay", "Delay (seconds)", ("0", "1", "2", "5", "10")),
]

PROCESS_FIELDS = [
    ConfigField("operation", "Operation Type",
                ("transform", "validate", "filter", "aggregate")),
    ConfigField("timeout", "Timeout (seconds)", ("10", "30", "60", "120", "300")),
    ConfigField("retries", "Retry Count", ("0", "1", "3", "5", "10")),
]

DECISION_FIELDS = [
    ConfigField("condition", "Condition Type",
                ("equals", "greater_than", "less_than", "contains")),
    ConfigField("value", "Compare Value", ("true", "false", "0", "1", "null")),
    ConfigField("operator", "Logic Operator", ("and", "or", "not")),
]

END_FIELDS = [
    ConfigField("status", "End Status",
                ("success", "failure", "cancelled", "timeout")),
    ConfigField("cleanup", "Cleanup Resources", ("true", "false")),
]

DATA_FIELDS = [
    ConfigField("format", "Data Format", ("json", "xml", "csv", "binary")),
    ConfigField("source", "Data Source", ("database", "api", "file", "cache")),
    ConfigField("cache", "Enable Caching", ("enabled", "disabled")),
]

_FIELDS: dict[str, list[ConfigField]] = {
    "start":    START_FIELDS,
    "process":  PROCESS_FIELDS,
    "decision": DECISION_FIELDS,
    "end":      END_FIELDS,
    "data":     DATA_FIELDS,
}

_DEFAULTS: dict[str, dict[str, str]] = {
    "start":    {"message": "Welcome", "delay": "0"},
    "process":  {"operation": "transform", "timeout": "30", "retries": "3"},
    "decision": {"condition": "equals", "value": "true", "operator": "and"},
    "end":      {"status": "success", "cleanup": "true"},
    "data":     {"format": "json", "source": "database", "cache": "enabled"},
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def defaults_for(node_type: str) -> dict[str, str]:
    """Fresh copy of the default config for node_type ({} if unknown)."""
    return copy.deepcopy(_DEFAULTS.get(node_type, {}))


def fields_for(node_type: str) -> list[ConfigField]:
    """Editable fields for node_type, in display order ([] if unknown)."""
    return list(_FIELDS.get(node_type, []))


def type_label(node_type: str) -> str:
    return next((label for t, label in NODE_TYPES if t == node_type), node_type)


def is_known_type(node_type: str) -> bool:
    return node_type in _FIELDS


def is_valid_value(node_type: str, key: str, value: str) -> bool:
    f = next((f for f in fields_for(node_type) if f.key == key), None)
    return f is not None and value in f.options

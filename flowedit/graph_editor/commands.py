"""Typed edit commands.

UI controls (the node type combo on the canvas, the fields in the config
panel) never call GraphModel methods directly.  They emit one of these
commands through a `command_issued` signal and the window applies it here,
so the widgets only depend on this small vocabulary and not on the model's
method set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .graph_model import GraphModel


@dataclass(frozen=True)
class SetNodeType:
    node_id: str
    node_type: str


@dataclass(frozen=True)
class SetNodeConfig:
    node_id: str
    key: str
    value: str


@dataclass(frozen=True)
class SetNodeName:
    node_id: str
    name: str


Command = Union[SetNodeType, SetNodeConfig, SetNodeName]


def apply_command(model: GraphModel, cmd: Command) -> None:
    if isinstance(cmd, SetNodeType):
        model.update_node_type(cmd.node_id, cmd.node_type)
    elif isinstance(cmd, SetNodeConfig):
        model.update_node_config(cmd.node_id, cmd.key, cmd.value)
    elif isinstance(cmd, SetNodeName):
        model.update_node_name(cmd.node_id, cmd.name)
    else:
        raise TypeError(f"not an edit command: {cmd!r}")

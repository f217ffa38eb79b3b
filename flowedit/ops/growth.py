"""Graph growth operations: grow a chain from a node, insert into an edge.

Pure functions over a GraphModel.  The InteractionController wires these to
connection-point and "insert here" clicks and owns the transient marker that
grow_from leaves behind; these functions only touch the model.
"""

import random

from ..core.settings import DEFAULTS


def grow_from(model, node_id, side='right', rng=None, settings=None):
    """Create a process node beside node_id and connect node_id → new node.

    The new node lands grow_offset to the right (or left, for side='left')
    with a uniform vertical jitter of ±grow_jitter; both coordinates are
    clamped to at least min_coordinate.

    Returns (new_node, (anchor_x, anchor_y)) where the anchor is the midpoint
    between the two node positions, or None if node_id is unknown.
    """
    src = model.get_node(node_id)
    if src is None:
        return None

    rng = rng or random
    offset = _setting(settings, 'grow_offset')
    jitter = _setting(settings, 'grow_jitter')
    floor = _setting(settings, 'min_coordinate')

    new_x = src.x + (offset if side == 'right' else -offset)
    new_y = src.y + rng.uniform(-jitter, jitter)
    node = model.create_node(max(floor, new_x), max(floor, new_y))
    model.create_connection(src.node_id, node.node_id)

    anchor = ((src.x + node.x) / 2, (src.y + node.y) / 2)
    return node, anchor


def insert_between(model, from_id, to_id, x, y, settings=None):
    """Split the from_id → to_id edge with a new node centred on (x, y).

    Returns the new node.
    """
    w = _setting(settings, 'node_width')
    h = _setting(settings, 'node_height')

    node = model.create_node(x - w / 2, y - h / 2)
    model.remove_connections_matching(from_id, to_id)
    model.create_connection(from_id, node.node_id)
    model.create_connection(node.node_id, to_id)
    return node


def _setting(settings, key):
    return getattr(settings, key) if settings is not None else DEFAULTS[key]

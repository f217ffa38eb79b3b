"""User-facing settings - persisted to ~/.config/flowedit/settings.json.

Editor preferences only; the graph itself is never written to disk.

Covers the geometry of graph growth (how far a grown node lands from its
source and how much vertical jitter it gets), the lifetime of the
"insert here" marker, the default node footprint, where the first node is
placed, and the initial window size.
"""

import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / '.config' / 'flowedit' / 'settings.json'

DEFAULTS = {
    'grow_offset': 250.0,        # horizontal distance of a grown node
    'grow_jitter': 50.0,         # vertical jitter, uniform in [-j, +j]
    'min_coordinate': 50.0,      # grown nodes never land above/left of this
    'affordance_expiry': 3.0,    # seconds the insert marker stays up
    'node_width': 150.0,
    'node_height': 50.0,
    'initial_node_x': 200.0,
    'initial_node_y': 200.0,
    'initial_node_type': 'start',
    'click_threshold': 3.0,      # pointer travel below this is a click, not a drag
    'window_width': 1100,
    'window_height': 700,
}

_CASTS = {k: type(v) for k, v in DEFAULTS.items()}


class Settings:
    def __init__(self, path=None):
        self.path = Path(path) if path else CONFIG_PATH
        self.grow_offset: float = DEFAULTS['grow_offset']
        self.grow_jitter: float = DEFAULTS['grow_jitter']
        self.min_coordinate: float = DEFAULTS['min_coordinate']
        self.affordance_expiry: float = DEFAULTS['affordance_expiry']
        self.node_width: float = DEFAULTS['node_width']
        self.node_height: float = DEFAULTS['node_height']
        self.initial_node_x: float = DEFAULTS['initial_node_x']
        self.initial_node_y: float = DEFAULTS['initial_node_y']
        self.initial_node_type: str = DEFAULTS['initial_node_type']
        self.click_threshold: float = DEFAULTS['click_threshold']
        self.window_width: int = DEFAULTS['window_width']
        self.window_height: int = DEFAULTS['window_height']
        self._load()

    def _load(self):
        if not self.path.exists():
            return
        try:
            with open(self.path) as f:
                d = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("could not read %s (%s); using defaults", self.path, e)
            return
        if not isinstance(d, dict):
            log.warning("%s is not a JSON object; using defaults", self.path)
            return
        for key, cast in _CASTS.items():
            if key not in d:
                continue
            try:
                setattr(self, key, cast(d[key]))
            except (TypeError, ValueError):
                log.warning("bad value for %r in %s: %r", key, self.path, d[key])

    def to_dict(self) -> dict:
        return {key: getattr(self, key) for key in DEFAULTS}

    def save(self):
        """Persist current settings to the user config file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

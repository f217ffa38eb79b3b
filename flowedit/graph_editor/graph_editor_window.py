"""Flow graph editor window.

Layout:
  ┌──────────────────────────────────────────┬──────────────┐
  │                                          │ Configuration│
  │           NodeGraphCanvas                │  ConfigPanel │
  │                                          │              │
  └──────────────────────────────────────────┴──────────────┘

The window owns the GraphModel and wires the three pieces together:

  canvas.pointer_event   → InteractionController.handle_pointer
  canvas.command_issued  → apply_command(model, …)
  panel.command_issued   → apply_command(model, …)

The controller drives the canvas (as its RenderSurface) and the panel (as
its ConfigPanelView) from model change notifications.  Nothing is saved:
closing the window discards the graph.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from PySide6.QtWidgets import QWidget, QHBoxLayout
from PySide6.QtCore import Qt, QTimer

from ..core.settings import Settings
from .commands import apply_command
from .config_panel import ConfigPanel
from .graph_model import GraphModel
from .interaction import InteractionController
from .node_canvas import NodeGraphCanvas

log = logging.getLogger(__name__)


def qt_scheduler(delay_seconds: float, callback) -> None:
    """One-shot deferred call on the Qt event loop."""
    QTimer.singleShot(int(delay_seconds * 1000), callback)


class GraphEditorWindow(QWidget):
    """Top-level flow graph editor.

    Parameters
    ----------
    settings   Settings instance (defaults loaded from the user config).
    model      Optional pre-built GraphModel; a fresh one gets the initial
               start node.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 model: Optional[GraphModel] = None, parent=None):
        super().__init__(parent, Qt.Window)
        self.settings = settings or Settings()
        self.setWindowTitle("Flow Editor")
        self.resize(self.settings.window_width, self.settings.window_height)

        self.model = model or GraphModel()
        self._build_ui()

        self.controller = InteractionController(
            self.model, self._canvas, self._panel,
            settings=self.settings,
            scheduler=qt_scheduler,
            rng=random.Random(),
        )
        self._canvas.pointer_event.connect(self.controller.handle_pointer)
        self._canvas.command_issued.connect(self._apply)
        self._panel.command_issued.connect(self._apply)

        if not self.model.nodes:
            self.model.create_node(self.settings.initial_node_x,
                                   self.settings.initial_node_y,
                                   self.settings.initial_node_type)

        self.setStyleSheet("""
            QWidget { background-color: #16213e; color: #eeeeee; }
            QComboBox QAbstractItemView { background: #1a2236; color: #eee; }
        """)

    def _build_ui(self) -> None:
        outer = QHBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.setSpacing(0)

        self._canvas = NodeGraphCanvas(self, node_width=self.settings.node_width,
                                       node_height=self.settings.node_height)
        outer.addWidget(self._canvas, 1)

        self._panel = ConfigPanel(self)
        outer.addWidget(self._panel)

    def _apply(self, cmd) -> None:
        log.debug("command %r", cmd)
        apply_command(self.model, cmd)

    @property
    def canvas(self) -> NodeGraphCanvas:
        return self._canvas

    @property
    def panel(self) -> ConfigPanel:
        return self._panel

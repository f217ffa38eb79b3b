"""Node graph canvas widget.

A QWidget implementing the RenderSurface protocol for the interaction core.
It owns no graph state of its own beyond what it needs to paint:

  - one _NodeVisual per node handle (position, name, type, dragging flag)
    plus an embedded type combo box
  - the connector paths last handed to it by the controller
  - the visible "insert here" markers
  - the inline name editor, while one is open

Raw mouse input is hit-tested into PointerEvents and emitted on
pointer_event; the window forwards them to the InteractionController.
Edits made through embedded controls (type combo, name editor) are emitted
as commands on command_issued.

Coordinate space: widget pixels == container coordinates.  There is no
pan/zoom, so node positions stored in the model are drawn 1:1 and the
drag clamp keeps nodes inside the visible widget.

Each node occupies a fixed node_width × node_height rectangle:

  ┌──────────────────────┐
  │ Node 1               │  ← header (title; click to rename)
  │ [Process Node    ▾]  │  ← type combo
  └──────────────────────┘●  ← connection point (click to grow a node)
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import QWidget, QComboBox, QLineEdit, QSizePolicy
from PySide6.QtCore import Qt, QEvent, QPointF, QRectF, Signal
from PySide6.QtGui import (
    QPainter, QPen, QBrush, QColor, QPainterPath, QFont,
    QMouseEvent, QKeyEvent, QCursor,
)

from .commands import SetNodeName, SetNodeType
from .config_schema import NODE_TYPES
from .graph_model import GraphNode
from .routing import ConnectorPath, Rect
from .surface import (
    Affordance, HitTarget, PointerEvent, PointerKind, TargetKind, CANVAS,
)


# ---------------------------------------------------------------------------
# Visual constants
# ---------------------------------------------------------------------------

NODE_HEADER_H   = 22      # title bar height
NODE_PAD        = 6
COMBO_H         = 22
CONN_POINT_R    = 6       # connection point radius
AFFORDANCE_R    = 11      # "+" marker radius
GRID_STEP       = 40

# Colours
C_BG            = QColor("#0d1117")
C_GRID          = QColor("#1c2333")
C_NODE_BG       = QColor("#1a2236")
C_NODE_BORDER   = QColor("#2a3a5c")
C_NODE_SEL      = QColor("#6366f1")
C_NODE_HEADER   = {
    "start":    QColor("#0d2a1a"),
    "process":  QColor("#1a3a5c"),
    "decision": QColor("#3a2a1a"),
    "end":      QColor("#3a1a2a"),
    "data":     QColor("#2a1a3a"),
}
C_NODE_HEADER_DEFAULT = QColor("#1a2a3a")
C_CONN_POINT    = QColor("#6bcb77")
C_WIRE          = QColor("#4d96ff")
C_AFFORDANCE    = QColor("#6366f1")
C_TEXT          = QColor("#e6e6e6")

COMBO_STYLE = "background: #0d1117; color: #ccc; border: 1px solid #2a3a5c;"


# ---------------------------------------------------------------------------
# Per-node visual state
# ---------------------------------------------------------------------------

class _NodeVisual:
    def __init__(self, node: GraphNode, combo: QComboBox):
        self.node_id = node.node_id
        self.x = node.x
        self.y = node.y
        self.name = node.name
        self.node_type = node.node_type
        self.combo = combo
        self.dragging = False


class _NameEdit(QLineEdit):
    """Inline title editor.  Enter/focus-out commits, Escape cancels."""

    cancelled = Signal()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key_Escape:
            self.cancelled.emit()
            return
        super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Node graph canvas
# ---------------------------------------------------------------------------

class NodeGraphCanvas(QWidget):
    """Interactive flow graph canvas.

    Signals:
      pointer_event(PointerEvent)  – hit-tested mouse input
      command_issued(object)       – SetNodeType / SetNodeName from embedded controls
    """

    pointer_event = Signal(object)
    command_issued = Signal(object)

    def __init__(self, parent=None, node_width: float = 150.0,
                 node_height: float = 50.0):
        super().__init__(parent)
        self.node_width = node_width
        self.node_height = node_height

        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(400, 300)

        self._visuals: dict[str, _NodeVisual] = {}
        self._paths: list[ConnectorPath] = []
        self._affordances: dict[str, Affordance] = {}
        self._selected: Optional[str] = None

        self._name_edit: Optional[_NameEdit] = None
        self._name_edit_node: Optional[str] = None

    # -----------------------------------------------------------------------
    # RenderSurface: node visuals
    # -----------------------------------------------------------------------

    def create_node_visual(self, node: GraphNode) -> str:
        combo = QComboBox(self)
        for _, label in NODE_TYPES:
            combo.addItem(label)
        combo.setStyleSheet(COMBO_STYLE)
        combo.setProperty("node_id", node.node_id)
        combo.installEventFilter(self)
        self._select_type(combo, node.node_type)
        combo.currentIndexChanged.connect(
            lambda i, nid=node.node_id:
            self.command_issued.emit(SetNodeType(nid, NODE_TYPES[i][0])) if i >= 0 else None)

        v = _NodeVisual(node, combo)
        self._visuals[node.node_id] = v
        self._place_children(v)
        combo.show()
        self.update()
        return node.node_id

    def remove_visual(self, handle: str) -> None:
        v = self._visuals.pop(handle, None)
        if v is None:
            return
        if self._name_edit_node == handle:
            self._close_name_edit()
        v.combo.removeEventFilter(self)
        v.combo.setParent(None)
        v.combo.deleteLater()
        if self._selected == handle:
            self._selected = None
        self.update()

    def set_visual_position(self, handle: str, x: float, y: float) -> None:
        v = self._visuals.get(handle)
        if v is None:
            return
        v.x, v.y = x, y
        self._place_children(v)
        self.update()

    def refresh_node_visual(self, handle: str, node: GraphNode) -> None:
        v = self._visuals.get(handle)
        if v is None:
            return
        v.name = node.name
        v.node_type = node.node_type
        self._select_type(v.combo, node.node_type)
        self.update()

    def measure_visual_box(self, handle: str) -> Rect:
        v = self._visuals[handle]
        return Rect(v.x, v.y, self.node_width, self.node_height)

    def measure_container_box(self) -> Rect:
        return Rect(0.0, 0.0, float(self.width()), float(self.height()))

    # -----------------------------------------------------------------------
    # RenderSurface: connectors, visual state, markers
    # -----------------------------------------------------------------------

    def draw_connector_path(self, path: ConnectorPath) -> None:
        self._paths.append(path)
        self.update()

    def clear_all_connector_paths(self) -> None:
        self._paths.clear()
        self.update()

    def set_dragging(self, handle: str, active: bool) -> None:
        v = self._visuals.get(handle)
        if v is not None:
            v.dragging = active
        dragging = any(v.dragging for v in self._visuals.values())
        self.setCursor(QCursor(Qt.ClosedHandCursor if dragging else Qt.ArrowCursor))
        self.update()

    def set_selected(self, handle: Optional[str]) -> None:
        self._selected = handle
        self.update()

    def show_affordance(self, affordance: Affordance) -> None:
        self._affordances[affordance.affordance_id] = affordance
        self.update()

    def hide_affordance(self, affordance: Affordance) -> None:
        self._affordances.pop(affordance.affordance_id, None)
        self.update()

    def begin_name_edit(self, handle: str) -> None:
        v = self._visuals.get(handle)
        if v is None:
            return
        self._close_name_edit()

        edit = _NameEdit(self)
        edit.setText(v.name)
        edit.setStyleSheet(
            "background: transparent; color: #e6e6e6; border: 1px solid #6366f1;"
            "border-radius: 3px; padding: 0px 2px; font-weight: bold;")
        edit.editingFinished.connect(lambda e=edit: self._commit_name_edit(e))
        edit.cancelled.connect(lambda e=edit: self._cancel_name_edit(e))
        self._name_edit = edit
        self._name_edit_node = handle
        self._place_children(v)
        edit.show()
        edit.setFocus()
        edit.selectAll()
        self.update()

    # -----------------------------------------------------------------------
    # Name editing
    # -----------------------------------------------------------------------

    def _commit_name_edit(self, edit: _NameEdit) -> None:
        # editingFinished fires again on focus-out after Enter; act once
        if edit is not self._name_edit:
            return
        node_id = self._name_edit_node
        text = edit.text()
        self._close_name_edit()
        self.command_issued.emit(SetNodeName(node_id, text))

    def _cancel_name_edit(self, edit: _NameEdit) -> None:
        if edit is not self._name_edit:
            return
        self._close_name_edit()

    def _close_name_edit(self) -> None:
        edit = self._name_edit
        if edit is None:
            return
        self._name_edit = None
        self._name_edit_node = None
        edit.hide()
        edit.deleteLater()
        self.setFocus()
        self.update()

    # -----------------------------------------------------------------------
    # Geometry
    # -----------------------------------------------------------------------

    def _node_rect(self, v: _NodeVisual) -> QRectF:
        return QRectF(v.x, v.y, self.node_width, self.node_height)

    def _header_rect(self, v: _NodeVisual) -> QRectF:
        return QRectF(v.x, v.y, self.node_width, NODE_HEADER_H)

    def _conn_point(self, v: _NodeVisual) -> QPointF:
        return QPointF(v.x + self.node_width, v.y + self.node_height / 2)

    def _place_children(self, v: _NodeVisual) -> None:
        v.combo.setGeometry(int(v.x + NODE_PAD), int(v.y + NODE_HEADER_H),
                            int(self.node_width - NODE_PAD * 2), COMBO_H)
        if self._name_edit is not None and self._name_edit_node == v.node_id:
            self._name_edit.setGeometry(int(v.x + 4), int(v.y + 1),
                                        int(self.node_width - 8), NODE_HEADER_H - 2)

    @staticmethod
    def _select_type(combo: QComboBox, node_type: str) -> None:
        idx = next((i for i, (t, _) in enumerate(NODE_TYPES) if t == node_type), -1)
        combo.blockSignals(True)
        combo.setCurrentIndex(idx)
        combo.blockSignals(False)

    # -----------------------------------------------------------------------
    # Hit testing
    # -----------------------------------------------------------------------

    def hit_test(self, x: float, y: float) -> HitTarget:
        p = QPointF(x, y)

        # Markers sit on top of everything
        for aff in reversed(list(self._affordances.values())):
            if (p - QPointF(aff.x, aff.y)).manhattanLength() <= AFFORDANCE_R * 1.4:
                return HitTarget(TargetKind.AFFORDANCE, affordance_id=aff.affordance_id)

        # Topmost node first (last created is painted last)
        for v in reversed(list(self._visuals.values())):
            if (p - self._conn_point(v)).manhattanLength() <= CONN_POINT_R * 1.8:
                return HitTarget(TargetKind.CONNECTION_POINT, v.node_id, side="right")
            if not self._node_rect(v).contains(p):
                continue
            if self._name_edit_node == v.node_id and self._header_rect(v).contains(p):
                return HitTarget(TargetKind.NAME_EDIT, v.node_id)
            if v.combo.geometry().contains(p.toPoint()):
                return HitTarget(TargetKind.CONTROL, v.node_id)
            if self._header_rect(v).contains(p):
                return HitTarget(TargetKind.TITLE, v.node_id)
            return HitTarget(TargetKind.NODE, v.node_id)

        return CANVAS

    # -----------------------------------------------------------------------
    # Mouse
    # -----------------------------------------------------------------------

    def _emit(self, kind: PointerKind, event: QMouseEvent, target: HitTarget) -> None:
        pos = event.position()
        self.pointer_event.emit(PointerEvent(kind, pos.x(), pos.y(), target))

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            return
        if self._name_edit is not None:
            # Clicking away from the editor commits it
            self._commit_name_edit(self._name_edit)
        pos = event.position()
        self._emit(PointerKind.DOWN, event, self.hit_test(pos.x(), pos.y()))

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        hit = self.hit_test(pos.x(), pos.y())
        if event.buttons() & Qt.LeftButton:
            self._emit(PointerKind.MOVE, event, hit)
            return
        # Hover cursor
        if hit.kind in (TargetKind.CONNECTION_POINT, TargetKind.AFFORDANCE):
            self.setCursor(QCursor(Qt.PointingHandCursor))
        elif hit.kind in (TargetKind.NODE, TargetKind.TITLE):
            self.setCursor(QCursor(Qt.OpenHandCursor))
        else:
            self.setCursor(QCursor(Qt.ArrowCursor))

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            return
        pos = event.position()
        self._emit(PointerKind.UP, event, self.hit_test(pos.x(), pos.y()))

    def eventFilter(self, obj, event) -> bool:
        # A press on a node's type combo still counts as a click on the node
        if (isinstance(obj, QComboBox) and event.type() == QEvent.MouseButtonPress
                and event.button() == Qt.LeftButton):
            nid = obj.property("node_id")
            if nid in self._visuals:
                target = HitTarget(TargetKind.CONTROL, nid)
                c = obj.geometry().center()
                self.pointer_event.emit(PointerEvent(PointerKind.DOWN, c.x(), c.y(), target))
                self.pointer_event.emit(PointerEvent(PointerKind.UP, c.x(), c.y(), target))
        return super().eventFilter(obj, event)

    # -----------------------------------------------------------------------
    # Paint
    # -----------------------------------------------------------------------

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        painter.fillRect(self.rect(), C_BG)
        self._draw_grid(painter)
        self._draw_connections(painter)
        for v in self._visuals.values():
            self._draw_node(painter, v)
        self._draw_affordances(painter)

    def _draw_grid(self, painter: QPainter) -> None:
        pen = QPen(C_GRID)
        pen.setWidth(1)
        painter.setPen(pen)
        x = 0
        while x < self.width():
            painter.drawLine(x, 0, x, self.height())
            x += GRID_STEP
        y = 0
        while y < self.height():
            painter.drawLine(0, y, self.width(), y)
            y += GRID_STEP

    def _draw_connections(self, painter: QPainter) -> None:
        painter.setPen(QPen(C_WIRE, 2.0))
        painter.setBrush(Qt.NoBrush)
        for path in self._paths:
            painter.drawPath(_painter_path(path))

    def _draw_node(self, painter: QPainter, v: _NodeVisual) -> None:
        r = self._node_rect(v)
        is_sel = v.node_id == self._selected

        # Shadow (lifted while dragging)
        lift = 6 if v.dragging else 3
        shadow = QPainterPath()
        shadow.addRoundedRect(r.adjusted(lift, lift, lift, lift), 6, 6)
        painter.fillPath(shadow, QColor(0, 0, 0, 110 if v.dragging else 60))

        body = QPainterPath()
        body.addRoundedRect(r, 6, 6)
        painter.fillPath(body, C_NODE_BG)

        # Header
        header_rect = self._header_rect(v)
        header = QPainterPath()
        header.addRoundedRect(header_rect, 6, 6)
        # Square off the header's bottom corners
        header.addRect(QRectF(r.left(), r.top() + NODE_HEADER_H / 2,
                              r.width(), NODE_HEADER_H / 2))
        painter.fillPath(header, C_NODE_HEADER.get(v.node_type, C_NODE_HEADER_DEFAULT))

        painter.setPen(QPen(C_NODE_SEL if is_sel else C_NODE_BORDER,
                            2.5 if is_sel else 1.0))
        painter.setBrush(Qt.NoBrush)
        painter.drawRoundedRect(r, 6, 6)

        # Title (hidden while the inline editor covers it)
        if self._name_edit_node != v.node_id:
            font = QFont("Segoe UI", 8)
            font.setBold(True)
            painter.setFont(font)
            painter.setPen(QPen(C_TEXT))
            painter.drawText(header_rect.adjusted(8, 0, -8, 0),
                             Qt.AlignVCenter | Qt.AlignLeft, v.name)

        # Connection point
        painter.setBrush(QBrush(C_CONN_POINT))
        painter.setPen(QPen(C_CONN_POINT.darker(130), 1))
        painter.drawEllipse(self._conn_point(v), CONN_POINT_R, CONN_POINT_R)

    def _draw_affordances(self, painter: QPainter) -> None:
        font = QFont("Segoe UI", 11)
        font.setBold(True)
        painter.setFont(font)
        for aff in self._affordances.values():
            c = QPointF(aff.x, aff.y)
            painter.setBrush(QBrush(C_AFFORDANCE))
            painter.setPen(QPen(C_AFFORDANCE.lighter(140), 1.5))
            painter.drawEllipse(c, AFFORDANCE_R, AFFORDANCE_R)
            painter.setPen(QPen(C_TEXT))
            painter.drawText(QRectF(c.x() - AFFORDANCE_R, c.y() - AFFORDANCE_R,
                                    AFFORDANCE_R * 2, AFFORDANCE_R * 2),
                             Qt.AlignCenter, "+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _painter_path(path: ConnectorPath) -> QPainterPath:
    """Two quadratic segments, as computed by the router."""
    qp = QPainterPath(QPointF(path.sx, path.sy))
    for _, ctrl, end in path.segments():
        qp.quadTo(QPointF(*ctrl), QPointF(*end))
    return qp

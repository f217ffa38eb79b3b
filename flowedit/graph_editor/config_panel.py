"""Right panel - configuration form for the selected node.

Rebuilt from scratch whenever the selection (or the selected node's type or
name) changes.  The panel never touches the model: every edit is emitted as
a command through command_issued.
"""

from PySide6.QtWidgets import QFrame, QLabel, QLineEdit, QComboBox, QVBoxLayout
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont

from .commands import SetNodeConfig, SetNodeName

PLACEHOLDER_TEXT = 'Select a node to configure'


def panel_heading(node_type: str) -> str:
    return f'{node_type[:1].upper()}{node_type[1:]} Node Configuration'


class ConfigPanel(QFrame):
    """Name field plus one combo box per config field of the selected node."""

    command_issued = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedWidth(280)
        self.setObjectName('configPanel')
        self.setStyleSheet("""
            QFrame#configPanel { background-color: #16213e; border-left: 1px solid #2a3a5c; }
            QLabel { color: #cccccc; background: transparent; }
            QLineEdit, QComboBox {
                background: #0d1117; color: #eeeeee;
                border: 1px solid #2a3a5c; border-radius: 3px; padding: 2px 4px;
            }
        """)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(6)

        title = QLabel('Configuration')
        font = QFont()
        font.setPointSize(11)
        font.setBold(True)
        title.setFont(font)
        layout.addWidget(title)

        self._content = QVBoxLayout()
        self._content.setSpacing(4)
        layout.addLayout(self._content)
        layout.addStretch()

        self.show_placeholder()

    def _clear(self):
        while self._content.count():
            item = self._content.takeAt(0)
            w = item.widget()
            if w:
                w.deleteLater()

    def show_placeholder(self):
        self._clear()
        lbl = QLabel(PLACEHOLDER_TEXT)
        lbl.setStyleSheet('color: #888;')
        lbl.setWordWrap(True)
        self._content.addWidget(lbl)

    def show_node(self, node, fields):
        self._clear()

        heading = QLabel(panel_heading(node.node_type))
        font = QFont()
        font.setBold(True)
        heading.setFont(font)
        self._content.addWidget(heading)

        # Name first
        self._content.addWidget(QLabel('Node Name:'))
        name_edit = QLineEdit(node.name)
        name_edit.setPlaceholderText('Enter node name')
        name_edit.editingFinished.connect(
            lambda e=name_edit, n=node: self._on_name_edited(n, e))
        self._content.addWidget(name_edit)

        for f in fields:
            self._content.addWidget(QLabel(f'{f.label}:'))
            combo = QComboBox()
            combo.addItems(list(f.options))
            current = node.config.get(f.key)
            combo.setCurrentIndex(f.options.index(current) if current in f.options else -1)
            combo.currentTextChanged.connect(
                lambda text, nid=node.node_id, key=f.key:
                self.command_issued.emit(SetNodeConfig(nid, key, text)))
            self._content.addWidget(combo)

    def _on_name_edited(self, node, edit):
        text = edit.text()
        if not text.strip():
            # Blank names are rejected by the model; show the kept name again
            edit.setText(node.name)
            return
        if text.strip() != node.name:
            self.command_issued.emit(SetNodeName(node.node_id, text))

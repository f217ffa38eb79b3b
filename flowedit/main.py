#!/usr/bin/env python3
"""Flow Editor - Standalone Desktop Application.

An interactive editor for flow-graph diagrams: place typed nodes, grow them
into chains, drag them around and edit each node's configuration.  Built
with PySide6.  The graph lives in memory only.

Usage:
    python -m flowedit.main [--config FILE] [--debug]
    python flowedit/main.py [--config FILE] [--debug]
"""
import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

# Allow running as a script (python flowedit/main.py) in addition to
# running as a module (python -m flowedit.main).  When executed directly,
# __package__ is None or empty, so we set it and ensure the parent directory
# is on sys.path so that relative imports within the package work.
if not __package__:
    _parent = str(Path(__file__).resolve().parent.parent)
    if _parent not in sys.path:
        sys.path.insert(0, _parent)
    __package__ = "flowedit"

LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Flow Editor')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to settings JSON (default ~/.config/flowedit/settings.json)')
    parser.add_argument('--debug', action='store_true',
                        help='Verbose logging (drag transitions, ignored ids, commands)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format=LOG_FORMAT)

    from .core.settings import Settings
    settings = Settings(args.config)

    app = QApplication(sys.argv[:1])

    # Set application style
    app.setStyle('Fusion')

    # Import here so --help works without building any widgets
    from .graph_editor.graph_editor_window import GraphEditorWindow
    window = GraphEditorWindow(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == '__main__':
    main()

"""flowedit - interactive flow graph editor built with PySide6."""

__version__ = "0.1.0"

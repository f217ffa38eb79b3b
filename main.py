#!/usr/bin/env python3
"""Flow Editor - Standalone Desktop Application.

Usage:
    python main.py [--config FILE] [--debug]     # from project root
    python -m flowedit.main [--config FILE] [--debug]
"""
import sys
from pathlib import Path

# Ensure the project root (this file's directory) is on sys.path so that
# `import flowedit` works regardless of how the script is invoked.
_root = str(Path(__file__).resolve().parent)
if _root not in sys.path:
    sys.path.insert(0, _root)

from flowedit.main import main


if __name__ == '__main__':
    main()

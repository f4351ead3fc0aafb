#!/usr/bin/env python3
"""Hecto - a small terminal text editor.

Usage:
    python main.py [filename]

Controls:
    Arrow keys, Home/End, Page Up/Down: Move the cursor
    Ctrl-F: Search (arrows jump between matches)
    Ctrl-S: Save file
    Ctrl-Q: Quit (press twice to discard unsaved changes)
"""

from hecto.__main__ import main


if __name__ == "__main__":
    main()

"""Hecto CLI entry point.

Allows running via `python -m hecto` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys

from .constants import EditorConstants
from .version import get_version_string


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def _configure_logging() -> None:
    """Send log records to the file named by HECTO_LOG, if any."""
    path = os.environ.get("HECTO_LOG")
    if not path:
        return
    level_name = os.environ.get("HECTO_LOG_LEVEL", "DEBUG").upper()
    level = getattr(logging, level_name, logging.DEBUG)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger("hecto")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def run_keyboard_test() -> None:
    """Print parsed key events until ESC, using the editor's input stack."""
    from .keyboard import KeyboardHandler, KeyEvent, KeyType
    from .terminal import TerminalInterface

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    kb = KeyboardHandler(term)
    try:
        term.setup()
        term.show_cursor()
        print(term.term.home + term.term.clear, end='', flush=True)
        while True:
            ev: KeyEvent | None = kb.get_key_event(timeout=None)
            if not ev:
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                break
            raw = _escape_bytes(ev.raw)
            print(f"type={ev.key_type.value} value={ev.value} raw='{raw}'\r")
    finally:
        term.cleanup()
    print("Exiting keyboard test.")


def main() -> None:
    # Very small arg parsing: version, keyboard test mode, optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return

    _configure_logging()

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .terminal import TerminalError

    try:
        editor = Editor.from_file(args[0]) if args else Editor()
        editor.run()
    except TerminalError as e:
        print(f"hecto: {e}", file=sys.stderr)
        sys.exit(1)
    print(EditorConstants.GOODBYE)


if __name__ == "__main__":  # pragma: no cover
    main()

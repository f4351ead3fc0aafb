"""Shared fixtures: isolated settings storage and a fake terminal."""

import pytest

from hecto import settings_persistence
from hecto.editor import Editor
from hecto.keyboard import KeyboardHandler
from hecto.settings_persistence import SettingsPersistence


class FakeTerminal:
    """Stands in for TerminalInterface with a fixed text area."""

    def __init__(self, width=40, height=10, keys=None):
        self.width = width
        self.height = height
        self.frames = []
        self.keys = list(keys or [])
        self.setup_called = False
        self.cleanup_called = False
        self.cleared = False

    def setup(self):
        self.setup_called = True

    def cleanup(self):
        self.cleanup_called = True

    def clear_screen(self):
        self.cleared = True

    def update_frame(self, lines, status, message, cursor):
        self.frames.append((lines, status, message, cursor))

    def get_key(self, timeout=None):
        if self.keys:
            return self.keys.pop(0)
        return None


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real config directory."""
    persistence = SettingsPersistence(config_dir=tmp_path / "config")
    monkeypatch.setattr(settings_persistence, "_persistence", persistence)
    return persistence


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def make_editor(terminal, isolated_settings):
    """Build an editor over the given lines, wired to the fake terminal."""
    from hecto.document import Document

    def _make(lines=None, filename=None):
        document = Document.from_lines(lines or [], filename=filename)
        return Editor(document=document, terminal=terminal, persistence=isolated_settings)

    return _make


def press(editor, *keys):
    """Feed curtsies key names (or plain characters) through the editor."""
    parser = KeyboardHandler(None)
    for key in keys:
        editor._handle_key_event(parser.parse_key(key))


def type_text(editor, text):
    press(editor, *text)

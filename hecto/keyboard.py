"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"


SPECIAL_KEYS = frozenset({
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert',
})


@dataclass(frozen=True)
class KeyEvent:
    """An abstract key: its type plus the base key name or character."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str = ""

    @property
    def is_ctrl(self) -> bool:
        return self.key_type == KeyType.CTRL

    @property
    def is_alt(self) -> bool:
        return self.key_type == KeyType.ALT

    def is_special(self, name: str) -> bool:
        return self.key_type == KeyType.SPECIAL and self.value == name

    def is_ctrl_key(self, letter: str) -> bool:
        return self.key_type == KeyType.CTRL and self.value == letter


def _normalize_base(base: str) -> str:
    if base in ('pageup', 'page_up', 'prior'):
        return 'page_up'
    if base in ('pagedown', 'page_down', 'next'):
        return 'page_down'
    if base in ('return', 'ret'):
        return 'enter'
    if base in ('del',):
        return 'delete'
    return base


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Read the next key from the terminal; None if nothing arrived."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key name (or a raw character) into a KeyEvent."""
        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Esc+f>'
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            return self._parse_token(key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if o == 127 or o == 8:
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            if o in (10, 13):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            if o == 9:
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
                return KeyEvent(KeyType.CTRL, chr(ord('a') + o - 1), key_str)
            if o == 27:
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)

        return KeyEvent(KeyType.REGULAR, key_str, key_str)

    def _parse_token(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1]
        # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
        lower = name.lower().replace('+', '-')
        parts = lower.split('-') if len(lower) > 1 else [lower]
        base = _normalize_base(parts[-1])
        mods = set(parts[:-1])
        if 'meta' in mods or 'esc' in mods:
            mods.add('alt')

        if not mods:
            if base in ('space', 'spacebar', 'spc'):
                return KeyEvent(KeyType.REGULAR, ' ', key_str)
            if base == 'tab':
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
            if base in ('esc', 'escape'):
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)

        if 'ctrl' in mods and len(base) == 1:
            # Terminals send Ctrl-J / Ctrl-M for Enter and Ctrl-H for Backspace
            if base in ('j', 'm'):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            if base == 'h':
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            return KeyEvent(KeyType.CTRL, base, key_str)

        if 'alt' in mods and (base in SPECIAL_KEYS or len(base) == 1):
            return KeyEvent(KeyType.ALT, base, key_str)

        # Shift or Ctrl on a special key behaves like the plain key
        return KeyEvent(KeyType.SPECIAL, base, key_str)

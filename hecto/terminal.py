"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import select
import sys
import termios
from typing import Optional, Sequence

import blessed
from curtsies import Input
from curtsies.events import PasteEvent

from .constants import EditorConstants
from .position import Position
from .renderer import StyledSegment
from .row import Row

logger = logging.getLogger(__name__)


def fit_to_width(text: str, width: int, pad: bool = False) -> str:
    """Cut ``text`` to at most ``width`` screen columns, optionally padding it."""
    row = Row(text)
    count = row.to_grapheme_index(width)
    fitted = row.render(0, count)
    if pad:
        fitted += " " * (width - row.to_display_offset(count))
    return fitted


class TerminalError(Exception):
    """The terminal or the key source stopped working."""


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._input: Optional[Input] = None
        self._saved_termios = None
        self._pending_keys: list[str] = []
        # Virtual screen state for minimal updates
        self._last_lines: Optional[list[str]] = None
        self._last_status: Optional[str] = None
        self._last_message: Optional[str] = None

    def setup(self):
        """Enter fullscreen and raw key input.

        Raises:
            TerminalError: if raw input cannot be enabled.
        """
        print(self.term.enter_fullscreen + self.term.hide_cursor + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        try:
            self._input = Input(keynames='curtsies')
            self._input.__enter__()
        except (OSError, termios.error) as e:
            self._input = None
            raise TerminalError(f"Could not enable raw input: {e}") from e
        self._disable_flow_control()

    def _disable_flow_control(self):
        """Let Ctrl-S, Ctrl-Q and Ctrl-C reach the editor as keys."""
        try:
            self._saved_termios = termios.tcgetattr(sys.stdin)
            new_settings = list(self._saved_termios)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            new_settings[3] &= ~(termios.ISIG | getattr(termios, 'IEXTEN', 0))
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        except (termios.error, OSError) as e:
            # Editing still works, only those control keys are lost
            logger.warning("Could not adjust terminal flags: %s", e)
            self._saved_termios = None

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self._saved_termios is not None:
            try:
                termios.tcsetattr(sys.stdin, termios.TCSANOW, self._saved_termios)
            except (termios.error, OSError) as e:
                logger.warning("Could not restore terminal flags: %s", e)
            self._saved_termios = None
        if self._input is not None:
            try:
                self._input.__exit__(None, None, None)
            finally:
                self._input = None
        if self.is_fullscreen:
            print(self.term.normal + self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        self.invalidate_frame()

    def clear_screen(self):
        """Clear the entire screen."""
        print(self.term.home + self.term.clear, end='', flush=True)
        self.invalidate_frame()

    def invalidate_frame(self) -> None:
        """Forget the previous frame so the next update repaints everything."""
        self._last_lines = None
        self._last_status = None
        self._last_message = None

    def compose_line(self, segments: Sequence[StyledSegment]) -> str:
        """Build the escape-sequence string for one styled line."""
        out = []
        for segment in segments:
            style = ''
            if segment.color is not None:
                style += getattr(self.term, segment.color.value)
            if segment.background_color is not None:
                style += getattr(self.term, 'on_' + segment.background_color.value)
            if style:
                out.append(style + segment.text + self.term.normal)
            else:
                out.append(segment.text)
        return ''.join(out)

    def update_frame(
        self,
        lines: Sequence[Sequence[StyledSegment]],
        status: str,
        message: str,
        cursor: Position,
    ) -> None:
        """Diff against the last frame and write only the changed lines.

        ``lines`` fills the text area, ``status`` is drawn in reverse video
        below it and ``message`` on the last line. ``cursor`` is a screen
        position.

        Raises:
            TerminalError: if writing to the terminal fails.
        """
        try:
            self.hide_cursor()
            if self._last_lines is None or len(self._last_lines) != len(lines):
                print(self.term.home + self.term.clear, end='')
                self._last_lines = [None] * len(lines)
                self._last_status = None
                self._last_message = None

            for y, segments in enumerate(lines):
                composed = self.compose_line(segments)
                if composed != self._last_lines[y]:
                    print(self.term.move(y, 0) + composed + self.term.clear_eol, end='')
                    self._last_lines[y] = composed

            width = self.width
            status_text = fit_to_width(status, width, pad=True)
            if status_text != self._last_status:
                print(self.term.move(len(lines), 0) + self.term.reverse + status_text + self.term.normal, end='')
                self._last_status = status_text

            message_text = fit_to_width(message, width)
            if message_text != self._last_message:
                print(self.term.move(len(lines) + 1, 0) + message_text + self.term.clear_eol, end='')
                self._last_message = message_text

            print(self.term.move(cursor.y, cursor.x) + self.term.normal_cursor, end='', flush=True)
        except OSError as e:
            raise TerminalError(f"Could not write to terminal: {e}") from e

    def hide_cursor(self):
        print(self.term.hide_cursor, end='')

    def show_cursor(self):
        print(self.term.normal_cursor, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None on timeout.

        Raises:
            TerminalError: if input is not set up or reading fails.
        """
        if self._input is None:
            raise TerminalError("Key input is not available")
        try:
            if self._pending_keys:
                return self._pending_keys.pop(0)
            if timeout is not None:
                r, _, _ = select.select([sys.stdin], [], [], float(timeout))
                if not r:
                    return None
            event = next(self._input)
            if isinstance(event, PasteEvent):
                # Fast input arrives batched; replay it one key at a time
                keys = [str(e) for e in event.events]
                if not keys:
                    return None
                self._pending_keys.extend(keys[1:])
                return keys[0]
            return str(event)
        except (OSError, StopIteration) as e:
            raise TerminalError(f"Could not read key: {e}") from e

    @property
    def width(self):
        """Terminal width in columns."""
        return max(self.term.width, EditorConstants.MIN_TERMINAL_WIDTH)

    @property
    def height(self):
        """Rows available for text (excluding status and message bars)."""
        height = max(self.term.height, EditorConstants.MIN_TERMINAL_HEIGHT)
        return height - EditorConstants.STATUS_BAR_HEIGHT

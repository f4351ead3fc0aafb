"""Main editor controller."""

import errno
import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .commands import CommandRegistry, QuitCommand
from .constants import EditorConstants
from .document import Document, DocumentIOError, EmptyFilenameError, PositionError
from .filetype import FileType
from .highlight import Highlighter, SearchHighlighter, SyntaxHighlighter, highlight_row
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .position import Position
from .renderer import StyledSegment, render_row
from .row import Row
from .search import SearchHit, SearchSession
from .settings_persistence import SettingsPersistence, get_persistence
from .terminal import TerminalError, TerminalInterface
from .version import get_version

logger = logging.getLogger(__name__)


class Mode(Enum):
    INSERT = "insert"
    PROMPT = "prompt"


class PromptKind(Enum):
    SAVE_AS = "save_as"
    SEARCH = "search"


@dataclass
class StatusMessage:
    """A transient message for the message bar."""
    text: str
    time: float = field(default_factory=time.monotonic)

    def is_recent(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.monotonic()
        return now - self.time < EditorConstants.STATUS_MESSAGE_TIMEOUT


def describe_io_error(cause: Exception) -> str:
    """Short, user-facing description of a failed read or write."""
    if isinstance(cause, PermissionError):
        return "Permission denied"
    if isinstance(cause, OSError):
        if cause.errno == errno.ENOSPC:
            return "No space left on device"
        if cause.errno == errno.ENOENT:
            return "No such file or directory"
        return cause.strerror or str(cause)
    if isinstance(cause, UnicodeDecodeError):
        return "File is not valid UTF-8"
    return str(cause)


class Editor:
    """Owns the document, the cursor and the viewport, and routes keys.

    In Insert mode keys go through the command registry; in Prompt mode
    they edit the save-as or search prompt. After every key the cursor is
    sanitized and the viewport scrolled to keep it visible.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        terminal: Optional[TerminalInterface] = None,
        persistence: Optional[SettingsPersistence] = None,
    ):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.command_registry = CommandRegistry()
        self.persistence = persistence or get_persistence()
        self.document = document if document is not None else Document()
        self.file_type = FileType.from_filename(self.document.filename)
        self.cursor_position = Position.zero()
        self.offset = Position.zero()
        self.mode = Mode.INSERT
        self.prompt_kind: Optional[PromptKind] = None
        self.prompt_input = ""
        self.prompt_notice: Optional[str] = None
        self.status_message: Optional[StatusMessage] = StatusMessage(EditorConstants.HELP_MESSAGE)
        self.should_quit = False
        self.quit_armed = False
        self.search_session: Optional[SearchSession] = None
        self._search_origin: Optional[tuple[Position, Position]] = None

    @classmethod
    def from_file(
        cls,
        filename: str,
        terminal: Optional[TerminalInterface] = None,
        persistence: Optional[SettingsPersistence] = None,
    ) -> "Editor":
        editor = cls(terminal=terminal, persistence=persistence)
        editor.load_file(filename)
        return editor

    def load_file(self, filename: str) -> None:
        """Open ``filename``; on failure start an empty document bound to it."""
        try:
            self.document = Document.open(filename)
        except DocumentIOError as e:
            self.document = Document(filename=filename)
            if isinstance(e.cause, FileNotFoundError):
                self.set_status(f"New file: {filename}")
            else:
                self.set_status(f"Could not open {filename}: {describe_io_error(e.cause)}")
        self.file_type = FileType.from_filename(filename)
        self.cursor_position = self.persistence.load_cursor_position(filename) or Position.zero()
        self.offset = Position.zero()
        self.sanitize_position()
        self.scroll()

    def set_status(self, text: str) -> None:
        self.status_message = StatusMessage(text)

    # --- Main loop -------------------------------------------------------

    def run(self) -> None:
        """Run until quit.

        Raises:
            TerminalError: after a best-effort screen cleanup, when the
                terminal or the key source fails.
        """
        try:
            self.terminal.setup()
            while not self.should_quit:
                # The terminal may have been resized since the last key
                self.sanitize_position()
                self.scroll()
                self._refresh_screen()
                key_event = self.keyboard.get_key_event(timeout=EditorConstants.KEY_POLL_TIMEOUT)
                if key_event:
                    self._handle_key_event(key_event)
        except TerminalError as e:
            logger.critical("Terminal failure: %s", e)
            self._die()
            raise
        finally:
            self._remember_cursor()
            self.terminal.cleanup()
        logger.info("Quit")

    def _die(self) -> None:
        try:
            self.terminal.clear_screen()
        except OSError as e:
            logger.debug("Could not clear screen while exiting: %s", e)

    def _remember_cursor(self) -> None:
        # A new file that was never saved has nothing to come back to
        if self.document.filename and os.path.exists(self.document.filename):
            self.persistence.save_cursor_position(self.document.filename, self.cursor_position)

    def _handle_key_event(self, key_event: KeyEvent) -> None:
        """Process one key, then re-establish the cursor invariants."""
        if self.mode is Mode.PROMPT:
            self._handle_prompt(key_event)
        else:
            command = self.command_registry.resolve(key_event)
            if not isinstance(command, QuitCommand):
                self._disarm_quit()
            if command is not None:
                command.execute(self, key_event)
        self.sanitize_position()
        self.scroll()

    def _disarm_quit(self) -> None:
        if self.quit_armed:
            self.quit_armed = False
            if self.status_message and self.status_message.text == EditorConstants.QUIT_WARNING:
                self.status_message = None

    def request_quit(self) -> None:
        """Quit, asking for a second press when there are unsaved changes."""
        if self.document.is_dirty and not self.quit_armed:
            self.quit_armed = True
            self.set_status(EditorConstants.QUIT_WARNING)
            return
        self.should_quit = True

    # --- Cursor movement -------------------------------------------------

    def move_left(self) -> None:
        x, y = self.cursor_position.x, self.cursor_position.y
        if x > 0:
            x -= 1
        elif y > 0:
            y -= 1
            x = self.document.width_at(Position.at(0, y))
        self.cursor_position = Position.at(x, y)

    def move_right(self) -> None:
        x, y = self.cursor_position.x, self.cursor_position.y
        if x < self.document.width_at(self.cursor_position):
            x += 1
        elif y + 1 < self.document.height():
            y += 1
            x = 0
        self.cursor_position = Position.at(x, y)

    def move_up(self) -> None:
        self.cursor_position = Position.at(self.cursor_position.x, max(self.cursor_position.y - 1, 0))

    def move_down(self) -> None:
        self.cursor_position = self.cursor_position.add(Position.at(0, 1))

    def move_home(self) -> None:
        self.cursor_position = Position.at(0, self.cursor_position.y)

    def move_end(self) -> None:
        self.cursor_position = Position.at(self.document.width_at(self.cursor_position), self.cursor_position.y)

    def page_up(self) -> None:
        y = max(self.cursor_position.y - self.terminal.height, 0)
        self.cursor_position = Position.at(self.cursor_position.x, y)

    def page_down(self) -> None:
        self.cursor_position = self.cursor_position.add(Position.at(0, self.terminal.height))

    def sanitize_position(self) -> None:
        """Clamp the cursor onto an existing row and column."""
        height = self.document.height()
        y = min(max(self.cursor_position.y, 0), height - 1) if height else 0
        width = self.document.width_at(Position.at(0, y))
        x = min(max(self.cursor_position.x, 0), width)
        self.cursor_position = Position.at(x, y)

    def scroll(self) -> None:
        """Move the viewport just far enough to show the cursor."""
        screen = self.document.translate(self.cursor_position, Position.zero())
        width, height = self.terminal.width, self.terminal.height
        x, y = self.offset.x, self.offset.y
        if screen.y < y:
            y = screen.y
        elif screen.y >= y + height:
            y = screen.y - height + 1
        if screen.x < x:
            x = screen.x
        elif screen.x >= x + width:
            x = screen.x - width + 1
        self.offset = Position.at(x, y)

    # --- Editing ---------------------------------------------------------

    def _with_growth(self, operation: Callable[[], None]) -> bool:
        """Run ``operation``; on a missing row, append one and retry once."""
        try:
            operation()
        except PositionError:
            self.document.append_row()
            try:
                operation()
            except PositionError:
                return False
        return True

    def insert_char(self, char: str) -> None:
        position = self.cursor_position
        if self._with_growth(lambda: self.document.insert_at(position, char)):
            self.cursor_position = position.add(Position.at(1, 0))

    def insert_newline(self) -> None:
        position = self.cursor_position
        if self._with_growth(lambda: self.document.split_row(position)):
            self.cursor_position = Position.at(0, position.y + 1)

    def delete_backward(self) -> None:
        """Backspace: remove the grapheme left of the cursor or join rows."""
        x, y = self.cursor_position.x, self.cursor_position.y
        try:
            if x > 0:
                self.document.delete_at(Position.at(x - 1, y))
                self.cursor_position = Position.at(x - 1, y)
            elif y > 0:
                width = self.document.width_at(Position.at(0, y - 1))
                self.document.merge_row(self.cursor_position)
                self.cursor_position = Position.at(width, y - 1)
        except PositionError:
            return

    def delete_forward(self) -> None:
        """Delete: remove the grapheme under the cursor or pull up the next row."""
        x, y = self.cursor_position.x, self.cursor_position.y
        try:
            if x < self.document.width_at(self.cursor_position):
                self.document.delete_at(self.cursor_position)
            elif y + 1 < self.document.height():
                self.document.merge_row(Position.at(0, y + 1))
        except PositionError:
            return

    # --- Saving ----------------------------------------------------------

    def save(self) -> None:
        """Save to the current filename, or ask for one."""
        try:
            self.document.save()
        except EmptyFilenameError:
            self._open_prompt(PromptKind.SAVE_AS)
            return
        except DocumentIOError as e:
            self.set_status(f"Can't save file: {describe_io_error(e.cause)}")
            return
        self._after_save()

    def _save_as(self, filename: str) -> None:
        try:
            self.document.save(filename)
        except DocumentIOError as e:
            self.set_status(f"Can't save file: {describe_io_error(e.cause)}")
            return
        self.file_type = FileType.from_filename(filename)
        self._after_save()

    def _after_save(self) -> None:
        self.set_status(f"File saved successfully: {self.document.filename}")
        self._remember_cursor()

    # --- Prompts ---------------------------------------------------------

    def start_search(self) -> None:
        self.search_session = SearchSession(self.document)
        self._search_origin = (self.cursor_position, self.offset)
        self._open_prompt(PromptKind.SEARCH)

    def _open_prompt(self, kind: PromptKind) -> None:
        self.mode = Mode.PROMPT
        self.prompt_kind = kind
        self.prompt_input = ""
        self.prompt_notice = None

    def _close_prompt(self) -> None:
        self.mode = Mode.INSERT
        self.prompt_kind = None
        self.prompt_input = ""
        self.prompt_notice = None
        self.search_session = None
        self._search_origin = None

    def _handle_prompt(self, key_event: KeyEvent) -> None:
        self.prompt_notice = None
        if key_event.is_special('escape') or key_event.is_ctrl_key('g'):
            self._cancel_prompt()
        elif key_event.is_special('enter'):
            self._confirm_prompt()
        elif key_event.is_special('backspace'):
            if self.prompt_input:
                row = Row(self.prompt_input)
                row.delete_at(len(row) - 1)
                self.prompt_input = row.to_text()
                self._prompt_changed()
        elif self.prompt_kind is PromptKind.SEARCH and key_event.key_type == KeyType.SPECIAL:
            if key_event.value in ('down', 'right'):
                self._show_hit(self.search_session.next())
            elif key_event.value in ('up', 'left'):
                self._show_hit(self.search_session.previous())
        elif key_event.key_type == KeyType.REGULAR:
            char = key_event.value
            if char and ord(char[0]) >= 32:
                self.prompt_input += char
                self._prompt_changed()

    def _prompt_changed(self) -> None:
        if self.prompt_kind is PromptKind.SEARCH:
            hit = self.search_session.update(self.prompt_input)
            if hit is not None:
                self.cursor_position = hit.position

    def _show_hit(self, hit: Optional[SearchHit]) -> None:
        if hit is None:
            self.prompt_notice = EditorConstants.SEARCH_EXHAUSTED
            return
        self.cursor_position = hit.position

    def _confirm_prompt(self) -> None:
        kind = self.prompt_kind
        filename = self.prompt_input.strip()
        self._close_prompt()
        if kind is PromptKind.SAVE_AS:
            if not filename:
                self.set_status(EditorConstants.SAVE_ABORTED)
                return
            self._save_as(filename)

    def _cancel_prompt(self) -> None:
        kind = self.prompt_kind
        origin = self._search_origin
        self._close_prompt()
        if kind is PromptKind.SAVE_AS:
            self.set_status(EditorConstants.SAVE_ABORTED)
        elif origin is not None:
            self.cursor_position, self.offset = origin

    # --- Drawing ---------------------------------------------------------

    def highlighters(self) -> list[Highlighter]:
        """Active highlighters; earlier entries win where spans overlap."""
        hit = self.search_session.last_hit if self.search_session else None
        return [
            SearchHighlighter(hit),
            SyntaxHighlighter(self.file_type.highlighting_options),
        ]

    def _visible_range(self, row: Row, width: int) -> tuple[int, int, int]:
        """Grapheme slice that fits the viewport, plus leading blank columns."""
        start = row.to_grapheme_index(self.offset.x)
        if row.to_display_offset(start) < self.offset.x:
            # A wide grapheme straddles the left edge
            start += 1
        end = row.to_grapheme_index(self.offset.x + width)
        padding = max(row.to_display_offset(start) - self.offset.x, 0)
        return start, end, padding

    def _welcome_message(self, width: int) -> str:
        message = EditorConstants.WELCOME_MESSAGE.format(get_version())
        padding = max(width - len(message), 0) // 2
        line = EditorConstants.EMPTY_ROW_MARKER + " " * max(padding - 1, 0) + message
        return line[:width]

    def visible_lines(self) -> list[list[StyledSegment]]:
        """Styled lines for every row of the text area."""
        width, height = self.terminal.width, self.terminal.height
        highlighters = self.highlighters()
        lines = []
        for screen_y in range(height):
            y = self.offset.y + screen_y
            row = self.document.row(y)
            if row is not None:
                start, end, padding = self._visible_range(row, width)
                segments = render_row(row, start, end, highlight_row(row, y, highlighters))
                if padding:
                    segments.insert(0, StyledSegment(" " * padding))
                lines.append(segments)
            elif self.document.is_empty() and screen_y == height // 3:
                lines.append([StyledSegment(self._welcome_message(width))])
            else:
                lines.append([StyledSegment(EditorConstants.EMPTY_ROW_MARKER)])
        return lines

    def status_bar(self) -> str:
        height = self.document.height()
        name = self.document.filename or EditorConstants.NO_NAME
        modified = " (modified)" if self.document.is_dirty else ""
        left = f"{name[:20]} - {height} lines{modified}"
        right = f"{self.file_type.name} | {self.cursor_position.y + 1}/{height}"
        padding = max(self.terminal.width - len(left) - len(right), 1)
        return left + " " * padding + right

    def message_bar(self, now: Optional[float] = None) -> str:
        if self.mode is Mode.PROMPT:
            if self.prompt_kind is PromptKind.SAVE_AS:
                text = EditorConstants.SAVE_AS_PROMPT.format(self.prompt_input)
            else:
                text = EditorConstants.SEARCH_PROMPT.format(self.prompt_input)
            if self.prompt_notice:
                text += f"  [{self.prompt_notice}]"
            return text
        if self.status_message and self.status_message.is_recent(now):
            return self.status_message.text
        return ""

    def screen_cursor(self) -> Position:
        if self.mode is Mode.PROMPT:
            prompt = Row(self.message_bar())
            return Position.at(
                min(prompt.to_display_offset(len(prompt)), self.terminal.width - 1),
                self.terminal.height + 1,
            )
        return self.document.translate(self.cursor_position, self.offset)

    def _refresh_screen(self) -> None:
        self.terminal.update_frame(
            self.visible_lines(),
            self.status_bar(),
            self.message_bar(),
            self.screen_cursor(),
        )

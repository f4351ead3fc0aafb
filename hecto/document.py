"""Document model: an ordered list of rows backed by an optional file."""

import logging
import os
import tempfile
from typing import Iterable, Iterator, Optional

from .constants import EditorConstants
from .position import Position
from .row import Row
from .search import SearchHit

logger = logging.getLogger(__name__)


class OperationError(Exception):
    """Base class for failed document operations."""


class PositionError(OperationError):
    """A structural edit targeted a row or column that does not exist."""

    def __init__(self, message: str = "Invalid position"):
        super().__init__(message)


class EmptyFilenameError(OperationError):
    """Save was requested but the document has no filename."""

    def __init__(self, message: str = "Empty filename"):
        super().__init__(message)


class DocumentIOError(OperationError):
    """Reading or writing the backing file failed."""

    def __init__(self, cause: Exception):
        super().__init__(f"IO error: {cause}")
        self.cause = cause


class Document:
    """Rows of text plus the file they came from.

    ``is_dirty`` is true exactly when the content differs from the last
    successful load or save.
    """

    def __init__(self, rows: Optional[Iterable[Row]] = None, filename: Optional[str] = None):
        self.filename = filename
        self._rows: list[Row] = list(rows or [])
        self._dirty = False

    @classmethod
    def from_lines(cls, lines: Iterable[str], filename: Optional[str] = None) -> "Document":
        return cls([Row(line) for line in lines], filename=filename)

    @classmethod
    def open(cls, filename: str) -> "Document":
        """Load ``filename``, one row per line.

        Raises:
            DocumentIOError: if the file cannot be read or decoded.
        """
        try:
            with open(filename, 'r', encoding=EditorConstants.ENCODING, newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not open %s: %s", filename, e)
            raise DocumentIOError(e) from e

        lines = content.split('\n')
        if lines and lines[-1] == "":
            lines.pop()
        rows = [Row(line[:-1] if line.endswith('\r') else line) for line in lines]
        logger.debug("Opened %s (%d rows)", filename, len(rows))
        return cls(rows, filename=filename)

    def save(self, filename: Optional[str] = None) -> None:
        """Write the document to ``filename`` (or its own filename) atomically.

        Raises:
            EmptyFilenameError: if no filename is known.
            DocumentIOError: if the write fails; the target is left untouched.
        """
        target = filename or self.filename
        if not target:
            raise EmptyFilenameError()

        dir_name = os.path.dirname(target) or '.'
        temp_filename = None
        try:
            # Same directory keeps the rename on one filesystem
            with tempfile.NamedTemporaryFile(
                mode='w',
                encoding=EditorConstants.ENCODING,
                dir=dir_name,
                prefix=EditorConstants.ATOMIC_SAVE_PREFIX,
                suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                newline='',
                delete=False,
            ) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(self.to_text())
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, target)
        except OSError as e:
            logger.warning("Could not save %s: %s", target, e)
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    logger.debug("Could not remove temp file %s", temp_filename)
            raise DocumentIOError(e) from e

        self.filename = target
        self._dirty = False
        logger.debug("Saved %s (%d rows)", target, len(self._rows))

    def to_text(self) -> str:
        return '\n'.join(row.to_text() for row in self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def is_empty(self) -> bool:
        return not self._rows

    def height(self) -> int:
        return len(self._rows)

    def row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    def width_at(self, position: Position) -> int:
        row = self.row(position.y)
        return len(row) if row is not None else 0

    def translate(self, position: Position, offset: Position) -> Position:
        """Map a cursor position to screen coordinates relative to ``offset``."""
        row = self.row(position.y)
        raw_x = row.to_display_offset(position.x) if row is not None else 0
        return Position.at(raw_x, position.y).diff(offset)

    def _require_row(self, index: int) -> Row:
        row = self.row(index)
        if row is None:
            raise PositionError()
        return row

    def insert_at(self, position: Position, char: str) -> None:
        self._require_row(position.y).insert_at(position.x, char)
        self._dirty = True

    def delete_at(self, position: Position) -> None:
        row = self._require_row(position.y)
        if position.x < 0 or position.x >= len(row):
            raise PositionError()
        row.delete_at(position.x)
        self._dirty = True

    def append_row(self) -> None:
        self._rows.append(Row())
        self._dirty = True

    def merge_row(self, position: Position) -> None:
        """Append row ``position.y`` onto the row above it and drop it."""
        if position.y == 0 or position.y >= len(self._rows):
            raise PositionError()
        previous = self._rows[position.y - 1]
        merged = Row(previous.to_text() + self._rows[position.y].to_text())
        self._rows[position.y - 1] = merged
        del self._rows[position.y]
        self._dirty = True

    def split_row(self, position: Position) -> None:
        """Break row ``position.y`` at column ``position.x`` into two rows."""
        left, right = self._require_row(position.y).split_at(position.x)
        self._rows[position.y] = left
        self._rows.insert(position.y + 1, right)
        self._dirty = True

    def search(self, query: str, after: Position) -> Optional[SearchHit]:
        """Return the first match of ``query`` at or after ``after``.

        Scans forward in row-major order and never wraps around.
        """
        if not query:
            return None
        size = len(Row(query))
        for y in range(max(after.y, 0), len(self._rows)):
            start = after.x if y == after.y else 0
            x = self._rows[y].find(query, start)
            if x is not None:
                return SearchHit.spanning(Position.at(x, y), Position.at(x + size, y))
        return None

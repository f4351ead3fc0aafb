"""A single line of text with grapheme-aware indexing."""

from typing import Optional

import grapheme
from wcwidth import wcswidth


def grapheme_width(cluster: str) -> int:
    """Return the number of screen columns a grapheme cluster occupies.

    Non-printable clusters (control characters) are shown as a single
    replacement column.
    """
    width = wcswidth(cluster)
    if width < 0:
        return 1
    return width


class Row:
    """One line of the document.

    The raw text is stored together with its grapheme count so that
    ``len()`` is constant time. Every public index is a grapheme index;
    code point offsets never leave this class.
    """

    def __init__(self, text: str = ""):
        self._text = text
        self._len = grapheme.length(text)

    @classmethod
    def from_text(cls, text: str) -> "Row":
        return cls(text)

    def __len__(self) -> int:
        return self._len

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Row({self._text!r})"

    def __eq__(self, other):
        if not isinstance(other, Row):
            return NotImplemented
        return self._text == other._text

    def len(self) -> int:
        return self._len

    def to_text(self) -> str:
        return self._text

    def graphemes(self) -> list[str]:
        return list(grapheme.graphemes(self._text))

    def _offset(self, index: int) -> int:
        """Translate a grapheme index into a code point offset."""
        if index <= 0:
            return 0
        offset = 0
        for count, cluster in enumerate(grapheme.graphemes(self._text)):
            if count == index:
                break
            offset += len(cluster)
        return offset

    def _set_text(self, text: str) -> None:
        # Recount instead of adjusting by one: an inserted combining mark
        # joins its neighbour's cluster.
        self._text = text
        self._len = grapheme.length(text)

    def render(self, start: int, end: int) -> str:
        """Return graphemes ``[start, end)``, clamped to the row."""
        end = max(start, min(end, self._len))
        if start >= end:
            return ""
        return grapheme.slice(self._text, start, end)

    def insert_at(self, index: int, char: str) -> None:
        """Insert ``char`` before the grapheme at ``index`` (append past the end)."""
        if index >= self._len:
            self._set_text(self._text + char)
            return
        offset = self._offset(index)
        self._set_text(self._text[:offset] + char + self._text[offset:])

    def delete_at(self, index: int) -> None:
        """Remove the grapheme at ``index``; no-op when out of range."""
        if index < 0 or index >= self._len:
            return
        start = self._offset(index)
        end = self._offset(index + 1)
        self._set_text(self._text[:start] + self._text[end:])

    def split_at(self, index: int) -> tuple["Row", "Row"]:
        offset = self._offset(min(max(index, 0), self._len))
        return Row(self._text[:offset]), Row(self._text[offset:])

    def append(self, other: "Row") -> None:
        self._set_text(self._text + other._text)

    def find(self, query: str, start: int = 0) -> Optional[int]:
        """Return the first grapheme index >= ``start`` where ``query`` occurs."""
        needle = list(grapheme.graphemes(query))
        if not needle:
            return None
        haystack = self.graphemes()
        size = len(needle)
        for index in range(max(start, 0), len(haystack) - size + 1):
            if haystack[index:index + size] == needle:
                return index
        return None

    def to_display_offset(self, index: int) -> int:
        """Sum the display widths of the first ``index`` graphemes."""
        width = 0
        for count, cluster in enumerate(grapheme.graphemes(self._text)):
            if count >= index:
                break
            width += grapheme_width(cluster)
        return width

    def to_grapheme_index(self, display_offset: int) -> int:
        """Greatest grapheme index whose cumulative width fits in ``display_offset``."""
        width = 0
        index = 0
        for cluster in grapheme.graphemes(self._text):
            width += grapheme_width(cluster)
            if width > display_offset:
                break
            index += 1
        return index

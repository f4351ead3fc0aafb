"""Highlighters producing colored spans over a rendered line."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import grapheme

from .filetype import HighlightingOptions
from .row import Row
from .search import SearchHit


class Color(Enum):
    """Terminal colors, named after blessed's formatting attributes."""
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"
    BRIGHT_BLACK = "bright_black"


@dataclass(frozen=True)
class Highlight:
    """Half-open span ``[start, end)`` of grapheme columns with colors."""
    start: int
    end: int
    color: Optional[Color] = None
    background_color: Optional[Color] = None

    def contains(self, column: int) -> bool:
        return self.start <= column < self.end


NUMBER_COLOR = Color.RED
STRING_COLOR = Color.GREEN
COMMENT_COLOR = Color.BRIGHT_BLACK
PRIMARY_KEYWORD_COLOR = Color.YELLOW
SECONDARY_KEYWORD_COLOR = Color.CYAN
SEARCH_COLOR = Color.WHITE
SEARCH_BACKGROUND = Color.BLUE


def is_separator(cluster: str) -> bool:
    return cluster.isspace() or not (cluster.isalnum() or cluster == "_")


class Highlighter(ABC):
    """Something that produces highlight spans for one line."""

    @abstractmethod
    def highlight(self, line: str, row_index: int) -> list[Highlight]:
        """Return spans over the graphemes of ``line`` (row ``row_index``)."""


class SyntaxHighlighter(Highlighter):
    """Lexical highlighting of numbers, strings, comments and keywords."""

    def __init__(self, options: HighlightingOptions):
        self.options = options

    def highlight(self, line: str, row_index: int) -> list[Highlight]:
        if not self.options.enabled:
            return []
        clusters = list(grapheme.graphemes(line))
        marker = list(grapheme.graphemes(self.options.comment_marker))
        highlights: list[Highlight] = []
        index = 0
        prev_is_separator = True
        while index < len(clusters):
            cluster = clusters[index]

            if marker and clusters[index:index + len(marker)] == marker:
                highlights.append(Highlight(index, len(clusters), COMMENT_COLOR))
                break

            if self.options.strings and cluster in self.options.quotes:
                end = self._string_end(clusters, index)
                highlights.append(Highlight(index, end, STRING_COLOR))
                index = end
                prev_is_separator = True
                continue

            if self.options.numbers and prev_is_separator and cluster.isdigit():
                end = index
                while end < len(clusters) and clusters[end].isdigit():
                    end += 1
                if end == len(clusters) or is_separator(clusters[end]):
                    highlights.append(Highlight(index, end, NUMBER_COLOR))
                    index = end
                    prev_is_separator = False
                    continue

            if prev_is_separator and not is_separator(cluster):
                end = index
                while end < len(clusters) and not is_separator(clusters[end]):
                    end += 1
                word = "".join(clusters[index:end])
                color = self._keyword_color(word)
                if color is not None:
                    highlights.append(Highlight(index, end, color))
                index = end
                prev_is_separator = False
                continue

            prev_is_separator = is_separator(cluster)
            index += 1
        return highlights

    @staticmethod
    def _string_end(clusters: Sequence[str], start: int) -> int:
        quote = clusters[start]
        index = start + 1
        while index < len(clusters):
            if clusters[index] == "\\":
                index += 2
                continue
            if clusters[index] == quote:
                return index + 1
            index += 1
        return len(clusters)

    def _keyword_color(self, word: str) -> Optional[Color]:
        if word in self.options.primary_keywords:
            return PRIMARY_KEYWORD_COLOR
        if word in self.options.secondary_keywords:
            return SECONDARY_KEYWORD_COLOR
        return None


class SearchHighlighter(Highlighter):
    """Marks the current search hit on the row it belongs to."""

    def __init__(self, hit: Optional[SearchHit]):
        self.hit = hit

    def highlight(self, line: str, row_index: int) -> list[Highlight]:
        if self.hit is None:
            return []
        start, end = self.hit.highlight
        if start.y != row_index:
            return []
        return [Highlight(start.x, end.x, SEARCH_COLOR, SEARCH_BACKGROUND)]


def highlight_row(row: Row, row_index: int, highlighters: Sequence[Highlighter]) -> list[Highlight]:
    """Concatenate the spans of every highlighter for one row, in order."""
    line = row.render(0, len(row))
    highlights: list[Highlight] = []
    for highlighter in highlighters:
        highlights.extend(highlighter.highlight(line, row_index))
    return highlights

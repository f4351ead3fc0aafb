"""Turn a row slice and its highlights into styled segments."""

import unicodedata
from dataclasses import dataclass
from typing import Optional, Sequence

import grapheme

from .constants import EditorConstants
from .highlight import Color, Highlight
from .row import Row


@dataclass(frozen=True)
class StyledSegment:
    """A run of text drawn with one foreground/background combination."""
    text: str
    color: Optional[Color] = None
    background_color: Optional[Color] = None


def _printable(cluster: str) -> str:
    if cluster == "\t":
        return EditorConstants.TAB_REPLACEMENT
    if unicodedata.category(cluster[0]) == "Cc":
        return EditorConstants.CONTROL_REPLACEMENT
    return cluster


def _style_at(column: int, highlights: Sequence[Highlight]) -> tuple[Optional[Color], Optional[Color]]:
    # First match wins
    for highlight in highlights:
        if highlight.contains(column):
            return highlight.color, highlight.background_color
    return None, None


def render_row(row: Row, start: int, end: int, highlights: Sequence[Highlight]) -> list[StyledSegment]:
    """Render graphemes ``[start, end)`` of ``row`` with highlight colors.

    Columns are absolute, so grapheme ``p`` of the slice is styled by the
    first highlight containing ``start + p``. Neighbouring graphemes with
    the same style share one segment.
    """
    segments: list[StyledSegment] = []
    text = row.render(start, end)
    if not text:
        return segments

    run: list[str] = []
    run_style: tuple[Optional[Color], Optional[Color]] = (None, None)
    for p, cluster in enumerate(grapheme.graphemes(text)):
        style = _style_at(start + p, highlights)
        if run and style != run_style:
            segments.append(StyledSegment("".join(run), *run_style))
            run = []
        run_style = style
        run.append(_printable(cluster))
    if run:
        segments.append(StyledSegment("".join(run), *run_style))
    return segments


def plain_text(segments: Sequence[StyledSegment]) -> str:
    return "".join(segment.text for segment in segments)

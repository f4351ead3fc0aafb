"""Incremental search state for the editor."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .position import Position

if TYPE_CHECKING:
    from .document import Document


@dataclass(frozen=True)
class SearchHit:
    """A match: where to put the cursor and which span to highlight."""

    position: Position
    highlight: tuple[Position, Position]

    @classmethod
    def spanning(cls, start: Position, end: Position) -> "SearchHit":
        return cls(position=start, highlight=(start, end))


class SearchSession:
    """Hit history for one search prompt.

    Typing replaces the history with the first match from the top of the
    document. "Next" appends the following match; "previous" only rewinds
    the history and never searches backwards.
    """

    def __init__(self, document: "Document"):
        self.document = document
        self.query = ""
        self._hits: list[SearchHit] = []

    @property
    def hits(self) -> tuple[SearchHit, ...]:
        return tuple(self._hits)

    @property
    def last_hit(self) -> Optional[SearchHit]:
        if not self._hits:
            return None
        return self._hits[-1]

    def update(self, query: str) -> Optional[SearchHit]:
        """Restart the search for ``query`` from the top of the document."""
        self.query = query
        hit = self.document.search(query, Position.zero())
        self._hits = [hit] if hit else []
        return hit

    def next(self) -> Optional[SearchHit]:
        """Find the match after the last one; None when exhausted."""
        last = self.last_hit
        if last is None:
            return None
        hit = self.document.search(self.query, last.position.add(Position.at(1, 0)))
        if hit is None:
            return None
        self._hits.append(hit)
        return hit

    def previous(self) -> Optional[SearchHit]:
        """Step back to the previous match; None when there is none."""
        if len(self._hits) <= 1:
            return None
        self._hits.pop()
        return self._hits[-1]

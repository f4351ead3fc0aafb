"""Hecto - a small terminal text editor."""

import logging

from .document import Document
from .editor import Editor
from .position import Position
from .row import Row

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Document',
    'Editor',
    'Position',
    'Row',
]

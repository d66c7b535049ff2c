# autoscroll/ReferenceDocument.py
import logging
import textwrap
from functools import cached_property
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .TextNormalizer import TextNormalizer


class ReferenceDocument:
    """Immutable reference text (poem, lyric) laid out as lines.

    Line order is scroll order. Blank lines inside the text are kept so line
    indices match what the reader sees; they simply contribute no tokens.
    Behaves as a read-only sequence of raw lines, so it can be handed to
    LineAligner directly and shared across threads without locking.

    Args:
        lines: Raw document lines
        text_normalizer: Optional normalizer used for the cached token stream
    """

    def __init__(self, lines: Sequence[str], text_normalizer: Optional[TextNormalizer] = None) -> None:
        self._lines: Tuple[str, ...] = tuple(lines)
        self._text_normalizer: TextNormalizer = text_normalizer if text_normalizer is not None else TextNormalizer()

    @classmethod
    def from_text(cls, text: str) -> 'ReferenceDocument':
        """Build a document from a block of text.

        Common leading indentation is removed and blank lines at the very
        start and end are dropped.

        Raises:
            ValueError: If the text contains no tokens
        """
        lines = textwrap.dedent(text).splitlines()

        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()

        document = cls(lines)
        if not document.tokens:
            raise ValueError("Reference document contains no words")
        return document

    @classmethod
    def from_file(cls, path: str | Path) -> 'ReferenceDocument':
        """Load a UTF-8 document file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file contains no tokens
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Document file not found: {path}")

        document = cls.from_text(path.read_text(encoding='utf-8'))
        logging.info(f"Loaded document {path.name}: {len(document)} lines, {len(document.tokens)} words")
        return document

    @property
    def lines(self) -> Tuple[str, ...]:
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @cached_property
    def tokens(self) -> List[str]:
        """Flattened normalized token stream of the whole document."""
        return self._text_normalizer.tokenize_lines(self._lines)

    def visible_lines(self, position: int, count: int) -> Tuple[str, ...]:
        """Lines shown when the display is scrolled to position.

        Args:
            position: First visible line, clamped into the document
            count: Maximum number of lines to return
        """
        position = min(max(position, 0), max(len(self._lines) - 1, 0))
        return self._lines[position:position + count]

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index):
        return self._lines[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

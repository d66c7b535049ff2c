# autoscroll/TextNormalizer.py
import re
from typing import Iterable, List

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9 ]")


class TextNormalizer:
    """Turns raw text into comparable ASCII word tokens.

    Used on both sides of the alignment: on every recognized fragment and on
    the reference document. Normalization steps:
    1. Lowercase (str.lower is locale independent, no Turkish dotless-i rules)
    2. Delete every character outside a-z, 0-9 and space
    3. Split on single spaces and drop empty fragments

    Accented letters are deleted rather than folded, so "mudança" becomes
    "mudana" on both sides and still compares equal.
    """

    def normalize_text(self, text: str) -> str:
        """Normalize text to a single space-separated token string.

        Args:
            text: Input text to normalize

        Returns:
            Tokens joined by single spaces, empty string if no tokens remain
        """
        return ' '.join(self.tokenize(text))

    def tokenize(self, text: str) -> List[str]:
        """Split text into normalized, non-empty tokens.

        Args:
            text: Raw text (recognizer output or a document line)

        Returns:
            Ordered list of tokens containing only [a-z0-9]
        """
        if not text:
            return []

        cleaned = _DISALLOWED_CHARS.sub('', text.lower())
        return [token for token in cleaned.split(' ') if token]

    def tokenize_lines(self, lines: Iterable[str]) -> List[str]:
        """Tokenize a document given as lines.

        Lines are joined with a single space, which yields the same stream as
        tokenizing each line separately and concatenating the results.
        """
        return self.tokenize(' '.join(lines))

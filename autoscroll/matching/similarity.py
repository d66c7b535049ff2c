"""Word-level similarity primitives used by the line aligner.

levenshtein_distance() and soundex() are pure functions over single tokens.
word_similarity() blends them with exact equality into the per-pair score
that LineAligner averages over a window.
"""

import math
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

# American Soundex consonant classes; everything else maps to '0'
_SOUNDEX_CODES: dict[str, str] = {
    **dict.fromkeys('bfpv', '1'),
    **dict.fromkeys('cgjkqsxz', '2'),
    **dict.fromkeys('dt', '3'),
    'l': '4',
    **dict.fromkeys('mn', '5'),
    'r': '6',
}
_NO_CODE = '0'
_SOUNDEX_LENGTH = 4


@dataclass(frozen=True)
class ScoreWeights:
    """Blend weights for the per-pair word score.

    Attributes:
        exact: Weight of exact token equality
        edit: Weight of normalized Levenshtein similarity
        phonetic: Weight of Soundex code equality
    """
    exact: float = 0.4
    edit: float = 0.4
    phonetic: float = 0.2

    def __post_init__(self):
        """Reject negative weights and weights that do not sum to 1.

        Pair scores, and therefore window scores, stay within [0, 1] only
        for a convex blend.
        """
        for name in ('exact', 'edit', 'phonetic'):
            if getattr(self, name) < 0:
                raise ValueError(f"Weight '{name}' must be non-negative, got {getattr(self, name)}")

        total = self.exact + self.edit + self.phonetic
        if not math.isclose(total, 1.0):
            raise ValueError(f"Weights must sum to 1.0, got {total}")

    @classmethod
    def from_config(cls, weights: dict | None) -> 'ScoreWeights':
        """Build weights from the 'matching.weights' config section."""
        if not weights:
            return cls()
        return cls(
            exact=float(weights.get('exact', cls.exact)),
            edit=float(weights.get('edit', cls.edit)),
            phonetic=float(weights.get('phonetic', cls.phonetic)),
        )


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions and
    substitutions turning a into b (unit costs)."""
    return Levenshtein.distance(a, b)


def edit_similarity(a: str, b: str) -> float:
    """Levenshtein distance scaled to a similarity in [0, 1].

    Two empty strings are identical and score 1.0.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def soundex(word: str) -> str:
    """Encode a word with American Soundex.

    The first output character is the uppercased first letter. Vowels and
    h, w, y produce no digit but still count as the previous code, so a
    repeated consonant class separated by any of them is emitted twice
    ("ashcraft" -> "A226").

    Args:
        word: Non-empty token; an empty string encodes to ""

    Returns:
        Four-character code, zero padded
    """
    if not word:
        return ""

    result = [word[0].upper()]
    previous = _SOUNDEX_CODES.get(word[0].lower(), _NO_CODE)

    for char in word[1:]:
        current = _SOUNDEX_CODES.get(char.lower(), _NO_CODE)
        if current != _NO_CODE and current != previous:
            result.append(current)
            if len(result) == _SOUNDEX_LENGTH:
                break
        previous = current

    return ''.join(result).ljust(_SOUNDEX_LENGTH, _NO_CODE)


def word_similarity(a: str, b: str, weights: ScoreWeights = ScoreWeights()) -> float:
    """Blend exact, edit-distance and phonetic agreement for one token pair.

    Args:
        a: Recognized token
        b: Document token at the same window position
        weights: Blend weights

    Returns:
        Weighted pair score; in [0, 1] when the weights sum to 1
    """
    exact = 1.0 if a == b else 0.0
    edit = edit_similarity(a, b)
    phonetic = 1.0 if soundex(a) == soundex(b) else 0.0
    return weights.exact * exact + weights.edit * edit + weights.phonetic * phonetic

"""Matching subsystem - fuzzy alignment of recognized text to document lines."""
from autoscroll.matching.LineAligner import LineAligner
from autoscroll.matching.similarity import (
    ScoreWeights,
    edit_similarity,
    levenshtein_distance,
    soundex,
    word_similarity
)

__all__ = [
    'LineAligner',
    'ScoreWeights',
    'edit_similarity',
    'levenshtein_distance',
    'soundex',
    'word_similarity'
]

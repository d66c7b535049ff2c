# autoscroll/__init__.py
from .TextNormalizer import TextNormalizer
from .ReferenceDocument import ReferenceDocument
from .matching.LineAligner import LineAligner
from .types import MatchResult, PositionUpdate, RecognizedFragment

__all__ = [
    'TextNormalizer',
    'ReferenceDocument',
    'LineAligner',
    'MatchResult',
    'PositionUpdate',
    'RecognizedFragment'
]

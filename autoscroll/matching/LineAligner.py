# autoscroll/matching/LineAligner.py
import logging
from statistics import fmean
from typing import Optional, Sequence

from ..TextNormalizer import TextNormalizer
from ..types import MatchResult
from .similarity import ScoreWeights, word_similarity

DEFAULT_WINDOW_SIZE = 40


class LineAligner:
    """Locates the document line a recognized fragment was read from.

    Slides a fixed-size window over the flattened token stream of the
    document, scores every window against the recognized tokens and maps the
    best window offset back to a line index.

    Tokens are compared by position only, within the shorter of the two
    sequences. There is no insertion/deletion across token boundaries, so a
    skipped or repeated word shifts every later comparison.

    Holds only immutable configuration: a single instance can be shared by
    any number of threads.

    Args:
        window_size: Number of document tokens per candidate window
        weights: Blend weights for exact / edit / phonetic agreement
        text_normalizer: Optional normalizer for the document lines
        verbose: Enable debug logging of match results
    """

    def __init__(self,
                 window_size: int = DEFAULT_WINDOW_SIZE,
                 weights: Optional[ScoreWeights] = None,
                 text_normalizer: Optional[TextNormalizer] = None,
                 verbose: bool = False
                 ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")

        self.window_size: int = window_size
        self.weights: ScoreWeights = weights if weights is not None else ScoreWeights()
        self.text_normalizer: TextNormalizer = text_normalizer if text_normalizer is not None else TextNormalizer()
        self.verbose: bool = verbose

    @classmethod
    def from_config(cls, config: dict, verbose: bool = False) -> 'LineAligner':
        """Create aligner from the 'matching' section of the application config."""
        matching = config.get('matching', {})
        return cls(
            window_size=int(matching.get('window_size', DEFAULT_WINDOW_SIZE)),
            weights=ScoreWeights.from_config(matching.get('weights')),
            verbose=verbose,
        )

    def find_best_match(self, recognized_tokens: Sequence[str], document_lines: Sequence[str]) -> MatchResult:
        """Find the line whose surrounding window best matches the recognized tokens.

        Algorithm:
        1. Normalize the space-joined document into one token stream.
        2. If the stream is shorter than the window, return (0, 0.0).
        3. Score every window start from 0 to len(tokens) - window_size.
           Strict '>' keeps the earliest offset on ties.
        4. Map the best offset to its line via find_line_position().

        Args:
            recognized_tokens: Normalized tokens of the latest fragment
            document_lines: Raw reference document lines

        Returns:
            MatchResult; (0, 0.0) when no window scored above zero
        """
        document_tokens = self.text_normalizer.tokenize_lines(document_lines)

        best_offset: int = 0
        best_score: float = 0.0
        found: bool = False

        for offset in range(len(document_tokens) - self.window_size + 1):
            window = document_tokens[offset:offset + self.window_size]
            score = self.calculate_match_score(recognized_tokens, window)
            if score > best_score:
                best_score = score
                best_offset = offset
                found = True

        if not found:
            return MatchResult(line_index=0, score=0.0)

        line_index = self.find_line_position(best_offset, document_lines)

        if self.verbose:
            logging.debug(f"LineAligner: best offset={best_offset} line={line_index} score={best_score:.3f}")

        return MatchResult(line_index=line_index, score=best_score)

    def calculate_match_score(self, recognized: Sequence[str], window_tokens: Sequence[str]) -> float:
        """Score a window against the recognized tokens.

        The mean is taken over min(len(recognized), len(window_tokens)) pairs,
        so a short fragment is judged only against its own length of the
        window. This favors recall for short utterances.

        Args:
            recognized: Normalized recognized tokens
            window_tokens: Document tokens of one window

        Returns:
            Mean pair score, 0.0 if either side is empty
        """
        compared = min(len(recognized), len(window_tokens))
        if compared == 0:
            return 0.0

        return fmean(word_similarity(recognized[i], window_tokens[i], self.weights) for i in range(compared))

    def find_line_position(self, word_index: int, document_lines: Sequence[str]) -> int:
        """Map a flattened token offset back to the line that produced it.

        Lines are tokenized one by one; blank or punctuation-only lines add
        zero tokens and are never returned for a valid offset.

        Args:
            word_index: Offset into the flattened document token stream
            document_lines: Raw reference document lines

        Returns:
            Index of the first line whose cumulative token count exceeds
            word_index, or the last line index when the offset is past the end
        """
        cumulative = 0
        for line_index, line in enumerate(document_lines):
            cumulative += len(self.text_normalizer.tokenize(line))
            if cumulative > word_index:
                return line_index

        return max(len(document_lines) - 1, 0)

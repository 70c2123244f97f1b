from typing import Callable, Sequence, Union
import math
import logging

from yaminabe.errors import EmptyWindow
from yaminabe.knowledge_base.frequency_model import frequency_items
from yaminabe.knowledge_base.types import FrequencyItem, FrequencyMode
from yaminabe.probability_normalizer.types import PerplexityResult

# Configure logging
logger = logging.getLogger(__name__)

ProbabilityFn = Callable[[FrequencyItem], float]


class PerplexityEvaluator:
    """
    Turn a probability function and a token sequence into an entropy or
    perplexity score.

    A window is one token in unigram mode or one adjacent pair in bigram
    mode, matching the items a FrequencyModel of the same mode counts.
    Lower perplexity means the sequence sits closer to the training corpus.

    Attributes:
        mode: Window mode shared with the probability function's model

    Example:
        >>> model = FrequencyModel.build(["私 は 猫 が 好き"])
        >>> evaluator = PerplexityEvaluator(model.mode)
        >>> evaluator.perplexity(["私", "は", "猫"], model.probability)
    """

    def __init__(self, mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM) -> None:
        """
        Initialize perplexity evaluator.

        Args:
            mode: Window mode ('unigram' or 'bigram')
        """
        self.mode = FrequencyMode(mode)
        logger.debug(f"Initialized PerplexityEvaluator with mode={self.mode.value}")

    @staticmethod
    def surprisal(probability: float) -> float:
        """
        Information content of one window in bits.

        Args:
            probability: Window probability

        Returns:
            -log2(probability), infinity for a zero probability
        """
        if probability <= 0:
            return float('inf')
        return -math.log2(probability)

    @staticmethod
    def perplexity_from_bits(bits: float, window_count: int) -> float:
        """
        Perplexity from accumulated surprisal.

        Args:
            bits: Sum of window surprisals
            window_count: Number of windows summed

        Returns:
            2 ** (bits / window_count), infinity on overflow

        Raises:
            EmptyWindow: If window_count is zero
        """
        if window_count <= 0:
            raise EmptyWindow("Cannot compute perplexity over zero windows")

        try:
            return 2.0 ** (bits / window_count)
        except OverflowError:
            return float('inf')

    def entropy(self, sequence: Sequence[str], probability_fn: ProbabilityFn) -> float:
        """
        Mean surprisal over the sliding windows of a sequence.

        Args:
            sequence: Token sequence
            probability_fn: Maps a window to its probability

        Returns:
            Entropy in bits per window

        Raises:
            EmptyWindow: If the sequence has no windows
        """
        windows = frequency_items(sequence, self.mode)
        if not windows:
            raise EmptyWindow(
                f"Sequence of {len(sequence)} tokens has no {self.mode.value} windows"
            )

        bits = sum(self.surprisal(probability_fn(window)) for window in windows)
        return bits / len(windows)

    def perplexity(self, sequence: Sequence[str], probability_fn: ProbabilityFn) -> float:
        """
        Perplexity of a sequence, 2 ** entropy.

        Args:
            sequence: Token sequence
            probability_fn: Maps a window to its probability

        Returns:
            Perplexity score (infinity if any window has zero probability)

        Raises:
            EmptyWindow: If the sequence has no windows
        """
        entropy = self.entropy(sequence, probability_fn)
        try:
            return 2.0 ** entropy
        except OverflowError:
            return float('inf')

    def evaluate(
        self, sequence: Sequence[str], probability_fn: ProbabilityFn
    ) -> PerplexityResult:
        """
        Score a sequence and report entropy alongside perplexity.

        Args:
            sequence: Token sequence
            probability_fn: Maps a window to its probability

        Returns:
            PerplexityResult with perplexity, entropy and window count
        """
        entropy = self.entropy(sequence, probability_fn)
        try:
            perplexity = 2.0 ** entropy
        except OverflowError:
            perplexity = float('inf')

        result = PerplexityResult(
            perplexity=perplexity,
            entropy=entropy,
            window_count=len(frequency_items(sequence, self.mode)),
        )

        logger.debug(f"Calculated perplexity: {result.perplexity:.4f}")
        return result

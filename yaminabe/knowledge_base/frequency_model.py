from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Union
from pathlib import Path
import logging

from yaminabe.errors import CorpusUnreadable, ModelUntrained
from yaminabe.knowledge_base.types import (
    FrequencyItem,
    FrequencyMode,
    FrequencyStatistics,
)
from yaminabe.tokenizer.types import PartOfSpeech, TaggedToken
from yaminabe.tokenizer.whitespace_segmenter import WhitespaceSegmenter


# Configure logging
logger = logging.getLogger(__name__)

# Assumed vocabulary size used to derive N[0], the number of unseen items.
DEFAULT_VOCABULARY_BOUND = 250000


def frequency_items(
    tokens: Sequence[str], mode: Union[FrequencyMode, str]
) -> List[FrequencyItem]:
    """
    Split a token sequence into the sliding windows a model counts.

    Args:
        tokens: Token sequence
        mode: UNIGRAM for single tokens, BIGRAM for adjacent pairs

    Returns:
        List of frequency items in sequence order

    Examples:
        >>> frequency_items(["a", "b", "c"], FrequencyMode.BIGRAM)
        [('a', 'b'), ('b', 'c')]
    """
    if FrequencyMode(mode) is FrequencyMode.UNIGRAM:
        return list(tokens)

    return [(tokens[i], tokens[i + 1]) for i in range(len(tokens) - 1)]


class FrequencyModel:
    """
    Good-Turing smoothed frequency statistics over a corpus.

    Counts either single tokens or adjacent token pairs, and keeps the
    frequency-of-frequencies table (N) consistent at every increment:
    N[r] is always the number of distinct items seen exactly r times.

    The model is filled once by ``build`` / ``from_file`` and is read-only
    afterwards, so one instance can be shared by any number of readers.

    Probabilities are not renormalized over the vocabulary. They are only
    meaningful for ranking sequences against each other, and in bigram mode
    they score the joint pair rather than P(next | prev).

    Attributes:
        mode: Counting mode, fixed at construction
        vocabulary_bound: Assumed vocabulary size used to derive N[0]
    """

    def __init__(
        self,
        mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM,
        vocabulary_bound: Optional[int] = DEFAULT_VOCABULARY_BOUND,
    ) -> None:
        """
        Initialize an empty frequency model.

        Args:
            mode: Counting mode ('unigram' or 'bigram')
            vocabulary_bound: Assumed vocabulary size, None to leave N[0] undefined

        Raises:
            ValueError: If vocabulary_bound is negative
        """
        if vocabulary_bound is not None and vocabulary_bound < 0:
            raise ValueError("vocabulary_bound must be non-negative")

        self.mode = FrequencyMode(mode)
        self.vocabulary_bound = vocabulary_bound

        self._counts: Dict[FrequencyItem, int] = {}
        self._n_table: Dict[int, int] = {}
        self._total: int = 0

        self._tags: Dict[str, PartOfSpeech] = {}
        self._pos_transitions: Set[Tuple[PartOfSpeech, PartOfSpeech]] = set()
        self._tagged_tokens: int = 0
        self._lines: int = 0

    @classmethod
    def build(
        cls,
        corpus_lines: Iterable[str],
        mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM,
        tagged: bool = False,
        vocabulary_bound: Optional[int] = DEFAULT_VOCABULARY_BOUND,
    ) -> "FrequencyModel":
        """
        Build a model from whitespace separated corpus lines.

        Args:
            corpus_lines: Iterable of lines; each line is one sentence
            mode: Counting mode ('unigram' or 'bigram')
            tagged: Lines alternate token and part-of-speech tag fields
            vocabulary_bound: Assumed vocabulary size for N[0]

        Returns:
            Populated FrequencyModel
        """
        model = cls(mode, vocabulary_bound)
        segmenter = WhitespaceSegmenter()

        for line in corpus_lines:
            if tagged:
                tagged_tokens = segmenter.segment_tagged(line)
                model._observe_tags(tagged_tokens)
                tokens = [tagged_token.token for tagged_token in tagged_tokens]
            else:
                tokens = segmenter.segment(line)

            model._observe_line(tokens)

        if (
            model.vocabulary_bound is not None
            and len(model._counts) >= model.vocabulary_bound
        ):
            logger.warning(
                f"Observed {len(model._counts)} distinct items, vocabulary bound "
                f"{model.vocabulary_bound} leaves no unseen mass"
            )

        logger.info(
            f"Built {model.mode.value} FrequencyModel: {model._lines} lines, "
            f"{len(model._counts)} items, total={model._total}"
        )
        return model

    @classmethod
    def from_file(
        cls,
        filepath: Union[str, Path],
        mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM,
        tagged: bool = False,
        vocabulary_bound: Optional[int] = DEFAULT_VOCABULARY_BOUND,
    ) -> "FrequencyModel":
        """
        Build a model from a UTF-8 corpus file.

        Args:
            filepath: Path to the newline delimited corpus
            mode: Counting mode ('unigram' or 'bigram')
            tagged: Lines alternate token and part-of-speech tag fields
            vocabulary_bound: Assumed vocabulary size for N[0]

        Returns:
            Populated FrequencyModel

        Raises:
            CorpusUnreadable: If the file cannot be opened or decoded
        """
        filepath = Path(filepath)

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return cls.build(f, mode, tagged, vocabulary_bound)

        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read corpus {filepath}: {str(e)}")
            raise CorpusUnreadable(f"Could not read corpus {filepath}: {str(e)}") from e

    def _observe_line(self, tokens: List[str]) -> None:
        """Count every item of one line; pairs never span lines."""
        for item in frequency_items(tokens, self.mode):
            self._increment(item)
        self._lines += 1

    def _increment(self, item: FrequencyItem) -> None:
        """Move one item from count r to r + 1, keeping N and total in step."""
        r = self._counts.get(item, 0)

        if r > 0:
            remaining = self._n_table[r] - 1
            if remaining:
                self._n_table[r] = remaining
            else:
                del self._n_table[r]

        self._counts[item] = r + 1
        self._n_table[r + 1] = self._n_table.get(r + 1, 0) + 1
        self._total += 1

    def _observe_tags(self, tagged_tokens: List[TaggedToken]) -> None:
        """Record first-seen tags and observed tag transitions."""
        for tagged_token in tagged_tokens:
            if tagged_token.pos is PartOfSpeech.UNKNOWN:
                continue
            self._tagged_tokens += 1
            # the first tag seen for a token is kept
            self._tags.setdefault(tagged_token.token, tagged_token.pos)

        for prev, nxt in zip(tagged_tokens, tagged_tokens[1:]):
            if PartOfSpeech.UNKNOWN not in (prev.pos, nxt.pos):
                self._pos_transitions.add((prev.pos, nxt.pos))

    def _as_item(self, item: Union[FrequencyItem, Sequence[str]]) -> FrequencyItem:
        if self.mode is FrequencyMode.BIGRAM and not isinstance(item, tuple):
            return tuple(item)
        return item

    @property
    def total(self) -> int:
        """Sum of all item counts."""
        return self._total

    @property
    def distinct_items(self) -> int:
        """Number of distinct items observed (types)."""
        return len(self._counts)

    @property
    def is_trained(self) -> bool:
        return self._total > 0

    @property
    def n_table(self) -> Dict[int, int]:
        """Copy of the frequency-of-frequencies table for r >= 1."""
        return dict(self._n_table)

    def items(self, tokens: Sequence[str]) -> List[FrequencyItem]:
        """Windows of ``tokens`` in this model's mode."""
        return frequency_items(tokens, self.mode)

    def count(self, item: Union[FrequencyItem, Sequence[str]]) -> int:
        """Observed count of an item, 0 if never seen."""
        return self._counts.get(self._as_item(item), 0)

    def frequency_of_frequency(self, r: int) -> Optional[int]:
        """
        Number of distinct items observed exactly r times.

        N[0] is derived as ``vocabulary_bound - distinct_items`` and is
        undefined (None) when no bound is set or the bound is exhausted.

        Args:
            r: Count value

        Returns:
            N[r], or None when undefined
        """
        if r < 0:
            raise ValueError("r must be non-negative")

        if r == 0:
            if self.vocabulary_bound is None:
                return None
            unseen = self.vocabulary_bound - len(self._counts)
            return unseen if unseen > 0 else None

        return self._n_table.get(r)

    def probability(self, item: Union[FrequencyItem, Sequence[str]]) -> float:
        """
        Good-Turing smoothed score of an item.

        With r the item's count, r* = (r + 1) * N[r+1] / N[r] when both
        table entries are defined and N[r] > 0, otherwise r* = r. A
        non-positive r* falls back to the maximum-likelihood r / total.

        Args:
            item: Token (unigram mode) or token pair (bigram mode)

        Returns:
            Non-negative, finite score; comparable across items but not
            normalized to sum to 1

        Raises:
            ModelUntrained: If the model has no observations

        Examples:
            >>> model = FrequencyModel.build(["a b a b c"], mode="bigram")
            >>> model.probability(("a", "b")) > model.probability(("c", "a"))
            True
        """
        if self._total == 0:
            raise ModelUntrained("FrequencyModel has no observations")

        r = self.count(item)
        n_r = self.frequency_of_frequency(r)
        n_r_plus = self.frequency_of_frequency(r + 1)

        if n_r is not None and n_r_plus is not None and n_r > 0:
            r_star = (r + 1) * (n_r_plus / n_r)
        else:
            r_star = float(r)

        if r_star <= 0:
            return r / self._total

        return r_star / self._total

    def probability_ml(self, item: Union[FrequencyItem, Sequence[str]]) -> float:
        """
        Unsmoothed maximum-likelihood estimate r / total.

        Raises:
            ModelUntrained: If the model has no observations
        """
        if self._total == 0:
            raise ModelUntrained("FrequencyModel has no observations")

        return self.count(item) / self._total

    def pos_of(self, token: str) -> PartOfSpeech:
        """Part-of-speech tag assigned to a token, UNKNOWN if untagged."""
        return self._tags.get(token, PartOfSpeech.UNKNOWN)

    def pos_transitions(self) -> FrozenSet[Tuple[PartOfSpeech, PartOfSpeech]]:
        """Tag pairs observed back-to-back in the tagged corpus."""
        return frozenset(self._pos_transitions)

    def most_frequent(self) -> Optional[Tuple[FrequencyItem, int]]:
        """Most frequent item and its count, None for an empty model."""
        if not self._counts:
            return None

        item = max(self._counts, key=self._counts.__getitem__)
        return item, self._counts[item]

    def n_one_ratio(self) -> float:
        """Share of distinct items observed exactly once."""
        if not self._counts:
            return 0.0
        return self._n_table.get(1, 0) / len(self._counts)

    def average_occurrence(self) -> float:
        """Mean count per distinct item."""
        if not self._counts:
            return 0.0
        return self._total / len(self._counts)

    def get_statistics(self) -> FrequencyStatistics:
        """
        Get summary statistics of the model.

        Returns:
            FrequencyStatistics with counts and derived ratios
        """
        return FrequencyStatistics(
            mode=self.mode,
            total=self._total,
            distinct_items=len(self._counts),
            lines=self._lines,
            tagged_tokens=self._tagged_tokens,
            n_one_ratio=self.n_one_ratio(),
            average_occurrence=self.average_occurrence(),
            most_frequent=self.most_frequent(),
        )

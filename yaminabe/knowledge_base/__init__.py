from typing import Iterable, Optional, Union
from yaminabe.knowledge_base.frequency_model import (
    FrequencyModel,
    frequency_items,
    DEFAULT_VOCABULARY_BOUND,
)
from yaminabe.knowledge_base.types import (
    FrequencyItem,
    FrequencyMode,
    FrequencyStatistics,
)


def create_frequency_model(
    corpus_lines: Iterable[str],
    mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM,
    tagged: bool = False,
    vocabulary_bound: Optional[int] = DEFAULT_VOCABULARY_BOUND,
) -> FrequencyModel:
    """
    Factory function to build a frequency model from corpus lines.

    Args:
        corpus_lines: Whitespace separated corpus lines
        mode: Counting mode (default: bigram)
        tagged: Lines alternate token and part-of-speech tag fields
        vocabulary_bound: Assumed vocabulary size for unseen items

    Returns:
        Populated FrequencyModel

    Examples:
        >>> model = create_frequency_model(["猫 が 好き"])
        >>> model.total
        2
    """
    return FrequencyModel.build(corpus_lines, mode, tagged, vocabulary_bound)


__all__ = [
    "create_frequency_model",
    "frequency_items",
    "FrequencyModel",
    "FrequencyItem",
    "FrequencyMode",
    "FrequencyStatistics",
    "DEFAULT_VOCABULARY_BOUND",
]

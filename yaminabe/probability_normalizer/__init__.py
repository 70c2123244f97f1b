from typing import Union
from yaminabe.knowledge_base.types import FrequencyMode
from yaminabe.probability_normalizer.evaluator import PerplexityEvaluator, ProbabilityFn
from yaminabe.probability_normalizer.types import PerplexityResult


def create_perplexity_evaluator(
    mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM,
) -> PerplexityEvaluator:
    """
    Factory function to create a PerplexityEvaluator instance.

    Args:
        mode: Window mode, matching the model that supplies probabilities

    Returns:
        Instance of PerplexityEvaluator
    """
    return PerplexityEvaluator(mode)


__all__ = [
    "create_perplexity_evaluator",
    "PerplexityEvaluator",
    "PerplexityResult",
    "ProbabilityFn",
]

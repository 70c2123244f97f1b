"""
Quiz mixer: Good-Turing frequency model, perplexity scoring and an
anytime search that merges several quizzes into one question.
"""

from yaminabe.errors import (
    YaminabeError,
    CorpusUnreadable,
    ModelUntrained,
    EmptyWindow,
    NothingToMix,
    InvalidCoverageConfig,
    NoCandidateFound,
)
from yaminabe.knowledge_base import FrequencyModel, FrequencyMode
from yaminabe.probability_normalizer import PerplexityEvaluator
from yaminabe.prediction_engine import (
    SequenceSynthesizer,
    SynthesisConfig,
    GenerationBudget,
    GenerationResult,
    SearchStrategy,
)

__version__ = "0.1.0"

__all__ = [
    "YaminabeError",
    "CorpusUnreadable",
    "ModelUntrained",
    "EmptyWindow",
    "NothingToMix",
    "InvalidCoverageConfig",
    "NoCandidateFound",
    "FrequencyModel",
    "FrequencyMode",
    "PerplexityEvaluator",
    "SequenceSynthesizer",
    "SynthesisConfig",
    "GenerationBudget",
    "GenerationResult",
    "SearchStrategy",
]

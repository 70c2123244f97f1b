from yaminabe.prediction_engine.types import (
    Candidate,
    GenerationBudget,
    GenerationResult,
    RenderConfig,
    SearchStrategy,
    SynthesisConfig,
)
from yaminabe.prediction_engine.anytime import AnytimeOutcome, run_anytime
from yaminabe.prediction_engine.synthesizer import (
    SequenceSynthesizer,
    non_standalone_exclusion,
    EXCLUDED_SCORE,
    NON_STANDALONE_TAGS,
)
from yaminabe.knowledge_base.frequency_model import FrequencyModel


def create_sequence_synthesizer(
    model: FrequencyModel,
    use_pos_rules: bool = False,
) -> SequenceSynthesizer:
    """
    Factory function to create a SequenceSynthesizer instance.

    Args:
        model: Built FrequencyModel
        use_pos_rules: Forbid adjacent non-standalone tokens and prune
            tag transitions never seen in the corpus

    Returns:
        Initialized SequenceSynthesizer instance
    """
    if not use_pos_rules:
        return SequenceSynthesizer(model)

    return SequenceSynthesizer(
        model,
        exclusion=non_standalone_exclusion(model),
        pos_transitions=model.pos_transitions(),
    )


__all__ = [
    "create_sequence_synthesizer",
    "non_standalone_exclusion",
    "run_anytime",
    "AnytimeOutcome",
    "SequenceSynthesizer",
    "Candidate",
    "GenerationBudget",
    "GenerationResult",
    "RenderConfig",
    "SearchStrategy",
    "SynthesisConfig",
    "EXCLUDED_SCORE",
    "NON_STANDALONE_TAGS",
]

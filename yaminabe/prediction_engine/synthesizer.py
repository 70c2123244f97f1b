from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple
from functools import partial
import logging
import math
import random
import time

from yaminabe.errors import (
    InvalidCoverageConfig,
    ModelUntrained,
    NoCandidateFound,
    NothingToMix,
)
from yaminabe.knowledge_base.frequency_model import FrequencyModel
from yaminabe.probability_normalizer.evaluator import PerplexityEvaluator
from yaminabe.prediction_engine.anytime import run_anytime
from yaminabe.prediction_engine.types import (
    Candidate,
    GenerationBudget,
    GenerationResult,
    SearchStrategy,
    SynthesisConfig,
)
from yaminabe.tokenizer.types import PartOfSpeech

# Configure logging
logger = logging.getLogger(__name__)

# Score given to a continuation the adjacency predicate forbids; such a
# continuation still ranks after every allowed one, even an infinite one.
EXCLUDED_SCORE = math.inf

NON_STANDALONE_TAGS: FrozenSet[PartOfSpeech] = frozenset({
    PartOfSpeech.PARTICLE,
    PartOfSpeech.AUXILIARY_VERB,
    PartOfSpeech.SUFFIX,
})

# (previous token, next token) -> True when the adjacency is forbidden
AdjacencyPredicate = Callable[[str, str], bool]
PosTransitions = FrozenSet[Tuple[PartOfSpeech, PartOfSpeech]]
Quiz = Tuple[str, ...]


def non_standalone_exclusion(
    model: FrequencyModel,
    tags: FrozenSet[PartOfSpeech] = NON_STANDALONE_TAGS,
) -> AdjacencyPredicate:
    """
    Build a predicate forbidding two non-standalone tokens back-to-back.

    Args:
        model: Model holding the tokens' part-of-speech tags
        tags: Tags that cannot stand on their own

    Returns:
        Predicate that is True for a forbidden (previous, next) pair

    Examples:
        >>> excluded = non_standalone_exclusion(model)
        >>> excluded("は", "が")
        True
    """
    def excluded(prev: str, nxt: str) -> bool:
        return model.pos_of(prev) in tags and model.pos_of(nxt) in tags

    return excluded


class SequenceSynthesizer:
    """
    Merge several quizzes into one low-perplexity token sequence.

    The output is always an order-preserving interleaving of the quizzes:
    tokens of one quiz keep their relative order and nothing is invented.
    Two anytime strategies are available, an exploratory random walk and a
    greedy bandit with bounded restarts; both keep the lowest-perplexity
    completed candidate found within the budget.

    Each call to ``synthesize`` keeps its cursors and buffers in local
    state, so one synthesizer can serve concurrent requests as long as
    each request brings its own random source.

    Attributes:
        model: Frequency model supplying window probabilities
        evaluator: Perplexity evaluator in the model's mode
        exclusion: Optional adjacency predicate for the greedy strategy
        pos_transitions: Optional allowed tag transitions for the greedy strategy
    """

    def __init__(
        self,
        model: FrequencyModel,
        evaluator: Optional[PerplexityEvaluator] = None,
        exclusion: Optional[AdjacencyPredicate] = None,
        pos_transitions: Optional[PosTransitions] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize sequence synthesizer.

        Args:
            model: Built FrequencyModel
            evaluator: PerplexityEvaluator (default: one in the model's mode)
            exclusion: Predicate forbidding (previous, next) token adjacencies
            pos_transitions: Tag transitions allowed between consecutive tokens
            clock: Monotonic clock in seconds

        Raises:
            ValueError: If the evaluator's mode differs from the model's
        """
        self.model = model
        self.evaluator = evaluator or PerplexityEvaluator(model.mode)

        if self.evaluator.mode is not model.mode:
            raise ValueError(
                f"Evaluator mode {self.evaluator.mode.value} does not match "
                f"model mode {model.mode.value}"
            )

        self.exclusion = exclusion
        self.pos_transitions = pos_transitions or None
        self.clock = clock

    def synthesize(
        self,
        quizzes: Sequence[Sequence[str]],
        config: Optional[SynthesisConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> GenerationResult:
        """
        Merge quizzes into one sequence.

        Args:
            quizzes: Token sequences to merge, each kept in its own order
            config: Strategy, bias and budget (default: SynthesisConfig())
            rng: Random source (default: seeded from OS entropy)

        Returns:
            GenerationResult holding the best candidate's tokens

        Raises:
            NothingToMix: If no quiz is given
            InvalidCoverageConfig: If a quiz cannot meet its coverage
            ModelUntrained: If the model has no observations
            NoCandidateFound: If the budget ends without a completed candidate
        """
        config = config or SynthesisConfig()
        rng = rng or random.Random()
        sources: List[Quiz] = [tuple(quiz) for quiz in quizzes]

        if not sources:
            raise NothingToMix("At least one quiz is required")

        if len(sources) == 1:
            logger.info("Single quiz supplied, returning it unchanged")
            return GenerationResult(
                tokens=list(sources[0]),
                selections=[(0, i) for i in range(len(sources[0]))],
            )

        required, min_length = self._validate_coverage(sources, config.budget)

        if not self.model.is_trained:
            raise ModelUntrained("FrequencyModel has no observations")

        budget = config.budget
        if config.strategy is SearchStrategy.RANDOM_WALK:
            produce = partial(
                self._walk_attempt, sources, required, min_length, config, rng
            )
        else:
            produce = partial(
                self._greedy_restart, sources, required, min_length, config, rng
            )
            restarts = config.restarts
            if budget.max_iterations is not None:
                restarts = min(restarts, budget.max_iterations)
            budget = budget.model_copy(update={"max_iterations": restarts})

        outcome = run_anytime(produce, budget, self.clock)

        if outcome.best is None:
            logger.error(
                f"No candidate completed in {outcome.attempts} attempts "
                f"({config.strategy.value})"
            )
            raise NoCandidateFound(
                f"No candidate completed in {outcome.attempts} attempts"
            )

        logger.info(
            f"Merged {len(sources)} quizzes with {config.strategy.value}: "
            f"{outcome.completed}/{outcome.attempts} attempts completed, "
            f"perplexity={outcome.best.perplexity:.4f}"
        )

        return GenerationResult(
            tokens=outcome.best.tokens,
            perplexity=outcome.best.perplexity,
            selections=outcome.best.selections,
            strategy=config.strategy,
            attempts=outcome.attempts,
            completed=outcome.completed,
            elapsed_seconds=outcome.elapsed_seconds,
        )

    def _validate_coverage(
        self, sources: List[Quiz], budget: GenerationBudget
    ) -> Tuple[List[int], int]:
        """
        Compute each source's required contribution and the effective
        minimum length, failing early when they cannot be met.

        Every non-empty source must contribute at least one token, and the
        output must be long enough to hold one window of the model's mode.
        """
        required = []

        for index, quiz in enumerate(sources):
            need = budget.min_coverage
            if budget.min_coverage_fraction is not None:
                need = max(need, math.ceil(budget.min_coverage_fraction * len(quiz)))
            if quiz:
                need = max(need, 1)

            if len(quiz) < need:
                raise InvalidCoverageConfig(
                    f"Quiz {index} has {len(quiz)} tokens but must contribute {need}"
                )
            required.append(need)

        available = sum(len(quiz) for quiz in sources)
        min_length = max(budget.min_length, self.model.mode.window_size, sum(required))

        if available < min_length:
            raise InvalidCoverageConfig(
                f"Quizzes hold {available} tokens, fewer than the minimum length {min_length}"
            )

        return required, min_length

    def _candidate(
        self, sources: List[Quiz], selections: List[Tuple[int, int]]
    ) -> Candidate:
        tokens = [sources[source][position] for source, position in selections]
        perplexity = self.evaluator.perplexity(tokens, self.model.probability)
        return Candidate(selections=selections, tokens=tokens, perplexity=perplexity)

    def _walk_attempt(
        self,
        sources: List[Quiz],
        required: List[int],
        min_length: int,
        config: SynthesisConfig,
        rng: random.Random,
        iteration: int,
    ) -> Optional[Candidate]:
        """
        One exploratory random walk.

        Picks a source uniformly, takes a short run from it, and repeats
        until every source is covered and the minimum length is reached.

        Returns:
            Completed Candidate, or None when an exhausted source was drawn
            before all coverage thresholds were met
        """
        cursors = [0] * len(sources)
        selections: List[Tuple[int, int]] = []

        while True:
            source = rng.randrange(len(sources))
            remaining = len(sources[source]) - cursors[source]

            if remaining == 0:
                covered = all(c >= need for c, need in zip(cursors, required))
                if not covered or all(c == len(q) for c, q in zip(cursors, sources)):
                    logger.debug(f"Walk {iteration}: drew exhausted source {source}, discarded")
                    return None
                continue

            run = min(rng.randint(1, config.max_run), remaining)
            for _ in range(run):
                selections.append((source, cursors[source]))
                cursors[source] += 1

            covered = all(c >= need for c, need in zip(cursors, required))
            if covered and len(selections) >= min_length:
                return self._candidate(sources, selections)

    def _window_bits(self, tokens: List[str], token: str) -> Optional[float]:
        """Surprisal of the window that appending ``token`` would close."""
        size = self.model.mode.window_size
        tail = tokens[len(tokens) - (size - 1):] if size > 1 else []
        if len(tail) + 1 < size:
            return None

        window = self.model.items(tail + [token])[0]
        return self.evaluator.surprisal(self.model.probability(window))

    def _admissible(
        self,
        live: List[int],
        sources: List[Quiz],
        cursors: List[int],
        taken: List[int],
        required: List[int],
        tokens: List[str],
    ) -> List[int]:
        """
        Sources the greedy step may choose from.

        A source's last token is withheld while another source is still
        under coverage, and continuations whose tag transition never
        occurs in the corpus are pruned. A filter that would leave nothing
        is not applied.
        """
        choices = [
            s for s in live
            if cursors[s] + 1 < len(sources[s])
            or all(taken[o] >= required[o] for o in range(len(sources)) if o != s)
        ] or live

        if self.pos_transitions and tokens:
            prev_pos = self.model.pos_of(tokens[-1])
            allowed = []
            for s in choices:
                next_pos = self.model.pos_of(sources[s][cursors[s]])
                if (
                    PartOfSpeech.UNKNOWN in (prev_pos, next_pos)
                    or (prev_pos, next_pos) in self.pos_transitions
                ):
                    allowed.append(s)
            choices = allowed or choices

        return choices

    def _greedy_restart(
        self,
        sources: List[Quiz],
        required: List[int],
        min_length: int,
        config: SynthesisConfig,
        rng: random.Random,
        iteration: int,
    ) -> Optional[Candidate]:
        """
        One greedy restart; ``iteration`` is its skip slot.

        Every step appends the next token of the source whose tentative
        perplexity is lowest, with the active source's score discounted by
        the bias. Continuations the exclusion predicate forbids rank after
        every allowed one. When the restart's random draw hits its skip
        slot the chosen source advances without emitting. The restart ends
        when the active source is exhausted with coverage and length met;
        before that an exhausted active source hands over to the best live
        one.

        Returns:
            Completed Candidate, or None if coverage or length is unmet
            once every source is exhausted
        """
        skip_slot = iteration % config.restarts
        cursors = [0] * len(sources)
        taken = [0] * len(sources)
        selections: List[Tuple[int, int]] = []
        tokens: List[str] = []
        bits = 0.0
        windows = 0

        def emit(source: int) -> None:
            nonlocal bits, windows
            token = sources[source][cursors[source]]
            window_bits = self._window_bits(tokens, token)
            if window_bits is not None:
                bits += window_bits
                windows += 1
            selections.append((source, cursors[source]))
            tokens.append(token)
            cursors[source] += 1
            taken[source] += 1

        def satisfied() -> bool:
            covered = all(t >= need for t, need in zip(taken, required))
            return covered and len(tokens) >= min_length

        starts = [s for s in range(len(sources)) if sources[s]]
        active = rng.choice(
            self._admissible(starts, sources, cursors, taken, required, tokens)
        )
        emit(active)

        while cursors[active] < len(sources[active]) or not satisfied():
            live = [s for s in range(len(sources)) if cursors[s] < len(sources[s])]
            if not live:
                break
            choices = self._admissible(live, sources, cursors, taken, required, tokens)

            scores = {}
            for s in choices:
                token = sources[s][cursors[s]]
                window_bits = self._window_bits(tokens, token)
                if window_bits is None:
                    score = 1.0
                else:
                    score = self.evaluator.perplexity_from_bits(
                        bits + window_bits, windows + 1
                    )

                if config.jitter > 0:
                    score *= 1.0 + rng.uniform(-config.jitter, config.jitter)
                excluded = self.exclusion is not None and self.exclusion(tokens[-1], token)
                if excluded:
                    score = EXCLUDED_SCORE
                if s == active:
                    score *= config.bias
                scores[s] = (excluded, score)

            chosen = min(choices, key=lambda s: (scores[s], s))

            if rng.randrange(config.restarts) == skip_slot:
                logger.debug(
                    f"Restart {iteration}: skipped {sources[chosen][cursors[chosen]]!r}"
                )
                cursors[chosen] += 1
            else:
                emit(chosen)
            active = chosen

        if not satisfied():
            logger.debug(f"Restart {iteration}: coverage or length unmet, discarded")
            return None

        return self._candidate(sources, selections)

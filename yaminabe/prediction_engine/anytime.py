from typing import Callable, Optional
from dataclasses import dataclass
import logging
import time

from yaminabe.prediction_engine.types import Candidate, GenerationBudget

# Configure logging
logger = logging.getLogger(__name__)

# Produces one attempt given its iteration index; None means discarded.
CandidateProducer = Callable[[int], Optional[Candidate]]


@dataclass
class AnytimeOutcome:
    """Best candidate of an anytime run and how the budget was spent."""

    best: Optional[Candidate]
    attempts: int
    completed: int
    elapsed_seconds: float


def run_anytime(
    produce: CandidateProducer,
    budget: GenerationBudget,
    clock: Callable[[], float] = time.monotonic,
) -> AnytimeOutcome:
    """
    Run a candidate producer until the budget is spent, keeping the best.

    The run stops when the deadline passes or ``max_iterations`` attempts
    were made, whichever comes first. At least one attempt is always made.
    Lower perplexity wins; on a tie the earlier candidate is kept.

    Args:
        produce: Closure returning a Candidate or None for a discarded attempt
        budget: Deadline and/or iteration budget
        clock: Monotonic clock in seconds (injectable for tests)

    Returns:
        AnytimeOutcome with the best candidate (None if nothing completed)
    """
    start = clock()
    deadline = None
    if budget.deadline_seconds is not None:
        deadline = start + budget.deadline_seconds

    best: Optional[Candidate] = None
    attempts = 0
    completed = 0

    while True:
        candidate = produce(attempts)
        attempts += 1

        if candidate is not None:
            completed += 1
            if best is None or candidate.perplexity < best.perplexity:
                best = candidate
                logger.debug(
                    f"Attempt {attempts}: new best perplexity {candidate.perplexity:.4f}"
                )

        if budget.max_iterations is not None and attempts >= budget.max_iterations:
            break
        if deadline is not None and clock() >= deadline:
            break

    elapsed = clock() - start
    logger.debug(f"Anytime search made {attempts} attempts, {completed} completed")
    return AnytimeOutcome(
        best=best, attempts=attempts, completed=completed, elapsed_seconds=max(elapsed, 0.0)
    )

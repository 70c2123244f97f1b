"""
Tests for the anytime search runner.
"""

import itertools

import pytest
from pydantic import ValidationError

from yaminabe.prediction_engine import Candidate, GenerationBudget, run_anytime


def candidate(perplexity, label="a"):
    return Candidate(selections=[(0, 0)], tokens=[label], perplexity=perplexity)


def scripted(outcomes):
    """Producer returning the given outcomes in order and recording calls."""
    calls = []

    def produce(iteration):
        calls.append(iteration)
        return outcomes[iteration % len(outcomes)]

    produce.calls = calls
    return produce


class TestRunAnytime:
    """Tests for run_anytime."""

    def test_iteration_budget(self):
        """Exactly max_iterations attempts are made, numbered from zero."""
        produce = scripted([candidate(5.0)])
        budget = GenerationBudget(deadline_seconds=None, max_iterations=4)
        outcome = run_anytime(produce, budget)
        assert produce.calls == [0, 1, 2, 3]
        assert outcome.attempts == 4
        assert outcome.completed == 4

    def test_keeps_lowest_perplexity(self):
        produce = scripted([candidate(5.0, "x"), candidate(2.0, "y"), candidate(3.0, "z")])
        budget = GenerationBudget(deadline_seconds=None, max_iterations=3)
        assert run_anytime(produce, budget).best.tokens == ["y"]

    def test_tie_keeps_earlier_candidate(self):
        produce = scripted([candidate(2.0, "first"), candidate(2.0, "second")])
        budget = GenerationBudget(deadline_seconds=None, max_iterations=2)
        assert run_anytime(produce, budget).best.tokens == ["first"]

    def test_discarded_attempts(self):
        """Attempts returning None count but never become the best."""
        produce = scripted([None, candidate(4.0), None])
        budget = GenerationBudget(deadline_seconds=None, max_iterations=3)
        outcome = run_anytime(produce, budget)
        assert outcome.attempts == 3
        assert outcome.completed == 1
        assert outcome.best.perplexity == 4.0

    def test_nothing_completed(self):
        budget = GenerationBudget(deadline_seconds=None, max_iterations=2)
        assert run_anytime(scripted([None]), budget).best is None

    def test_deadline(self):
        """The run stops at the first check past the deadline."""
        ticks = itertools.count()
        produce = scripted([candidate(1.0)])
        budget = GenerationBudget(deadline_seconds=2.5)
        outcome = run_anytime(produce, budget, clock=lambda: float(next(ticks)))
        assert outcome.attempts == 3
        assert outcome.elapsed_seconds == 4.0

    def test_expired_deadline_still_attempts_once(self):
        ticks = itertools.count(step=10)
        produce = scripted([candidate(1.0)])
        outcome = run_anytime(
            produce, GenerationBudget(deadline_seconds=0.5), clock=lambda: float(next(ticks))
        )
        assert outcome.attempts == 1
        assert outcome.best is not None

    def test_iterations_end_before_deadline(self):
        produce = scripted([candidate(1.0)])
        budget = GenerationBudget(deadline_seconds=60.0, max_iterations=2)
        assert run_anytime(produce, budget).attempts == 2


class TestGenerationBudget:
    """Tests for budget validation."""

    def test_requires_a_stop_condition(self):
        with pytest.raises(ValidationError):
            GenerationBudget(deadline_seconds=None, max_iterations=None)

    def test_rejects_non_positive_deadline(self):
        with pytest.raises(ValidationError):
            GenerationBudget(deadline_seconds=0)

    def test_rejects_fraction_above_one(self):
        with pytest.raises(ValidationError):
            GenerationBudget(min_coverage_fraction=1.5)

from enum import Enum
from typing import FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class SearchStrategy(str, Enum):
    """Enumeration for the merge search strategies."""
    RANDOM_WALK = "random_walk"
    GREEDY_BANDIT = "greedy_bandit"


class GenerationBudget(BaseModel):
    """Stop condition and acceptance thresholds for one merge request."""
    model_config = ConfigDict(frozen=True)

    deadline_seconds: Optional[float] = Field(
        3.0, gt=0.0, description="Wall-clock time the search may run"
    )
    max_iterations: Optional[int] = Field(
        None, ge=1, description="Attempt count the search may run"
    )
    min_coverage: int = Field(
        1, ge=0, description="Tokens every source must contribute"
    )
    min_coverage_fraction: Optional[float] = Field(
        None, gt=0.0, le=1.0, description="Share of each source's tokens it must contribute"
    )
    min_length: int = Field(2, ge=1, description="Minimum merged output length")

    @model_validator(mode="after")
    def validate_stop_condition(self) -> "GenerationBudget":
        """Ensure the search has at least one way to stop."""
        if self.deadline_seconds is None and self.max_iterations is None:
            raise ValueError("Either deadline_seconds or max_iterations must be set")
        return self


class SynthesisConfig(BaseModel):
    """Configuration for sequence synthesis."""
    model_config = ConfigDict(frozen=True)

    strategy: SearchStrategy = Field(
        SearchStrategy.RANDOM_WALK, description="Search strategy to run"
    )
    bias: float = Field(
        1.0, gt=0.0, le=1.0, description="Score discount for continuing the active source"
    )
    max_run: int = Field(2, ge=1, description="Longest run a random-walk step takes")
    restarts: int = Field(8, ge=2, description="Greedy restarts, one skip slot each")
    jitter: float = Field(
        0.05, ge=0.0, lt=1.0, description="Relative noise added to greedy scores"
    )
    budget: GenerationBudget = Field(default_factory=GenerationBudget)


class RenderConfig(BaseModel):
    """Configuration for turning merged tokens into a sentence."""
    model_config = ConfigDict(frozen=True)

    joiner: str = Field("", description="Separator placed between tokens")
    drop_tokens: FrozenSet[str] = Field(
        frozenset({"?", "でしょ", "う", "でしょう"}),
        description="Question endings removed from the merged fragments",
    )
    closing: str = Field("でしょう?", description="Ending appended to a merged sentence")


class Candidate(BaseModel):
    """Model representing one completed merge attempt."""
    model_config = ConfigDict(frozen=True)

    selections: List[Tuple[int, int]] = Field(
        ..., min_length=1, description="(source index, source position) per emitted token"
    )
    tokens: List[str] = Field(..., min_length=1, description="Realized token sequence")
    perplexity: float = Field(..., gt=0.0, description="Perplexity of the tokens")


class GenerationResult(BaseModel):
    """Model representing the outcome of a merge request."""
    model_config = ConfigDict(frozen=True)

    tokens: List[str] = Field(default_factory=list, description="Merged token sequence")
    perplexity: Optional[float] = Field(
        None, description="Perplexity of the tokens, None when no search ran"
    )
    selections: List[Tuple[int, int]] = Field(
        default_factory=list, description="(source index, source position) per token"
    )
    strategy: Optional[SearchStrategy] = Field(None, description="Strategy that produced it")
    attempts: int = Field(0, ge=0, description="Attempts made before the budget ended")
    completed: int = Field(0, ge=0, description="Attempts that produced a candidate")
    elapsed_seconds: float = Field(0.0, ge=0.0, description="Search wall-clock time")

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PerplexityResult(BaseModel):
    """Model for perplexity calculation results."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    perplexity: float = Field(..., description="Perplexity score")
    entropy: float = Field(..., description="Mean surprisal per window in bits")
    window_count: int = Field(..., ge=1, description="Number of scored windows")

    @field_validator('perplexity')
    @classmethod
    def _validate_perplexity(cls, v: float) -> float:
        """Ensure perplexity is positive (infinity allowed)."""
        if v <= 0:
            raise ValueError("Perplexity must be positive or infinity")
        return v

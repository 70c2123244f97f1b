from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field, ConfigDict, field_validator


# A single token in unigram mode, an adjacent pair in bigram mode.
FrequencyItem = Union[str, Tuple[str, str]]


class FrequencyMode(str, Enum):
    """Enumeration for the unit a frequency model counts."""

    UNIGRAM = "unigram"
    BIGRAM = "bigram"

    @property
    def window_size(self) -> int:
        """Number of tokens in one frequency item."""
        return 1 if self is FrequencyMode.UNIGRAM else 2


class FrequencyStatistics(BaseModel):
    """Model for frequency model statistics."""

    model_config = ConfigDict(frozen=True)

    mode: FrequencyMode = Field(..., description="Counting mode of the model")
    total: int = Field(..., description="Sum of all item counts")
    distinct_items: int = Field(..., description="Number of distinct items observed")
    lines: int = Field(default=0, description="Number of corpus lines consumed")
    tagged_tokens: int = Field(
        default=0, description="Number of tokens carrying a part-of-speech tag"
    )
    n_one_ratio: float = Field(
        default=0.0, description="Share of distinct items observed exactly once"
    )
    average_occurrence: float = Field(
        default=0.0, description="Mean count per distinct item"
    )
    most_frequent: Optional[Tuple[FrequencyItem, int]] = Field(
        default=None, description="Most frequent item and its count"
    )

    @field_validator("total", "distinct_items", "lines", "tagged_tokens")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate that counts are non-negative."""
        if v < 0:
            raise ValueError("Count values must be non-negative")
        return v

from abc import ABC, abstractmethod
from typing import List


class SegmenterBase(ABC):
    """Abstract base class for segmenters."""

    @abstractmethod
    def segment(self, text: str) -> List[str]:
        """
        Abstract method for segmentation.

        Args:
            text: Input text to segment

        Returns:
            Ordered list of tokens
        """
        pass

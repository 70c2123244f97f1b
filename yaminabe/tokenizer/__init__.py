"""
Segmentation collaborator for the quiz mixer.

Free-text morphological analysis happens outside this package; the
segmenter here only splits text that arrives already separated by
spaces, and reads the tagged corpus variant.
"""

from yaminabe.tokenizer.base import SegmenterBase
from yaminabe.tokenizer.whitespace_segmenter import WhitespaceSegmenter, parse_pos_tag
from yaminabe.tokenizer.types import PartOfSpeech, TaggedToken, POS_TAGS


def create_segmenter() -> WhitespaceSegmenter:
    """
    Factory function to create a segmenter instance.

    Returns:
        WhitespaceSegmenter instance

    Examples:
        >>> segmenter = create_segmenter()
        >>> isinstance(segmenter, SegmenterBase)
        True
    """
    return WhitespaceSegmenter()


__all__ = [
    "create_segmenter",
    "parse_pos_tag",
    "SegmenterBase",
    "WhitespaceSegmenter",
    "PartOfSpeech",
    "TaggedToken",
    "POS_TAGS",
]

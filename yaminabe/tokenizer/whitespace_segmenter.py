from yaminabe.tokenizer.base import SegmenterBase
from yaminabe.tokenizer.types import PartOfSpeech, TaggedToken, POS_TAGS
from typing import List
import logging

# Configure logging
logger = logging.getLogger(__name__)


def parse_pos_tag(tag: str) -> PartOfSpeech:
    """
    Map a corpus tag string onto the PartOfSpeech enumeration.

    Detailed tags such as "名詞-一般" or "助詞,格助詞" are reduced to
    their leading category before the lookup.

    Args:
        tag: Tag string as written in the corpus

    Returns:
        Matching PartOfSpeech, or UNKNOWN for unrecognized tags

    Examples:
        >>> parse_pos_tag("助詞")
        <PartOfSpeech.PARTICLE: 'Particle'>
        >>> parse_pos_tag("名詞-固有名詞")
        <PartOfSpeech.NOUN: 'Noun'>
    """
    pos = POS_TAGS.get(tag)
    if pos is None:
        head = tag.replace(",", "-").split("-", 1)[0]
        pos = POS_TAGS.get(head)

    if pos is None:
        logger.debug(f"Unrecognized POS tag '{tag}', using Unknown")
        return PartOfSpeech.UNKNOWN

    return pos


class WhitespaceSegmenter(SegmenterBase):
    """
    Segmenter for text that an external morphological analyzer has
    already split with spaces.
    """

    def segment(self, text: str) -> List[str]:
        """
        Split pre-segmented text into tokens.

        Args:
            text: Space separated tokens

        Returns:
            List of tokens in their original order

        Raises:
            ValueError: If text is not a string

        Examples:
            >>> WhitespaceSegmenter().segment("猫 は 可愛い")
            ['猫', 'は', '可愛い']
        """
        if not isinstance(text, str):
            raise ValueError("Input must be a string")

        return text.split()

    def segment_tagged(self, line: str) -> List[TaggedToken]:
        """
        Split a tagged corpus line of alternating token and tag fields.

        A trailing token without a tag is kept and tagged UNKNOWN.

        Args:
            line: Line of the form "token tag token tag ..."

        Returns:
            List of TaggedToken in line order

        Examples:
            >>> WhitespaceSegmenter().segment_tagged("猫 名詞 が 助詞")[1].pos
            <PartOfSpeech.PARTICLE: 'Particle'>
        """
        fields = self.segment(line)
        tagged = []

        for i in range(0, len(fields), 2):
            token = fields[i]
            if i + 1 < len(fields):
                pos = parse_pos_tag(fields[i + 1])
            else:
                logger.debug(f"Token '{token}' has no tag, using Unknown")
                pos = PartOfSpeech.UNKNOWN
            tagged.append(TaggedToken(token=token, pos=pos))

        return tagged

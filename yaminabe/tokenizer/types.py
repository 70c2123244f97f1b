from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field, ConfigDict, field_validator


class PartOfSpeech(str, Enum):
    """Closed set of part-of-speech tags a token may carry."""

    START = "Start"
    VERB = "Verb"
    ADJECTIVE = "Adjective"
    ADJECTIVAL_NOUN = "AdjectivalNoun"
    NOUN = "Noun"
    ADVERB = "Adverb"
    PRE_NOUN_ADJECTIVE = "PreNounAdjective"
    CONJUNCTION = "Conjunction"
    INTERJECTION = "Interjection"
    AUXILIARY_VERB = "AuxiliaryVerb"
    PARTICLE = "Particle"
    PRONOUN = "Pronoun"
    SUFFIX = "Suffix"
    PREFIX = "Prefix"
    DETERMINER = "Determiner"
    SYMBOL = "Symbol"
    AUXILIARY_SYMBOL = "AuxiliarySymbol"
    END = "End"
    UNKNOWN = "Unknown"


# Tag strings found in corpora (English names, IPADIC / UniDic names,
# sentence boundary markers) mapped onto the closed enumeration.
POS_TAGS: Dict[str, PartOfSpeech] = {
    **{pos.value: pos for pos in PartOfSpeech},
    "BOS": PartOfSpeech.START,
    "EOS": PartOfSpeech.END,
    "動詞": PartOfSpeech.VERB,
    "形容詞": PartOfSpeech.ADJECTIVE,
    "形容動詞": PartOfSpeech.ADJECTIVAL_NOUN,
    "形状詞": PartOfSpeech.ADJECTIVAL_NOUN,
    "名詞": PartOfSpeech.NOUN,
    "副詞": PartOfSpeech.ADVERB,
    "連体詞": PartOfSpeech.PRE_NOUN_ADJECTIVE,
    "接続詞": PartOfSpeech.CONJUNCTION,
    "感動詞": PartOfSpeech.INTERJECTION,
    "助動詞": PartOfSpeech.AUXILIARY_VERB,
    "助詞": PartOfSpeech.PARTICLE,
    "代名詞": PartOfSpeech.PRONOUN,
    "接尾辞": PartOfSpeech.SUFFIX,
    "接頭詞": PartOfSpeech.PREFIX,
    "接頭辞": PartOfSpeech.PREFIX,
    "記号": PartOfSpeech.SYMBOL,
    "補助記号": PartOfSpeech.AUXILIARY_SYMBOL,
}


class TaggedToken(BaseModel):
    """Model for a token read from a tagged corpus line."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Surface form of the token")
    pos: PartOfSpeech = Field(
        PartOfSpeech.UNKNOWN, description="Part-of-speech tag of the token"
    )

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        """Validate that the token is not blank."""
        if not v or v.isspace():
            raise ValueError("token cannot be blank")
        return v

"""Mention and mention-context records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class Gender(str, Enum):
    """Grammatical gender of a mention or entity."""

    MALE = "male"
    FEMALE = "female"
    NEUTER = "neuter"
    UNKNOWN = "unknown"


class Number(str, Enum):
    """Grammatical number of a mention or entity."""

    SINGULAR = "singular"
    PLURAL = "plural"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class GenderResult:
    """Gender value with the classifier's confidence."""

    gender: Gender
    confidence: float


@dataclass(frozen=True)
class NumberResult:
    """Number value with the classifier's confidence."""

    number: Number
    confidence: float


@dataclass
class Mention:
    """
    A raw referring expression found by an upstream mention finder.

    mention_id carries an externally supplied coreference label: mentions
    with the same id refer to the same entity. -1 means unlabeled.
    """

    text: str
    sentence_index: int
    span: Optional[tuple[int, int]] = None  # character offsets within the sentence
    head_text: str = ""
    head_tag: str = ""
    mention_id: int = -1
    parse: Optional[Any] = None  # originating syntactic node, opaque here
    extent_type: Optional[str] = None
    name_type: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.head_text:
            tokens = self.text.split()
            self.head_text = tokens[-1] if tokens else ""


@dataclass(frozen=True)
class MentionContext:
    """
    A mention enriched with its position in the document and its
    estimated gender and number.
    """

    mention: Mention = field(repr=False)
    document_index: int
    sentence_index: int
    index_in_sentence: int
    mentions_in_sentence: int
    mention_id: int = -1
    gender: Gender = Gender.UNKNOWN
    gender_confidence: float = 0.0
    number: Number = Number.UNKNOWN
    number_confidence: float = 0.0

    @property
    def text(self) -> str:
        return self.mention.text

    @property
    def head_text(self) -> str:
        return self.mention.head_text

    @property
    def head_tag(self) -> str:
        return self.mention.head_tag

    @property
    def name_type(self) -> Optional[str]:
        return self.mention.name_type

    @property
    def span(self) -> Optional[tuple[int, int]]:
        return self.mention.span

    @property
    def parse(self) -> Optional[Any]:
        return self.mention.parse

    @property
    def tokens(self) -> list[str]:
        return self.text.split()

    def with_gender(self, result: GenderResult) -> MentionContext:
        """Copy of this context carrying the given gender."""
        return replace(self, gender=result.gender, gender_confidence=result.confidence)

    def with_number(self, result: NumberResult) -> MentionContext:
        """Copy of this context carrying the given number."""
        return replace(self, number=result.number, number_confidence=result.confidence)

    def to_text(self) -> str:
        return self.text

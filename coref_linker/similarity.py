"""Gender and number classifiers for mention contexts."""

from __future__ import annotations

from typing import Protocol

from . import patterns
from .mention.models import Gender, GenderResult, MentionContext, Number, NumberResult

NEUTER_NAME_TYPES = {"organization", "location", "date", "time", "money", "percent"}


class GenderClassifier(Protocol):
    """Estimates the gender of a mention."""

    def classify(self, mention: MentionContext) -> GenderResult:
        ...


class NumberClassifier(Protocol):
    """Estimates the grammatical number of a mention."""

    def classify(self, mention: MentionContext) -> NumberResult:
        ...


class HeuristicGenderClassifier:
    """
    Rule-based gender estimates.

    Pronouns give their own gender, a leading Mr./Mrs./Ms. gives the
    honorific's gender and non-person named entities are neuter. Anything
    else is UNKNOWN at the minimum confidence.
    """

    def __init__(
        self,
        pronoun_confidence: float = 0.95,
        honorific_confidence: float = 0.9,
        name_type_confidence: float = 0.8,
        minimum_confidence: float = 0.5,
    ) -> None:
        self.pronoun_confidence = pronoun_confidence
        self.honorific_confidence = honorific_confidence
        self.name_type_confidence = name_type_confidence
        self.minimum_confidence = minimum_confidence

    def classify(self, mention: MentionContext) -> GenderResult:
        head = mention.head_text
        if patterns.MALE_PRONOUN.match(head):
            return GenderResult(Gender.MALE, self.pronoun_confidence)
        if patterns.FEMALE_PRONOUN.match(head):
            return GenderResult(Gender.FEMALE, self.pronoun_confidence)
        if patterns.NEUTER_PRONOUN.match(head):
            return GenderResult(Gender.NEUTER, self.pronoun_confidence)

        for token in mention.tokens[:-1]:
            if token in patterns.MALE_HONORIFICS:
                return GenderResult(Gender.MALE, self.honorific_confidence)
            if token in patterns.FEMALE_HONORIFICS:
                return GenderResult(Gender.FEMALE, self.honorific_confidence)

        name_type = (mention.name_type or "").lower()
        if name_type in NEUTER_NAME_TYPES:
            return GenderResult(Gender.NEUTER, self.name_type_confidence)

        return GenderResult(Gender.UNKNOWN, self.minimum_confidence)


class HeuristicNumberClassifier:
    """Rule-based number estimates from pronouns and noun tags."""

    def __init__(
        self,
        pronoun_confidence: float = 0.95,
        tag_confidence: float = 0.8,
        minimum_confidence: float = 0.5,
    ) -> None:
        self.pronoun_confidence = pronoun_confidence
        self.tag_confidence = tag_confidence
        self.minimum_confidence = minimum_confidence

    def classify(self, mention: MentionContext) -> NumberResult:
        head = mention.head_text
        if patterns.SINGULAR_PRONOUN.match(head):
            return NumberResult(Number.SINGULAR, self.pronoun_confidence)
        if patterns.PLURAL_PRONOUN.match(head):
            return NumberResult(Number.PLURAL, self.pronoun_confidence)

        tag = mention.head_tag
        if tag in ("NNS", "NNPS"):
            return NumberResult(Number.PLURAL, self.tag_confidence)
        if tag in ("NN", "NNP"):
            return NumberResult(Number.SINGULAR, self.tag_confidence)

        return NumberResult(Number.UNKNOWN, self.minimum_confidence)

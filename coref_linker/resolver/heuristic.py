"""Rule-based resolvers for common mention types."""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from .. import patterns
from ..mention.models import Gender, Number
from .base import Resolver
from .registry import resolver

if TYPE_CHECKING:
    from ..mention.models import MentionContext
    from ..state.entity import DiscourseEntity
    from ..state.model import DiscourseModel

logger = logging.getLogger(__name__)

_PRONOUN_GENDERS = {"m": Gender.MALE, "f": Gender.FEMALE, "n": Gender.NEUTER}

# Persons that can stand for a single named speaker or addressee
_SPEAKER_PERSONS = ("1s", "2")


def strip_noun_phrase(tokens: list[str]) -> Optional[str]:
    """
    Reduce a name to its core words.

    Drops a leading determiner, a leading honorific and a trailing corporate
    designator. Returns None if nothing is left.
    """
    start, end = 0, len(tokens)
    if start < end and tokens[start].lower() in patterns.DETERMINERS:
        start += 1
    if end - start > 1:
        if patterns.HONORIFIC.search(tokens[start]):
            start += 1
        if end - start > 1 and patterns.CORPORATE_DESIGNATOR.search(tokens[end - 1]):
            end -= 1
    if start >= end:
        return None
    return " ".join(tokens[start:end]).lower()


def _is_pronoun(mention: "MentionContext") -> bool:
    tag = mention.head_tag
    return not tag or tag.startswith("PRP")


class HeuristicResolver(Resolver):
    """
    Resolver that picks the most recent compatible entity.

    Candidates are scanned in recency order; the scan stops at the first
    out-of-range entity and skips excluded ones.
    """

    def __init__(self, entities_back: int = 30, sentences_back: Optional[int] = None) -> None:
        super().__init__(entities_back=entities_back)
        self.sentences_back = sentences_back

    @abstractmethod
    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        """Return True if the entity is an acceptable antecedent."""
        ...

    def is_out_of_range(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        if self.sentences_back is None:
            return False
        last = entity.last_mention
        return last is not None and mention.sentence_index - last.sentence_index > self.sentences_back

    def resolve(
        self, mention: "MentionContext", model: "DiscourseModel"
    ) -> Optional["DiscourseEntity"]:
        for entity in self.candidates(model):
            if self.is_out_of_range(mention, entity):
                break
            if self.is_excluded(mention, entity):
                continue
            if self.is_compatible(mention, entity):
                logger.debug(
                    f"{self.name}: {mention.text!r} -> entity {entity.entity_id} {entity}"
                )
                return entity
        return None


@resolver(name="singular_pronoun", singular_pronoun=True)
class SingularPronounResolver(HeuristicResolver):
    """Third-person singular pronouns: he, she, it and their forms."""

    def __init__(self, entities_back: int = 30, sentences_back: Optional[int] = 2) -> None:
        super().__init__(entities_back=entities_back, sentences_back=sentences_back)

    def can_resolve(self, mention: "MentionContext") -> bool:
        return _is_pronoun(mention) and bool(
            patterns.SINGULAR_THIRD_PERSON_PRONOUN.match(mention.head_text)
        )

    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        if entity.number == Number.PLURAL:
            return False

        gender = _PRONOUN_GENDERS.get(patterns.pronoun_gender(mention.head_text), Gender.UNKNOWN)
        if entity.gender != Gender.UNKNOWN and entity.gender != gender:
            return False

        # Named entities typed as people are never "it", other names never "he"/"she"
        last = entity.last_mention
        name_type = (last.name_type or "").lower() if last is not None else ""
        if name_type:
            is_person = name_type == "person"
            if gender == Gender.NEUTER and is_person:
                return False
            if gender in (Gender.MALE, Gender.FEMALE) and not is_person:
                return False
        return True


@resolver(name="plural_pronoun")
class PluralPronounResolver(HeuristicResolver):
    """Third-person plural pronouns: they, them, their."""

    def __init__(self, entities_back: int = 30, sentences_back: Optional[int] = 2) -> None:
        super().__init__(entities_back=entities_back, sentences_back=sentences_back)

    def can_resolve(self, mention: "MentionContext") -> bool:
        return _is_pronoun(mention) and bool(
            patterns.PLURAL_THIRD_PERSON_PRONOUN.match(mention.head_text)
        )

    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        return entity.number != Number.SINGULAR


@resolver(name="proper_noun")
class ProperNounResolver(HeuristicResolver):
    """
    Proper names.

    A name matches an entity holding the same stripped name, or whose
    stripped name ends with it ("Smith" after "John Smith").
    """

    def can_resolve(self, mention: "MentionContext") -> bool:
        tag = mention.head_tag
        if tag:
            return tag.startswith("NNP")
        return mention.name_type is not None

    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        name = strip_noun_phrase(mention.tokens)
        if name is None:
            return False
        for candidate in entity.mentions:
            if not self.can_resolve(candidate):
                continue
            candidate_name = strip_noun_phrase(candidate.tokens)
            if candidate_name is None:
                continue
            if candidate_name == name or candidate_name.endswith(" " + name):
                return True
        return False


@resolver(name="definite_noun")
class DefiniteNounResolver(HeuristicResolver):
    """Definite common noun phrases: "the company" after "a company"."""

    def can_resolve(self, mention: "MentionContext") -> bool:
        tokens = mention.tokens
        tag = mention.head_tag
        return (
            len(tokens) > 1
            and tokens[0].lower() == "the"
            and tag.startswith("NN")
            and not tag.startswith("NNP")
        )

    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        head = mention.head_text.lower()
        return any(
            candidate.head_text.lower() == head and not _is_pronoun_text(candidate)
            for candidate in entity.mentions
        )


def _is_pronoun_text(mention: "MentionContext") -> bool:
    head = mention.head_text
    return bool(patterns.SINGULAR_PRONOUN.match(head) or patterns.PLURAL_PRONOUN.match(head))


class IndefiniteNounResolver(HeuristicResolver):
    """
    Common nouns without a definite determiner or possessive, matched on
    the head word of the candidate's last mention.

    Subclasses set the head tag they handle.
    """

    noun_tag = "NN"

    def __init__(self, entities_back: int = 80, sentences_back: Optional[int] = None) -> None:
        super().__init__(entities_back=entities_back, sentences_back=sentences_back)

    def can_resolve(self, mention: "MentionContext") -> bool:
        tokens = mention.tokens
        return (
            mention.head_tag == self.noun_tag
            and bool(tokens)
            and not patterns.is_definite(tokens[0])
        )

    def accepts_antecedent(self, last: "MentionContext") -> bool:
        return self.can_resolve(last)

    def is_excluded(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        if super().is_excluded(mention, entity):
            return True
        last = entity.last_mention
        return last is not None and not self.accepts_antecedent(last)

    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        last = entity.last_mention
        return last is not None and last.head_text.lower() == mention.head_text.lower()


@resolver(name="common_noun")
class CommonNounResolver(IndefiniteNounResolver):
    """Indefinite singular nouns: "a company" after "a company"."""

    noun_tag = "NN"


@resolver(name="plural_noun")
class PluralNounResolver(IndefiniteNounResolver):
    """Indefinite plural nouns; the antecedent may be any plural noun."""

    noun_tag = "NNS"

    def accepts_antecedent(self, last: "MentionContext") -> bool:
        return last.head_tag == "NNS"


@resolver(name="speech_pronoun")
class SpeechPronounResolver(HeuristicResolver):
    """
    First and second person pronouns (I, you, we) and the names of the
    speakers they stand for, within a single sentence.

    A pronoun may follow another pronoun of the same person, or a name in
    the same sentence when the pronoun is singular. A name may only join
    an entity made of one such pronoun.
    """

    def __init__(self, entities_back: int = 30, sentences_back: Optional[int] = 0) -> None:
        super().__init__(entities_back=entities_back, sentences_back=sentences_back)

    def can_resolve(self, mention: "MentionContext") -> bool:
        tag = mention.head_tag
        if tag.startswith("NNP"):
            return True
        return _is_pronoun(mention) and bool(patterns.SPEECH_PRONOUN.match(mention.head_text))

    def is_excluded(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        if super().is_excluded(mention, entity):
            return True
        last = entity.last_mention
        if last is None or not self.can_resolve(last):
            return True
        if mention.head_tag.startswith("NNP"):
            return last.head_tag.startswith("NNP") or entity.mention_count > 1
        if last.head_tag.startswith("NNP"):
            return last.sentence_index != mention.sentence_index
        return False

    def is_compatible(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        last = entity.last_mention
        if mention.head_tag.startswith("NNP"):
            return patterns.speech_person(last.head_text) in _SPEAKER_PERSONS
        person = patterns.speech_person(mention.head_text)
        if last.head_tag.startswith("NNP"):
            return person in _SPEAKER_PERSONS
        return person == patterns.speech_person(last.head_text)


@resolver(name="gold_label")
class GoldLabelResolver(Resolver):
    """
    Resolves every mention by its gold label.

    Used last in TRAIN cascades so that labeled mentions always reach their
    annotated entity.
    """

    def __init__(self, entities_back: int = 30) -> None:
        super().__init__(entities_back=entities_back)

    def can_resolve(self, mention: "MentionContext") -> bool:
        return True

    def resolve(
        self, mention: "MentionContext", model: "DiscourseModel"
    ) -> Optional["DiscourseEntity"]:
        return self.retain(mention, model)


DEFAULT_CASCADE = [
    "singular_pronoun",
    "proper_noun",
    "definite_noun",
    "plural_pronoun",
    "plural_noun",
    "common_noun",
    "speech_pronoun",
]

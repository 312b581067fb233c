"""English word patterns used by resolvers and feature classifiers."""

from __future__ import annotations

import re

SINGULAR_THIRD_PERSON_PRONOUN = re.compile(
    r"^(he|she|it|him|her|his|hers|its|himself|herself|itself)$", re.IGNORECASE
)
PLURAL_THIRD_PERSON_PRONOUN = re.compile(
    r"^(they|their|theirs|them|themselves)$", re.IGNORECASE
)
SPEECH_PRONOUN = re.compile(r"^(I|me|my|you|your|we|us|our|ours)$", re.IGNORECASE)

MALE_PRONOUN = re.compile(r"^(he|him|his|himself)$", re.IGNORECASE)
FEMALE_PRONOUN = re.compile(r"^(she|her|hers|herself)$", re.IGNORECASE)
NEUTER_PRONOUN = re.compile(r"^(it|its|itself)$", re.IGNORECASE)

SINGULAR_PRONOUN = re.compile(
    r"^(I|me|my|he|she|it|him|her|his|hers|its|himself|herself|itself)$", re.IGNORECASE
)
PLURAL_PRONOUN = re.compile(
    r"^(we|us|our|ours|they|their|theirs|them|themselves)$", re.IGNORECASE
)

# Case-sensitive: "Dr.", "Mr", "Mrs" but not "Smith"
HONORIFIC = re.compile(r"[A-Z][a-z]+\.$|^[A-Z][b-df-hj-np-tv-xz]+$")
CORPORATE_DESIGNATOR = re.compile(r"[a-z]\.$|^[A-Z][b-df-hj-np-tv-xz]+$|^Co(rp)?$")

MALE_HONORIFICS = {"Mr", "Mr."}
FEMALE_HONORIFICS = {"Mrs", "Mrs.", "Ms", "Ms."}

DETERMINERS = {"the", "a", "an", "this", "that", "these", "those"}


def pronoun_gender(word: str) -> str:
    """Return "m", "f", "n" or "u" for a pronoun."""
    if MALE_PRONOUN.match(word):
        return "m"
    if FEMALE_PRONOUN.match(word):
        return "f"
    if NEUTER_PRONOUN.match(word):
        return "n"
    return "u"


FIRST_PERSON_SINGULAR = re.compile(r"^(I|me|my)$", re.IGNORECASE)
FIRST_PERSON_PLURAL = re.compile(r"^(we|us|our|ours)$", re.IGNORECASE)
SECOND_PERSON = re.compile(r"^(you|your)$", re.IGNORECASE)

POSSESSIVE_PRONOUN = re.compile(r"^(my|your|his|her|its|our|their)$", re.IGNORECASE)
DEFINITE_DETERMINERS = {"the", "these", "those"}


def speech_person(word: str) -> str:
    """Return "1s", "1p", "2" or "" for a first or second person pronoun."""
    if FIRST_PERSON_SINGULAR.match(word):
        return "1s"
    if FIRST_PERSON_PLURAL.match(word):
        return "1p"
    if SECOND_PERSON.match(word):
        return "2"
    return ""


def is_definite(token: str) -> bool:
    """True for a determiner or possessive that makes a noun phrase definite."""
    return token.lower() in DEFINITE_DETERMINERS or bool(POSSESSIVE_PRONOUN.match(token))

"""Resolvers: pluggable strategies proposing antecedents for mentions."""

from .base import Resolver
from .result import ClaimStatus, ResolverClaim
from .registry import resolver, get_resolver, list_resolvers, clear_registry

# Import heuristics to trigger @resolver decorator registration
from .heuristic import (
    DEFAULT_CASCADE,
    CommonNounResolver,
    DefiniteNounResolver,
    GoldLabelResolver,
    HeuristicResolver,
    IndefiniteNounResolver,
    PluralNounResolver,
    PluralPronounResolver,
    ProperNounResolver,
    SingularPronounResolver,
    SpeechPronounResolver,
)

__all__ = [
    "Resolver",
    "ClaimStatus",
    "ResolverClaim",
    "resolver",
    "get_resolver",
    "list_resolvers",
    "clear_registry",
    "DEFAULT_CASCADE",
    "CommonNounResolver",
    "DefiniteNounResolver",
    "GoldLabelResolver",
    "HeuristicResolver",
    "IndefiniteNounResolver",
    "PluralNounResolver",
    "PluralPronounResolver",
    "ProperNounResolver",
    "SingularPronounResolver",
    "SpeechPronounResolver",
]

"""Coreference linker package."""

__version__ = "0.1.0"
__author__ = "coref-linker"

from .errors import CorefLinkerError, DiscourseModelError, MentionOrderError
from .linker import Linker, LinkerConfig, LinkerMode
from .mention import Gender, Mention, MentionContext, Number
from .resolver import Resolver, ResolverClaim, resolver
from .state import DiscourseElement, DiscourseEntity, DiscourseModel

__all__ = [
    "CorefLinkerError",
    "DiscourseModelError",
    "MentionOrderError",
    "Linker",
    "LinkerConfig",
    "LinkerMode",
    "Gender",
    "Mention",
    "MentionContext",
    "Number",
    "Resolver",
    "ResolverClaim",
    "resolver",
    "DiscourseElement",
    "DiscourseEntity",
    "DiscourseModel",
]

"""Discourse state: entities and the recency-ordered model holding them."""

from .element import DiscourseElement
from .entity import DiscourseEntity
from .model import DiscourseModel

__all__ = [
    "DiscourseElement",
    "DiscourseEntity",
    "DiscourseModel",
]

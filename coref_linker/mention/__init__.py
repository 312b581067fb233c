"""Mentions and the contexts built from them."""

from .models import Gender, GenderResult, Mention, MentionContext, Number, NumberResult
from .context import build_mention_contexts

__all__ = [
    "Gender",
    "GenderResult",
    "Mention",
    "MentionContext",
    "Number",
    "NumberResult",
    "build_mention_contexts",
]

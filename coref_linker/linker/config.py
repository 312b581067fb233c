"""Linker configuration."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..resolver.heuristic import DEFAULT_CASCADE
from .mode import LinkerMode


class LinkerConfig(BaseModel):
    """Configuration for a coreference linker."""

    mode: LinkerMode = LinkerMode.TEST

    # Combine coreferent mentions into one entity (False: co-index by id only)
    use_discourse_model: bool = True

    # Drop mentions no resolver applies to instead of starting singletons
    remove_unresolved_mentions: bool = True

    # Cascade position of the singular-pronoun resolver; None picks the
    # first resolver registered with singular_pronoun=True
    singular_pronoun_index: Optional[int] = Field(default=None, ge=0)

    # Passed to DiscourseModel.merge_entities; currently has no effect
    merge_confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    include_trace: bool = True

    # Registry names used by Linker.from_config, in cascade order
    resolvers: List[str] = Field(default_factory=lambda: list(DEFAULT_CASCADE))

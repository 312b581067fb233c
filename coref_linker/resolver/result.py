"""Tagged results of asking one resolver about one mention."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..state.entity import DiscourseEntity


class ClaimStatus(Enum):
    """Outcome of a resolver for a mention."""

    MATCHED = auto()  # Resolver names an existing entity
    NO_MATCH = auto()  # Resolver applies but found no antecedent
    NOT_APPLICABLE = auto()  # can_resolve() was False


@dataclass(frozen=True)
class ResolverClaim:
    """A resolver's answer for a single mention."""

    resolver_name: str
    status: ClaimStatus
    entity: Optional["DiscourseEntity"] = None

    @property
    def matched(self) -> bool:
        return self.status == ClaimStatus.MATCHED

    @classmethod
    def from_entity(
        cls, resolver_name: str, entity: Optional["DiscourseEntity"]
    ) -> ResolverClaim:
        if entity is None:
            return cls(resolver_name, ClaimStatus.NO_MATCH)
        return cls(resolver_name, ClaimStatus.MATCHED, entity)

    @classmethod
    def not_applicable(cls, resolver_name: str) -> ResolverClaim:
        return cls(resolver_name, ClaimStatus.NOT_APPLICABLE)

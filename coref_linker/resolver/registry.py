"""Resolver registration and lookup."""

from __future__ import annotations

from typing import Any

# Global registry: resolver name -> resolver class
_RESOLVER_REGISTRY: dict[str, type] = {}


def resolver(name: str, singular_pronoun: bool = False) -> Any:
    """
    Decorator for resolver registration.

    Usage:
        @resolver(name="singular_pronoun", singular_pronoun=True)
        class SingularPronounResolver(HeuristicResolver):
            def can_resolve(self, mention): ...
            def is_compatible(self, mention, entity): ...
    """

    def decorator(cls: type) -> type:
        cls._resolver_name = name
        cls._singular_pronoun = singular_pronoun
        _RESOLVER_REGISTRY[name] = cls
        return cls

    return decorator


def get_resolver(name: str) -> type:
    """
    Get the resolver class registered under a name.

    Raises:
        KeyError: if no resolver has that name
    """
    try:
        return _RESOLVER_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"No resolver registered as {name!r}; known: {sorted(_RESOLVER_REGISTRY)}"
        ) from None


def clear_registry() -> None:
    """Clear the resolver registry. Useful for testing."""
    _RESOLVER_REGISTRY.clear()


def list_resolvers() -> list[str]:
    """List all registered resolver names."""
    return list(_RESOLVER_REGISTRY.keys())

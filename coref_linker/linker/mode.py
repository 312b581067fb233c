"""Modes a linker can run in."""

from __future__ import annotations

from enum import Enum


class LinkerMode(str, Enum):
    """Fixed for the lifetime of a linker."""

    TEST = "test"  # Apply resolvers to unlabeled text
    TRAIN = "train"  # Gather labeled observations for the resolvers
    EVAL = "eval"  # Apply resolvers to labeled text; scoring happens elsewhere
    SIM = "sim"  # Build mention contexts only, no gender/number, no resolution

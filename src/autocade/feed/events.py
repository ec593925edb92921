"""
Discrete events produced by the feed reconciler.
These are the only input the rule engines consume.
"""
from dataclasses import dataclass
from typing import Union

from autocade.core import Throw


@dataclass(frozen=True)
class ThrowAdded:
    """A new dart appeared at `index` (0-2) of the current turn."""
    throw: Throw
    index: int


@dataclass(frozen=True)
class ThrowRemoved:
    """The last dart of the current turn was logically undone."""
    throw: Throw


@dataclass(frozen=True)
class TurnEnded:
    """The board was cleared after a finished takeout (or reset)."""


ReconciledEvent = Union[ThrowAdded, ThrowRemoved, TurnEnded]

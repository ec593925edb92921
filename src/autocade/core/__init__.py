"""
Core module - shared data types and YAML I/O.
"""
from .types import (
    Segment,
    Miss,
    Numbered,
    Bull,
    parse_segment,
    Bed,
    Throw,
    TakeoutPhase,
    BoardSnapshot,
    Player,
    BoardGeometry,
    BULL_NUMBER,
    MAX_THROWS_PER_TURN,
)
from .io_utils import (
    atomic_write_yaml,
    load_yaml,
)

__all__ = [
    # Types
    "Segment",
    "Miss",
    "Numbered",
    "Bull",
    "parse_segment",
    "Bed",
    "Throw",
    "TakeoutPhase",
    "BoardSnapshot",
    "Player",
    "BoardGeometry",
    "BULL_NUMBER",
    "MAX_THROWS_PER_TURN",
    # I/O
    "atomic_write_yaml",
    "load_yaml",
]

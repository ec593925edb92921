"""
Core data types for the autocade scoring core.
Defines contracts between the feed, board and game modules.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)

# Numbered segment names reported by the board bridge (e.g. "S20", "D16", "T19")
SEGMENT_NAME_PATTERN = re.compile(r"^([STD])(\d+)$")

BULL_NUMBER = 25
MAX_THROWS_PER_TURN = 3


@dataclass(frozen=True)
class Segment(ABC):
    """
    Base class of the closed segment union: Miss | Numbered | Bull.
    Subclasses provide `number` and `multiplier`.
    """

    @property
    def points(self) -> int:
        return self.number * self.multiplier

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    def is_double(self) -> bool:
        """True for segments that finish a double-out leg."""
        return self.multiplier == 2

    @property
    def is_bull(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Miss(Segment):
    """Dart outside the scoring area (or an unreadable segment)."""

    @property
    def number(self) -> int:
        return 0

    @property
    def multiplier(self) -> int:
        return 0

    @property
    def name(self) -> str:
        return "Miss"


@dataclass(frozen=True)
class Numbered(Segment):
    """Sector 1-20 hit as single, double or triple."""
    number: int
    multiplier: int = 1

    def __post_init__(self):
        if not 1 <= self.number <= 20:
            raise ValueError(f"Sector number must be 1-20, got {self.number}")
        if self.multiplier not in (1, 2, 3):
            raise ValueError(f"Multiplier must be 1, 2 or 3, got {self.multiplier}")

    @property
    def name(self) -> str:
        prefix = {1: "S", 2: "D", 3: "T"}[self.multiplier]
        return f"{prefix}{self.number}"


@dataclass(frozen=True)
class Bull(Segment):
    """Outer bull (multiplier 1, 25 points) or inner bull (multiplier 2, 50 points)."""
    multiplier: int = 1

    def __post_init__(self):
        if self.multiplier not in (1, 2):
            raise ValueError(f"Bull multiplier must be 1 or 2, got {self.multiplier}")

    @property
    def number(self) -> int:
        return BULL_NUMBER

    @property
    def name(self) -> str:
        return "Bull" if self.multiplier == 2 else "25"

    @property
    def is_bull(self) -> bool:
        return True


def parse_segment(
        name: Optional[str],
        number: Optional[int] = None,
        multiplier: Optional[int] = None
) -> Segment:
    """
    Parse a segment reported by the board bridge.

    Args:
        name: Segment name ("S20", "D16", "T19", "Miss", "25", "Bull")
        number: Sector number from the feed (25 for bull), used as fallback
        multiplier: Multiplier from the feed, used for the bull fallback

    Returns:
        Parsed segment. Unreadable input is logged and treated as a Miss.
    """
    if name == "Miss":
        return Miss()

    if name:
        match = SEGMENT_NAME_PATTERN.match(name)
        if match:
            prefix, num_str = match.groups()
            num = int(num_str)
            mult = {"S": 1, "D": 2, "T": 3}[prefix]
            try:
                if num == BULL_NUMBER:
                    return Bull(mult)
                return Numbered(num, mult)
            except ValueError as e:
                logger.warning(f"Invalid segment {name!r}: {e}")
                return Miss()

        if name == "Bull":
            return Bull(2)
        if name == "25":
            return Bull(1)

    if number == BULL_NUMBER:
        return Bull(2 if multiplier == 2 else 1)

    logger.warning(f"Unparseable segment {name!r} (number={number}), scoring as miss")
    return Miss()


class Bed(Enum):
    """Board region a dart landed in, as reported by the feed."""
    SINGLE_INNER = "SingleInner"
    SINGLE_OUTER = "SingleOuter"
    SINGLE = "Single"
    DOUBLE = "Double"
    TRIPLE = "Triple"
    OUTSIDE = "Outside"
    UNKNOWN = "Unknown"

    @classmethod
    def from_feed(cls, value: Optional[str]) -> "Bed":
        for bed in cls:
            if bed.value == value:
                return bed
        return cls.UNKNOWN

    @classmethod
    def for_segment(cls, segment: Segment) -> "Bed":
        """Default bed for a segment when the feed does not report one."""
        if isinstance(segment, Miss):
            return cls.OUTSIDE
        if isinstance(segment, Bull):
            return cls.DOUBLE if segment.multiplier == 2 else cls.SINGLE
        return {1: cls.SINGLE, 2: cls.DOUBLE, 3: cls.TRIPLE}[segment.multiplier]


@dataclass(frozen=True)
class Throw:
    """
    A single dart on the board.
    Coordinates are presentation-only and ignored by the rule engines.
    """
    segment: Segment
    bed: Bed = Bed.UNKNOWN
    coords: Optional[Tuple[float, float]] = None

    @property
    def name(self) -> str:
        return self.segment.name

    @property
    def points(self) -> int:
        return self.segment.points

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Throw":
        """Build a throw from the bridge's JSON representation."""
        seg = data.get("segment") or {}
        segment = parse_segment(seg.get("name"), seg.get("number"), seg.get("multiplier"))

        coords = data.get("coords")
        xy = None
        if isinstance(coords, dict) and "x" in coords and "y" in coords:
            xy = (float(coords["x"]), float(coords["y"]))

        bed = Bed.from_feed(seg.get("bed"))
        if bed == Bed.UNKNOWN:
            bed = Bed.for_segment(segment)
        return cls(segment=segment, bed=bed, coords=xy)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "segment": {
                "name": self.segment.name,
                "number": self.segment.number,
                "bed": self.bed.value,
                "multiplier": self.segment.multiplier,
            }
        }
        if self.coords is not None:
            data["coords"] = {"x": self.coords[0], "y": self.coords[1]}
        return data


class TakeoutPhase(Enum):
    """Physical takeout progress derived from the feed's status/event strings."""
    NONE = "none"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


# Status/event strings used by the board bridge
UNDO_EVENTS = ("Throw removed",)
TAKEOUT_IN_PROGRESS_STATUSES = ("Takeout", "Takeout in progress")
TAKEOUT_FINISHED_STATUSES = ("Takeout finished",)
TAKEOUT_FINISHED_EVENTS = ("Takeout finished", "Reset")


@dataclass(frozen=True)
class BoardSnapshot:
    """
    Full restatement of the current turn's throws, as sent by the board bridge.

    The raw status/event strings are classified once into the tagged fields
    `undo` and `takeout` so the reconciler never string-matches.
    """
    connected: bool = True
    running: bool = True
    status: str = ""
    event: str = ""
    throws: Tuple[Throw, ...] = ()
    undo: bool = False
    takeout: TakeoutPhase = TakeoutPhase.NONE

    @property
    def throw_names(self) -> List[str]:
        return [t.name for t in self.throws]

    @staticmethod
    def classify(status: str, event: str) -> Tuple[bool, TakeoutPhase]:
        """Map feed status/event strings to (undo, takeout phase)."""
        undo = event in UNDO_EVENTS
        if status in TAKEOUT_FINISHED_STATUSES or event in TAKEOUT_FINISHED_EVENTS:
            takeout = TakeoutPhase.FINISHED
        elif status in TAKEOUT_IN_PROGRESS_STATUSES:
            takeout = TakeoutPhase.IN_PROGRESS
        else:
            takeout = TakeoutPhase.NONE
        return undo, takeout

    @classmethod
    def create(
            cls,
            throws: List[Throw],
            status: str = "Throw",
            event: str = "Throw detected",
            connected: bool = True,
            running: bool = True
    ) -> "BoardSnapshot":
        undo, takeout = cls.classify(status, event)
        return cls(
            connected=connected,
            running=running,
            status=status,
            event=event,
            throws=tuple(throws),
            undo=undo,
            takeout=takeout,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardSnapshot":
        """Parse the bridge's JSON message."""
        throws = [Throw.from_dict(t) for t in (data.get("throws") or [])]
        return cls.create(
            throws,
            status=data.get("status") or "",
            event=data.get("event") or "",
            connected=bool(data.get("connected", True)),
            running=bool(data.get("running", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "running": self.running,
            "status": self.status,
            "event": self.event,
            "numThrows": len(self.throws),
            "throws": [t.to_dict() for t in self.throws],
        }


@dataclass
class Player:
    """Roster entry. Rule engines reference players by id only."""
    id: str
    name: str
    is_active: bool = True


@dataclass
class BoardGeometry:
    """
    Dartboard geometric parameters (official dimensions).
    All measurements in millimeters unless specified.
    """
    # Radii (from center)
    inner_bull_radius: float = 6.35  # Double bull (50 points)
    outer_bull_radius: float = 15.9  # Single bull (25 points)
    triple_inner_radius: float = 99.0  # Inner edge of triple ring
    triple_outer_radius: float = 107.0  # Outer edge of triple ring
    double_inner_radius: float = 162.0  # Inner edge of double ring
    double_outer_radius: float = 170.0  # Outer edge of double ring (board edge)

    # Sector configuration
    num_sectors: int = 20
    sector_angle: float = 18.0  # Degrees per sector
    sector_sequence: Tuple[int, ...] = field(default=(20, 1, 18, 4, 13, 6, 10, 15, 2, 17,
                                                      3, 19, 7, 16, 8, 11, 14, 9, 12, 5))

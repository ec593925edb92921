"""
Dartboard geometry calculations and sector mapping.

Throw coordinates from the board bridge are normalized: the board centre is
(0, 0), 1.0 is the outer edge of the double ring, y points up and sector 20
sits at the top.
"""
import numpy as np
from typing import Dict, Optional, Tuple
import logging

from autocade.core import BoardGeometry, Bed, Bull, Miss, Numbered, Segment

logger = logging.getLogger(__name__)

# Radius used for darts that land outside the double ring
MISS_RADIUS = 1.1


class SegmentMapper:
    """
    Maps normalized board coordinates to segments and back.

    Uses official dartboard dimensions and sector sequence; radii are
    expressed as a fraction of the double ring's outer radius.
    """

    def __init__(self, board_geometry: Optional[BoardGeometry] = None):
        """
        Initialize segment mapper.

        Args:
            board_geometry: Board dimensions (default: BoardGeometry())
        """
        self.geometry = board_geometry or BoardGeometry()
        edge = self.geometry.double_outer_radius

        self.inner_bull_radius = self.geometry.inner_bull_radius / edge
        self.outer_bull_radius = self.geometry.outer_bull_radius / edge
        self.triple_inner_radius = self.geometry.triple_inner_radius / edge
        self.triple_outer_radius = self.geometry.triple_outer_radius / edge
        self.double_inner_radius = self.geometry.double_inner_radius / edge
        self.double_outer_radius = 1.0

    def to_polar(self, x: float, y: float) -> Tuple[float, float]:
        """
        Convert board coordinates to polar coordinates.

        Returns:
            (radius, angle) with angle in degrees, 0° = top, clockwise
        """
        radius = float(np.hypot(x, y))
        math_angle = np.degrees(np.arctan2(y, x))
        board_angle = (90.0 - math_angle) % 360.0
        return radius, float(board_angle)

    def angle_to_sector(self, angle: float) -> int:
        """Sector number (1-20) for a board angle."""
        # Sector 20 spans [-9°, 9°)
        adjusted = (angle + self.geometry.sector_angle / 2) % 360
        idx = int(adjusted / self.geometry.sector_angle) % self.geometry.num_sectors
        return self.geometry.sector_sequence[idx]

    def radius_to_bed(self, radius: float) -> Bed:
        """Bed for a normalized radius (bull rings are reported as DOUBLE/SINGLE)."""
        if radius <= self.inner_bull_radius:
            return Bed.DOUBLE
        if radius <= self.outer_bull_radius:
            return Bed.SINGLE
        if radius < self.triple_inner_radius:
            return Bed.SINGLE_INNER
        if radius <= self.triple_outer_radius:
            return Bed.TRIPLE
        if radius < self.double_inner_radius:
            return Bed.SINGLE_OUTER
        if radius <= self.double_outer_radius:
            return Bed.DOUBLE
        return Bed.OUTSIDE

    def segment_at(self, x: float, y: float) -> Tuple[Segment, Bed]:
        """
        Score a dart from its coordinates.

        Returns:
            (segment, bed) for the position
        """
        radius, angle = self.to_polar(x, y)

        if radius <= self.inner_bull_radius:
            return Bull(2), Bed.DOUBLE
        if radius <= self.outer_bull_radius:
            return Bull(1), Bed.SINGLE

        bed = self.radius_to_bed(radius)
        if bed == Bed.OUTSIDE:
            return Miss(), bed

        multiplier = {Bed.TRIPLE: 3, Bed.DOUBLE: 2}.get(bed, 1)
        segment = Numbered(self.angle_to_sector(angle), multiplier)

        logger.debug(f"({x:.3f}, {y:.3f}) → r={radius:.3f}, θ={angle:.1f}° → {segment.name}")
        return segment, bed

    def ring_centres(self) -> Dict[Bed, float]:
        """Radius at the middle of each numbered bed."""
        return {
            Bed.SINGLE_INNER: (self.outer_bull_radius + self.triple_inner_radius) / 2,
            Bed.TRIPLE: (self.triple_inner_radius + self.triple_outer_radius) / 2,
            Bed.SINGLE_OUTER: (self.triple_outer_radius + self.double_inner_radius) / 2,
            Bed.SINGLE: (self.triple_outer_radius + self.double_inner_radius) / 2,
            Bed.DOUBLE: (self.double_inner_radius + self.double_outer_radius) / 2,
        }

    def coords_for(self, segment: Segment, bed: Optional[Bed] = None) -> Tuple[float, float]:
        """
        Centre coordinates of a segment's bed.

        Args:
            segment: Segment to locate
            bed: Bed for single hits (inner or outer single); defaults to the segment's bed
        """
        if isinstance(segment, Bull):
            if segment.multiplier == 2:
                return 0.0, 0.0
            radius = (self.inner_bull_radius + self.outer_bull_radius) / 2
            return 0.0, radius

        if isinstance(segment, Miss):
            return 0.0, MISS_RADIUS

        bed = bed or Bed.for_segment(segment)
        radius = self.ring_centres().get(bed, self.ring_centres()[Bed.SINGLE])

        idx = self.geometry.sector_sequence.index(segment.number)
        board_angle = idx * self.geometry.sector_angle
        theta = np.radians(90.0 - board_angle)
        return float(radius * np.cos(theta)), float(radius * np.sin(theta))

"""
TrueScale Measurement Engine - Confidence Scoring
Heuristic trust score for candidate surface hits
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

from .ar_models import Plane, PlaneType, Point, Trackable, TrackingState
from .errors import InvalidConfiguration

BASE_SCORE = 0.5
TRACKING_BONUS = 0.3
PLANE_BONUS = 0.4
HORIZONTAL_UP_BONUS = 0.2
SURFACE_NORMAL_POINT_BONUS = 0.2
DEPTH_BONUS = 0.1
MAX_PROXIMITY_BONUS = 0.2
DEFAULT_DISTANCE_CAP = 2.0


@dataclass(frozen=True)
class ScoringContext:
    """Inputs for scoring one hit; distance is hit-to-camera in meters, None if unknown"""
    tracking_state: TrackingState
    trackable: Trackable
    depth_available: bool = False
    distance_to_camera: Optional[float] = None


class ConfidenceScorer:
    """
    Additive confidence ladder, clamped to [0, 1] only at the end

    The scorer is policy-free: acceptance thresholds belong to the caller.
    Bonuses are not saturated individually, so a tracked horizontal plane
    already exceeds 1.0 before the clamp.
    """

    def __init__(self, distance_cap: float = DEFAULT_DISTANCE_CAP):
        if not distance_cap > 0:
            raise InvalidConfiguration(f"Distance cap must be positive, got {distance_cap}")
        self.distance_cap = distance_cap

    def score(self, context: ScoringContext) -> float:
        raw = sum(self.breakdown(context).values())
        if math.isnan(raw):
            return 0.0
        return max(0.0, min(1.0, raw))

    def breakdown(self, context: ScoringContext) -> Dict[str, float]:
        """Individual ladder contributions, before clamping"""
        components = {'base': BASE_SCORE}

        if context.tracking_state is TrackingState.TRACKING:
            components['tracking'] = TRACKING_BONUS

        trackable = context.trackable
        if isinstance(trackable, Plane):
            components['plane'] = PLANE_BONUS
            if trackable.plane_type is PlaneType.HORIZONTAL_UPWARD_FACING:
                components['horizontal_up'] = HORIZONTAL_UP_BONUS
        elif isinstance(trackable, Point) and trackable.has_surface_normal:
            components['surface_normal_point'] = SURFACE_NORMAL_POINT_BONUS

        if context.depth_available:
            components['depth'] = DEPTH_BONUS

        components['proximity'] = self._proximity_bonus(context.distance_to_camera)
        return components

    def _proximity_bonus(self, distance_to_camera: Optional[float]) -> float:
        """Closer hits are more accurate; linear bonus that vanishes at the cap"""
        if distance_to_camera is None or not (0.0 <= distance_to_camera < self.distance_cap):
            return 0.0
        return MAX_PROXIMITY_BONUS * (self.distance_cap - distance_to_camera) / self.distance_cap

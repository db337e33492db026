"""
TrueScale Measurement Engine - Surface Registration
Resolves a screen tap into a usable surface hit, retrying with screen-space jitter
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .ar_models import HitCandidate, Plane, PlaneType, Point

logger = logging.getLogger(__name__)

HitTestFn = Callable[[float, float], Iterable[HitCandidate]]

# Tried in order after the direct hit misses
JITTER_OFFSETS: Tuple[Tuple[float, float], ...] = (
    (-30.0, 0.0),
    (30.0, 0.0),
    (0.0, -30.0),
    (0.0, 30.0),
    (-20.0, -20.0),
    (20.0, 20.0),
)

NO_USABLE_HIT_MESSAGE = (
    "No usable hit; try moving device slowly over surface or enable more texture"
)

PLANE_TYPE_WEIGHTS = {
    PlaneType.HORIZONTAL_UPWARD_FACING: 3.0,
    PlaneType.HORIZONTAL_DOWNWARD_FACING: 2.0,
    PlaneType.VERTICAL: 1.0,
}
DEFAULT_PLANE_TYPE_WEIGHT = 0.5


@dataclass(frozen=True)
class RegistrationFailure:
    """NoUsableHit: every attempt missed a usable trackable"""
    reason: str
    attempts: int


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of one registration; exactly one of hit / failure is set"""
    hit: Optional[HitCandidate] = None
    failure: Optional[RegistrationFailure] = None
    attempts: int = 0

    @property
    def success(self) -> bool:
        return self.hit is not None

    @property
    def message(self) -> Optional[str]:
        """Diagnostic text: the failure reason, or which jitter offset registered"""
        if self.failure:
            return self.failure.reason
        if self.hit and self.hit.used_jitter:
            dx, dy = self.hit.screen_offset
            return f"Registered with jitter dx={dx:g} dy={dy:g}"
        return None


def is_hit_usable(candidate: HitCandidate) -> bool:
    """Trackable usability predicate applied to every hit-test candidate"""
    trackable = candidate.trackable
    if isinstance(trackable, Plane):
        return (trackable.is_tracking and
                not trackable.is_subsumed and
                trackable.is_pose_in_polygon(candidate.world_pose))
    if isinstance(trackable, Point):
        return trackable.is_tracking and trackable.has_surface_normal
    return trackable.is_tracking


class SurfaceRegistrar:
    """
    Finds a usable surface hit for a screen coordinate

    The direct ray is tried first; if it yields nothing usable, each jitter
    offset is tried in order and the first usable hit wins. A miss is an
    ordinary result, not an error.
    """

    def __init__(self, offsets: Sequence[Tuple[float, float]] = JITTER_OFFSETS):
        self.offsets = tuple((float(dx), float(dy)) for dx, dy in offsets)

    def register(self, hit_test_fn: HitTestFn, screen_x: float, screen_y: float) -> RegistrationResult:
        attempts = 0
        for dx, dy in ((0.0, 0.0),) + self.offsets:
            attempts += 1
            try:
                candidate = self._first_usable(hit_test_fn(screen_x + dx, screen_y + dy))
            except Exception as e:
                logger.warning(f"Surface registration failed: {e}")
                return RegistrationResult(
                    failure=RegistrationFailure(reason=f"Exception: {e}", attempts=attempts),
                    attempts=attempts
                )

            if candidate is not None:
                if attempts > 1:
                    logger.debug(f"Registered with jitter dx={dx:g} dy={dy:g}")
                return RegistrationResult(
                    hit=replace(candidate, screen_offset=(dx, dy)),
                    attempts=attempts
                )

        logger.debug(f"No usable hit at ({screen_x:.1f}, {screen_y:.1f}) after {attempts} attempts")
        return RegistrationResult(
            failure=RegistrationFailure(reason=NO_USABLE_HIT_MESSAGE, attempts=attempts),
            attempts=attempts
        )

    @staticmethod
    def _first_usable(candidates: Iterable[HitCandidate]) -> Optional[HitCandidate]:
        return next((c for c in candidates if is_hit_usable(c)), None)


def select_measurable_planes(planes: Iterable[Plane], min_extent: float = 0.1) -> List[Plane]:
    """
    Planes worth showing as measurement targets, best first

    Keeps tracked, top-level planes larger than min_extent on both axes and
    ranks them by area weighted by orientation (floors and tables first).
    """
    measurable = [
        plane for plane in planes
        if plane.is_tracking and
        not plane.is_subsumed and
        plane.extent_x > min_extent and
        plane.extent_z > min_extent
    ]
    return sorted(
        measurable,
        key=lambda p: p.extent_x * p.extent_z * PLANE_TYPE_WEIGHTS.get(p.plane_type, DEFAULT_PLANE_TYPE_WEIGHT),
        reverse=True
    )

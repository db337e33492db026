"""
TrueScale Measurement Engine - AR Data Models
Tracking state, poses, trackables and hit-test candidates supplied by the AR runtime
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .geometry import Vector3


class TrackingState(Enum):
    """Tracking state reported by the AR runtime"""
    TRACKING = "tracking"
    PAUSED = "paused"
    STOPPED = "stopped"
    UNKNOWN = "unknown"


class PlaneType(Enum):
    HORIZONTAL_UPWARD_FACING = "horizontal_upward_facing"
    HORIZONTAL_DOWNWARD_FACING = "horizontal_downward_facing"
    VERTICAL = "vertical"


class PointOrientationMode(Enum):
    INITIALIZED_TO_IDENTITY = "initialized_to_identity"
    ESTIMATED_SURFACE_NORMAL = "estimated_surface_normal"


@dataclass(frozen=True)
class Pose:
    """World-space pose; rotation is an [x, y, z, w] quaternion"""
    position: Vector3
    rotation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)

    def __post_init__(self):
        if len(self.rotation) != 4:
            raise ValueError("Rotation must be quaternion (4D vector)")

    @classmethod
    def at(cls, x: float, y: float, z: float) -> "Pose":
        return cls(Vector3(x, y, z))


@dataclass(eq=False)
class Trackable:
    """Real-world feature detected by the AR runtime"""
    tracking_state: TrackingState = TrackingState.TRACKING

    @property
    def is_tracking(self) -> bool:
        return self.tracking_state is TrackingState.TRACKING


@dataclass(eq=False)
class Plane(Trackable):
    """
    Detected planar surface

    The boundary polygon holds world-space (x, z) vertices. Without a
    polygon the plane is treated as the extent rectangle around its center.
    """
    center_pose: Pose = field(default_factory=lambda: Pose(Vector3.ZERO))
    extent_x: float = 0.0
    extent_z: float = 0.0
    plane_type: PlaneType = PlaneType.HORIZONTAL_UPWARD_FACING
    subsumed_by: Optional["Plane"] = None
    polygon: Optional[List[Tuple[float, float]]] = None

    @property
    def is_subsumed(self) -> bool:
        return self.subsumed_by is not None

    def is_pose_in_polygon(self, pose: Pose) -> bool:
        px, pz = pose.position.x, pose.position.z
        if self.polygon:
            return _point_in_polygon(px, pz, self.polygon)

        center = self.center_pose.position
        return (abs(px - center.x) <= self.extent_x / 2.0 and
                abs(pz - center.z) <= self.extent_z / 2.0)


@dataclass(eq=False)
class Point(Trackable):
    """Feature point, optionally with an estimated surface normal"""
    orientation_mode: PointOrientationMode = PointOrientationMode.INITIALIZED_TO_IDENTITY

    @property
    def has_surface_normal(self) -> bool:
        return self.orientation_mode is PointOrientationMode.ESTIMATED_SURFACE_NORMAL


@dataclass(eq=False)
class OtherTrackable(Trackable):
    """Any trackable that is neither a plane nor a point (e.g. augmented image)"""
    kind: str = "other"


@dataclass(frozen=True)
class HitCandidate:
    """Raw hit-test intersection; screen_offset records the jitter that found it"""
    trackable: Trackable
    world_pose: Pose
    screen_offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def position(self) -> Vector3:
        return self.world_pose.position

    @property
    def used_jitter(self) -> bool:
        return self.screen_offset != (0.0, 0.0)


def _point_in_polygon(x: float, z: float, polygon: List[Tuple[float, float]]) -> bool:
    """Even-odd ray casting test in the ground plane"""
    inside = False
    count = len(polygon)
    j = count - 1
    for i in range(count):
        xi, zi = polygon[i]
        xj, zj = polygon[j]
        if (zi > z) != (zj > z):
            crossing_x = (xj - xi) * (z - zi) / (zj - zi) + xi
            if x < crossing_x:
                inside = not inside
        j = i
    return inside

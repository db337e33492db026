"""
Shared pytest fixtures for measurement engine tests.

Provides in-memory stand-ins for the AR runtime (frames and anchor factory)
and factories for common trackables and hit candidates.
"""

from __future__ import annotations

import itertools
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import pytest

from measurement_engine.core import (
    AnchorCreationFailed, AnchorRuntime, ARFrame, HitCandidate, MeasurementEngine,
    OtherTrackable, Plane, PlaneType, Point, PointOrientationMode, Pose, TrackingState, Vector3
)
from measurement_engine.utils.config import Settings


# ============================================================================
# AR RUNTIME FAKES
# ============================================================================

class FakeAnchorHandle:
    """Opaque handle handed out by FakeRuntime"""

    _ids = itertools.count(1)

    def __init__(self, pose: Pose):
        self.id = next(self._ids)
        self.pose = pose

    def __repr__(self) -> str:
        return f"FakeAnchorHandle({self.id})"


class FakeRuntime(AnchorRuntime):
    """Records every anchor created and detached"""

    def __init__(self, fail_with: Optional[Exception] = None, return_none: bool = False):
        self.fail_with = fail_with
        self.return_none = return_none
        self.created: List[FakeAnchorHandle] = []
        self.detached: List[FakeAnchorHandle] = []

    def create_anchor(self, pose: Pose):
        if self.fail_with is not None:
            raise self.fail_with
        if self.return_none:
            return None
        handle = FakeAnchorHandle(pose)
        self.created.append(handle)
        return handle

    def detach_anchor(self, handle) -> None:
        self.detached.append(handle)

    @property
    def live(self) -> List[FakeAnchorHandle]:
        detached_ids = {id(h) for h in self.detached}
        return [h for h in self.created if id(h) not in detached_ids]


HitSource = Union[Dict[Tuple[float, float], List[HitCandidate]],
                  Callable[[float, float], Iterable[HitCandidate]]]


class FakeFrame(ARFrame):
    """Frame whose hit tests are served from a coordinate table or a callable"""

    def __init__(self, hits: Optional[HitSource] = None,
                 tracking: TrackingState = TrackingState.TRACKING,
                 camera: Optional[Pose] = None,
                 depth: bool = False):
        self.hits = hits if hits is not None else {}
        self.tracking = tracking
        self.camera = camera
        self.depth = depth
        self.hit_test_calls: List[Tuple[float, float]] = []

    def tracking_state(self) -> TrackingState:
        return self.tracking

    def hit_test(self, screen_x: float, screen_y: float) -> Iterable[HitCandidate]:
        self.hit_test_calls.append((screen_x, screen_y))
        if callable(self.hits):
            return self.hits(screen_x, screen_y)
        return list(self.hits.get((screen_x, screen_y), []))

    def camera_pose(self) -> Optional[Pose]:
        return self.camera

    def depth_available(self) -> bool:
        return self.depth


# ============================================================================
# TRACKABLE AND HIT FACTORIES
# ============================================================================

def make_plane(tracking: TrackingState = TrackingState.TRACKING,
               plane_type: PlaneType = PlaneType.HORIZONTAL_UPWARD_FACING,
               extent: float = 10.0,
               subsumed_by: Optional[Plane] = None,
               polygon=None) -> Plane:
    return Plane(
        tracking_state=tracking,
        center_pose=Pose.at(0.0, 0.0, 0.0),
        extent_x=extent,
        extent_z=extent,
        plane_type=plane_type,
        subsumed_by=subsumed_by,
        polygon=polygon
    )


def make_point(tracking: TrackingState = TrackingState.TRACKING,
               with_normal: bool = True) -> Point:
    mode = (PointOrientationMode.ESTIMATED_SURFACE_NORMAL if with_normal
            else PointOrientationMode.INITIALIZED_TO_IDENTITY)
    return Point(tracking_state=tracking, orientation_mode=mode)


def plane_hit(x: float, y: float = 0.0, z: float = 0.0, plane: Optional[Plane] = None) -> HitCandidate:
    return HitCandidate(trackable=plane or make_plane(), world_pose=Pose.at(x, y, z))


def point_hit(x: float, y: float = 0.0, z: float = 0.0, point: Optional[Point] = None) -> HitCandidate:
    return HitCandidate(trackable=point or make_point(), world_pose=Pose.at(x, y, z))


def other_hit(x: float, y: float = 0.0, z: float = 0.0,
              tracking: TrackingState = TrackingState.TRACKING) -> HitCandidate:
    return HitCandidate(trackable=OtherTrackable(tracking_state=tracking), world_pose=Pose.at(x, y, z))


# ============================================================================
# ENGINE FIXTURES
# ============================================================================

@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def make_engine(runtime: FakeRuntime):
    """Build an engine over the shared runtime with optional settings overrides"""

    def _make(**overrides) -> MeasurementEngine:
        return MeasurementEngine(runtime, settings=Settings(**overrides))

    return _make


@pytest.fixture
def engine(make_engine) -> MeasurementEngine:
    return make_engine()


@pytest.fixture
def surface_frame() -> FakeFrame:
    """Frame where every screen coordinate hits a large tracked floor at x = screen_x / 100"""
    return FakeFrame(hits=lambda sx, sy: [plane_hit(sx / 100.0)], camera=Pose.at(0.0, 1.5, 0.0))


def assert_engine_invariants(engine: MeasurementEngine, runtime: FakeRuntime) -> None:
    """Pending/current exclusivity, live anchors for reachable points, no double detach"""
    assert not (engine.pending_start is not None and engine.current_measurement() is not None)

    reachable = []
    if engine.pending_start is not None:
        reachable.append(engine.pending_start)
    for measurement in engine.history():
        reachable.extend(measurement.points)
    current = engine.current_measurement()
    if current is not None:
        assert current in engine.history()

    for point in reachable:
        assert point in engine.ledger
        assert not engine.ledger.anchor_for(point).detached

    assert len(engine.ledger) == len(reachable)
    assert len(runtime.detached) == len({id(h) for h in runtime.detached})


__all__ = [
    "AnchorCreationFailed",
    "FakeFrame",
    "FakeRuntime",
    "Vector3",
    "assert_engine_invariants",
    "make_plane",
    "make_point",
    "other_hit",
    "plane_hit",
    "point_hit",
]

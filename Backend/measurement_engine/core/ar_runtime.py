"""
TrueScale Measurement Engine - AR Runtime Interfaces
Seams to the external AR session: per-frame queries and anchor lifecycle calls
"""

from typing import Any, Iterable, Optional

from .ar_models import HitCandidate, Pose, TrackingState


class ARFrame:
    """
    One rendered frame of the AR session

    Bindings to a concrete AR runtime subclass this. Hit-test results are
    consumed lazily and in the runtime's own ranking order.
    """

    def tracking_state(self) -> TrackingState:
        raise NotImplementedError

    def hit_test(self, screen_x: float, screen_y: float) -> Iterable[HitCandidate]:
        raise NotImplementedError

    def camera_pose(self) -> Optional[Pose]:
        raise NotImplementedError

    def depth_available(self) -> bool:
        raise NotImplementedError


class AnchorRuntime:
    """Anchor factory of the AR session; handles are opaque to the engine"""

    def create_anchor(self, pose: Pose) -> Any:
        raise NotImplementedError

    def detach_anchor(self, handle: Any) -> None:
        raise NotImplementedError

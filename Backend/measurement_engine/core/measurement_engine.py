"""
TrueScale Measurement Engine - Core State Machine
Turns taps and frames into anchored measurement points and finalized measurements
"""

import math
import logging
from collections import deque
from typing import Any, Dict, Iterable, List, Optional

from . import geometry
from .anchor_ledger import AnchorLedger, new_anchor_id
from .ar_models import HitCandidate, Plane, TrackingState
from .ar_runtime import AnchorRuntime, ARFrame
from .confidence import ConfidenceScorer, ScoringContext
from .errors import AnchorCreationFailed, RejectionReason
from .measurement_models import (
    CapacityEvicted, EngineStatus, EvictionKind, FramePreview, Measurement,
    MeasurementMode, MeasurementPoint, TapOutcome
)
from .stabilization import DistanceSmoother, estimate_accuracy
from .surface_registration import SurfaceRegistrar, select_measurable_planes
from .units import UnitFormatter, UnitSystem
from ..utils.config import Settings, get_settings
from ..utils.metrics import EngineMetrics

logger = logging.getLogger(__name__)

TRACKING_NOT_READY_MESSAGE = "Tracking not ready; move the device slowly until surfaces are detected"
LOW_CONFIDENCE_MESSAGE = "Low tracking quality - try moving closer or improving lighting"
NON_FINITE_PLACEHOLDER = "--"


class MeasurementEngine:
    """
    Measurement state machine for one AR session

    Two phases: IDLE (no pending start point) and AWAITING_SECOND_POINT.
    A tap in IDLE registers a start point; a tap while awaiting completes a
    measurement, pushes it to the bounded history and makes it current.

    Every anchor is owned by the AnchorLedger. An anchor is detached when
    its point leaves pending start, current and history for good, and the
    ledger guarantees that happens once.

    Calls are expected from a single frame-driven thread; taps must be
    serialized against frame ticks by the caller.
    """

    def __init__(self, runtime: AnchorRuntime,
                 settings: Optional[Settings] = None,
                 scorer: Optional[ConfidenceScorer] = None,
                 registrar: Optional[SurfaceRegistrar] = None,
                 metrics: Optional[EngineMetrics] = None):
        self.settings = settings or get_settings()
        self.runtime = runtime

        self.scorer = scorer or ConfidenceScorer(self.settings.CONFIDENCE_DISTANCE_CAP)
        self.registrar = registrar or SurfaceRegistrar(self.settings.JITTER_OFFSETS)
        self.ledger = AnchorLedger(runtime.detach_anchor, self.settings.MAX_ANCHORS)
        self.formatter = UnitFormatter()
        self.smoother = DistanceSmoother(self.settings.SMOOTHING_FACTOR, self.settings.SMOOTHING_WINDOW)
        if metrics is None and self.settings.ENABLE_METRICS:
            metrics = EngineMetrics()
        self.metrics = metrics

        self.min_confidence = self.settings.MIN_REGISTRATION_CONFIDENCE
        self.history_capacity = self.settings.HISTORY_CAPACITY
        self.high_confidence_threshold = self.settings.HIGH_CONFIDENCE_THRESHOLD
        self.min_plane_extent = self.settings.MIN_PLANE_EXTENT

        self._status = EngineStatus.IDLE
        self._mode = MeasurementMode.DISTANCE
        self._pending_start: Optional[MeasurementPoint] = None
        self._current: Optional[Measurement] = None
        self._history: "deque[Measurement]" = deque()
        self._use_metric = self.settings.DEFAULT_USE_METRIC
        self._tracking_state = TrackingState.STOPPED

        logger.info("✅ Measurement engine initialized")

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def status(self) -> EngineStatus:
        return self._status

    @property
    def mode(self) -> MeasurementMode:
        return self._mode

    @property
    def use_metric(self) -> bool:
        return self._use_metric

    @property
    def unit_system(self) -> UnitSystem:
        return UnitSystem.from_use_metric(self._use_metric)

    @property
    def tracking_state(self) -> TrackingState:
        return self._tracking_state

    @property
    def pending_start(self) -> Optional[MeasurementPoint]:
        return self._pending_start

    def current_measurement(self) -> Optional[Measurement]:
        return self._current

    def history(self) -> List[Measurement]:
        """Finalized measurements, oldest first"""
        return list(self._history)

    def last_measurement(self) -> Optional[Measurement]:
        return self._history[-1] if self._history else None

    def is_measuring(self) -> bool:
        return self._status is EngineStatus.AWAITING_SECOND_POINT

    def live_anchor_count(self) -> int:
        return len(self.ledger)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def on_tap(self, screen_x: float, screen_y: float, frame: ARFrame) -> TapOutcome:
        """Try to register a measurement point at a screen coordinate"""
        tracking_state = frame.tracking_state()
        self._tracking_state = tracking_state
        if tracking_state is not TrackingState.TRACKING:
            return self._reject(RejectionReason.TRACKING_NOT_READY, TRACKING_NOT_READY_MESSAGE)

        result = self.registrar.register(frame.hit_test, screen_x, screen_y)
        if not result.success:
            return self._reject(RejectionReason.NO_USABLE_HIT, result.message)

        hit = result.hit
        confidence = self._score(frame, hit, tracking_state)
        # NaN fails the range check too
        if not (self.min_confidence <= confidence <= 1.0):
            logger.debug(f"Confidence unusable for measurement: {confidence:.2f}")
            return self._reject(RejectionReason.LOW_CONFIDENCE, LOW_CONFIDENCE_MESSAGE)

        # Point and anchor are fully built before any visible state changes
        try:
            point, handle = self._create_point(hit, confidence)
        except AnchorCreationFailed as e:
            return self._reject(RejectionReason.ANCHOR_CREATION_FAILED, str(e))

        if self.metrics:
            self.metrics.record_registration(confidence, result.attempts, hit.screen_offset)

        if self._status is EngineStatus.IDLE:
            return self._commit_start(point, handle, result.message)
        return self._commit_end(point, handle, result.message)

    def on_frame_tick(self, preview_x: float, preview_y: float, frame: ARFrame) -> Optional[FramePreview]:
        """
        Live preview endpoint while awaiting the second point

        Never creates anchors or changes the measurement state; only the
        preview smoothing window advances.
        """
        preview = None
        if self._status is EngineStatus.AWAITING_SECOND_POINT:
            preview = self._build_preview(preview_x, preview_y, frame)
        if self.metrics:
            self.metrics.record_frame_tick(preview is not None)
        return preview

    def set_mode(self, mode: MeasurementMode) -> bool:
        """Switch mode; clears in-progress and current measurements but keeps history"""
        if mode is self._mode:
            return False
        logger.info(f"Measurement mode {self._mode.value} -> {mode.value}")
        self._mode = mode
        self.clear_measurements()
        return True

    def cycle_mode(self) -> MeasurementMode:
        self.set_mode(self._mode.next())
        return self._mode

    def toggle_units(self) -> bool:
        self._use_metric = not self._use_metric
        return self._use_metric

    def set_use_metric(self, use_metric: bool):
        self._use_metric = use_metric

    def update_tracking_state(self, state: TrackingState):
        self._tracking_state = state

    def clear_measurements(self):
        """Drop the pending start (detaching its anchor) and the current measurement"""
        if self._pending_start is not None:
            self.ledger.remove(self._pending_start)
            self._pending_start = None
        # current is always a history member, so its anchors stay live
        self._current = None
        self._status = EngineStatus.IDLE
        self.smoother.reset()
        self._update_gauges()

    def clear_history(self):
        """Drop every finalized measurement and detach its anchors"""
        count = len(self._history)
        while self._history:
            self._release(self._history.popleft())
        self._current = None
        self._update_gauges()
        if count:
            logger.info(f"Cleared {count} measurements from history")

    def dispose(self):
        """Session teardown: release every measurement and anchor"""
        self.clear_measurements()
        self.clear_history()
        remaining = self.ledger.clear()
        if remaining:
            logger.warning(f"Detached {remaining} untracked anchors during dispose")
        logger.info("🛑 Measurement engine disposed")

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def formatted_value(self, measurement: Measurement,
                        mode: Optional[MeasurementMode] = None,
                        unit_system: Optional[UnitSystem] = None) -> str:
        mode = mode or self._mode
        unit_system = unit_system or self.unit_system
        value = measurement.value(mode)
        if not math.isfinite(value):
            return NON_FINITE_PLACEHOLDER

        if mode in (MeasurementMode.DISTANCE, MeasurementMode.HEIGHT):
            return self.formatter.format_length(value, unit_system)
        if mode is MeasurementMode.AREA:
            return self.formatter.format_area(value, unit_system)
        return self.formatter.format_volume(value, unit_system)

    def is_high_confidence(self, measurement: Measurement) -> bool:
        """Display-quality check against the configured threshold"""
        return measurement.meets_confidence(self.high_confidence_threshold)

    def measurable_planes(self, planes: Iterable[Plane]) -> List[Plane]:
        """Plane overlay candidates, best first, using the configured minimum extent"""
        return select_measurable_planes(planes, self.min_plane_extent)

    def get_status_summary(self) -> Dict[str, Any]:
        return {
            'status': self._status.value,
            'mode': self._mode.value,
            'use_metric': self._use_metric,
            'tracking_state': self._tracking_state.value,
            'has_pending_start': self._pending_start is not None,
            'has_current_measurement': self._current is not None,
            'history_size': len(self._history),
            'live_anchors': len(self.ledger),
            'metrics': self.metrics.get_metrics() if self.metrics else None
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _score(self, frame: ARFrame, hit: HitCandidate, tracking_state: TrackingState) -> float:
        camera_pose = frame.camera_pose()
        distance_to_camera = None
        if camera_pose is not None:
            distance_to_camera = geometry.distance(hit.position, camera_pose.position)

        return self.scorer.score(ScoringContext(
            tracking_state=tracking_state,
            trackable=hit.trackable,
            depth_available=frame.depth_available(),
            distance_to_camera=distance_to_camera
        ))

    def _create_point(self, hit: HitCandidate, confidence: float):
        point = MeasurementPoint(
            position=hit.position,
            anchor_id=new_anchor_id(),
            confidence=confidence
        )
        try:
            handle = self.runtime.create_anchor(hit.world_pose)
        except AnchorCreationFailed:
            raise
        except Exception as e:
            raise AnchorCreationFailed(f"Failed to create measurement anchor: {e}") from e
        if handle is None:
            raise AnchorCreationFailed("Failed to create measurement anchor: runtime returned no anchor")
        return point, handle

    def _commit_start(self, point: MeasurementPoint, handle: Any, message: Optional[str]) -> TapOutcome:
        evicted_points = self.ledger.insert(point, handle)
        self._pending_start = point
        self._current = None
        self._status = EngineStatus.AWAITING_SECOND_POINT
        self.smoother.reset()
        notices = self._reconcile_anchor_evictions(evicted_points)

        logger.info(f"Registered start point at {point.position} (confidence {point.confidence:.2f})")
        self._finish_tap('registered')
        return TapOutcome.registered(point, message=message, evictions=notices)

    def _commit_end(self, point: MeasurementPoint, handle: Any, message: Optional[str]) -> TapOutcome:
        measurement = Measurement(start=self._pending_start, end=point)
        evicted_points = self.ledger.insert(point, handle)
        notices = self._reconcile_anchor_evictions(evicted_points)

        self._history.append(measurement)
        notices.extend(self._enforce_history_capacity())
        self._current = measurement
        self._pending_start = None
        self._status = EngineStatus.IDLE
        self.smoother.reset()

        logger.info(f"Completed {self._mode.value} measurement: {self.formatted_value(measurement)}")
        self._finish_tap('completed')
        return TapOutcome.completed(measurement, message=message, evictions=notices)

    def _reconcile_anchor_evictions(self, evicted_points: List[MeasurementPoint]) -> List[CapacityEvicted]:
        """Drop measurements whose anchors the ledger evicted, releasing their partner anchors"""
        if not evicted_points:
            return []

        notices = [CapacityEvicted(EvictionKind.ANCHOR, points=tuple(evicted_points))]
        evicted_ids = {p.anchor_id for p in evicted_points}

        for measurement in list(self._history):
            if {measurement.start.anchor_id, measurement.end.anchor_id} & evicted_ids:
                self._history.remove(measurement)
                self._release(measurement)
                if self._current == measurement:
                    self._current = None
                notices.append(CapacityEvicted(EvictionKind.HISTORY, points=measurement.points,
                                               measurement=measurement))

        if self._pending_start is not None and self._pending_start.anchor_id in evicted_ids:
            self._pending_start = None
            self._status = EngineStatus.IDLE

        self._record_evictions(notices)
        return notices

    def _enforce_history_capacity(self) -> List[CapacityEvicted]:
        notices = []
        while len(self._history) > self.history_capacity:
            oldest = self._history.popleft()
            self._release(oldest)
            notices.append(CapacityEvicted(EvictionKind.HISTORY, points=oldest.points, measurement=oldest))
        self._record_evictions(notices)
        return notices

    def _release(self, measurement: Measurement):
        for point in measurement.points:
            self.ledger.remove(point)

    def _build_preview(self, preview_x: float, preview_y: float, frame: ARFrame) -> Optional[FramePreview]:
        tracking_state = frame.tracking_state()
        if tracking_state is not TrackingState.TRACKING:
            return None

        result = self.registrar.register(frame.hit_test, preview_x, preview_y)
        if not result.success:
            return None

        hit = result.hit
        confidence = self._score(frame, hit, tracking_state)
        raw_distance = geometry.distance(self._pending_start.position, hit.position)
        smoothed = self.smoother.add(raw_distance)
        return FramePreview(
            endpoint=hit.position,
            raw_distance=raw_distance,
            smoothed_distance=smoothed,
            confidence=confidence,
            accuracy_estimate=estimate_accuracy(smoothed, confidence, frame.depth_available()),
            screen_offset=hit.screen_offset
        )

    def _reject(self, reason: RejectionReason, message: str) -> TapOutcome:
        logger.warning(f"Tap rejected ({reason.value}): {message}")
        if self.metrics:
            self.metrics.record_tap('rejected', reason.value)
        return TapOutcome.rejected(reason, message)

    def _finish_tap(self, outcome: str):
        if self.metrics:
            self.metrics.record_tap(outcome)
        self._update_gauges()

    def _record_evictions(self, notices: List[CapacityEvicted]):
        for notice in notices:
            logger.info(f"Capacity eviction ({notice.kind.value}): {len(notice.points)} point(s)")
            if self.metrics:
                self.metrics.record_eviction(notice.kind.value)

    def _update_gauges(self):
        if self.metrics:
            self.metrics.set_gauge('live_anchors', len(self.ledger))
            self.metrics.set_gauge('history_size', len(self._history))

"""
TrueScale Measurement Engine - Measurement Data Models
Measurement points, finalized measurements, modes and tap outcomes
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from . import geometry
from .errors import RejectionReason
from .geometry import Vector3

HIGH_CONFIDENCE_THRESHOLD = 0.7


class MeasurementMode(Enum):
    """Measurement modes in UI cycling order"""
    DISTANCE = "distance"
    HEIGHT = "height"
    AREA = "area"
    VOLUME = "volume"

    def next(self) -> "MeasurementMode":
        modes = list(MeasurementMode)
        return modes[(modes.index(self) + 1) % len(modes)]


class EngineStatus(Enum):
    """Point-collection phase of the engine"""
    IDLE = "idle"
    AWAITING_SECOND_POINT = "awaiting_second_point"


@dataclass(frozen=True)
class MeasurementPoint:
    """Accepted surface hit; its anchor lives in the AnchorLedger under anchor_id"""
    position: Vector3
    anchor_id: str
    confidence: float
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError("Confidence must be between 0.0 and 1.0")


@dataclass(frozen=True)
class Measurement:
    """Finalized pair of points; derived values are computed on demand"""
    start: MeasurementPoint
    end: MeasurementPoint

    @property
    def points(self) -> Tuple[MeasurementPoint, MeasurementPoint]:
        return (self.start, self.end)

    @property
    def confidence(self) -> float:
        return min(self.start.confidence, self.end.confidence)

    @property
    def is_high_confidence(self) -> bool:
        return self.meets_confidence(HIGH_CONFIDENCE_THRESHOLD)

    def meets_confidence(self, threshold: float) -> bool:
        return self.confidence >= threshold

    @property
    def timestamp(self) -> float:
        return self.end.timestamp

    def value(self, mode: MeasurementMode) -> float:
        """Scalar for the given mode: meters, square meters or cubic meters"""
        a, b = self.start.position, self.end.position
        if mode is MeasurementMode.DISTANCE:
            return geometry.distance(a, b)
        if mode is MeasurementMode.HEIGHT:
            return geometry.height(a, b)
        if mode is MeasurementMode.AREA:
            return geometry.rectangle_area(a, b)
        return geometry.box_volume(a, b)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': [self.start.position.x, self.start.position.y, self.start.position.z],
            'end': [self.end.position.x, self.end.position.y, self.end.position.z],
            'confidence': self.confidence,
            'timestamp': self.timestamp
        }


class EvictionKind(Enum):
    ANCHOR = "anchor"
    HISTORY = "history"


@dataclass(frozen=True)
class CapacityEvicted:
    """Informational notice: a bounded collection dropped its oldest entry"""
    kind: EvictionKind
    points: Tuple[MeasurementPoint, ...] = ()
    measurement: Optional[Measurement] = None


class TapOutcomeKind(Enum):
    REGISTERED = "registered"
    COMPLETED = "completed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TapOutcome:
    """Typed result of a tap transition"""
    kind: TapOutcomeKind
    point: Optional[MeasurementPoint] = None
    measurement: Optional[Measurement] = None
    rejection: Optional[RejectionReason] = None
    message: Optional[str] = None
    evictions: Tuple[CapacityEvicted, ...] = ()

    @classmethod
    def registered(cls, point: MeasurementPoint, message: Optional[str] = None,
                   evictions: List[CapacityEvicted] = ()) -> "TapOutcome":
        return cls(TapOutcomeKind.REGISTERED, point=point, message=message,
                   evictions=tuple(evictions))

    @classmethod
    def completed(cls, measurement: Measurement, message: Optional[str] = None,
                  evictions: List[CapacityEvicted] = ()) -> "TapOutcome":
        return cls(TapOutcomeKind.COMPLETED, point=measurement.end, measurement=measurement,
                   message=message, evictions=tuple(evictions))

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str) -> "TapOutcome":
        return cls(TapOutcomeKind.REJECTED, rejection=reason, message=message)

    @property
    def accepted(self) -> bool:
        return self.kind is not TapOutcomeKind.REJECTED


@dataclass(frozen=True)
class FramePreview:
    """Non-committing live endpoint for rendering the in-progress measurement"""
    endpoint: Vector3
    raw_distance: float
    smoothed_distance: float
    confidence: float
    accuracy_estimate: float
    screen_offset: Tuple[float, float] = (0.0, 0.0)

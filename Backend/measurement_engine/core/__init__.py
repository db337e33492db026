"""
Core measurement components: geometry, scoring, registration, anchors and the engine
"""

from .geometry import Vector3
from .ar_models import (
    HitCandidate, OtherTrackable, Plane, PlaneType, Point, PointOrientationMode,
    Pose, Trackable, TrackingState
)
from .ar_runtime import AnchorRuntime, ARFrame
from .errors import AnchorCreationFailed, InvalidConfiguration, MeasurementEngineError, RejectionReason
from .units import UnitFormatter, UnitSystem
from .confidence import ConfidenceScorer, ScoringContext
from .surface_registration import (
    RegistrationFailure, RegistrationResult, SurfaceRegistrar, is_hit_usable, select_measurable_planes
)
from .measurement_models import (
    CapacityEvicted, EngineStatus, EvictionKind, FramePreview, Measurement, MeasurementMode,
    MeasurementPoint, TapOutcome, TapOutcomeKind
)
from .anchor_ledger import Anchor, AnchorLedger
from .stabilization import DistanceSmoother, estimate_accuracy, is_confidence_acceptable
from .measurement_engine import MeasurementEngine

__all__ = [
    'Vector3',
    'HitCandidate', 'OtherTrackable', 'Plane', 'PlaneType', 'Point', 'PointOrientationMode',
    'Pose', 'Trackable', 'TrackingState',
    'AnchorRuntime', 'ARFrame',
    'AnchorCreationFailed', 'InvalidConfiguration', 'MeasurementEngineError', 'RejectionReason',
    'UnitFormatter', 'UnitSystem',
    'ConfidenceScorer', 'ScoringContext',
    'RegistrationFailure', 'RegistrationResult', 'SurfaceRegistrar', 'is_hit_usable',
    'select_measurable_planes',
    'CapacityEvicted', 'EngineStatus', 'EvictionKind', 'FramePreview', 'Measurement',
    'MeasurementMode', 'MeasurementPoint', 'TapOutcome', 'TapOutcomeKind',
    'Anchor', 'AnchorLedger',
    'DistanceSmoother', 'estimate_accuracy', 'is_confidence_acceptable',
    'MeasurementEngine'
]

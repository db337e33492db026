"""
TrueScale Measurement Engine
Turns camera-tracked AR surface hits into distance, height, area and volume readings
"""

from .core import (
    AnchorRuntime, ARFrame, HitCandidate, Measurement, MeasurementEngine, MeasurementMode,
    MeasurementPoint, Pose, RejectionReason, TapOutcome, TrackingState, UnitSystem, Vector3
)
from .utils import Settings, TapThrottle, get_settings, setup_logging

__version__ = "1.0.0"

__all__ = [
    'AnchorRuntime',
    'ARFrame',
    'HitCandidate',
    'Measurement',
    'MeasurementEngine',
    'MeasurementMode',
    'MeasurementPoint',
    'Pose',
    'RejectionReason',
    'TapOutcome',
    'TrackingState',
    'UnitSystem',
    'Vector3',
    'Settings',
    'TapThrottle',
    'get_settings',
    'setup_logging'
]

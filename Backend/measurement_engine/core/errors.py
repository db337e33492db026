"""
TrueScale Measurement Engine - Error Taxonomy
"""

from enum import Enum


class MeasurementEngineError(Exception):
    """Base class for measurement engine errors"""


class AnchorCreationFailed(MeasurementEngineError):
    """The AR runtime could not create an anchor for an accepted hit"""


class InvalidConfiguration(MeasurementEngineError, ValueError):
    """Engine component constructed with unusable parameters"""


class RejectionReason(Enum):
    """Recoverable reasons a tap does not register a point"""
    TRACKING_NOT_READY = "tracking_not_ready"
    NO_USABLE_HIT = "no_usable_hit"
    LOW_CONFIDENCE = "low_confidence"
    ANCHOR_CREATION_FAILED = "anchor_creation_failed"

"""
TrueScale Measurement Engine - Measurement Stabilization
Temporal smoothing of noisy per-frame distances and accuracy estimation
"""

from collections import deque
from functools import reduce
from typing import List

from .errors import InvalidConfiguration

SMOOTHING_FACTOR = 0.8
SMOOTHING_WINDOW = 5
MIN_ACCEPTABLE_CONFIDENCE = 0.7


class DistanceSmoother:
    """
    Exponential moving average over a short window of raw samples

    The average is recomputed from the window on every sample, seeded with
    the oldest sample, so stale readings fall out after `window` frames.
    """

    def __init__(self, factor: float = SMOOTHING_FACTOR, window: int = SMOOTHING_WINDOW):
        if not (0.0 <= factor < 1.0):
            raise InvalidConfiguration(f"Smoothing factor must be in [0, 1), got {factor}")
        if window < 1:
            raise InvalidConfiguration(f"Smoothing window must be positive, got {window}")
        self.factor = factor
        self._samples = deque(maxlen=window)

    def add(self, raw_distance: float) -> float:
        """Record a sample and return the smoothed distance"""
        self._samples.append(raw_distance)
        return self.value()

    def value(self) -> float:
        if not self._samples:
            return 0.0
        if len(self._samples) == 1:
            return self._samples[0]
        return reduce(
            lambda acc, sample: acc * self.factor + sample * (1.0 - self.factor),
            self._samples
        )

    def reset(self):
        self._samples.clear()

    @property
    def samples(self) -> List[float]:
        return list(self._samples)


def estimate_accuracy(distance: float, confidence: float, depth_available: bool) -> float:
    """
    Estimated error margin in meters

    2% of the distance, scaled up to 2x as confidence drops and halved when
    depth sensing is available.
    """
    base_error = distance * 0.02
    confidence_factor = 2.0 - confidence
    depth_factor = 0.5 if depth_available else 1.0
    return base_error * confidence_factor * depth_factor


def is_confidence_acceptable(confidence: float) -> bool:
    return confidence >= MIN_ACCEPTABLE_CONFIDENCE

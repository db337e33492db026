"""
Metrics collection for Measurement Engine
In-process counters, gauges and bounded histograms
"""

import time
import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_SAMPLES = 1000


@dataclass
class MetricSample:
    """Single histogram observation"""
    value: float
    recorded_at: datetime


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EngineMetrics:
    """
    Measurement engine metrics collector

    Counter names follow `<event>_total`; histograms keep the most recent
    `max_samples` observations only.
    """

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES):
        self.counters: Dict[str, int] = defaultdict(int)
        self.gauges: Dict[str, float] = {}
        self.histograms = defaultdict(lambda: deque(maxlen=max_samples))
        self.started_at = time.monotonic()

    def record_tap(self, outcome: str, rejection: Optional[str] = None):
        """Record a tap outcome (registered / completed / rejected)"""
        self.counters[f'tap_{outcome}_total'] += 1
        if rejection:
            self.counters[f'rejection_{rejection}_total'] += 1

    def record_registration(self, confidence: float, attempts: int,
                            screen_offset: Tuple[float, float] = (0.0, 0.0)):
        """Record an accepted surface registration and the jitter offset that found it"""
        self.observe('registration_confidence', confidence)
        self.observe('registration_attempts', attempts)
        if tuple(screen_offset) != (0.0, 0.0):
            dx, dy = screen_offset
            self.counters['jitter_registration_total'] += 1
            self.counters[f'jitter_offset_{dx:g}_{dy:g}_total'] += 1

    def record_eviction(self, kind: str, count: int = 1):
        self.counters[f'eviction_{kind}_total'] += count

    def record_frame_tick(self, preview_available: bool):
        self.counters['frame_tick_total'] += 1
        if preview_available:
            self.counters['frame_preview_total'] += 1

    def observe(self, histogram: str, value: float):
        self.histograms[histogram].append(MetricSample(value, _utc_now()))

    def set_gauge(self, name: str, value: float):
        self.gauges[name] = value

    def increment_counter(self, name: str, value: int = 1):
        self.counters[name] += value

    def average(self, histogram: str) -> float:
        samples = self.histograms.get(histogram)
        if not samples:
            return 0.0
        return sum(sample.value for sample in samples) / len(samples)

    def get_metrics(self) -> Dict[str, Any]:
        """Serializable snapshot of every metric"""
        snapshot = {
            'counters': dict(self.counters),
            'gauges': dict(self.gauges),
            'averages': {name: self.average(name) for name in self.histograms},
            'sample_counts': {name: len(samples) for name, samples in self.histograms.items()},
        }
        snapshot['uptime_seconds'] = time.monotonic() - self.started_at
        snapshot['collected_at'] = _utc_now().isoformat()
        return snapshot

    def reset(self):
        for store in (self.counters, self.gauges, self.histograms):
            store.clear()


def setup_metrics(max_samples: int = DEFAULT_MAX_SAMPLES) -> EngineMetrics:
    """Create the engine metrics collector"""
    collector = EngineMetrics(max_samples)
    logger.info("📊 Measurement engine metrics initialized")
    return collector

"""
TrueScale Measurement Engine - Anchor Ledger
Single owner of every live spatial anchor tied to a measurement point
"""

import time
import uuid
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import InvalidConfiguration
from .measurement_models import MeasurementPoint

logger = logging.getLogger(__name__)

MAX_ANCHORS = 10


@dataclass
class Anchor:
    """Runtime anchor handle plus the locally tracked detach flag"""
    anchor_id: str
    handle: Any
    detached: bool = False
    created_at: float = field(default_factory=time.time)


@dataclass
class _LedgerEntry:
    anchor: Anchor
    point: MeasurementPoint


def new_anchor_id() -> str:
    return str(uuid.uuid4())


class AnchorLedger:
    """
    Bounded, insertion-ordered mapping of live anchors to their points

    The ledger is the only component that detaches anchors, and it detaches
    each one exactly once: on eviction, explicit removal, or clear().
    """

    def __init__(self, detach_fn: Callable[[Any], None], max_anchors: int = MAX_ANCHORS):
        if max_anchors < 2:
            raise InvalidConfiguration(f"Anchor ledger needs room for a start/end pair, got {max_anchors}")
        self._detach_fn = detach_fn
        self.max_anchors = max_anchors
        self._entries: "OrderedDict[str, _LedgerEntry]" = OrderedDict()

        self.stats = {
            'anchors_inserted': 0,
            'anchors_detached': 0,
            'anchors_evicted': 0,
            'detach_failures': 0
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, point: MeasurementPoint) -> bool:
        entry = self._entries.get(point.anchor_id)
        return entry is not None and entry.point == point

    def insert(self, point: MeasurementPoint, handle: Any) -> List[MeasurementPoint]:
        """
        Take ownership of the anchor behind a new point

        Evicts (and detaches) the oldest anchors first when at capacity.

        Returns:
            Points whose anchors were evicted to make room, oldest first
        """
        if point.anchor_id in self._entries:
            raise ValueError(f"Anchor {point.anchor_id} is already registered")

        evicted = []
        while len(self._entries) >= self.max_anchors:
            _, oldest = self._entries.popitem(last=False)
            self._detach(oldest.anchor)
            self.stats['anchors_evicted'] += 1
            evicted.append(oldest.point)
            logger.info(f"Maximum anchor limit reached, evicted anchor {oldest.anchor.anchor_id}")

        self._entries[point.anchor_id] = _LedgerEntry(
            anchor=Anchor(anchor_id=point.anchor_id, handle=handle),
            point=point
        )
        self.stats['anchors_inserted'] += 1
        logger.debug(f"Registered anchor {point.anchor_id} ({len(self._entries)}/{self.max_anchors})")
        return evicted

    def remove(self, point: MeasurementPoint) -> bool:
        """Detach and drop a point's anchor; False if it was already gone"""
        entry = self._entries.pop(point.anchor_id, None)
        if entry is None:
            return False
        self._detach(entry.anchor)
        return True

    def clear(self) -> int:
        """Detach and drop every anchor, oldest first"""
        count = len(self._entries)
        while self._entries:
            _, entry = self._entries.popitem(last=False)
            self._detach(entry.anchor)
        if count:
            logger.debug(f"Cleared {count} anchors")
        return count

    def anchor_for(self, point: MeasurementPoint) -> Optional[Anchor]:
        entry = self._entries.get(point.anchor_id)
        return entry.anchor if entry else None

    def points(self) -> List[MeasurementPoint]:
        """Live points, oldest first"""
        return [entry.point for entry in self._entries.values()]

    def _detach(self, anchor: Anchor) -> None:
        if anchor.detached:
            return
        anchor.detached = True
        self.stats['anchors_detached'] += 1
        try:
            self._detach_fn(anchor.handle)
        except Exception as e:
            self.stats['detach_failures'] += 1
            logger.error(f"Failed to detach anchor {anchor.anchor_id}: {e}")

    def get_status(self) -> Dict[str, Any]:
        return {
            'live_anchors': len(self._entries),
            'max_anchors': self.max_anchors,
            'statistics': dict(self.stats)
        }

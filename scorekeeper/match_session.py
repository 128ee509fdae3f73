import logging
from copy import deepcopy
from typing import Dict, List, Optional

from scorekeeper.engine import apply_point
from scorekeeper.exceptions import StaleStateError
from scorekeeper.models import MatchRecord, PointEvent, ScoreUpdate
from scorekeeper.timeline import ScoreSnapshot, build_snapshot

logger = logging.getLogger(__name__)


class MatchSession:
    """
    Single live match.

    Responsibilities:
    - Apply point events to one MatchRecord, one at a time
    - Version every accepted event (compare-and-swap for concurrent callers)
    - Bulk replay point events (atomic)
    - Store timeline snapshots
    - Export original point events
    """

    def __init__(self, record: MatchRecord):
        self._config = record.config
        self._initial_record = deepcopy(record)
        self._record = deepcopy(record)
        self._timeline: List[ScoreSnapshot] = []
        self._events: List[PointEvent] = []
        self._version = 0

    @property
    def record(self) -> MatchRecord:
        return deepcopy(self._record)

    @property
    def version(self) -> int:
        return self._version

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    def apply(self, event: PointEvent, expected_version: Optional[int] = None) -> ScoreUpdate:
        """
        Apply one point event and commit it to the record.
        If expected_version is given and the session has moved on, nothing
        is applied: re-read and retry.
        """
        if expected_version is not None and expected_version != self._version:
            raise StaleStateError(expected_version, self._version)

        if self._events and event.timestamp is not None:
            last = self._events[-1].timestamp
            if last is not None and event.timestamp < last:
                raise ValueError("Event timestamp must be non-decreasing")

        update = apply_point(
            self._record.score_state, self._config, event.player, event.direction
        )

        self._commit(event, update)
        return update

    def load_events(self, events: List[Dict]) -> List[ScoreSnapshot]:
        """
        Bulk load point events from list of dicts, replayed from the
        record the session started with.
        Atomic: if any event fails -> no state mutation.
        """
        if not isinstance(events, list):
            raise ValueError("events must be a list")

        # Convert first (validation stage)
        point_events = []
        for e in events:
            if not isinstance(e, dict) or "player" not in e:
                raise ValueError("invalid event format")
            point_events.append(PointEvent.from_dict(e))

        # Replay on a scratch session, commit only if everything succeeds
        scratch = MatchSession(self._initial_record)
        for event in point_events:
            scratch.apply(event)

        self._record = scratch._record
        self._timeline = scratch._timeline
        self._events = scratch._events
        self._version = scratch._version

        logger.info(
            "Match %s replayed %d event(s), status %s",
            self._record.id,
            len(point_events),
            self._record.status.value,
        )

        return deepcopy(self._timeline)

    def get_snapshot(self) -> ScoreSnapshot:
        if not self._timeline:
            raise RuntimeError("No events applied")

        return self._timeline[-1]

    def get_timeline(self) -> List[ScoreSnapshot]:
        return deepcopy(self._timeline)

    def export_events(self) -> List[Dict]:
        return [e.to_dict() for e in self._events]

    def reset(self):
        self._record = deepcopy(self._initial_record)
        self._timeline = []
        self._events = []
        self._version = 0

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    def _commit(self, event: PointEvent, update: ScoreUpdate):
        previous = self._record.status

        self._record.score_state = update.state.copy()
        self._record.status = update.status
        self._events.append(event)
        self._version += 1
        self._timeline.append(
            build_snapshot(update.state, self._config, self._version, event.timestamp)
        )

        if previous != update.status:
            logger.info(
                "Match %s: %s -> %s", self._record.id, previous.value, update.status.value
            )

"""In-memory tracker store for testing."""

from skillvault.core.scope import TargetBase
from skillvault.tracker.abc import TrackerStore
from skillvault.tracker.models import Tracker


class FakeTrackerStore(TrackerStore):
    """In-memory fake tracker store.

    State Management:
    - trackers: dict[TargetBase, Tracker] - current stored trackers

    Mutation Tracking:
    - saved: list[Tracker] - every tracker passed to save(), in order
    """

    def __init__(self, *, trackers: dict[TargetBase, Tracker] | None = None) -> None:
        self._trackers = dict(trackers or {})
        self._saved: list[Tracker] = []

    def load(self, base: TargetBase) -> Tracker:
        return self._trackers.get(base, Tracker.empty(base))

    def save(self, tracker: Tracker) -> None:
        self._saved.append(tracker)
        if tracker.is_empty:
            self._trackers.pop(tracker.base, None)
            return
        self._trackers[tracker.base] = tracker

    def stored(self, base: TargetBase) -> Tracker | None:
        return self._trackers.get(base)

    @property
    def saved(self) -> list[Tracker]:
        return self._saved.copy()

"""Abstract interface for tracker persistence."""

from abc import ABC, abstractmethod

from skillvault.core.scope import TargetBase
from skillvault.tracker.models import Tracker


class TrackerStore(ABC):
    """Loads and saves one tracker document per target base."""

    @abstractmethod
    def load(self, base: TargetBase) -> Tracker:
        """Load the tracker for base.

        Missing or unreadable trackers load as empty; this never raises for
        corrupt content.
        """
        ...

    @abstractmethod
    def save(self, tracker: Tracker) -> None:
        """Persist tracker, deleting the stored document when it is empty."""
        ...

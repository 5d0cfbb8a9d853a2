"""In-memory interaction store with optional persistence."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models.property import utc_now
from ..models.recommendation import UserInteraction
from .storage import InteractionRepository

logger = logging.getLogger(__name__)


@dataclass
class HistoryLimits:
    """Maximum number of entries kept per history."""

    views: int = 50
    searches: int = 20
    favorites: int = 200

    def validate(self) -> None:
        for name in ("views", "searches", "favorites"):
            if getattr(self, name) <= 0:
                raise ValueError(f"History limit '{name}' must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryLimits":
        limits = cls(**{k: int(v) for k, v in data.items()})
        limits.validate()
        return limits


class InteractionStore:
    """
    Owns the user's interaction record.

    Every read-modify-write happens under a single lock so the scoring
    services always see a consistent snapshot. When a repository is
    attached, each effective mutation is written through to it.
    """

    MIN_INTERACTIONS = 3

    def __init__(
        self,
        interaction: Optional[UserInteraction] = None,
        limits: Optional[HistoryLimits] = None,
        repository: Optional[InteractionRepository] = None,
        user_key: str = "default",
        min_interactions: int = MIN_INTERACTIONS,
    ):
        self._interaction = interaction or UserInteraction()
        self.limits = limits or HistoryLimits()
        self.limits.validate()
        self.repository = repository
        self.user_key = user_key
        self.min_interactions = min_interactions
        self._lock = threading.Lock()

    @classmethod
    def from_repository(
        cls,
        repository: InteractionRepository,
        user_key: str = "default",
        limits: Optional[HistoryLimits] = None,
        min_interactions: int = MIN_INTERACTIONS,
    ) -> "InteractionStore":
        """Create a store seeded with whatever the repository holds for ``user_key``."""
        interaction = repository.load(user_key)
        if interaction is None:
            logger.info(f"No stored interactions for {user_key}, starting fresh")
        return cls(
            interaction=interaction,
            limits=limits,
            repository=repository,
            user_key=user_key,
            min_interactions=min_interactions,
        )

    def snapshot(self) -> UserInteraction:
        """Return a copy of the current record, safe to read without locking."""
        with self._lock:
            return self._interaction.copy()

    def track_view(self, property_id: str) -> None:
        """Record a property view. Already-viewed properties are left in place."""
        with self._lock:
            if property_id in self._interaction.view_history:
                return
            updated = self._interaction.copy()
            updated.view_history = ([property_id] + updated.view_history)[: self.limits.views]
            self._commit(updated)
        logger.debug(f"Tracked view of {property_id}")

    def track_favorite(self, property_id: str) -> None:
        """Record a favorite. Already-favorited properties are left in place."""
        with self._lock:
            if property_id in self._interaction.favorite_history:
                return
            updated = self._interaction.copy()
            updated.favorite_history = (
                [property_id] + updated.favorite_history
            )[: self.limits.favorites]
            self._commit(updated)
        logger.debug(f"Tracked favorite of {property_id}")

    def track_search(self, query: str) -> None:
        """Log a search query. Repeated queries are kept as separate entries."""
        with self._lock:
            updated = self._interaction.copy()
            updated.search_history = ([query] + updated.search_history)[: self.limits.searches]
            self._commit(updated)
        logger.debug(f"Tracked search {query!r}")

    def clear(self) -> None:
        """Drop all tracked history."""
        with self._lock:
            if self.repository is not None:
                self.repository.delete(self.user_key)
            self._interaction = UserInteraction()
        logger.info(f"Cleared interaction history for {self.user_key}")

    def has_enough(self, interaction: UserInteraction) -> bool:
        """True if ``interaction`` holds enough history for personalized results."""
        return interaction.total() >= self.min_interactions

    def has_enough_interactions(self) -> bool:
        """True once enough history exists for personalized results to be reliable."""
        with self._lock:
            return self.has_enough(self._interaction)

    def _commit(self, updated: UserInteraction) -> None:
        # Caller must hold the lock. The in-memory record only changes once
        # the repository has accepted the new one.
        updated.last_updated = utc_now()
        if self.repository is not None:
            self.repository.save(self.user_key, updated)
        self._interaction = updated

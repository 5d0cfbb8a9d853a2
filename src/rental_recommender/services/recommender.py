"""Recommendation engine assembling ranked property lists."""

import logging
from dataclasses import dataclass, fields
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from ..models.property import Property, round_half_up, utc_now
from ..models.recommendation import (
    NEW,
    PERSONALIZED,
    SIMILAR,
    TRENDING,
    PropertyRecommendation,
    RecommendationScore,
    TrendingProperty,
    UserPreference,
)
from .interactions import InteractionStore
from .scoring import MatchScoreCalculator

logger = logging.getLogger(__name__)


@dataclass
class RecommendationSettings:
    """Thresholds and list sizes for each recommendation list."""

    min_interactions: int = 3
    personalized_min_score: int = 50
    personalized_limit: int = 20
    trending_limit: int = 10
    new_listing_days: int = 14
    new_listing_score: int = 85
    new_listings_limit: int = 7
    similar_min_score: int = 50
    similar_limit: int = 8
    recent_listing_days: int = 7

    def validate(self) -> None:
        """Validate limits are positive and score thresholds lie in 0-100."""
        for name in (
            "min_interactions",
            "personalized_limit",
            "trending_limit",
            "new_listing_days",
            "new_listings_limit",
            "similar_limit",
            "recent_listing_days",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"Recommendation setting '{name}' must be positive")

        for name in ("personalized_min_score", "new_listing_score", "similar_min_score"):
            if not 0 <= getattr(self, name) <= 100:
                raise ValueError(f"Recommendation setting '{name}' must be between 0 and 100")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecommendationSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown recommendation settings: {', '.join(sorted(unknown))}")
        settings = cls(**{k: int(v) for k, v in data.items()})
        settings.validate()
        return settings


def _relative_difference(value: float, reference: float) -> float:
    """|value - reference| / reference, treating a zero reference as exact-or-infinite."""
    diff = abs(value - reference)
    if reference == 0:
        return 0.0 if diff == 0 else float("inf")
    return diff / reference


def similarity_score(candidate: Property, reference: Property) -> int:
    """
    Score how closely ``candidate`` resembles ``reference`` (0-100).

    Independent of user preferences: only type, price, city, bedrooms and
    floor area are compared.
    """
    score = 0

    if candidate.property_type == reference.property_type:
        score += 30

    price_ratio = _relative_difference(candidate.price, reference.price)
    if price_ratio <= 0.2:
        score += 25
    elif price_ratio <= 0.4:
        score += 15
    elif price_ratio <= 0.6:
        score += 5

    if candidate.city == reference.city:
        score += 20

    bedroom_diff = abs(candidate.bedrooms - reference.bedrooms)
    if bedroom_diff == 0:
        score += 15
    elif bedroom_diff == 1:
        score += 10
    elif bedroom_diff == 2:
        score += 5

    area_ratio = _relative_difference(candidate.area, reference.area)
    if area_ratio <= 0.2:
        score += 10
    elif area_ratio <= 0.4:
        score += 5

    return score


class RecommendationEngine:
    """
    Entry point for every recommendation list.

    Constructed with the catalog, the user's preferences, the interaction
    store and (optionally) externally maintained trending metrics. Lists
    are recomputed on each call; nothing is cached.
    """

    def __init__(
        self,
        catalog: Sequence[Property],
        preferences: Optional[UserPreference] = None,
        interactions: Optional[InteractionStore] = None,
        trending: Optional[Sequence[TrendingProperty]] = None,
        settings: Optional[RecommendationSettings] = None,
    ):
        self.catalog: List[Property] = list(catalog)
        self.preferences = preferences or UserPreference()
        self.settings = settings or RecommendationSettings()
        self.settings.validate()
        self.interactions = interactions or InteractionStore(
            min_interactions=self.settings.min_interactions
        )
        self.trending: List[TrendingProperty] = list(trending or [])
        self.calculator = MatchScoreCalculator(
            self.preferences,
            self.catalog,
            recent_listing_days=self.settings.recent_listing_days,
        )
        self._by_id: Dict[str, Property] = {p.id: p for p in self.catalog}

    def get_property(self, property_id: str) -> Optional[Property]:
        return self._by_id.get(property_id)

    # Interaction tracking

    def track_view(self, property_id: str) -> None:
        self.interactions.track_view(property_id)

    def track_favorite(self, property_id: str) -> None:
        self.interactions.track_favorite(property_id)

    def track_search(self, query: str) -> None:
        self.interactions.track_search(query)

    def has_enough_interactions(self) -> bool:
        return self.interactions.has_enough_interactions()

    # Scoring

    def calculate_match_score(
        self, prop: Property, now: Optional[datetime] = None
    ) -> RecommendationScore:
        """Score one property against the current preferences and history."""
        return self.calculator.calculate(prop, self.interactions.snapshot(), now=now)

    def calculate_match_score_by_id(
        self, property_id: str, now: Optional[datetime] = None
    ) -> RecommendationScore:
        """
        Score a catalog property by id.

        Raises:
            KeyError: If the id is not in the catalog
        """
        prop = self._by_id.get(property_id)
        if prop is None:
            raise KeyError(f"Unknown property: {property_id}")
        return self.calculate_match_score(prop, now=now)

    # Recommendation lists

    def get_personalized_recommendations(
        self, now: Optional[datetime] = None
    ) -> List[PropertyRecommendation]:
        """
        Rank the catalog by match score.

        Returns an empty list until the user has enough interaction history.
        Results score at least ``personalized_min_score``, best first, with
        ties kept in catalog order.
        """
        interaction = self.interactions.snapshot()
        if not self.interactions.has_enough(interaction):
            logger.debug("Not enough interactions for personalized recommendations")
            return []

        now = now or utc_now()

        recommendations = []
        for prop in self.catalog:
            result = self.calculator.calculate(prop, interaction, now=now)
            match_score = round_half_up(result.score)
            if match_score < self.settings.personalized_min_score:
                continue
            recommendations.append(
                PropertyRecommendation(
                    property=prop,
                    match_score=match_score,
                    recommendation_type=PERSONALIZED,
                )
            )

        recommendations.sort(key=lambda r: r.match_score, reverse=True)
        recommendations = recommendations[: self.settings.personalized_limit]
        logger.info(
            f"Personalized: {len(recommendations)} recommendations from {len(self.catalog)} properties"
        )
        return recommendations

    def get_trending_properties(self) -> List[PropertyRecommendation]:
        """
        Rank properties by their externally supplied trending score.

        Metrics for properties missing from the catalog are dropped before
        ranking, so ranks are always 1..N without gaps. A property listed
        more than once keeps only its first metric.
        """
        known = []
        seen_ids = set()
        for metric in self.trending:
            if metric.property_id not in self._by_id:
                logger.debug(f"Skipping trending metric for unknown property {metric.property_id}")
                continue
            if metric.property_id in seen_ids:
                logger.warning(f"Skipping duplicate trending metric for {metric.property_id}")
                continue
            seen_ids.add(metric.property_id)
            known.append(metric)

        known.sort(key=lambda m: m.trending_score, reverse=True)

        recommendations = []
        for rank, metric in enumerate(known[: self.settings.trending_limit], start=1):
            recommendations.append(
                PropertyRecommendation(
                    property=self._by_id[metric.property_id],
                    match_score=max(0, min(100, round_half_up(metric.trending_score))),
                    recommendation_type=TRENDING,
                    is_trending=True,
                    trending_rank=rank,
                )
            )

        logger.info(f"Trending: {len(recommendations)} properties")
        return recommendations

    def get_new_listings(self, now: Optional[datetime] = None) -> List[PropertyRecommendation]:
        """Recently created properties, newest first, with a flat display score."""
        now = now or utc_now()
        cutoff = now - timedelta(days=self.settings.new_listing_days)

        fresh = [p for p in self.catalog if p.created_at >= cutoff]
        fresh.sort(key=lambda p: p.created_at, reverse=True)

        recommendations = [
            PropertyRecommendation(
                property=prop,
                match_score=self.settings.new_listing_score,
                recommendation_type=NEW,
                is_new=True,
            )
            for prop in fresh[: self.settings.new_listings_limit]
        ]
        logger.info(f"New listings: {len(recommendations)} created since {cutoff:%Y-%m-%d}")
        return recommendations

    def get_similar_properties(self, property_id: str) -> List[PropertyRecommendation]:
        """
        Properties resembling ``property_id``, most similar first.

        Returns an empty list for an unknown id.
        """
        reference = self._by_id.get(property_id)
        if reference is None:
            logger.debug(f"No similar properties: unknown property {property_id}")
            return []

        floor = self.settings.similar_min_score
        recommendations = []
        for prop in self.catalog:
            if prop.id == property_id:
                continue
            score = similarity_score(prop, reference)
            if score < floor:
                continue
            recommendations.append(
                PropertyRecommendation(
                    property=prop,
                    match_score=max(floor, score),
                    recommendation_type=SIMILAR,
                )
            )

        recommendations.sort(key=lambda r: r.match_score, reverse=True)
        recommendations = recommendations[: self.settings.similar_limit]
        logger.info(f"Similar to {property_id}: {len(recommendations)} properties")
        return recommendations

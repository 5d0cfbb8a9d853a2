"""Match-score calculator ranking properties against a user's preferences."""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from ..models.property import Property, utc_now
from ..models.recommendation import (
    MatchFactors,
    RecommendationScore,
    UserInteraction,
    UserPreference,
)

logger = logging.getLogger(__name__)


class MatchScoreCalculator:
    """
    Score properties against preferences and interaction history.

    Five sub-scores add up to at most 105 points:
    location (0-35), price (0-25), type (0-20), amenities (0-15), size (0-10).
    A bonus/penalty term is added on top and the total is clamped to 0-100.
    """

    LOCATION_MATCH = 30.0
    FAVORITE_AREA_BONUS = 5.0
    LOCATION_MAX = 35.0
    PRICE_MAX = 25.0
    PRICE_TOLERANCE = 0.3  # fraction of the nearest bound
    TYPE_MATCH = 20.0
    AMENITIES_MAX = 15.0
    BEDROOMS_MATCH = 5.0
    BATHROOMS_MATCH = 5.0

    RECENT_LISTING_BONUS = 3.0
    SEEN_BEFORE_PENALTY = -10.0
    SAME_OWNER_BONUS = 5.0
    RECENT_LISTING_DAYS = 7

    def __init__(
        self,
        preferences: UserPreference,
        catalog: Sequence[Property],
        recent_listing_days: int = RECENT_LISTING_DAYS,
    ):
        """
        Initialize the calculator.

        Args:
            preferences: Explicit user preferences
            catalog: Full property catalog, used to resolve favorited ids
            recent_listing_days: Age under which a listing earns the recency bonus
        """
        self.preferences = preferences
        self.catalog: Dict[str, Property] = {p.id: p for p in catalog}
        self.recent_listing_days = recent_listing_days
        self._locations = [loc.lower() for loc in preferences.preferred_locations]
        self._features = [f.lower() for f in preferences.preferred_features]
        self._types = {t.lower() for t in preferences.property_types}

    def calculate(
        self,
        prop: Property,
        interaction: UserInteraction,
        now: Optional[datetime] = None,
    ) -> RecommendationScore:
        """
        Calculate the match score for a single property.

        Pure over its inputs: the same property, interaction record and
        ``now`` always yield the same result.
        """
        now = now or utc_now()
        favorites = self._favorite_properties(interaction)

        factors = MatchFactors(
            location=self._score_location(prop, favorites),
            price=self._score_price(prop.price),
            type=self._score_type(prop.property_type),
            amenities=self._score_amenities(prop.features),
            size=self._score_size(prop.bedrooms, prop.bathrooms),
            bonus=self._score_bonus(prop, interaction, favorites, now),
        )
        total = max(0.0, min(100.0, factors.subtotal()))
        return RecommendationScore(property_id=prop.id, score=total, factors=factors)

    def _favorite_properties(self, interaction: UserInteraction) -> List[Property]:
        return [
            self.catalog[pid] for pid in interaction.favorite_history if pid in self.catalog
        ]

    def _score_location(self, prop: Property, favorites: List[Property]) -> float:
        """
        30 points for a preferred locality, +5 when a favorited property
        sits in the same area as the candidate. Capped at 35.
        """
        location = prop.location.lower()
        score = 0.0
        if any(pref in location for pref in self._locations):
            score = self.LOCATION_MATCH

        locality = prop.locality.lower()
        if locality and any(locality in fav.location.lower() for fav in favorites):
            score += self.FAVORITE_AREA_BONUS

        return min(score, self.LOCATION_MAX)

    def _score_price(self, price: float) -> float:
        """
        Full marks inside the budget, decaying linearly to zero over a
        tolerance band of 30% of the nearest bound.
        """
        low, high = self.preferences.min_price, self.preferences.max_price
        if low <= price <= high:
            return self.PRICE_MAX

        if price < low:
            overshoot = low - price
            tolerance = low * self.PRICE_TOLERANCE
        else:
            overshoot = price - high
            tolerance = high * self.PRICE_TOLERANCE

        if tolerance <= 0 or overshoot > tolerance:
            return 0.0
        return self.PRICE_MAX * (1 - overshoot / tolerance)

    def _score_type(self, property_type: str) -> float:
        return self.TYPE_MATCH if property_type.lower() in self._types else 0.0

    def _score_amenities(self, features: List[str]) -> float:
        """Share of preferred features present on the property, scaled to 15."""
        if not self._features or not features:
            return 0.0

        lowered = [f.lower() for f in features]
        matched = sum(1 for pref in self._features if any(pref in f for f in lowered))
        return self.AMENITIES_MAX * matched / len(self._features)

    def _score_size(self, bedrooms: int, bathrooms: int) -> float:
        score = 0.0
        min_bedrooms = self.preferences.min_bedrooms
        min_bathrooms = self.preferences.min_bathrooms
        if min_bedrooms is not None and bedrooms >= min_bedrooms:
            score += self.BEDROOMS_MATCH
        if min_bathrooms is not None and bathrooms >= min_bathrooms:
            score += self.BATHROOMS_MATCH
        return score

    def _score_bonus(
        self,
        prop: Property,
        interaction: UserInteraction,
        favorites: List[Property],
        now: datetime,
    ) -> float:
        """Recency bonus, seen-before penalty and same-owner bonus. Unbounded."""
        bonus = 0.0

        if now - prop.created_at <= timedelta(days=self.recent_listing_days):
            bonus += self.RECENT_LISTING_BONUS

        if prop.id in interaction.view_history:
            bonus += self.SEEN_BEFORE_PENALTY

        if prop.owner_id is not None and any(fav.owner_id == prop.owner_id for fav in favorites):
            bonus += self.SAME_OWNER_BONUS

        return bonus

"""Preference, interaction and recommendation result models."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .property import Property, parse_datetime, utc_now

PERSONALIZED = "personalized"
TRENDING = "trending"
NEW = "new"
SIMILAR = "similar"

RECOMMENDATION_TYPES = (PERSONALIZED, TRENDING, NEW, SIMILAR)


@dataclass
class UserPreference:
    """
    Explicit user preferences used by the match-score calculator.

    Defaults mirror the out-of-the-box profile shipped with the app.
    """

    property_types: List[str] = field(default_factory=lambda: ["house", "apartment"])
    min_price: float = 5_000_000
    max_price: float = 15_000_000
    preferred_locations: List[str] = field(
        default_factory=lambda: ["Jakarta", "Bandung", "Tangerang"]
    )
    min_bedrooms: Optional[int] = 2
    min_bathrooms: Optional[int] = 1
    preferred_features: List[str] = field(
        default_factory=lambda: ["Swimming Pool", "Gym", "Security 24/7", "Parking"]
    )

    def validate(self) -> None:
        """Validate that the price range is well formed."""
        if self.min_price < 0 or self.max_price < 0:
            raise ValueError("Price range bounds must be non-negative")
        if self.min_price > self.max_price:
            raise ValueError(
                f"Price range min ({self.min_price}) must not exceed max ({self.max_price})"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPreference":
        """Build preferences from the ``preferences`` config section."""
        defaults = cls()
        price_range = data.get("price_range", {})
        prefs = cls(
            property_types=[t.lower() for t in data.get("property_types", defaults.property_types)],
            min_price=float(price_range.get("min", defaults.min_price)),
            max_price=float(price_range.get("max", defaults.max_price)),
            preferred_locations=list(data.get("preferred_locations", defaults.preferred_locations)),
            min_bedrooms=data.get("min_bedrooms", defaults.min_bedrooms),
            min_bathrooms=data.get("min_bathrooms", defaults.min_bathrooms),
            preferred_features=list(data.get("preferred_features", defaults.preferred_features)),
        )
        prefs.validate()
        return prefs


@dataclass
class UserInteraction:
    """Running interaction history. Histories are most-recent-first."""

    view_history: List[str] = field(default_factory=list)
    favorite_history: List[str] = field(default_factory=list)
    search_history: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utc_now)

    def total(self) -> int:
        """Number of tracked interactions across all histories."""
        return len(self.view_history) + len(self.favorite_history) + len(self.search_history)

    def copy(self) -> "UserInteraction":
        return UserInteraction(
            view_history=list(self.view_history),
            favorite_history=list(self.favorite_history),
            search_history=list(self.search_history),
            last_updated=self.last_updated,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "view_history": list(self.view_history),
            "favorite_history": list(self.favorite_history),
            "search_history": list(self.search_history),
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserInteraction":
        last_updated = data.get("last_updated")
        return cls(
            view_history=[str(v) for v in data.get("view_history", [])],
            favorite_history=[str(v) for v in data.get("favorite_history", [])],
            search_history=list(data.get("search_history", [])),
            last_updated=parse_datetime(last_updated) if last_updated else utc_now(),
        )


@dataclass
class MatchFactors:
    """Named sub-scores behind a match score."""

    location: float = 0.0  # 0-35
    price: float = 0.0  # 0-25
    type: float = 0.0  # 0-20
    amenities: float = 0.0  # 0-15
    size: float = 0.0  # 0-10
    bonus: float = 0.0  # unclamped bonus/penalty

    def subtotal(self) -> float:
        """Sum of all factors before clamping."""
        return self.location + self.price + self.type + self.amenities + self.size + self.bonus

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class RecommendationScore:
    """Clamped 0-100 match score plus its breakdown."""

    property_id: str
    score: float
    factors: MatchFactors


@dataclass
class PropertyRecommendation:
    """A property surfaced by one of the recommendation lists."""

    property: Property
    match_score: int
    recommendation_type: str
    is_new: bool = False
    is_trending: bool = False
    trending_rank: Optional[int] = None

    def __repr__(self) -> str:
        rank = f", rank={self.trending_rank}" if self.trending_rank else ""
        return (
            f"PropertyRecommendation({self.property.id}, {self.recommendation_type}, "
            f"score={self.match_score}{rank})"
        )


@dataclass
class TrendingProperty:
    """Externally maintained popularity metrics for one property."""

    property_id: str
    views: int = 0
    favorites: int = 0
    trending_score: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendingProperty":
        return cls(
            property_id=str(data["property_id"]),
            views=int(data.get("views", 0)),
            favorites=int(data.get("favorites", 0)),
            trending_score=float(data.get("trending_score", 0.0)),
        )

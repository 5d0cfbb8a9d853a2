from .comparison import ComparisonList, calculate_price_per_sqm, get_best_value_index
from .interactions import HistoryLimits, InteractionStore
from .recommender import RecommendationEngine, RecommendationSettings
from .scoring import MatchScoreCalculator
from .storage import InteractionRepository

__all__ = [
    "ComparisonList",
    "calculate_price_per_sqm",
    "get_best_value_index",
    "HistoryLimits",
    "InteractionStore",
    "RecommendationEngine",
    "RecommendationSettings",
    "MatchScoreCalculator",
    "InteractionRepository",
]

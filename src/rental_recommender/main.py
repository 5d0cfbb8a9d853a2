"""Command-line orchestrator for the rental recommender."""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config
from .models.property import Property
from .models.recommendation import PropertyRecommendation, UserPreference
from .services.catalog import load_catalog, load_trending
from .services.comparison import ComparisonList, compare_properties, format_comparison_value
from .services.interactions import HistoryLimits, InteractionStore
from .services.recommender import RecommendationEngine, RecommendationSettings
from .services.storage import InteractionRepository
from .utils.geo import calculate_distance, format_distance, get_nearby_properties
from .utils.logging import setup_logging
from .utils.sorting import SORT_LABELS, sort_properties

logger = logging.getLogger(__name__)


class RentalRecommender:
    """
    Wires configuration, catalog, persisted history and the engine together.

    Coordinates: config -> catalog + trending metrics -> interaction store
                 -> recommendation engine
    """

    def __init__(self, config_path: str = "./config/config.yaml"):
        self.config = load_config(config_path)

        data = self.config.get("data") or {}
        storage = self.config.get("storage") or {}

        self.catalog = load_catalog(data.get("catalog_path", "./data/catalog.json"))
        trending_path = data.get("trending_path")
        trending = load_trending(trending_path) if trending_path else []

        self.settings = RecommendationSettings.from_dict(self.config.get("recommendations") or {})
        self.preferences = UserPreference.from_dict(self.config["preferences"])

        self.repository = InteractionRepository(storage.get("database_path"))
        self.interactions = InteractionStore.from_repository(
            self.repository,
            user_key=storage.get("user_key", "default"),
            limits=HistoryLimits.from_dict(self.config.get("history_limits") or {}),
            min_interactions=self.settings.min_interactions,
        )

        self.engine = RecommendationEngine(
            self.catalog,
            preferences=self.preferences,
            interactions=self.interactions,
            trending=trending,
            settings=self.settings,
        )

    def find(self, property_ids: List[str]) -> List[Property]:
        """Resolve catalog ids, warning about unknown ones."""
        found = []
        for pid in property_ids:
            prop = self.engine.get_property(pid)
            if prop is None:
                logger.warning(f"Unknown property id: {pid}")
                continue
            found.append(prop)
        return found


def _print_section(title: str, recommendations: List[PropertyRecommendation]) -> None:
    print(f"\n=== {title} ({len(recommendations)}) ===")
    for rec in recommendations:
        prop = rec.property
        rank = f"#{rec.trending_rank} " if rec.trending_rank else ""
        print(f"  {rank}[{rec.match_score:>3}] {prop.id}: {prop.title[:50]}")
        print(f"        {prop.display_price()} | {prop.display_size()} | {prop.location}")


def _print_properties(title: str, properties: List[Property]) -> None:
    print(f"\n=== {title} ({len(properties)}) ===")
    for prop in properties:
        print(f"  {prop.id}: {prop.title[:50]} | {prop.display_price()} | {prop.location}")


def _print_comparison(app: RentalRecommender, property_ids: List[str]) -> None:
    selection = ComparisonList()
    for pid in property_ids:
        selection.add(pid)

    properties = app.find(selection.property_ids)
    result = compare_properties(properties)

    print("\n=== Comparison ===")
    print(f"  {'':<14}" + "".join(f"{pid:>16}" for pid in result.property_ids))
    for attribute, values in result.values.items():
        best = result.best[attribute]
        cells = []
        for index, value in enumerate(values):
            marker = "*" if index == best else " "
            cells.append(f"{format_comparison_value(value) + marker:>16}")
        print(f"  {attribute:<14}" + "".join(cells))


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Rental Recommender - personalized property recommendations"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="./config/config.yaml",
        help="Path to configuration file",
    )
    parser.add_argument("--view", metavar="ID", help="Track a property view")
    parser.add_argument("--favorite", metavar="ID", help="Track a favorited property")
    parser.add_argument("--search", metavar="QUERY", help="Track a search query")
    parser.add_argument("--similar", metavar="ID", help="Show properties similar to ID")
    parser.add_argument("--score", metavar="ID", help="Show the match score breakdown for ID")
    parser.add_argument(
        "--nearby",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        help="Show properties near a location",
    )
    parser.add_argument("--radius", type=float, default=10.0, help="Radius in km for --nearby")
    parser.add_argument("--compare", nargs="+", metavar="ID", help="Compare up to 3 properties")
    parser.add_argument(
        "--sort",
        choices=sorted(SORT_LABELS.keys()),
        help="List the catalog in the given order and exit",
    )
    parser.add_argument("--stats", action="store_true", help="Show interaction statistics and exit")
    parser.add_argument("--reset", action="store_true", help="Clear interaction history and exit")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "INFO")

    try:
        app = RentalRecommender(args.config)
        engine = app.engine

        if args.reset:
            app.interactions.clear()
            print("Interaction history cleared")
            return

        if args.view:
            engine.track_view(args.view)
        if args.favorite:
            engine.track_favorite(args.favorite)
        if args.search:
            engine.track_search(args.search)

        if args.stats:
            snapshot = app.interactions.snapshot()
            print("\n=== Interaction Statistics ===")
            print(f"Views: {len(snapshot.view_history)}")
            print(f"Favorites: {len(snapshot.favorite_history)}")
            print(f"Searches: {len(snapshot.search_history)}")
            print(f"Last updated: {snapshot.last_updated:%Y-%m-%d %H:%M:%S}")
            print(f"Personalization enabled: {engine.has_enough_interactions()}")
            return

        if args.sort:
            _print_properties(SORT_LABELS[args.sort], sort_properties(app.catalog, args.sort))
            return

        if args.score:
            result = engine.calculate_match_score_by_id(args.score)
            print(f"\n=== Match score for {args.score}: {result.score:.1f} ===")
            for name, value in result.factors.to_dict().items():
                print(f"  {name:<10} {value:6.2f}")
            return

        if args.similar:
            _print_section(f"Similar to {args.similar}", engine.get_similar_properties(args.similar))
            return

        if args.nearby:
            lat, lon = args.nearby
            nearby = get_nearby_properties(app.catalog, lat, lon, args.radius)
            print(f"\n=== Within {args.radius:g} km ({len(nearby)}) ===")
            for prop in nearby:
                distance = calculate_distance(lat, lon, prop.latitude, prop.longitude)
                print(f"  {format_distance(distance):>8}  {prop.id}: {prop.title[:50]}")
            return

        if args.compare:
            _print_comparison(app, args.compare)
            return

        _print_section("Recommended for you", engine.get_personalized_recommendations())
        _print_section("Trending", engine.get_trending_properties())
        _print_section("New listings", engine.get_new_listings())

    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyError as e:
        logger.error(f"Lookup failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

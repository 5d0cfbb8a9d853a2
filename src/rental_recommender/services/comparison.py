"""Side-by-side comparison helpers."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..models.property import Property, round_half_up

logger = logging.getLogger(__name__)

MAX_COMPARISON_ITEMS = 3


def calculate_price_per_sqm(price: float, area: float) -> int:
    """Price per square meter, rounded. Zero when the area is zero."""
    if area == 0:
        return 0
    return round_half_up(price / area)


def get_best_value_index(values: Sequence[float], lowest: bool = False) -> int:
    """
    Index of the winning value: the maximum, or the minimum when ``lowest``.

    Ties resolve to the first occurrence. Returns -1 for empty input.
    """
    if not values:
        return -1
    target = min(values) if lowest else max(values)
    return list(values).index(target)


def format_comparison_value(value: Any) -> str:
    """Render a comparison cell: check marks for flags, dotted thousands for numbers."""
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, int):
        return f"{value:,}".replace(",", ".")
    if isinstance(value, float):
        if value.is_integer():
            return f"{int(value):,}".replace(",", ".")
        return f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return str(value)


@dataclass
class ComparisonResult:
    """Per-attribute values and the index of the best property for each."""

    property_ids: List[str]
    values: Dict[str, List[float]] = field(default_factory=dict)
    best: Dict[str, int] = field(default_factory=dict)


# attribute -> lower is better
COMPARED_ATTRIBUTES = {
    "price": True,
    "price_per_sqm": True,
    "bedrooms": False,
    "bathrooms": False,
    "area": False,
}


def compare_properties(properties: Sequence[Property]) -> ComparisonResult:
    """Work out which property wins each compared attribute."""
    result = ComparisonResult(property_ids=[p.id for p in properties])
    result.values = {
        "price": [p.price for p in properties],
        "price_per_sqm": [calculate_price_per_sqm(p.price, p.area) for p in properties],
        "bedrooms": [p.bedrooms for p in properties],
        "bathrooms": [p.bathrooms for p in properties],
        "area": [p.area for p in properties],
    }
    for attribute, lowest in COMPARED_ATTRIBUTES.items():
        result.best[attribute] = get_best_value_index(result.values[attribute], lowest=lowest)
    return result


class ComparisonList:
    """Ordered selection of property ids queued for comparison."""

    def __init__(self, max_items: int = MAX_COMPARISON_ITEMS):
        if max_items <= 0:
            raise ValueError("max_items must be positive")
        self.max_items = max_items
        self._ids: List[str] = []

    @property
    def property_ids(self) -> List[str]:
        return list(self._ids)

    def add(self, property_id: str) -> bool:
        """
        Queue a property for comparison.

        Returns:
            False if the list is full or the property is already queued
        """
        if len(self._ids) >= self.max_items:
            logger.warning(f"Comparison list full ({self.max_items}), not adding {property_id}")
            return False
        if property_id in self._ids:
            logger.debug(f"Property already in comparison: {property_id}")
            return False
        self._ids.append(property_id)
        return True

    def remove(self, property_id: str) -> None:
        self._ids = [pid for pid in self._ids if pid != property_id]

    def clear(self) -> None:
        self._ids = []

    def contains(self, property_id: str) -> bool:
        return property_id in self._ids

    def count(self) -> int:
        return len(self._ids)

    def can_add_more(self) -> bool:
        return len(self._ids) < self.max_items

"""Catalog sort options used by search and listing views."""

from typing import List, Sequence

from ..models.property import Property

SORT_LABELS = {
    "newest": "Newest First",
    "price-low": "Price: Low to High",
    "price-high": "Price: High to Low",
    "area-small": "Area: Smallest",
    "area-large": "Area: Largest",
}


def sort_properties(properties: Sequence[Property], option: str) -> List[Property]:
    """
    Return a sorted copy of ``properties``.

    Unknown options return the properties in their original order.
    """
    if option == "newest":
        return sorted(properties, key=lambda p: p.created_at, reverse=True)
    if option == "price-low":
        return sorted(properties, key=lambda p: p.price)
    if option == "price-high":
        return sorted(properties, key=lambda p: p.price, reverse=True)
    if option == "area-small":
        return sorted(properties, key=lambda p: p.area)
    if option == "area-large":
        return sorted(properties, key=lambda p: p.area, reverse=True)
    return list(properties)


def get_sort_label(option: str) -> str:
    return SORT_LABELS.get(option, "Sort")

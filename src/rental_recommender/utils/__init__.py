from .geo import calculate_distance, format_distance, get_region_for_properties
from .logging import setup_logging

__all__ = [
    "calculate_distance",
    "format_distance",
    "get_region_for_properties",
    "setup_logging",
]

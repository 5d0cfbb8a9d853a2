"""Loading the property catalog and trending metrics from local files."""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List

import yaml

from ..models.property import InvalidInputError, Property
from ..models.recommendation import TrendingProperty

logger = logging.getLogger(__name__)

# File suffix -> function returning the raw list of records
LOADER_REGISTRY: Dict[str, Callable[[Path], Any]] = {}


def register_loader(*suffixes: str):
    """Decorator to register a record loader for one or more file suffixes."""

    def decorator(func: Callable[[Path], Any]):
        for suffix in suffixes:
            LOADER_REGISTRY[suffix] = func
        return func

    return decorator


@register_loader(".json")
def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@register_loader(".yaml", ".yml")
def _load_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _read_records(path: str, key: str) -> List[Dict[str, Any]]:
    """
    Read a list of records from a catalog file.

    The file may hold a bare list or a mapping with the list under ``key``.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the suffix has no loader or the content isn't a list
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    loader = LOADER_REGISTRY.get(file_path.suffix.lower())
    if loader is None:
        raise ValueError(
            f"Unsupported data file type: {file_path.suffix}. "
            f"Available: {sorted(LOADER_REGISTRY.keys())}"
        )

    data = loader(file_path)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of records in {path}")
    return data


def load_catalog(path: str) -> List[Property]:
    """
    Load and validate the property catalog.

    Invalid records are skipped with a warning.
    """
    properties = []
    seen_ids = set()
    records = _read_records(path, "properties")

    for index, record in enumerate(records):
        try:
            prop = Property.from_dict(record)
        except InvalidInputError as e:
            logger.warning(f"Skipping catalog record {index}: {e}")
            continue

        if prop.id in seen_ids:
            logger.warning(f"Skipping duplicate catalog id {prop.id}")
            continue
        seen_ids.add(prop.id)
        properties.append(prop)

    logger.info(f"Loaded {len(properties)} properties from {path} ({len(records)} records)")
    return properties


def load_trending(path: str) -> List[TrendingProperty]:
    """
    Load externally computed trending metrics.

    Invalid records are skipped with a warning, as are repeated property
    ids after the first.
    """
    metrics = []
    seen_ids = set()
    for index, record in enumerate(_read_records(path, "trending")):
        try:
            metric = TrendingProperty.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping trending record {index}: {e}")
            continue

        if metric.property_id in seen_ids:
            logger.warning(f"Skipping duplicate trending metric for {metric.property_id}")
            continue
        seen_ids.add(metric.property_id)
        metrics.append(metric)

    logger.info(f"Loaded {len(metrics)} trending metrics from {path}")
    return metrics

"""Normalized rental property model shared by every recommendation service."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..utils.geo import is_valid_coordinates

PROPERTY_TYPES = ("apartment", "house", "villa")


class InvalidInputError(ValueError):
    """Raised when a catalog record cannot be turned into a valid Property."""


def parse_datetime(value: Any) -> datetime:
    """
    Parse an ISO-8601 string (or datetime) into a naive UTC datetime.

    Aware datetimes are converted to UTC and stripped of tzinfo so they
    compare cleanly with ``utc_now()``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidInputError(f"Invalid timestamp: {value!r}") from e
    else:
        raise InvalidInputError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching display rounding."""
    return int(math.floor(value + 0.5))


def format_price_short(price: float) -> str:
    """Compact price for markers and cards (e.g. ``5.0jt`` or ``750rb``)."""
    if price >= 1_000_000:
        return f"{price / 1_000_000:.1f}jt"
    return f"{price / 1000:.0f}rb"


@dataclass
class Property:
    """
    Rental property listing.

    Catalog records are converted to this format once at load time and
    treated as read-only by the scoring and selection services.
    """

    # Identification
    id: str
    title: str

    # Pricing and kind
    price: float
    property_type: str  # apartment | house | villa

    # Location: "Locality, District, City"
    location: str
    latitude: float = 0.0
    longitude: float = 0.0

    # Size
    bedrooms: int = 0
    bathrooms: int = 0
    area: float = 0.0  # square meters

    # Features
    features: List[str] = field(default_factory=list)
    furnished: bool = False
    pet_friendly: bool = False
    has_parking: bool = False
    is_available: bool = True
    description: Optional[str] = None

    # Ownership and timestamps
    owner_id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def locality(self) -> str:
        """First comma-delimited segment of the location."""
        return self.location.split(",")[0]

    @property
    def city(self) -> str:
        """Last comma-delimited segment of the location, trimmed."""
        return self.location.split(",")[-1].strip()

    def validate(self) -> None:
        """
        Check the record against catalog boundary rules.

        Raises:
            InvalidInputError: If any field is out of range
        """
        if not self.id:
            raise InvalidInputError("Property id is required")
        if self.property_type not in PROPERTY_TYPES:
            raise InvalidInputError(
                f"Property {self.id}: unknown type {self.property_type!r}, "
                f"expected one of {', '.join(PROPERTY_TYPES)}"
            )
        if self.price < 0:
            raise InvalidInputError(f"Property {self.id}: negative price {self.price}")
        if self.bedrooms < 0 or self.bathrooms < 0 or self.area < 0:
            raise InvalidInputError(f"Property {self.id}: negative size attribute")

        if not is_valid_coordinates(self.latitude, self.longitude):
            raise InvalidInputError(
                f"Property {self.id}: invalid coordinates ({self.latitude}, {self.longitude})"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Property":
        """
        Build a validated Property from a catalog record.

        Raises:
            InvalidInputError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidInputError(f"Property record must be a mapping, got {type(data).__name__}")

        features = data.get("features") or []
        if not isinstance(features, list):
            raise InvalidInputError(
                f"Property {data.get('id')}: features must be a list, got {type(features).__name__}"
            )

        try:
            prop = cls(
                id=str(data["id"]),
                title=data.get("title", ""),
                price=float(data["price"]),
                property_type=str(data.get("type", data.get("property_type", ""))).lower(),
                location=data.get("location", ""),
                latitude=float(data.get("latitude", 0.0)),
                longitude=float(data.get("longitude", 0.0)),
                bedrooms=int(data.get("bedrooms", 0)),
                bathrooms=int(data.get("bathrooms", 0)),
                area=float(data.get("area", 0.0)),
                features=[str(f) for f in features],
                furnished=bool(data.get("furnished", False)),
                pet_friendly=bool(data.get("pet_friendly", False)),
                has_parking=bool(data.get("has_parking", False)),
                is_available=bool(data.get("is_available", True)),
                description=data.get("description"),
                owner_id=str(data["owner_id"]) if data.get("owner_id") is not None else None,
                created_at=parse_datetime(data["created_at"]) if "created_at" in data else utc_now(),
            )
        except KeyError as e:
            raise InvalidInputError(f"Missing required field {e.args[0]!r}") from e
        except InvalidInputError:
            raise
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed property record: {e}") from e

        prop.validate()
        return prop

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the catalog record format."""
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "type": self.property_type,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area": self.area,
            "features": list(self.features),
            "furnished": self.furnished,
            "pet_friendly": self.pet_friendly,
            "has_parking": self.has_parking,
            "is_available": self.is_available,
            "description": self.description,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
        }

    def display_price(self) -> str:
        """Format price in Rupiah with dot thousands separators."""
        return f"Rp {self.price:,.0f}".replace(",", ".")

    def display_size(self) -> str:
        """Format size information for display."""
        parts = [f"{self.bedrooms}BR", f"{self.bathrooms}BA"]
        if self.area:
            parts.append(f"{self.area:,.0f} m²".replace(",", "."))
        return " | ".join(parts)

    def __repr__(self) -> str:
        return f"Property({self.id}, {self.display_price()}, {self.display_size()})"

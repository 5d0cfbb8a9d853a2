"""Tests for property and recommendation models."""

import pytest
from datetime import datetime, timedelta, timezone

from rental_recommender.models.property import (
    InvalidInputError,
    Property,
    format_price_short,
    parse_datetime,
    round_half_up,
    utc_now,
)
from rental_recommender.models.recommendation import (
    MatchFactors,
    UserInteraction,
    UserPreference,
)


@pytest.fixture
def record():
    return {
        "id": 7,
        "title": "Family House in Dago",
        "location": "Dago, Coblong, Bandung",
        "price": 12000000,
        "type": "House",
        "bedrooms": 3,
        "bathrooms": 2,
        "area": 150,
        "features": ["Garden", "Parking"],
        "has_parking": True,
        "owner_id": 2,
        "latitude": -6.8847,
        "longitude": 107.6131,
        "created_at": "2026-01-10T08:00:00Z",
    }


class TestProperty:
    """Tests for Property dataclass."""

    def test_from_dict(self, record):
        prop = Property.from_dict(record)

        assert prop.id == "7"
        assert prop.property_type == "house"
        assert prop.owner_id == "2"
        assert prop.features == ["Garden", "Parking"]
        assert prop.created_at == datetime(2026, 1, 10, 8, 0)

    def test_locality_and_city(self, record):
        prop = Property.from_dict(record)
        assert prop.locality == "Dago"
        assert prop.city == "Bandung"

    def test_unknown_type_rejected(self, record):
        record["type"] = "castle"
        with pytest.raises(InvalidInputError, match="unknown type"):
            Property.from_dict(record)

    def test_negative_price_rejected(self, record):
        record["price"] = -1
        with pytest.raises(InvalidInputError, match="negative price"):
            Property.from_dict(record)

    def test_invalid_coordinates_rejected(self, record):
        record["latitude"] = 120
        with pytest.raises(InvalidInputError, match="invalid coordinates"):
            Property.from_dict(record)

    def test_missing_price_rejected(self, record):
        del record["price"]
        with pytest.raises(InvalidInputError, match="price"):
            Property.from_dict(record)

    def test_malformed_number_rejected(self, record):
        record["bedrooms"] = "three"
        with pytest.raises(InvalidInputError, match="Malformed"):
            Property.from_dict(record)

    def test_string_features_rejected(self, record):
        record["features"] = "Gym"
        with pytest.raises(InvalidInputError, match="features must be a list"):
            Property.from_dict(record)

    def test_non_mapping_record_rejected(self):
        with pytest.raises(InvalidInputError, match="must be a mapping"):
            Property.from_dict(["7", "Family House"])

    def test_missing_features_default_to_empty(self, record):
        del record["features"]
        assert Property.from_dict(record).features == []

    def test_to_dict_round_trip(self, record):
        prop = Property.from_dict(record)
        assert Property.from_dict(prop.to_dict()) == prop

    def test_display_price(self, make_property):
        assert make_property(price=8_500_000).display_price() == "Rp 8.500.000"

    def test_display_size(self, make_property):
        prop = make_property(bedrooms=3, bathrooms=2, area=1250.0)
        assert prop.display_size() == "3BR | 2BA | 1.250 m²"

    def test_repr(self, make_property):
        result = repr(make_property())
        assert "p1" in result
        assert "Rp 10.000.000" in result


class TestHelpers:
    def test_parse_datetime_converts_to_naive_utc(self):
        assert parse_datetime("2026-01-10T15:00:00+07:00") == datetime(2026, 1, 10, 8, 0)

    def test_parse_datetime_invalid(self):
        with pytest.raises(InvalidInputError, match="Invalid timestamp"):
            parse_datetime("yesterday")

    def test_utc_now_is_naive_utc(self):
        current = utc_now()
        expected = datetime.now(timezone.utc).replace(tzinfo=None)
        assert current.tzinfo is None
        assert abs(expected - current) < timedelta(seconds=5)

    def test_round_half_up(self):
        assert round_half_up(88.5) == 89
        assert round_half_up(88.49) == 88
        assert round_half_up(2.5) == 3

    def test_format_price_short(self):
        assert format_price_short(8_500_000) == "8.5jt"
        assert format_price_short(750_000) == "750rb"


class TestUserPreference:
    def test_defaults(self):
        prefs = UserPreference()
        assert prefs.property_types == ["house", "apartment"]
        assert (prefs.min_price, prefs.max_price) == (5_000_000, 15_000_000)
        assert prefs.preferred_locations == ["Jakarta", "Bandung", "Tangerang"]
        assert (prefs.min_bedrooms, prefs.min_bathrooms) == (2, 1)

    def test_from_dict(self):
        prefs = UserPreference.from_dict(
            {"property_types": ["Villa"], "price_range": {"min": 1, "max": 2}, "min_bedrooms": None}
        )
        assert prefs.property_types == ["villa"]
        assert (prefs.min_price, prefs.max_price) == (1.0, 2.0)
        assert prefs.min_bedrooms is None
        assert prefs.preferred_features == UserPreference().preferred_features

    def test_inverted_price_range(self):
        with pytest.raises(ValueError, match="must not exceed"):
            UserPreference(min_price=10, max_price=5).validate()


class TestUserInteraction:
    def test_total(self):
        interaction = UserInteraction(view_history=["1"], search_history=["a", "b"])
        assert interaction.total() == 3

    def test_dict_round_trip(self):
        interaction = UserInteraction(
            view_history=["1"], favorite_history=["2"], search_history=["q"],
            last_updated=datetime(2026, 2, 1, 10, 0),
        )
        assert UserInteraction.from_dict(interaction.to_dict()) == interaction


class TestMatchFactors:
    def test_subtotal_includes_bonus(self):
        factors = MatchFactors(location=30, price=25, type=20, amenities=15, size=10, bonus=-10)
        assert factors.subtotal() == 90

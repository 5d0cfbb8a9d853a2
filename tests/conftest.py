"""Shared fixtures for rental-recommender tests."""

import pytest
from datetime import datetime, timedelta

from rental_recommender.models.property import Property
from rental_recommender.models.recommendation import UserInteraction, UserPreference
from rental_recommender.services.interactions import InteractionStore

NOW = datetime(2026, 1, 15, 12, 0, 0)


@pytest.fixture
def now():
    """Fixed clock so recency rules are deterministic."""
    return NOW


@pytest.fixture
def make_property(now):
    """Factory for properties that fully match the default preferences."""

    def _make(**overrides):
        data = dict(
            id="p1",
            title="Modern Apartment in Kemang",
            price=10_000_000,
            property_type="apartment",
            location="Kemang, Jakarta Selatan, Jakarta",
            latitude=-6.2607,
            longitude=106.8137,
            bedrooms=2,
            bathrooms=1,
            area=70.0,
            features=["Swimming Pool", "Gym", "Security 24/7", "Parking"],
            owner_id="owner-1",
            created_at=now - timedelta(days=30),
        )
        data.update(overrides)
        return Property(**data)

    return _make


@pytest.fixture
def preferences():
    """Default preference profile."""
    return UserPreference()


@pytest.fixture
def empty_interactions():
    return UserInteraction()


@pytest.fixture
def warm_store():
    """Interaction store past the cold-start threshold."""
    store = InteractionStore()
    store.track_search("apartment jakarta")
    store.track_search("house bandung")
    store.track_search("villa bali")
    return store


@pytest.fixture
def mismatched_property(make_property):
    """A property that matches none of the default preferences."""
    return make_property(
        id="villa-1",
        title="Cliffside Villa",
        price=60_000_000,
        property_type="villa",
        location="Uluwatu, Badung, Bali",
        latitude=-8.8291,
        longitude=115.0849,
        bedrooms=1,
        bathrooms=0,
        area=400.0,
        features=[],
        owner_id="owner-9",
    )

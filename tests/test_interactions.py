"""Tests for the interaction store."""

import sqlite3

import pytest

from rental_recommender.models.recommendation import UserInteraction
from rental_recommender.services.interactions import HistoryLimits, InteractionStore
from rental_recommender.services.storage import InteractionRepository


class RecordingRepository:
    """Stand-in repository that records every save."""

    def __init__(self):
        self.saved = []

    def save(self, user_key, interaction):
        self.saved.append((user_key, interaction.copy()))


class TestHistoryLimits:
    def test_defaults(self):
        limits = HistoryLimits()
        assert (limits.views, limits.searches, limits.favorites) == (50, 20, 200)

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError, match="must be positive"):
            HistoryLimits(searches=0).validate()


class TestInteractionStore:
    """Tests for InteractionStore."""

    def test_track_view_prepends(self):
        store = InteractionStore()
        store.track_view("1")
        store.track_view("2")

        assert store.snapshot().view_history == ["2", "1"]

    def test_duplicate_view_is_noop(self):
        store = InteractionStore()
        store.track_view("1")
        store.track_view("2")
        stamp = store.snapshot().last_updated

        store.track_view("1")

        snapshot = store.snapshot()
        assert snapshot.view_history == ["2", "1"]
        assert snapshot.last_updated == stamp

    def test_view_history_capped_at_50(self):
        store = InteractionStore()
        for i in range(55):
            store.track_view(str(i))

        history = store.snapshot().view_history
        assert len(history) == 50
        assert history[0] == "54"
        assert "4" not in history

    def test_favorites_capped(self):
        store = InteractionStore(limits=HistoryLimits(favorites=3))
        for pid in ("a", "b", "c", "d"):
            store.track_favorite(pid)

        assert store.snapshot().favorite_history == ["d", "c", "b"]

    def test_duplicate_favorite_is_noop(self):
        store = InteractionStore()
        store.track_favorite("a")
        store.track_favorite("a")
        assert store.snapshot().favorite_history == ["a"]

    def test_search_keeps_duplicates(self):
        store = InteractionStore()
        store.track_search("villa bali")
        store.track_search("villa bali")
        assert store.snapshot().search_history == ["villa bali", "villa bali"]

    def test_search_history_capped_at_20(self):
        store = InteractionStore()
        for i in range(25):
            store.track_search(f"query {i}")

        history = store.snapshot().search_history
        assert len(history) == 20
        assert history[0] == "query 24"

    def test_has_enough_interactions_threshold(self):
        store = InteractionStore()
        store.track_view("1")
        store.track_search("house")
        assert store.has_enough_interactions() is False

        store.track_favorite("1")
        assert store.has_enough_interactions() is True

    def test_snapshot_is_a_copy(self):
        store = InteractionStore()
        snapshot = store.snapshot()
        snapshot.view_history.append("x")
        assert store.snapshot().view_history == []

    def test_clear(self):
        store = InteractionStore(UserInteraction(view_history=["1"], search_history=["q"]))
        store.clear()
        assert store.snapshot().total() == 0


class TestPersistence:
    """Write-through persistence of the interaction record."""

    def test_each_mutation_saved(self):
        repository = RecordingRepository()
        store = InteractionStore(repository=repository, user_key="alice")

        store.track_view("1")
        store.track_search("house")

        assert len(repository.saved) == 2
        assert repository.saved[-1][0] == "alice"
        assert repository.saved[-1][1].search_history == ["house"]

    def test_noop_mutation_not_saved(self):
        repository = RecordingRepository()
        store = InteractionStore(repository=repository)

        store.track_favorite("1")
        store.track_favorite("1")

        assert len(repository.saved) == 1

    def test_history_survives_restart(self, tmp_path):
        repository = InteractionRepository(str(tmp_path / "interactions.db"))
        store = InteractionStore.from_repository(repository, user_key="bob")
        store.track_view("1")
        store.track_favorite("2")
        store.track_search("apartment")

        restored = InteractionStore.from_repository(repository, user_key="bob")

        assert restored.has_enough_interactions() is True
        assert restored.snapshot().favorite_history == ["2"]

    def test_fresh_store_for_unknown_user(self, tmp_path):
        repository = InteractionRepository(str(tmp_path / "interactions.db"))
        store = InteractionStore.from_repository(repository, user_key="nobody")
        assert store.snapshot().total() == 0


class FailingRepository:
    """Repository whose writes always fail."""

    def save(self, user_key, interaction):
        raise sqlite3.OperationalError("database is locked")

    def delete(self, user_key):
        raise sqlite3.OperationalError("database is locked")


class TestFailedWrites:
    """A rejected write leaves the in-memory record untouched."""

    def test_failed_save_keeps_previous_record(self):
        store = InteractionStore(
            UserInteraction(view_history=["1"]), repository=FailingRepository()
        )
        before = store.snapshot()

        with pytest.raises(sqlite3.OperationalError):
            store.track_view("2")
        with pytest.raises(sqlite3.OperationalError):
            store.track_search("villa")

        after = store.snapshot()
        assert after.view_history == ["1"]
        assert after.search_history == []
        assert after.last_updated == before.last_updated

    def test_failed_delete_keeps_history(self):
        store = InteractionStore(
            UserInteraction(favorite_history=["1"]), repository=FailingRepository()
        )

        with pytest.raises(sqlite3.OperationalError):
            store.clear()

        assert store.snapshot().favorite_history == ["1"]

"""End-to-end tests for the command-line entry point."""

import json
from datetime import timedelta

import pytest
import yaml

from rental_recommender.main import main
from rental_recommender.models.property import utc_now


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("INTERACTIONS_DB_PATH", raising=False)
    created = (utc_now() - timedelta(days=2)).isoformat()
    catalog = [
        {
            "id": "1", "title": "Modern Apartment in Kemang",
            "location": "Kemang, Jakarta Selatan, Jakarta", "price": 8500000,
            "type": "apartment", "bedrooms": 2, "bathrooms": 1, "area": 65,
            "features": ["Gym"], "latitude": -6.2607, "longitude": 106.8137,
            "created_at": created,
        },
        {
            "id": "2", "title": "Townhouse in Menteng",
            "location": "Menteng, Jakarta Pusat, Jakarta", "price": 14500000,
            "type": "house", "bedrooms": 3, "bathrooms": 2, "area": 140,
            "features": ["Parking"], "latitude": -6.1957, "longitude": 106.8327,
            "created_at": created,
        },
    ]
    trending = [{"property_id": "2", "views": 10, "favorites": 2, "trending_score": 77}]
    (tmp_path / "catalog.json").write_text(json.dumps(catalog))
    (tmp_path / "trending.json").write_text(json.dumps(trending))

    config = {
        "data": {
            "catalog_path": str(tmp_path / "catalog.json"),
            "trending_path": str(tmp_path / "trending.json"),
        },
        "storage": {"database_path": str(tmp_path / "interactions.db"), "user_key": "cli"},
        "preferences": {"price_range": {"min": 5000000, "max": 15000000}},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config))
    return str(path)


class TestMain:
    def test_default_sections(self, config_path, capsys):
        main(["-c", config_path])
        out = capsys.readouterr().out

        assert "Recommended for you (0)" in out
        assert "Trending (1)" in out
        assert "New listings (2)" in out

    def test_tracking_persists_between_runs(self, config_path, capsys):
        main(["-c", config_path, "--view", "1"])
        main(["-c", config_path, "--search", "house jakarta"])
        main(["-c", config_path, "--favorite", "2", "--stats"])
        out = capsys.readouterr().out

        assert "Views: 1" in out
        assert "Favorites: 1" in out
        assert "Searches: 1" in out
        assert "Personalization enabled: True" in out

    def test_reset(self, config_path, capsys):
        main(["-c", config_path, "--view", "1"])
        main(["-c", config_path, "--reset"])
        main(["-c", config_path, "--stats"])
        out = capsys.readouterr().out

        assert "Interaction history cleared" in out
        assert "Views: 0" in out

    def test_compare(self, config_path, capsys):
        main(["-c", config_path, "--compare", "1", "2"])
        out = capsys.readouterr().out

        assert "Comparison" in out
        assert "price_per_sqm" in out

    def test_unknown_score_id_exits(self, config_path):
        with pytest.raises(SystemExit) as exc:
            main(["-c", config_path, "--score", "missing"])
        assert exc.value.code == 1

    def test_missing_config_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(tmp_path / "nope.yaml")])
        assert exc.value.code == 1

"""
Tests for catalog loading and application configuration.
"""

from pathlib import Path

import pytest

from meetpoint.config import AppConfig, RankingConfig
from meetpoint.domain.catalog import DEFAULT_CATALOG_PATH, load_catalog, parse_catalog
from meetpoint.domain.exceptions import CatalogError
from meetpoint.domain.models import GeoPoint


class TestCatalog:
    """Tests for the candidate location catalog."""

    def test_bundled_catalog(self):
        catalog = load_catalog()

        assert len(catalog) == 61
        assert catalog[0].identifier == "1"
        assert catalog[0].abbreviation == "LWSN"
        assert catalog[0].coordinates == GeoPoint(40.42833, -86.91620)
        assert len({c.identifier for c in catalog}) == len(catalog)

    def test_default_path_points_at_bundled_file(self):
        assert DEFAULT_CATALOG_PATH.exists()

    def test_numeric_ids_are_accepted(self):
        catalog = parse_catalog([{"id": 7, "name": "Hovde Hall", "abbr": "HOVD", "lat": 40.42472, "lng": -86.91816}])

        assert catalog[0].identifier == "7"

    def test_duplicate_ids_raise_error(self):
        entry = {"id": "1", "name": "A", "abbr": "A", "lat": 0.0, "lng": 0.0}

        with pytest.raises(CatalogError, match="Duplicate catalog id"):
            parse_catalog([entry, dict(entry, name="B")])

    def test_out_of_range_coordinates_raise_error(self):
        with pytest.raises(CatalogError, match="entry #1"):
            parse_catalog([{"id": "1", "name": "A", "abbr": "A", "lat": 95.0, "lng": 0.0}])

    def test_root_must_be_a_list(self):
        with pytest.raises(CatalogError, match="list"):
            parse_catalog({"id": "1"})

    def test_missing_file_raises_error(self, tmp_path: Path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises_error(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("- id: [unclosed\n", encoding="utf-8")

        with pytest.raises(CatalogError, match="Invalid YAML"):
            load_catalog(path)

    def test_empty_file_is_empty_catalog(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_catalog(path) == []


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.catalog_path is None
        assert config.ranking.top_k == 5
        assert config.timezone == "America/New_York"
        assert config.log_level == "WARNING"

    def test_load_from_yaml_resolves_relative_catalog(self, tmp_path: Path):
        path = tmp_path / "meetpoint.yaml"
        path.write_text(
            "catalog_path: catalogs/campus.yaml\n"
            "ranking:\n"
            "  top_k: 3\n"
            "log_level: debug\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.catalog_path == tmp_path / "catalogs" / "campus.yaml"
        assert config.ranking.top_k == 3
        assert config.log_level == "DEBUG"

    def test_invalid_top_k_raises_error(self):
        with pytest.raises(ValueError, match="top_k"):
            RankingConfig(top_k=0)

    def test_unknown_log_level_raises_error(self):
        with pytest.raises(ValueError, match="log level"):
            AppConfig(log_level="loud")

    def test_missing_file_raises_error(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "meetpoint.yaml")

    def test_non_mapping_root_raises_error(self, tmp_path: Path):
        path = tmp_path / "meetpoint.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(path)

    def test_load_or_default_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = AppConfig.load_or_default()

        assert config == AppConfig()

    def test_load_or_default_with_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_or_default(tmp_path / "nope.yaml")

"""Tests for io.py: JSON loading of the platform table and exhibit catalog."""
import json

import pytest

from exhibitspace.model.exhibits import DisplayKind
from exhibitspace.model.io import (
    exhibit_catalog_from_dict, load_exhibit_catalog, load_platform_registry,
    platform_registry_from_dict, save_platform_registry,
)


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestPlatformTable:
    def test_save_and_reload(self, tmp_path, registry):
        path = str(tmp_path / "platforms.json")
        save_platform_registry(registry, path)
        reloaded = load_platform_registry(path)
        assert reloaded.list_platform_ids() == registry.list_platform_ids()
        assert reloaded.get_platform("Q2") == registry.get_platform("Q2")
        assert reloaded.connections == registry.connections

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_platform_registry(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_platform_registry(str(path))

    def test_top_level_must_be_object(self, tmp_path):
        with pytest.raises(ValueError):
            load_platform_registry(_write(tmp_path / "list.json", [1, 2, 3]))

    def test_missing_radius(self):
        with pytest.raises(ValueError, match="Invalid platform record"):
            platform_registry_from_dict({"platforms": [{"id": "B1", "center": [0, 0, 0]}]})

    def test_non_positive_radius(self):
        with pytest.raises(ValueError):
            platform_registry_from_dict({"platforms": [{"id": "B1", "center": [0, 0, 0], "radius": 0}]})

    def test_bad_connection(self):
        data = {
            "platforms": [{"id": "S", "center": [0, 8, 0], "radius": 8}],
            "connections": [{"from": "S"}],
        }
        with pytest.raises(ValueError, match="Invalid connection record"):
            platform_registry_from_dict(data)


class TestCatalog:
    def test_sample_catalog(self, sample_catalog):
        assert len(sample_catalog) == 16
        assert sample_catalog.get("p15").display_kind == DisplayKind.BOTH
        assert len(sample_catalog.guidelines) == 6

    def test_defaults(self):
        catalog = exhibit_catalog_from_dict({"exhibits": [{"id": "a", "platforms": ["B1"]}]})
        exhibit = catalog.get("a")
        assert exhibit.display_kind == DisplayKind.BOOTH
        assert exhibit.platform_ids == frozenset({"B1"})
        assert catalog.guidelines == ()

    def test_platforms_must_be_a_list(self):
        with pytest.raises(ValueError):
            exhibit_catalog_from_dict({"exhibits": [{"id": "a", "platforms": "B1"}]})

    def test_unknown_display_kind(self):
        with pytest.raises(ValueError):
            exhibit_catalog_from_dict({"exhibits": [{"id": "a", "platforms": ["B1"], "display_kind": "ceiling"}]})

    def test_duplicate_ids(self, tmp_path):
        data = {"exhibits": [{"id": "a", "platforms": ["B1"]}, {"id": "a", "platforms": ["B2"]}]}
        with pytest.raises(ValueError, match="Duplicate"):
            load_exhibit_catalog(_write(tmp_path / "dup.json", data))

    def test_to_dict_reloads(self, sample_catalog):
        assert exhibit_catalog_from_dict(sample_catalog.to_dict()) == sample_catalog

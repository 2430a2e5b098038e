"""Tests for catalog loading."""

import pytest
import yaml

from versionist import (
    CatalogLoader,
    ConversionRegistry,
    FormatRegistry,
    SchemaDefinitionError,
    default_conversions,
    default_formats,
    load_catalog,
)
from versionist.catalog import CatalogConfig


def test_load_catalog_file(catalog_file):
    """Test that a catalog registers its formats and conversions."""
    catalog = CatalogLoader(catalog_file).load()

    assert catalog.get_statistics() == {"schemas": 2, "formats": 2, "conversions": 2}
    assert default_formats.names() == ["triple", "standard"]
    assert len(default_conversions) == 2

    standard = default_formats.get("standard")
    value = standard.parse("1.0b2")
    assert value.values_array() == [1, 0, 0, 0, "beta", 2]
    assert str(value.convert("triple")) == "1.0.0"


def test_load_into_given_registries(catalog_file):
    formats = FormatRegistry()
    conversions = ConversionRegistry(formats)

    CatalogLoader(catalog_file).load(formats, conversions)

    assert formats.names() == ["triple", "standard"]
    assert len(conversions) == 2
    assert len(default_formats) == 0


def test_reload_requires_replace(catalog_file):
    """Test that loading the same catalog twice needs replace=True."""
    loader = CatalogLoader(catalog_file)
    first = loader.load()

    with pytest.raises(SchemaDefinitionError, match="already registered"):
        loader.load()

    second = loader.load(replace=True)
    assert default_formats.get("triple") is second.formats["triple"]
    assert second.formats["triple"] is not first.formats["triple"]


def test_read_validates_only(catalog_file):
    config = CatalogLoader(catalog_file).read()

    assert isinstance(config, CatalogConfig)
    assert config.formats["standard"].styles["release_type"].labels["alpha"] == "a"
    assert len(default_formats) == 0


def test_format_unknown_schema():
    with pytest.raises(SchemaDefinitionError, match="unknown schema 'missing'"):
        load_catalog({"formats": {"broken": {"schema": "missing"}}})


def test_conversion_unknown_schema():
    data = {
        "schemas": [{"name": "one", "fields": [{"name": "major"}]}],
        "conversions": [{"from": "one", "to": "two", "fields": {"major": "major"}}],
    }

    with pytest.raises(SchemaDefinitionError, match="unknown schema 'two'"):
        load_catalog(data)


def test_conversion_needs_fields():
    data = {
        "schemas": [{"name": "one", "fields": [{"name": "major"}]}],
        "conversions": [{"from": "one", "to": "one", "fields": {}}],
    }

    with pytest.raises(SchemaDefinitionError):
        load_catalog(data)


def test_duplicate_schema():
    schema = {"name": "one", "fields": [{"name": "major"}]}

    with pytest.raises(SchemaDefinitionError, match="Duplicate schema"):
        load_catalog({"schemas": [schema, schema]})


def test_required_fields_validated():
    data = {
        "schemas": [{"name": "one", "fields": [{"name": "major"}]}],
        "formats": {"one": {"schema": "one", "required_fields": 0}},
    }

    with pytest.raises(SchemaDefinitionError) as exc_info:
        load_catalog(data)

    assert exc_info.value.details["errors"]


def test_unknown_top_level_key():
    with pytest.raises(SchemaDefinitionError):
        load_catalog({"schemes": []})


def test_value_translation_tables(tmp_path):
    """Test that catalog conversions carry their translation tables."""
    path = tmp_path / "catalog.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "schemas": [
                    {
                        "name": "stage",
                        "fields": [
                            {"name": "major", "next": "stage"},
                            {"name": "stage", "type": "symbol", "symbols": ["dev", "prod"]},
                        ],
                    },
                    {"name": "pair", "fields": [{"name": "major", "next": "minor"}, {"name": "minor"}]},
                ],
                "formats": {
                    "stage": {"schema": "stage", "styles": {"stage": {"delimiter": "-"}}},
                    "pair": {"schema": "pair", "required_fields": 2},
                },
                "conversions": [
                    {
                        "from": "stage",
                        "to": "pair",
                        "fields": {"major": "major", "minor": "stage"},
                        "values": {"minor": {"dev": 0, "prod": 1}},
                        "strict": True,
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    CatalogLoader(path).load()

    value = default_formats.get("stage").parse("3-prod")

    assert str(value.convert("pair")) == "3.1"


class TestCatalogLoaderErrors:
    """Test cases for unreadable catalog files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CatalogLoader(tmp_path / "missing.yaml").read()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(SchemaDefinitionError, match="empty"):
            CatalogLoader(path).read()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("schemas: [", encoding="utf-8")

        with pytest.raises(SchemaDefinitionError, match="Invalid YAML"):
            CatalogLoader(path).read()

    def test_repr(self, tmp_path):
        assert "catalog.yaml" in repr(CatalogLoader(tmp_path / "catalog.yaml"))

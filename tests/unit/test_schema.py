"""Tests for schemas and declarative schema definitions."""

import pytest
import yaml

from versionist import Field, FieldType, Schema, SchemaDefinitionError, SchemaLoader, build_schema
from versionist.schema import SchemaDefinition


class TestSchema:
    """Test cases for Schema."""

    def test_indexes_names_and_aliases(self, triple_schema):
        """Test that names and aliases resolve to canonical names."""
        assert triple_schema.canonical_name("major") == "major"
        assert triple_schema.canonical_name("maj") == "major"
        assert triple_schema.canonical_name("tiny") == "patch"
        assert triple_schema.canonical_name("bogus") is None
        assert triple_schema.canonical_name(3) is None

    def test_field_named(self, triple_schema):
        patch = triple_schema.field_named("tiny")

        assert patch is not None
        assert patch.name == "patch"
        assert triple_schema.field_named("bogus") is None

    def test_fields_in_discovery_order(self, standard_schema):
        """Test that fields are listed from the root down."""
        assert [f.name for f in standard_schema.fields] == [
            "major",
            "minor",
            "tiny",
            "tiny2",
            "release_type",
            "prerelease",
        ]

    def test_shared_child_registered_once(self, standard_schema):
        """Test that a field reachable through several values is indexed once."""
        release_type = standard_schema.field_named("release_type")
        prerelease = standard_schema.field_named("prerelease")

        assert release_type.next_field("alpha") is prerelease
        assert release_type.next_field("rc") is prerelease
        assert release_type.next_field("final") is None

    def test_cycle_rejected(self):
        """Test that a cyclic chain cannot form a schema."""
        major = Field("major")
        minor = major.link(Field("minor"))
        minor.link(major)

        with pytest.raises(SchemaDefinitionError, match="Cyclic"):
            Schema(major, name="cyclic")

    def test_duplicate_names_rejected(self):
        """Test that two distinct fields may not share a name."""
        major = Field("major")
        major.link(Field("major"))

        with pytest.raises(SchemaDefinitionError):
            Schema(major)

    def test_alias_collision_rejected(self):
        """Test that an alias may not shadow another field's name."""
        major = Field("major")
        major.link(Field("minor", aliases=("major",)))

        with pytest.raises(SchemaDefinitionError, match="more than one field"):
            Schema(major)

    def test_modules_kept(self):
        marker = object()
        schema = Schema(Field("major"), modules=[marker])

        assert schema.modules == (marker,)


class TestBuildSchema:
    """Test cases for building schemas from definitions."""

    def test_build_from_mapping(self):
        """Test building a conditional schema from a plain mapping."""
        schema = build_schema(
            {
                "name": "build",
                "fields": [
                    {"name": "number", "next": "kind"},
                    {
                        "name": "kind",
                        "type": "symbol",
                        "symbols": ["release", "nightly"],
                        "next_by_value": {"nightly": "stamp"},
                    },
                    {"name": "stamp", "type": "string", "default": "latest"},
                ],
            }
        )

        kind = schema.field_named("kind")
        assert schema.name == "build"
        assert schema.root_field.name == "number"
        assert kind.field_type == FieldType.SYMBOL
        assert kind.next_field("release") is None
        assert kind.next_field("nightly").name == "stamp"
        assert schema.field_named("stamp").default_value == "latest"

    def test_explicit_root(self):
        schema = build_schema(
            {
                "name": "reversed",
                "root": "minor",
                "fields": [{"name": "major"}, {"name": "minor", "next": "major"}],
            }
        )

        assert schema.root_field.name == "minor"
        assert [f.name for f in schema.fields] == ["minor", "major"]

    def test_unknown_reference(self):
        """Test that references to undefined fields are rejected."""
        with pytest.raises(SchemaDefinitionError, match="unknown field 'minr'"):
            build_schema({"name": "broken", "fields": [{"name": "major", "next": "minr"}]})

    def test_duplicate_field_definitions(self):
        """Test that validation errors surface as SchemaDefinitionError."""
        with pytest.raises(SchemaDefinitionError) as exc_info:
            build_schema({"name": "dup", "fields": [{"name": "major"}, {"name": "major"}]})

        assert exc_info.value.details["errors"]

    def test_no_fields(self):
        with pytest.raises(SchemaDefinitionError):
            build_schema({"name": "empty", "fields": []})

    def test_unknown_keys_rejected(self):
        """Test that typos in a field definition are not silently ignored."""
        with pytest.raises(SchemaDefinitionError):
            build_schema({"name": "typo", "fields": [{"name": "major", "nxt": "minor"}]})

    def test_repeated_symbols_rejected(self):
        with pytest.raises(SchemaDefinitionError):
            build_schema(
                {
                    "name": "symbols",
                    "fields": [{"name": "stage", "type": "symbol", "symbols": ["a", "A"]}],
                }
            )

    def test_symbol_field_without_symbols(self):
        with pytest.raises(SchemaDefinitionError):
            build_schema({"name": "symbols", "fields": [{"name": "stage", "type": "symbol"}]})

    def test_unreachable_fields_are_dropped(self, caplog):
        """Test that unreachable fields are left out of the schema with a warning."""
        with caplog.at_level("WARNING"):
            schema = build_schema(
                {"name": "orphan", "fields": [{"name": "major"}, {"name": "orphan"}]}
            )

        assert schema.field_named("orphan") is None
        assert "unreachable" in caplog.text

    def test_accepts_definition_model(self):
        definition = SchemaDefinition.model_validate(
            {"name": "single", "fields": [{"name": "major"}]}
        )

        assert build_schema(definition).name == "single"


class TestSchemaLoader:
    """Test cases for SchemaLoader."""

    def test_load_schema(self, tmp_path):
        """Test loading a schema from a YAML file."""
        path = tmp_path / "schema.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "name": "triple",
                    "fields": [
                        {"name": "major", "next": "minor"},
                        {"name": "minor", "next": "patch"},
                        {"name": "patch"},
                    ],
                }
            ),
            encoding="utf-8",
        )
        loader = SchemaLoader(path)

        schema = loader.load_schema()

        assert [f.name for f in schema.fields] == ["major", "minor", "patch"]
        assert loader.load_schema() is schema
        assert loader.load_schema(force_reload=True) is not schema

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SchemaLoader(tmp_path / "missing.yaml").load_schema()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(SchemaDefinitionError, match="empty"):
            SchemaLoader(path).load_schema()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fields: [unclosed", encoding="utf-8")

        with pytest.raises(SchemaDefinitionError, match="Invalid YAML"):
            SchemaLoader(path).load_schema()

"""
Shared pytest configuration for versionist tests.

Provides a small set of schemas and formats covering the interesting
shapes of a version scheme:

- triple: ``major.minor.patch``, always written with three fields
- standard: ``major.minor.tiny.tiny2`` followed by an optional release type
  (``a``/``b``/``rc``) that routes to a prerelease number
- pair: ``major.minor`` only, convertible to standard
- date: ``year.month``, with no conversions to anything
- stage: ``major.minor`` plus a ``dev``/``final`` stage whose default is
  written and whose other symbol has an empty label
"""

import logging
from typing import Any, Dict

import pytest
import structlog

from versionist import (
    DelimiterFormat,
    Field,
    FieldMappingConversion,
    FieldStyle,
    FieldType,
    Schema,
    build_schema,
    default_conversions,
    default_formats,
)
from versionist.config import get_settings

STANDARD_SCHEMA: Dict[str, Any] = {
    "name": "standard",
    "description": "Dotted release numbers with optional prerelease suffix",
    "fields": [
        {"name": "major", "next": "minor"},
        {"name": "minor", "next": "tiny"},
        {"name": "tiny", "next": "tiny2"},
        {"name": "tiny2", "next": "release_type"},
        {
            "name": "release_type",
            "type": "symbol",
            "symbols": ["alpha", "beta", "rc", "final"],
            "default": "final",
            "aliases": ["type"],
            "next_by_value": {
                "alpha": "prerelease",
                "beta": "prerelease",
                "rc": "prerelease",
            },
        },
        {"name": "prerelease", "default": 1, "aliases": ["pre"]},
    ],
}

STANDARD_STYLES = {
    "release_type": FieldStyle(
        delimiter="", labels={"alpha": "a", "beta": "b", "rc": "rc", "final": ""}
    ),
    "prerelease": FieldStyle(delimiter=""),
}


def build_triple_schema() -> Schema:
    major = Field("major", aliases=("maj",))
    minor = major.link(Field("minor"))
    minor.link(Field("patch", aliases=("tiny",)))
    return Schema(major, name="triple")


def build_pair_schema() -> Schema:
    major = Field("major")
    major.link(Field("minor"))
    return Schema(major, name="pair")


def build_date_schema() -> Schema:
    year = Field("year", default_value=2000)
    year.link(Field("month", default_value=1))
    return Schema(year, name="date")


STAGE_STYLES = {"stage": FieldStyle(labels={"dev": "dev", "final": ""})}


def build_stage_schema() -> Schema:
    """``major.minor`` with a trailing stage that defaults to a written ``dev``."""
    major = Field("major")
    minor = major.link(Field("minor"))
    minor.link(Field("stage", FieldType.SYMBOL, symbols=("dev", "final")))
    return Schema(major, name="stage")


@pytest.fixture(autouse=True)
def clean_registries():
    """Leave the default registries and cached settings empty around each test."""
    get_settings.cache_clear()
    default_formats.clear()
    default_conversions.clear()
    yield
    default_formats.clear()
    default_conversions.clear()
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by a test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)


@pytest.fixture
def triple_schema() -> Schema:
    return build_triple_schema()


@pytest.fixture
def triple_format(triple_schema) -> DelimiterFormat:
    return DelimiterFormat(triple_schema, required_fields=3, name="triple")


@pytest.fixture
def standard_schema() -> Schema:
    return build_schema(STANDARD_SCHEMA)


@pytest.fixture
def standard_format(standard_schema) -> DelimiterFormat:
    return DelimiterFormat(
        standard_schema, styles=STANDARD_STYLES, required_fields=2, name="standard"
    )


@pytest.fixture
def pair_format() -> DelimiterFormat:
    return DelimiterFormat(build_pair_schema(), required_fields=2, name="pair")


@pytest.fixture
def date_format() -> DelimiterFormat:
    return DelimiterFormat(build_date_schema(), required_fields=2, name="date")


@pytest.fixture
def stage_format() -> DelimiterFormat:
    return DelimiterFormat(
        build_stage_schema(), styles=STAGE_STYLES, required_fields=2, name="stage"
    )


@pytest.fixture
def registered(triple_format, standard_format, pair_format, date_format):
    """
    Register every test format and the conversions between them.

    Conversions: triple <-> standard and pair -> standard. There is no direct
    pair -> triple conversion, so that path chains through standard. The date
    schema is isolated.
    """
    for fmt in (triple_format, standard_format, pair_format, date_format):
        default_formats.register(fmt.name, fmt)

    default_conversions.register(
        triple_format,
        standard_format,
        FieldMappingConversion({"major": "major", "minor": "minor", "tiny": "patch"}),
    )
    default_conversions.register(
        standard_format,
        triple_format,
        FieldMappingConversion({"major": "major", "minor": "minor", "patch": "tiny"}),
    )
    default_conversions.register(
        pair_format,
        standard_format,
        FieldMappingConversion({"major": "major", "minor": "minor"}),
    )
    return {
        "triple": triple_format,
        "standard": standard_format,
        "pair": pair_format,
        "date": date_format,
    }


CATALOG_YAML = """\
schemas:
  - name: triple
    fields:
      - {name: major, next: minor}
      - {name: minor, next: patch}
      - {name: patch}
  - name: standard
    fields:
      - {name: major, next: minor}
      - {name: minor, next: tiny}
      - {name: tiny, next: tiny2}
      - {name: tiny2, next: release_type}
      - name: release_type
        type: symbol
        symbols: [alpha, beta, rc, final]
        default: final
        aliases: [type]
        next_by_value: {alpha: prerelease, beta: prerelease, rc: prerelease}
      - {name: prerelease, default: 1}
formats:
  triple:
    schema: triple
    required_fields: 3
  standard:
    schema: standard
    required_fields: 2
    styles:
      release_type:
        delimiter: ""
        labels: {alpha: a, beta: b, rc: rc, final: ""}
      prerelease:
        delimiter: ""
conversions:
  - from: triple
    to: standard
    fields: {major: major, minor: minor, tiny: patch}
  - from: standard
    to: triple
    fields: {major: major, minor: minor, patch: tiny}
"""


@pytest.fixture
def catalog_file(tmp_path):
    """Write the test catalog to a temporary YAML file."""
    path = tmp_path / "catalog.yaml"
    path.write_text(CATALOG_YAML, encoding="utf-8")
    return path

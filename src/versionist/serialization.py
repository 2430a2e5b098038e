"""
Compact serialization of version values.

A value serializes to a list headed by its registered format name, followed
either by its text and the params to parse it back with, or (when the format
cannot render it) by its raw field values and unparse params:

    ["standard", "1.0b2", {"required_fields": 2}]
    ["standard", [1, 0, 0, 0, "beta", -1]]

The same data backs pickling and the ``!versionist/version`` YAML tag.
"""

from typing import Any, Dict, List, Optional, Sequence

import yaml

from .exceptions import InvalidInputError, UnparseError
from .formats import FormatRegistry, default_formats
from .value import Value

YAML_TAG = "!versionist/version"


def dump(value: Value, formats: Optional[FormatRegistry] = None) -> List[Any]:
    """
    Serialize a value to its compact form.

    Raises:
        UnknownFormatError: If the value's format is not registered
    """
    registry = formats if formats is not None else default_formats
    name = registry.canonical_name_for(value.format, strict=True)

    unparsed: Any = None
    serializer = getattr(value.format, "unparse_for_serialization", None)
    if callable(serializer):
        try:
            unparsed = serializer(value)
        except UnparseError:
            unparsed = None
    if unparsed is None:
        try:
            unparsed = value.unparse()
        except UnparseError:
            unparsed = None

    data: List[Any] = [name]
    if isinstance(unparsed, tuple):
        text, parse_params = unparsed
        data.append(text)
        if parse_params:
            data.append(dict(parse_params))
    elif isinstance(unparsed, str):
        data.append(unparsed)
    else:
        data.append(value.values_array())
        if value.unparse_params:
            data.append(value.unparse_params)
    return data


def load(data: Sequence[Any], formats: Optional[FormatRegistry] = None) -> Value:
    """
    Rebuild a value from its compact form.

    Raises:
        InvalidInputError: If the data is malformed
        UnknownFormatError: If the format name is not registered
        ParseError: If the serialized text no longer parses
    """
    if not isinstance(data, (list, tuple)) or len(data) < 2:
        raise InvalidInputError(f"Malformed serialized version: {data!r}")
    registry = formats if formats is not None else default_formats
    fmt = registry.get(data[0])
    params: Optional[Dict[str, Any]] = data[2] if len(data) > 2 else None
    if isinstance(data[1], str):
        return fmt.parse(data[1], params)
    return Value(data[1], fmt, params)


def _represent_value(dumper: yaml.SafeDumper, value: Value) -> yaml.Node:
    data = dump(value)
    mapping: Dict[str, Any] = {"format": data[0]}
    if isinstance(data[1], str):
        mapping["value"] = data[1]
        if len(data) > 2:
            mapping["parse_params"] = data[2]
    else:
        mapping["fields"] = list(data[1])
        if len(data) > 2:
            mapping["unparse_params"] = data[2]
    return dumper.represent_mapping(YAML_TAG, mapping)


def _construct_value(loader: yaml.SafeLoader, node: yaml.Node) -> Value:
    if not isinstance(node, yaml.MappingNode):
        raise yaml.constructor.ConstructorError(
            None, None, f"Expected a mapping for {YAML_TAG}", node.start_mark
        )
    data = loader.construct_mapping(node, deep=True)
    fmt = default_formats.get(data.get("format"))
    if "value" in data:
        return fmt.parse(data["value"], data.get("parse_params"))
    return Value(data.get("fields") or [], fmt, data.get("unparse_params"))


class VersionDumper(yaml.SafeDumper):
    """Safe YAML dumper that understands version values."""


class VersionLoader(yaml.SafeLoader):
    """Safe YAML loader that understands version values."""


def register_yaml(dumper: type = VersionDumper, loader: type = VersionLoader) -> None:
    """Teach a YAML dumper and loader about version values."""
    dumper.add_representer(Value, _represent_value)
    loader.add_constructor(YAML_TAG, _construct_value)


def to_yaml(value: Any) -> str:
    """Dump a value (or a structure holding values) as YAML."""
    return yaml.dump(value, Dumper=VersionDumper, sort_keys=False)


def from_yaml(text: str) -> Any:
    """Load YAML that may contain version values."""
    return yaml.load(text, Loader=VersionLoader)


register_yaml()

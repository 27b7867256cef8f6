"""
Typed model of an API descriptor.

Raw descriptors are JSON dicts. ``parse_descriptor`` resolves the format
once (legacy input is up-converted first) and builds an immutable tree of
``ElementNode`` objects plus a registry of ``TypeDefinition`` objects.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from comparator.exceptions import InvalidDescriptorError
from comparator.upconvert import (
    DATA_KEY,
    ELEMENTS_KEY,
    METADATA_KEY,
    TYPES_KEY,
    VERSION_KEY,
    is_child_key,
    is_legacy_descriptor,
    up_convert,
)

ROOT_TYPE_NAME = "ObjectIO"
INITIAL_STATE_KEY = "initialState"


class DescriptorFormat(str, Enum):
    LEGACY = "legacy"
    CURRENT = "current"


@dataclass(frozen=True)
class APIVersion:
    major: int
    minor: int

    @property
    def supports_api_state_keys(self) -> bool:
        """apiStateKeys were introduced in API version 1.1."""
        return (self.major, self.minor) >= (1, 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class ElementNode:
    """
    One node of the element tree.

    ``metadata`` is None for structural containers that are not
    instrumented themselves.
    """
    metadata: Optional[dict] = None
    data: Optional[dict] = None
    children: dict[str, "ElementNode"] = field(default_factory=dict)

    @property
    def is_instrumented(self) -> bool:
        return self.metadata is not None

    @property
    def has_initial_state(self) -> bool:
        return bool(self.data) and self.data.get(INITIAL_STATE_KEY) is not None

    @property
    def initial_state(self) -> Any:
        return self.data.get(INITIAL_STATE_KEY) if self.data else None

    @property
    def declared_designed(self) -> bool:
        return bool(self.metadata and self.metadata.get("phetioDesigned"))


@dataclass(frozen=True)
class MethodSignature:
    parameter_types: list[str] = field(default_factory=list)
    return_type: Optional[str] = None


@dataclass(frozen=True)
class TypeDefinition:
    name: str
    supertype: Optional[str] = None
    methods: dict[str, MethodSignature] = field(default_factory=dict)
    events: list[str] = field(default_factory=list)
    metadata_defaults: Optional[dict] = None
    api_state_keys: Optional[list[str]] = None
    parameter_types: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Descriptor:
    """A normalized descriptor. ``format`` records what the input looked like."""
    format: DescriptorFormat
    version: Optional[APIVersion]
    elements: ElementNode
    types: dict[str, TypeDefinition]
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_legacy(self) -> bool:
        return self.format == DescriptorFormat.LEGACY

    @property
    def supports_api_state_keys(self) -> bool:
        return self.version is not None and self.version.supports_api_state_keys


def _parse_version(value: Any) -> APIVersion:
    if not isinstance(value, dict):
        raise InvalidDescriptorError(f"version must be an object, got {value!r}")
    try:
        return APIVersion(major=int(value["major"]), minor=int(value["minor"]))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidDescriptorError(f"Invalid version {value!r}: {e}")


def _parse_element(node: dict, path: str) -> ElementNode:
    if not isinstance(node, dict):
        raise InvalidDescriptorError(f"Element {path or '<root>'} is not an object")

    children = {}
    for key, value in node.items():
        if is_child_key(key):
            children[key] = _parse_element(value, f"{path}.{key}" if path else key)

    return ElementNode(
        metadata=node.get(METADATA_KEY),
        data=node.get(DATA_KEY),
        children=children
    )


def _parse_type(name: str, entry: dict) -> TypeDefinition:
    if not isinstance(entry, dict):
        raise InvalidDescriptorError(f"Type {name} is not an object")

    methods = {
        method_name: MethodSignature(
            parameter_types=list(method.get("parameterTypes") or []),
            return_type=method.get("returnType")
        )
        for method_name, method in (entry.get("methods") or {}).items()
    }

    api_state_keys = entry.get("apiStateKeys")
    return TypeDefinition(
        name=name,
        supertype=entry.get("supertype"),
        methods=methods,
        events=list(entry.get("events") or []),
        metadata_defaults=entry.get("metadataDefaults"),
        api_state_keys=list(api_state_keys) if api_state_keys is not None else None,
        parameter_types=list(entry.get("parameterTypes") or [])
    )


def parse_descriptor(raw: Any) -> Descriptor:
    """
    Build a ``Descriptor`` from a raw JSON value.

    Args:
        raw: Parsed descriptor JSON (legacy or current format)

    Returns:
        Descriptor with a nested element tree

    Raises:
        InvalidDescriptorError: if the value is not shaped like a descriptor
    """
    if isinstance(raw, Descriptor):
        return raw
    if not isinstance(raw, dict):
        raise InvalidDescriptorError(f"Descriptor must be an object, got {type(raw).__name__}")
    for key in (ELEMENTS_KEY, TYPES_KEY):
        if not isinstance(raw.get(key), dict):
            raise InvalidDescriptorError(f"Descriptor is missing the '{key}' map")

    legacy = is_legacy_descriptor(raw)
    normalized = up_convert(raw)

    return Descriptor(
        format=DescriptorFormat.LEGACY if legacy else DescriptorFormat.CURRENT,
        version=None if legacy else _parse_version(raw[VERSION_KEY]),
        elements=_parse_element(normalized[ELEMENTS_KEY], ""),
        types={name: _parse_type(name, entry) for name, entry in normalized[TYPES_KEY].items()},
        raw=normalized
    )

"""
Effective metadata resolution.

Current descriptors are sparse: an element only lists the metadata that
differs from the defaults of its type, and types inherit defaults from
their supertypes. Legacy descriptors are dense and already list every
value.
"""
from typing import Optional

from comparator.exceptions import MissingTypeError
from comparator.models import ROOT_TYPE_NAME, Descriptor, ElementNode


def get_metadata_defaults(type_name: str, descriptor: Descriptor) -> dict:
    """
    Collect the metadata defaults for a type, walking up the supertype chain.

    Defaults declared closer to ``type_name`` win over inherited ones.
    Returns a new dict on every call.

    Raises:
        MissingTypeError: if the type or one of its supertypes is not registered
    """
    chain = []
    seen = set()
    current: Optional[str] = type_name

    while current:
        if current in seen:
            break
        entry = descriptor.types.get(current)
        if entry is None:
            raise MissingTypeError(current)
        chain.append(entry)
        seen.add(current)
        current = entry.supertype

    defaults = {}
    for entry in reversed(chain):
        defaults.update(entry.metadata_defaults or {})
    return defaults


def resolve_metadata(element: ElementNode, descriptor: Descriptor) -> Optional[dict]:
    """
    Compute the complete metadata of an element.

    The element's own values win over any default. For legacy descriptors
    the declared metadata is returned as is, which may be None for a node
    without metadata.
    """
    if descriptor.version is None:
        return element.metadata

    declared = element.metadata or {}
    type_name = declared.get("phetioTypeName") or ROOT_TYPE_NAME

    resolved = get_metadata_defaults(type_name, descriptor)
    resolved.update(declared)
    return resolved

"""
Legacy descriptor normalization.

Descriptors written before API version 1.0 have no ``version`` key and
store ``phetioElements`` as a flat map keyed by dotted IDs, each entry
holding the complete (dense) metadata of the element. This module turns
them into the nested tree used by current descriptors so the rest of the
engine only deals with one shape.
"""
import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)

METADATA_KEY = "_metadata"
DATA_KEY = "_data"
ELEMENTS_KEY = "phetioElements"
TYPES_KEY = "phetioTypes"
VERSION_KEY = "version"

# Legacy IDs always used '.' as the separator.
LEGACY_ID_SEPARATOR = "."


def is_child_key(key: str) -> bool:
    """Whether a key of an element node names a child element."""
    return key != METADATA_KEY and key != DATA_KEY


def is_legacy_descriptor(raw: dict) -> bool:
    """Legacy descriptors are recognized by the absence of a version."""
    return VERSION_KEY not in raw


def up_convert(raw: dict) -> dict:
    """
    Convert a descriptor to the nested tree format.

    Returns a deep copy; the input is never mutated. Current-format input
    is copied unchanged. For legacy input every attribute of a flat entry
    is written verbatim into the ``_metadata`` of the terminal node, since
    the legacy format has no inherited defaults to factor out.

    When one ID is a prefix of another the nodes are merged; if the same
    chain is written twice the later metadata wins.
    """
    converted = copy.deepcopy(raw)
    if not is_legacy_descriptor(raw):
        return converted

    tree: dict[str, Any] = {}
    flat_elements = raw.get(ELEMENTS_KEY) or {}

    for phetio_id, entry in flat_elements.items():
        level = tree
        for component_name in phetio_id.split(LEGACY_ID_SEPARATOR):
            level = level.setdefault(component_name, {})
        level[METADATA_KEY] = copy.deepcopy(entry)

    converted[ELEMENTS_KEY] = tree
    logger.debug(f"Up-converted legacy descriptor with {len(flat_elements)} flat elements")
    return converted

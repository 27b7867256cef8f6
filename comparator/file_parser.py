"""
Descriptor file loading.

Descriptors are written by the introspection harness as JSON, one file
per build. Loading failures are logged and reported as None so callers
can decide how to surface them.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from comparator.upconvert import ELEMENTS_KEY, METADATA_KEY, TYPES_KEY, VERSION_KEY, is_child_key

logger = logging.getLogger(__name__)


@dataclass
class ParsedDescriptor:
    """Result of loading a descriptor JSON file."""
    name: str
    descriptor: dict
    filename: str
    file_path: Optional[str] = None

    # Extracted from the descriptor
    sim: Optional[str] = None
    version: Optional[str] = None
    format: str = "current"
    element_count: int = 0
    type_count: int = 0


def _count_elements(node: dict) -> int:
    count = 1 if METADATA_KEY in node else 0
    for key, child in node.items():
        if is_child_key(key) and isinstance(child, dict):
            count += _count_elements(child)
    return count


def extract_descriptor_info(descriptor: dict) -> dict:
    """
    Extract summary fields from a raw descriptor.

    - sim: the simulation name, if recorded
    - version: "major.minor", or None for legacy descriptors
    - format: "legacy" or "current"
    - element_count / type_count
    """
    elements = descriptor.get(ELEMENTS_KEY) or {}
    version = descriptor.get(VERSION_KEY)
    legacy = VERSION_KEY not in descriptor

    info = {
        "sim": descriptor.get("sim"),
        "version": None,
        "format": "legacy" if legacy else "current",
        "element_count": len(elements) if legacy else _count_elements(elements),
        "type_count": len(descriptor.get(TYPES_KEY) or {})
    }
    if isinstance(version, dict):
        info["version"] = f"{version.get('major')}.{version.get('minor')}"
    return info


def parse_descriptor_dict(descriptor: dict, filename: str) -> Optional[ParsedDescriptor]:
    """
    Create ParsedDescriptor from an already-parsed dict.

    Args:
        descriptor: Already parsed JSON
        filename: Original filename (used as the name if no sim is recorded)

    Returns:
        ParsedDescriptor, or None if the value is not a JSON object
    """
    if not isinstance(descriptor, dict):
        logger.error(f"Descriptor {filename} is not a JSON object")
        return None

    info = extract_descriptor_info(descriptor)
    return ParsedDescriptor(
        name=info["sim"] or Path(filename).stem,
        descriptor=descriptor,
        filename=filename,
        sim=info["sim"],
        version=info["version"],
        format=info["format"],
        element_count=info["element_count"],
        type_count=info["type_count"]
    )


def parse_descriptor_content(content: str, filename: str) -> Optional[ParsedDescriptor]:
    """
    Parse descriptor JSON content directly (for API uploads).

    Returns:
        ParsedDescriptor object or None if parsing fails
    """
    try:
        descriptor = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing descriptor content of {filename}: {e}")
        return None

    return parse_descriptor_dict(descriptor, filename)


def parse_descriptor_file(file_path: str) -> Optional[ParsedDescriptor]:
    """
    Parse a descriptor JSON file from disk.

    Args:
        file_path: Path to the JSON file

    Returns:
        ParsedDescriptor object or None if parsing fails
    """
    path = Path(file_path)

    if not path.exists():
        logger.error(f"Descriptor file not found: {file_path}")
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            descriptor = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.error(f"Error parsing {file_path}: {e}")
        return None

    parsed = parse_descriptor_dict(descriptor, path.name)
    if parsed:
        parsed.file_path = str(path.absolute())
    return parsed

# APICompare v1.0.0
"""
API comparison engine.
Compares a proposed API descriptor against a reference descriptor and
reports breaking and designed problems.
"""
from comparator.comparison import compare_apis, compute_descriptor_hash
from comparator.compatibility import MISSING, deep_equals, is_compatible, strict_equals
from comparator.exceptions import APICompareError, InvalidDescriptorError, MissingTypeError
from comparator.file_parser import (
    ParsedDescriptor,
    extract_descriptor_info,
    parse_descriptor_content,
    parse_descriptor_dict,
    parse_descriptor_file
)
from comparator.metadata import get_metadata_defaults, resolve_metadata
from comparator.models import (
    APIVersion,
    Descriptor,
    DescriptorFormat,
    ElementNode,
    TypeDefinition,
    parse_descriptor
)
from comparator.problems import CompareOptions, ComparisonReport, Finding, Severity
from comparator.report import format_report
from comparator.upconvert import is_legacy_descriptor, up_convert

__all__ = [
    "compare_apis",
    "compute_descriptor_hash",
    "up_convert",
    "is_legacy_descriptor",
    "is_compatible",
    "strict_equals",
    "deep_equals",
    "MISSING",
    "resolve_metadata",
    "get_metadata_defaults",
    "parse_descriptor",
    "APIVersion",
    "Descriptor",
    "DescriptorFormat",
    "ElementNode",
    "TypeDefinition",
    "CompareOptions",
    "ComparisonReport",
    "Finding",
    "Severity",
    "APICompareError",
    "InvalidDescriptorError",
    "MissingTypeError",
    "ParsedDescriptor",
    "extract_descriptor_info",
    "parse_descriptor_content",
    "parse_descriptor_dict",
    "parse_descriptor_file",
    "format_report"
]

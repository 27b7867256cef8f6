"""
API Comparison Engine

Compares a proposed API descriptor against a reference ("ground truth")
descriptor and reports breaking changes and deviations from the designed
API. Used as a CI gate before an API is published.
"""
import hashlib
import json
import logging
from typing import Any, Optional, Union

from comparator.models import Descriptor, parse_descriptor
from comparator.problems import CompareOptions, ComparisonReport, ProblemCollector
from comparator.tree import compare_element_trees
from comparator.type_registry import compare_type_registries

logger = logging.getLogger(__name__)


def compute_descriptor_hash(raw: dict) -> str:
    """
    Compute a SHA-256 hash of a raw descriptor.
    Descriptors with the same hash are identical.
    """
    json_str = json.dumps(raw, sort_keys=True, separators=(',', ':'))
    return hashlib.sha256(json_str.encode()).hexdigest()


def _resolve_options(options: Union[CompareOptions, dict, None], overrides: dict) -> CompareOptions:
    if options is None:
        options = CompareOptions()
    elif isinstance(options, dict):
        options = CompareOptions.from_dict(options)

    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        options = CompareOptions(**{
            "compare_breaking_api_changes": options.compare_breaking_api_changes,
            "compare_designed_api_changes": options.compare_designed_api_changes,
            **overrides
        })
    return options


def compare_apis(
    reference: Any,
    proposed: Any,
    options: Union[CompareOptions, dict, None] = None,
    *,
    compare_breaking_api_changes: Optional[bool] = None,
    compare_designed_api_changes: Optional[bool] = None
) -> ComparisonReport:
    """
    Main entry point for comparing two API descriptors.

    Args:
        reference: The reference ("ground truth") descriptor, raw or parsed
        proposed: The proposed descriptor, raw or parsed
        options: CompareOptions, or a dict using either naming convention
        compare_breaking_api_changes: Override for the breaking toggle
        compare_designed_api_changes: Override for the designed toggle

    Returns:
        ComparisonReport with breaking and designed problems

    Raises:
        MissingTypeError: if an element references a type that is not registered
        InvalidDescriptorError: if an input is not shaped like a descriptor
    """
    resolved = _resolve_options(options, {
        "compare_breaking_api_changes": compare_breaking_api_changes,
        "compare_designed_api_changes": compare_designed_api_changes
    })

    reference_descriptor: Descriptor = parse_descriptor(reference)
    proposed_descriptor: Descriptor = parse_descriptor(proposed)
    logger.debug(
        f"Comparing {reference_descriptor.format.value} reference against "
        f"{proposed_descriptor.format.value} proposed descriptor"
    )

    collector = ProblemCollector(resolved)
    compare_element_trees(reference_descriptor, proposed_descriptor, collector)
    compare_type_registries(reference_descriptor, proposed_descriptor, collector)

    report = collector.report
    logger.info(
        f"API comparison finished: {len(report.breaking_problems)} breaking, "
        f"{len(report.designed_problems)} designed problem(s)"
    )
    return report

"""
Element tree comparison.

Walks the reference and proposed element trees in lock-step. For every
instrumented reference element the effective metadata and the captured
initial state are compared, then the children are visited. Elements
inside a designed subtree get the stricter designed checks as well.
"""
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from comparator.compatibility import MISSING, deep_equals, is_compatible, strict_equals
from comparator.metadata import resolve_metadata
from comparator.models import Descriptor, ElementNode
from comparator.problems import ProblemCollector, format_value_compact

logger = logging.getLogger(__name__)

# The valid locales grow whenever a translation is added, so this element
# only requires that no previously available locale disappears.
LOCALE_PROPERTY_SUFFIX = "general.model.localeProperty"

ARCHETYPE_ID_KEY = "phetioArchetypePhetioID"


@dataclass(frozen=True)
class VisitContext:
    """Position in the tree and whether it lies inside a designed subtree."""
    trail: tuple[str, ...] = ()
    designed: bool = False

    @property
    def phetio_id(self) -> str:
        return ".".join(self.trail)

    def child(self, component_name: str) -> "VisitContext":
        return replace(self, trail=self.trail + (component_name,))

    def with_designed(self, designed: bool) -> "VisitContext":
        # Once designed, a subtree cannot be turned back off.
        return replace(self, designed=self.designed or bool(designed))

    def child_id(self, component_name: str) -> str:
        return f"{self.phetio_id}.{component_name}" if self.trail else component_name


def _any_change(reference_value: Any, proposed_value: Any) -> bool:
    return True


@dataclass(frozen=True)
class MetadataRule:
    """
    A metadata key checked for breaking changes.

    ``breaking_if`` is only consulted once the values are known to differ.
    """
    key: str
    breaking_if: Callable[[Any, Any], bool] = _any_change


BREAKING_METADATA_RULES = (
    MetadataRule("phetioTypeName"),
    MetadataRule("phetioEventType"),
    MetadataRule("phetioPlayback"),
    MetadataRule("phetioDynamicElement"),
    MetadataRule("phetioIsArchetype"),
    MetadataRule(ARCHETYPE_ID_KEY),
    # Becoming stateful or writable widens the API.
    MetadataRule("phetioState", lambda old, new: strict_equals(new, False)),
    MetadataRule("phetioReadOnly", lambda old, new: strict_equals(new, True)),
)
# Not breaking: phetioDocumentation, phetioFeatured, phetioHighFrequency
# (clients with data are assumed to have the full data stream).


class TreeComparator:
    """Compares the element trees of two normalized descriptors."""

    def __init__(self, reference: Descriptor, proposed: Descriptor, collector: ProblemCollector):
        self.reference = reference
        self.proposed = proposed
        self.collector = collector
        self.visited = 0

    def compare(self):
        self.visit(VisitContext(), self.reference.elements, self.proposed.elements)
        logger.debug(f"Visited {self.visited} reference element nodes")

    def visit(self, context: VisitContext, reference: ElementNode, proposed: ElementNode):
        self.visited += 1

        if reference.is_instrumented:
            context = context.with_designed(reference.declared_designed)
            self._compare_metadata(context, reference, proposed)

        if reference.has_initial_state:
            if reference.is_instrumented:
                self._compare_initial_state(context, reference, proposed)
        elif proposed.has_initial_state and context.designed:
            self.collector.append(
                f"{context.phetio_id}._data.initialState is not in reference API but is in proposed",
                designed=True
            )

        for component_name, reference_child in reference.children.items():
            proposed_child = proposed.children.get(component_name)
            if proposed_child is None:
                self.collector.append_both(
                    f"Element missing: {context.child_id(component_name)}",
                    context.designed
                )
            else:
                self.visit(context.child(component_name), reference_child, proposed_child)

        if context.designed:
            for component_name in proposed.children:
                if component_name not in reference.children:
                    self.collector.append(
                        "New element (or uninstrumented intermediate container) not in reference: "
                        f"{context.child_id(component_name)}",
                        designed=True
                    )

    def _compare_metadata(self, context: VisitContext, reference: ElementNode, proposed: ElementNode):
        reference_metadata = resolve_metadata(reference, self.reference) or {}
        proposed_metadata = resolve_metadata(proposed, self.proposed)

        for rule in BREAKING_METADATA_RULES:
            self._report_difference(context, rule.key, reference_metadata, proposed_metadata, rule)

        if context.designed:
            for key in reference_metadata:
                self._report_difference(context, key, reference_metadata, proposed_metadata)

    def _is_format_artifact(self, key: str, reference_value: Any, proposed_value: Any) -> bool:
        """
        Legacy descriptors left the archetype ID out where current ones
        write null, so that transition is not a change.
        """
        if key != ARCHETYPE_ID_KEY:
            return False
        if self.proposed.is_legacy and reference_value is None and proposed_value is MISSING:
            return True
        if self.reference.is_legacy and proposed_value is None and reference_value is MISSING:
            return True
        return False

    def _report_difference(
        self,
        context: VisitContext,
        key: str,
        reference_metadata: dict,
        proposed_metadata: Optional[dict],
        rule: Optional[MetadataRule] = None
    ):
        """Record a problem for ``key``; designed when no breaking rule is given."""
        reference_value = reference_metadata.get(key, MISSING)
        proposed_value = proposed_metadata.get(key, MISSING) if proposed_metadata is not None else MISSING

        if strict_equals(reference_value, proposed_value):
            return
        if self._is_format_artifact(key, reference_value, proposed_value):
            return

        message = (
            f"{context.phetio_id}.{key} changed from "
            f"\"{format_value_compact(reference_value)}\" to \"{format_value_compact(proposed_value)}\""
        )
        if rule is None:
            self.collector.append(message, designed=True)
        elif rule.breaking_if(reference_value, proposed_value):
            self.collector.append(message)

    def _compare_initial_state(self, context: VisitContext, reference: ElementNode, proposed: ElementNode):
        phetio_id = context.phetio_id

        if not proposed.has_initial_state:
            # The state itself cannot be checked across an apiStateKeys transition,
            # so a missing snapshot is only reported then.
            if self.reference.supports_api_state_keys != self.proposed.supports_api_state_keys:
                self.collector.append_both(
                    f"{phetio_id}._data.initialState is missing from proposed API",
                    context.designed
                )
            return

        reference_state = reference.initial_state
        proposed_state = proposed.initial_state
        problem = (
            f"{phetio_id}._data.initialState differs. \n"
            f"Expected:\n{json.dumps(reference_state, separators=(',', ':'))}\n"
            f" actual:\n{json.dumps(proposed_state, separators=(',', ':'))}\n"
        )

        if context.designed and not deep_equals(reference_state, proposed_state):
            self.collector.append(problem, designed=True)

        if self._is_locale_property(context):
            compatible = _locales_preserved(reference_state, proposed_state)
        else:
            compatible = is_compatible(reference_state, proposed_state)
        if not compatible:
            self.collector.append(problem)

    @staticmethod
    def _is_locale_property(context: VisitContext) -> bool:
        return len(context.trail) > 0 and context.phetio_id == f"{context.trail[0]}.{LOCALE_PROPERTY_SUFFIX}"


def _locales_preserved(reference_state: Any, proposed_state: Any) -> bool:
    """Every locale offered by the reference must still be offered."""
    if not isinstance(reference_state, dict) or not isinstance(proposed_state, dict):
        return is_compatible(reference_state, proposed_state)
    proposed_locales = proposed_state.get("validValues") or []
    return all(locale in proposed_locales for locale in reference_state.get("validValues") or [])


def compare_element_trees(reference: Descriptor, proposed: Descriptor, collector: ProblemCollector):
    """Report element problems of ``proposed`` relative to ``reference`` into ``collector``."""
    TreeComparator(reference, proposed, collector).compare()

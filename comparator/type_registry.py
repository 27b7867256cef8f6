"""
Type registry comparison.

Checks every type of the reference registry against the proposed one:
methods and their signatures, events, apiStateKeys, supertype, type
parameters and metadata defaults. Types only in the proposed registry
are additions and are not reported.
"""
import logging

from comparator.compatibility import MISSING, strict_equals
from comparator.models import Descriptor, TypeDefinition
from comparator.problems import ProblemCollector, format_value_compact

logger = logging.getLogger(__name__)

ADVISORY_SUFFIX = "This may or may not be a breaking change, but we are reporting it just in case."


def _join(values: list) -> str:
    return ", ".join(str(v) for v in values)


class TypeRegistryComparator:

    def __init__(self, reference: Descriptor, proposed: Descriptor, collector: ProblemCollector):
        self.reference = reference
        self.proposed = proposed
        self.collector = collector

    def compare(self):
        for type_name, reference_type in self.reference.types.items():
            proposed_type = self.proposed.types.get(type_name)
            if proposed_type is None:
                self.collector.append(f"Type missing: {type_name}")
                continue

            self._compare_methods(reference_type, proposed_type)
            self._compare_events(reference_type, proposed_type)
            if self.reference.supports_api_state_keys and self.proposed.supports_api_state_keys:
                self._compare_api_state_keys(reference_type, proposed_type)
            self._compare_type_structure(reference_type, proposed_type)
            if self.reference.version is not None and self.proposed.version is not None:
                self._compare_metadata_defaults(reference_type, proposed_type)

        logger.debug(f"Compared {len(self.reference.types)} reference types")

    def _compare_methods(self, reference_type: TypeDefinition, proposed_type: TypeDefinition):
        type_name = reference_type.name
        for method_name, reference_method in reference_type.methods.items():
            proposed_method = proposed_type.methods.get(method_name)
            if proposed_method is None:
                self.collector.append(f"Method missing, type={type_name}, method={method_name}")
                continue

            if reference_method.parameter_types != proposed_method.parameter_types:
                self.collector.append(
                    f"{type_name}.{method_name} has different parameter types: "
                    f"[{_join(reference_method.parameter_types)}] => [{_join(proposed_method.parameter_types)}]"
                )
            if reference_method.return_type != proposed_method.return_type:
                self.collector.append(
                    f"{type_name}.{method_name} has a different return type "
                    f"{reference_method.return_type} => {proposed_method.return_type}"
                )

    def _compare_events(self, reference_type: TypeDefinition, proposed_type: TypeDefinition):
        # New events are fine.
        for event in reference_type.events:
            if event not in proposed_type.events:
                self.collector.append(f"{reference_type.name} is missing event: {event}")

    def _compare_api_state_keys(self, reference_type: TypeDefinition, proposed_type: TypeDefinition):
        type_name = reference_type.name
        reference_keys = reference_type.api_state_keys
        proposed_keys = proposed_type.api_state_keys

        if (reference_keys is None) != (proposed_keys is None):
            result = "absent" if proposed_keys is None else "present"
            problem = f"{type_name} apiStateKeys unexpectedly {result}"
            self.collector.append(problem, designed=True)
            # Losing apiStateKeys is breaking, gaining them is not.
            if reference_keys is not None:
                self.collector.append(problem)
            return

        if reference_keys is None or reference_keys == proposed_keys:
            return

        in_reference_not_proposed = [key for key in reference_keys if key not in proposed_keys]
        in_proposed_not_reference = [key for key in proposed_keys if key not in reference_keys]
        self.collector.append(
            f"{type_name} apiStateKeys differ:\n"
            f"  In reference: {','.join(in_reference_not_proposed)}\n"
            f"  In proposed: {','.join(in_proposed_not_reference)}",
            designed=True
        )
        if in_reference_not_proposed:
            self.collector.append(
                f"{type_name} apiStateKeys missing from proposed: {','.join(in_reference_not_proposed)}"
            )

    def _compare_type_structure(self, reference_type: TypeDefinition, proposed_type: TypeDefinition):
        type_name = reference_type.name
        if reference_type.supertype != proposed_type.supertype:
            self.collector.append_advisory(
                f"{type_name} supertype changed from \"{format_value_compact(reference_type.supertype)}\" "
                f"to \"{format_value_compact(proposed_type.supertype)}\". {ADVISORY_SUFFIX}"
            )

        if reference_type.parameter_types != proposed_type.parameter_types:
            self.collector.append_advisory(
                f"{type_name} parameter types changed from [{_join(reference_type.parameter_types)}] "
                f"to [{_join(proposed_type.parameter_types)}]. {ADVISORY_SUFFIX}"
            )

    def _compare_metadata_defaults(self, reference_type: TypeDefinition, proposed_type: TypeDefinition):
        type_name = reference_type.name
        reference_defaults = reference_type.metadata_defaults
        proposed_defaults = proposed_type.metadata_defaults

        if (reference_defaults is None) != (proposed_defaults is None):
            self.collector.append_advisory(
                f"{type_name} metadata defaults not found from \"{format_value_compact(reference_defaults)}\" "
                f"to \"{format_value_compact(proposed_defaults)}\". {ADVISORY_SUFFIX}"
            )
            return
        if reference_defaults is None:
            return

        for key, reference_value in reference_defaults.items():
            proposed_value = proposed_defaults.get(key, MISSING)
            if not strict_equals(reference_value, proposed_value):
                self.collector.append_advisory(
                    f"{type_name} metadata value {key} changed from \"{format_value_compact(reference_value)}\" "
                    f"to \"{format_value_compact(proposed_value)}\". {ADVISORY_SUFFIX}"
                )


def compare_type_registries(reference: Descriptor, proposed: Descriptor, collector: ProblemCollector):
    """Report type registry problems of ``proposed`` relative to ``reference`` into ``collector``."""
    TypeRegistryComparator(reference, proposed, collector).compare()

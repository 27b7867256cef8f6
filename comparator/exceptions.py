"""
Exceptions raised by the API comparison engine.

Data differences between two descriptors are never raised; they are
reported as problems. These exceptions cover the cases where a
comparison cannot produce a meaningful result at all.
"""


class APICompareError(Exception):
    """Base class for all comparator errors."""


class MissingTypeError(APICompareError, KeyError):
    """A type referenced by an element (or a supertype) is not in the registry."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"entry missing: {type_name}")

    def __str__(self) -> str:
        return f"entry missing: {self.type_name}"


class InvalidDescriptorError(APICompareError, ValueError):
    """The input is not shaped like an API descriptor."""

"""
Value compatibility checks for captured initial state.

The reference value is the "ground truth": it defines the minimum
contract that the proposed value has to honor. Extra information in the
proposed value is acceptable, missing or different information is not.
"""
from typing import Any


class _Missing:
    """Marker for a key that is absent, as opposed to present with a null value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def strict_equals(a: Any, b: Any) -> bool:
    """
    Equality with strict primitive semantics.

    Booleans never equal numbers (True != 1), None never equals MISSING.
    Lists and dicts are compared structurally with the same rules.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, list) or isinstance(b, list):
        if not (isinstance(a, list) and isinstance(b, list)) or len(a) != len(b):
            return False
        return all(strict_equals(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) or isinstance(b, dict):
        if not (isinstance(a, dict) and isinstance(b, dict)) or a.keys() != b.keys():
            return False
        return all(strict_equals(a[key], b[key]) for key in a)
    if a is None or b is None or a is MISSING or b is MISSING:
        return a is b
    return a == b


# Full structural equality is what designed-state checks use.
deep_equals = strict_equals


def is_compatible(ground_truth: Any, candidate: Any) -> bool:
    """
    Check whether ``candidate`` is an acceptable substitute for ``ground_truth``.

    - Lists must have exactly the same length; items are compared by index,
      because position carries meaning.
    - Dicts: every key of the ground truth must be present in the candidate
      with a compatible value. Keys only in the candidate are ignored.
    - Anything else (including None) must be strictly equal.

    The relation is not symmetric.
    """
    if isinstance(ground_truth, list):
        if not isinstance(candidate, list) or len(candidate) != len(ground_truth):
            return False
        return all(is_compatible(expected, actual) for expected, actual in zip(ground_truth, candidate))

    if isinstance(ground_truth, dict):
        if not isinstance(candidate, dict):
            return False
        for key, expected in ground_truth.items():
            if key not in candidate:
                return False
            if not is_compatible(expected, candidate[key]):
                return False
        return True

    return strict_equals(ground_truth, candidate)

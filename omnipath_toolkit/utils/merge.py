"""
Option Mapping Reconciliation

Combine user supplied options with defaults, and compare option mappings
by their value sets.
"""

from collections import Counter
from collections.abc import Mapping
import inspect
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .normalize import is_scalar


def merge_lists(primary: Mapping, secondary: Mapping) -> Dict[str, Any]:
    """
    Merge two mappings by key.

    The primary mapping is the template: every key of it keeps its value,
    and the secondary only supplies the keys missing from the primary.

    Args:
        primary: The mapping to which elements will be added
        secondary: The mapping supplying additional elements

    Returns:
        A new dict with the keys of ``primary`` in their original order,
        followed by the keys imported from ``secondary`` in its order.
    """
    if not primary:
        return dict(secondary or {})

    if not secondary:
        return dict(primary)

    result = dict(primary)
    for key, value in secondary.items():
        if key not in result:
            result[key] = value

    return result


def add_defaults(
    params: Mapping,
    fun: Callable,
    defaults: Mapping,
) -> Dict[str, Any]:
    """
    Add default arguments to a set of function parameters.

    A default is added only if ``fun`` accepts an argument of that name and
    ``params`` does not already override it.

    Args:
        params: The actual parameters, typically provided by the user
        fun: The function the parameters will be passed to
        defaults: Default arguments

    Returns:
        A new dict of parameters
    """
    accepted = inspect.signature(fun).parameters
    suitable = {k: v for k, v in defaults.items() if k in accepted}

    return merge_lists(params, suitable)


def _scalar_values(value: Any) -> Optional[List[Any]]:
    """The values of a scalar or a flat sequence of scalars, else None."""
    if value is None:
        return []

    if is_scalar(value):
        return [value]

    if isinstance(value, np.ndarray) and value.ndim <= 1:
        return value.tolist() if value.ndim else [value.item()]

    if isinstance(value, (list, tuple, set, frozenset)) and all(
        is_scalar(x) for x in value
    ):
        return list(value)

    return None


def unordered_value_equal(a: Any, b: Any) -> bool:
    """
    Compare two mappings by key and by the set of values under each key.

    This is looser than ``==``: the order of keys does not matter, and the
    order of values within a flat sequence of scalars does not matter
    either (they are compared as multisets). Nested mappings are compared
    recursively. Any other kind of value makes the mappings unequal.

    Args:
        a: A mapping
        b: Another mapping

    Returns:
        bool
    """
    if not isinstance(a, Mapping) or not isinstance(b, Mapping):
        return a == b

    if set(a) != set(b):
        return False

    for key in a:
        val_a = a[key]
        val_b = b[key]

        if isinstance(val_a, Mapping) and isinstance(val_b, Mapping):
            if not unordered_value_equal(val_a, val_b):
                return False
            continue

        values_a = _scalar_values(val_a)
        values_b = _scalar_values(val_b)

        if values_a is None or values_b is None:
            return False

        try:
            if Counter(values_a) != Counter(values_b):
                return False
        except TypeError:
            return False

    return True

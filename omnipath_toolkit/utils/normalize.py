"""
Value and Shape Normalizers

Coerce loosely typed arguments into one canonical shape, so the data access
layer can branch on a small number of cases:

- ``ensure_list`` / ``ensure_list_if_sequence``: always-a-list
- ``value_or_default`` and variants: fallback values for absent arguments
- ``as_type``: conversion to the type of an exemplar value
"""

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

_SCALAR_TYPES = (str, bytes, bool, int, float, complex, np.generic)
_CONVERTIBLE_TYPES = (bool, int, float, complex, str)


def is_scalar(value: Any) -> bool:
    """True for strings, bytes, numbers and numpy scalars."""
    return isinstance(value, _SCALAR_TYPES)


def is_plain_list(obj: Any) -> bool:
    """
    Distinguish a plain list from other list-like objects.

    Data frames, series and arrays are iterable too, but they must not be
    treated (and not be double-wrapped) as generic sequences.
    """
    return isinstance(obj, list)


def ensure_list(value: Any) -> List[Any]:
    """
    Make sure ``value`` is a list.

    Unlike ``list(value)``, ``None`` gives a list with a single ``None``
    element, so callers can iterate at least once and still tell "no value"
    (``[None]``) apart from an empty list (``[]``).

    Args:
        value: Any value

    Returns:
        A list
    """
    if value is None:
        return [None]

    if is_scalar(value) or isinstance(value, Mapping):
        return [value]

    if isinstance(value, (np.ndarray, pd.Series, pd.Index)):
        return list(value.tolist())

    if isinstance(value, Iterable):
        return list(value)

    return [value]


def ensure_list_if_sequence(value: Any) -> List[Any]:
    """
    Return ``value`` unchanged if it is a plain list, otherwise wrap it into
    a single element list.
    """
    return value if is_plain_list(value) else [value]


def list_null(value: Any) -> Any:
    """``None`` if ``value`` is an empty list or ``[None]``, else ``value``."""
    if is_plain_list(value) and (
        len(value) == 0 or (len(value) == 1 and value[0] is None)
    ):
        return None

    return value


def _is_empty(value: Any) -> bool:
    try:
        return len(value) == 0
    except TypeError:
        return False


def value_or_default(value: Any, default: Any) -> Any:
    """Returns ``value`` if it is not ``None``, otherwise ``default``."""
    return default if value is None else value


def value_or_default_if_empty(value: Any, default: Any) -> Any:
    """Returns ``value`` if it is not zero length, otherwise ``default``."""
    return default if _is_empty(value) else value


def value_or_default_if_blank(value: Any, default: Any) -> Any:
    """
    Returns ``default`` if ``value`` is ``None``, zero length, or its first
    element is an empty string; otherwise ``value``.
    """
    if value is None or _is_empty(value):
        return default

    first = value if is_scalar(value) else ensure_list(value)[0]

    return default if isinstance(first, str) and first == "" else value


def insert_if_not_null(mapping: Dict[str, Any], **elements: Any) -> Dict[str, Any]:
    """
    Insert the keyword arguments into a copy of ``mapping``, skipping the
    ones with ``None`` value.
    """
    result = dict(mapping)
    result.update({k: v for k, v in elements.items() if v is not None})
    return result


def null_or_call(value: Any, fun: Callable, *args, **kwargs) -> Any:
    """``None`` if ``value`` is ``None``, otherwise ``fun(value, ...)``."""
    return None if value is None else fun(value, *args, **kwargs)


def empty_no_problem(
    values: Optional[Sequence],
    fun: Callable,
    default: Any = None,
    *args,
    **kwargs,
) -> Any:
    """
    Call ``fun`` on ``values`` unless they are ``None`` or empty.

    Many functions can not tolerate empty input, which in longer workflows
    happens easily. This returns ``default`` for those cases.
    """
    if values is None or len(values) == 0:
        return default

    return fun(values, *args, **kwargs)


def null_to_nan(values: Iterable) -> List[Any]:
    """Replace ``None`` elements by NaN."""
    return [np.nan if x is None else x for x in values]


def chunks(values: Sequence, size: int) -> List[List[Any]]:
    """Split ``values`` into consecutive chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")

    values = list(values)
    return [values[i:i + size] for i in range(0, len(values), size)]


def _is_atomic(value: Any) -> bool:
    if is_scalar(value) or isinstance(value, np.ndarray):
        return True

    return isinstance(value, (list, tuple)) and all(is_scalar(x) for x in value)


def as_type(value: Any, exemplar: Any) -> Any:
    """
    Convert an atomic value to the type of another atomic value.

    Scalars are converted with the exemplar's type, lists and tuples
    element-wise, numpy arrays by the exemplar's dtype. Whenever the
    conversion is not possible, ``value`` is returned unchanged.

    Args:
        value: The value to be converted
        exemplar: Convert to the type of this value

    Returns:
        The converted value, or ``value`` itself
    """
    if exemplar is None or not _is_atomic(value) or not _is_atomic(exemplar):
        return value

    if isinstance(exemplar, np.ndarray):
        dtype = exemplar.dtype
    else:
        sample = exemplar
        if isinstance(exemplar, (list, tuple)):
            if not exemplar:
                return value
            sample = exemplar[0]
        if isinstance(sample, np.generic):
            dtype = np.asarray(sample).dtype
        else:
            dtype = type(sample)

    # Fixed width string dtypes would truncate longer values
    if isinstance(dtype, np.dtype) and dtype.kind in "US":
        dtype = dtype.type

    try:
        if isinstance(value, np.ndarray):
            return value.astype(dtype)
        convert = dtype.type if isinstance(dtype, np.dtype) else dtype
        if convert not in _CONVERTIBLE_TYPES and not issubclass(convert, np.generic):
            return value
        if isinstance(value, (list, tuple)):
            return type(value)(convert(x) for x in value)
        return convert(value)
    except (TypeError, ValueError, OverflowError):
        return value

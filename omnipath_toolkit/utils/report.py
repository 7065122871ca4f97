"""
Diagnostic messages about loaded datasets.

Tables carry their provenance in ``DataFrame.attrs``: ``"source"`` is the
name of the resource and ``"origin"`` is ``"cache"`` if the data was read
from a previously stored copy.
"""

import logging
from typing import Any, Iterable, Optional

from ..log import log_success
from .normalize import value_or_default, value_or_default_if_blank

UNKNOWN_SOURCE = "Unknown source"


def _attrs(obj: Any) -> dict:
    attrs = getattr(obj, "attrs", None)
    return attrs if isinstance(attrs, dict) else {}


def is_from_cache(obj: Any) -> bool:
    """Is the object labelled as cache origin."""
    return _attrs(obj).get("origin") == "cache"


def copy_attrs(to: Any, source: Any, names: Iterable[str]) -> Any:
    """
    Copy provenance attributes from one object to another.

    Attributes missing from ``source`` are set to ``None``.

    Returns:
        ``to``
    """
    source_attrs = _attrs(source)
    for name in names:
        to.attrs[name] = source_attrs.get(name)

    return to


def count_records(data: Any) -> int:
    """Number of rows or elements of ``data``; 0 if it has no length."""
    try:
        return len(data)
    except TypeError:
        return 0


def report(
    resource_name: str,
    record_count: Optional[int] = 0,
    from_cache: bool = False,
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Issue a log message about the successful loading of a dataset.

    Args:
        resource_name: Name of the resource
        record_count: Number of records obtained
        from_cache: Whether the data was loaded from the cache
        logger: Logger to write to, the module logger by default

    Returns:
        The message
    """
    message = "{}: {}loaded {:d} records{}".format(
        resource_name,
        "" if from_cache else "down",
        record_count or 0,
        " from cache" if from_cache else "",
    )
    log_success(logger or logging.getLogger(__name__), message)

    return message


def load_success(
    data: Any,
    resource: Optional[str] = None,
    from_cache: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Report the successful loading of ``data``.

    The resource name and the cache origin default to the ones recorded in
    ``data.attrs``.
    """
    from_cache = value_or_default(from_cache, is_from_cache(data))
    resource = value_or_default(
        resource,
        value_or_default_if_blank(_attrs(data).get("source"), UNKNOWN_SOURCE),
    )

    return report(resource, count_records(data), from_cache, logger=logger)

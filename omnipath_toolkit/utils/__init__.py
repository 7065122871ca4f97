"""Generic helpers of the OmniPath toolkit."""

from .normalize import (
    as_type,
    chunks,
    empty_no_problem,
    ensure_list,
    ensure_list_if_sequence,
    insert_if_not_null,
    is_plain_list,
    list_null,
    null_or_call,
    null_to_nan,
    value_or_default,
    value_or_default_if_blank,
    value_or_default_if_empty,
)
from .merge import add_defaults, merge_lists, unordered_value_equal
from .paths import (
    add_extension_if_missing,
    ensure_dir,
    extract_extension,
    to_absolute_path,
)
from .connections import (
    ConnectionRegistry,
    close_connection,
    close_on_exit,
    get_connections,
    open_connection,
)
from .report import copy_attrs, is_from_cache, load_success, report
from .text import indent, plural, pretty_list

__all__ = [
    # Normalizers
    "as_type",
    "chunks",
    "empty_no_problem",
    "ensure_list",
    "ensure_list_if_sequence",
    "insert_if_not_null",
    "is_plain_list",
    "list_null",
    "null_or_call",
    "null_to_nan",
    "value_or_default",
    "value_or_default_if_blank",
    "value_or_default_if_empty",
    # Reconciler
    "add_defaults",
    "merge_lists",
    "unordered_value_equal",
    # Paths
    "add_extension_if_missing",
    "ensure_dir",
    "extract_extension",
    "to_absolute_path",
    # Connections
    "ConnectionRegistry",
    "close_connection",
    "close_on_exit",
    "get_connections",
    "open_connection",
    # Reporting
    "copy_attrs",
    "is_from_cache",
    "load_success",
    "report",
    # Text
    "indent",
    "plural",
    "pretty_list",
]

"""
Path and file name utilities.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

ARCHIVE_MARKER = "tar"

_WINDOWS_ABSOLUTE = re.compile(r"^[A-Za-z]:[\\/]")


def extract_extension(name: str) -> str:
    """
    Returns the extension of a file name or URL.

    The query string is discarded. Compound extensions of tar archives
    (e.g. ``tar.gz``) are kept together. A name without dots is returned
    as it is.

    Args:
        name: File name, path or URL

    Returns:
        The extension, or an empty string
    """
    name = name.split("?")[0]
    segments = [s for s in name.split(".") if s.isalnum()]

    if not segments:
        return ""

    if len(segments) > 1 and len(segments[-1]) < 5:
        if segments[-2] == ARCHIVE_MARKER:
            return ".".join(segments[-2:])

    return segments[-1]


def add_extension_if_missing(name: str, ext: Optional[str]) -> str:
    """Adds an extension to a path or file name, unless it already has it."""
    if not ext or name.endswith(ext):
        return name

    return f"{name}.{ext}"


def _looks_absolute(path: str) -> bool:
    if os.name == "nt":
        return bool(_WINDOWS_ABSOLUTE.match(path))

    return path[:1] in ("/", "~")


def to_absolute_path(
    path: Union[str, Path],
    base: Optional[Union[str, Path]] = None,
) -> str:
    """
    Converts any path to an absolute path.

    Unlike ``Path.resolve``, symlinks are not resolved and the file does not
    need to exist.

    Args:
        path: Path of a file, absolute or relative to ``base``
        base: Directory relative paths are interpreted in; the current
            working directory by default

    Returns:
        Normalized absolute path
    """
    path = str(path)

    if _looks_absolute(path):
        expanded = os.path.expanduser(path)
        # `~user` of an unknown user is left unexpanded
        if not expanded.startswith("~"):
            return os.path.normpath(expanded)

    base = os.getcwd() if base is None else to_absolute_path(base)

    return os.path.normpath(os.path.join(base, path))


def ensure_dir(path: Union[str, Path]) -> Path:
    """
    Create the parent directory of ``path`` if it does not exist.

    Failure is logged as a warning, not raised.

    Returns:
        The parent directory
    """
    dir_path = Path(path).parent

    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Failed to create directory `{dir_path}`: {e}")
    else:
        logger.debug(f"Created directory `{dir_path}`")

    return dir_path

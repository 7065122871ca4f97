"""
Open I/O connections, keyed by the location they point to.

Python has no process-wide table of open connections, so handles opened
through this module are tracked in a registry which can close every handle
of a location at once.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
import gzip
import logging
from typing import IO, Dict, Iterator, List, Optional, Union
from pathlib import Path

from .paths import extract_extension

logger = logging.getLogger(__name__)


@dataclass
class ConnectionRegistry:
    """
    Registry of open file handles.

    Attributes:
        connections: Mapping from location to the handles opened on it
    """

    connections: Dict[str, List[IO]] = field(default_factory=dict)

    def open(self, uri: Union[str, Path], mode: str = "r", **kwargs) -> IO:
        """
        Open a file and register the handle under its location.

        Gzip compressed files are decompressed transparently.

        Args:
            uri: Path of the file
            mode: Mode as for ``open``; text modes for gzip files are
                converted to their ``t`` variant

        Returns:
            File handle
        """
        uri = str(uri)

        if extract_extension(uri).endswith("gz"):
            if "b" not in mode and "t" not in mode:
                mode = f"{mode}t"
            handle = gzip.open(uri, mode, **kwargs)
        else:
            handle = open(uri, mode, **kwargs)

        self._prune(uri)
        self.connections.setdefault(uri, []).append(handle)
        logger.debug(f"Opened connection to `{uri}`")

        return handle

    def register(self, uri: Union[str, Path], handle: IO) -> IO:
        """Register a handle opened elsewhere."""
        self.connections.setdefault(str(uri), []).append(handle)
        return handle

    def _prune(self, uri: str) -> None:
        """Forget the closed handles of ``uri``."""
        handles = [h for h in self.connections.get(uri, []) if not h.closed]
        if handles:
            self.connections[uri] = handles
        else:
            self.connections.pop(uri, None)

    def get_connections(self, uri: Union[str, Path]) -> List[IO]:
        """Retrieve the open connection(s) pointing to ``uri``."""
        uri = str(uri)
        self._prune(uri)
        return list(self.connections.get(uri, []))

    def release(self, handle: IO) -> None:
        """Forget ``handle`` without closing it; unknown handles are ignored."""
        for uri, handles in list(self.connections.items()):
            remaining = [h for h in handles if h is not handle]
            if len(remaining) == len(handles):
                continue
            if remaining:
                self.connections[uri] = remaining
            else:
                del self.connections[uri]

    def close_connection(self, uri: Union[str, Path]) -> None:
        """
        Close the open connection(s) pointing to ``uri``.

        Closing an unknown location, or one whose handles are already
        closed, does nothing.
        """
        handles = self.connections.pop(str(uri), [])

        for handle in handles:
            if not handle.closed:
                handle.close()

        if handles:
            logger.debug(f"Closed {len(handles)} connection(s) to `{uri}`")

    def close_all(self) -> None:
        """Close every registered connection."""
        for uri in list(self.connections):
            self.close_connection(uri)


_default_registry = ConnectionRegistry()


def default_registry() -> ConnectionRegistry:
    """The registry used by the module level functions."""
    return _default_registry


def open_connection(uri: Union[str, Path], mode: str = "r", **kwargs) -> IO:
    return _default_registry.open(uri, mode, **kwargs)


def get_connections(uri: Union[str, Path]) -> List[IO]:
    return _default_registry.get_connections(uri)


def close_connection(uri: Union[str, Path]) -> None:
    _default_registry.close_connection(uri)


@contextmanager
def close_on_exit(
    handle: IO,
    registry: Optional[ConnectionRegistry] = None,
) -> Iterator[IO]:
    """
    Closes ``handle`` when the ``with`` block exits, and removes it from
    ``registry`` (the default registry if not given).
    """
    try:
        yield handle
    finally:
        if not handle.closed:
            handle.close()
        (registry or _default_registry).release(handle)

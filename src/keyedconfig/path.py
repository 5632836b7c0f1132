"""Path components and the generic keyed path accessor.

A path is an ordered sequence of components: ``str`` components address
dictionary keys, ``int`` components address array positions. Any type that
implements the :class:`Keyed` capability can be read and written through a
path with :func:`get_path` and :func:`set_path`.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol, Sequence, TypeVar, Union, runtime_checkable

from keyedconfig.errors import PathSyntaxError

__all__ = [
    "PathComponent",
    "Keyed",
    "normalize_path",
    "parse_dotted_path",
    "get_path",
    "set_path",
]

PathComponent = Union[str, int]

_SEGMENT_RE = re.compile(r"^(?P<key>[^.\[\]]*)(?P<indices>(?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")

K = TypeVar("K", bound="Keyed")


@runtime_checkable
class Keyed(Protocol):
    """Capability required for path-based access.

    Implementations are persistent: ``set_component`` returns a new value and
    never modifies the receiver.
    """

    @classmethod
    def empty(cls: type[K]) -> K:
        """The value used when a missing intermediate container is written through."""
        ...

    def get_component(self: K, component: PathComponent) -> K | None:
        """Return the child at a single component, or None when absent."""
        ...

    def set_component(self: K, component: PathComponent, value: K | None) -> K:
        """Return a copy of the receiver with a single component replaced."""
        ...


def normalize_path(path: Iterable[PathComponent]) -> list[PathComponent]:
    """Validate path components and return them as a list.

    Raises:
        TypeError: If a component is neither ``str`` nor ``int`` (``bool`` is rejected).
        ValueError: If an index component is negative.
    """
    components: list[PathComponent] = []
    for component in path:
        if isinstance(component, bool) or not isinstance(component, (str, int)):
            raise TypeError(f"Path components must be str or int, got {type(component).__name__}")
        if isinstance(component, int) and component < 0:
            raise ValueError(f"Path index must be non-negative, got {component}")
        components.append(component)
    return components


def parse_dotted_path(dotted: str) -> list[PathComponent]:
    """Parse a dotted path such as ``"servers[0].host"`` into components.

    Dots separate dictionary keys, ``[n]`` suffixes address array positions.
    An empty string is the empty path.

    Raises:
        PathSyntaxError: On empty segments, stray brackets, or non-numeric indices.
    """
    if not dotted:
        return []

    components: list[PathComponent] = []
    for segment in dotted.split("."):
        match = _SEGMENT_RE.match(segment)
        if match is None:
            raise PathSyntaxError(dotted, f"malformed segment '{segment}'")
        key = match.group("key")
        indices = match.group("indices")
        if not key and not indices:
            raise PathSyntaxError(dotted, "empty segment")
        if key:
            components.append(key)
        components.extend(int(index) for index in _INDEX_RE.findall(indices))
    return components


def get_path(node: K, path: Iterable[PathComponent]) -> K | None:
    """Resolve a path inside a keyed value.

    Returns the node itself for the empty path and None as soon as any
    component is absent.

    Raises:
        TypeError: If a component is neither ``str`` nor ``int``.
        ValueError: If an index component is negative.
    """
    current: K | None = node
    for component in normalize_path(path):
        current = current.get_component(component)
        if current is None:
            return None
    return current


def set_path(node: K, path: Iterable[PathComponent], value: K | None) -> K:
    """Return a copy of ``node`` with ``value`` stored at ``path``.

    Missing intermediate containers are created with ``type(node).empty()``.
    The empty path leaves the node unchanged.

    Raises:
        TypeError: If a component is neither ``str`` nor ``int``.
        ValueError: If an index component is negative.
    """
    return _set_components(node, normalize_path(path), value)


def _set_components(node: K, path: Sequence[PathComponent], value: K | None) -> K:
    if not path:
        return node

    first, rest = path[0], path[1:]
    if not rest:
        return node.set_component(first, value)

    child = node.get_component(first)
    if child is None:
        child = node.empty()
    return node.set_component(first, _set_components(child, rest, value))

"""Map value type and its conversion protocol pair."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from keyedconfig.errors import ConversionError
from keyedconfig.variant import Variant

__all__ = ["Map", "MapInitializable", "MapRepresentable", "MapConvertible"]

T = TypeVar("T")


class Map(Variant):
    """General-purpose structured value with the same seven kinds as Config."""

    __slots__ = ()

    @classmethod
    def _coerce(cls, value: Any) -> Map:
        if isinstance(value, MapRepresentable) and not isinstance(value, type):
            result = value.make_map()
            if not isinstance(result, Map):
                raise ConversionError(
                    f"{type(value).__name__}.make_map() returned {type(result).__name__}, expected Map",
                    target="Map",
                    actual=type(result).__name__,
                )
            return result
        return cls.from_native(value)

    @classmethod
    def from_map(cls, map_value: Map) -> Map:
        return map_value

    def make_map(self) -> Map:
        return self


@runtime_checkable
class MapInitializable(Protocol):
    """A type that can be built from a Map."""

    @classmethod
    def from_map(cls: type[T], map_value: Map) -> T: ...


@runtime_checkable
class MapRepresentable(Protocol):
    """A type that can describe itself as a Map."""

    def make_map(self) -> Map: ...


@runtime_checkable
class MapConvertible(MapInitializable, MapRepresentable, Protocol):
    """A type convertible to and from Map in both directions."""

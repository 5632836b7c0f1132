"""Seven-kind structured value machinery shared by Config and Map."""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Iterable, Mapping, TypeVar

from keyedconfig.errors import ConversionError
from keyedconfig.path import PathComponent, get_path, normalize_path, parse_dotted_path, set_path

__all__ = ["ValueKind", "Variant", "INT_MIN", "INT_MAX"]

logger = logging.getLogger(__name__)

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

V = TypeVar("V", bound="Variant")

_UNSET: Any = object()


class ValueKind(str, Enum):
    """The closed set of variants a structured value can hold."""

    STRING = "string"
    INT = "int"
    DOUBLE = "double"
    BOOL = "bool"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    NULL = "null"


class Variant:
    """Immutable tagged union over :class:`ValueKind`.

    Subclasses are distinct value types with identical shape. Containers only
    hold values of their own class, so a ``Config`` never nests a ``Map``.

    ``Variant()`` is the empty dictionary. ``Variant(obj)`` builds a value from
    a Python literal (``None``, ``bool``, ``int``, ``float``, ``str``, lists,
    tuples and string-keyed mappings).

    Equality is structural and kind-sensitive. NaN doubles compare equal to
    each other so that values round-trip through copies and the Map bridge.
    """

    __slots__ = ("_kind", "_payload")

    _kind: ValueKind
    _payload: Any

    def __init__(self, value: Any = _UNSET) -> None:
        built = self.empty() if value is _UNSET else self._coerce(value)
        object.__setattr__(self, "_kind", built._kind)
        object.__setattr__(self, "_payload", built._payload)

    @classmethod
    def _make(cls: type[V], kind: ValueKind, payload: Any) -> V:
        obj = object.__new__(cls)
        object.__setattr__(obj, "_kind", kind)
        object.__setattr__(obj, "_payload", payload)
        return obj

    @classmethod
    def _coerce(cls: type[V], value: Any) -> V:
        """Turn an arbitrary input into a value of this class."""
        return cls.from_native(value)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} values are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} values are immutable")

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self)._make, (self._kind, self._payload))

    def __copy__(self: V) -> V:
        return self

    def __deepcopy__(self: V, memo: dict[int, Any]) -> V:
        return self

    # === Construction ===

    @classmethod
    def string(cls: type[V], value: str) -> V:
        if not isinstance(value, str):
            raise TypeError(f"Expected str, got {type(value).__name__}")
        return cls._make(ValueKind.STRING, value)

    @classmethod
    def integer(cls: type[V], value: int) -> V:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected int, got {type(value).__name__}")
        if not INT_MIN <= value <= INT_MAX:
            raise ConversionError(
                f"Integer {value} is outside the 64-bit range",
                target=cls.__name__,
                actual="int",
            )
        return cls._make(ValueKind.INT, value)

    @classmethod
    def double(cls: type[V], value: float) -> V:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Expected float, got {type(value).__name__}")
        return cls._make(ValueKind.DOUBLE, float(value))

    @classmethod
    def boolean(cls: type[V], value: bool) -> V:
        if not isinstance(value, bool):
            raise TypeError(f"Expected bool, got {type(value).__name__}")
        return cls._make(ValueKind.BOOL, value)

    @classmethod
    def array(cls: type[V], items: Iterable[Any] = ()) -> V:
        """Build an array, coercing each element into this class."""
        elements = []
        for index, item in enumerate(items):
            try:
                elements.append(cls._coerce(item))
            except ConversionError as error:
                error.prefix_path(index)
                raise
        return cls._make(ValueKind.ARRAY, tuple(elements))

    @classmethod
    def dictionary(cls: type[V], entries: Mapping[str, Any] | None = None) -> V:
        """Build a dictionary, coercing each value into this class."""
        payload: dict[str, V] = {}
        for key, item in (entries or {}).items():
            if not isinstance(key, str):
                raise ConversionError(
                    f"Dictionary keys must be str, got {type(key).__name__}",
                    target=cls.__name__,
                    actual=type(key).__name__,
                )
            try:
                payload[key] = cls._coerce(item)
            except ConversionError as error:
                error.prefix_path(key)
                raise
        return cls._make(ValueKind.DICTIONARY, payload)

    @classmethod
    def null(cls: type[V]) -> V:
        return cls._make(ValueKind.NULL, None)

    @classmethod
    def empty(cls: type[V]) -> V:
        """The empty dictionary."""
        return cls._make(ValueKind.DICTIONARY, {})

    @classmethod
    def from_native(cls: type[V], value: Any) -> V:
        """Build a value from plain Python data.

        Raises:
            ConversionError: If ``value`` (or anything nested in it) has no
                corresponding variant.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.null()
        if isinstance(value, bool):
            return cls.boolean(value)
        if isinstance(value, int):
            return cls.integer(value)
        if isinstance(value, float):
            return cls.double(value)
        if isinstance(value, str):
            return cls.string(value)
        if isinstance(value, Mapping):
            return cls.dictionary(value)
        if isinstance(value, (list, tuple)):
            return cls.array(value)
        raise ConversionError(
            f"Cannot represent {type(value).__name__} as {cls.__name__}",
            target=cls.__name__,
            actual=type(value).__name__,
        )

    @classmethod
    def _from_variant(cls: type[V], other: Variant) -> V:
        """Structurally copy a value of any variant class into this class."""
        if other._kind is ValueKind.ARRAY:
            return cls._make(ValueKind.ARRAY, tuple(cls._from_variant(item) for item in other._payload))
        if other._kind is ValueKind.DICTIONARY:
            return cls._make(
                ValueKind.DICTIONARY,
                {key: cls._from_variant(item) for key, item in other._payload.items()},
            )
        return cls._make(other._kind, other._payload)

    def to_native(self) -> Any:
        """Return plain Python data (dicts, lists and scalars)."""
        if self._kind is ValueKind.ARRAY:
            return [item.to_native() for item in self._payload]
        if self._kind is ValueKind.DICTIONARY:
            return {key: item.to_native() for key, item in self._payload.items()}
        return self._payload

    # === Polymorphic access ===

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def is_null(self) -> bool:
        return self._kind is ValueKind.NULL

    @property
    def as_string(self) -> str | None:
        return self._payload if self._kind is ValueKind.STRING else None

    @property
    def as_int(self) -> int | None:
        return self._payload if self._kind is ValueKind.INT else None

    @property
    def as_double(self) -> float | None:
        return self._payload if self._kind is ValueKind.DOUBLE else None

    @property
    def as_bool(self) -> bool | None:
        return self._payload if self._kind is ValueKind.BOOL else None

    @property
    def as_array(self: V) -> list[V] | None:
        """A fresh list of the elements, or None when not an array."""
        return list(self._payload) if self._kind is ValueKind.ARRAY else None

    @property
    def as_dictionary(self: V) -> dict[str, V] | None:
        """A fresh dict of the entries, or None when not a dictionary."""
        return dict(self._payload) if self._kind is ValueKind.DICTIONARY else None

    # === Keyed capability ===

    def get_component(self: V, component: PathComponent) -> V | None:
        if isinstance(component, int):
            if self._kind is ValueKind.ARRAY and 0 <= component < len(self._payload):
                return self._payload[component]
            return None
        if self._kind is ValueKind.DICTIONARY:
            return self._payload.get(component)
        return None

    def set_component(self: V, component: PathComponent, value: V | None) -> V:
        """Return a copy with one component replaced; None stores null.

        A key turns a non-dictionary receiver into a dictionary. An index
        turns a non-array receiver into an array, and an index outside the
        array leaves its elements untouched.
        """
        if value is None:
            value = self.null()
        elif not isinstance(value, type(self)):
            raise TypeError(f"Expected {type(self).__name__}, got {type(value).__name__}")

        if isinstance(component, int):
            items = list(self._payload) if self._kind is ValueKind.ARRAY else []
            if 0 <= component < len(items):
                items[component] = value
            else:
                logger.debug("Index %d out of range for array of length %d, write ignored", component, len(items))
            return self._make(ValueKind.ARRAY, tuple(items))

        entries = dict(self._payload) if self._kind is ValueKind.DICTIONARY else {}
        entries[component] = value
        return self._make(ValueKind.DICTIONARY, entries)

    # === Path access ===

    def get(self: V, *path: PathComponent) -> V | None:
        """Return the value at ``path``, or None when any step is absent."""
        return get_path(self, path)

    def set(self: V, *path: PathComponent, to: Any) -> V:
        """Return a copy with ``to`` stored at ``path``.

        ``to`` is coerced into this class first; None stores null. Missing
        intermediate containers are created as dictionaries.
        """
        components = normalize_path(path)
        try:
            value = None if to is None else self._coerce(to)
        except ConversionError as error:
            error.prefix_path(*components)
            raise
        return set_path(self, components, value)

    def lookup(self, dotted: str, default: Any = None) -> Any:
        """Return the native value at a dotted path such as ``"db.hosts[0]"``."""
        found = get_path(self, parse_dotted_path(dotted))
        if found is None:
            return default
        return found.to_native()

    # === Value semantics ===

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        if self._kind is not other._kind:
            return False
        if self._kind is ValueKind.DOUBLE and math.isnan(self._payload):
            return math.isnan(other._payload)
        return self._payload == other._payload

    def __hash__(self) -> int:
        if self._kind is ValueKind.DICTIONARY:
            return hash((self._kind, frozenset(self._payload.items())))
        if self._kind is ValueKind.DOUBLE and math.isnan(self._payload):
            return hash((self._kind, "nan"))
        return hash((self._kind, self._payload))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_native()!r})"

"""Config value type, its conversion protocol pair, and the Map bridge."""

from __future__ import annotations

import logging
import types
from typing import Any, Protocol, TypeVar, Union, get_args, get_origin, runtime_checkable

from pydantic import BaseModel, ValidationError

from keyedconfig.errors import ConversionError
from keyedconfig.map import Map
from keyedconfig.path import PathComponent, get_path, normalize_path
from keyedconfig.variant import ValueKind, Variant

__all__ = [
    "Config",
    "ConfigInitializable",
    "ConfigRepresentable",
    "ConfigConvertible",
    "MapBridged",
    "from_config",
    "to_config",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SCALAR_KINDS: dict[type, ValueKind] = {
    str: ValueKind.STRING,
    int: ValueKind.INT,
    float: ValueKind.DOUBLE,
    bool: ValueKind.BOOL,
}


class Config(Variant):
    """Structured configuration value.

    A closed union of string, int, double, bool, array, dictionary and null.
    Values are immutable; :meth:`set` returns a new value.

    Example::

        cfg = Config({"server": {"ports": [80, 443]}})
        cfg.get("server", "ports", 1)            # Config(443)
        cfg.get_as(int, "server", "ports", 0)    # 80
        cfg = cfg.set("server", "host", to="example.org")
    """

    __slots__ = ()

    @classmethod
    def _coerce(cls, value: Any) -> Config:
        return to_config(value)

    # === Identity conversion ===

    @classmethod
    def from_config(cls, config: Config) -> Config:
        return config

    def make_config(self) -> Config:
        return self

    # === Map bridge ===

    @classmethod
    def from_map(cls, map_value: Map) -> Config:
        """Build the structurally identical Config from a Map."""
        if not isinstance(map_value, Map):
            raise TypeError(f"Expected Map, got {type(map_value).__name__}")
        return cls._from_variant(map_value)

    def make_map(self) -> Map:
        """Build the structurally identical Map."""
        return Map._from_variant(self)

    # === Typed path access ===

    def get_as(self, target: Any, *path: PathComponent) -> Any:
        """Return the value at ``path`` converted to ``target``.

        Raises:
            ConversionError: If nothing is stored at ``path`` or the stored
                value cannot be converted. The error's ``path`` is the full
                path to the offending value.
        """
        components = normalize_path(path)
        found = get_path(self, components)
        if found is None:
            raise ConversionError(
                "No value at path",
                target=_type_name(target),
                path=components,
            )
        try:
            return from_config(target, found)
        except ConversionError as error:
            error.prefix_path(*components)
            logger.debug("Conversion to %s failed: %s", _type_name(target), error)
            raise


@runtime_checkable
class ConfigInitializable(Protocol):
    """A type that can be built from a Config."""

    @classmethod
    def from_config(cls: type[T], config: Config) -> T: ...


@runtime_checkable
class ConfigRepresentable(Protocol):
    """A type that can describe itself as a Config."""

    def make_config(self) -> Config: ...


@runtime_checkable
class ConfigConvertible(ConfigInitializable, ConfigRepresentable, Protocol):
    """A type convertible to and from Config in both directions."""


class MapBridged:
    """Mixin deriving Config conversion from a class's Map conversion.

    Subclasses implement ``from_map`` and ``make_map``; Config values are
    translated through the structural bridge.
    """

    @classmethod
    def from_config(cls, config: Config) -> Any:
        return cls.from_map(config.make_map())  # type: ignore[attr-defined]

    def make_config(self) -> Config:
        map_value = self.make_map()  # type: ignore[attr-defined]
        if not isinstance(map_value, Map):
            raise ConversionError(
                f"{type(self).__name__}.make_map() returned {type(map_value).__name__}, expected Map",
                target="Config",
                actual=type(map_value).__name__,
            )
        return Config.from_map(map_value)


def to_config(value: Any) -> Config:
    """Represent ``value`` as a Config.

    Accepts Config, Map, objects implementing ``make_config``, pydantic
    models, and plain Python data.

    Raises:
        ConversionError: If ``value`` has no Config representation.
    """
    if isinstance(value, Config):
        return value
    if isinstance(value, Map):
        return Config.from_map(value)
    if isinstance(value, ConfigRepresentable) and not isinstance(value, type):
        result = value.make_config()
        if not isinstance(result, Config):
            raise ConversionError(
                f"{type(value).__name__}.make_config() returned {type(result).__name__}, expected Config",
                target="Config",
                actual=type(result).__name__,
            )
        return result
    if isinstance(value, BaseModel):
        return Config.from_native(value.model_dump(mode="json"))
    return Config.from_native(value)


def from_config(target: Any, config: Config) -> Any:
    """Convert ``config`` into an instance of ``target``.

    ``target`` may be Config, Map, ``str``, ``int``, ``float``, ``bool``,
    ``None``, ``list[X]``, ``dict[str, X]``, ``X | None`` (or any union), a
    pydantic model, or a class implementing ``from_config``. Scalars never
    coerce across kinds: an int target rejects a double or a bool.

    Raises:
        ConversionError: If the value's kind does not fit ``target``.
    """
    if not isinstance(config, Config):
        raise TypeError(f"Expected Config, got {type(config).__name__}")

    if target is Config or target is Any:
        return config
    if target is Map:
        return config.make_map()
    if target is None or target is type(None):
        if config.is_null:
            return None
        raise _mismatch(target, config)

    origin = get_origin(target)
    if origin is Union or origin is types.UnionType:
        return _from_union(target, config)
    if target is list or origin is list:
        return _from_array(target, config)
    if target is dict or origin is dict:
        return _from_dictionary(target, config)

    if target in _SCALAR_KINDS:
        if config.kind is not _SCALAR_KINDS[target]:
            raise _mismatch(target, config)
        return config.to_native()

    if origin is None and isinstance(target, type):
        if issubclass(target, BaseModel):
            return _from_model(target, config)
        if isinstance(target, ConfigInitializable):
            return target.from_config(config)

    raise ConversionError(
        f"Unsupported conversion target {target!r}",
        target=_type_name(target),
        actual=config.kind.value,
    )


def _from_union(target: Any, config: Config) -> Any:
    arms = get_args(target)
    if type(None) in arms and config.is_null:
        return None
    candidates = [arm for arm in arms if arm is not type(None)]
    if len(candidates) == 1:
        return from_config(candidates[0], config)

    last_error: ConversionError | None = None
    for arm in candidates:
        try:
            return from_config(arm, config)
        except ConversionError as error:
            last_error = error
    raise ConversionError(
        f"Value matches none of {_type_name(target)}",
        target=_type_name(target),
        actual=config.kind.value,
        cause=last_error,
    ) from last_error


def _from_array(target: Any, config: Config) -> list[Any]:
    items = config.as_array
    if items is None:
        raise _mismatch(target, config)
    args = get_args(target)
    if not args:
        return [item.to_native() for item in items]

    result = []
    for index, item in enumerate(items):
        try:
            result.append(from_config(args[0], item))
        except ConversionError as error:
            error.prefix_path(index)
            raise
    return result


def _from_dictionary(target: Any, config: Config) -> dict[str, Any]:
    entries = config.as_dictionary
    if entries is None:
        raise _mismatch(target, config)
    args = get_args(target)
    if not args:
        return {key: item.to_native() for key, item in entries.items()}
    if args[0] is not str:
        raise ConversionError(
            f"Dictionary keys must be str, not {_type_name(args[0])}",
            target=_type_name(target),
            actual=config.kind.value,
        )

    result = {}
    for key, item in entries.items():
        try:
            result[key] = from_config(args[1], item)
        except ConversionError as error:
            error.prefix_path(key)
            raise
    return result


def _from_model(target: type[BaseModel], config: Config) -> BaseModel:
    try:
        return target.model_validate(config.to_native())
    except ValidationError as e:
        raise ConversionError(
            f"Cannot build {target.__name__}: {e.error_count()} validation error(s)",
            target=target.__name__,
            actual=config.kind.value,
            cause=e,
        ) from e


def _mismatch(target: Any, config: Config) -> ConversionError:
    return ConversionError(
        f"Expected {_type_name(target)}, found {config.kind.value}",
        target=_type_name(target),
        actual=config.kind.value,
    )


def _type_name(target: Any) -> str:
    if target is None or target is type(None):
        return "None"
    if isinstance(target, type) and not get_args(target):
        return target.__name__
    return repr(target).replace("typing.", "")

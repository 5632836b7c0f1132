"""keyedconfig - Structured configuration values with keyed path access."""

from __future__ import annotations

# Values
from keyedconfig.config import Config
from keyedconfig.map import Map
from keyedconfig.variant import INT_MAX, INT_MIN, ValueKind, Variant

# Conversion
from keyedconfig.config import (
    ConfigConvertible,
    ConfigInitializable,
    ConfigRepresentable,
    MapBridged,
    from_config,
    to_config,
)
from keyedconfig.map import MapConvertible, MapInitializable, MapRepresentable

# Paths
from keyedconfig.path import (
    Keyed,
    PathComponent,
    get_path,
    normalize_path,
    parse_dotted_path,
    set_path,
)

# Errors
from keyedconfig.errors import (
    ConversionError,
    ErrorCodes,
    KeyedConfigError,
    PathSyntaxError,
)

__version__ = "0.1.0"

__all__ = [
    # Values
    "Config",
    "Map",
    "Variant",
    "ValueKind",
    "INT_MIN",
    "INT_MAX",
    # Conversion
    "ConfigInitializable",
    "ConfigRepresentable",
    "ConfigConvertible",
    "MapInitializable",
    "MapRepresentable",
    "MapConvertible",
    "MapBridged",
    "from_config",
    "to_config",
    # Paths
    "Keyed",
    "PathComponent",
    "get_path",
    "set_path",
    "normalize_path",
    "parse_dotted_path",
    # Errors
    "ErrorCodes",
    "KeyedConfigError",
    "ConversionError",
    "PathSyntaxError",
]

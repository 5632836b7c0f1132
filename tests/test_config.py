"""Tests for Config: the Map bridge, identity conversion and typed path access."""

from __future__ import annotations

import logging
import math

import pytest

from keyedconfig import Config, ConversionError, Map, ValueKind

from domain_types import Endpoint, Port, ServerSettings


class TestMapBridge:
    def test_every_kind_maps_structurally(self, nested_config: Config, native_data: dict) -> None:
        map_value = nested_config.make_map()
        assert isinstance(map_value, Map)
        assert map_value == Map(native_data)

    def test_nested_children_change_class(self, nested_config: Config) -> None:
        map_value = nested_config.make_map()
        assert all(isinstance(item, Map) for item in map_value.get("hosts").as_array)

    def test_round_trip(self, nested_config: Config) -> None:
        assert Config.from_map(nested_config.make_map()) == nested_config

    def test_round_trip_with_nan(self) -> None:
        value = Config({"x": math.nan, "ys": [1.0, math.nan]})
        assert Config.from_map(value.make_map()) == value

    @pytest.mark.parametrize("native", ["s", 0, -7, 2.5, True, None, [], {}])
    def test_round_trip_scalars_and_empty(self, native: object) -> None:
        value = Config(native)
        bridged = Config.from_map(value.make_map())
        assert bridged == value
        assert bridged.kind is value.kind

    def test_from_map_rejects_config(self) -> None:
        with pytest.raises(TypeError):
            Config.from_map(Config(1))

    def test_map_is_accepted_as_literal(self) -> None:
        assert Config(Map({"a": 1})) == Config({"a": 1})
        assert Config([Map(1)]) == Config([1])

    def test_map_accepts_map_representable_children(self) -> None:
        assert Map([Config(1)]) == Map([1])


class TestIdentityConversion:
    def test_from_config_returns_same_value(self, nested_config: Config) -> None:
        assert Config.from_config(nested_config) is nested_config

    def test_make_config_returns_self(self, nested_config: Config) -> None:
        assert nested_config.make_config() is nested_config

    def test_constructor_accepts_config(self, nested_config: Config) -> None:
        assert Config(nested_config) == nested_config


class TestRepresentableConstruction:
    def test_config_from_representable(self) -> None:
        assert Config(Port(443)) == Config(443)

    def test_representable_nested_in_literal(self) -> None:
        value = Config({"ports": [Port(80), Port(443)]})
        assert value.lookup("ports") == [80, 443]

    def test_representable_failure_propagates(self) -> None:
        with pytest.raises(ConversionError, match="out of range") as exc_info:
            Config({"ports": [Port(80), Port(70000)]})
        assert exc_info.value.path == ["ports", 1]

    def test_pydantic_model_in_literal(self) -> None:
        value = Config({"server": ServerSettings(host="h", port=1)})
        assert value.lookup("server") == {"host": "h", "port": 1, "tags": []}

    def test_map_bridged_object(self) -> None:
        assert Config(Endpoint("http://x", 3)) == Config({"url": "http://x", "retries": 3})


class TestTypedGet:
    def test_scalar(self, nested_config: Config) -> None:
        assert nested_config.get_as(int, "port") == 8080
        assert nested_config.get_as(str, "hosts", 0) == "a.example"
        assert nested_config.get_as(float, "ratio") == 0.75
        assert nested_config.get_as(bool, "debug") is False

    def test_generic_containers(self, nested_config: Config) -> None:
        assert nested_config.get_as(list[str], "hosts") == ["a.example", "b.example"]
        assert nested_config.get_as(list[list[int]], "matrix") == [[1, 2], [3, 4]]
        assert nested_config.get_as(dict[str, int | None], "limits") == {"rps": 100, "burst": None}

    def test_optional(self, nested_config: Config) -> None:
        assert nested_config.get_as(int | None, "limits", "burst") is None
        assert nested_config.get_as(int | None, "limits", "rps") == 100

    def test_config_target(self, nested_config: Config) -> None:
        assert nested_config.get_as(Config, "limits") == Config({"rps": 100, "burst": None})

    def test_map_target(self, nested_config: Config) -> None:
        assert nested_config.get_as(Map, "hosts") == Map(["a.example", "b.example"])

    def test_domain_type(self) -> None:
        value = Config({"endpoint": {"url": "u", "retries": 2}, "port": 22})
        assert value.get_as(Endpoint, "endpoint") == Endpoint("u", 2)
        assert value.get_as(Port, "port") == Port(22)

    def test_missing_path(self, nested_config: Config) -> None:
        with pytest.raises(ConversionError, match="No value at path") as exc_info:
            nested_config.get_as(int, "limits", "timeout")
        assert exc_info.value.path == ["limits", "timeout"]
        assert exc_info.value.target == "int"

    def test_wrong_kind_reports_full_path(self, nested_config: Config) -> None:
        with pytest.raises(ConversionError) as exc_info:
            nested_config.get_as(list[int], "matrix")
        error = exc_info.value
        assert error.path == ["matrix", 0]
        assert error.actual == "array"

    def test_nested_element_path(self) -> None:
        value = Config({"groups": {"a": [1, 2], "b": [3, "four"]}})
        with pytest.raises(ConversionError) as exc_info:
            value.get_as(dict[str, list[int]], "groups")
        assert exc_info.value.path == ["groups", "b", 1]
        assert exc_info.value.actual == "string"

    def test_failure_is_logged(self, nested_config: Config, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="keyedconfig.config"):
            with pytest.raises(ConversionError):
                nested_config.get_as(int, "name")
        assert "Conversion to int failed" in caplog.text

    def test_empty_path_converts_receiver(self) -> None:
        assert Config([1, 2]).get_as(list[int]) == [1, 2]


class TestTypedSet:
    def test_set_domain_type(self) -> None:
        value = Config().set("service", "port", to=Port(8443))
        assert value.get_as(Port, "service", "port") == Port(8443)

    def test_set_pydantic_model(self) -> None:
        settings = ServerSettings(host="db", port=5432, tags=["primary"])
        value = Config().set("database", to=settings)
        assert value.get_as(ServerSettings, "database") == settings

    def test_set_map(self) -> None:
        value = Config().set("m", to=Map([1, 2]))
        assert value.get("m") == Config([1, 2])

    def test_unrepresentable_value_raises(self) -> None:
        with pytest.raises(ConversionError, match="out of range"):
            Config().set("port", to=Port(0))

    def test_unrepresentable_value_reports_path(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            Config().set("service", "port", to=Port(0))
        assert exc_info.value.path == ["service", "port"]

    def test_nested_unrepresentable_value_reports_full_path(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            Config().set("service", "ports", to=[Port(80), Port(0)])
        assert exc_info.value.path == ["service", "ports", 1]

    def test_set_then_get_consistency(self, nested_config: Config) -> None:
        for path, item in [(("a",), 1), (("limits", "rps"), "x"), (("hosts", 1), [True]), (("n", "m", "o"), None)]:
            updated = nested_config.set(*path, to=item)
            assert updated.get(*path) == Config(item)


class TestScenarios:
    def test_index_lookup(self) -> None:
        assert Config({"a": [1, 2, 3]}).get("a", 1) == Config(2)

    def test_nested_creation(self) -> None:
        assert Config({}).set("a", "b", to="x") == Config({"a": {"b": "x"}})

    def test_out_of_range_write(self) -> None:
        value = Config({"a": [1, 2]})
        assert value.set("a", 5, to="z") == value

    def test_null_receiver(self) -> None:
        assert Config.null().set("x", to=1) == Config({"x": 1})

    def test_integer_conversion(self) -> None:
        with pytest.raises(ConversionError):
            Config("hello").get_as(int)
        assert Config(42).get_as(int) == 42
        assert Config(42).kind is ValueKind.INT

"""Shared test fixtures for the keyedconfig test suite."""

from __future__ import annotations

from typing import Any

import pytest

from keyedconfig import Config


# === Fixtures ===


@pytest.fixture
def native_data() -> dict[str, Any]:
    """Plain Python data covering every kind."""
    return {
        "name": "api",
        "port": 8080,
        "ratio": 0.75,
        "debug": False,
        "hosts": ["a.example", "b.example"],
        "limits": {"rps": 100, "burst": None},
        "matrix": [[1, 2], [3, 4]],
    }


@pytest.fixture
def nested_config(native_data: dict[str, Any]) -> Config:
    """A Config built from ``native_data``."""
    return Config(native_data)

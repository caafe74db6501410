"""Tests for kodata.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from kodata.core.config import (
    DEFAULT_API_URL,
    DEFAULT_OUTPUT,
    DEFAULT_TIMEOUT,
    Settings,
    parse_toml,
)
from kodata.core.result import Err, Ok


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.output == DEFAULT_OUTPUT
        assert settings.api_url == DEFAULT_API_URL
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_from_dict(self) -> None:
        api = "https://ghe.example.com/api/v3"
        data = {"settings": {"output": "out", "api_url": api, "timeout": 10}}
        settings = Settings.from_dict(data)
        assert settings == Settings(output="out", api_url=api, timeout=10.0)

    def test_from_dict_ignores_bad_types(self) -> None:
        settings = Settings.from_dict({"settings": {"output": 3, "timeout": True}})
        assert settings == Settings()

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Settings().output = "x"  # type: ignore[misc]


class TestParseToml:
    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "packages.toml"
        path.write_text('[settings]\noutput = "out"\n', encoding="utf-8")
        assert parse_toml(path) == Ok({"settings": {"output": "out"}})

    def test_missing(self, tmp_path: Path) -> None:
        result = parse_toml(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "packages.toml"
        path.write_text("[settings\n", encoding="utf-8")
        result = parse_toml(path)
        assert isinstance(result, Err)
        assert "Invalid TOML syntax" in result.error.message
        assert result.error.path == path

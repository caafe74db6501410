"""Typed configuration loading.

The package file is TOML. Its ``[settings]`` table controls where bundles are
written and how GitHub is reached; everything else is read by the bundle
service (see ``kodata.services.bundle.config``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_OUTPUT",
    "DEFAULT_TIMEOUT",
    "ConfigError",
    "Settings",
    "parse_toml",
]

DEFAULT_CONFIG_PATH = Path("packages.toml")
DEFAULT_OUTPUT = "cmd/operator/kodata"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    output: str = DEFAULT_OUTPUT
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Settings:
        settings: StrDict = get_table(data, "settings") or {}
        return cls(
            output=get_str(settings, "output") or DEFAULT_OUTPUT,
            api_url=get_str(settings, "api_url") or DEFAULT_API_URL,
            timeout=get_float(settings, "timeout") or DEFAULT_TIMEOUT,
        )


def parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

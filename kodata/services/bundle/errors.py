from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

BundleErrorKind = Literal[
    "malformed_version",
    "no_matching_series",
    "empty_release_set",
    "invalid_input",
    "unknown_package",
    "unknown_release",
    "fetch_failed",
    "invalid_response",
    "write_failed",
]


@dataclass(frozen=True, slots=True)
class BundleError:
    kind: BundleErrorKind
    message: str
    hint: str | None = None

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

# (asset_name, tag) -> output name, or "" to drop the asset.
AcceptRule = Callable[[str, str], str]


@dataclass(frozen=True, slots=True)
class Asset:
    """A manifest file published with a release."""

    name: str
    url: str
    # True when the asset comes from an aligned dependency release.
    secondary: bool = False


@dataclass(frozen=True, slots=True)
class Release:
    org: str
    repo: str
    tag: str
    created: datetime
    assets: tuple[Asset, ...] = ()

    @property
    def source(self) -> str:
        return f"{self.org}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.source} {self.tag}"


def _accept_all(name: str, tag: str) -> str:
    return name


@dataclass(frozen=True, slots=True)
class Source:
    """A release source (``org/repo``) and the rule selecting its assets."""

    org: str
    repo: str
    accept: AcceptRule = field(default=_accept_all, compare=False)

    def __str__(self) -> str:
        return f"{self.org}/{self.repo}"


@dataclass(frozen=True, slots=True)
class Package:
    name: str
    primary: Source
    additional: tuple[Source, ...] = ()

    @property
    def sources(self) -> tuple[Source, ...]:
        return (self.primary, *self.additional)


ReleaseCollection = Mapping[str, Sequence[Release]]


@dataclass(frozen=True, slots=True)
class Alignment:
    """Which dependency release was used for a target release."""

    source: str
    target: Release
    chosen: Release

    def describe(self) -> str:
        return f"using {self.chosen} with {self.target}"


@dataclass(frozen=True, slots=True)
class Bundle:
    package: str
    target: Release
    assets: tuple[Asset, ...]
    alignments: tuple[Alignment, ...] = ()

    def file_names(self) -> list[str]:
        """On-disk names; the numeric prefix preserves bundle order."""
        return [f"{i}-{asset.name}" for i, asset in enumerate(self.assets, start=1)]

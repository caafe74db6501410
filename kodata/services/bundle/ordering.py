"""Placement rules for manifests within a bundle.

Bundles are applied file by file in order, so a few lifecycle manifests must
be pinned to the front or back regardless of their names. Rules are evaluated
in ``ORDERING_RULES`` order; a rule decides only when exactly one of the two
assets matches it. Remaining ties go to primary-before-secondary and finally
to the name.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Literal

from kodata.services.bundle.model import AcceptRule, Asset

Placement = Literal["first", "last"]


@dataclass(frozen=True, slots=True)
class OrderingRule:
    id: str
    suffix: str
    placement: Placement
    reason: str

    def matches(self, asset: Asset) -> bool:
        return asset.name.endswith(self.suffix)


ORDERING_RULES: tuple[OrderingRule, ...] = (
    OrderingRule(
        id="pre-install-jobs",
        suffix="-pre-install-jobs.yaml",
        placement="first",
        reason="the job must complete, not just be applied, before later manifests",
    ),
    OrderingRule(
        id="crds",
        suffix="-crds.yaml",
        placement="first",
        reason="CRDs must exist before any resource referencing them",
    ),
    OrderingRule(
        id="post-install-jobs",
        suffix="-post-install-jobs.yaml",
        placement="last",
        reason="cleanup and migration jobs run after everything else",
    ),
    OrderingRule(
        id="sugar-controller",
        suffix="-sugar-controller.yaml",
        placement="last",
        reason="listed after the channel/broker manifests despite collating before them",
    ),
)


def compare_assets(a: Asset, b: Asset) -> int:
    """Three-way comparison of two assets (negative when ``a`` goes first)."""
    for rule in ORDERING_RULES:
        a_hit = rule.matches(a)
        b_hit = rule.matches(b)
        if a_hit == b_hit:
            continue
        first = -1 if rule.placement == "first" else 1
        return first if a_hit else -first

    if a.secondary != b.secondary:
        return 1 if a.secondary else -1

    if a.name == b.name:
        return 0
    return -1 if a.name < b.name else 1


def asset_less(a: Asset, b: Asset) -> bool:
    return compare_assets(a, b) < 0


def sort_assets(assets: Iterable[Asset]) -> tuple[Asset, ...]:
    return tuple(sorted(assets, key=cmp_to_key(compare_assets)))


def filter_assets(assets: Iterable[Asset], accept: AcceptRule, tag: str) -> tuple[Asset, ...]:
    """Keep assets the rule accepts, renamed to the name it returns.

    The input is never modified; accepted assets are copies.
    """
    out: list[Asset] = []
    for asset in assets:
        name = accept(asset.name, tag)
        if name:
            out.append(replace(asset, name=name))
    return tuple(out)

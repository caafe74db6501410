from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from kodata.core.result import Err, Ok
from kodata.services.bundle.align import align, series_range
from kodata.services.bundle.model import Release
from kodata.services.bundle.semver import parse_version

T = datetime(2020, 9, 29, 12, 0, tzinfo=UTC)


def _target(tag: str = "v1.2.3", created: datetime = T) -> Release:
    return Release(org="knative", repo="eventing", tag=tag, created=created)


def _dep(tag: str, offset_days: int) -> Release:
    return Release(
        org="knative-sandbox",
        repo="eventing-kafka",
        tag=tag,
        created=T + timedelta(days=offset_days),
    )


def test_picks_most_recent_release_not_after_target() -> None:
    candidates = [_dep("v1.2.9", 5), _dep("v1.2.0", -10), _dep("v1.2.5", -5)]
    assert align(_target(), candidates) == Ok(candidates[2])


def test_release_created_at_same_instant_qualifies() -> None:
    candidates = [_dep("v1.2.1", 0), _dep("v1.2.2", 1)]
    assert align(_target(), candidates) == Ok(candidates[0])


def test_target_older_than_whole_series_falls_back_to_oldest() -> None:
    candidates = [_dep("v1.2.4", 3), _dep("v1.2.1", 1), _dep("v1.2.7", 9)]
    assert align(_target(), candidates) == Ok(candidates[1])


def test_other_series_are_ignored_even_when_older() -> None:
    candidates = [_dep("v1.3.0", -30), _dep("v1.1.9", -20), _dep("v1.2.0", 2)]
    assert align(_target(), candidates) == Ok(candidates[2])


def test_no_matching_series() -> None:
    result = align(_target(), [_dep("v1.1.0", -3), _dep("v1.3.0", -1)])
    assert isinstance(result, Err)
    assert result.error.kind == "no_matching_series"
    assert "v1.2" in result.error.message
    assert "v1.2.3" in result.error.message


def test_no_candidates() -> None:
    result = align(_target(), [])
    assert isinstance(result, Err)
    assert result.error.kind == "no_matching_series"


@pytest.mark.parametrize("bad", ["latest", "1.2.3"])
def test_malformed_tags_fail(bad: str) -> None:
    result = align(_target(tag=bad), [_dep("v1.2.0", 0)])
    assert isinstance(result, Err) and result.error.kind == "malformed_version"

    result = align(_target(), [_dep("v1.2.0", 0), _dep(bad, 0)])
    assert isinstance(result, Err) and result.error.kind == "malformed_version"


def test_series_range_is_half_open() -> None:
    ordered = [parse_version(t).unwrap() for t in ("v1.3.0", "v1.2.5", "v1.2.0", "v1.1.0")]
    target = parse_version("v1.2.3").unwrap()
    assert series_range(target, ordered) == (1, 3)  # type: ignore[arg-type]


def test_series_range_empty_when_missing() -> None:
    ordered = [parse_version(t).unwrap() for t in ("v1.3.0", "v1.1.0")]
    target = parse_version("v1.2.3").unwrap()
    start, end = series_range(target, ordered)  # type: ignore[arg-type]
    assert start == end

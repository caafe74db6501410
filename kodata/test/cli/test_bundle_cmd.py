from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from kodata import __version__
from kodata.cli.app import app
from kodata.cli.context import CLIContext
from kodata.core.config import Settings
from kodata.core.errors import ErrorCode
from kodata.output.console import MockConsole
from kodata.services.bundle.config import AssetRule, PackagesConfig
from kodata.services.bundle.github import releases_url
from kodata.services.bundle.model import Package, Source
from kodata.tools.http import HttpError, MockHttpClient

API = "https://api.github.com"
SERVING = Source("knative", "serving", accept=AssetRule())
PACKAGE = Package(name="knative-serving", primary=SERVING)


def _ctx(tmp_path: Path, http: MockHttpClient) -> CLIContext:
    return CLIContext(
        config=PackagesConfig(
            settings=Settings(output=str(tmp_path / "kodata")),
            packages={PACKAGE.name: PACKAGE},
        ),
        http=http,
        console=MockConsole(),
    )


def _http() -> MockHttpClient:
    http = MockHttpClient()
    url = "https://dl.example.com/serving-core.yaml"
    http.set_text(
        releases_url(API, SERVING, 1),
        json.dumps(
            [
                {
                    "tag_name": "v0.17.3",
                    "created_at": "2020-09-29T00:00:00Z",
                    "assets": [
                        {"name": "serving-core.yaml", "browser_download_url": url},
                        {"name": "checksums.txt", "browser_download_url": url + ".txt"},
                    ],
                }
            ]
        ),
    )
    http.set_download(url, b"kind: Namespace\n")
    return http


def _patch(monkeypatch: pytest.MonkeyPatch, ctx: CLIContext) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    monkeypatch.setattr(bundle_cmd, "build_context", lambda _path: ctx)


def test_compose_writes_bundle(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    ctx = _ctx(tmp_path, _http())
    _patch(monkeypatch, ctx)

    bundle_cmd.compose(
        package="knative-serving",
        tag=None,
        minors=2,
        config=Path("packages.toml"),
        out=None,
        dry_run=False,
    )

    written = tmp_path / "kodata" / "knative-serving" / "0.17.3" / "1-serving-core.yaml"
    assert written.read_bytes() == b"kind: Namespace\n"
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("1 bundle(s) written")


def test_compose_unknown_package_exits_user_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    ctx = _ctx(tmp_path, _http())
    _patch(monkeypatch, ctx)

    with pytest.raises(typer.Exit) as exc:
        bundle_cmd.compose(
            package="knative-operator",
            tag=None,
            minors=2,
            config=Path("packages.toml"),
            out=None,
            dry_run=False,
        )

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("configured packages: knative-serving")


def test_compose_download_failure_exits_network_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    http = _http()
    url = "https://dl.example.com/serving-core.yaml"
    http.set_download(url, HttpError(url=url, status=404, message="Not Found"))
    _patch(monkeypatch, _ctx(tmp_path, http))

    with pytest.raises(typer.Exit) as exc:
        bundle_cmd.compose(
            package="knative-serving",
            tag="v0.17.3",
            minors=1,
            config=Path("packages.toml"),
            out=None,
            dry_run=False,
        )

    assert exc.value.exit_code == int(ErrorCode.NETWORK_ERROR)
    assert not (tmp_path / "kodata" / "knative-serving" / "0.17.3").exists()


def test_plan_prints_numbered_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    ctx = _ctx(tmp_path, _http())
    _patch(monkeypatch, ctx)

    bundle_cmd.plan(package="knative-serving", tag="v0.17.3", config=Path("packages.toml"))

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.messages[:2] == [
        "knative-serving v0.17.3",
        "1-serving-core.yaml  (primary)",
    ]
    assert not (tmp_path / "kodata").exists()


def test_plan_unknown_tag_exits_user_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    _patch(monkeypatch, _ctx(tmp_path, _http()))

    with pytest.raises(typer.Exit) as exc:
        bundle_cmd.plan(package="knative-serving", tag="v9.9.9", config=Path("packages.toml"))

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_releases_lists_tags(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import kodata.cli.commands.bundle_cmd as bundle_cmd

    ctx = _ctx(tmp_path, _http())
    _patch(monkeypatch, ctx)

    bundle_cmd.releases(package="knative-serving", minors=1, config=Path("packages.toml"))

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.messages == ["v0.17.3  2020-09-29"]


def test_version_flag() -> None:
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_missing_config_exits_user_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        app, ["plan", "--package", "x", "--tag", "v1.0.0", "--config", str(tmp_path / "nope.toml")]
    )
    assert result.exit_code == int(ErrorCode.USER_ERROR)

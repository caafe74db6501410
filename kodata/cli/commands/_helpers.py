"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from kodata.core.errors import ErrorCode
from kodata.core.result import Err, Result
from kodata.output.console import Style
from kodata.services.bundle.errors import BundleError

if TYPE_CHECKING:
    from kodata.cli.context import CLIContext
    from kodata.services.bundle.model import Package


T = TypeVar("T")

_NETWORK_KINDS = frozenset({"fetch_failed", "invalid_response"})


def error_code_for(error: BundleError) -> ErrorCode:
    if error.kind in _NETWORK_KINDS:
        return ErrorCode.NETWORK_ERROR
    if error.kind == "write_failed":
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_on_error(result: Result[T, BundleError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its code."""
    if isinstance(result, Err):
        error = result.error
        ctx.console.error(error.message)
        if error.hint:
            ctx.console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(error_code_for(error)))
    return result.value


def require_package(ctx: CLIContext, name: str) -> Package:
    package = ctx.config.get(name)
    if package is None:
        known = ", ".join(sorted(ctx.config.packages)) or "none"
        ctx.console.error(f"unknown package: {name}")
        ctx.console.print(f"hint: configured packages: {known}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return package

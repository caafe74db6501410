"""Package definitions loaded from the package file.

Example::

    [[packages]]
    name = "knative-eventing"

    [packages.primary]
    github = "knative/eventing"
    exclude = ["eventing.yaml"]

    [[packages.additional]]
    github = "knative-sandbox/eventing-kafka-broker"
    include = ["eventing-kafka-*.yaml"]
    rename = { "eventing-kafka.yaml" = "kafka-{version}.yaml" }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

from kodata.core.config import ConfigError, Settings, parse_toml
from kodata.core.result import Err, Ok, Result
from kodata.core.structured import as_str_dict, get_list, get_str, get_str_list, get_table
from kodata.services.bundle.model import Package, Source

__all__ = [
    "AssetRule",
    "PackagesConfig",
    "load_packages",
    "packages_from_dict",
    "source_from_table",
]

DEFAULT_SUFFIXES: tuple[str, ...] = (".yaml",)


def _empty_rename() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class AssetRule:
    """Accept rule for one source.

    Names must end with one of ``suffixes``, match ``include`` (when given)
    and not match ``exclude``. ``rename`` maps raw names to output names; the
    target may use ``{tag}`` or ``{version}`` and an empty target drops the asset.
    """

    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    rename: Mapping[str, str] = field(default_factory=_empty_rename)

    def __call__(self, name: str, tag: str) -> str:
        if self.suffixes and not name.endswith(self.suffixes):
            return ""
        if self.include and not any(fnmatchcase(name, p) for p in self.include):
            return ""
        if any(fnmatchcase(name, p) for p in self.exclude):
            return ""
        if name not in self.rename:
            return name
        return self.rename[name].replace("{tag}", tag).replace("{version}", tag.removeprefix("v"))


@dataclass(frozen=True, slots=True)
class PackagesConfig:
    settings: Settings
    packages: dict[str, Package]

    def get(self, name: str) -> Package | None:
        return self.packages.get(name)


def source_from_table(table: Mapping[str, object], where: str) -> Result[Source, str]:
    slug = get_str(table, "github")
    if slug is None:
        return Err(f"{where}: missing 'github = \"org/repo\"'")
    org, sep, repo = slug.partition("/")
    if not sep or not org or not repo or "/" in repo:
        return Err(f"{where}: invalid github source {slug!r}, expected 'org/repo'")

    rule_fields: dict[str, tuple[str, ...]] = {}
    for key in ("suffixes", "include", "exclude"):
        if key not in table:
            continue
        values = get_str_list(table, key)
        if values is None:
            return Err(f"{where}: '{key}' must be a list of strings")
        rule_fields[key] = tuple(values)

    rename: dict[str, str] = {}
    if "rename" in table:
        raw = get_table(table, "rename")
        if raw is None:
            return Err(f"{where}: 'rename' must be a table")
        for old, new in raw.items():
            if not isinstance(new, str):
                return Err(f"{where}: rename target for {old!r} must be a string")
            rename[old] = new

    rule = AssetRule(**rule_fields, rename=rename)
    return Ok(Source(org=org, repo=repo, accept=rule))


def packages_from_dict(data: Mapping[str, object]) -> Result[dict[str, Package], str]:
    packages: dict[str, Package] = {}
    for i, item in enumerate(get_list(data, "packages") or []):
        table = as_str_dict(item)
        if table is None:
            return Err(f"packages[{i}] must be a table")
        name = get_str(table, "name")
        if name is None:
            return Err(f"packages[{i}]: missing name")
        if name in packages:
            return Err(f"duplicate package {name!r}")

        primary_table = get_table(table, "primary")
        if primary_table is None:
            return Err(f"{name}: missing [primary] source")
        primary = source_from_table(primary_table, f"{name}.primary")
        if isinstance(primary, Err):
            return primary

        additional: list[Source] = []
        for j, extra in enumerate(get_list(table, "additional") or []):
            extra_table = as_str_dict(extra)
            if extra_table is None:
                return Err(f"{name}.additional[{j}] must be a table")
            source = source_from_table(extra_table, f"{name}.additional[{j}]")
            if isinstance(source, Err):
                return source
            additional.append(source.value)

        packages[name] = Package(name=name, primary=primary.value, additional=tuple(additional))
    return Ok(packages)


def load_packages(path: Path) -> Result[PackagesConfig, ConfigError]:
    """Load settings and package definitions from a TOML file."""
    result = parse_toml(path)
    if isinstance(result, Err):
        return result

    packages = packages_from_dict(result.value)
    if isinstance(packages, Err):
        return Err(ConfigError(f"Invalid package config: {packages.error}", path=path))

    return Ok(PackagesConfig(settings=Settings.from_dict(result.value), packages=packages.value))

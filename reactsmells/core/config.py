from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from reactsmells.core.findings import SEVERITY_ORDER

CONFIG_FILENAME = ".reactsmells.toml"
PYPROJECT_TABLE = "reactsmells"

FAIL_ON_LEVELS = (*SEVERITY_ORDER.keys(), "never")

DEFAULT_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")
DEFAULT_EXCLUDE = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    ".nuxt",
    "vendor",
    "*.min.js",
    "*.bundle.js",
)

_KNOWN_KEYS = {
    "select",
    "ignore",
    "min_severity",
    "fail_on",
    "exclude",
    "extend_exclude",
    "extensions",
    "severity",
    "thresholds",
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Thresholds:
    max_component_lines: int = 200
    max_jsx_elements: int = 50
    max_hooks: int = 6
    min_duplicate_jsx_elements: int = 4


@dataclass(frozen=True)
class LintConfig:
    select: Tuple[str, ...] = ()
    ignore: Tuple[str, ...] = ()
    min_severity: str = "info"
    fail_on: str = "warning"
    exclude: Tuple[str, ...] = DEFAULT_EXCLUDE
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    severity_overrides: Dict[str, str] = field(default_factory=dict)
    thresholds: Thresholds = field(default_factory=Thresholds)
    source: Optional[str] = None

    def with_overrides(
        self,
        select: Optional[Iterable[str]] = None,
        ignore: Optional[Iterable[str]] = None,
        min_severity: Optional[str] = None,
        fail_on: Optional[str] = None,
    ) -> "LintConfig":
        """Apply command-line values on top of the file configuration."""
        changes: Dict[str, Any] = {}
        if select:
            changes["select"] = tuple(select)
        if ignore:
            changes["ignore"] = tuple(self.ignore) + tuple(ignore)
        if min_severity:
            changes["min_severity"] = _check_severity(min_severity, "min_severity")
        if fail_on:
            changes["fail_on"] = _check_fail_on(fail_on)
        return replace(self, **changes) if changes else self


def load_config(start: Optional[Path] = None, explicit: Optional[Path] = None) -> LintConfig:
    """
    Resolve configuration for a run.

    An explicit file wins. Otherwise walk up from `start` and take the first
    `.reactsmells.toml`, or the first `pyproject.toml` that carries a
    `[tool.reactsmells]` table. No file at all means built-in defaults.
    """
    if explicit is not None:
        if not explicit.exists():
            raise ConfigError(f"Config file not found: {explicit}")
        return _config_from_file(explicit)

    if start is None:
        return LintConfig()

    found = find_config_file(start)
    if found is None:
        return LintConfig()
    return _config_from_file(found)


def find_config_file(start: Path) -> Optional[Path]:
    here = start.resolve()
    if here.is_file():
        here = here.parent

    for folder in (here, *here.parents):
        dedicated = folder / CONFIG_FILENAME
        if dedicated.is_file():
            return dedicated
        pyproject = folder / "pyproject.toml"
        if pyproject.is_file() and _pyproject_table(pyproject) is not None:
            return pyproject
    return None


def parse_config(raw: Dict[str, Any], source: Optional[str] = None) -> LintConfig:
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    exclude = tuple(_ensure_string_list(raw.get("exclude"), "exclude")) or DEFAULT_EXCLUDE
    exclude = exclude + tuple(_ensure_string_list(raw.get("extend_exclude"), "extend_exclude"))

    extensions = tuple(
        ext if ext.startswith(".") else f".{ext}"
        for ext in _ensure_string_list(raw.get("extensions"), "extensions")
    ) or DEFAULT_EXTENSIONS

    overrides_raw = raw.get("severity", {})
    if not isinstance(overrides_raw, dict):
        raise ConfigError("'severity' must be a table of selector = severity")
    overrides = {
        str(code): _check_severity(str(level), f"severity.{code}")
        for code, level in overrides_raw.items()
    }

    return LintConfig(
        select=tuple(_ensure_string_list(raw.get("select"), "select")),
        ignore=tuple(_ensure_string_list(raw.get("ignore"), "ignore")),
        min_severity=_check_severity(str(raw.get("min_severity", "info")), "min_severity"),
        fail_on=_check_fail_on(str(raw.get("fail_on", "warning"))),
        exclude=exclude,
        extensions=extensions,
        severity_overrides=overrides,
        thresholds=_parse_thresholds(raw.get("thresholds", {})),
        source=source,
    )


def _config_from_file(path: Path) -> LintConfig:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if path.name == "pyproject.toml":
        table = (data.get("tool") or {}).get(PYPROJECT_TABLE)
        if table is None:
            return LintConfig(source=str(path))
        data = table

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a table")
    return parse_config(data, source=str(path))


def _pyproject_table(path: Path) -> Optional[Dict[str, Any]]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    return (data.get("tool") or {}).get(PYPROJECT_TABLE)


def _parse_thresholds(value: object) -> Thresholds:
    if not isinstance(value, dict):
        raise ConfigError("'thresholds' must be a table")

    defaults = Thresholds()
    known = set(defaults.__dataclass_fields__)
    unknown = sorted(set(value) - known)
    if unknown:
        raise ConfigError(f"Unknown thresholds: {', '.join(unknown)}")

    parsed: Dict[str, int] = {}
    for key, raw in value.items():
        if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
            raise ConfigError(f"Threshold '{key}' must be a positive integer")
        parsed[key] = raw
    return replace(defaults, **parsed)


def _check_severity(value: str, key: str) -> str:
    level = value.strip().lower()
    if level not in SEVERITY_ORDER:
        raise ConfigError(f"'{key}' must be one of: {', '.join(SEVERITY_ORDER)}")
    return level


def _check_fail_on(value: str) -> str:
    level = value.strip().lower()
    if level not in FAIL_ON_LEVELS:
        raise ConfigError(f"'fail_on' must be one of: {', '.join(FAIL_ON_LEVELS)}")
    return level


def _ensure_string_list(value: object, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of strings")
    return [str(item) for item in value]

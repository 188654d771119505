"""Inspector configuration: defaults, YAML file loading and validation.

Precedence (lowest to highest): built-in defaults, a YAML configuration
file, command-line flags. A configuration file looks like::

    # .skill-inspector.yaml
    per_check_timeout: 30
    fail_under: 80
    category_caps:
      security: 70
    disabled_checkers:
      - PortabilityChecker
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from skillinspector.core.categories import DEFAULT_CATEGORIES, Category, with_caps
from skillinspector.core.engine import DEFAULT_CHECK_TIMEOUT
from skillinspector.exceptions import ConfigError

CONFIG_FILENAME = ".skill-inspector.yaml"

DEFAULT_FAIL_UNDER = 70


@dataclass
class InspectorConfig:
    """Runtime settings for an inspection run.

    Attributes:
        per_check_timeout: Seconds each checker may run (> 0).
        fail_under: Headline score below which the CLI exits non-zero.
        category_caps: Per-category cap overrides, by category id.
        disabled_checkers: Names of built-in checkers to skip.
    """

    per_check_timeout: float = DEFAULT_CHECK_TIMEOUT
    fail_under: int = DEFAULT_FAIL_UNDER
    category_caps: dict[str, int] = field(default_factory=dict)
    disabled_checkers: list[str] = field(default_factory=list)

    def validate(self) -> None:
        """Raise ConfigError if any setting is out of range.

        Raises:
            ConfigError: On a non-positive timeout, an out-of-range
                ``fail_under``, or invalid cap overrides.
        """
        timeout = self.per_check_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError(f"per_check_timeout must be a number, got {timeout!r}")
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(f"per_check_timeout must be > 0, got {timeout!r}")

        fail_under = self.fail_under
        if isinstance(fail_under, bool) or not isinstance(fail_under, int):
            raise ConfigError(f"fail_under must be an integer, got {fail_under!r}")
        if not 0 <= fail_under <= 100:
            raise ConfigError(f"fail_under must be in [0, 100], got {fail_under}")

        if not isinstance(self.disabled_checkers, list) or not all(
            isinstance(n, str) for n in self.disabled_checkers
        ):
            raise ConfigError("disabled_checkers must be a list of checker names")

        self.categories()

    def categories(self) -> tuple[Category, ...]:
        """Return the default categories with cap overrides applied."""
        if not isinstance(self.category_caps, dict):
            raise ConfigError("category_caps must be a mapping of category id to cap")
        try:
            return with_caps(self.category_caps, DEFAULT_CATEGORIES)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    def merged(self, **overrides: Any) -> InspectorConfig:
        """Return a copy with every non-None override applied, validated."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        config = replace(self, **updates)
        config.validate()
        return config


def load_config(path: Path) -> InspectorConfig:
    """Load and validate a YAML configuration file.

    Raises:
        ConfigError: If the file is unreadable, not a YAML mapping, has
            unknown keys, or fails validation.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in config {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a YAML mapping")

    known = {f.name for f in fields(InspectorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in config {path}: {', '.join(unknown)}")

    config = InspectorConfig(**data)
    config.validate()
    return config


def find_config(start: Path) -> Path | None:
    """Return ``start/.skill-inspector.yaml`` if present (``start`` may be a file)."""
    directory = start if start.is_dir() else start.parent
    candidate = directory / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def resolve_config(explicit: Path | None, source: Path) -> InspectorConfig:
    """Load the explicit config, else one beside ``source``, else defaults."""
    path = explicit or find_config(source)
    if path is None:
        return InspectorConfig()
    return load_config(path)

"""Configuration loading for jsxmark (.jsxmark.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .engine.wrappers import DEFAULT_STYLED_MODULES
from .models import AttributeNames

CONFIG_FILENAME = ".jsxmark.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AttributeConfig:
    """Attribute naming convention.

    ``native`` switches to camelCase keys (``dataComponent``), ``prefix`` adds a
    vendor segment (``data-sentry-component``). Explicit names win over both.
    """

    native: bool = False
    prefix: Optional[str] = None
    component: Optional[str] = None
    element: Optional[str] = None
    source_file: Optional[str] = None

    def names(self) -> AttributeNames:
        return AttributeNames(
            component=self.component or self._conventional("component"),
            element=self.element or self._conventional("element"),
            source_file=self.source_file or self._conventional("source-file"),
        )

    def _conventional(self, key: str) -> str:
        segments = ["data"]
        if self.prefix:
            segments.append(self.prefix)
        segments.extend(key.split("-"))
        if self.native:
            return segments[0] + "".join(segment.capitalize() for segment in segments[1:])
        return "-".join(segments)


@dataclass
class JsxMarkConfig:
    """Represents the settings defined in .jsxmark.yml."""

    root: Path
    ignored_components: List[str] = field(default_factory=list)
    attributes: AttributeConfig = field(default_factory=AttributeConfig)
    rewrite_styled: bool = True
    styled_modules: List[str] = field(default_factory=lambda: list(DEFAULT_STYLED_MODULES))
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> JsxMarkConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return JsxMarkConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = JsxMarkConfig(root=root)
    config.ignored_components = _as_str_list(_get(data, "ignored_components"))
    config.exclude_paths = _as_str_list(_get(data, "exclude_paths"))

    rewrite_styled = _as_bool(_get(data, "rewrite_styled"))
    if rewrite_styled is not None:
        config.rewrite_styled = rewrite_styled
    styled_modules = _get(data, "styled_modules")
    if styled_modules is not None:
        config.styled_modules = _as_str_list(styled_modules)

    attribute_data = _get(data, "attributes")
    if attribute_data is not None and not isinstance(attribute_data, dict):
        raise ConfigError("'attributes' must be a mapping")
    if attribute_data:
        config.attributes = AttributeConfig(
            native=_as_bool(_get(attribute_data, "native")) or False,
            prefix=_as_str(_get(attribute_data, "prefix")),
            component=_as_str(_get(attribute_data, "component")),
            element=_as_str(_get(attribute_data, "element")),
            source_file=_as_str(_get(attribute_data, "source_file")),
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in (".yml", ".yaml"):
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _get(data: Dict[str, Any], key: str) -> Any:
    """Look up ``key`` accepting the kebab-case spelling as well."""
    if key in data:
        return data[key]
    return data.get(key.replace("_", "-"))


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["AttributeConfig", "CONFIG_FILENAME", "ConfigError", "JsxMarkConfig", "load_config"]

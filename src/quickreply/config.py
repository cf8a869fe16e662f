"""Load engine settings from TOML files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Tuple

import tomllib

from .catalog import DEFAULT_CATALOG, CatalogEntry, default_selector
from .option_codec import DEFAULT_WILDCARD
from .options import DEFAULT_COLOUR, DEFAULT_LABEL, OptionDefaults, pad_colour
from .template import DEFAULT_TEMPLATE, load_template
from .url_normalizer import DEFAULT_DIRECTORY, EXPECTED_PAGE, UrlNormalizer


class ConfigError(ValueError):
    """Raised when an engine configuration file fails validation."""


@dataclass(frozen=True)
class EngineConfig:
    """Static inputs consumed by the codec, the list editor and the normalizer."""

    expected_page: str = EXPECTED_PAGE
    default_directory: str = DEFAULT_DIRECTORY
    url_wildcard: str = DEFAULT_WILDCARD
    default_label: str = DEFAULT_LABEL
    default_colour: str = DEFAULT_COLOUR
    template: str = field(default=DEFAULT_TEMPLATE, repr=False)
    catalog: Tuple[CatalogEntry, ...] = DEFAULT_CATALOG

    def normalizer(self) -> UrlNormalizer:
        return UrlNormalizer(
            expected_page=self.expected_page,
            default_directory=self.default_directory,
        )

    def option_defaults(self) -> OptionDefaults:
        return OptionDefaults(
            label=self.default_label,
            colour=self.default_colour,
            selector=default_selector(self.catalog),
        )


def load_engine_config(config_path: Path) -> EngineConfig:
    """Parse ``config_path`` and merge it over the built-in defaults."""

    with config_path.open("rb") as stream:
        data = tomllib.load(stream)

    page = _parse_table(data, "page")
    defaults = _parse_table(data, "defaults")
    template = _parse_template(_parse_table(data, "template"), base=config_path.parent)
    catalog = _parse_catalog(data.get("catalog"))

    base = EngineConfig()
    default_colour = _coerce_text(defaults, "colour", base.default_colour)
    return EngineConfig(
        expected_page=_coerce_text(page, "expected", base.expected_page),
        default_directory=_coerce_text(
            page, "default_directory", base.default_directory
        ),
        url_wildcard=_coerce_text(page, "wildcard", base.url_wildcard, allow_empty=True),
        default_label=_coerce_text(defaults, "label", base.default_label),
        default_colour=pad_colour(default_colour, default=DEFAULT_COLOUR),
        template=template if template is not None else base.template,
        catalog=catalog if catalog is not None else base.catalog,
    )


def _parse_table(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, Mapping):
        raise ConfigError(f"[{name}] section must be a mapping")
    return table


def _coerce_text(
    table: Mapping[str, Any], key: str, default: str, *, allow_empty: bool = False
) -> str:
    raw_value = table.get(key)
    if raw_value is None:
        return default
    if not isinstance(raw_value, str):
        raise ConfigError(f"{key} must be a string, received {type(raw_value).__name__}")
    text = raw_value.strip()
    if not text and not allow_empty:
        raise ConfigError(f"{key} must not be empty")
    return text


def _parse_template(table: Mapping[str, Any], *, base: Path) -> str | None:
    raw_path = table.get("path")
    if raw_path is None:
        return None
    if not isinstance(raw_path, str):
        raise ConfigError("template.path must be a string")

    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    if not path.is_file():
        raise ConfigError(f"template file does not exist: {path}")
    try:
        return load_template(path)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def _parse_catalog(entries: Any) -> Tuple[CatalogEntry, ...] | None:
    if entries is None:
        return None
    if not isinstance(entries, list):
        raise ConfigError("[[catalog]] must be an array of tables")

    resolved: list[CatalogEntry] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, Mapping):
            raise ConfigError(
                f"catalog entry #{index} must be a mapping, received {type(entry)!r}"
            )
        value = entry.get("value")
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"catalog entry #{index} requires a value")
        value = value.strip()
        if value in seen:
            raise ConfigError(f"catalog value {value!r} defined multiple times")
        seen.add(value)

        label = entry.get("label", value)
        if not isinstance(label, str):
            raise ConfigError(f"catalog entry #{index} label must be a string")
        resolved.append(CatalogEntry(value=value, label=label.strip() or value))
    return tuple(resolved)


__all__ = ["ConfigError", "EngineConfig", "load_engine_config"]

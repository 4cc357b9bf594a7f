"""Build a TabbyConfig from the project's config file and caller overrides.

The first of ``tabby.yaml``, ``tabby.yml``, ``tabby.toml`` found in the
project root is read.  Keys under a ``tabby`` section take precedence over
top-level ones; keyword overrides (typically CLI flags) beat both.
"""

from __future__ import annotations

import sys
import tomllib
from collections.abc import Callable
from pathlib import Path

import yaml

from tabby._errors import ConfigError
from tabby.config import TabbyConfig

_KNOWN_KEYS = frozenset({
    "output", "base_url", "site_url", "paths_to_copy", "preserve",
    "skip_media", "skip_plugin_assets", "ignore_untranslated_pages",
    "index_file_name", "custom_routes", "languages", "default_language",
    "content_dir", "templates_dir", "routes_dir", "plugins_dir", "assets_dir",
})

# Settings stored as tuples; a lone scalar is accepted as a one-item list
_SEQUENCE_KEYS = frozenset({"paths_to_copy", "preserve", "custom_routes", "languages"})


def _yaml_document(text: str) -> object:
    return yaml.safe_load(text) or {}


_READERS: tuple[tuple[str, Callable[[str], object], type[Exception]], ...] = (
    ("tabby.yaml", _yaml_document, yaml.YAMLError),
    ("tabby.yml", _yaml_document, yaml.YAMLError),
    ("tabby.toml", tomllib.loads, tomllib.TOMLDecodeError),
)


def load_config(root: Path, **overrides: object) -> TabbyConfig:
    """Resolve the configuration for the project at *root*.

    Overrides set to *None* are dropped, so flags the user did not pass
    leave file settings alone.

    Raises:
        ConfigError: If the config file cannot be parsed or a key is not
            a known setting.

    """
    settings = _read_config_file(root)
    settings.update((key, value) for key, value in overrides.items() if value is not None)

    unknown = sorted(settings.keys() - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    return TabbyConfig(root=root, **_coerce(settings))  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    for name, parse, error in _READERS:
        path = root / name
        if not path.is_file():
            continue
        try:
            document = parse(path.read_text(encoding="utf-8"))
        except error as exc:
            msg = f"Failed to parse {path}: {exc}"
            raise ConfigError(msg) from exc
        if not isinstance(document, dict):
            print(f"  Ignoring {name}: expected a mapping", file=sys.stderr)
            return {}
        return _select_settings(document)
    return {}


def _select_settings(document: dict[str, object]) -> dict[str, object]:
    """Known top-level keys, then everything in the ``tabby`` section."""
    settings = {k: v for k, v in document.items() if k in _KNOWN_KEYS}
    section = document.get("tabby")
    if isinstance(section, dict):
        settings.update(section)
    return settings


def _coerce(settings: dict[str, object]) -> dict[str, object]:
    coerced = dict(settings)
    if "output" in coerced:
        coerced["output"] = Path(str(coerced["output"]))
    for key in _SEQUENCE_KEYS & coerced.keys():
        value = coerced[key]
        coerced[key] = (value,) if isinstance(value, (str, dict)) else tuple(value)  # type: ignore[arg-type]
    return coerced

"""Builder configuration stored as JSON."""

from __future__ import annotations

import json
from pathlib import Path

from yamlunit.errors import ConfigurationError
from yamlunit.models import (
    DEFAULT_EXCLUSIONS,
    DEFAULT_SOURCE_URL,
    RESERVED_WORDS,
    BuilderConfig,
)

CONFIG_FILE = "yamlunit.json"


def config_to_dict(config: BuilderConfig) -> dict[str, object]:
    return {
        "exclusions": list(config.exclusions),
        "skipped_tests": dict(config.skipped_tests),
        "reserved_words": sorted(config.reserved_words),
        "template_dir": str(config.template_dir) if config.template_dir else None,
        "source_url": config.source_url,
        "extension": config.extension,
        "package_markers": config.package_markers,
    }


def save_config(config: BuilderConfig, path: Path) -> Path:
    """Write ``config`` as JSON to ``path``. Returns the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config_to_dict(config), indent=2) + "\n")
    return path


def load_config(path: Path) -> BuilderConfig:
    """Load a BuilderConfig; keys that are absent keep their defaults.

    A relative ``template_dir`` is resolved against the config file.
    """
    if not path.exists():
        raise FileNotFoundError(f"No config found at {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}", path) from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config format in {path}: expected object", path)

    skipped = data.get("skipped_tests", {})
    if not isinstance(skipped, dict):
        raise ConfigurationError(f"skipped_tests in {path} must be an object", path)

    template_dir = data.get("template_dir")
    if template_dir:
        template_dir = Path(template_dir)
        if not template_dir.is_absolute():
            template_dir = path.parent / template_dir

    return BuilderConfig(
        exclusions=tuple(data.get("exclusions", DEFAULT_EXCLUSIONS)),
        skipped_tests={str(k): str(v) for k, v in skipped.items()},
        reserved_words=frozenset(
            w.lower() for w in data.get("reserved_words", RESERVED_WORDS)
        ),
        template_dir=template_dir or None,
        source_url=data.get("source_url", DEFAULT_SOURCE_URL),
        extension=data.get("extension", ".yml"),
        package_markers=bool(data.get("package_markers", True)),
    )

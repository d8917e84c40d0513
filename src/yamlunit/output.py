"""Output directory management for generated modules."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

log = logging.getLogger("yamlunit.output")

PACKAGE_MARKER = "__init__.py"


def remove_directory(directory: Path) -> None:
    """Delete ``directory`` and everything below it. Missing paths are a no-op."""
    if directory.is_dir():
        log.debug("Removing %s", directory)
        shutil.rmtree(directory)
    elif directory.exists():
        directory.unlink()


def prepare_output(directory: Path) -> Path:
    """Start from an empty output root."""
    remove_directory(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def ensure_module_dir(root: Path, parts: list[str], package_markers: bool = True) -> Path:
    """Create ``root/<parts...>``; optionally mark every level as a package."""
    directory = root
    directories = [root]
    for part in parts:
        directory = directory / part
        directories.append(directory)
    directory.mkdir(parents=True, exist_ok=True)
    if package_markers:
        for d in directories:
            marker = d / PACKAGE_MARKER
            if not marker.exists():
                marker.write_text("")
    return directory


COLLECTION_CONFIG = "pytest.ini"

_COLLECTION_CONFIG_TEXT = """\
# Generated by yamlunit. DO NOT EDIT.
[pytest]
python_files = _*Test.py
markers =
    yaml_group(name): suite a generated YAML test module belongs to
"""


def write_collection_config(root: Path) -> Path:
    """Let ``pytest <root>`` collect the ``_<Name>Test.py`` modules below ``root``."""
    path = root / COLLECTION_CONFIG
    path.write_text(_COLLECTION_CONFIG_TEXT)
    return path

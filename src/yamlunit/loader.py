"""Spec discovery and YAML parsing."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

from yamlunit.errors import NotFoundError, ParseError
from yamlunit.models import LIFECYCLE_BLOCKS, EmptyObject, SpecBlock, SpecDocument

log = logging.getLogger("yamlunit.loader")


class SpecYamlLoader(yaml.SafeLoader):
    """SafeLoader that turns empty mappings into ``EmptyObject``."""


def _construct_mapping(loader: SpecYamlLoader, node: yaml.MappingNode) -> dict:
    value = loader.construct_mapping(node, deep=True)
    return value if value else EmptyObject()


def _construct_timestamp(loader: SpecYamlLoader, node: yaml.ScalarNode) -> str:
    # responses carry dates as strings, so compare them as strings
    return loader.construct_scalar(node)


SpecYamlLoader.add_constructor("tag:yaml.org,2002:map", _construct_mapping)
SpecYamlLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


def fix_boolean_keys(content: str) -> str:
    """Quote bare ``y``/``n`` keys, which YAML 1.1 reads as booleans."""
    content = content.replace(" y:", " 'y':")
    content = content.replace(" n:", " 'n':")
    return content


def is_excluded(path: Path, exclusions: Iterable[str]) -> bool:
    pathname = path.as_posix()
    return any(pattern in pathname for pattern in exclusions)


def discover_specs(
    root: Path, exclusions: Iterable[str] = (), extension: str = ".yml"
) -> list[Path]:
    """Return every spec file under ``root`` in a stable order."""
    if not root.is_dir():
        raise NotFoundError(f"The directory {root} specified does not exist", root)
    exclusions = tuple(exclusions)
    found: list[Path] = []
    for path in sorted(root.rglob(f"*{extension}")):
        if not path.is_file():
            continue
        if is_excluded(path, exclusions):
            log.debug("Excluded %s", path)
            continue
        found.append(path)
    return found


def parse_spec_string(content: str, path: Path) -> SpecDocument:
    """Parse the text of one spec file into a SpecDocument."""
    content = fix_boolean_keys(content)
    try:
        documents = list(yaml.load_all(content, Loader=SpecYamlLoader))
    except yaml.YAMLError as exc:
        raise ParseError(f"YAML parse error file {path}: {exc}", path) from exc

    blocks: list[SpecBlock] = []
    seen_lifecycle: set[str] = set()
    for document in documents:
        if not isinstance(document, dict):
            continue
        for name, actions in document.items():
            name = str(name)
            if name in LIFECYCLE_BLOCKS:
                if name in seen_lifecycle:
                    raise ParseError(
                        f"YAML parse error file {path}: duplicate '{name}' block", path
                    )
                seen_lifecycle.add(name)
            blocks.append(SpecBlock(name=name, actions=actions))
    return SpecDocument(path=path, blocks=tuple(blocks))


def parse_spec_file(path: Path) -> SpecDocument:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"Cannot read spec file {path}: {exc}", path) from exc
    return parse_spec_string(content, path)


def load_specs(
    root: Path, exclusions: Iterable[str] = (), extension: str = ".yml"
) -> dict[Path, SpecDocument]:
    """Discover and parse every spec under ``root``.

    Fails on the first unparsable file; nothing is returned for the rest.
    """
    specs: dict[Path, SpecDocument] = {}
    for path in discover_specs(root, exclusions, extension):
        log.debug("Parsing %s", path)
        specs[path] = parse_spec_file(path)
    return specs

"""Core data models for yamlunit."""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

LIFECYCLE_BLOCKS = ("setup", "teardown")

DEFAULT_SOURCE_URL = (
    "https://github.com/elastic/elasticsearch/tree/{version}"
    "/rest-api-spec/src/main/resources/rest-api-spec/test/{path}"
)

DEFAULT_EXCLUSIONS: tuple[str, ...] = (
    "platinum/eql/10_basic.yml",
    # use of _internal APIs
    "free/cluster.desired_nodes/10_basic.yml",
    "free/cluster.desired_nodes/20_dry_run.yml",
    "free/health/",
    "free/cluster.desired_balance/10_basic.yml",
    "free/cluster.prevalidate_node_removal/10_basic.yml",
)

RESERVED_WORDS: frozenset[str] = frozenset(
    word.lower() for word in (*keyword.kwlist, *keyword.softkwlist)
)


class EmptyObject(dict):
    """An empty YAML mapping.

    Kept apart from ``None`` (absent) and ``[]`` so that ``setup: {}`` and a
    missing ``setup`` stay distinguishable. Its repr is the ``{}`` literal.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "{}"


@dataclass(frozen=True)
class SpecBlock:
    """One top-level entry of a spec document."""

    name: str
    actions: Any

    @property
    def is_setup(self) -> bool:
        return self.name == "setup"

    @property
    def is_teardown(self) -> bool:
        return self.name == "teardown"

    @property
    def is_case(self) -> bool:
        return self.name not in LIFECYCLE_BLOCKS


@dataclass(frozen=True)
class SpecDocument:
    """A parsed spec file: its path and its blocks in source order."""

    path: Path
    blocks: tuple[SpecBlock, ...] = ()

    @property
    def setup(self) -> SpecBlock | None:
        return next((b for b in self.blocks if b.is_setup), None)

    @property
    def teardown(self) -> SpecBlock | None:
        return next((b for b in self.blocks if b.is_teardown), None)

    @property
    def cases(self) -> list[SpecBlock]:
        return [b for b in self.blocks if b.is_case]


@dataclass
class BuildReport:
    """Result of a full build."""

    files_generated: int = 0
    tests_generated: int = 0
    output_path: Path | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "files": self.files_generated,
            "tests": self.tests_generated,
            "path": str(self.output_path) if self.output_path else "",
        }


@dataclass
class BuilderConfig:
    """Static builder configuration.

    ``skipped_tests`` maps ``Namespace::Module::Case``,
    ``Namespace::Module::*`` or ``Namespace::*`` to a reason.
    """

    exclusions: tuple[str, ...] = DEFAULT_EXCLUSIONS
    skipped_tests: dict[str, str] = field(default_factory=dict)
    reserved_words: frozenset[str] = RESERVED_WORDS
    template_dir: Path | None = None
    source_url: str = DEFAULT_SOURCE_URL
    extension: str = ".yml"
    package_markers: bool = True

"""Shared test fixtures for yamlunit."""

from pathlib import Path

import pytest

BASIC_SPEC = """\
---
setup:
  - do:
      indices.create:
        index: test_1
        body:
          settings: {}

---
"Basic search":
  - do:
      search:
        index: test_1
  - match: { hits.total.value: 0 }

---
"Search with size":
  - do:
      search:
        index: test_1
        size: 10
  - length: { hits.hits: 0 }
"""

TEARDOWN_SPEC = """\
---
teardown:
  - do:
      indices.delete:
        index: test_1

---
"Ping":
  - do:
      ping: {}
  - is_true: ''
"""


def write_spec(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def basic_spec() -> str:
    return BASIC_SPEC


@pytest.fixture
def spec_root(tmp_path: Path) -> Path:
    """A spec tree with two valid files in two namespaces."""
    root = tmp_path / "specs"
    write_spec(root, "search/10_basic.yml", BASIC_SPEC)
    write_spec(root, "cat.aliases/20_teardown.yml", TEARDOWN_SPEC)
    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def spec_writer():
    """Return a helper writing spec content below a root directory."""
    return write_spec

"""Text templates and placeholder substitution for emitted modules."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from yamlunit.errors import ConfigurationError
from yamlunit.models import EmptyObject

TEMPLATE_UNIT_TEST_CLASS = "unit-test-class"
TEMPLATE_UNIT_TEST_SKIPPED = "unit-test-skipped"
TEMPLATE_FUNCTION_TEST = "function-test"
TEMPLATE_FUNCTION_SKIPPED = "function-skipped"

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_DEPRECATED_INTERPOLATION = re.compile(r"\$\{([^}]+)\}")


@dataclass(frozen=True)
class Templates:
    unit_test_class: str
    unit_test_skipped: str
    function_test: str
    function_skipped: str


def _read_template(template_dir: Path, name: str) -> str:
    path = template_dir / name
    if not path.is_file():
        raise ConfigurationError(f"The template file {path} is not valid", path)
    return path.read_text(encoding="utf-8")


def load_templates(template_dir: Path | None = None) -> Templates:
    """Read the four module/function templates from ``template_dir``."""
    template_dir = template_dir or DEFAULT_TEMPLATE_DIR
    return Templates(
        unit_test_class=_read_template(template_dir, TEMPLATE_UNIT_TEST_CLASS),
        unit_test_skipped=_read_template(template_dir, TEMPLATE_UNIT_TEST_SKIPPED),
        function_test=_read_template(template_dir, TEMPLATE_FUNCTION_TEST),
        function_skipped=_read_template(template_dir, TEMPLATE_FUNCTION_SKIPPED),
    )


def is_numeric(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_NUMERIC.match(value))


def to_literal(value: object) -> str:
    """Text substituted for a placeholder value."""
    if isinstance(value, EmptyObject):
        return "{}"
    if isinstance(value, (list, tuple, dict)):
        return repr(value)
    if is_numeric(value):
        # numeric-looking strings are already their own literal
        return value.strip() if isinstance(value, str) else repr(value)
    if value is None:
        return ""
    return str(value)


def render(template: str, params: Mapping[str, object]) -> str:
    """Substitute every placeholder of ``params`` in ``template``.

    One pass, longest placeholder first, so ``:test`` never eats into
    ``:tests`` and substituted text is not scanned again.
    """
    if not params:
        return template
    values = {name: to_literal(value) for name, value in params.items()}
    pattern = re.compile(
        "|".join(re.escape(name) for name in sorted(values, key=len, reverse=True))
    )
    return pattern.sub(lambda m: values[m.group(0)], template)


def fix_string_interpolation(code: str) -> str:
    """Rewrite the deprecated ``${name}`` form to ``{$name}``."""
    return _DEPRECATED_INTERPOLATION.sub(r"{$\1}", code)

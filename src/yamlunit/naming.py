"""Identifier derivation: spec paths to namespaces, module and function names."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable
from pathlib import PurePosixPath

from yamlunit.models import RESERVED_WORDS

NAMESPACE_SEPARATOR = "."
MODULE_PREFIX = "_"
MODULE_SUFFIX = "Test"

_ORDERING_PREFIX = re.compile(r"^\d+[_-]+(?=.)")
_NON_IDENTIFIER = re.compile(r"[^a-zA-Z0-9_]")
_WHITESPACE = " \t\r\n\f\v"


def ucwords(text: str, delimiters: str = _WHITESPACE) -> str:
    """Uppercase the first character and every character after a delimiter.

    Unlike ``str.title`` the remaining characters keep their case.
    """
    chars = list(text)
    upper_next = True
    for i, ch in enumerate(chars):
        if upper_next:
            chars[i] = ch.upper()
        upper_next = ch in delimiters
    return "".join(chars)


def _posix(relative_path: str) -> str:
    return relative_path.replace("\\", "/").strip("/")


def derive_namespace(
    relative_path: str, reserved_words: Collection[str] = RESERVED_WORDS
) -> str:
    """Map a spec path (relative to the spec root) to a dotted namespace.

    ``cat.aliases/10_basic.yml`` -> ``Cat.Aliases``; a segment whose lowercase
    form is a reserved word gets a trailing underscore (``class`` -> ``Class_``).
    Files at the spec root have the empty namespace.
    """
    directory = str(PurePosixPath(_posix(relative_path)).parent)
    if directory in ("", "."):
        return ""
    # Title-case before collapsing separators, or underscores lose their
    # word boundary.
    titled = ucwords(directory, "._/-")
    collapsed = (
        titled.replace(".", NAMESPACE_SEPARATOR)
        .replace("/", NAMESPACE_SEPARATOR)
        .replace("_", "")
        .replace("-", "")
    )
    segments = []
    for segment in collapsed.split(NAMESPACE_SEPARATOR):
        if not segment:
            continue
        if segment.lower() in reserved_words:
            segment += "_"
        segments.append(segment)
    return NAMESPACE_SEPARATOR.join(segments)


def derive_module_name(relative_path: str) -> str:
    """Map a spec path to its test module (and class) name.

    ``10_basic-case.yml`` -> ``_BasicCaseTest``.
    """
    stem = PurePosixPath(_posix(relative_path)).stem
    stem = _ORDERING_PREFIX.sub("", stem)
    titled = ucwords(stem, "_-")
    name = _NON_IDENTIFIER.sub("", titled.replace("-", "").replace("_", ""))
    return MODULE_PREFIX + name + MODULE_SUFFIX


def namespace_parts(namespace: str) -> list[str]:
    return [p for p in namespace.split(NAMESPACE_SEPARATOR) if p]


def filter_function_name(name: str, already_assigned: Iterable[str] = ()) -> str:
    """Strip non-identifier characters and append ``_`` until unique."""
    taken = set(already_assigned)
    result = _NON_IDENTIFIER.sub("", ucwords(name))
    while result in taken:
        result += "_"
    return result

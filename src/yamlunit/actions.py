"""Action compiler: turns a sequence of YAML actions into test method code.

Each action is a single-key mapping such as ``{"do": {...}}`` or
``{"match": {"hits.total": 1}}``. The emitted statements call the helpers
of :class:`yamlunit.runtime.YamlTestCase`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from yamlunit.errors import ActionCompileError

INDENT = " " * 8

DO_OPTIONS = ("catch", "headers", "warnings", "allowed_warnings", "node_selector")
COMPARISONS = ("gt", "gte", "lt", "lte")
PATH_VALUE_ASSERTIONS = ("match", "length", "contains", "close_to", *COMPARISONS)


class ActionCompiler(Protocol):
    def compile(self, actions: Any) -> str: ...


def _single_entry(mapping: Any, what: str) -> tuple[str, Any]:
    if not isinstance(mapping, Mapping) or len(mapping) != 1:
        raise ActionCompileError(f"{what} must be a mapping with exactly one key")
    key, value = next(iter(mapping.items()))
    return str(key), value


class PythonActionCompiler:
    """Default action compiler emitting ``YamlTestCase`` helper calls."""

    def __init__(self, indent: str = INDENT) -> None:
        self.indent = indent

    def compile(self, actions: Any) -> str:
        if actions is None or isinstance(actions, Mapping) and not actions:
            actions = []
        if not isinstance(actions, Sequence) or isinstance(actions, str):
            raise ActionCompileError("actions must be a list")
        lines: list[str] = []
        for action in actions:
            lines.extend(self.compile_action(action))
        if not lines:
            lines.append("pass")
        return "\n".join(self.indent + line for line in lines)

    def compile_action(self, action: Any) -> list[str]:
        name, args = _single_entry(action, "action")
        if name == "do":
            return [self._do(args)]
        if name in ("skip", "requires"):
            return [f"self.{name}({args!r})"]
        if name in ("is_true", "is_false"):
            return [f"self.assert_{name}({str(args)!r})"]
        if name in ("set", "transform_and_set"):
            return [
                f"self.{name}({path!r}, {var!r})"
                for path, var in self._pairs(name, args)
            ]
        if name in PATH_VALUE_ASSERTIONS:
            return [
                f"self.assert_{name}({path!r}, {value!r})"
                for path, value in self._pairs(name, args)
            ]
        raise ActionCompileError(f"Unknown action '{name}'")

    def _pairs(self, name: str, args: Any) -> list[tuple[str, Any]]:
        if not isinstance(args, Mapping) or not args:
            raise ActionCompileError(f"'{name}' expects a non-empty mapping")
        return [(str(k), v) for k, v in args.items()]

    def _do(self, args: Any) -> str:
        if not isinstance(args, Mapping):
            raise ActionCompileError("'do' expects a mapping")
        options = {k: v for k, v in args.items() if k in DO_OPTIONS}
        calls = {k: v for k, v in args.items() if k not in DO_OPTIONS}
        api, params = _single_entry(calls, "'do'")
        if params is None:
            params = {}
        arguments = [repr(api), repr(params)]
        arguments.extend(f"{k}={v!r}" for k, v in options.items())
        return f"self.do({', '.join(arguments)})"

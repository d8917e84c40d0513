"""Skip policy: which cases, modules or namespaces are emitted as skipped stubs."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

WILDCARD = "*"
KEY_SEPARATOR = "::"


def case_key(namespace: str, module_name: str, case_name: str) -> str:
    return KEY_SEPARATOR.join((namespace, module_name, case_name))


def module_key(namespace: str, module_name: str) -> str:
    return KEY_SEPARATOR.join((namespace, module_name, WILDCARD))


def namespace_key(namespace: str) -> str:
    return KEY_SEPARATOR.join((namespace, WILDCARD))


class SkipPolicy:
    """Lookup over a static table of skip rules.

    The most specific rule wins: exact case, then every case of a module,
    then every module of a namespace.
    """

    def __init__(self, rules: Mapping[str, str] | None = None) -> None:
        self.rules = MappingProxyType(dict(rules or {}))

    def module_reason(self, namespace: str, module_name: str) -> str | None:
        """Reason that applies to a whole module, if any."""
        reason = self.rules.get(module_key(namespace, module_name))
        if reason is None:
            reason = self.rules.get(namespace_key(namespace))
        return reason

    def should_skip(
        self, namespace: str, module_name: str, case_name: str
    ) -> str | None:
        reason = self.rules.get(case_key(namespace, module_name, case_name))
        if reason is None:
            reason = self.module_reason(namespace, module_name)
        return reason

    def __len__(self) -> int:
        return len(self.rules)

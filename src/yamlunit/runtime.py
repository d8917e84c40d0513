"""Base class for generated YAML test modules.

Generated classes call the helpers below; a client must be configured
with :meth:`YamlTestCase.configure` before the tests can run, otherwise
every test is skipped.
"""

from __future__ import annotations

import base64
import re
import unittest
from collections.abc import Iterable, Mapping
from typing import Any

CATCH_STATUS = {
    "bad_request": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "missing": 404,
    "request_timeout": 408,
    "conflict": 409,
    "unavailable": 503,
}

_PATH_SPLIT = re.compile(r"(?<!\\)\.")
_INTERPOLATION = re.compile(r"\$\{(\w+)\}|\{\$(\w+)\}")


def parse_version(text: str) -> tuple[int, ...]:
    return tuple(int(p) for p in re.findall(r"\d+", text)[:3])


def version_in_range(version: tuple[int, ...], ranges: str) -> bool:
    """``ranges`` is ``all`` or comma separated ``low - high`` (either end open)."""
    for item in str(ranges).split(","):
        item = item.strip()
        if item == "all":
            return True
        low, _, high = item.partition("-")
        low_v = parse_version(low) if low.strip() else (0,)
        high_v = parse_version(high) if high.strip() else (999,)
        if low_v <= version <= high_v:
            return True
    return False


def _status_of(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    meta = getattr(exc, "meta", None)
    status = getattr(meta, "status", None)
    return status if isinstance(status, int) else None


class YamlTestCase(unittest.TestCase):
    client: Any = None
    server_version: tuple[int, ...] | None = None
    features: frozenset[str] = frozenset({"headers", "warnings", "allowed_warnings"})
    group = ""
    source = ""

    @classmethod
    def configure(
        cls, client: Any, version: str | None = None, features: Iterable[str] = ()
    ) -> None:
        YamlTestCase.client = client
        YamlTestCase.server_version = parse_version(version) if version else None
        YamlTestCase.features = YamlTestCase.features | frozenset(features)

    def setUp(self) -> None:
        super().setUp()
        self.stash: dict[str, Any] = {}
        self.last_response: Any = None
        if self.client is None:
            self.skipTest("No client configured for YAML tests")

    # ── stash ────────────────────────────────────────────────────────

    def resolve(self, value: Any) -> Any:
        """Replace ``$name``, ``${name}`` and ``{$name}`` with stashed values."""
        if isinstance(value, str):
            if value.startswith("$") and value[1:] in self.stash:
                return self.stash[value[1:]]
            return _INTERPOLATION.sub(
                lambda m: str(self.stash.get(m.group(1) or m.group(2), m.group(0))),
                value,
            )
        if isinstance(value, Mapping):
            return {self.resolve(k): self.resolve(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self.resolve(v) for v in value]
        return value

    def get(self, path: str) -> Any:
        """Walk a dotted path through the last response (``\\.`` escapes a dot)."""
        value = self.last_response
        if path in ("", "$body"):
            return value
        for part in _PATH_SPLIT.split(path):
            part = self.resolve(part.replace("\\.", "."))
            if isinstance(value, list):
                value = value[int(part)]
            elif isinstance(value, Mapping):
                if part not in value:
                    return None
                value = value[part]
            else:
                return None
        return value

    def set(self, path: str, name: str) -> None:
        self.stash[name] = self.get(path)

    def transform_and_set(self, name: str, expression: str) -> None:
        match = re.match(r"#base64EncodeCredentials\((\w+),(\w+)\)", expression)
        if match is None:
            raise ValueError(f"Unsupported transformation: {expression}")
        user, secret = (self.get(match.group(1)), self.get(match.group(2)))
        self.stash[name] = base64.b64encode(f"{user}:{secret}".encode()).decode()

    # ── actions ──────────────────────────────────────────────────────

    def do(
        self,
        api: str,
        params: Mapping[str, Any],
        catch: str | None = None,
        headers: Mapping[str, str] | None = None,
        warnings: list[str] | None = None,
        allowed_warnings: list[str] | None = None,
        node_selector: Any = None,
    ) -> None:
        target = self.client
        if headers and hasattr(target, "options"):
            target = target.options(headers=self.resolve(dict(headers)))
        method = target
        for part in api.split("."):
            method = getattr(method, part)
        try:
            response = method(**self.resolve(dict(params)))
        except Exception as exc:
            if catch is None:
                raise
            self._check_catch(catch, exc)
            return
        if catch is not None:
            self.fail(f"Expected '{catch}' error from {api}")
        self.last_response = getattr(response, "body", response)

    def _check_catch(self, catch: str, exc: Exception) -> None:
        if catch in CATCH_STATUS:
            self.assertEqual(_status_of(exc), CATCH_STATUS[catch], str(exc))
        elif catch.startswith("/") and catch.endswith("/"):
            self.assertRegex(str(exc), re.compile(catch[1:-1].strip(), re.X))
        elif catch != "param":
            self.assertIsNotNone(_status_of(exc), str(exc))

    def skip(self, spec: Mapping[str, Any]) -> None:
        if spec.get("awaits_fix"):
            self.skipTest(str(spec.get("awaits_fix")))
        missing = self._missing_features(spec.get("features", ()))
        if missing:
            self.skipTest(f"Unsupported features: {', '.join(missing)}")
        version = spec.get("version")
        if version and self.server_version and version_in_range(self.server_version, version):
            self.skipTest(str(spec.get("reason", f"Skipped for version {version}")))

    def requires(self, spec: Mapping[str, Any]) -> None:
        missing = self._missing_features(spec.get("test_runner_features", ()))
        if missing:
            self.skipTest(f"Unsupported features: {', '.join(missing)}")

    def _missing_features(self, features: Any) -> list[str]:
        if isinstance(features, str):
            features = [features]
        return [f for f in features if f not in self.features]

    # ── assertions ───────────────────────────────────────────────────

    def assert_match(self, path: str, expected: Any) -> None:
        actual = self.get(path)
        expected = self.resolve(expected)
        pattern = expected.strip() if isinstance(expected, str) else ""
        if len(pattern) > 1 and pattern.startswith("/") and pattern.endswith("/"):
            self.assertRegex(str(actual), re.compile(pattern[1:-1], re.X))
        else:
            self.assertEqual(actual, expected, f"match {path}")

    def assert_is_true(self, path: str) -> None:
        value = self.get(path)
        self.assertNotIn(value, (None, False, "", 0, "false"), f"is_true {path}")

    def assert_is_false(self, path: str) -> None:
        value = self.get(path)
        self.assertIn(value, (None, False, "", 0, "false"), f"is_false {path}")

    def assert_length(self, path: str, expected: int) -> None:
        self.assertEqual(len(self.get(path)), self.resolve(expected), f"length {path}")

    def assert_contains(self, path: str, expected: Any) -> None:
        self.assertIn(self.resolve(expected), self.get(path), f"contains {path}")

    def assert_close_to(self, path: str, expected: Mapping[str, Any]) -> None:
        self.assertAlmostEqual(
            self.get(path), expected["value"], delta=expected["error"], msg=f"close_to {path}"
        )

    def assert_gt(self, path: str, expected: Any) -> None:
        self.assertGreater(self.get(path), self.resolve(expected))

    def assert_gte(self, path: str, expected: Any) -> None:
        self.assertGreaterEqual(self.get(path), self.resolve(expected))

    def assert_lt(self, path: str, expected: Any) -> None:
        self.assertLess(self.get(path), self.resolve(expected))

    def assert_lte(self, path: str, expected: Any) -> None:
        self.assertLessEqual(self.get(path), self.resolve(expected))

"""Test module generation from parsed YAML spec documents."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path

from yamlunit.actions import ActionCompiler, PythonActionCompiler
from yamlunit.errors import ActionCompileError, GenerationError
from yamlunit.models import DEFAULT_SOURCE_URL, RESERVED_WORDS, SpecBlock, SpecDocument
from yamlunit.naming import (
    MODULE_SUFFIX,
    NAMESPACE_SEPARATOR,
    derive_module_name,
    derive_namespace,
    filter_function_name,
    namespace_parts,
)
from yamlunit.output import ensure_module_dir
from yamlunit.skip import SkipPolicy
from yamlunit.templates import Templates, fix_string_interpolation, render

log = logging.getLogger("yamlunit.generator")

OUTPUT_EXTENSION = ".py"


@dataclass
class RenderedModule:
    """Source code for one spec document, before it is written."""

    namespace: str
    module_name: str
    code: str
    tests: int
    skipped: bool = False


@dataclass
class EmittedModule:
    """A module written to disk and validated."""

    path: Path
    namespace: str
    module_name: str
    tests: int
    skipped: bool = False


def validate_code(code: str, path: Path) -> None:
    """Compile ``code`` without running it; raise GenerationError if invalid."""
    try:
        compile(code, str(path), "exec")
    except (SyntaxError, ValueError) as exc:
        raise GenerationError(
            f"The Python code generated in {path} is not valid: {exc}", path
        ) from exc


class ModuleEmitter:
    """Renders, writes and self-validates one test module per spec document."""

    def __init__(
        self,
        templates: Templates,
        output_root: Path,
        suite: str,
        minor_version: str,
        skip_policy: SkipPolicy | None = None,
        action_compiler: ActionCompiler | None = None,
        source_url: str = DEFAULT_SOURCE_URL,
        reserved_words: Collection[str] = RESERVED_WORDS,
        package_markers: bool = True,
    ) -> None:
        self.templates = templates
        self.output_root = output_root
        self.suite = suite
        self.minor_version = minor_version
        self.skip_policy = skip_policy or SkipPolicy()
        self.action_compiler = action_compiler or PythonActionCompiler()
        self.source_url = source_url
        self.reserved_words = reserved_words
        self.package_markers = package_markers
        self._written: set[Path] = set()

    def full_namespace(self, namespace: str) -> str:
        return NAMESPACE_SEPARATOR.join(p for p in (self.suite, namespace) if p)

    def source_link(self, relative_path: str) -> str:
        return self.source_url.format(version=self.minor_version, path=relative_path)

    def _compile_actions(self, document: SpecDocument, block: SpecBlock) -> str:
        try:
            return self.action_compiler.compile(block.actions)
        except ActionCompileError as exc:
            raise ActionCompileError(
                f"Cannot compile '{block.name}' in {document.path}: {exc}",
                document.path,
            ) from exc

    def render_module(
        self,
        document: SpecDocument,
        relative_path: str,
        module_name: str | None = None,
    ) -> RenderedModule:
        namespace = derive_namespace(relative_path, self.reserved_words)
        module_name = module_name or derive_module_name(relative_path)
        module_reason = self.skip_policy.module_reason(namespace, module_name)

        setup = ""
        teardown = ""
        functions: list[str] = []
        case_reasons: list[str | None] = []
        assigned: list[str] = []
        for block in document.blocks:
            if block.is_setup:
                setup = self._compile_actions(document, block)
                continue
            if block.is_teardown:
                teardown = self._compile_actions(document, block)
                continue

            function_name = filter_function_name(block.name, assigned)
            assigned.append(function_name)
            reason = self.skip_policy.should_skip(namespace, module_name, function_name)
            case_reasons.append(reason)
            if reason is not None:
                functions.append(render(
                    self.templates.function_skipped,
                    {":name": function_name, ":skipped_msg": repr(reason)},
                ))
            else:
                functions.append(render(
                    self.templates.function_test,
                    {":name": function_name, ":test": self._compile_actions(document, block)},
                ))

        all_skipped = bool(case_reasons) and all(r is not None for r in case_reasons)
        params: dict[str, object] = {
            ":namespace": self.full_namespace(namespace),
            ":test-name": module_name,
            ":tests": "".join(functions),
            ":yamlfile": self.source_link(relative_path),
            ":group": repr(self.suite.lower()),
        }
        if module_reason is not None or all_skipped:
            params[":skipped_msg"] = repr(module_reason or case_reasons[0])
            code = render(self.templates.unit_test_skipped, params)
            skipped = True
        else:
            params[":setup"] = setup
            params[":teardown"] = teardown
            code = render(self.templates.unit_test_class, params)
            skipped = False

        return RenderedModule(
            namespace=namespace,
            module_name=module_name,
            code=fix_string_interpolation(code),
            tests=len(case_reasons),
            skipped=skipped,
        )

    def _unique_module_name(self, directory: Path, module_name: str) -> str:
        while (directory / (module_name + OUTPUT_EXTENSION)) in self._written:
            module_name = module_name[: -len(MODULE_SUFFIX)] + "_" + MODULE_SUFFIX
        return module_name

    def emit(self, document: SpecDocument, relative_path: str) -> EmittedModule:
        """Render ``document``, write it below the output root and validate it."""
        namespace = derive_namespace(relative_path, self.reserved_words)
        directory = ensure_module_dir(
            self.output_root, namespace_parts(namespace), self.package_markers
        )
        module_name = self._unique_module_name(
            directory, derive_module_name(relative_path)
        )
        rendered = self.render_module(document, relative_path, module_name)

        path = directory / (module_name + OUTPUT_EXTENSION)
        path.write_text(rendered.code, encoding="utf-8")
        self._written.add(path)
        validate_code(rendered.code, path)
        log.info("Generated %s (%d tests)", path, rendered.tests)

        return EmittedModule(
            path=path,
            namespace=rendered.namespace,
            module_name=module_name,
            tests=rendered.tests,
            skipped=rendered.skipped,
        )

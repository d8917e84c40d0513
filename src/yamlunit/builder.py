"""Build orchestration: load every spec, emit every module, report counts."""

from __future__ import annotations

import logging
from pathlib import Path

from yamlunit.actions import ActionCompiler
from yamlunit.errors import ConfigurationError, NotFoundError
from yamlunit.generator import ModuleEmitter
from yamlunit.loader import load_specs
from yamlunit.models import BuilderConfig, BuildReport
from yamlunit.naming import ucwords
from yamlunit.output import ensure_module_dir, prepare_output, write_collection_config
from yamlunit.skip import SkipPolicy
from yamlunit.templates import load_templates

log = logging.getLogger("yamlunit.builder")


def minor_version(version: str) -> str:
    """``8.12.1`` -> ``8.12``."""
    parts = version.strip().split(".")
    if len(parts) < 2 or not all(p.isdigit() for p in parts[:2]):
        raise ConfigurationError(
            f"Invalid version '{version}': expected major.minor.patch"
        )
    return f"{parts[0]}.{parts[1]}"


def suite_name(stack: str) -> str:
    """``xpack-free`` -> ``XpackFree``."""
    name = ucwords(stack.strip(), "-").replace("-", "")
    if not name:
        raise ConfigurationError("The test suite name must not be empty")
    return name


class TestBuilder:
    """Compiles a directory of YAML specs into a tree of Python test modules.

    Construction checks the spec root, loads the templates, clears the
    output directory and parses every spec, in that order. Any failure
    aborts before a single module is written.
    """

    __test__ = False

    def __init__(
        self,
        spec_dir: Path,
        output_dir: Path,
        version: str,
        suite: str,
        config: BuilderConfig | None = None,
        action_compiler: ActionCompiler | None = None,
    ) -> None:
        self.config = config or BuilderConfig()
        spec_dir = Path(spec_dir).resolve()
        if not spec_dir.is_dir():
            raise NotFoundError(
                f"The directory {spec_dir} specified does not exist", spec_dir
            )
        self.spec_dir = spec_dir
        self.version = version
        self.minor_version = minor_version(version)
        self.suite = suite_name(suite)
        templates = load_templates(self.config.template_dir)

        output_dir = Path(output_dir)
        if spec_dir.is_relative_to(output_dir.resolve()):
            raise ConfigurationError(
                f"The spec directory {spec_dir} is inside the output directory {output_dir}",
                spec_dir,
            )
        prepare_output(output_dir)
        self.output_dir = output_dir
        self.output_path = output_dir / self.suite

        self.specs = load_specs(spec_dir, self.config.exclusions, self.config.extension)
        log.info("Loaded %d spec files from %s", len(self.specs), spec_dir)

        self.emitter = ModuleEmitter(
            templates=templates,
            output_root=self.output_path,
            suite=self.suite,
            minor_version=self.minor_version,
            skip_policy=SkipPolicy(self.config.skipped_tests),
            action_compiler=action_compiler,
            source_url=self.config.source_url,
            reserved_words=self.config.reserved_words,
            package_markers=self.config.package_markers,
        )

    def relative_path(self, path: Path) -> str:
        return path.relative_to(self.spec_dir).as_posix()

    def build(self) -> BuildReport:
        """Emit one module per spec, in discovery order."""
        report = BuildReport(output_path=self.output_path)
        write_collection_config(self.output_dir)
        ensure_module_dir(self.output_path, [], self.config.package_markers)
        for path, document in self.specs.items():
            emitted = self.emitter.emit(document, self.relative_path(path))
            report.files_generated += 1
            report.tests_generated += emitted.tests
        log.info(
            "Generated %d test files and %d tests in %s",
            report.files_generated,
            report.tests_generated,
            report.output_path,
        )
        return report


def build_tests(
    spec_dir: Path,
    output_dir: Path,
    version: str,
    suite: str,
    config: BuilderConfig | None = None,
) -> BuildReport:
    return TestBuilder(spec_dir, output_dir, version, suite, config).build()

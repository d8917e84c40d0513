"""Click CLI entry point for yamlunit."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from yamlunit import __version__
from yamlunit.config import load_config, save_config
from yamlunit.errors import YamlUnitError
from yamlunit.models import BuilderConfig


def _load(config_path: str | None) -> BuilderConfig:
    if config_path is None:
        return BuilderConfig()
    return load_config(Path(config_path))


def _banner(text: str) -> None:
    bar = "*" * (len(text) + 6)
    click.echo(bar)
    click.echo(f"** {text} **")
    click.echo(bar)


@click.group()
@click.version_option(version=__version__, prog_name="yamlunit")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """yamlunit: compile YAML REST test specs into Python test modules."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("spec_dir", type=click.Path(file_okay=False))
@click.option("--output", "output_dir", type=click.Path(file_okay=False),
              default="tests/yaml", show_default=True, help="Output root")
@click.option("--version", "version", envvar="STACK_VERSION", required=True,
              help="Stack version (major.minor.patch) [env: STACK_VERSION]")
@click.option("--suite", envvar="TEST_SUITE", required=True,
              help="Test suite name [env: TEST_SUITE]")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              default=None, help="JSON builder configuration")
@click.option("--templates", "template_dir", type=click.Path(exists=True, file_okay=False),
              default=None, help="Directory with custom templates")
@click.pass_context
def build(
    ctx: click.Context,
    spec_dir: str,
    output_dir: str,
    version: str,
    suite: str,
    config_path: str | None,
    template_dir: str | None,
) -> None:
    """Generate Python test modules from the YAML specs in SPEC_DIR."""
    from yamlunit.builder import TestBuilder

    _banner("Building the Python tests")
    click.echo(f"** Building YAML tests for {suite.upper()} suite")
    click.echo(f"** Using stack version {version}")

    try:
        config = _load(config_path)
        if template_dir:
            config.template_dir = Path(template_dir)
        report = TestBuilder(Path(spec_dir), Path(output_dir), version, suite, config).build()
    except YamlUnitError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
        return

    click.echo(
        f"Generated {report.files_generated} test files "
        f"and {report.tests_generated} tests."
    )
    click.echo(f"Files saved in {Path(report.output_path).resolve()}")


@cli.command("list")
@click.argument("spec_dir", type=click.Path(file_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              default=None, help="JSON builder configuration")
@click.pass_context
def list_cmd(ctx: click.Context, spec_dir: str, config_path: str | None) -> None:
    """List the specs in SPEC_DIR with their derived module names."""
    from yamlunit.loader import load_specs
    from yamlunit.naming import derive_module_name, derive_namespace

    root = Path(spec_dir).resolve()
    try:
        config = _load(config_path)
        specs = load_specs(root, config.exclusions, config.extension)
    except YamlUnitError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)
        return

    if not specs:
        click.echo("No spec files found.")
        return

    total = 0
    for path, document in specs.items():
        relative = path.relative_to(root).as_posix()
        namespace = derive_namespace(relative, config.reserved_words)
        module = derive_module_name(relative)
        cases = len(document.cases)
        total += cases
        click.echo(f"  {relative} -> {namespace or '.'}:{module} ({cases} tests)")
    click.echo(f"\n{len(specs)} spec file(s), {total} test(s).")


@cli.command("init-config")
@click.argument("path", type=click.Path(dir_okay=False), default="yamlunit.json")
def init_config(path: str) -> None:
    """Write the default builder configuration to PATH."""
    target = Path(path)
    if target.exists():
        click.echo(f"Warning: {target} already exists. Skipping.")
        return
    save_config(BuilderConfig(), target)
    click.echo(f"Created: {target}")

"""CLI entry point for openapi-compat."""

import json
import logging
from pathlib import Path

import click

from openapi_compat.config import DEFAULT_ROOT, DEFAULT_VERSIONS, ROOT_ENV, VERSIONS_ENV, VersionLayout, parse_versions
from openapi_compat.diff.comparator import compare
from openapi_compat.errors import ContractError
from openapi_compat.orchestrator.chain import validate_chain
from openapi_compat.parser.openapi import load
from openapi_compat.report.chain import render_chain_summary, render_transition
from openapi_compat.report.generator import Report, generate

logger = logging.getLogger(__name__)


class CompatGroup(click.Group):
    """Command group whose usage errors exit with status 1 like every other failure."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _compare_files(old_path: Path, new_path: Path, old_label: str, new_label: str) -> Report:
    """Load both contracts and build the report, converting input errors for click."""
    logger.debug("Comparing %s -> %s", old_path, new_path)
    try:
        old = load(old_path)
        new = load(new_path)
    except ContractError as e:
        raise click.ClickException(str(e)) from e
    return generate(compare(old, new), old_label, new_label)


def _write_report(report: Report, path: Path) -> Path:
    try:
        return report.write(path)
    except OSError as e:
        raise click.ClickException(f"Could not write report {path}: {e}") from e


def _emit(report: Report, fmt: str) -> None:
    if fmt == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        click.echo(report.render(), nl=False)


@click.group(cls=CompatGroup, invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Log loader and orchestrator progress to stderr.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """OpenAPI Compat: detect breaking changes between API contract versions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command("help")
@click.pass_context
def help_command(ctx: click.Context):
    """Show usage information."""
    click.echo(ctx.parent.get_help())


@main.command("compare")
@click.argument("old_spec", type=click.Path(path_type=Path))
@click.argument("new_spec", type=click.Path(path_type=Path))
@click.option("--format", "fmt", default="text", type=click.Choice(["text", "json"]), help="Report format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Also write the text report to this file.")
@click.pass_context
def compare_command(ctx: click.Context, old_spec: Path, new_spec: Path, fmt: str, output: Path | None):
    """Compare two contract files; exit 1 on critical breaking changes."""
    report = _compare_files(old_spec, new_spec, str(old_spec), str(new_spec))
    _emit(report, fmt)

    if output is not None:
        _write_report(report, output)
        click.echo(f"Report saved to: {output}", err=True)

    ctx.exit(report.exit_code())


@main.command("validate-all")
@click.option("--root", default=str(DEFAULT_ROOT), envvar=ROOT_ENV, type=click.Path(path_type=Path), show_default=True, help="Directory holding <version>/current/*.yaml.")
@click.option("--versions", default=",".join(DEFAULT_VERSIONS), envvar=VERSIONS_ENV, show_default=True, help="Comma-separated, ordered version chain.")
@click.option("--workers", default=1, type=click.IntRange(min=1), show_default=True, help="Transitions to compare concurrently.")
@click.pass_context
def validate_all(ctx: click.Context, root: Path, versions: str, workers: int):
    """Check every adjacent version transition; exit 1 if any has critical changes."""
    layout = VersionLayout(root=root, versions=parse_versions(versions))

    click.echo("Validating all API versions...")
    chain = validate_chain(layout.versions, layout.resolve, max_workers=workers)

    for transition in chain.transitions:
        click.echo(f"  {render_transition(transition)}")

    click.echo()
    click.echo(render_chain_summary(chain), nl=False)
    ctx.exit(chain.exit_code())


@main.command("migration-report")
@click.argument("from_version")
@click.argument("to_version")
@click.option("--root", default=str(DEFAULT_ROOT), envvar=ROOT_ENV, type=click.Path(path_type=Path), show_default=True, help="Directory holding <version>/current/*.yaml.")
def migration_report(from_version: str, to_version: str, root: Path):
    """Write api-migration-report-<from>-to-<to>.md and print it."""
    click.echo(f"Generating migration report: {from_version} -> {to_version}")
    layout = VersionLayout(root=root)
    try:
        from_path = layout.resolve(from_version)
        to_path = layout.resolve(to_version)
    except ContractError as e:
        raise click.ClickException(
            f"Could not find API specs for versions {from_version} or {to_version}: {e}"
        ) from e

    report = _compare_files(from_path, to_path, from_version, to_version)

    report_file = _write_report(report, Path(f"api-migration-report-{from_version}-to-{to_version}.md"))
    click.echo(report.render(), nl=False)
    click.echo(f"\nReport saved to: {report_file}")

"""Command-line interface for msgidrec.

Provides CLI commands for message ID scans over a project JSON file.
"""

import importlib.metadata
import json
import sys

import click

from msgidrec.normalize.values import format_id_hex, parse_id_literal

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("msgidrec")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


def _id_option(ctx: click.Context, param: click.Parameter, value: str | None) -> int | None:
    """Parse a hexadecimal or decimal ID option value."""
    if value is None:
        return None
    parsed = parse_id_literal(value)
    if parsed is None:
        raise click.BadParameter(f"{value!r} is not a hexadecimal or decimal ID")
    return parsed


def _fail(error: Exception, verbose: bool) -> None:
    click.secho(f"✗ Error: {error}", fg="red", err=True)
    if verbose:
        import traceback

        click.echo(traceback.format_exc(), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="msgidrec")
def cli() -> None:
    """Message ID reconciliation for command and telemetry tables.

    Use 'msgidrec COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("project", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-structures", is_flag=True, help="Exclude structure table IDs")
@click.option("--no-commands", is_flag=True, help="Exclude command table IDs")
@click.option("--no-others", is_flag=True, help="Exclude IDs of other table types")
@click.option("--no-groups", is_flag=True, help="Exclude group IDs")
@click.option(
    "--live",
    is_flag=True,
    help="Use the open scheduler sessions instead of persisted telemetry IDs",
)
@click.option(
    "--overwrite-self",
    is_flag=True,
    help="Ignore the active scheduler session (with --live)",
)
@click.option("--duplicates", "-d", is_flag=True, help="Report duplicate IDs")
@click.option("--json", "as_json", is_flag=True, help="Write JSON instead of text")
@click.option("--log", "log_path", type=click.Path(dir_okay=False), help="Append audit events")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def scan(
    project: str,
    no_structures: bool,
    no_commands: bool,
    no_others: bool,
    no_groups: bool,
    live: bool,
    overwrite_self: bool,
    duplicates: bool,
    as_json: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Scan PROJECT for message IDs in use.

    Prints every reserved or declared ID, or with --duplicates every ID
    declared by more than one owner.

    Examples
    --------
        msgidrec scan project.json
        msgidrec scan project.json --duplicates
        msgidrec scan project.json --live --overwrite-self --json
    """
    from msgidrec import ScanConfig, load_project, scan_project

    try:
        snapshot = load_project(project)
        config = ScanConfig(
            include_structures=not no_structures,
            include_commands=not no_commands,
            include_others=not no_others,
            include_groups=not no_groups,
            use_persisted_telemetry=not live,
            overwrite_self=overwrite_self,
            track_duplicates=duplicates,
            protection_marker=snapshot.protection_marker,
        )

        if verbose:
            click.echo(f"Scanning: {project}", err=True)
            if live and snapshot.scheduler is None:
                click.echo("  No scheduler sessions in project; telemetry skipped", err=True)

        report = scan_project(snapshot, config, use_live_sessions=live, log_path=log_path)

    except Exception as e:
        _fail(e, verbose)
        return

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif duplicates:
        for entry in report.duplicates:
            click.echo(f"{entry.id_display}\t" + "; ".join(str(o) for o in entry.owners))
        if verbose:
            click.echo(f"{len(report.duplicates)} duplicate ID(s)", err=True)
    else:
        for value in sorted(report.in_use):
            click.echo(format_id_hex(value))
        if verbose:
            click.echo(f"{len(report.in_use)} ID(s) in use", err=True)


@cli.command()
@click.argument("project", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--sort",
    "sort_order",
    type=click.Choice(["owner", "name"]),
    default="owner",
    help="Sort by owner or by ID name (default: owner)",
)
@click.option(
    "--show-protection",
    is_flag=True,
    help="Keep the protection marker on displayed IDs",
)
@click.option("--json", "as_json", is_flag=True, help="Write JSON instead of text")
@click.option("--log", "log_path", type=click.Path(dir_okay=False), help="Append audit events")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def names(
    project: str,
    sort_order: str,
    show_protection: bool,
    as_json: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """List message ID names with their IDs and owners.

    Output is tab-separated: owner, name, id. A blank name or id means the
    owner declares more IDs than names or vice versa.

    Examples
    --------
        msgidrec names project.json
        msgidrec names project.json --sort name --show-protection
    """
    from msgidrec import list_project_names

    try:
        records = list_project_names(
            project,
            sort_order,
            hide_protection_marker=not show_protection,
            log_path=log_path,
        )
    except Exception as e:
        _fail(e, verbose)
        return

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
    else:
        for record in records:
            click.echo(f"{record.owner}\t{record.name}\t{record.id}")


@cli.command("next-id")
@click.argument("project", type=click.Path(exists=True, dir_okay=False))
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, help="IDs to allocate")
@click.option(
    "--start",
    callback=_id_option,
    default=None,
    help="First candidate ID, hexadecimal or decimal (default: 0)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def next_id(project: str, count: int, start: int | None, verbose: bool) -> None:
    """Print IDs free for allocation in PROJECT.

    Examples
    --------
        msgidrec next-id project.json
        msgidrec next-id project.json -n 4 --start 0x1800
    """
    from msgidrec import allocate_ids

    try:
        ids = allocate_ids(project, count, start=start or 0)
    except Exception as e:
        _fail(e, verbose)
        return

    for value in ids:
        click.echo(format_id_hex(value))


if __name__ == "__main__":
    cli()

"""CLI for devhud.

Usage:
    devhud alerts view.json --display
    devhud alerts view.json --query "level=error&term=docker"
    devhud counts view.json
    devhud filter parse "level=warn&source=build"
    devhud filter set "level=warn" --term docker
    devhud serve view.json --port 10350
"""

from pathlib import Path

import click

from devhud.alerts import Alert, compute_alerts, compute_display_alerts
from devhud.config import HudConfig
from devhud.filters import (
    FilterLevel,
    FilterSet,
    FilterSource,
    create_log_search,
    filter_alerts,
    level_label,
    parse,
    source_counts,
    tag_alerts,
)
from devhud.logging import configure_logging, get_logger
from devhud.resources import SnapshotLoadError, View, load_view

log = get_logger(__name__)

SOURCE_MENU_LABELS = {
    FilterSource.ALL: "All Sources",
    FilterSource.BUILD: "Build Only",
    FilterSource.RUNTIME: "Runtime Only",
}


def read_view(path: Path) -> View:
    """Load a view file or exit with the load error."""
    try:
        view = load_view(path)
    except SnapshotLoadError as e:
        log.error("Failed to load view", path=str(path), error=str(e))
        raise click.ClickException(str(e)) from e
    log.debug("Loaded view", path=str(path), resources=len(view.resources))
    return view


def format_alert(alert: Alert) -> str:
    header = f"[{alert.kind.value}] {alert.resource_name}: {alert.title_text} ({alert.timestamp})"
    if not alert.message:
        return header
    body = "\n".join(f"    {line}" for line in alert.message.splitlines())
    return f"{header}\n{body}"


def format_filter_set(filter_set: FilterSet) -> str:
    lines = [
        f"level:  {filter_set.level.name.lower()}",
        f"source: {filter_set.source.name.lower()}",
        f"term:   {filter_set.term.source_text!r}",
    ]
    if filter_set.term.invalid:
        lines.append("WARNING: term is not a valid pattern and filters nothing")
    return "\n".join(lines)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=Path.home() / ".devhud" / "config.yaml",
    help="Config file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool) -> None:
    """Dashboard alerts and log filters."""
    config = HudConfig.from_file(config_path)
    # Verbose also lets werkzeug request logs through
    configure_logging(
        "devhud-cli",
        "DEBUG" if verbose else config.log_level,
        logger_levels={} if verbose else None,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


# --- Alert Commands ---


@main.command("alerts")
@click.argument("view_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--display", is_flag=True, help="Show the display list instead of runtime alerts")
@click.option("--query", "query", default=None, help="Filter the display list, e.g. level=error")
def alerts_cmd(view_path: Path, display: bool, query: str | None) -> None:
    """Print alerts for every resource in a view file."""
    view = read_view(view_path)

    if query is not None:
        filter_set = parse(query)
        if filter_set.term.invalid:
            click.echo(f"WARNING: invalid filter term {filter_set.term.source_text!r}", err=True)
        tagged = filter_alerts(filter_set, tag_alerts(compute_display_alerts(view.resources)))
        alerts = [t.alert for t in tagged]
    elif display:
        alerts = compute_display_alerts(view.resources)
    else:
        alerts = [a for r in view.resources for a in compute_alerts(r)]

    if not alerts:
        click.echo("No alerts found.")
        return

    for alert in alerts:
        click.echo(format_alert(alert))


@main.command("counts")
@click.argument("view_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def counts_cmd(view_path: Path) -> None:
    """Print level button labels and source badge counts."""
    view = read_view(view_path)
    tagged = tag_alerts(compute_display_alerts(view.resources))

    click.echo(level_label(tagged, FilterLevel.ALL))
    for level in (FilterLevel.WARN, FilterLevel.ERROR):
        click.echo(level_label(tagged, level))
        for source, count in (source_counts(tagged, level) or {}).items():
            click.echo(f"  {SOURCE_MENU_LABELS[source]} ({count})")


# --- Filter Commands ---


@main.group("filter")
def filter_group() -> None:
    """Log filter query strings."""
    pass


@filter_group.command("parse")
@click.argument("query")
def filter_parse(query: str) -> None:
    """Show the filter set a query string describes."""
    click.echo(format_filter_set(parse(query)))


@filter_group.command("set")
@click.argument("query", default="")
@click.option(
    "--level",
    type=click.Choice([lvl.value for lvl in FilterLevel]),
    default=None,
    help="New level ('' for all)",
)
@click.option(
    "--source",
    type=click.Choice([src.value for src in FilterSource]),
    default=None,
    help="New source ('' for all)",
)
@click.option("--term", default=None, help="New term ('' to clear)")
def filter_set_cmd(
    query: str, level: str | None, source: str | None, term: str | None
) -> None:
    """Apply filter edits to a query string and print the result."""
    click.echo(
        create_log_search(
            query,
            level=FilterLevel(level) if level is not None else None,
            source=FilterSource(source) if source is not None else None,
            term=term,
        )
    )


# --- API ---


@main.command("serve")
@click.argument("view_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", type=int, default=None, help="Port to listen on")
@click.pass_context
def serve(ctx: click.Context, view_path: Path, host: str | None, port: int | None) -> None:
    """Serve filtered alerts for a view file over HTTP."""
    from devhud.api import create_app, run_app

    config: HudConfig = ctx.obj["config"]
    app = create_app(lambda: load_view(view_path))
    run_app(app, host=host or config.api_host, port=port or config.api_port)


if __name__ == "__main__":
    main()

"""CLI entry point for award-pacing.

Commands:
- show: Print the award list with summary, insights or one award's detail
- export: Write a JSON, CSV or Parquet snapshot
- report: Write a text or JSON pacing report
- sync: Store a snapshot in Postgres
- trend-report: Compare the two newest stored snapshots
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from award_pacing import __version__
from award_pacing.config import Config, load_config
from award_pacing.logging import setup_logging
from award_pacing.metrics.summary import calculate_summary_metrics
from award_pacing.models import AwardItem, Record
from award_pacing.pacing import (
    SortMode,
    apply_filter,
    build_items,
    clamp_window,
    normalize_filter_mode,
    normalize_sort_mode,
    sort_items,
)
from award_pacing.pacing.record_filters import RecordFilterChain, RecordFilters
from award_pacing.report.export import export_snapshot
from award_pacing.report.views import (
    build_detail,
    build_insights,
    build_items_table,
    build_summary_panel,
)
from award_pacing.report.writer import is_stdout_target, write_report, write_trend_report
from award_pacing.storage.records import load_records
from award_pacing.storage.snapshots import SnapshotStore

console = Console()


@dataclass
class Pipeline:
    """Records and award items built for one CLI invocation."""

    records: list[Record]
    items: list[AwardItem]
    window: int
    now: datetime
    filter_description: str


@click.group()
@click.version_option(version=__version__, prog_name="award-pacing")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config.yaml file",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Scholarship award pacing console.

    Classifies each award's disbursement pace, next check-in and risk, then
    prints, exports, reports or stores the result.

    \b
    Quick Start:
        1. Review awards: award-pacing show --data data/disbursements.json
        2. Export a snapshot: award-pacing export pacing.csv
        3. Store and compare: award-pacing sync && award-pacing trend-report -
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)

    try:
        ctx.obj["config"] = load_config(config_path) if config_path else Config()
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] Invalid config: {e}")
        raise click.Abort() from e


def pipeline_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that builds award items."""
    options = [
        click.option(
            "--data",
            "data_path",
            type=click.Path(path_type=Path),
            default=None,
            help="Path to disbursement JSON (default from config)",
        ),
        click.option(
            "--source",
            type=click.Choice(["file", "db"], case_sensitive=False),
            default=None,
            help="Load records from the JSON file or the newest stored snapshot",
        ),
        click.option("--db-url", default=None, help="Postgres connection string"),
        click.option(
            "--checkin-window",
            type=int,
            default=None,
            help="Days before a check-in counts as due soon",
        ),
        click.option("--owner", default=None, help="Comma-separated owner(s) to keep"),
        click.option("--cohort", default=None, help="Comma-separated cohort(s) to keep"),
        click.option("--status", default=None, help="Comma-separated status value(s) to keep"),
        click.option(
            "--as-of",
            type=click.DateTime(formats=["%Y-%m-%d"]),
            default=None,
            help="Evaluate as of this date (YYYY-MM-DD, UTC midnight) instead of now",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@contextmanager
def reporting_errors(ctx: click.Context) -> Iterator[None]:
    """Print any failure as a console error and abort with exit code 1."""
    try:
        yield
    except click.Abort:
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if ctx.obj.get("verbose"):
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            console.print(traceback.format_exc())
        raise click.Abort() from e


def resolve_now(as_of: datetime | None) -> datetime:
    """The single clock read for a command, or the ``--as-of`` override."""
    if as_of is None:
        return datetime.now(UTC)
    return as_of.replace(tzinfo=UTC)


def load_pipeline(
    cfg: Config,
    data_path: Path | None,
    source: str | None,
    db_url: str | None,
    checkin_window: int | None,
    owner: str | None,
    cohort: str | None,
    status: str | None,
    as_of: datetime | None,
) -> Pipeline:
    """Load records, apply record filters and build award items."""
    source = (source or cfg.data.source).lower()
    if source == "db":
        records = SnapshotStore.from_config(cfg.database, db_url).load_latest_records()
    else:
        records = load_records(data_path or cfg.data.path)

    chain = RecordFilterChain(RecordFilters.parse(owner, cohort, status))
    records = chain.apply(records)

    window = clamp_window(
        cfg.pacing.checkin_window_days if checkin_window is None else checkin_window
    )
    now = resolve_now(as_of)
    return Pipeline(
        records=records,
        items=build_items(records, now, window),
        window=window,
        now=now,
        filter_description=chain.describe(),
    )


# ============================================================================
# COMMANDS
# ============================================================================


@main.command()
@pipeline_options
@click.option("--sort", "sort_mode", default=None, help="Sort mode: priority or alpha")
@click.option("--filter", "filter_mode", default=None, help="Filter mode: all, risk or high")
@click.option("--insights", is_flag=True, default=False, help="Show owner and cohort insights")
@click.option("--detail", type=int, default=None, help="Show detail for the Nth listed award")
@click.pass_context
def show(
    ctx: click.Context,
    sort_mode: str | None,
    filter_mode: str | None,
    insights: bool,
    detail: int | None,
    **options: Any,
) -> None:
    """Print the award list with a summary panel."""
    cfg: Config = ctx.obj["config"]

    with reporting_errors(ctx):
        sort = normalize_sort_mode(sort_mode or cfg.pacing.sort_mode)
        focus = normalize_filter_mode(filter_mode or cfg.pacing.filter_mode)
        pipeline = load_pipeline(cfg, **options)

        items = sort_items(apply_filter(pipeline.items, focus), sort)
        metrics = calculate_summary_metrics(items, pipeline.window)

        console.print(
            f"[dim]Updated {pipeline.now:%b %d %H:%M}"
            f" · sort {sort.value} · focus {focus.value}[/dim]"
        )
        console.print(
            build_summary_panel(
                metrics,
                subtitle=pipeline.filter_description,
                preview_chars=cfg.report.upcoming_preview_chars,
            )
        )
        console.print(build_items_table(items))

        if detail is not None:
            console.print()
            console.print(build_detail(items, detail - 1), markup=False)
        if insights:
            console.print()
            console.print(
                build_insights(items, cfg.report.owner_limit, cfg.report.cohort_limit),
                markup=False,
            )


@main.command()
@click.argument("path", type=click.Path(path_type=Path))
@pipeline_options
@click.option(
    "--export-filter",
    default="all",
    show_default=True,
    help="Export filter: all, risk or high",
)
@click.pass_context
def export(ctx: click.Context, path: Path, export_filter: str, **options: Any) -> None:
    """Export a snapshot to PATH (.json, .csv or .parquet; no suffix means .csv)."""
    cfg: Config = ctx.obj["config"]

    with reporting_errors(ctx):
        focus = normalize_filter_mode(export_filter)
        pipeline = load_pipeline(cfg, **options)

        items = sort_items(apply_filter(pipeline.items, focus), SortMode.PRIORITY)
        metrics = calculate_summary_metrics(items, pipeline.window)
        written = export_snapshot(path, items, metrics, pipeline.now)

    console.print(f"Exported {len(items)} awards to {written}")


@main.command()
@click.argument("target", default="-")
@pipeline_options
@click.option("--format", "report_format", default=None, help="Report format: text or json")
@click.pass_context
def report(ctx: click.Context, target: str, report_format: str | None, **options: Any) -> None:
    """Write a pacing report to TARGET (a path, or - for stdout)."""
    cfg: Config = ctx.obj["config"]

    with reporting_errors(ctx):
        pipeline = load_pipeline(cfg, **options)
        items = sort_items(pipeline.items, SortMode.PRIORITY)
        metrics = calculate_summary_metrics(items, pipeline.window)
        write_report(target, items, metrics, pipeline.now, report_format, cfg.report)

    if not is_stdout_target(target):
        console.print(f"Wrote report to {target}")


@main.command()
@pipeline_options
@click.pass_context
def sync(ctx: click.Context, **options: Any) -> None:
    """Store a pacing snapshot in Postgres."""
    cfg: Config = ctx.obj["config"]

    with reporting_errors(ctx):
        store = SnapshotStore.from_config(cfg.database, options["db_url"])
        pipeline = load_pipeline(cfg, **options)
        metrics = calculate_summary_metrics(pipeline.items, pipeline.window)
        snapshot_id = store.sync_snapshot(pipeline.items, metrics, pipeline.now)

    console.print(f"Synced {len(pipeline.items)} awards to Postgres snapshot {snapshot_id}.")


@main.command(name="trend-report")
@click.argument("target", default="-")
@click.option("--format", "report_format", default=None, help="Report format: text or json")
@click.option("--db-url", default=None, help="Postgres connection string")
@click.pass_context
def trend_report(
    ctx: click.Context,
    target: str,
    report_format: str | None,
    db_url: str | None,
) -> None:
    """Compare the two newest stored snapshots and write the result to TARGET."""
    cfg: Config = ctx.obj["config"]

    with reporting_errors(ctx):
        store = SnapshotStore.from_config(cfg.database, db_url)
        current, previous = store.load_trend_snapshots()
        write_trend_report(
            target,
            current,
            previous,
            datetime.now(UTC),
            report_format,
            cfg.report,
        )

    if not is_stdout_target(target):
        console.print(f"Wrote trend report to {target}")


if __name__ == "__main__":
    main()

"""baksheesh CLI: scrape the bribe listing and report on it.

Usage:
    baksheesh scrape                               # Scrape with defaults, print report
    baksheesh scrape --output reports.jsonl        # Also save the records
    baksheesh scrape --offsets 0,10 --delay-ms 500
    baksheesh report reports.jsonl --top 10        # Report on saved records
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from baksheesh.analysis.summary import DEFAULT_BINS, Summary, summarize
from baksheesh.analysis.table import assemble, write_csv
from baksheesh.common.exceptions import (
    NetworkError,
    ScraperAssumptionException,
)
from baksheesh.data_types import FailurePolicy, MismatchPolicy


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_offsets(
    ctx: click.Context | None, param: click.Parameter | None, value: str | None
) -> tuple[int, ...] | None:
    """Parse a comma-separated list of page offsets, e.g. ``0,10,20``."""
    if value is None:
        return None
    try:
        offsets = tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as e:
        raise click.BadParameter(
            f"Offsets must be comma-separated integers, got '{value}'"
        ) from e
    if not offsets:
        raise click.BadParameter("At least one offset is required")
    return offsets


def echo_summary(summary: Summary, top: int | None = None) -> None:
    """Print a Summary as plain-text tables."""
    overall = summary.overall
    click.echo(f"Reports with an amount: {overall.count}")
    if overall.count:
        for label, value in (
            ("mean", overall.mean),
            ("std", overall.std),
            ("min", overall.min),
            ("25%", overall.q1),
            ("50%", overall.median),
            ("75%", overall.q3),
            ("max", overall.max),
        ):
            shown = "-" if value is None else f"{value:,.1f}"
            click.echo(f"  {label:<5} {shown:>16}")

    ranking = summary.by_department
    if top is not None:
        ranking = ranking[:top]
    if ranking:
        click.echo(f"\nMean amount by department ({len(ranking)}):")
        width = max(len(d.department) for d in ranking)
        for aggregate in ranking:
            click.echo(
                f"  {aggregate.department:<{width}}  "
                f"{aggregate.mean_amount:>14,.1f}"
            )

    histogram = summary.histogram
    if histogram.counts:
        click.echo("\nAmount histogram (log-spaced bins):")
        for low, high, count in zip(
            histogram.edges, histogram.edges[1:], histogram.counts
        ):
            click.echo(f"  {low:>14,.0f} - {high:<14,.0f} {count:>5}")


@click.group()
@click.version_option(package_name="baksheesh")
def cli() -> None:
    """baksheesh: scrape and summarize self-reported bribes."""


@cli.command()
@click.option(
    "--listing-url",
    default=None,
    help="URL of the first listing page (fetched without an offset).",
)
@click.option(
    "--page-base-url",
    default=None,
    help="Prefix for later pages; the offset is appended to it.",
)
@click.option(
    "--offsets",
    callback=parse_offsets,
    default=None,
    help="Comma-separated page offsets, e.g. 0,10,20,30,40.",
)
@click.option(
    "--delay-ms",
    type=click.IntRange(min=0),
    default=None,
    help="Pause between pages in milliseconds.",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="HTTP timeout in seconds.",
)
@click.option(
    "--on-mismatch",
    type=click.Choice([p.value for p in MismatchPolicy]),
    default=MismatchPolicy.RAISE.value,
    show_default=True,
    help="What to do when a page's columns differ in length.",
)
@click.option(
    "--on-failure",
    type=click.Choice([p.value for p in FailurePolicy]),
    default=FailurePolicy.ABORT.value,
    show_default=True,
    help="Abort on the first failed page, or skip it and continue.",
)
@click.option(
    "--strict-amounts",
    is_flag=True,
    help="Fail on unparseable amounts instead of recording them as missing.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write records to this JSONL file.",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the combined table to this CSV file.",
)
@click.option(
    "--top",
    type=click.IntRange(min=0),
    default=None,
    help="Show only the top N departments.",
)
@click.option(
    "--bins",
    type=click.IntRange(min=1),
    default=DEFAULT_BINS,
    show_default=True,
    help="Number of histogram bins.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def scrape(
    listing_url: str | None,
    page_base_url: str | None,
    offsets: tuple[int, ...] | None,
    delay_ms: int | None,
    timeout: float,
    on_mismatch: str,
    on_failure: str,
    strict_amounts: bool,
    output: Path | None,
    csv_path: Path | None,
    top: int | None,
    bins: int,
    verbose: bool,
) -> None:
    """Scrape the listing, then print the report."""
    from baksheesh.driver.callbacks import echo_progress, save_to_jsonl_file
    from baksheesh.driver.sync_driver import SyncDriver
    from baksheesh.scraper import BribeListingScraper

    _configure_logging(verbose)

    scraper = BribeListingScraper(
        listing_url=listing_url,
        page_base_url=page_base_url,
        page_offsets=offsets,
        mismatch_policy=MismatchPolicy(on_mismatch),
        strict_amounts=strict_amounts,
    )

    driver = SyncDriver(
        scraper,
        timeout=timeout,
        delay_ms=delay_ms,
        failure_policy=FailurePolicy(on_failure),
        on_progress=echo_progress,
    )
    try:
        pages = driver.run()
    except (NetworkError, ScraperAssumptionException) as e:
        raise click.ClickException(str(e)) from e

    # Nothing is written unless the run finished.
    records = assemble(pages)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8") as f:
            save = save_to_jsonl_file(f)
            for record in records:
                save(record)

    click.echo(f"Scraped {len(records)} reports from {len(pages)} pages.")
    if driver.failures:
        click.echo(f"{len(driver.failures)} pages failed.", err=True)
    if output is not None:
        click.echo(f"Records: {output}")
    if csv_path is not None:
        click.echo(f"Table:   {write_csv(records, csv_path)}")
    click.echo("")

    echo_summary(summarize(records, bins=bins), top=top)


@cli.command()
@click.argument(
    "records_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--top",
    type=click.IntRange(min=0),
    default=None,
    help="Show only the top N departments.",
)
@click.option(
    "--bins",
    type=click.IntRange(min=1),
    default=DEFAULT_BINS,
    show_default=True,
    help="Number of histogram bins.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
def report(
    records_path: Path, top: int | None, bins: int, as_json: bool
) -> None:
    """Report on records previously saved with ``scrape --output``."""
    from baksheesh.driver.callbacks import load_jsonl

    try:
        records = load_jsonl(records_path)
    except ValueError as e:
        raise click.ClickException(
            f"Could not read records from {records_path}: {e}"
        ) from e

    summary = summarize(records, bins=bins)
    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return
    echo_summary(summary, top=top)


def main() -> None:
    """Entry point for the ``baksheesh`` console script."""
    cli()

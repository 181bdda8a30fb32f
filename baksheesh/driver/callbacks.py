"""Callback functions for the driver's hook parameters.

on_data callbacks receive each record as its page is parsed; on_progress
callbacks receive (offset, url) before each page is fetched.

Example::

    from baksheesh.driver.callbacks import save_to_jsonl_file
    from baksheesh.driver.sync_driver import SyncDriver

    with open("reports.jsonl", "w") as f:
        driver = SyncDriver(scraper, on_data=save_to_jsonl_file(f))
        pages = driver.run()
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

import click

from baksheesh.common.data_models import BribeReport, ScrapedData

logger = logging.getLogger(__name__)


def save_to_jsonl_file(file_handle: TextIO) -> Callable[[ScrapedData], None]:
    """Create a callback that writes each record as a JSON line.

    Args:
        file_handle: An open file handle to write JSON lines to.
            The caller is responsible for opening and closing the file.
    """

    def callback(data: ScrapedData) -> None:
        json.dump(data.to_dict(), file_handle)
        file_handle.write("\n")
        file_handle.flush()

    return callback


def save_to_jsonl_path(file_path: Path | str) -> Callable[[ScrapedData], None]:
    """Create a callback that appends each record to a JSONL file.

    Warning:
        This opens the file in append mode ("a") and keeps it open for the
        life of the process. Prefer save_to_jsonl_file() with a context
        manager for anything long-running.
    """
    path = Path(file_path) if isinstance(file_path, str) else file_path
    file_handle = path.open("a", encoding="utf-8")

    def callback(data: ScrapedData) -> None:
        json.dump(data.to_dict(), file_handle)
        file_handle.write("\n")
        file_handle.flush()

    return callback


def count_data(counter: list[int] | None = None) -> Callable[[object], None]:
    """Create a callback that counts records.

    The count lives in a one-element list so it can be read after the run.

    Example::

        counter = [0]
        driver = SyncDriver(scraper, on_data=count_data(counter))
        driver.run()
        print(f"Scraped {counter[0]} reports")
    """
    if counter is None:
        counter = [0]

    def callback(data: object) -> None:
        counter[0] += 1

    return callback


def log_progress(offset: int, url: str) -> None:
    """on_progress callback that logs each page at INFO."""
    logger.info("Scraping page at offset %d: %s", offset, url)


def echo_progress(offset: int, url: str) -> None:
    """on_progress callback that prints each page, for interactive use."""
    click.echo(f"Scraping page at offset {offset} ({url})")


def load_jsonl(file_path: Path | str) -> list[BribeReport]:
    """Read records written by save_to_jsonl_file() back in file order."""
    path = Path(file_path)
    records = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(BribeReport.model_validate_json(line))
    return records

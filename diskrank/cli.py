"""Rank files and directories by total size, largest first."""
from __future__ import annotations
import logging
import os
from typing import List, Optional

import typer

from .models import OrderedReport
from .scanner import DEFAULT_WORKERS, scan_paths
from .utils import format_size

APP_NAME = "diskrank"

app = typer.Typer(
    name=APP_NAME,
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    pretty_exceptions_show_locals=False,
)


def render(report: OrderedReport, raw: bool = False):
    for entry in report:
        if entry.result.ok:
            typer.echo(f"{format_size(entry.result.size, raw)} {entry.path}")
        else:
            typer.echo(f"Errored attempting '{entry.path}', err = {entry.result.cause}", err=True)


@app.command(help=__doc__)
def main(
    entries: Optional[List[str]] = typer.Argument(
        None, help="The files and directories to analyse (default: current directory).",
        show_default=False),
    raw: bool = typer.Option(
        False, "--raw", "-r", help="Print sizes in raw bytes, rather than human-friendly units."),
    workers: int = typer.Option(
        DEFAULT_WORKERS, "--workers", "-j", min=1, envvar="DISKRANK_WORKERS",
        help="Worker threads used to walk directories; 1 walks sequentially."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    paths = list(entries) if entries else [os.getcwd()]
    report = scan_paths(paths, workers=workers)
    render(report, raw=raw)


def run():
    app(prog_name=APP_NAME)

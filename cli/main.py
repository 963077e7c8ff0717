"""jobdesc CLI — entry-point for fetching and converting job postings.

Usage:
    python cli/main.py --help

Commands:
    fetch     → fetch a job URL and print its description as Markdown
    convert   → run the extractor over a saved page on disk
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from jobdesc.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
import mimetypes
from typing import Optional

import typer

from jobdesc.config import settings
from jobdesc.errors import ExtractionError

app = typer.Typer(
    name="jobdesc",
    help="Extract job descriptions from web pages as Markdown.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
) -> None:
    """Configure logging once for every sub-command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------
@app.command("fetch")
def fetch(
    url: str = typer.Option(..., help="Job posting URL."),
) -> None:
    """Fetch a job posting and print its description as Markdown."""
    from jobdesc.scraper import fetch_job_description

    try:
        markdown = fetch_job_description(url)
    except ExtractionError as exc:
        typer.echo(f"[fetch] {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(markdown)


# ---------------------------------------------------------------------------
# Convert
# ---------------------------------------------------------------------------
@app.command("convert")
def convert(
    path: Path = typer.Option(..., exists=True, dir_okay=False, help="Saved page to convert."),
    content_type: Optional[str] = typer.Option(
        None, "--content-type", help="Content-Type to assume (guessed from the suffix by default)."
    ),
    url: str = typer.Option("", help="URL the page was fetched from, if known."),
) -> None:
    """Run the extractor over a saved page and print the Markdown."""
    from jobdesc.scraper import extract

    if content_type is None:
        content_type = mimetypes.guess_type(path.name)[0] or "text/plain"

    try:
        markdown = extract(path.read_bytes(), content_type, url, url)
    except ExtractionError as exc:
        typer.echo(f"[convert] {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(markdown)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()

# ABOUTME: The `pdflibrarian lookup` command for resolving metadata from a title or identifier.
# ABOUTME: Fans out to the enabled catalogs and prints ranked candidates as a table or JSON.

import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pdflibrarian.cli.options import (
    google_books_key_option,
    source_options,
    timeout_option,
    verbose_option,
)
from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import FetchSettings
from pdflibrarian.metadata.dublin_core import dublin_core_entries
from pdflibrarian.metadata.fetcher import fetch_candidates
from pdflibrarian.metadata.hints import build_search_hint
from pdflibrarian.metadata.types import SourceOptions

logger = logging.getLogger(__name__)

console = Console()

DEFAULT_LIMIT = 10


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s", force=True)


def _candidate_to_dict(candidate: MetadataCandidate) -> dict[str, Any]:
    data = asdict(candidate)
    data["kind"] = candidate.kind.value
    return data


def _render_table(candidates: list[MetadataCandidate]) -> Table:
    table = Table()
    table.add_column("#", style="dim", width=3)
    table.add_column("Conf", justify="right", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Year", width=4)
    table.add_column("Lang", width=4)
    table.add_column("ISBN / DOI")
    table.add_column("Source", style="dim")

    for index, candidate in enumerate(candidates, start=1):
        table.add_row(
            str(index),
            str(candidate.confidence),
            escape(candidate.primary_title),
            escape(candidate.authors_text) or "[dim]unknown[/dim]",
            candidate.published_year or "?",
            candidate.language or "?",
            escape(candidate.isbn or candidate.doi),
            escape(candidate.source),
        )
    return table


@click.command("lookup")
@click.option("--title", "extracted_title", default="", help="Title found in the document body.")
@click.option("--file-title", "file_name_title", default="", help="Title guessed from the file name.")
@click.option("--snippet", default="", help="Short excerpt of the document text.")
@click.option("--isbn", default=None, help="ISBN printed in the document.")
@click.option("--doi", default=None, help="DOI printed in the document.")
@source_options
@timeout_option
@google_books_key_option
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=DEFAULT_LIMIT,
    show_default=True,
    help="Maximum number of candidates to show.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print candidates as JSON.")
@click.option(
    "--dublin-core",
    is_flag=True,
    default=False,
    help="Also print the Dublin Core fields for the top candidate.",
)
@verbose_option
def lookup(
    extracted_title: str,
    file_name_title: str,
    snippet: str,
    isbn: str | None,
    doi: str | None,
    use_open_library: bool,
    use_google_books: bool,
    use_douban: bool,
    use_library_of_congress: bool,
    timeout: float,
    google_books_key: str | None,
    limit: int,
    as_json: bool,
    dublin_core: bool,
    verbose: bool,
) -> None:
    """Look up bibliographic metadata for a PDF from its title, ISBN, or DOI."""
    _configure_logging(verbose)

    hint = build_search_hint(file_name_title, extracted_title, snippet=snippet, isbn=isbn, doi=doi)
    if not (hint.extracted_title or hint.file_name_title or hint.isbn or hint.doi):
        raise click.UsageError("Provide at least one of --title, --file-title, --isbn, or --doi.")

    options = SourceOptions(
        use_open_library=use_open_library,
        use_google_books=use_google_books,
        use_douban=use_douban,
        use_library_of_congress=use_library_of_congress,
    )
    settings = FetchSettings(timeout=timeout, google_books_api_key=google_books_key)
    logger.debug("Looking up %s", hint)

    candidates = asyncio.run(fetch_candidates(hint, options, settings=settings))[:limit]

    if as_json:
        click.echo(json.dumps([_candidate_to_dict(c) for c in candidates], ensure_ascii=False, indent=2))
        return

    if not candidates:
        console.print("[yellow]No metadata found.[/yellow]")
        return

    console.print(_render_table(candidates))
    console.print(f"\n[dim]{len(candidates)} candidate(s)[/dim]")

    if dublin_core:
        console.print("\n[bold]Dublin Core[/bold] (top candidate)")
        for dc_field, value in dublin_core_entries(candidates[0]):
            console.print(f"  {dc_field.value}: {value}", markup=False, highlight=False)

# ABOUTME: Shared Click options for pdflibrarian CLI commands.
# ABOUTME: Provides reusable decorators for source toggles and fetch settings.

from collections.abc import Callable
from typing import Any

import click

from pdflibrarian.metadata.config import DEFAULT_TIMEOUT

GOOGLE_BOOKS_KEY_ENVVAR = "PDFLIBRARIAN_GOOGLE_BOOKS_KEY"

_SOURCE_TOGGLES = (
    click.option(
        "--open-library/--no-open-library",
        "use_open_library",
        default=True,
        help="Query Open Library (default: on).",
    ),
    click.option(
        "--google-books/--no-google-books",
        "use_google_books",
        default=True,
        help="Query Google Books (default: on).",
    ),
    click.option(
        "--douban/--no-douban",
        "use_douban",
        default=True,
        help="Query Douban book search (default: on).",
    ),
    click.option(
        "--loc/--no-loc",
        "use_library_of_congress",
        default=True,
        help="Query the Library of Congress catalog (default: on).",
    ),
)


def source_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the four --<source>/--no-<source> toggles to a command."""
    for option in reversed(_SOURCE_TOGGLES):
        func = option(func)
    return func


timeout_option = click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Per-request timeout in seconds.",
)

google_books_key_option = click.option(
    "--google-books-key",
    envvar=GOOGLE_BOOKS_KEY_ENVVAR,
    default=None,
    help=f"Google Books API key (or set {GOOGLE_BOOKS_KEY_ENVVAR}).",
)

verbose_option = click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log source requests and failures.",
)

from __future__ import annotations

import re
from collections.abc import Sequence

from pdfmerger.domain.errors import PageSpecError, RangeOrderError
from pdfmerger.domain.models import AllPages, ExplicitPages, PageSelection

ALL_PAGES_KEYWORD = "all"

_PAGE_NUMBER = re.compile(r"[0-9]+")


def _page_number(token: str, raw: str) -> int:
    if not _PAGE_NUMBER.fullmatch(raw):
        raise PageSpecError(token)
    number = int(raw)
    if number < 1:
        raise PageSpecError(token, "page numbers start at 1")
    return number


def parse_page_spec(spec: str) -> list[int]:
    """Expand a page specification such as ``"1,3,6, 12-16"`` into page numbers.

    Tokens are evaluated left to right and ranges expand to inclusive ascending
    runs, so ``"12-14,1-2"`` gives ``[12, 13, 14, 1, 2]``. Repeated pages are kept.
    Whitespace anywhere in the specification is ignored.

    The ``"all"`` keyword is not handled here since expanding it needs the
    source's page count; see :func:`parse_page_selection`.

    Raises:
        RangeOrderError: a range starts after it ends, e.g. ``"5-3"``.
        PageSpecError: a token is not a positive page number or ``start-end`` pair.
    """
    cleaned = "".join(spec.split())
    pages: list[int] = []
    for token in cleaned.split(","):
        bounds = token.split("-")
        if len(bounds) == 1:
            pages.append(_page_number(token, token))
        elif len(bounds) == 2:
            start = _page_number(token, bounds[0])
            end = _page_number(token, bounds[1])
            if start > end:
                raise RangeOrderError(start, end)
            pages.extend(range(start, end + 1))
        else:
            raise PageSpecError(token)
    return pages


def parse_page_selection(
    pages: PageSelection | str | int | Sequence[int] | None,
) -> PageSelection:
    if pages is None:
        return AllPages()
    if isinstance(pages, (AllPages, ExplicitPages)):
        return pages
    if isinstance(pages, int):
        return ExplicitPages((_page_number(str(pages), str(pages)),))
    if isinstance(pages, str):
        if pages.strip().lower() == ALL_PAGES_KEYWORD:
            return AllPages()
        return ExplicitPages(tuple(parse_page_spec(pages)))
    if not pages:
        raise PageSpecError("", "no pages selected")
    return ExplicitPages(tuple(_page_number(str(page), str(page)) for page in pages))

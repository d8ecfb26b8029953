from __future__ import annotations

from pathlib import Path


class PdfMergerError(Exception):
    pass


class UsageError(PdfMergerError):
    pass


class SourceNotFoundError(PdfMergerError):
    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Could not locate PDF on '{self.path}'")


class PageSpecError(PdfMergerError):
    def __init__(
        self, token: str, reason: str = "expected a page number or a start-end range"
    ) -> None:
        self.token = token
        super().__init__(f"Invalid page token '{token}': {reason}.")


class RangeOrderError(PageSpecError):
    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"{start}-{end}",
            reason=f"starting page {start} is greater than ending page {end}",
        )


class NoDocumentsError(PdfMergerError):
    def __init__(self) -> None:
        super().__init__("No PDFs to merge.")


class SourceUnreadableError(PdfMergerError):
    def __init__(self, path: str | Path, reason: str = "not a readable PDF") -> None:
        self.path = str(path)
        super().__init__(f"Could not open PDF '{self.path}': {reason}.")


class PageImportError(PdfMergerError):
    def __init__(self, path: str | Path, page_number: int) -> None:
        self.path = str(path)
        self.page_number = page_number
        super().__init__(
            f"Could not load page '{page_number}' in PDF '{self.path}'. "
            "Check that the page exists."
        )


class OutputError(PdfMergerError):
    def __init__(self, target: str, mode: str) -> None:
        self.target = target
        self.mode = mode
        super().__init__(f"Error outputting PDF '{target}' to '{mode}'.")

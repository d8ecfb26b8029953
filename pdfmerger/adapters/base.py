"""Collaborator protocols the merge orchestration is written against.

The orchestrator never touches a PDF library directly. It opens sources,
imports pages as templates and lays them onto a fresh output document through
these protocols, so the merge logic can run against PyMuPDF or an in-memory
fake alike.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pdfmerger.domain.models import Orientation, PageTemplate


class SourceDocument(Protocol):
    path: Path

    @property
    def page_count(self) -> int:
        ...

    def import_page(self, page_number: int) -> PageTemplate:
        """Import a 1-based page; raise PageImportError when it cannot be loaded."""

    def close(self) -> None:
        ...


class OutputDocument(Protocol):
    def add_page(self, orientation: Orientation, width: float, height: float) -> None:
        """Append an exact ``width`` x ``height`` page arranged for ``orientation``."""

    def draw_template(self, template: PageTemplate) -> None:
        """Draw ``template`` at full scale onto the most recently added page."""

    def render(self) -> bytes:
        ...

    def close(self) -> None:
        ...


class PdfBackend(Protocol):
    def open_source(self, path: Path) -> SourceDocument:
        """Open ``path``; raise SourceUnreadableError when it is not a readable PDF."""

    def new_output(self) -> OutputDocument:
        ...

from __future__ import annotations

import logging
from pathlib import Path
from typing import cast

import fitz  # type: ignore[import-untyped]

from pdfmerger.domain.errors import PageImportError, SourceUnreadableError, UsageError
from pdfmerger.domain.models import Orientation, PageTemplate

logger = logging.getLogger(__name__)

IN_MEMORY_SOURCE = "<in-memory PDF>"


def _optimized_bytes(document: fitz.Document) -> bytes:
    return cast(
        bytes,
        document.tobytes(
            garbage=4,
            clean=True,
            deflate=True,
            deflate_images=True,
            deflate_fonts=True,
        ),
    )


class PyMuPdfSource:
    def __init__(self, path: Path, document: fitz.Document) -> None:
        self.path = path
        self.document = document

    @property
    def page_count(self) -> int:
        return int(self.document.page_count)

    def import_page(self, page_number: int) -> PageTemplate:
        if page_number < 1 or page_number > self.page_count:
            raise PageImportError(self.path, page_number)
        index = page_number - 1
        try:
            rect = self.document.load_page(index).rect
        except Exception as exc:
            raise PageImportError(self.path, page_number) from exc
        return PageTemplate(
            source_path=self.path,
            page_number=page_number,
            width=float(rect.width),
            height=float(rect.height),
            handle=(self.document, index),
        )

    def close(self) -> None:
        self.document.close()


class PyMuPdfOutput:
    def __init__(self) -> None:
        self.document = fitz.open()
        self._current_page: fitz.Page | None = None

    def add_page(self, orientation: Orientation, width: float, height: float) -> None:
        self._current_page = self.document.new_page(width=width, height=height)
        logger.debug(
            "Added %s output page %d (%.1f x %.1f)",
            orientation.value,
            self.document.page_count,
            width,
            height,
        )

    def draw_template(self, template: PageTemplate) -> None:
        if self._current_page is None:
            raise UsageError("An output page must be added before drawing a template.")
        source, index = cast(tuple[fitz.Document, int], template.handle)
        # show_pdf_page refuses pages without a content stream; those stay blank.
        if not source[index].get_contents():
            return
        target = fitz.Rect(0, 0, template.width, template.height)
        try:
            self._current_page.show_pdf_page(target, source, index)
        except Exception as exc:
            raise PageImportError(template.source_path, template.page_number) from exc

    def render(self) -> bytes:
        return _optimized_bytes(self.document)

    def close(self) -> None:
        self.document.close()


class PyMuPdfAdapter:
    def open_source(self, path: Path) -> PyMuPdfSource:
        try:
            document = fitz.open(str(path), filetype="pdf")
        except Exception as exc:
            raise SourceUnreadableError(path) from exc
        if document.needs_pass:
            document.close()
            raise SourceUnreadableError(path, "document is encrypted")
        return PyMuPdfSource(Path(path), document)

    def new_output(self) -> PyMuPdfOutput:
        return PyMuPdfOutput()

    def get_page_count(self, pdf_bytes: bytes) -> int:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                return int(document.page_count)
        except Exception as exc:
            raise SourceUnreadableError(IN_MEMORY_SOURCE) from exc

    def get_page_sizes(self, pdf_bytes: bytes) -> list[tuple[float, float]]:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                return [(float(page.rect.width), float(page.rect.height)) for page in document]
        except Exception as exc:
            raise SourceUnreadableError(IN_MEMORY_SOURCE) from exc

    def render_page_thumbnail(self, pdf_bytes: bytes, page_index: int, zoom: float = 0.45) -> bytes:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                page = document[page_index]
                matrix = fitz.Matrix(zoom, zoom)
                pixmap = page.get_pixmap(matrix=matrix, alpha=False)
                return cast(bytes, pixmap.tobytes("png"))
        except Exception as exc:
            raise SourceUnreadableError(
                IN_MEMORY_SOURCE, "unable to render page thumbnail"
            ) from exc

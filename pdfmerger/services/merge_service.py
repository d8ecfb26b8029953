from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from pdfmerger.adapters.base import OutputDocument, PdfBackend, SourceDocument
from pdfmerger.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdfmerger.domain.errors import (
    NoDocumentsError,
    OutputError,
    PageImportError,
    PdfMergerError,
    SourceNotFoundError,
    SourceUnreadableError,
    UsageError,
)
from pdfmerger.domain.models import (
    AllPages,
    MergeJob,
    MergeResult,
    Orientation,
    PageSelection,
    PagePlacement,
    SinkMode,
)
from pdfmerger.infrastructure.config import AppConfig
from pdfmerger.services.orientation import output_page_size, resolve_orientation
from pdfmerger.services.output_service import OutputService, resolve_sink
from pdfmerger.services.page_range_parser import parse_page_selection

logger = logging.getLogger(__name__)


class MergeState(str, Enum):
    ACCUMULATING = "accumulating"
    SPENT = "spent"


class MergeOrchestrator:
    """Concatenates selected pages of several PDFs into one document.

    Documents are registered first (``register_document`` is chainable) and
    merged once::

        result = (
            MergeOrchestrator()
            .register_document("a.pdf")
            .register_document("b.pdf", "2,1", orientation="landscape")
            .merge("file", "out.pdf")
        )

    Pages are emitted in registration order, then in the order of each
    document's page selection. After ``merge`` the orchestrator is spent: it
    rejects further registrations, while ``merge`` may be repeated and
    re-processes the same documents.
    """

    def __init__(
        self,
        backend: PdfBackend | None = None,
        output_service: OutputService | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.backend: PdfBackend = backend or PyMuPdfAdapter()
        self.output_service = output_service or OutputService()
        self.config = config or AppConfig()
        self.state = MergeState.ACCUMULATING
        self._jobs: list[MergeJob] = []

    @property
    def jobs(self) -> tuple[MergeJob, ...]:
        return tuple(self._jobs)

    def register_document(
        self,
        path: str | Path,
        pages: PageSelection | str | int | Sequence[int] | None = "all",
        orientation: Orientation | str | None = None,
    ) -> MergeOrchestrator:
        if self.state is MergeState.SPENT:
            raise UsageError("Documents cannot be registered after merge has run.")

        source_path = Path(path)
        if not source_path.is_file():
            raise SourceNotFoundError(source_path)

        job = MergeJob(
            source_path=source_path,
            selection=parse_page_selection(pages),
            orientation=Orientation.parse(orientation),
        )
        self._jobs.append(job)
        logger.debug("Registered %s (%s, %s)", source_path, job.selection, job.orientation.value)
        return self

    def merge(
        self,
        mode: SinkMode | str | None = None,
        target: str | None = None,
        orientation: Orientation | str | None = None,
    ) -> MergeResult:
        try:
            if not self._jobs:
                raise NoDocumentsError()
            sink = resolve_sink(
                self.config.sink_mode if mode is None else mode,
                target,
                self.config.output_name,
            )
            global_orientation = Orientation.parse(
                self.config.orientation if orientation is None else orientation
            )
            logger.info(
                "Merging %d document(s) to %s sink '%s'",
                len(self._jobs),
                sink.mode.value,
                sink.target,
            )

            placements: list[PagePlacement] = []
            sources: dict[Path, SourceDocument] = {}
            output = self.backend.new_output()
            try:
                for job in self._jobs:
                    if job.source_path not in sources:
                        sources[job.source_path] = self._open_source(job.source_path)
                    source = sources[job.source_path]
                    placements.extend(self._append_job(output, source, job, global_orientation))
                try:
                    data = output.render()
                except Exception as exc:
                    raise OutputError(sink.target, sink.mode.value) from exc
            finally:
                for source in sources.values():
                    source.close()
                output.close()

            output_pdf = self.output_service.emit(sink, data)
            logger.info("Merged %d page(s) from %d document(s)", len(placements), len(self._jobs))
            return MergeResult(sink=sink, placements=tuple(placements), output_pdf=output_pdf)
        finally:
            self.state = MergeState.SPENT

    def _open_source(self, path: Path) -> SourceDocument:
        try:
            return self.backend.open_source(path)
        except PdfMergerError:
            raise
        except Exception as exc:
            raise SourceUnreadableError(path) from exc

    def _append_job(
        self,
        output: OutputDocument,
        source: SourceDocument,
        job: MergeJob,
        global_orientation: Orientation,
    ) -> list[PagePlacement]:
        placements: list[PagePlacement] = []
        if isinstance(job.selection, AllPages):
            page_numbers: Sequence[int] = range(1, source.page_count + 1)
        else:
            page_numbers = job.selection.pages

        for page_number in page_numbers:
            template = source.import_page(page_number)
            if template is None:
                raise PageImportError(job.source_path, page_number)

            page_orientation = resolve_orientation(
                job.orientation, global_orientation, template.width, template.height
            )
            width, height = output_page_size(page_orientation, template.width, template.height)
            output.add_page(page_orientation, width, height)
            output.draw_template(template)
            placements.append(
                PagePlacement(
                    source_path=job.source_path,
                    page_number=page_number,
                    orientation=page_orientation,
                    width=width,
                    height=height,
                )
            )
        return placements

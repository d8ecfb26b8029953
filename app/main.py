from __future__ import annotations

import base64
import re
import tempfile
from pathlib import Path

import streamlit as st

from pdfmerger.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdfmerger.domain.errors import PdfMergerError, UsageError
from pdfmerger.domain.models import Orientation, SinkMode
from pdfmerger.infrastructure.config import AppConfig
from pdfmerger.infrastructure.logging_config import configure_logging
from pdfmerger.services.merge_service import MergeOrchestrator
from pdfmerger.services.output_service import OutputService

ORIENTATION_LABELS = {
    "Auto (per page)": Orientation.AUTO,
    "Portrait": Orientation.PORTRAIT,
    "Landscape": Orientation.LANDSCAPE,
}


class StreamlitPresenter:
    def __init__(self, adapter: PyMuPdfAdapter) -> None:
        self.adapter = adapter

    def display(self, name: str, data: bytes) -> None:
        encoded = base64.b64encode(data).decode("ascii")
        st.markdown(f"**{name}**")
        st.markdown(
            f"<iframe src='data:application/pdf;base64,{encoded}' "
            "style='width:100%;height:720px;border:none;'></iframe>",
            unsafe_allow_html=True,
        )
        page_count = self.adapter.get_page_count(data)
        columns = st.columns(min(page_count, 6) or 1, gap="small")
        for index in range(page_count):
            with columns[index % len(columns)]:
                st.image(
                    self.adapter.render_page_thumbnail(data, index, zoom=0.3),
                    caption=f"Page {index + 1}",
                )

    def offer_download(self, name: str, data: bytes) -> None:
        st.download_button(
            "Download merged PDF",
            data=data,
            file_name=name,
            mime="application/pdf",
            type="primary",
            use_container_width=True,
        )


def _init_state() -> None:
    st.session_state.setdefault("uploader_token", 0)


def _safe_file_name(name: str) -> str:
    clean = name.replace("\\", "/").split("/")[-1]
    clean = re.sub(r"[^A-Za-z0-9._() -]", "_", clean).strip()
    return clean or "document.pdf"


def _validate_upload_limits(config: AppConfig, files: list[tuple[str, bytes]]) -> None:
    total = sum(len(content) for _, content in files)
    if total > config.max_batch_size_bytes:
        raise UsageError(f"Batch exceeds {config.max_batch_size_mb} MB limit.")
    for name, content in files:
        if len(content) > config.max_pdf_size_bytes:
            raise UsageError(f"{name} exceeds {config.max_pdf_size_mb} MB limit.")
        if not name.lower().endswith(".pdf"):
            raise UsageError(f"{name} is not a PDF file.")


def _store_uploads(files: list[tuple[str, bytes]], upload_dir: Path) -> list[Path]:
    paths: list[Path] = []
    for index, (name, content) in enumerate(files):
        path = upload_dir / f"{index:03d}_{_safe_file_name(name)}"
        path.write_bytes(content)
        paths.append(path)
    return paths


def _document_options(files: list[tuple[str, bytes]]) -> list[tuple[str, Orientation]]:
    options: list[tuple[str, Orientation]] = []
    for index, (name, _) in enumerate(files):
        st.markdown(f"**{index + 1}. {name}**")
        pages_col, orientation_col = st.columns([3, 2])
        with pages_col:
            pages = st.text_input(
                "Pages",
                value="all",
                placeholder="all, or e.g. 1,3,5-8",
                key=f"pages_{st.session_state.uploader_token}_{index}",
            )
        with orientation_col:
            label = st.selectbox(
                "Orientation",
                options=list(ORIENTATION_LABELS),
                key=f"orientation_{st.session_state.uploader_token}_{index}",
            )
        options.append((pages, ORIENTATION_LABELS[label]))
    return options


def _run_merge(
    config: AppConfig,
    files: list[tuple[str, bytes]],
    options: list[tuple[str, Orientation]],
    mode: SinkMode,
    output_name: str,
    global_orientation: Orientation,
) -> None:
    adapter = PyMuPdfAdapter()
    merger = MergeOrchestrator(
        backend=adapter,
        output_service=OutputService(StreamlitPresenter(adapter)),
        config=config,
    )
    with tempfile.TemporaryDirectory(prefix="pdfmerger_") as upload_dir:
        paths = _store_uploads(files, Path(upload_dir))
        for path, (name, _), (pages, orientation) in zip(paths, files, options):
            try:
                merger.register_document(path, pages, orientation)
            except PdfMergerError as exc:
                st.warning(f"Skipped {name}: {exc}")

        result = merger.merge(mode, output_name, global_orientation)
    st.success(f"Merged {result.merged_pages} page(s) from {len(merger.jobs)} PDF(s).")


def main() -> None:
    config = AppConfig.from_env()
    configure_logging(config.log_level)
    st.set_page_config(page_title="PDF Merger", layout="wide")
    st.title("PDF Merger", anchor=False)
    st.caption(
        "Pages are merged in upload order, then in the order of each page selection. "
        "Form fields, links and annotations are not carried over."
    )
    _init_state()

    uploaded = st.file_uploader(
        (
            "Choose PDFs to merge "
            f"(max {config.max_pdf_size_mb} MB each, "
            f"{config.max_batch_size_mb} MB total)"
        ),
        type=["pdf"],
        accept_multiple_files=True,
        key=f"merge_upload_{st.session_state.uploader_token}",
    )
    if st.button("Clear All PDFs"):
        st.session_state.uploader_token += 1
        st.rerun()

    files = [(item.name, item.getvalue()) for item in uploaded] if uploaded else []
    if not files:
        st.info("No PDFs loaded yet.")
        return

    options = _document_options(files)
    st.divider()

    name_col, orientation_col = st.columns([3, 2])
    with name_col:
        output_name = st.text_input("Output file name", value=config.output_name)
    with orientation_col:
        global_label = st.selectbox("Orientation for all documents", list(ORIENTATION_LABELS))

    display_col, download_col = st.columns(2)
    mode: SinkMode | None = None
    if display_col.button("Merge & Display", use_container_width=True):
        mode = SinkMode.INLINE
    if download_col.button("Merge for Download", type="primary", use_container_width=True):
        mode = SinkMode.DOWNLOAD

    if mode is None:
        return
    try:
        _validate_upload_limits(config, files)
        _run_merge(
            config,
            files,
            options,
            mode,
            output_name,
            ORIENTATION_LABELS[global_label],
        )
    except PdfMergerError as exc:
        st.error(str(exc))


if __name__ == "__main__":
    main()

import tempfile
from pathlib import Path

import pytest

from app import main as app_main
from pdfmerger.domain.errors import PageImportError
from pdfmerger.domain.models import Orientation, SinkMode
from pdfmerger.infrastructure.config import AppConfig


@pytest.fixture
def upload_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "uploads"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def stored_paths(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    paths: list[Path] = []
    store = app_main._store_uploads

    def recording_store(files, upload_dir):
        stored = store(files, upload_dir)
        paths.extend(stored)
        return stored

    monkeypatch.setattr(app_main, "_store_uploads", recording_store)
    return paths


@pytest.mark.integration
def test_store_uploads_writes_sanitized_names(tmp_path: Path) -> None:
    paths = app_main._store_uploads(
        [("../report.pdf", b"%PDF-a"), ("scan #2.pdf", b"%PDF-b")], tmp_path
    )

    assert [path.name for path in paths] == ["000_report.pdf", "001_scan _2.pdf"]
    assert all(path.parent == tmp_path for path in paths)
    assert paths[1].read_bytes() == b"%PDF-b"


@pytest.mark.integration
def test_run_merge_removes_uploads_afterwards(
    upload_root: Path, stored_paths: list[Path], synthetic_pdf_bytes: bytes
) -> None:
    app_main._run_merge(
        AppConfig(),
        [("a.pdf", synthetic_pdf_bytes), ("b.pdf", synthetic_pdf_bytes)],
        [("all", Orientation.AUTO), ("2", Orientation.AUTO)],
        SinkMode.BYTES,
        "merged.pdf",
        Orientation.AUTO,
    )

    assert len(stored_paths) == 2
    assert all(path.parent.parent == upload_root for path in stored_paths)
    assert not any(path.exists() for path in stored_paths)
    assert list(upload_root.iterdir()) == []


@pytest.mark.integration
def test_failed_merge_still_removes_uploads(
    upload_root: Path, stored_paths: list[Path], synthetic_pdf_bytes: bytes
) -> None:
    with pytest.raises(PageImportError):
        app_main._run_merge(
            AppConfig(),
            [("a.pdf", synthetic_pdf_bytes)],
            [("9", Orientation.AUTO)],
            SinkMode.BYTES,
            "merged.pdf",
            Orientation.AUTO,
        )

    assert len(stored_paths) == 1
    assert list(upload_root.iterdir()) == []

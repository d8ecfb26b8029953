from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import fitz
import pytest

from pdfmerger.domain.errors import PageImportError
from pdfmerger.domain.models import Orientation, PageTemplate

LETTER = (612.0, 792.0)
LETTER_LANDSCAPE = (792.0, 612.0)


@dataclass
class FakeSource:
    path: Path
    sizes: list[tuple[float, float]]
    closed: bool = False

    @property
    def page_count(self) -> int:
        return len(self.sizes)

    def import_page(self, page_number: int) -> PageTemplate:
        if page_number < 1 or page_number > len(self.sizes):
            raise PageImportError(self.path, page_number)
        width, height = self.sizes[page_number - 1]
        return PageTemplate(
            source_path=self.path,
            page_number=page_number,
            width=width,
            height=height,
            handle=f"{self.path.stem}{page_number}",
        )

    def close(self) -> None:
        self.closed = True


@dataclass
class FakePage:
    orientation: Orientation
    width: float
    height: float
    content: str = ""


@dataclass
class FakeOutput:
    fail_render: bool = False
    pages: list[FakePage] = field(default_factory=list)
    closed: bool = False

    def add_page(self, orientation: Orientation, width: float, height: float) -> None:
        self.pages.append(FakePage(orientation=orientation, width=width, height=height))

    def draw_template(self, template: PageTemplate) -> None:
        self.pages[-1].content = str(template.handle)

    def render(self) -> bytes:
        if self.fail_render:
            raise RuntimeError("writer exploded")
        return "|".join(page.content for page in self.pages).encode("ascii")

    def close(self) -> None:
        self.closed = True


class FakeBackend:
    """In-memory PDF collaborator; documents still need a file on disk to be registered."""

    def __init__(self, base: Path) -> None:
        self.base = base
        self.documents: dict[Path, list[tuple[float, float]]] = {}
        self.unreadable: set[Path] = set()
        self.open_calls: list[Path] = []
        self.sources: list[FakeSource] = []
        self.outputs: list[FakeOutput] = []
        self.fail_render = False

    def add_document(self, name: str, sizes: list[tuple[float, float]]) -> Path:
        path = self.base / name
        path.write_bytes(b"%PDF-1.4 placeholder")
        self.documents[path] = sizes
        return path

    def add_unreadable(self, name: str) -> Path:
        path = self.base / name
        path.write_bytes(b"not a pdf")
        self.unreadable.add(path)
        return path

    def open_source(self, path: Path) -> FakeSource:
        self.open_calls.append(path)
        if path in self.unreadable:
            raise ValueError("startxref not found")
        source = FakeSource(path=path, sizes=self.documents[path])
        self.sources.append(source)
        return source

    def new_output(self) -> FakeOutput:
        output = FakeOutput(fail_render=self.fail_render)
        self.outputs.append(output)
        return output


class RecordingPresenter:
    def __init__(self) -> None:
        self.displayed: list[tuple[str, bytes]] = []
        self.downloads: list[tuple[str, bytes]] = []

    def display(self, name: str, data: bytes) -> None:
        self.displayed.append((name, data))

    def offer_download(self, name: str, data: bytes) -> None:
        self.downloads.append((name, data))


@pytest.fixture
def fake_backend(tmp_path: Path) -> FakeBackend:
    return FakeBackend(tmp_path)


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    """Build a real PDF whose pages carry ``"<stem> page <n>"`` as text."""

    def build(name: str, sizes: list[tuple[float, float]]) -> Path:
        path = tmp_path / name
        document = fitz.open()
        try:
            for number, (width, height) in enumerate(sizes, start=1):
                page = document.new_page(width=width, height=height)
                page.insert_text((72, 72), f"{path.stem} page {number}")
            document.save(str(path), deflate=True, garbage=3)
        finally:
            document.close()
        return path

    return build


@pytest.fixture
def synthetic_pdf_bytes(pdf_factory: Callable[..., Path]) -> bytes:
    return pdf_factory("synthetic.pdf", [LETTER, LETTER, LETTER_LANDSCAPE]).read_bytes()

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Protocol

from pdfmerger.domain.errors import OutputError
from pdfmerger.domain.models import OutputSink, SinkMode

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    """Interactive surface receiving documents sent to the inline and download sinks."""

    def display(self, name: str, data: bytes) -> None:
        ...

    def offer_download(self, name: str, data: bytes) -> None:
        ...


class StreamPresenter:
    """Writes the raw document to a binary stream, stdout by default."""

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self.stream = stream

    def _write(self, data: bytes) -> None:
        stream = self.stream if self.stream is not None else sys.stdout.buffer
        stream.write(data)
        stream.flush()

    def display(self, name: str, data: bytes) -> None:
        self._write(data)

    def offer_download(self, name: str, data: bytes) -> None:
        self._write(data)


def resolve_sink(
    mode: SinkMode | str | None, target: str | None, default_target: str
) -> OutputSink:
    resolved = SinkMode.lookup(mode)
    if resolved is None:
        logger.warning("Unknown output mode '%s', displaying inline instead", mode)
        resolved = SinkMode.INLINE
    return OutputSink(mode=resolved, target=target or default_target)


class OutputService:
    def __init__(self, presenter: Presenter | None = None) -> None:
        self.presenter: Presenter = presenter or StreamPresenter()

    def emit(self, sink: OutputSink, data: bytes) -> bytes | None:
        """Deliver ``data`` to ``sink``; only the bytes mode hands the document back."""
        if sink.mode is SinkMode.BYTES:
            return data

        try:
            if sink.mode is SinkMode.INLINE:
                self.presenter.display(Path(sink.target).name, data)
            elif sink.mode is SinkMode.DOWNLOAD:
                self.presenter.offer_download(Path(sink.target).name, data)
            else:
                Path(sink.target).write_bytes(data)
        except Exception as exc:
            raise OutputError(sink.target, sink.mode.value) from exc

        logger.info("Wrote %d bytes to %s sink '%s'", len(data), sink.mode.value, sink.target)
        return None

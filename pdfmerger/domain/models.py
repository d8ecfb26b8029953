from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from pdfmerger.domain.errors import UsageError


class Orientation(str, Enum):
    AUTO = "auto"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @classmethod
    def parse(cls, value: "Orientation | str | None") -> "Orientation":
        if value is None:
            return cls.AUTO
        if isinstance(value, Orientation):
            return value
        key = str(value).strip().lower()
        if not key:
            return cls.AUTO
        for member in cls:
            if key in (member.value, member.value[0]):
                return member
        raise UsageError(
            f"Unknown orientation '{value}'. Use 'auto', 'portrait' or 'landscape'."
        )


class SinkMode(str, Enum):
    INLINE = "inline"
    DOWNLOAD = "download"
    FILE = "file"
    BYTES = "bytes"

    @classmethod
    def lookup(cls, value: "SinkMode | str | None") -> "SinkMode | None":
        """Return the mode named by ``value``, or ``None`` when it names no mode."""
        if isinstance(value, SinkMode):
            return value
        key = (value or "").strip().lower()
        if not key:
            return cls.INLINE
        key = _SINK_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_SINK_ALIASES = {"browser": "inline", "string": "bytes"}


@dataclass(frozen=True)
class AllPages:
    pass


@dataclass(frozen=True)
class ExplicitPages:
    pages: tuple[int, ...]


PageSelection = Union[AllPages, ExplicitPages]


@dataclass(frozen=True)
class MergeJob:
    source_path: Path
    selection: PageSelection
    orientation: Orientation = Orientation.AUTO


@dataclass(frozen=True)
class OutputSink:
    mode: SinkMode
    target: str


@dataclass(frozen=True)
class PageTemplate:
    source_path: Path
    page_number: int
    width: float
    height: float
    handle: object = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class PagePlacement:
    source_path: Path
    page_number: int
    orientation: Orientation
    width: float
    height: float


@dataclass(frozen=True)
class MergeResult:
    sink: OutputSink
    placements: tuple[PagePlacement, ...]
    output_pdf: bytes | None = None

    @property
    def merged_pages(self) -> int:
        return len(self.placements)

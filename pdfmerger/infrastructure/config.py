from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from pdfmerger.domain.errors import UsageError
from pdfmerger.domain.models import Orientation


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _get_orientation_env(name: str, default: str) -> str:
    try:
        return Orientation.parse(_get_str_env(name, default)).value
    except UsageError:
        return default


def _get_log_level_env(name: str, default: str) -> str:
    value = _get_str_env(name, default).upper()
    return value if isinstance(logging.getLevelName(value), int) else default


@dataclass(frozen=True)
class AppConfig:
    sink_mode: str = field(default_factory=lambda: _get_str_env("PDF_MERGER_SINK_MODE", "inline"))
    output_name: str = field(
        default_factory=lambda: _get_str_env("PDF_MERGER_OUTPUT_NAME", "newfile.pdf")
    )
    orientation: str = field(
        default_factory=lambda: _get_orientation_env("PDF_MERGER_ORIENTATION", "auto")
    )
    max_pdf_size_mb: int = field(default_factory=lambda: _get_int_env("PDF_MERGER_MAX_PDF_MB", 50))
    max_batch_size_mb: int = field(
        default_factory=lambda: _get_int_env("PDF_MERGER_MAX_BATCH_MB", 100)
    )
    log_level: str = field(
        default_factory=lambda: _get_log_level_env("PDF_MERGER_LOG_LEVEL", "INFO")
    )

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024

    @property
    def max_batch_size_bytes(self) -> int:
        return self.max_batch_size_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Read every setting from the environment at call time."""
        return cls()

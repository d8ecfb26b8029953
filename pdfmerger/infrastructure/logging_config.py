from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Route ``pdfmerger`` log records to stderr; call once from an entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("pdfmerger").setLevel(level)

from __future__ import annotations

from pdfmerger.domain.models import Orientation


def resolve_orientation(
    document_orientation: Orientation,
    global_orientation: Orientation,
    width: float,
    height: float,
) -> Orientation:
    """Pick the orientation of one output page.

    A document override wins over the merge-wide override; with neither set the
    page keeps the orientation of its own dimensions.
    """
    if document_orientation is not Orientation.AUTO:
        return document_orientation
    if global_orientation is not Orientation.AUTO:
        return global_orientation
    return Orientation.LANDSCAPE if width > height else Orientation.PORTRAIT


def output_page_size(orientation: Orientation, width: float, height: float) -> tuple[float, float]:
    """Arrange the page sides for ``orientation``.

    Forcing an orientation against the page's own shape swaps its sides, so the
    unscaled template drawn onto it can be cropped.
    """
    short_side, long_side = sorted((width, height))
    if orientation is Orientation.LANDSCAPE:
        return long_side, short_side
    if orientation is Orientation.PORTRAIT:
        return short_side, long_side
    return width, height

"""
Module: layout.geometry

Purpose:
    Pure page-geometry functions. Map paper size, orientation, margins and
    column count to a content area and column width, convert between
    millimetres, points and CSS pixels (96 DPI), and emit CSS custom
    properties for the computed geometry.

Key Functions:
    - page_dimensions(): Paper size in mm for an orientation
    - content_area(): Page minus margins (mm)
    - column_width(): Width of one column (mm)
    - content_area_px(), column_width_px(): Same values in px
    - page_css_variables(): CSS variables for renderers

Dependencies:
    - reportlab.lib.pagesizes: Paper sizes
    - reportlab.lib.units: mm / inch unit constants

Used By:
    - studysheet.layout.column_engine
    - studysheet.layout.overflow
    - studysheet.layout.stylesheet
"""

from __future__ import annotations

from reportlab.lib.pagesizes import A3, A4, LEGAL, LETTER, landscape, portrait
from reportlab.lib.units import inch, mm

from .config import Margins, Orientation, PageGeometryConfig, PaperSize
from .models import Dimensions

CSS_DPI = 96
PX_PER_POINT = CSS_DPI / inch  # reportlab points are 1/72 inch

_PAPER_POINTS: dict[str, tuple[float, float]] = {
    "a4": A4,
    "letter": LETTER,
    "legal": LEGAL,
    "a3": A3,
}


def _points_to_mm(points: float) -> float:
    # Letter/legal are defined in inches; keep 0.1 mm precision
    return round(points / mm, 1)


def page_dimensions(paper_size: PaperSize, orientation: Orientation) -> Dimensions:
    """
    Get page dimensions in millimetres.

    Landscape swaps the portrait base size's width and height.

    Example:
        >>> page_dimensions("a4", "landscape")
        Dimensions(width=297.0, height=210.0, unit='mm')
    """
    base = portrait(_PAPER_POINTS[paper_size])
    if orientation == "landscape":
        base = landscape(base)
    width, height = base
    return Dimensions(_points_to_mm(width), _points_to_mm(height), "mm")


def content_area(config: PageGeometryConfig) -> Dimensions:
    """Available content area after margins (mm)."""
    page = page_dimensions(config.paper_size, config.orientation)
    return Dimensions(
        width=page.width - config.margins.left - config.margins.right,
        height=page.height - config.margins.top - config.margins.bottom,
        unit="mm",
    )


def column_width(config: PageGeometryConfig) -> float:
    """Width of a single column in mm: (content width - gaps) / columns."""
    area = content_area(config)
    total_gap = (config.columns - 1) * config.column_gap
    return (area.width - total_gap) / config.columns


def mm_to_px(value: float) -> float:
    """Convert millimetres to CSS pixels at 96 DPI."""
    return value * mm * PX_PER_POINT


def px_to_mm(value: float) -> float:
    """Convert CSS pixels at 96 DPI to millimetres."""
    return value / PX_PER_POINT / mm


def pt_to_px(value: float) -> float:
    return value * PX_PER_POINT


def content_area_px(config: PageGeometryConfig) -> Dimensions:
    """Content area in CSS pixels; the unit all height estimates use."""
    area = content_area(config)
    return Dimensions(mm_to_px(area.width), mm_to_px(area.height), "px")


def column_width_px(config: PageGeometryConfig) -> float:
    return mm_to_px(column_width(config))


def default_page_config(
    paper_size: PaperSize = "a4",
    orientation: Orientation = "portrait",
) -> PageGeometryConfig:
    """Default geometry: 20/15 mm margins, two columns, 10 mm gap."""
    return PageGeometryConfig(
        paper_size=paper_size,
        orientation=orientation,
        margins=Margins(),
        columns=2,
        column_gap=10,
    )


def _px(value_mm: float) -> str:
    return f"{round(mm_to_px(value_mm), 2):g}px"


def page_css_variables(config: PageGeometryConfig) -> dict[str, str]:
    """
    CSS custom properties for the page geometry, in px at 96 DPI.

    Example:
        >>> page_css_variables(default_page_config())["--column-count"]
        '2'
    """
    page = page_dimensions(config.paper_size, config.orientation)
    area = content_area(config)
    return {
        "--page-width": _px(page.width),
        "--page-height": _px(page.height),
        "--margin-top": _px(config.margins.top),
        "--margin-right": _px(config.margins.right),
        "--margin-bottom": _px(config.margins.bottom),
        "--margin-left": _px(config.margins.left),
        "--content-width": _px(area.width),
        "--content-height": _px(area.height),
        "--column-count": str(config.columns),
        "--column-gap": _px(config.column_gap),
        "--column-width": _px(column_width(config)),
    }

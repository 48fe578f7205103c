"""
SurgiEval — Модуль звітів (report)

Компоненти:
- layout.py: ReportAssembler — детермінована розкладка сторінок
- renderer.py: PdfReportRenderer — малювання через reportlab
- builder.py: build_report / write_report

Приклад використання:
    from surgi_eval.report import build_report, write_report

    pdf_bytes = build_report(session.snapshot())
    path = write_report(session.snapshot(), output_dir="reports")
"""

from .layout import (
    ReportAssembler,
    ReportDocument,
    Page,
    Rect,
    Text,
    Line,
    STATUS_LABELS,
    STATUS_COLORS,
    EMPTY_BLOCK_PLACEHOLDER,
    report_filename,
    wrap_text,
)
from .renderer import PdfReportRenderer
from .builder import assemble_report, build_report, write_report


__all__ = [
    # Layout
    "ReportAssembler",
    "ReportDocument",
    "Page",
    "Rect",
    "Text",
    "Line",
    "STATUS_LABELS",
    "STATUS_COLORS",
    "EMPTY_BLOCK_PLACEHOLDER",
    "report_filename",
    "wrap_text",

    # Output
    "PdfReportRenderer",
    "assemble_report",
    "build_report",
    "write_report",
]

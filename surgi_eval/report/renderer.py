"""
SurgiEval — Рендер PDF звіту (reportlab)

PdfReportRenderer малює ReportDocument на reportlab canvas.
Координати документа — мм від верхнього лівого кута; reportlab
рахує в пунктах від нижнього лівого, тому y перевертається.

Canvas створюється з invariant=1: однаковий документ дає
однакові байти (без поточної дати та випадкового ID у PDF).
"""

from io import BytesIO
from typing import Optional, Tuple

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .layout import Line, Rect, ReportDocument, Text


def _rgb(color: Tuple[int, int, int]) -> Tuple[float, float, float]:
    return tuple(c / 255.0 for c in color)


class PdfReportRenderer:
    """
    Приклад:
        pdf_bytes = PdfReportRenderer().render(document)
        Path(document.filename).write_bytes(pdf_bytes)
    """

    def __init__(self, author: Optional[str] = None):
        self.author = author

    def render(self, document: ReportDocument) -> bytes:
        buf = BytesIO()
        c = canvas.Canvas(
            buf,
            pagesize=(document.page_width * mm, document.page_height * mm),
            invariant=1,
        )
        c.setTitle(document.title)
        if self.author:
            c.setAuthor(self.author)

        for page in document.pages:
            for element in page.elements:
                self._draw(c, document, element)
            if page.footer is not None:
                self._draw(c, document, page.footer)
            c.showPage()

        c.save()
        return buf.getvalue()

    # -------------------------------------------------------------------------

    def _draw(self, c: canvas.Canvas, document: ReportDocument, element) -> None:
        height = document.page_height

        if isinstance(element, Rect):
            if element.fill is not None:
                c.setFillColorRGB(*_rgb(element.fill))
            if element.stroke is not None:
                c.setStrokeColorRGB(*_rgb(element.stroke))
                c.setLineWidth(0.2 * mm)
            c.rect(
                element.x * mm,
                (height - element.y - element.height) * mm,
                element.width * mm,
                element.height * mm,
                stroke=1 if element.stroke is not None else 0,
                fill=1 if element.fill is not None else 0,
            )

        elif isinstance(element, Text):
            c.setFont(element.font, element.size)
            c.setFillColorRGB(*_rgb(element.color))
            x, y = element.x * mm, (height - element.y) * mm
            if element.align == "right":
                c.drawRightString(x, y, element.text)
            elif element.align == "center":
                c.drawCentredString(x, y, element.text)
            else:
                c.drawString(x, y, element.text)

        elif isinstance(element, Line):
            c.setStrokeColorRGB(*_rgb(element.color))
            c.setLineWidth(element.width * mm)
            c.line(
                element.x1 * mm, (height - element.y1) * mm,
                element.x2 * mm, (height - element.y2) * mm,
            )

        else:
            raise TypeError(f"Unknown report element: {type(element).__name__}")

"""
PDF serialization of laid-out pages with ReportLab's canvas.

Pages use a top-down y axis; the canvas uses bottom-up, so every y is
flipped against the page height here and nowhere else.
"""

import io
from typing import Iterable, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from quill.contexts.rendering.geometry import PageGeometry
from quill.contexts.rendering.paginated_renderer import ALIGN_CENTER, ALIGN_RIGHT, Page

MINIMAL_FONT = "Helvetica"
MINIMAL_FONT_SIZE = 11
MINIMAL_LINE_HEIGHT = 14
MINIMAL_MARGIN = 56.69


def write_pdf(pages: List[Page], geometry: PageGeometry, title: Optional[str] = None) -> bytes:
    """
    Serialize pages to PDF bytes.

    Args:
        pages: Pages from paginated_renderer.render()
        geometry: Geometry the pages were laid out with
        title: Optional PDF document title metadata

    Returns:
        PDF file content; an empty page list still yields one blank page
    """
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(geometry.width, geometry.height))
    if title:
        pdf.setTitle(title)

    for page in pages or [Page(number=1)]:
        for rule in page.rules:
            y = geometry.height - rule.y
            pdf.setLineWidth(rule.width)
            pdf.line(rule.x1, y, rule.x2, y)

        for run in page.runs:
            y = geometry.height - run.y
            pdf.setFont(run.font.font_name, run.font.size)
            if run.align == ALIGN_RIGHT:
                pdf.drawRightString(run.x, y, run.text)
            elif run.align == ALIGN_CENTER:
                pdf.drawCentredString(run.x, y, run.text)
            else:
                pdf.drawString(run.x, y, run.text)

        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def write_minimal_pdf(lines: Iterable[str], page_size=A4) -> bytes:
    """
    One-page PDF drawn straight onto the canvas, without the renderer.

    Last-resort output when even the fallback page cannot be rendered. Lines
    are drawn as given from the top-left corner; anything past the bottom
    margin is left out.
    """
    width, height = page_size
    margin = MINIMAL_MARGIN

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    pdf.setFont(MINIMAL_FONT, MINIMAL_FONT_SIZE)

    y = height - margin
    for line in lines:
        if y < margin:
            break
        pdf.drawString(margin, y, line)
        y -= MINIMAL_LINE_HEIGHT

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()

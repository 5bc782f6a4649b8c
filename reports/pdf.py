"""Render a ReportDocument to PDF bytes with reportlab."""

import logging
from html import escape
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from models.errors import ReportGenerationError

from .exporters import RUPEE, ReportDocument

logger = logging.getLogger(__name__)

# The standard PDF fonts have no rupee glyph.
PDF_CURRENCY = "Rs. "

HEADER_BLUE = colors.HexColor("#3B82F6")
ROW_ALT = colors.HexColor("#F8FAFC")
TOTALS_BG = colors.HexColor("#F1F5F9")
SLATE = colors.HexColor("#1E293B")


def _pdf_text(text: str) -> str:
    """Paragraph markup is XML, so plain text is escaped."""
    return escape(text.replace(RUPEE, PDF_CURRENCY), quote=False)


def _build_story(document: ReportDocument, width: float) -> list:
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="ReportTitle", parent=styles["Heading1"], textColor=SLATE))
    styles.add(ParagraphStyle(name="ReportSubtitle", parent=styles["Heading3"], textColor=SLATE))
    cell_style = ParagraphStyle(name="Cell", parent=styles["BodyText"], fontSize=9, leading=11)

    story: list = [Paragraph(_pdf_text(document.title), styles["ReportTitle"])]
    if document.subtitle:
        story.append(Paragraph(_pdf_text(document.subtitle), styles["ReportSubtitle"]))
    for line in document.summary:
        story.append(Paragraph(_pdf_text(line), styles["BodyText"]))
    story.append(Spacer(1, 12))

    header = list(document.columns)
    body = [[Paragraph(_pdf_text(cell), cell_style) for cell in row] for row in document.formatted_rows(PDF_CURRENCY)]
    data = [header, *body]
    totals = document.formatted_totals(PDF_CURRENCY)
    if totals is not None:
        data.append(totals)

    table = Table(data, colWidths=[width / len(header)] * len(header), repeatRows=1)
    commands = [
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
    commands.extend(("BACKGROUND", (0, i), (-1, i), ROW_ALT) for i in range(2, len(body) + 1, 2))
    for column in document.money_columns:
        commands.append(("ALIGN", (column, 1), (column, -1), "RIGHT"))
    if totals is not None:
        commands.extend(
            [
                ("BACKGROUND", (0, -1), (-1, -1), TOTALS_BG),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ]
        )
    table.setStyle(TableStyle(commands))
    story.append(table)
    return story


def render_pdf(document: ReportDocument) -> bytes:
    """
    Render the document as an A4 PDF.

    Raises:
        ReportGenerationError: if reportlab fails to build the document.
    """
    buf = BytesIO()

    def draw_footer(canvas, doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.grey)
        if document.footer:
            canvas.drawString(36, 20, document.footer)
        canvas.drawRightString(A4[0] - 36, 20, f"Page {doc.page}")
        canvas.restoreState()

    try:
        pdf = SimpleDocTemplate(
            buf, pagesize=A4, rightMargin=36, leftMargin=36, topMargin=36, bottomMargin=40, title=document.title
        )
        pdf.build(_build_story(document, pdf.width), onFirstPage=draw_footer, onLaterPages=draw_footer)
    except Exception as exc:  # noqa: BLE001
        logger.error(f"Failed to render {document.filename}: {exc}")
        raise ReportGenerationError(f"Could not generate {document.filename}: {exc}") from exc
    return buf.getvalue()

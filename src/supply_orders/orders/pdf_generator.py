"""
Order Document – PDF Generator
==============================

Generates one purchase-order PDF per order group.

Layout: title, order id / date / supplier on the left, company block and
the group's QR code on the right, then one table row per item:
PRODUCT | ORDERER | FACTORY | QTY | URGENT, followed by the delivery note.

Guardrails:
- Writes to ORDER_FOLDER (or the given directory) only.
- Any reportlab failure is raised as RenderError so the caller can stop the
  submission before the ledger is touched.
"""
from __future__ import annotations

import os
from datetime import datetime
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from supply_orders import config
from supply_orders.exceptions import RenderError
from supply_orders.models import Employee, OrderGroup
from supply_orders.orders.qr_code import build_payload, encode_payload, qr_drawing


# ── Japanese font registration ─────────────────────────────────
# Product, supplier and employee names are mostly Japanese. Prefer an
# installed Noto/Windows TTF; otherwise use reportlab's built-in CID font,
# which needs no font file but is only available to PDF viewers with
# Japanese support.

_JP_FONT_NAME: Optional[str] = None

_CANDIDATE_FONTS = [
    ("NotoSansJP", "/usr/share/fonts/truetype/noto/NotoSansJP-Regular.ttf", None),
    ("NotoSansJP", "/usr/share/fonts/noto/NotoSansJP-Regular.ttf", None),
    ("IPAGothic", "/usr/share/fonts/opentype/ipafont-gothic/ipag.ttf", None),
    ("MSGothic", os.path.join(os.environ.get("WINDIR", "C:\\Windows"), "Fonts", "msgothic.ttc"), 0),
]

for _font_name, _font_path, _subfont in _CANDIDATE_FONTS:
    if os.path.exists(_font_path):
        try:
            if _subfont is None:
                pdfmetrics.registerFont(TTFont(_font_name, _font_path))
            else:
                pdfmetrics.registerFont(TTFont(_font_name, _font_path, subfontIndex=_subfont))
            _JP_FONT_NAME = _font_name
            break
        except Exception:
            continue

if _JP_FONT_NAME is None:
    try:
        pdfmetrics.registerFont(UnicodeCIDFont("HeiseiKakuGo-W5"))
        _JP_FONT_NAME = "HeiseiKakuGo-W5"
    except Exception:
        _JP_FONT_NAME = None


def _font() -> str:
    return _JP_FONT_NAME or "Helvetica"


def pdf_filename(order_id: str) -> str:
    return f"{order_id}.pdf"


def generate_order_pdf(
    group: OrderGroup,
    requester: Employee,
    when: Optional[datetime] = None,
    output_dir: Optional[str] = None,
) -> str:
    """
    Generate the purchase-order PDF for one order group.

    Args:
        group: The supplier group being ordered.
        requester: Employee placing the order (label and factory per line).
        when: Order date. Defaults to now; also stamped into the QR payload.
        output_dir: Directory for the PDF. Defaults to config.ORDER_FOLDER.

    Returns:
        Absolute path to the generated PDF file.

    Raises:
        RenderError: if the document or its QR code cannot be built.
    """
    when = when or datetime.now()
    out_dir = output_dir or config.ORDER_FOLDER
    os.makedirs(out_dir, exist_ok=True)
    pdf_path = os.path.join(out_dir, pdf_filename(group.order_id))

    try:
        doc = SimpleDocTemplate(
            pdf_path,
            pagesize=A4,
            leftMargin=15 * mm,
            rightMargin=15 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title=group.order_id,
        )
        doc.build(_build_elements(group, requester, when))
    except Exception as e:
        # a half-built document must not be served as the order PDF
        if os.path.exists(pdf_path):
            os.remove(pdf_path)
        if isinstance(e, RenderError):
            raise
        raise RenderError(group.order_id, f"PDF rendering failed: {e}") from e

    return os.path.abspath(pdf_path)


def _build_elements(group: OrderGroup, requester: Employee, when: datetime) -> List:
    styles = getSampleStyleSheet()
    font = _font()
    elements = []

    # ── Header ──────────────────────────────────────────────────
    title_style = ParagraphStyle(
        "OrderTitle",
        parent=styles["Heading1"],
        fontName=font,
        fontSize=20,
        alignment=TA_CENTER,
        spaceAfter=8,
    )
    info_style = ParagraphStyle(
        "OrderInfo", parent=styles["Normal"], fontName=font, fontSize=10, alignment=TA_LEFT,
    )
    vendor_style = ParagraphStyle(
        "Vendor", parent=info_style, fontSize=14, spaceBefore=6,
    )
    company_style = ParagraphStyle(
        "Company", parent=info_style, fontSize=8, alignment=TA_RIGHT,
    )

    elements.append(Paragraph("PURCHASE ORDER", title_style))

    left = [
        Paragraph(f"Order date: {when.strftime('%Y-%m-%d')}", info_style),
        Paragraph(f"Order ID: {group.order_id}", info_style),
        Paragraph(escape(group.supplier), vendor_style),
    ]
    right = [Paragraph(escape(config.COMPANY_NAME), ParagraphStyle("CompanyName", parent=company_style, fontSize=10))]
    right += [Paragraph(escape(line), company_style) for line in config.COMPANY_CONTACT_LINES]
    # QR sits top right so it is always in the same place for scanning
    right.append(qr_drawing(encode_payload(build_payload(group, requester, when)), size=60))

    header = Table([[left, right]], colWidths=[100 * mm, 80 * mm])
    header.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
        ("LINEBELOW", (0, 0), (-1, 0), 1.5, colors.black),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
    ]))
    elements.append(header)
    elements.append(Spacer(1, 6 * mm))

    # ── Table ───────────────────────────────────────────────────
    table_data = [["PRODUCT", "ORDERER", "FACTORY", "QTY", "URGENT"]]
    for line in group.lines:
        table_data.append([
            Paragraph(escape(line.product.name), info_style),
            requester.label,
            requester.factory,
            f"{line.quantity} {line.product.unit}",
            config.URGENT_MARKER if line.urgent else "",
        ])

    # A4 = 210mm, minus 30mm margins = 180mm usable
    col_widths = [72 * mm, 36 * mm, 27 * mm, 27 * mm, 18 * mm]
    table = Table(table_data, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#eeeeee")),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ("ALIGN", (1, 1), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.75, colors.black),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
    ]))
    elements.append(table)

    # ── Footer ──────────────────────────────────────────────────
    elements.append(Spacer(1, 6 * mm))
    note_style = ParagraphStyle(
        "Note",
        parent=styles["Normal"],
        fontName=font,
        fontSize=8,
        textColor=colors.HexColor("#666666"),
        alignment=TA_CENTER,
    )
    elements.append(Paragraph(escape(config.ORDER_DOCUMENT_NOTE), note_style))
    return elements

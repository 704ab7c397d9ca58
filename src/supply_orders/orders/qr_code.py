"""
Order QR codes.

Each order group carries a small JSON record in a QR code printed on its
order document. Receiving staff scan it to jump straight to the order.
The JSON is ASCII-escaped so supplier names in any script survive the
QR byte mode unchanged.
"""
from __future__ import annotations

import json
import os
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from reportlab.graphics import renderSVG
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing

from supply_orders import config
from supply_orders.exceptions import RenderError
from supply_orders.models import Employee, OrderGroup


def build_payload(group: OrderGroup, requester: Employee,
                  when: Optional[datetime] = None) -> Dict[str, Any]:
    """The record encoded in a group's QR code."""
    when = when or datetime.now()
    return {
        'id': group.order_id,
        'requesterId': requester.code,
        'total': group.subtotal,
        'itemCount': group.item_count,
        'date': when.strftime('%Y-%m-%d'),
        'supplier': group.supplier,
    }


def encode_payload(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=True, separators=(',', ':'))


def parse_scanned_text(text: str) -> Tuple[str, bool]:
    """
    Turn whatever the scanner read into a lookup term.

    Returns ``(term, is_payload)``. A JSON payload with an ``id`` yields
    that exact order id and True; anything else (a bare order id typed or
    printed as text) is returned as-is with False.
    """
    text = (text or '').strip()
    try:
        data = json.loads(text)
    except ValueError:
        return text, False
    if isinstance(data, dict) and data.get('id'):
        return str(data['id']).strip(), True
    return text, False


def qr_drawing(data: str, size: float = 60.0) -> Drawing:
    """A reportlab Drawing of ``data`` as a QR code, ``size`` points square."""
    widget = QrCodeWidget(data)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def render_qr_svg(group: OrderGroup, requester: Employee,
                  when: Optional[datetime] = None, size: float = 200.0) -> str:
    """
    Render a group's QR code as an SVG document.

    Raises:
        RenderError: if reportlab cannot encode or draw the payload.
    """
    payload = encode_payload(build_payload(group, requester, when))
    try:
        return renderSVG.drawToString(qr_drawing(payload, size))
    except Exception as e:
        raise RenderError(group.order_id, f"QR rendering failed: {e}") from e


def qr_filename(order_id: str) -> str:
    return f"{order_id}.svg"


def save_qr_svg(group: OrderGroup, requester: Employee, when: Optional[datetime] = None,
                output_dir: Optional[str] = None) -> str:
    """
    Write a group's QR code image next to its order PDF.

    Returns:
        Absolute path to the SVG file.

    Raises:
        RenderError: if the code cannot be drawn or written.
    """
    out_dir = output_dir or config.ORDER_FOLDER
    svg = render_qr_svg(group, requester, when)
    svg_path = os.path.join(out_dir, qr_filename(group.order_id))
    try:
        os.makedirs(out_dir, exist_ok=True)
        with open(svg_path, 'w', encoding='utf-8') as f:
            f.write(svg)
    except OSError as e:
        raise RenderError(group.order_id, f"QR image could not be saved: {e}") from e
    return os.path.abspath(svg_path)

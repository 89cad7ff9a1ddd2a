from __future__ import annotations

from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from storefront_api import config
from storefront_api.store.order_models import OrderEntity


def _fmt(amount: float) -> str:
    value = f"{float(amount):.2f}".rstrip("0").rstrip(".")
    return f"{config.settings.currency} {value}"


def invoice_filename(order_id: int | str) -> str:
    return f"{config.settings.store_name}_Order_{order_id}.pdf"


def generate_invoice_pdf(order: OrderEntity) -> bytes:
    settings = config.settings
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    w, h = A4

    y = h - 50
    c.setFont("Helvetica-Bold", 18)
    c.drawString(40, y, f"{settings.store_name} Invoice")
    y -= 28

    c.setFont("Helvetica", 10)
    c.drawString(40, y, f"Order ID: {order.id}")
    y -= 14
    if order.info.created_at is not None:
        c.drawString(40, y, f"Order Date: {order.info.created_at:%Y-%m-%d %H:%M}")
        y -= 14
    c.drawString(40, y, f"Status: {order.info.status.value}")
    y -= 24

    customer = order.info.customer
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, y, "Customer Details")
    y -= 16
    c.setFont("Helvetica", 10)
    for label, value in (
        ("Name", customer.name),
        ("Email", customer.email),
        ("Phone", customer.phone),
        ("Address", customer.address),
    ):
        c.drawString(40, y, f"{label}: {value or '-'}")
        y -= 14
    y -= 10

    # header
    c.setFont("Helvetica-Bold", 10)
    c.drawString(40, y, "Product")
    c.drawString(320, y, "Qty")
    c.drawString(380, y, "Price")
    c.drawString(460, y, "Total")
    y -= 10
    c.line(40, y, 550, y)
    y -= 16

    c.setFont("Helvetica", 10)
    for line in order.info.lines:
        name = line.description if not line.size else f"{line.description} ({line.size})"
        c.drawString(40, y, name[:48])
        c.drawString(320, y, str(line.quantity))
        c.drawString(380, y, _fmt(line.unit_price + line.custom_price))
        c.drawString(460, y, _fmt(line.line_total))
        y -= 18
        if y < 80:
            c.showPage()
            y = h - 50
            c.setFont("Helvetica", 10)

    y -= 10
    c.line(40, y, 550, y)
    y -= 18
    c.setFont("Helvetica-Bold", 12)
    c.drawRightString(550, y, f"Grand Total: {_fmt(order.info.total)}")
    y -= 36
    c.setFont("Helvetica", 10)
    c.drawString(40, y, f"Thank you for shopping with {settings.store_name}.")

    c.save()
    return buf.getvalue()

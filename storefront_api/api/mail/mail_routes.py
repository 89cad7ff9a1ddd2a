import logging
from http import HTTPStatus

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from storefront_api import config
from storefront_api.services import mailer
from storefront_api.services.invoice_pdf import generate_invoice_pdf, invoice_filename
from storefront_api.store import order_queries
from storefront_api.store.order_models import OrderEntity

from .mail_contracts import ContactRequest, FaqItem, SendInvoiceRequest

logger = logging.getLogger(__name__)

mail_router = APIRouter(tags=["mail"])

FAQ_ITEMS = [
    FaqItem(
        q="What is the material of the clothing?",
        a="Our clothing is made from a blend of breathable cotton and polyester for comfort and durability.",
    ),
    FaqItem(
        q="What are the available sizes?",
        a="We offer sizes S, M, L, and XL. Check each product page for exact measurements.",
    ),
    FaqItem(
        q="What is the return policy?",
        a="You can return items within 14 days of delivery in original condition for a refund.",
    ),
    FaqItem(
        q="How long does shipping take?",
        a="Standard shipping typically takes 3-7 business days depending on your location.",
    ),
    FaqItem(
        q="Do you offer international shipping?",
        a="Yes, we ship internationally. Shipping costs and times vary by country.",
    ),
]


def _error(status: HTTPStatus, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status)


@mail_router.get("/faq")
async def get_faq() -> list[FaqItem]:
    return FAQ_ITEMS


@mail_router.post("/api/send-contact")
def send_contact(body: ContactRequest):
    if body.missing_fields():
        return _error(HTTPStatus.BAD_REQUEST, "Missing fields")
    if not config.settings.email_configured:
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, "Email not configured")

    try:
        mailer.send_mail(mailer.contact_mail(body.name, body.subject, body.email, body.message))
    except Exception as e:
        logger.exception("send-contact error")
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, str(e) or "Failed")
    return {"ok": True}


def _resolve_order(body: SendInvoiceRequest) -> OrderEntity | None:
    if body.order is not None:
        return body.order.as_order_entity(body.orderId)
    if body.orderId is None:
        return None
    try:
        order_id = int(body.orderId)
    except (TypeError, ValueError):
        return None
    return order_queries.get_one(order_id)


@mail_router.post("/api/send-invoice")
def send_invoice(body: SendInvoiceRequest):
    order = _resolve_order(body)
    if order is None and body.orderId is not None:
        return _error(HTTPStatus.NOT_FOUND, "Order not found")

    recipient = body.sendTo or (order.info.customer.email if order is not None else None)
    if not recipient:
        return _error(HTTPStatus.BAD_REQUEST, "No recipient")
    if order is None:
        return _error(HTTPStatus.BAD_REQUEST, "No order")
    if not config.settings.email_configured:
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, "Email not configured")

    store_name = config.settings.store_name
    try:
        pdf = generate_invoice_pdf(order)
        mailer.send_mail(
            mailer.OutgoingMail(
                to=recipient,
                subject=f"Your {store_name} Order {order.id}",
                text="Thank you for your order. Attached is your invoice.",
                attachments=[mailer.Attachment(filename=invoice_filename(order.id), content=pdf)],
            )
        )
    except Exception as e:
        logger.exception("send-invoice error")
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, str(e) or "Failed")
    return {"ok": True}

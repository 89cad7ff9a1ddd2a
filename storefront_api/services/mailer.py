from __future__ import annotations

import html
import logging
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage

from storefront_api import config

logger = logging.getLogger(__name__)


class EmailNotConfigured(RuntimeError):
    pass


@dataclass(slots=True)
class Attachment:
    filename: str
    content: bytes
    maintype: str = "application"
    subtype: str = "pdf"


@dataclass(slots=True)
class OutgoingMail:
    to: str
    subject: str
    text: str
    html: str | None = None
    reply_to: str | None = None
    sender_name: str | None = None
    attachments: list[Attachment] = field(default_factory=list)


def _ssl_context() -> ssl.SSLContext:
    ctx = ssl.create_default_context()
    if config.settings.smtp_allow_insecure:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def build_message(mail: OutgoingMail) -> EmailMessage:
    settings = config.settings
    msg = EmailMessage()
    msg["From"] = f"{mail.sender_name or settings.sender_name} <{settings.email_user}>"
    msg["To"] = mail.to
    msg["Subject"] = mail.subject
    if mail.reply_to:
        msg["Reply-To"] = mail.reply_to
    msg.set_content(mail.text)
    if mail.html:
        msg.add_alternative(mail.html, subtype="html")
    for att in mail.attachments:
        msg.add_attachment(
            att.content,
            maintype=att.maintype,
            subtype=att.subtype,
            filename=att.filename,
        )
    return msg


def send_mail(mail: OutgoingMail) -> None:
    settings = config.settings
    if not settings.email_configured:
        raise EmailNotConfigured("Email not configured")
    msg = build_message(mail)
    with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=_ssl_context()) as smtp:
        smtp.login(settings.email_user, settings.email_pass)
        smtp.send_message(msg)
    logger.info("sent mail %r to %s", mail.subject, mail.to)


def contact_mail(name: str, subject: str, email: str, message: str) -> OutgoingMail:
    settings = config.settings
    body_html = (
        f"<p><strong>Name:</strong> {html.escape(name)}</p>\n"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>\n"
        "<p><strong>Message:</strong></p>\n"
        f"<p>{html.escape(message).replace(chr(10), '<br/>')}</p>"
    )
    return OutgoingMail(
        to=settings.contact_receiver or settings.email_user,
        subject=f"Contact form: {subject}",
        text=f"Name: {name}\nEmail: {email}\n\n{message}",
        html=body_html,
        reply_to=email,
        sender_name=f"{settings.sender_name} Contact",
    )

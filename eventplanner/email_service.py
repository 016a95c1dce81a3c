"""
Email Service
SMTP delivery for calendar invitations and Resend for account mail
"""

import logging
import smtplib
import ssl
from datetime import datetime
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from io import BytesIO
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from . import config
from .email_templates import APP_NAME, password_reset_template

logger = logging.getLogger(__name__)

resend.api_key = config.RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(BytesIO(mjml_content.encode("utf-8")))
        # mjml_to_html returns a mapping with 'html' and 'errors' keys
        if isinstance(result, dict):
            html, errors = result.get("html", ""), result.get("errors")
        else:
            html, errors = result.html, getattr(result, "errors", None)
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        return html
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise RuntimeError(f"Failed to compile MJML template: {str(e)}") from e


def smtp_configured() -> bool:
    return bool(config.EMAIL_USER and config.EMAIL_PASS)


def send_via_smtp(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: Optional[str] = None,
    attachments: Optional[list[dict]] = None,
) -> dict:
    """
    Send email through the configured SMTP account.

    Each attachment is a dict with "filename" and "content", plus optional
    "maintype", "subtype" and "params" (extra Content-Type parameters,
    e.g. {"method": "REQUEST"} for calendar parts).

    smtplib and socket errors propagate unchanged so callers can tell
    authentication, connection and addressing failures apart.
    """
    host = config.EMAIL_HOST
    port = config.EMAIL_PORT
    sender = from_address or f"{APP_NAME} <{config.EMAIL_USER}>"

    msg = MIMEMultipart("mixed")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to if isinstance(to, str) else ", ".join(to)

    msg.attach(MIMEText(html_content, "html"))

    for attachment in attachments or []:
        part = MIMEBase(attachment.get("maintype", "application"), attachment.get("subtype", "octet-stream"))
        for key, value in (attachment.get("params") or {}).items():
            part.set_param(key, value)
        part.set_payload(attachment["content"])
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=attachment["filename"])
        msg.attach(part)

    recipients = [to] if isinstance(to, str) else to

    if port == 465:
        context = ssl.create_default_context()
        server = smtplib.SMTP_SSL(host, port, context=context, timeout=30)
    else:
        server = smtplib.SMTP(host, port, timeout=30)
        if config.EMAIL_USE_TLS:
            context = ssl.create_default_context()
            server.starttls(context=context)

    try:
        server.login(config.EMAIL_USER, config.EMAIL_PASS)
        server.sendmail(config.EMAIL_USER, recipients, msg.as_string())
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            logger.debug("SMTP quit failed after send attempt")

    logger.info(f"✅ SMTP email sent to {recipients} via {host}")
    return {"id": f"smtp-{datetime.utcnow().timestamp()}", "success": True}


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email using Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or config.EMAIL_FROM_ADDRESS

    if not config.RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise RuntimeError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {to}")
        resend.api_key = config.RESEND_API_KEY
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise RuntimeError(f"Failed to send email: {str(e)}") from e


async def send_password_reset_email(to: str, reset_link: str) -> dict:
    """Send password reset email"""
    return await send_email(
        to=to,
        subject=f"Reset Your Password - {APP_NAME}",
        mjml_content=password_reset_template(reset_link),
    )

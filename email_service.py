"""
Email Service
Order confirmations, contact form notifications, newsletter welcome
"""
import html
import logging
import smtplib
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import config

logger = logging.getLogger(__name__)

SIGNATURE = "<p>Best regards,<br>Frtl Creative Labs Team</p>"


def send_email(to: str, subject: str, html_content: str) -> bool:
    """Send an HTML email. Returns False when SMTP is not configured; raises on delivery errors."""
    if not config.SMTP_HOST:
        logger.warning(f"SMTP not configured, skipping email '{subject}' to {to}")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = config.FROM_EMAIL
    msg["To"] = to
    msg.attach(MIMEText(html_content, "html"))

    with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT) as server:
        server.starttls()
        if config.SMTP_USER and config.SMTP_PASSWORD:
            server.login(config.SMTP_USER, config.SMTP_PASSWORD)
        server.sendmail(config.FROM_EMAIL, to, msg.as_string())

    logger.info(f"Email '{subject}' sent to {to}")
    return True


def _layout(body: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        {body}
        {SIGNATURE}
    </div>
    """


def send_order_confirmation_email(order: dict, to: str) -> bool:
    number = html.escape(order["order_number"])
    code_line = ""
    if order.get("unique_code"):
        code_line = f"<p><strong>Unique Code:</strong> {html.escape(order['unique_code'])}</p>"

    body = f"""
        <h2 style="color: #333;">Order Confirmation</h2>
        <p>Thank you for your order!</p>
        <div style="background: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">
            <h3>Order Details</h3>
            <p><strong>Order Number:</strong> {number}</p>
            <p><strong>Total:</strong> ${order['total'] / 100:.2f}</p>
            <p><strong>Status:</strong> {html.escape(order['status'])}</p>
            {code_line}
        </div>
        <p>We'll send you another email when your order ships.</p>
    """
    return send_email(to, f"Order Confirmation - {order['order_number']}", _layout(body))


def send_contact_form_email(contact: dict) -> bool:
    name = html.escape(contact["name"])
    email = html.escape(contact["email"])
    subject = html.escape(contact["subject"])
    message = html.escape(contact["message"])
    submitted = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    body = f"""
        <h2 style="color: #333;">New Contact Form Submission</h2>
        <div style="background: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">
            <p><strong>Name:</strong> {name}</p>
            <p><strong>Email:</strong> {email}</p>
            <p><strong>Subject:</strong> {subject}</p>
            <p><strong>Message:</strong></p>
            <p style="background: white; padding: 15px; border-radius: 3px;">{message}</p>
        </div>
        <p>Submitted on: {submitted}</p>
    """
    return send_email(config.ADMIN_EMAIL, f"New Contact Form Submission: {contact['subject']}", _layout(body))


def send_newsletter_confirmation(email: str) -> bool:
    body = """
        <h2 style="color: #333;">Welcome to our Newsletter!</h2>
        <p>Thank you for subscribing to the Frtl Creative Labs newsletter.</p>
        <p>You'll receive updates about:</p>
        <ul>
            <li>New tech initiatives</li>
            <li>Product launches</li>
            <li>Industry insights</li>
            <li>Special offers</li>
        </ul>
    """
    return send_email(email, "Welcome to Frtl Creative Labs Newsletter!", _layout(body))

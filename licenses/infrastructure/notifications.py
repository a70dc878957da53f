"""
Credential notification delivery.

Renders the credentials PDF with reportlab and sends it by email through
Django's mail framework.
"""
import io
import logging
from datetime import date
from typing import Any, Dict

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from licenses.infrastructure.models import NotificationDeadLetter

logger = logging.getLogger(__name__)


def _licensing_setting(name: str, default: Any = None) -> Any:
    return getattr(settings, "LICENSING", {}).get(name, default)


def render_credentials_pdf(license_data: Dict[str, Any]) -> bytes:
    """
    Render the credentials letter.

    Args:
        license_data: License fields (customer_name, system_id, password)

    Returns:
        PDF document bytes
    """
    product_name = _licensing_setting("PRODUCT_NAME", "Licensed Product")
    support_team = _licensing_setting("SUPPORT_TEAM", f"{product_name} Support Team")

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    left_margin = 50
    y = height - 70

    c.setFont("Helvetica-Bold", 20)
    c.drawCentredString(width / 2, y, f"{product_name} License")
    y -= 40

    c.setFont("Helvetica", 12)
    c.drawRightString(width - left_margin, y, f"Date: {date.today().isoformat()}")
    y -= 30
    c.drawString(left_margin, y, f"Dear {license_data['customer_name']},")
    y -= 25
    c.drawString(
        left_margin,
        y,
        f"Thank you for choosing {product_name}. Below are your license activation credentials:",
    )
    y -= 20

    # Credentials box
    box_height = 70
    c.rect(left_margin, y - box_height, width - 2 * left_margin, box_height, stroke=1, fill=0)
    c.drawString(left_margin + 20, y - 25, f"System ID: {license_data['system_id']}")
    c.drawString(left_margin + 20, y - 50, f"Password: {license_data['password']}")
    y -= box_height + 30

    c.drawString(
        left_margin, y, "Please keep these credentials secure and do not share them with anyone."
    )
    y -= 40
    c.drawString(left_margin, y, "Best regards,")
    y -= 16
    c.drawString(left_margin, y, support_team)

    c.showPage()
    c.save()
    return buffer.getvalue()


def deliver_license_credentials(license_data: Dict[str, Any], reason: str) -> None:
    """
    Send the credentials email with the PDF attached.

    Args:
        license_data: License fields as produced by LicenseRecord.to_dict
        reason: Why the credentials are sent (created or updated)
    """
    product_name = _licensing_setting("PRODUCT_NAME", "Licensed Product")
    context = {
        "license": license_data,
        "product_name": product_name,
        "reason": reason,
    }
    subject = f"Your License Activation Credentials for {product_name} License."
    text_body = render_to_string("licenses/credentials_email.txt", context)
    html_body = render_to_string("licenses/credentials_email.html", context)

    message = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=_licensing_setting("NOTIFICATION_FROM_EMAIL", settings.DEFAULT_FROM_EMAIL),
        to=[license_data["email"]],
    )
    message.attach_alternative(html_body, "text/html")
    message.attach(
        f"license-{license_data['system_id']}.pdf",
        render_credentials_pdf(license_data),
        "application/pdf",
    )
    message.send(fail_silently=False)
    logger.info(
        "Credentials email sent",
        extra={"system_id": license_data["system_id"], "reason": reason},
    )


def record_dead_letter(
    license_data: Dict[str, Any], reason: str, error: Exception, attempts: int
) -> NotificationDeadLetter:
    """
    Record a notification that could not be delivered.

    Args:
        license_data: License fields (the password is not stored)
        reason: Why the credentials were sent
        error: Last delivery error
        attempts: Number of delivery attempts made

    Returns:
        Created dead letter row
    """
    return NotificationDeadLetter.objects.create(
        customer_name=license_data["customer_name"],
        system_id=license_data["system_id"],
        recipient=license_data["email"],
        reason=reason,
        error=f"{type(error).__name__}: {error}",
        attempts=attempts,
    )

import html
from datetime import datetime, timezone
from typing import Optional

import sib_api_v3_sdk
import urllib3
from sib_api_v3_sdk.rest import ApiException
from sqlalchemy.exc import SQLAlchemyError

from studio.core.config import settings
from studio.core.errors import EmailDeliveryError
from studio.core.logger import logger
from studio.db.models import EmailNotification
from studio.repositories.base import NotificationRepository


# -------------------------------------------------------------------
# Brevo client setup (created on first send)
# -------------------------------------------------------------------
_brevo = None


def _brevo_api():
    global _brevo

    if _brevo is None:
        if not settings.BREVO_API_KEY:
            raise EmailDeliveryError("BREVO_API_KEY is not set")

        config = sib_api_v3_sdk.Configuration()
        config.api_key["api-key"] = settings.BREVO_API_KEY

        client = sib_api_v3_sdk.ApiClient(config)
        _brevo = sib_api_v3_sdk.TransactionalEmailsApi(client)

    return _brevo


# -------------------------------------------------------------------
# Internal helper (ONLY place that talks to Brevo)
# -------------------------------------------------------------------
def _send_email(*, to: str, subject: str, html_content: str) -> None:
    """
    Internal helper for sending Brevo transactional emails.
    Raises EmailDeliveryError on failure.
    """
    api = _brevo_api()

    try:
        email = sib_api_v3_sdk.SendSmtpEmail(
            to=[{"email": to}],
            sender={"email": settings.EMAIL_SENDER, "name": settings.EMAIL_SENDER_NAME},
            subject=subject,
            html_content=html_content,
        )
        api.send_transac_email(email)

    except (ApiException, urllib3.exceptions.HTTPError) as e:
        raise EmailDeliveryError(f"Brevo email failed ({subject}): {e}") from e


# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------
def _details_block(booking, package, title: str, with_price: bool = True) -> str:
    package_name = html.escape(package.name if package else "Unknown Package")
    price = package.price if package and package.price is not None else 0

    rows = [
        f"<p><strong>Package:</strong> {package_name}</p>",
        f"<p><strong>Date:</strong> {booking.date}</p>",
        f"<p><strong>Time:</strong> {booking.start_time} - {booking.end_time}</p>",
        f"<p><strong>Duration:</strong> {booking.duration:g} hours</p>",
    ]
    if with_price:
        rows.append(f"<p><strong>Price:</strong> ${price:g}</p>")

    return (
        '<div style="background: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        f'<h3 style="margin-top: 0;">{title}</h3>'
        + "".join(rows)
        + "</div>"
    )


def _notes_block(title: str, notes: Optional[str]) -> str:
    if not notes:
        return ""

    return (
        '<div style="background: #f0f9ff; border-left: 4px solid #0ea5e9; padding: 15px; margin: 20px 0;">'
        f'<h4 style="margin-top: 0;">{title}</h4>'
        f"<p>{html.escape(notes)}</p>"
        "</div>"
    )


def _wrap(body: str) -> str:
    return f'<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'


def render_admin_request(booking, package) -> tuple[str, str]:
    package_name = package.name if package else "Unknown Package"
    message = ""
    if booking.message:
        message = f"<p><strong>Message:</strong> {html.escape(booking.message)}</p>"

    body = (
        '<h2 style="color: #333;">New Booking Request</h2>'
        + _details_block(booking, package, "Booking Details")
        + '<div style="background: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        '<h3 style="margin-top: 0;">Customer Information</h3>'
        f"<p><strong>Name:</strong> {html.escape(booking.name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(booking.email)}</p>"
        f"<p><strong>Phone:</strong> {html.escape(booking.phone)}</p>"
        f"{message}</div>"
        "<p>Please log in to your admin panel to approve or deny this request.</p>"
    )
    return f"New Booking Request - {package_name}", _wrap(body)


def render_customer_request(booking, package) -> tuple[str, str]:
    body = (
        '<h2 style="color: #333;">Booking Request Received</h2>'
        f"<p>Hi {html.escape(booking.name)},</p>"
        "<p>Thank you for your booking request! We've received your request and will review it shortly.</p>"
        + _details_block(booking, package, "Your Booking Details")
        + "<p>You'll receive another email once we've reviewed your request.</p>"
        "<p>Best regards,<br>Your Photography Team</p>"
    )
    return "Booking Request Received", _wrap(body)


def render_approved(booking, package) -> tuple[str, str]:
    body = (
        '<h2 style="color: #22c55e;">Booking Approved!</h2>'
        f"<p>Hi {html.escape(booking.name)},</p>"
        "<p>Great news! Your booking request has been approved.</p>"
        + _details_block(booking, package, "Confirmed Booking Details")
        + _notes_block("Additional Notes:", booking.admin_notes)
        + "<p>We're looking forward to working with you! If you have any questions, please don't hesitate to contact us.</p>"
        "<p>Best regards,<br>Your Photography Team</p>"
    )
    return "Booking Approved!", _wrap(body)


def render_rejected(booking, package) -> tuple[str, str]:
    body = (
        '<h2 style="color: #ef4444;">Booking Request Update</h2>'
        f"<p>Hi {html.escape(booking.name)},</p>"
        "<p>Thank you for your interest in our services. Unfortunately, we're unable to accommodate your booking request at this time.</p>"
        + _details_block(booking, package, "Requested Booking Details", with_price=False)
        + _notes_block("Reason:", booking.admin_notes)
        + "<p>Please feel free to check our availability for other dates or contact us directly to discuss alternative options.</p>"
        "<p>Best regards,<br>Your Photography Team</p>"
    )
    return "Booking Request Update", _wrap(body)


def render_cancelled(booking, package) -> tuple[str, str]:
    body = (
        '<h2 style="color: #ef4444;">Booking Cancelled</h2>'
        f"<p>Hi {html.escape(booking.name)},</p>"
        "<p>Your booking has been cancelled.</p>"
        + _details_block(booking, package, "Cancelled Booking Details", with_price=False)
        + _notes_block("Notes:", booking.admin_notes)
        + "<p>Please contact us if you would like to find another time.</p>"
        "<p>Best regards,<br>Your Photography Team</p>"
    )
    return "Booking Cancelled", _wrap(body)


#Customer email sent after each admin status change
STATUS_TEMPLATES = {
    "approved": ("booking_approved", render_approved),
    "rejected": ("booking_rejected", render_rejected),
    "cancelled": ("booking_cancelled", render_cancelled),
}


# -------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------
class BookingNotifier:
    """
    Sends booking emails and records every attempt as an EmailNotification.

    Delivery failures are logged and recorded as "failed", they never
    reach the caller.
    """

    def __init__(self, notifications: NotificationRepository):
        self.notifications = notifications

    def _deliver(self, *, booking, email_type: str, to: str, subject: str, html_content: str) -> bool:
        now = datetime.now(timezone.utc)
        try:
            _send_email(to=to, subject=subject, html_content=html_content)
            status, sent_at = "sent", now
            logger.info(f"Email {email_type} sent to {to} for booking {booking.id}")

        except EmailDeliveryError as e:
            status, sent_at = "failed", None
            logger.warning(f"Email {email_type} to {to} failed for booking {booking.id}: {e}")

        try:
            self.notifications.add(
                EmailNotification(
                    booking_id=booking.id,
                    type=email_type,
                    recipient=to,
                    status=status,
                    sent_at=sent_at,
                    created_at=now,
                )
            )
        except SQLAlchemyError as e:
            self.notifications.rollback()
            logger.error(f"Could not record {email_type} email for booking {booking.id}: {e}")

        return status == "sent"

    def booking_requested(self, booking, package) -> None:
        subject, body = render_admin_request(booking, package)
        self._deliver(
            booking=booking,
            email_type="booking_request",
            to=settings.ADMIN_EMAIL,
            subject=subject,
            html_content=body,
        )

        subject, body = render_customer_request(booking, package)
        self._deliver(
            booking=booking,
            email_type="booking_request",
            to=booking.email,
            subject=subject,
            html_content=body,
        )

    def status_changed(self, booking, package) -> None:
        template = STATUS_TEMPLATES.get(booking.status)
        if not template:
            return

        email_type, render = template
        subject, body = render(booking, package)
        self._deliver(
            booking=booking,
            email_type=email_type,
            to=booking.email,
            subject=subject,
            html_content=body,
        )

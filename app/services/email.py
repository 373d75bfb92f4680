# Studio Booking - Studio and Equipment Booking Service
# Copyright (C) 2025 Oleg Tokmakov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Email service for booking lifecycle messages.

Messages are formatted and written to the console. Nothing is delivered.
"""

from typing import Any, Dict, Optional

from app.config import get_settings


class EmailService:
    """Formats booking emails and "sends" them by printing."""

    def __init__(self):
        self.settings = get_settings()

    @property
    def studio_name(self) -> str:
        return self.settings.studio.name

    def format_message(self, to: str, subject: str, text: str) -> str:
        """Render a message as it would appear on the wire."""
        return (
            f"From: {self.settings.email.from_address}\n"
            f"To: {to}\n"
            f"Subject: {subject}\n"
            f"\n"
            f"{text.strip()}\n"
        )

    async def send_email(self, to: str, subject: str, text: str) -> Dict[str, Any]:
        """Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            text: Plain text body

        Returns:
            Delivery info. ``logged`` is False when email is disabled.
        """
        if not self.settings.email.enabled:
            return {"success": True, "logged": False}

        message = self.format_message(to, subject, text)
        print(f"[MAIL] --- {subject.upper()} ---\n{message}")
        return {"success": True, "logged": True, "to": to, "subject": subject}

    def _booking_details(self, booking: Dict[str, Any], include_duration: bool = True) -> str:
        lines = [
            f"Booking Reference: {booking.get('reference')}",
            f"Date: {booking.get('date')}",
            f"Time: {booking.get('time')}",
        ]
        if include_duration:
            lines.append(f"Duration: {booking.get('duration')} hour(s)")
        equipment = booking.get("equipmentList") or []
        if equipment:
            lines.append(f"Equipment: {', '.join(equipment)}")
        return "\n".join(lines)

    async def send_booking_confirmation(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        """Send the 'request received' email for a new booking."""
        text = f"""
Dear {booking.get('name')},

We have received your booking request for the {self.studio_name}.

{self._booking_details(booking)}

Your request is currently being reviewed. You will receive another email once we have processed your request.

Thank you,
{self.studio_name} Team
"""
        return await self.send_email(
            to=booking.get("email"),
            subject=f"{self.studio_name} Booking Request Received",
            text=text,
        )

    async def send_booking_approval(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        """Send the approval email."""
        text = f"""
Dear {booking.get('name')},

Your booking request has been APPROVED.

{self._booking_details(booking)}

Please arrive 15 minutes before your scheduled time.

Thank you,
{self.studio_name} Team
"""
        return await self.send_email(
            to=booking.get("email"),
            subject=f"{self.studio_name} Booking Approved",
            text=text,
        )

    async def send_booking_rejection(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        """Send the rejection email."""
        text = f"""
Dear {booking.get('name')},

We regret to inform you that your booking request cannot be accommodated at this time.

{self._booking_details(booking, include_duration=False)}

Please try booking for a different date or time. If you have any questions, please contact the studio administrator.

Thank you for your understanding,
{self.studio_name} Team
"""
        return await self.send_email(
            to=booking.get("email"),
            subject=f"{self.studio_name} Booking Not Available",
            text=text,
        )


# Global email service instance
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get the global email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service


def reset_email_service() -> None:
    """Forget the cached service so the next call picks up new settings."""
    global _email_service
    _email_service = None

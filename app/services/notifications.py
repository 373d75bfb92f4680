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

"""Booking lifecycle notifications."""

from app.models.booking import Booking
from app.services.email import get_email_service


async def notify_booking_event(booking: Booking, event: str) -> bool:
    """Send the email that belongs to a booking event.

    Args:
        booking: Booking the event refers to
        event: 'created', 'approved' or 'rejected'

    Returns:
        True if a message was sent. Failures are printed and never raised,
        so the booking change that triggered them stands.
    """
    email_service = get_email_service()
    senders = {
        "created": email_service.send_booking_confirmation,
        "approved": email_service.send_booking_approval,
        "rejected": email_service.send_booking_rejection,
    }

    sender = senders.get(event)
    if sender is None:
        return False

    try:
        await sender(booking.to_dict())
        return True
    except Exception as e:
        print(f"Failed to send {event} notification for {booking.reference}: {e}")
        return False

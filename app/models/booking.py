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

"""Booking model and its fixed value sets."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, JSON, String, Text

from app.database import Base

DEPARTMENT_OPTIONS = (
    "Aitmad",
    "Atfal",
    "Tarbiyyat",
    "Maal",
    "Tabligh",
    "Tajneed",
    "Taleem",
    "Waqar-e-Amal",
    "Khidmat-e-Khalq",
    "Sanat-o-Tijarat",
    "Isha'at",
    "Sehat-e-Jismani",
    "Umur-e-Tulaba",
    "Tahrik-e-Jadid",
    "Tarbiyyat Nau Mubae'in",
    "Umumi",
    "MTA",
)

BOOKING_STATUSES = ("pending", "approved", "rejected")

# Allowed status changes; approved and rejected are terminal
STATUS_TRANSITIONS = {
    "pending": ("approved", "rejected"),
    "approved": (),
    "rejected": (),
}


class Booking(Base):
    """Studio booking request."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference = Column(String(32), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    id_number = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    department = Column(String(100), nullable=False)
    date = Column(String(50), nullable=False)
    time = Column(String(50), nullable=False)
    duration = Column(Integer, nullable=False)
    equipment_list = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_booking_status"
        ),
        CheckConstraint("duration BETWEEN 1 AND 5", name="ck_booking_duration"),
    )

    def can_transition_to(self, new_status: str) -> bool:
        """Check if the booking may move from its current status to new_status."""
        return new_status in STATUS_TRANSITIONS.get(self.status, ())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "reference": self.reference,
            "name": self.name,
            "email": self.email,
            "idNumber": self.id_number,
            "phone": self.phone,
            "department": self.department,
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "equipmentList": list(self.equipment_list or []),
            "notes": self.notes,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return (
            f"<Booking(id={self.id}, reference='{self.reference}', "
            f"status='{self.status}')>"
        )

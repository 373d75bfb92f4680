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

"""Booking routes."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.config import get_settings
from app.errors import InvalidTransitionError, ReferenceGenerationError
from app.middleware.auth import require_admin
from app.models.auth import AdminSession
from app.models.booking import BOOKING_STATUSES, DEPARTMENT_OPTIONS
from app.services.notifications import notify_booking_event
from app.services.storage import Storage, get_storage
from app.utils.helpers import sanitize_input, unique_names

router = APIRouter(prefix="/api/bookings")


class BookingCreate(BaseModel):
    """Public booking submission.

    Accepts the client's camelCase keys as well as snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    id_number: str = Field(alias="idNumber", min_length=1, max_length=100)
    phone: str = Field(min_length=5, max_length=50)
    department: str
    date: str = Field(min_length=1, max_length=50)
    time: str = Field(min_length=1, max_length=50)
    duration: int = Field(ge=1, le=5)
    equipment_list: List[str] = Field(alias="equipmentList")
    notes: Optional[str] = None

    @field_validator("department")
    @classmethod
    def validate_department(cls, v):
        if v not in DEPARTMENT_OPTIONS:
            raise ValueError("Unknown department")
        return v

    @field_validator("equipment_list")
    @classmethod
    def normalize_equipment(cls, v):
        return unique_names(v)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v):
        if v is None:
            return None
        clean = sanitize_input(v, get_settings().booking.max_notes_length)
        return clean or None


class StatusUpdate(BaseModel):
    """Booking status change request."""

    status: Literal["pending", "approved", "rejected"]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    storage: Storage = Depends(get_storage),
):
    """Submit a booking request. New bookings always start as pending."""
    try:
        booking = storage.create_booking(data.model_dump())
    except ReferenceGenerationError as e:
        print(f"[ERROR] {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create booking, please try again",
        )

    await notify_booking_event(booking, "created")

    return booking.to_dict()


@router.get("")
async def list_bookings(
    status: Optional[str] = None,
    storage: Storage = Depends(get_storage),
    session: AdminSession = Depends(require_admin),
):
    """List bookings newest first (admin only).

    Unknown status values are ignored and every booking is returned.
    """
    if status not in BOOKING_STATUSES:
        status = None

    return [b.to_dict() for b in storage.list_bookings(status)]


@router.get("/reference/{reference}")
async def get_booking_by_reference(
    reference: str,
    storage: Storage = Depends(get_storage),
):
    """Look up a booking by its reference for the confirmation page."""
    booking = storage.get_booking_by_reference(reference)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking.to_dict()


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    storage: Storage = Depends(get_storage),
    session: AdminSession = Depends(require_admin),
):
    """Get booking details (admin only)."""
    booking = storage.get_booking(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking.to_dict()


@router.put("/{booking_id}/status")
async def update_booking_status(
    booking_id: int,
    data: StatusUpdate,
    storage: Storage = Depends(get_storage),
    session: AdminSession = Depends(require_admin),
):
    """Approve or reject a pending booking (admin only)."""
    try:
        booking = storage.update_booking_status(booking_id, data.status)
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )

    await notify_booking_event(booking, booking.status)

    return booking.to_dict()

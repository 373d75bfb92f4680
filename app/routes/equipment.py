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

"""Equipment inventory routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from app.middleware.auth import require_admin
from app.models.auth import AdminSession
from app.services.storage import Storage, get_storage
from app.utils.helpers import sanitize_input

router = APIRouter(prefix="/api/equipment")


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    clean = sanitize_input(v, 255)
    if not clean:
        raise ValueError("Name must not be empty")
    return clean


class EquipmentCreate(BaseModel):
    """Equipment creation request.

    ``available`` is not checked against ``quantity``.
    """

    name: str
    quantity: int = Field(1, ge=0)
    available: int = Field(1, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


class EquipmentUpdate(BaseModel):
    """Equipment update request."""

    name: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    available: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


@router.get("")
async def list_equipment(storage: Storage = Depends(get_storage)):
    """List all equipment."""
    return [item.to_dict() for item in storage.list_equipment()]


@router.get("/{equipment_id}")
async def get_equipment(
    equipment_id: int,
    storage: Storage = Depends(get_storage),
):
    """Get a single equipment item."""
    item = storage.get_equipment(equipment_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Equipment not found",
        )
    return item.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_equipment(
    data: EquipmentCreate,
    storage: Storage = Depends(get_storage),
    session: AdminSession = Depends(require_admin),
):
    """Create an equipment item (admin only)."""
    item = storage.create_equipment(data.model_dump())
    return item.to_dict()


@router.put("/{equipment_id}")
async def update_equipment(
    equipment_id: int,
    data: EquipmentUpdate,
    storage: Storage = Depends(get_storage),
    session: AdminSession = Depends(require_admin),
):
    """Update an equipment item (admin only)."""
    item = storage.update_equipment(
        equipment_id, data.model_dump(exclude_unset=True, exclude_none=True)
    )
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Equipment not found",
        )
    return item.to_dict()


@router.delete("/{equipment_id}")
async def delete_equipment(
    equipment_id: int,
    storage: Storage = Depends(get_storage),
    session: AdminSession = Depends(require_admin),
):
    """Delete an equipment item (admin only)."""
    if not storage.delete_equipment(equipment_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Equipment not found",
        )
    return {"message": "Equipment deleted successfully"}

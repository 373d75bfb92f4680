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

"""Tests for the storage backends."""

import re
from datetime import timedelta

import pytest

from app import database
from app.errors import InvalidTransitionError, ReferenceGenerationError
from app.services import storage as storage_module


def new_booking(storage, **overrides):
    data = {
        "name": "Sara Ahmed",
        "email": "sara@example.com",
        "id_number": "998",
        "phone": "0123456",
        "department": "Tabligh",
        "date": "2025-05-01",
        "time": "10:00",
        "duration": 1,
        "equipment_list": ["Audio Mixer"],
        "notes": None,
    }
    data.update(overrides)
    return storage.create_booking(data)


def test_seed_data(storage):
    admin = storage.get_user_by_username("admin")
    assert admin is not None
    assert admin.is_admin
    assert admin.password == "admin123"
    names = [item.name for item in storage.list_equipment()]
    assert len(names) == 8
    assert "Green Screen" in names


def test_seeding_is_idempotent(storage):
    assert storage_module.seed_storage(storage) is False
    assert len(storage.list_equipment()) == 8


def test_create_booking_starts_pending(storage):
    booking = new_booking(storage)
    assert booking.id is not None
    assert booking.status == "pending"
    assert re.match(r"^ISH-\d{8}-\d{4}$", booking.reference)
    assert booking.created_at is not None
    assert storage.get_booking_by_reference(booking.reference).id == booking.id


def test_status_transitions(storage):
    approved = new_booking(storage)
    rejected = new_booking(storage)

    storage.update_booking_status(approved.id, "approved")
    storage.update_booking_status(rejected.id, "rejected")

    assert storage.get_booking(approved.id).status == "approved"
    assert storage.get_booking(rejected.id).status == "rejected"


@pytest.mark.parametrize("terminal", ["approved", "rejected"])
@pytest.mark.parametrize("requested", ["pending", "approved", "rejected"])
def test_terminal_statuses_are_final(storage, terminal, requested):
    booking = new_booking(storage)
    storage.update_booking_status(booking.id, terminal)

    with pytest.raises(InvalidTransitionError):
        storage.update_booking_status(booking.id, requested)

    assert storage.get_booking(booking.id).status == terminal


def test_update_missing_booking_returns_none(storage):
    assert storage.update_booking_status(9999, "approved") is None
    assert storage.get_booking(9999) is None


def test_list_bookings_newest_first_and_filtered(storage):
    first = new_booking(storage, name="First")
    second = new_booking(storage, name="Second")
    third = new_booking(storage, name="Third")
    storage.update_booking_status(second.id, "approved")

    assert [b.id for b in storage.list_bookings()] == [third.id, second.id, first.id]
    assert [b.id for b in storage.list_bookings("pending")] == [third.id, first.id]
    assert [b.id for b in storage.list_bookings("approved")] == [second.id]
    assert storage.list_bookings("rejected") == []


def test_reference_collision_is_retried(storage, monkeypatch):
    existing = new_booking(storage)
    candidates = iter([existing.reference, existing.reference, "ISH-20250101-4242"])
    monkeypatch.setattr(storage_module, "generate_reference", lambda prefix: next(candidates))

    booking = new_booking(storage)

    assert booking.reference == "ISH-20250101-4242"


def test_reference_generation_gives_up(storage, monkeypatch):
    existing = new_booking(storage)
    monkeypatch.setattr(storage_module, "generate_reference", lambda prefix: existing.reference)

    with pytest.raises(ReferenceGenerationError):
        new_booking(storage)


def test_equipment_available_is_independent_of_quantity(storage):
    item = storage.create_equipment({"name": "Teleprompter", "quantity": 1, "available": 1})

    updated = storage.update_equipment(item.id, {"available": 7})

    assert updated.quantity == 1
    assert updated.available == 7


def test_equipment_crud(storage):
    item = storage.create_equipment({"name": "Boom Pole", "quantity": 2, "available": 2})
    assert storage.get_equipment(item.id).name == "Boom Pole"

    storage.update_equipment(item.id, {"name": "Boom Pole XL"})
    assert storage.get_equipment(item.id).name == "Boom Pole XL"
    assert storage.get_equipment(item.id).quantity == 2

    assert storage.delete_equipment(item.id) is True
    assert storage.get_equipment(item.id) is None
    assert storage.delete_equipment(item.id) is False
    assert storage.update_equipment(item.id, {"name": "x"}) is None


def test_sessions(storage):
    admin = storage.get_user_by_username("admin")

    session = storage.create_session(admin, timedelta(hours=1))

    assert session.is_admin
    assert session.is_valid()
    assert storage.get_session(session.token).user_id == admin.id
    assert storage.delete_session(session.token) is True
    assert storage.get_session(session.token) is None
    assert storage.delete_session(session.token) is False


def test_expired_session_is_invalid(storage):
    admin = storage.get_user_by_username("admin")
    session = storage.create_session(admin, timedelta(hours=-1))
    assert not session.is_valid()


def test_purge_expired_sessions(storage):
    admin = storage.get_user_by_username("admin")
    expired = [storage.create_session(admin, timedelta(hours=-1)) for _ in range(3)]
    live = storage.create_session(admin, timedelta(hours=1))

    assert storage.purge_expired_sessions() == 3

    assert all(storage.get_session(s.token) is None for s in expired)
    assert storage.get_session(live.token) is not None
    assert storage.purge_expired_sessions() == 0


def test_startup_removes_expired_sessions(storage, capsys):
    admin = storage.get_user_by_username("admin")
    stale = storage.create_session(admin, timedelta(hours=-2))

    database.init_database()

    assert storage.get_session(stale.token) is None
    assert "Removed 1 expired admin session(s)" in capsys.readouterr().out

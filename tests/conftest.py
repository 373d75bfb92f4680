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

"""Shared fixtures: every API test runs against both storage backends."""

import pytest
from fastapi.testclient import TestClient

from app import database
from app.config import Settings, update_settings
from app.main import app
from app.services.email import reset_email_service
from app.services.storage import DatabaseStorage, get_memory_storage, reset_memory_storage

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


def booking_payload(**overrides):
    """A valid booking submission in the client's camelCase format."""
    payload = {
        "name": "Ahmad Khan",
        "email": "ahmad@mail.com",
        "idNumber": "12345",
        "phone": "07700900123",
        "department": "MTA",
        "date": "2025-03-14",
        "time": "14:00",
        "duration": 2,
        "equipmentList": ["DSLR Camera", "Camera Tripod"],
        "notes": "Interview recording",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(params=["sqlite", "memory"])
def backend(request):
    """Configure a fresh, seeded storage backend."""
    settings = Settings()
    settings.database.backend = request.param
    update_settings(settings)
    reset_email_service()
    reset_memory_storage()

    if request.param == "sqlite":
        database.init_engine("sqlite://")

    database.init_database()

    yield request.param

    database.dispose_engine()
    reset_memory_storage()
    reset_email_service()


@pytest.fixture
def storage(backend):
    """Direct access to the configured storage backend."""
    if backend == "memory":
        yield get_memory_storage()
        return

    db = database.get_session_local()()
    try:
        yield DatabaseStorage(db)
    finally:
        db.close()


@pytest.fixture
def client(backend):
    """Anonymous API client."""
    return TestClient(app)


@pytest.fixture
def admin_client(client):
    """API client holding an admin session cookie."""
    response = client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client

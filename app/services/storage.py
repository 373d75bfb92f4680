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

"""Storage backends for users, equipment, bookings and admin sessions.

Two interchangeable backends are provided:

* ``DatabaseStorage`` works on a SQLAlchemy session (SQLite by default).
* ``MemoryStorage`` keeps everything in process-local dictionaries.

Both hand out the same model classes from ``app.models``. The in-memory
backend uses them as plain, never-persisted objects.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, Generator, List, Optional

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.database import get_session_local
from app.errors import InvalidTransitionError, ReferenceGenerationError
from app.models.auth import AdminSession
from app.models.booking import BOOKING_STATUSES, Booking
from app.models.equipment import Equipment
from app.models.user import User
from app.utils.helpers import generate_reference, generate_token

EQUIPMENT_FIELDS = ("name", "quantity", "available")


class Storage(ABC):
    """CRUD operations shared by all storage backends."""

    # Users
    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, username: str, password: str, is_admin: bool = False) -> User:
        ...

    @abstractmethod
    def has_admin(self) -> bool:
        ...

    # Equipment
    @abstractmethod
    def list_equipment(self) -> List[Equipment]:
        ...

    @abstractmethod
    def get_equipment(self, equipment_id: int) -> Optional[Equipment]:
        ...

    @abstractmethod
    def create_equipment(self, data: dict) -> Equipment:
        ...

    @abstractmethod
    def update_equipment(self, equipment_id: int, data: dict) -> Optional[Equipment]:
        """Apply a partial update. Returns None if the item does not exist."""

    @abstractmethod
    def delete_equipment(self, equipment_id: int) -> bool:
        """Delete an item. Returns False if it did not exist."""

    # Bookings
    @abstractmethod
    def list_bookings(self, status: Optional[str] = None) -> List[Booking]:
        """List bookings newest first, optionally filtered by status."""

    @abstractmethod
    def get_booking(self, booking_id: int) -> Optional[Booking]:
        ...

    @abstractmethod
    def get_booking_by_reference(self, reference: str) -> Optional[Booking]:
        ...

    @abstractmethod
    def create_booking(self, data: dict) -> Booking:
        """Store a new pending booking under a freshly generated reference."""

    @abstractmethod
    def update_booking_status(self, booking_id: int, status: str) -> Optional[Booking]:
        """Change a booking's status.

        Returns None if the booking does not exist. Raises
        InvalidTransitionError if the change is not allowed.
        """

    # Admin sessions
    @abstractmethod
    def create_session(self, user: User, ttl: timedelta) -> AdminSession:
        ...

    @abstractmethod
    def get_session(self, token: str) -> Optional[AdminSession]:
        ...

    @abstractmethod
    def delete_session(self, token: str) -> bool:
        ...

    @abstractmethod
    def purge_expired_sessions(self, now: Optional[datetime] = None) -> int:
        """Delete every session that expired before ``now``. Returns the count."""

    def _new_reference(self) -> str:
        """Generate a reference not used by any stored booking."""
        settings = get_settings()
        for _ in range(max(1, settings.booking.reference_attempts)):
            reference = generate_reference(settings.booking.reference_prefix)
            if self.get_booking_by_reference(reference) is None:
                return reference
        raise ReferenceGenerationError("Could not generate an unused booking reference")


def _check_transition(booking: Booking, status: str) -> None:
    if status not in BOOKING_STATUSES or not booking.can_transition_to(status):
        raise InvalidTransitionError(booking.status, status)


def _newest_first(bookings: List[Booking]) -> List[Booking]:
    return sorted(bookings, key=lambda b: (b.created_at, b.id), reverse=True)


class DatabaseStorage(Storage):
    """Storage backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, username: str, password: str, is_admin: bool = False) -> User:
        user = User(username=username, password=password, is_admin=is_admin)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def has_admin(self) -> bool:
        return self.db.query(User).filter(User.is_admin == True).first() is not None  # noqa: E712

    def list_equipment(self) -> List[Equipment]:
        return self.db.query(Equipment).order_by(Equipment.id).all()

    def get_equipment(self, equipment_id: int) -> Optional[Equipment]:
        return self.db.query(Equipment).filter(Equipment.id == equipment_id).first()

    def create_equipment(self, data: dict) -> Equipment:
        item = Equipment(**{k: v for k, v in data.items() if k in EQUIPMENT_FIELDS})
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_equipment(self, equipment_id: int, data: dict) -> Optional[Equipment]:
        item = self.get_equipment(equipment_id)
        if not item:
            return None
        for key, value in data.items():
            if key in EQUIPMENT_FIELDS:
                setattr(item, key, value)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_equipment(self, equipment_id: int) -> bool:
        item = self.get_equipment(equipment_id)
        if not item:
            return False
        self.db.delete(item)
        self.db.commit()
        return True

    def list_bookings(self, status: Optional[str] = None) -> List[Booking]:
        query = self.db.query(Booking)
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def get_booking_by_reference(self, reference: str) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.reference == reference).first()

    def create_booking(self, data: dict) -> Booking:
        booking = Booking(**data)
        booking.reference = self._new_reference()
        booking.status = "pending"
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def update_booking_status(self, booking_id: int, status: str) -> Optional[Booking]:
        booking = self.get_booking(booking_id)
        if not booking:
            return None
        _check_transition(booking, status)
        booking.status = status
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def create_session(self, user: User, ttl: timedelta) -> AdminSession:
        now = datetime.utcnow()
        session = AdminSession(
            token=generate_token(32),
            user_id=user.id,
            is_admin=bool(user.is_admin),
            created_at=now,
            expires_at=now + ttl,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_session(self, token: str) -> Optional[AdminSession]:
        return self.db.query(AdminSession).filter(AdminSession.token == token).first()

    def delete_session(self, token: str) -> bool:
        session = self.get_session(token)
        if not session:
            return False
        self.db.delete(session)
        self.db.commit()
        return True

    def purge_expired_sessions(self, now: Optional[datetime] = None) -> int:
        if now is None:
            now = datetime.utcnow()
        deleted = (
            self.db.query(AdminSession)
            .filter(AdminSession.expires_at < now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted


class MemoryStorage(Storage):
    """Process-local storage kept in dictionaries."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._equipment: Dict[int, Equipment] = {}
        self._bookings: Dict[int, Booking] = {}
        self._sessions: Dict[str, AdminSession] = {}
        self._next_ids = {"user": 1, "equipment": 1, "booking": 1, "session": 1}

    def _next_id(self, kind: str) -> int:
        with self._lock:
            value = self._next_ids[kind]
            self._next_ids[kind] = value + 1
            return value

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, username: str, password: str, is_admin: bool = False) -> User:
        user = User(
            id=self._next_id("user"),
            username=username,
            password=password,
            is_admin=is_admin,
        )
        self._users[user.id] = user
        return user

    def has_admin(self) -> bool:
        return any(u.is_admin for u in self._users.values())

    def list_equipment(self) -> List[Equipment]:
        return [self._equipment[k] for k in sorted(self._equipment)]

    def get_equipment(self, equipment_id: int) -> Optional[Equipment]:
        return self._equipment.get(equipment_id)

    def create_equipment(self, data: dict) -> Equipment:
        item = Equipment(
            id=self._next_id("equipment"),
            name=data["name"],
            quantity=data.get("quantity", 1),
            available=data.get("available", 1),
        )
        self._equipment[item.id] = item
        return item

    def update_equipment(self, equipment_id: int, data: dict) -> Optional[Equipment]:
        item = self._equipment.get(equipment_id)
        if not item:
            return None
        for key, value in data.items():
            if key in EQUIPMENT_FIELDS:
                setattr(item, key, value)
        return item

    def delete_equipment(self, equipment_id: int) -> bool:
        return self._equipment.pop(equipment_id, None) is not None

    def list_bookings(self, status: Optional[str] = None) -> List[Booking]:
        bookings = [b for b in self._bookings.values() if not status or b.status == status]
        return _newest_first(bookings)

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def get_booking_by_reference(self, reference: str) -> Optional[Booking]:
        return next((b for b in self._bookings.values() if b.reference == reference), None)

    def create_booking(self, data: dict) -> Booking:
        booking = Booking(**data)
        booking.id = self._next_id("booking")
        booking.reference = self._new_reference()
        booking.status = "pending"
        booking.created_at = datetime.utcnow()
        if booking.equipment_list is None:
            booking.equipment_list = []
        self._bookings[booking.id] = booking
        return booking

    def update_booking_status(self, booking_id: int, status: str) -> Optional[Booking]:
        booking = self._bookings.get(booking_id)
        if not booking:
            return None
        _check_transition(booking, status)
        booking.status = status
        return booking

    def create_session(self, user: User, ttl: timedelta) -> AdminSession:
        now = datetime.utcnow()
        session = AdminSession(
            id=self._next_id("session"),
            token=generate_token(32),
            user_id=user.id,
            is_admin=bool(user.is_admin),
            created_at=now,
            expires_at=now + ttl,
        )
        self._sessions[session.token] = session
        return session

    def get_session(self, token: str) -> Optional[AdminSession]:
        return self._sessions.get(token)

    def delete_session(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def purge_expired_sessions(self, now: Optional[datetime] = None) -> int:
        if now is None:
            now = datetime.utcnow()
        with self._lock:
            expired = [t for t, s in list(self._sessions.items()) if s.expires_at < now]
            for token in expired:
                del self._sessions[token]
        return len(expired)


# Global in-memory storage instance
_memory_storage: Optional[MemoryStorage] = None


def get_memory_storage() -> MemoryStorage:
    """Get the process-wide in-memory storage."""
    global _memory_storage
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
    return _memory_storage


def reset_memory_storage() -> None:
    """Drop all in-memory data."""
    global _memory_storage
    _memory_storage = None


def get_storage() -> Generator[Storage, None, None]:
    """Dependency to get the configured storage backend."""
    if get_settings().uses_memory_storage:
        yield get_memory_storage()
        return

    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield DatabaseStorage(db)
    finally:
        db.close()


def seed_storage(storage: Storage, settings: Optional[Settings] = None) -> bool:
    """Insert the admin user and default equipment if no admin exists yet.

    Returns:
        True if seed data was inserted.
    """
    if settings is None:
        settings = get_settings()

    if storage.has_admin():
        return False

    print("Initializing storage with seed data...")

    storage.create_user(
        username=settings.admin.username,
        password=settings.admin.password,
        is_admin=True,
    )
    print(f"Created admin user: {settings.admin.username}")

    for item in settings.seed.equipment:
        storage.create_equipment(item.model_dump())

    return True

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

"""Credential checks and admin session lifecycle."""

from datetime import timedelta
from typing import Optional

from app.config import get_settings
from app.models.auth import AdminSession
from app.models.user import User
from app.services.storage import Storage


def validate_credentials(storage: Storage, username: str, password: str) -> Optional[User]:
    """Return the user if the username exists and the password matches.

    Passwords are stored and compared as plaintext.
    """
    user = storage.get_user_by_username(username)
    if not user:
        return None
    if user.password != password:
        return None
    return user


def start_session(storage: Storage, user: User) -> AdminSession:
    """Create a server-side session for a logged-in user.

    Sessions that have already expired are swept out first.
    """
    settings = get_settings()
    storage.purge_expired_sessions()
    return storage.create_session(user, timedelta(hours=settings.session.ttl_hours))


def resolve_session(storage: Storage, token: Optional[str]) -> Optional[AdminSession]:
    """Look up a live session by cookie token.

    Expired sessions are deleted and treated as missing.
    """
    if not token:
        return None

    session = storage.get_session(token)
    if not session:
        return None

    if not session.is_valid():
        storage.delete_session(token)
        return None

    return session


def end_session(storage: Storage, token: Optional[str]) -> bool:
    """Destroy the session behind a cookie token, if any."""
    if not token:
        return False
    return storage.delete_session(token)

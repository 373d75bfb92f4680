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

"""Authentication dependencies."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from app.config import get_settings
from app.models.auth import AdminSession
from app.services.auth import resolve_session
from app.services.storage import Storage, get_storage


def get_session_token(request: Request) -> Optional[str]:
    """Extract the session token from the request cookies or header."""
    token = request.cookies.get(get_settings().session.cookie_name)
    if token:
        return token

    # Try Authorization header
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return None


async def get_current_session(
    request: Request,
    storage: Storage = Depends(get_storage),
) -> Optional[AdminSession]:
    """Get the current live session, or None."""
    return resolve_session(storage, get_session_token(request))


async def require_admin(
    session: Optional[AdminSession] = Depends(get_current_session),
) -> AdminSession:
    """Require an authenticated admin session."""
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: Admin access required",
        )

    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Admin privileges required",
        )

    return session

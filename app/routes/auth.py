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

"""Authentication routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from app.config import get_settings
from app.middleware.auth import get_current_session, get_session_token
from app.models.auth import AdminSession
from app.services.auth import end_session, start_session, validate_credentials
from app.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/auth")


class LoginRequest(BaseModel):
    """Login request."""

    username: Optional[str] = None
    password: Optional[str] = None


@router.post("/login")
async def login(
    data: LoginRequest,
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    """Log in with username and password and start an admin session."""
    settings = get_settings()

    if not data.username or not data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required",
        )

    user = validate_credentials(storage, data.username, data.password)
    if not user:
        print(f"[AUTH] Failed login for '{data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Admin privileges required",
        )

    # Replace any session the caller already holds
    end_session(storage, get_session_token(request))
    session = start_session(storage, user)

    response.set_cookie(
        key=settings.session.cookie_name,
        value=session.token,
        httponly=True,
        secure=settings.session.secure_cookie,
        samesite="lax",
        max_age=settings.session.ttl_hours * 60 * 60,
    )

    print(f"[AUTH] Admin '{user.username}' logged in")

    return {
        "message": "Login successful",
        "user": user.to_dict(),
    }


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    """Destroy the current session and clear the cookie."""
    if end_session(storage, get_session_token(request)):
        print("[AUTH] Session ended")

    response.delete_cookie(get_settings().session.cookie_name)

    return {"message": "Logged out successfully"}


@router.get("/status")
async def auth_status(
    session: Optional[AdminSession] = Depends(get_current_session),
):
    """Report whether the current session is an authenticated admin."""
    if session is not None and session.is_admin:
        return {"isAuthenticated": True, "isAdmin": True}

    return {"isAuthenticated": False, "isAdmin": False}

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

"""Utility helper functions."""

import random
import re
import secrets
from datetime import datetime
from typing import Iterable, List, Optional


def generate_token(length: int = 32) -> str:
    """Generate a secure random token.

    Args:
        length: Length of the token in bytes (will be URL-safe encoded).

    Returns:
        URL-safe random token string.
    """
    return secrets.token_urlsafe(length)


def generate_reference(prefix: str = "ISH", now: Optional[datetime] = None) -> str:
    """Generate a human-readable booking reference.

    The format is ``<prefix>-<YYYYMMDD>-<NNNN>`` where the date is the UTC
    date and ``NNNN`` is random in 1000..9999. Collisions are possible.

    Args:
        prefix: Reference prefix.
        now: Timestamp to take the date from. Defaults to the current UTC time.

    Returns:
        Reference string such as ``ISH-20250314-4821``.
    """
    if now is None:
        now = datetime.utcnow()
    return f"{prefix}-{now.strftime('%Y%m%d')}-{random.randint(1000, 9999)}"


def sanitize_input(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Sanitize user input by stripping HTML tags and limiting length.

    Args:
        text: Input text to sanitize.
        max_length: Maximum allowed length (truncates if exceeded).

    Returns:
        Sanitized string.
    """
    if text is None:
        return ""

    # Remove HTML tags
    clean = re.sub(r"<[^>]+>", "", str(text))

    # Normalize whitespace
    clean = " ".join(clean.split())

    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def unique_names(names: Iterable[str]) -> List[str]:
    """Strip names, drop blanks and duplicates, keep first-seen order."""
    seen = set()
    result = []
    for name in names:
        clean = name.strip()
        if clean and clean not in seen:
            seen.add(clean)
            result.append(clean)
    return result

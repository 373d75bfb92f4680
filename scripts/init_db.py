#!/usr/bin/env python3
# Studio Booking - Studio and Equipment Booking Service
# Copyright (C) 2025 Oleg Tokmakov
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Database initialization script."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import init_settings
from app.database import init_database


def main():
    """Create tables and insert the admin user and default equipment."""
    print("Initializing Studio Booking database...")

    init_settings()

    init_database()

    print("Database initialization complete!")


if __name__ == "__main__":
    main()

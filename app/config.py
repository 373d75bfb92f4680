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

"""Configuration management for Studio Booking."""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_ENV_VAR = "STUDIO_BOOKING_CONFIG"


class AppConfig(BaseModel):
    """Application configuration."""

    name: str = "Ishaat Studio Booking"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    base_url: str = "http://localhost:5000"


class AdminConfig(BaseModel):
    """Seed admin account."""

    username: str = "admin"
    password: str = "admin123"  # Stored as plaintext


class DatabaseConfig(BaseModel):
    """Storage backend configuration."""

    backend: str = "sqlite"  # "sqlite" or "memory"
    path: str = "data/studio_booking.db"


class SessionConfig(BaseModel):
    """Admin session cookie configuration."""

    cookie_name: str = "ishaat_studio_session"
    ttl_hours: int = 24
    secure_cookie: bool = False


class BookingConfig(BaseModel):
    """Booking submission constraints."""

    reference_prefix: str = "ISH"
    reference_attempts: int = 5
    max_notes_length: int = 2000


class StudioConfig(BaseModel):
    """Studio details used in outgoing emails."""

    name: str = "Ishaat Studio"


class EmailConfig(BaseModel):
    """Email configuration. Messages are printed, never delivered."""

    enabled: bool = True
    from_address: str = "studio@example.com"


class SeedEquipment(BaseModel):
    """Equipment row inserted on first start."""

    name: str
    quantity: int = 1
    available: int = 1


def _default_equipment() -> List[SeedEquipment]:
    items = [
        ("DSLR Camera", 3),
        ("Wireless Microphone", 5),
        ("Studio Lighting Kit", 2),
        ("Camera Tripod", 4),
        ("Green Screen", 1),
        ("Audio Mixer", 2),
        ("Camera Gimbal", 1),
        ("Audio Recorder", 3),
    ]
    return [SeedEquipment(name=name, quantity=qty, available=qty) for name, qty in items]


class SeedConfig(BaseModel):
    """Seed data configuration."""

    equipment: List[SeedEquipment] = Field(default_factory=_default_equipment)


class Settings(BaseModel):
    """Main settings container."""

    app: AppConfig = Field(default_factory=AppConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    booking: BookingConfig = Field(default_factory=BookingConfig)
    studio: StudioConfig = Field(default_factory=StudioConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)

    @property
    def uses_memory_storage(self) -> bool:
        """Check if the in-memory backend is configured."""
        return self.database.backend.lower() == "memory"


def load_config(config_path: Optional[str] = None) -> Settings:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, tries default locations.

    Returns:
        Settings object with loaded configuration.
    """
    default_paths = [
        Path("config/config.yaml"),
        Path("config.yaml"),
        Path("/etc/studio-booking/config.yaml"),
    ]

    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)

    config_file = None

    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for path in default_paths:
            if path.exists():
                config_file = path
                break

    if config_file is None:
        print("No config file found, using defaults")
        return Settings()

    print(f"Loading config from: {config_file}")

    with open(config_file, "r") as f:
        config_data = yaml.safe_load(f) or {}

    return Settings(**config_data)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def init_settings(config_path: Optional[str] = None) -> Settings:
    """Initialize settings from config file."""
    global _settings
    _settings = load_config(config_path)
    return _settings


def update_settings(new_settings: Settings) -> None:
    """Replace the global settings instance."""
    global _settings
    _settings = new_settings


def save_config(settings: Settings, config_path: Optional[str] = None) -> None:
    """Save configuration to YAML file.

    Args:
        settings: Settings object to save.
        config_path: Path to config file. If None, uses environment variable or default.
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR, "config/config.yaml")

    Path(config_path).parent.mkdir(parents=True, exist_ok=True)

    config_data = settings.model_dump(exclude_none=True)

    with open(config_path, "w") as f:
        yaml.dump(config_data, f, default_flow_style=False, sort_keys=False)

    print(f"Configuration saved to: {config_path}")

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

"""Tests for configuration loading."""

import pytest
import yaml

from app.config import Settings, load_config, save_config


def test_defaults():
    settings = Settings()
    assert settings.admin.username == "admin"
    assert settings.session.cookie_name == "ishaat_studio_session"
    assert settings.booking.reference_prefix == "ISH"
    assert [e.name for e in settings.seed.equipment][:2] == ["DSLR Camera", "Wireless Microphone"]
    assert not settings.uses_memory_storage


def test_load_config_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        yaml.safe_dump(
            {
                "database": {"backend": "memory"},
                "session": {"ttl_hours": 2},
                "seed": {"equipment": [{"name": "Boom Pole", "quantity": 2, "available": 0}]},
            }
        )
    )

    settings = load_config(str(config_file))

    assert settings.uses_memory_storage
    assert settings.session.ttl_hours == 2
    assert settings.seed.equipment[0].name == "Boom Pole"
    assert settings.seed.equipment[0].available == 0
    # Untouched sections keep their defaults
    assert settings.studio.name == "Ishaat Studio"


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_save_config_writes_yaml(tmp_path):
    settings = Settings()
    settings.studio.name = "Studio B"
    path = tmp_path / "out" / "config.yaml"

    save_config(settings, str(path))

    assert load_config(str(path)).studio.name == "Studio B"

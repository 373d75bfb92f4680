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

"""Tests for utility helpers."""

import re
from datetime import datetime

from app.utils.helpers import generate_reference, sanitize_input, unique_names

REFERENCE_PATTERN = re.compile(r"^ISH-\d{8}-\d{4}$")


def test_reference_uses_given_date():
    reference = generate_reference("ISH", datetime(2025, 3, 14, 23, 59))
    assert reference.startswith("ISH-20250314-")
    assert REFERENCE_PATTERN.match(reference)


def test_reference_random_part_is_four_digits():
    for _ in range(200):
        number = int(generate_reference().rsplit("-", 1)[1])
        assert 1000 <= number <= 9999


def test_reference_prefix_is_configurable():
    assert generate_reference("STU", datetime(2024, 1, 2)).startswith("STU-20240102-")


def test_sanitize_input_strips_tags_and_whitespace():
    assert sanitize_input("  <b>Bring</b>   the\n mics ") == "Bring the mics"


def test_sanitize_input_truncates():
    assert sanitize_input("abcdef", 3) == "abc"
    assert sanitize_input(None) == ""


def test_unique_names_keeps_first_seen_order():
    names = [" Green Screen", "Audio Mixer", "", "Green Screen ", "  "]
    assert unique_names(names) == ["Green Screen", "Audio Mixer"]

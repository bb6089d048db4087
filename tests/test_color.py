# tests/test_color.py

from __future__ import annotations

from tasknest.domain.task import (
    DEFAULT_TASK_COLOR,
    PASTEL_COLORS,
    adjust_color_brightness,
    get_palette,
    inherit_color,
    is_valid_hex,
)


def test_adjust_brightness_rounds_and_lowercases() -> None:
    assert adjust_color_brightness("#FFFFFF", 0.95) == "#f2f2f2"
    assert adjust_color_brightness("#F3F4F6", 0.9) == "#dbdcdd"


def test_adjust_brightness_clamps() -> None:
    assert adjust_color_brightness("#808080", 3) == "#ffffff"
    assert adjust_color_brightness("#808080", 0) == "#000000"


def test_inherit_color_darkens_primary_and_secondary_only() -> None:
    child = inherit_color(DEFAULT_TASK_COLOR)

    assert child.primary == "#f2f2f2"
    assert child.secondary == "#dbdcdd"
    assert child.accent == DEFAULT_TASK_COLOR.accent
    assert child.text == DEFAULT_TASK_COLOR.text


def test_palette_lookup_ignores_case() -> None:
    name = next(iter(PASTEL_COLORS))
    assert get_palette(name.upper()) == PASTEL_COLORS[name]
    assert get_palette("no such palette") is None


def test_hex_validation() -> None:
    assert is_valid_hex("#A1b2C3")
    assert is_valid_hex("a1b2c3")
    assert not is_valid_hex("#abc")
    assert not is_valid_hex("#gggggg")

# tests/conftest.py
from __future__ import annotations

import pytest

from spellcards import fonts


class FixedMeasurer:
    """Monospaced stand-in for TextMeasurer with exact, font-independent metrics."""

    def __init__(self, char_width: float = 2.4, line_height: float = 9.0):
        self.char_width = char_width
        self._line_height = line_height
        self.calls = 0

    def width(self, text, font, size):
        self.calls += 1
        return len(text) * self.char_width

    def line_height(self, font, size):
        return self._line_height

    def ascent(self, font, size):
        return 0.8 * self._line_height


@pytest.fixture(autouse=True)
def builtin_fonts():
    fonts.use_builtin_fonts()
    yield


@pytest.fixture
def make_measurer():
    return FixedMeasurer


@pytest.fixture
def spell_objects():
    return [
        {
            "id": "fireball",
            "name": "Fireball",
            "level": 3,
            "category": "spell",
            "tradition": ["arcane", "primal"],
            "trait": ["Fire"],
            "component": ["somatic", "verbal"],
            "actions": "Two Actions",
            "range": "500 feet",
            "area": "20-foot burst",
            "saving_throw": "basic Reflex",
            "markdown": (
                "# Fireball\n---\nA roaring blast of fire detonates at a spot you designate, "
                "dealing 6d6 fire damage.\n---\n**Heightened (+1)** The damage increases by 2d6."
            ),
        },
        {
            "id": "shield",
            "name": "Shield",
            "level": 1,
            "category": "cantrip",
            "tradition": ["arcane", "divine", "occult"],
            "trait": ["Force"],
            "actions": "Single Action",
            "duration_raw": "until the start of your next turn",
            "description": ["You raise a magical shield of force."],
        },
        {
            "id": "light",
            "name": "Light",
            "level": 1,
            "category": "cantrip",
            "actions": "Two Actions",
            "range": "touch",
        },
    ]

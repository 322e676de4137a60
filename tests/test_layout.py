from __future__ import annotations

import pytest
from reportlab.lib.units import mm

from spellcards.layout import (
    CardFormat,
    LayoutStatus,
    content_height,
    inner_rect,
    layout,
    layout_rows,
    wrap_blocks,
)
from spellcards.sections import Divider, Paragraph, StatLine, format_spell
from spellcards.spell import HeightenedEntry, SpellRecord
from spellcards.text_utils import TextMeasurer

WORDS_40 = " ".join(["lorem"] * 40)


def _fireball(**overrides):
    fields = dict(
        identifier="fireball",
        name="Fireball",
        level=3,
        traditions=("arcane", "primal"),
        traits=("Fire",),
        actions="Two Actions",
        components=("somatic", "verbal"),
        range="500 feet",
        area="20-foot burst",
        saving_throw="basic Reflex",
        description=(
            "A roaring blast of fire detonates at a spot you designate, dealing 6d6 fire damage.",
        ),
        heightened=(HeightenedEntry("Heightened (+1)", "The damage increases by 2d6."),),
    )
    fields.update(overrides)
    return SpellRecord(**fields)


def test_inner_rect():
    assert inner_rect(0, 0, 10, 20, margin=1) == (1, 1, 8, 18)


def test_card_formats_share_width_and_double_height():
    assert CardFormat.NORMAL.width == pytest.approx(63 * mm)
    assert CardFormat.NORMAL.height == pytest.approx(88 * mm)
    assert CardFormat.DOUBLE.height == 2 * CardFormat.NORMAL.height
    assert CardFormat.DOUBLE.width == CardFormat.NORMAL.width
    assert CardFormat.DOUBLE.content_width == CardFormat.NORMAL.content_width
    assert CardFormat.DOUBLE.content_height > CardFormat.NORMAL.content_height
    assert (CardFormat.NORMAL.slots, CardFormat.DOUBLE.slots) == (1, 2)


def test_small_spell_fits_normal_with_real_metrics():
    result = layout(format_spell(_fireball()), CardFormat.NORMAL, TextMeasurer())

    assert result.status is LayoutStatus.FIT
    assert 0 < result.used_height <= CardFormat.NORMAL.content_height
    assert result.unused_height >= 0
    assert result.texts[0].text == "Fireball"
    assert len(result.rules) == 2


def test_fit_layout_stays_inside_content_area():
    measurer = TextMeasurer()
    result = layout(format_spell(_fireball()), CardFormat.NORMAL, measurer)
    width = CardFormat.NORMAL.content_width

    for text in result.texts:
        assert 0 < text.y <= CardFormat.NORMAL.content_height
        if text.align == "right":
            assert text.x <= width
        else:
            assert text.x + measurer.width(text.text, text.font, text.size) <= width
    for rule in result.rules:
        assert rule.y < result.used_height


def test_layout_is_pure():
    measurer = TextMeasurer()
    blocks = format_spell(_fireball())
    assert layout(blocks, CardFormat.NORMAL, measurer) == layout(blocks, CardFormat.NORMAL, measurer)


def test_overflow_carries_excess_and_no_content(make_measurer):
    measurer = make_measurer(line_height=50)
    blocks = format_spell(_fireball(description=(WORDS_40,)))
    wrapped = wrap_blocks(blocks, CardFormat.NORMAL.content_width, measurer)

    result = layout_rows(wrapped, CardFormat.NORMAL, measurer)

    assert result.status is LayoutStatus.OVERFLOW
    assert result.texts == () and result.rules == ()
    assert result.excess == pytest.approx(content_height(wrapped, measurer) - CardFormat.NORMAL.content_height)
    assert result.excess > 0


def test_block_exactly_filling_the_area_fits(make_measurer):
    limit = CardFormat.NORMAL.content_height
    measurer = make_measurer(line_height=limit)
    result = layout([Paragraph("one line")], CardFormat.NORMAL, measurer)
    assert result.fits
    assert result.used_height == limit


def test_no_blocks_uses_no_height(make_measurer):
    result = layout([], CardFormat.NORMAL, make_measurer())
    assert result.fits and result.used_height == 0


def test_rows_advance_cursor_by_line_height_and_spacing(make_measurer):
    measurer = make_measurer(line_height=10)
    result = layout([StatLine("Range", "30 feet"), Divider(), Paragraph("text")], CardFormat.NORMAL, measurer)

    range_label, range_value, paragraph = result.texts
    assert range_label.y == range_value.y == pytest.approx(8)
    assert range_value.align == "right"
    assert result.rules[0].y > 10
    assert paragraph.y > result.rules[0].y
    assert result.used_height == pytest.approx(paragraph.y + 2)


def test_descenders_stay_inside_used_height():
    measurer = TextMeasurer()
    result = layout([Paragraph("gypsy quay jog")], CardFormat.NORMAL, measurer)

    (text,) = result.texts
    ink_bottom = text.y + measurer.line_height(text.font, text.size) - measurer.ascent(text.font, text.size)
    assert ink_bottom <= result.used_height + 1e-9
    assert text.y - measurer.ascent(text.font, text.size) >= -1e-9

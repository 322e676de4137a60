"""Choose the smallest card format a spell fits on."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from .layout import FORMATS, CardFormat, CardLayout, layout_rows, wrap_blocks
from .sections import ContentBlock, format_spell
from .spell import SpellRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    format: CardFormat
    layout: CardLayout


@dataclass(frozen=True)
class Unrenderable:
    """Spell whose content overflows even the largest format."""
    identifier: str
    name: str
    excess: float


def select_blocks(blocks: Sequence[ContentBlock], measurer) -> Union[Selection, CardLayout]:
    """Lay out blocks at Normal, then Double. Returns the overflowing Double
    layout when neither fits."""
    # all formats share the column width, so wrapping happens once
    wrapped = wrap_blocks(blocks, FORMATS[0].content_width, measurer)
    result = None
    for card_format in FORMATS:
        result = layout_rows(wrapped, card_format, measurer)
        if result.fits:
            return Selection(card_format, result)
        logger.debug("Content overflows %s card by %.1fpt", card_format.name, result.excess)
    return result


def select(record: SpellRecord, measurer) -> Union[Selection, Unrenderable]:
    result = select_blocks(format_spell(record), measurer)
    if isinstance(result, Selection):
        return result
    return Unrenderable(record.identifier, record.name, result.excess)

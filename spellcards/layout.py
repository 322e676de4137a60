"""Card formats and vertical placement of wrapped content on a card."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from .constants import (
    CARD_HEIGHT,
    CARD_MARGIN,
    CARD_WIDTH,
    DIVIDER_SPACE,
    DIVIDER_THICKNESS,
    DOUBLE_CARD_HEIGHT,
    HEADER_SPACE_AFTER,
    LINE_SPACE,
    PARAGRAPH_SPACE_AFTER,
    STAT_SPACE_AFTER,
)
from .sections import ContentBlock, Divider, Header, Paragraph, StatLine
from .text_utils import Row, wrap_block


def inner_rect(x: float, y: float, width: float, height: float, margin: float = CARD_MARGIN) -> Tuple[float, float, float, float]:
    """Return the inner content rectangle applying a fixed margin on all sides.

    Args:
        x, y: Lower-left origin of the outer rectangle (ReportLab coordinates)
        width, height: Dimensions of the outer rectangle
        margin: Distance kept free on each side
    Returns:
        (inner_x, inner_y, inner_width, inner_height)
    """
    return (x + margin, y + margin, width - 2 * margin, height - 2 * margin)


class CardFormat(Enum):
    NORMAL = (CARD_WIDTH, CARD_HEIGHT, 1)
    DOUBLE = (CARD_WIDTH, DOUBLE_CARD_HEIGHT, 2)

    @property
    def width(self) -> float:
        return self.value[0]

    @property
    def height(self) -> float:
        return self.value[1]

    @property
    def slots(self) -> int:
        """Number of vertically stacked page slots the card occupies."""
        return self.value[2]

    @property
    def content_width(self) -> float:
        return inner_rect(0, 0, self.width, self.height)[2]

    @property
    def content_height(self) -> float:
        return inner_rect(0, 0, self.width, self.height)[3]


# Attempted in this order
FORMATS = (CardFormat.NORMAL, CardFormat.DOUBLE)


class LayoutStatus(Enum):
    FIT = "fit"
    OVERFLOW = "overflow"


@dataclass(frozen=True)
class PlacedText:
    """Text positioned inside the content area.

    ``y`` is the baseline distance from the content-area top. For right
    aligned text ``x`` is the right edge.
    """
    text: str
    x: float
    y: float
    font: str
    size: float
    align: str = "left"


@dataclass(frozen=True)
class PlacedRule:
    x: float
    y: float
    width: float
    thickness: float


@dataclass(frozen=True)
class CardLayout:
    status: LayoutStatus
    content_height: float
    used_height: float = 0.0
    excess: float = 0.0
    texts: Tuple[PlacedText, ...] = ()
    rules: Tuple[PlacedRule, ...] = ()

    @property
    def fits(self) -> bool:
        return self.status is LayoutStatus.FIT

    @property
    def unused_height(self) -> float:
        return self.content_height - self.used_height


WrappedBlock = Tuple[ContentBlock, List[Row]]


def space_after(block: ContentBlock) -> float:
    if isinstance(block, Header):
        return HEADER_SPACE_AFTER
    if isinstance(block, StatLine):
        return STAT_SPACE_AFTER
    if isinstance(block, Paragraph):
        return PARAGRAPH_SPACE_AFTER
    return 0.0


def row_height(row: Row, measurer) -> float:
    return max(measurer.line_height(run.font, run.size) for run in row)


def block_height(block: ContentBlock, rows: List[Row], measurer) -> float:
    if isinstance(block, Divider):
        return 2 * DIVIDER_SPACE + DIVIDER_THICKNESS
    heights = [row_height(row, measurer) for row in rows]
    return sum(heights) + LINE_SPACE * max(0, len(heights) - 1)


def wrap_blocks(blocks: Sequence[ContentBlock], column_width: float, measurer) -> List[WrappedBlock]:
    """Wrap every block once; the result is reusable for any format of that width."""
    return [(block, wrap_block(block, column_width, measurer)) for block in blocks]


def content_height(wrapped: Sequence[WrappedBlock], measurer) -> float:
    """Total height the wrapped blocks need, ignoring any format limit."""
    total = 0.0
    for index, (block, rows) in enumerate(wrapped):
        if index:
            total += space_after(wrapped[index - 1][0])
        total += block_height(block, rows, measurer)
    return total


def layout_rows(wrapped: Sequence[WrappedBlock], card_format: CardFormat, measurer) -> CardLayout:
    """Place pre-wrapped blocks top to bottom within the format's content area.

    Placement is all-or-nothing: as soon as a block would cross the bottom of
    the content area an OVERFLOW layout without positioned content is returned.
    """
    limit = card_format.content_height
    width = card_format.content_width
    texts: List[PlacedText] = []
    rules: List[PlacedRule] = []
    cursor = 0.0
    for index, (block, rows) in enumerate(wrapped):
        top = cursor + (space_after(wrapped[index - 1][0]) if index else 0.0)
        height = block_height(block, rows, measurer)
        if top + height > limit:
            excess = content_height(wrapped, measurer) - limit
            return CardLayout(LayoutStatus.OVERFLOW, limit, excess=excess)

        if isinstance(block, Divider):
            rules.append(PlacedRule(0.0, top + DIVIDER_SPACE + DIVIDER_THICKNESS / 2, width, DIVIDER_THICKNESS))
        else:
            y = top
            for row in rows:
                h = row_height(row, measurer)
                # descenders stay inside the row box
                baseline = y + max(measurer.ascent(run.font, run.size) for run in row)
                for run in row:
                    if run.text:
                        texts.append(PlacedText(run.text, run.x, baseline, run.font, run.size, run.align))
                y += h + LINE_SPACE
        cursor = top + height

    return CardLayout(LayoutStatus.FIT, limit, used_height=cursor, texts=tuple(texts), rules=tuple(rules))


def layout(blocks: Sequence[ContentBlock], card_format: CardFormat, measurer) -> CardLayout:
    """Wrap the blocks at the format's column width and lay them out."""
    return layout_rows(wrap_blocks(blocks, card_format.content_width, measurer), card_format, measurer)

"""Order-preserving packing of laid-out cards onto printable pages."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple

from .constants import CARD_HEIGHT, CARD_WIDTH, GRID_COLUMNS, GRID_ROWS, PAGE_SIZE, SLOT_GAP
from .layout import CardFormat, CardLayout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacedCard:
    format: CardFormat
    layout: CardLayout
    row: int
    column: int
    # lower-left corner in page points (ReportLab coordinates)
    x: float
    y: float
    width: float
    height: float
    key: Optional[str] = None


@dataclass
class Page:
    number: int
    cards: List[PlacedCard] = field(default_factory=list)


class PageState(Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    FULL = "full"


class PageComposer:
    """Packs cards onto a grid of Normal-sized slots, strictly in the order added.

    Cards take the next free slot in reading order (left to right, then top to
    bottom). A Double card also takes the slot below it; when that slot does
    not exist the page is flushed and the card starts a new page. Slots passed
    over are never back-filled.
    """

    def __init__(
        self,
        columns: int = GRID_COLUMNS,
        rows: int = GRID_ROWS,
        page_size: Tuple[float, float] = PAGE_SIZE,
        gap: float = SLOT_GAP,
    ):
        if columns < 1 or rows < 2:
            # a Double card spans two rows
            raise ValueError("Page grid needs at least one column and two rows.")
        self.columns = columns
        self.rows = rows
        self.page_width, self.page_height = page_size
        self.gap = gap
        grid_w = columns * CARD_WIDTH + (columns - 1) * gap
        grid_h = rows * CARD_HEIGHT + (rows - 1) * gap
        # small tolerance for millimetre to point rounding
        if grid_w > self.page_width + 1e-6 or grid_h > self.page_height + 1e-6:
            raise ValueError(f"A {columns}x{rows} card grid does not fit on a {self.page_width:.0f}x{self.page_height:.0f}pt page.")
        self.hpageindent = (self.page_width - grid_w) / 2
        self.vpageindent = (self.page_height - grid_h) / 2

        self._pages: List[Page] = []
        self._current: Optional[Page] = None
        self._occupied: Set[int] = set()
        self._cursor = 0

    @property
    def pages(self) -> List[Page]:
        return list(self._pages)

    @property
    def state(self) -> PageState:
        if self._current is None or not self._current.cards:
            return PageState.EMPTY
        if self._next_free() is None:
            return PageState.FULL
        return PageState.PARTIAL

    def add_card(self, card_format: CardFormat, layout: CardLayout, key: Optional[str] = None) -> PlacedCard:
        if not layout.fits:
            raise ValueError("Only cards whose layout fits can be placed on a page.")
        if self._current is None:
            self._open_page()
        index = self._slot_for(card_format)
        if index is None and self._current.cards:
            self._flush()
            self._open_page()
            index = self._slot_for(card_format)
        if index is None:
            raise ValueError(f"A {card_format.name} card does not fit on an empty {self.columns}x{self.rows} page.")
        return self._place(index, card_format, layout, key)

    def finish(self) -> List[Page]:
        """Flush the current page if it holds cards and return all pages in order."""
        if self._current is not None and self._current.cards:
            self._flush()
        self._current = None
        return list(self._pages)

    def _open_page(self) -> None:
        self._current = Page(number=len(self._pages) + 1)
        self._occupied = set()
        self._cursor = 0

    def _flush(self) -> None:
        logger.debug("Page %d complete with %d card(s)", self._current.number, len(self._current.cards))
        self._pages.append(self._current)
        self._current = None

    def _next_free(self) -> Optional[int]:
        index = self._cursor
        while index < self.columns * self.rows:
            if index not in self._occupied:
                return index
            index += 1
        return None

    def _slot_for(self, card_format: CardFormat) -> Optional[int]:
        index = self._next_free()
        if index is None:
            return None
        row = index // self.columns
        if row + card_format.slots > self.rows:
            return None
        return index

    def _place(self, index: int, card_format: CardFormat, layout: CardLayout, key: Optional[str]) -> PlacedCard:
        row, column = divmod(index, self.columns)
        for k in range(card_format.slots):
            self._occupied.add(index + k * self.columns)
        self._cursor = index + 1

        x = self.hpageindent + column * (CARD_WIDTH + self.gap)
        top = self.page_height - self.vpageindent - row * (CARD_HEIGHT + self.gap)
        card = PlacedCard(
            format=card_format,
            layout=layout,
            row=row,
            column=column,
            x=x,
            y=top - card_format.height,
            width=card_format.width,
            height=card_format.height,
            key=key,
        )
        self._current.cards.append(card)
        return card

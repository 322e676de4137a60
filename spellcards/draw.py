"""Drawing primitives on the ReportLab canvas and card/page rendering."""
from typing import Iterable, Tuple

from reportlab.pdfgen import canvas

from .constants import PAGE_SIZE
from .layout import inner_rect
from .pages import Page, PlacedCard

OUTLINE_WIDTH = 0.0  # hairline


class PdfBackend:
    """Document backend writing a single PDF file with ReportLab."""

    def __init__(self, output_path, page_size: Tuple[float, float] = PAGE_SIZE, title: str = "Spells"):
        self.output_path = str(output_path)
        self.c = canvas.Canvas(self.output_path, pagesize=page_size)
        self.c.setTitle(title)

    def place_text(self, content: str, position: Tuple[float, float], font: str, size: float, alignment: str = "left"):
        x, y = position
        self.c.setFont(font, size)
        if alignment == "right":
            self.c.drawRightString(x, y, content)
        else:
            self.c.drawString(x, y, content)

    def place_rect(self, position: Tuple[float, float], size: Tuple[float, float], style: str = "outline"):
        x, y = position
        width, height = size
        if style == "fill":
            self.c.setFillColorRGB(0, 0, 0)
            self.c.rect(x, y, width, height, stroke=0, fill=1)
        else:
            self.c.setStrokeColorRGB(0, 0, 0)
            self.c.setLineWidth(OUTLINE_WIDTH)
            self.c.rect(x, y, width, height, stroke=1, fill=0)

    def new_page(self):
        self.c.showPage()

    def save(self):
        self.c.save()


def draw_card(backend, card: PlacedCard):
    """Draw a card's outline and its positioned content."""
    backend.place_rect((card.x, card.y), (card.width, card.height), "outline")
    inner_x, inner_y, _inner_w, inner_h = inner_rect(card.x, card.y, card.width, card.height)
    top = inner_y + inner_h  # layout y runs down from the content top
    for rule in card.layout.rules:
        backend.place_rect((inner_x + rule.x, top - rule.y - rule.thickness / 2), (rule.width, rule.thickness), "fill")
    for text in card.layout.texts:
        backend.place_text(text.text, (inner_x + text.x, top - text.y), text.font, text.size, text.align)


def draw_pages(backend, pages: Iterable[Page]):
    """Issue drawing primitives for every page; each page ends with new_page()."""
    for page in pages:
        for card in page.cards:
            draw_card(backend, card)
        backend.new_page()

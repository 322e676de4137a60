"""Shared physical and typographic constants for spell card rendering.

All lengths are in PDF points; millimetre values are converted with
ReportLab's ``mm`` unit.
"""
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

# Physical card sizes. Double cards share the width and take twice the height.
CARD_WIDTH: float = 63 * mm
CARD_HEIGHT: float = 88 * mm
DOUBLE_CARD_HEIGHT: float = 2 * CARD_HEIGHT

# Margin between the card outline and its content area
CARD_MARGIN: float = 1 * mm

# Page grid
PAGE_SIZE = A4
GRID_COLUMNS: int = 3
GRID_ROWS: int = 3
SLOT_GAP: float = 2 * mm  # space between neighbouring slots

# Typography
NAME_FONT_SIZE: float = 11.0
TEXT_FONT_SIZE: float = 7.7
LINE_SPACE: float = 0.5 * mm

# Fixed vertical spacing added after each block type
HEADER_SPACE_AFTER: float = 1 * mm
STAT_SPACE_AFTER: float = 0.5 * mm
PARAGRAPH_SPACE_AFTER: float = 1 * mm
DIVIDER_SPACE: float = 1 * mm  # above and below the rule
DIVIDER_THICKNESS: float = 0.5

# Gap kept between a stat label and its right-aligned value
STAT_VALUE_GAP: float = 2 * mm

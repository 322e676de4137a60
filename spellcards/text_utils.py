"""Text measurement and greedy wrapping relying on ReportLab width metrics."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from reportlab.pdfbase import pdfmetrics

from . import fonts
from .constants import NAME_FONT_SIZE, STAT_VALUE_GAP, TEXT_FONT_SIZE
from .sections import ContentBlock, Divider, Header, Paragraph, StatLine

# Python codecs for the single-byte encodings of the standard Type1 fonts
_ENCODING_CODECS = {
    "WinAnsiEncoding": "cp1252",
    "MacRomanEncoding": "mac_roman",
}


class MeasurementUnavailable(LookupError):
    """The font is unknown or has no glyph for a character of the text."""


class TextMeasurer:
    """Measures text with the same metrics the ReportLab canvas draws with.

    Missing glyphs are an error rather than a silent substitution, otherwise a
    wrapped line could be narrower than what ends up on the page.
    """

    def width(self, text: str, font: str, size: float) -> float:
        face = self._font(font)
        self._check_glyphs(face, font, text)
        return pdfmetrics.stringWidth(text, font, size)

    def line_height(self, font: str, size: float) -> float:
        self._font(font)
        ascent, descent = pdfmetrics.getAscentDescent(font, size)
        return ascent - descent

    def ascent(self, font: str, size: float) -> float:
        self._font(font)
        return pdfmetrics.getAscentDescent(font, size)[0]

    @staticmethod
    def _font(font: str):
        try:
            return pdfmetrics.getFont(font)
        except KeyError:
            raise MeasurementUnavailable(f"Font {font!r} is not registered") from None

    @staticmethod
    def _check_glyphs(face, font: str, text: str) -> None:
        char_widths = getattr(getattr(face, "face", None), "charWidths", None)
        if isinstance(char_widths, dict):
            missing = [ch for ch in text if not ch.isspace() and ord(ch) not in char_widths]
        else:
            codec = _ENCODING_CODECS.get(getattr(face, "encName", None))
            if codec is None:
                return
            missing = []
            for ch in text:
                try:
                    ch.encode(codec)
                except UnicodeEncodeError:
                    missing.append(ch)
        if missing:
            chars = "".join(sorted(set(missing)))
            raise MeasurementUnavailable(f"Font {font!r} has no glyph for {chars!r}")


@dataclass(frozen=True)
class WrappedLine:
    """One run of text on a visual row.

    ``x`` is measured from the column's left edge. For right-aligned runs it is
    the run's right edge.
    """
    text: str
    width: float
    font: str
    size: float
    x: float = 0.0
    align: str = "left"

    @property
    def right(self) -> float:
        return self.x if self.align == "right" else self.x + self.width


Row = Tuple[WrappedLine, ...]


def wrap_text(text: str, column_width: float, font: str, size: float, measurer, indent: float = 0.0) -> List[WrappedLine]:
    """Greedy word wrap of text into lines that do not exceed column_width.

    Each ``\\n`` separated source line is wrapped on its own; a blank one
    yields an empty line. A single word wider than the column is kept whole on
    its own line. ``indent`` reserves room at the start of the first line.
    """
    lines: List[WrappedLine] = []
    offset = indent
    for source_line in str(text).split("\n"):
        words = source_line.split()
        if not words:
            lines.append(WrappedLine("", 0.0, font, size, offset))
            offset = 0.0
            continue
        current = ""
        current_width = 0.0
        for w in words:
            candidate = f"{current} {w}" if current else w
            candidate_width = measurer.width(candidate, font, size)
            if offset + candidate_width <= column_width:
                current, current_width = candidate, candidate_width
            elif current:
                lines.append(WrappedLine(current, current_width, font, size, offset))
                offset = 0.0
                current, current_width = w, measurer.width(w, font, size)
            else:
                if offset:
                    # the word does not fit beside the indent; leave the indent alone
                    lines.append(WrappedLine("", 0.0, font, size, offset))
                    offset = 0.0
                current, current_width = w, candidate_width
        lines.append(WrappedLine(current, current_width, font, size, offset))
        offset = 0.0
    return lines


def wrap_block(block: ContentBlock, column_width: float, measurer) -> List[Row]:
    """Wrap one content block into visual rows for the given column width."""
    regular = fonts.FONT_REGULAR_NAME
    bold = fonts.FONT_BOLD_NAME

    if isinstance(block, Header):
        level_w = measurer.width(block.level_label, bold, NAME_FONT_SIZE)
        level = WrappedLine(block.level_label, level_w, bold, NAME_FONT_SIZE, column_width, "right")
        name_lines = wrap_text(block.name, column_width - level_w - STAT_VALUE_GAP, bold, NAME_FONT_SIZE, measurer)
        rows: List[Row] = [(name_lines[0], level)]
        rows.extend((line,) for line in name_lines[1:])
        if block.traits:
            traits = wrap_text(", ".join(block.traits), column_width, regular, TEXT_FONT_SIZE, measurer)
            rows.extend((line,) for line in traits)
        return rows

    if isinstance(block, StatLine):
        label_w = measurer.width(block.label, bold, TEXT_FONT_SIZE)
        label = WrappedLine(block.label, label_w, bold, TEXT_FONT_SIZE)
        value_w = measurer.width(block.value, regular, TEXT_FONT_SIZE)
        if label_w + STAT_VALUE_GAP + value_w <= column_width:
            return [(label, WrappedLine(block.value, value_w, regular, TEXT_FONT_SIZE, column_width, "right"))]
        # value moves below its label
        value_lines = wrap_text(block.value, column_width, regular, TEXT_FONT_SIZE, measurer)
        return [(label,)] + [(line,) for line in value_lines]

    if isinstance(block, Paragraph):
        if not block.label:
            return [(line,) for line in wrap_text(block.text, column_width, regular, TEXT_FONT_SIZE, measurer)]
        label_w = measurer.width(block.label, bold, TEXT_FONT_SIZE)
        indent = label_w + measurer.width(" ", regular, TEXT_FONT_SIZE)
        lines = wrap_text(block.text, column_width, regular, TEXT_FONT_SIZE, measurer, indent=indent)
        label = WrappedLine(block.label, label_w, bold, TEXT_FONT_SIZE)
        return [(label, lines[0])] + [(line,) for line in lines[1:]]

    if isinstance(block, Divider):
        return []

    raise TypeError(f"Unknown content block: {block!r}")

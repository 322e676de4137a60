"""Map a spell record to the ordered content blocks printed on its card."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .spell import SpellRecord

HEIGHTENED_LABEL = "Heightened"


@dataclass(frozen=True)
class Header:
    name: str
    level_label: str
    traits: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StatLine:
    label: str
    value: str


@dataclass(frozen=True)
class Paragraph:
    text: str
    label: Optional[str] = None


@dataclass(frozen=True)
class Divider:
    pass


ContentBlock = Union[Header, StatLine, Paragraph, Divider]


def level_label(record: SpellRecord) -> str:
    return f"{record.kind.capitalize()} {record.level}"


def cast_value(record: SpellRecord) -> Optional[str]:
    """Actions followed by the components, e.g. "Two Actions (somatic, verbal)"."""
    if record.actions and record.components:
        return f"{record.actions} ({', '.join(record.components)})"
    if record.actions:
        return record.actions
    if record.components:
        return ", ".join(record.components)
    return None


def stat_fields(record: SpellRecord) -> List[Tuple[str, Optional[str]]]:
    # canonical order
    return [
        ("Cast", cast_value(record)),
        ("Range", record.range),
        ("Area", record.area),
        ("Targets", record.targets),
        ("Duration", record.duration),
        ("Defense", record.saving_throw),
    ]


def format_spell(record: SpellRecord) -> Tuple[ContentBlock, ...]:
    """Return the card's blocks: header, stat lines, description, heightened.

    Empty fields produce no block at all.
    """
    blocks: List[ContentBlock] = [
        Header(record.name, level_label(record), tuple(record.traits) + tuple(record.traditions))
    ]
    for label, value in stat_fields(record):
        if value:
            blocks.append(StatLine(label, value))
    if record.description:
        blocks.append(Divider())
        blocks.extend(Paragraph(text) for text in record.description)
    if record.heightened:
        blocks.append(Divider())
        blocks.extend(Paragraph(entry.text, label=entry.label or HEIGHTENED_LABEL) for entry in record.heightened)
    return tuple(blocks)

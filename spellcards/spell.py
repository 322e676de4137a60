"""Spell records as handed to the card renderer.

Records are built from one object of a spell dump (a dict or a pandas row) by
``SpellRecord.from_mapping``. The renderer never mutates them.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

import pandas as pd

SPELL_KINDS = ("spell", "cantrip", "focus")

_HEIGHTENED_RE = re.compile(r"^\*\*\s*(Heightened[^*]*?)\s*\*\*\s*(.*)$", re.S)
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_TAG_RE = re.compile(r"<[^>]+>")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


class MalformedRecord(ValueError):
    """A spell object is missing required fields or holds invalid values."""


@dataclass(frozen=True)
class HeightenedEntry:
    label: str
    text: str


@dataclass(frozen=True)
class SpellRecord:
    identifier: str
    name: str
    level: int
    kind: str = "spell"
    traditions: Tuple[str, ...] = ()
    traits: Tuple[str, ...] = ()
    actions: Optional[str] = None
    components: Tuple[str, ...] = ()
    range: Optional[str] = None
    area: Optional[str] = None
    targets: Optional[str] = None
    duration: Optional[str] = None
    saving_throw: Optional[str] = None
    description: Tuple[str, ...] = ()
    heightened: Tuple[HeightenedEntry, ...] = field(default=())

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any], identifier: Optional[str] = None) -> "SpellRecord":
        """Build a record from a spell object, raising MalformedRecord on bad input."""
        name = _text(obj.get("name"))
        if not name:
            raise MalformedRecord(f"Spell {identifier or '<unknown>'} has no name.")
        try:
            level = _level(obj.get("level"))
        except MalformedRecord as exc:
            raise MalformedRecord(f"Unable to parse spell `{name}`: {exc}") from exc

        kind = (_text(obj.get("category")) or "spell").lower()
        if kind not in SPELL_KINDS:
            raise MalformedRecord(f"Unable to parse spell `{name}`: field `category` contains invalid value {kind!r}.")

        markdown = _text(obj.get("markdown"))
        if markdown:
            try:
                description, heightened = parse_markdown(markdown)
            except MalformedRecord as exc:
                raise MalformedRecord(f"Unable to parse spell `{name}`: {exc}") from exc
        else:
            description = _paragraphs(obj.get("description"))
            heightened = _heightened_entries(obj.get("heightened"))

        return cls(
            identifier=identifier or _text(obj.get("id")) or name,
            name=name,
            level=level,
            kind=kind,
            traditions=_strings(obj.get("tradition", obj.get("traditions"))),
            traits=_strings(obj.get("trait", obj.get("traits"))),
            actions=_text(obj.get("actions")),
            components=_strings(obj.get("component", obj.get("components"))),
            range=_text(obj.get("range")),
            area=_text(obj.get("area")),
            targets=_text(obj.get("target", obj.get("targets"))),
            duration=_text(obj.get("duration_raw", obj.get("duration"))),
            saving_throw=_text(obj.get("saving_throw")),
            description=description,
            heightened=heightened,
        )


def parse_markdown(markdown: str) -> Tuple[Tuple[str, ...], Tuple[HeightenedEntry, ...]]:
    """Split an Archives-of-Nethys style markdown body.

    Sections are separated by ``---``: a title block, the description, the
    heightened entries, then extras which are not printed on cards.
    """
    parts = markdown.replace("\r", "").split("---")
    if len(parts) < 2:
        raise MalformedRecord("Unable to extract description and heightened.")
    description = _paragraphs(parts[1])
    heightened = _heightened_entries(parts[2]) if len(parts) > 2 else ()
    return description, heightened


def strip_markup(text: str) -> str:
    """Drop links, html tags and emphasis markers, keeping the visible text."""
    text = _LINK_RE.sub(r"\1", text)
    text = _TAG_RE.sub("", text)
    return text.replace("**", "").replace("__", "")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value).strip()


def _strings(value: Any) -> Tuple[str, ...]:
    if _is_missing(value):
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return tuple(str(item).strip() for item in items if not _is_missing(item))


def _level(value: Any) -> int:
    if _is_missing(value) or isinstance(value, bool):
        raise MalformedRecord("field `level` missing")
    try:
        level = int(value)
    except (TypeError, ValueError):
        raise MalformedRecord(f"field `level` is not a number: {value!r}") from None
    if level != float(value) or level < 0:
        raise MalformedRecord(f"field `level` is not a valid rank: {value!r}")
    return level


def _paragraphs(value: Any) -> Tuple[str, ...]:
    if _is_missing(value):
        return ()
    if isinstance(value, str):
        chunks = _PARAGRAPH_SPLIT_RE.split(value.strip())
    else:
        chunks = [str(v) for v in value if not _is_missing(v)]
    result = []
    for chunk in chunks:
        lines = [strip_markup(line).strip() for line in chunk.strip().split("\n")]
        paragraph = "\n".join(lines).strip()
        if paragraph:
            result.append(paragraph)
    return tuple(result)


def _heightened_entries(value: Any) -> Tuple[HeightenedEntry, ...]:
    if _is_missing(value):
        return ()
    if isinstance(value, str):
        raw = [line.strip() for line in value.strip().split("\n")]
    else:
        raw = [item for item in value if not _is_missing(item)]

    entries = []
    for line in raw:
        if isinstance(line, Mapping):
            entries.append(HeightenedEntry(_text(line.get("label")) or "", strip_markup(_text(line.get("text")) or "")))
            continue
        line = str(line).strip()
        if not line:
            continue
        match = _HEIGHTENED_RE.match(line)
        if match:
            entries.append(HeightenedEntry(strip_markup(match.group(1)).strip(), strip_markup(match.group(2)).strip()))
        elif entries:
            # continuation of the previous entry
            prev = entries[-1]
            entries[-1] = HeightenedEntry(prev.label, f"{prev.text}\n{strip_markup(line).strip()}".strip())
        else:
            entries.append(HeightenedEntry("", strip_markup(line).strip()))
    return tuple(entries)

"""Spell content store backed by a pandas DataFrame loaded from a JSON dump."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

import pandas as pd

from .spell import SpellRecord

logger = logging.getLogger(__name__)


def _key(value: Any):
    if isinstance(value, str):
        return value.strip().casefold() or None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None or (not isinstance(value, (list, dict)) and pd.isna(value)):
        return None
    return str(value).casefold()


class SpellStore:
    """Resolves spell identifiers to SpellRecord values.

    Identifiers match the ``id`` column when the dump has one, otherwise (or
    when no id matches) the spell name, case-insensitively.
    """

    def __init__(self, data: pd.DataFrame):
        # Remove leading/trailing whitespaces across the DataFrame
        try:
            data = data.map(lambda x: x.strip() if isinstance(x, str) else x)
        except AttributeError:
            data = data.applymap(lambda x: x.strip() if isinstance(x, str) else x)
        self.data = data.reset_index(drop=True)
        self._by_id: Dict[str, int] = {}
        self._by_name: Dict[str, int] = {}
        if "id" in self.data.columns:
            self._index(self.data["id"], self._by_id)
        if "name" in self.data.columns:
            self._index(self.data["name"], self._by_name)

    @staticmethod
    def _index(column: pd.Series, target: Dict[str, int]) -> None:
        for position, value in enumerate(column):
            key = _key(value)
            if key is not None and key not in target:
                target[key] = position

    @classmethod
    def from_json(cls, path) -> "SpellStore":
        data = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
        logger.debug("Loaded %d spells from %s", len(data), path)
        return cls(data)

    @classmethod
    def from_records(cls, records: Sequence[Mapping[str, Any]]) -> "SpellStore":
        return cls(pd.DataFrame(list(records)))

    def __len__(self) -> int:
        return len(self.data)

    def resolve(self, identifier: str) -> SpellRecord:
        """Return the record for identifier.

        Raises KeyError for unknown identifiers and MalformedRecord for records
        that cannot be parsed.
        """
        key = _key(identifier)
        position = self._by_id.get(key)
        if position is None:
            position = self._by_name.get(key)
        if position is None:
            raise KeyError(f"Unknown spell {identifier!r}")
        row = self.data.iloc[position]
        return SpellRecord.from_mapping(row.to_dict(), identifier=str(identifier))


def read_identifiers(path) -> List[str]:
    """Read one spell identifier per line, skipping blanks and ``#`` comments."""
    identifiers = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                identifiers.append(line)
    return identifiers

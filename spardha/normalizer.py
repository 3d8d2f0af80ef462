"""
Submission normalizer — coerces loosely-typed sport / partner fields into a
canonical shape.

Registration payloads reach the bot from more than one client encoding
(Web App JSON, form-style `partners[<sport>]` maps, older clients that send
each partner as a serialized JSON string), so a field may arrive as a scalar,
a list, or a keyed object. Each field is first classified into a Shape and
the rules below branch on that tag:

    sports    SEQUENCE → trimmed non-blank strings, order kept, repeats dropped
              SCALAR   → one-element list when non-blank
    partners  SEQUENCE → records (strings are JSON-decoded first); incomplete
                         records are dropped, undecodable ones are an error
              MAPPING  → {sport: name} or {sport: {"name": name}}
"""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from spardha.errors import MalformedPartnerEncodingError


class Shape(Enum):
    ABSENT   = "absent"
    SCALAR   = "scalar"
    SEQUENCE = "sequence"
    MAPPING  = "mapping"


def classify(value: Any) -> Shape:
    if value is None:
        return Shape.ABSENT
    if isinstance(value, (str, bytes, int, float, bool)):
        return Shape.SCALAR
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, Sequence):
        return Shape.SEQUENCE
    return Shape.ABSENT


@dataclass(frozen=True)
class PartnerEntry:
    sport: str
    name: str

    def as_dict(self) -> Dict[str, str]:
        return {"sport": self.sport, "name": self.name}


@dataclass(frozen=True)
class SportSelection:
    """Canonical sports + partners of one submission."""

    sports:   Tuple[str, ...] = ()
    partners: Tuple[PartnerEntry, ...] = ()

    def as_dict(self) -> Dict[str, list]:
        return {
            "sports":   list(self.sports),
            "partners": [p.as_dict() for p in self.partners],
        }


# ── Helpers ───────────────────────────────────────────────────────────────────

def _clean(value: Any) -> str:
    """Trimmed string, or "" for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


def _unwrap_name(value: Any) -> str:
    # Some clients nest the partner name one level deeper: {"name": {"name": "Alex"}}
    if isinstance(value, Mapping):
        value = value.get("name")
    return _clean(value)


def _decode_partner(raw: str) -> Mapping:
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise MalformedPartnerEncodingError(raw) from exc
    if not isinstance(decoded, Mapping):
        raise MalformedPartnerEncodingError(raw)
    return decoded


# ── Per-field rules ───────────────────────────────────────────────────────────

def normalize_sports(value: Any) -> List[str]:
    shape = classify(value)
    if shape is Shape.SEQUENCE:
        # Repeated ids collapse to their first occurrence
        return list(dict.fromkeys(s for s in (_clean(v) for v in value) if s))
    if shape is Shape.SCALAR:
        sport = _clean(value)
        return [sport] if sport else []
    return []


def _partners_from_sequence(items: Sequence) -> List[PartnerEntry]:
    entries: List[PartnerEntry] = []
    for item in items:
        if isinstance(item, str):
            item = _decode_partner(item)
        if not isinstance(item, Mapping):
            continue
        sport = _clean(item.get("sport"))
        name  = _unwrap_name(item.get("name"))
        if sport and name:
            entries.append(PartnerEntry(sport=sport, name=name))
    return entries


def _partners_from_mapping(items: Mapping) -> List[PartnerEntry]:
    entries: List[PartnerEntry] = []
    for key, value in items.items():
        sport = _clean(key)
        name  = _unwrap_name(value)
        if sport and name:
            entries.append(PartnerEntry(sport=sport, name=name))
    return entries


def normalize_partners(value: Any) -> List[PartnerEntry]:
    """
    Raises
    ------
    MalformedPartnerEncodingError
        A sequence element is a string that does not decode to a JSON object.
    """
    shape = classify(value)
    if shape is Shape.SEQUENCE:
        return _partners_from_sequence(value)
    if shape is Shape.MAPPING:
        return _partners_from_mapping(value)
    return []


def normalize_selection(raw: Optional[Mapping]) -> SportSelection:
    """Build the canonical sports/partners selection of a raw submission."""
    raw = raw or {}
    return SportSelection(
        sports=tuple(normalize_sports(raw.get("sports"))),
        partners=tuple(normalize_partners(raw.get("partners"))),
    )

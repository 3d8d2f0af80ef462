"""
Sport catalog — the authoritative list of sport identifiers.

Categories
----------
outdoor         — team field games, plain ids ("cricket")
indoor          — sport × variant, expanded to composite ids ("badminton-doubles")
athletics       — track events
fun_activities  — non-competitive activities

A subset of the expanded ids (doubles / mixed formats) requires the
registrant to name a partner.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple


class SportCategory:
    OUTDOOR        = "outdoor"
    INDOOR         = "indoor"
    ATHLETICS      = "athletics"
    FUN_ACTIVITIES = "fun_activities"

    LABELS = {
        OUTDOOR:        "Outdoor",
        INDOOR:         "Indoor",
        ATHLETICS:      "Athletics",
        FUN_ACTIVITIES: "Fun Activities",
    }

    ORDER = (OUTDOOR, INDOOR, ATHLETICS, FUN_ACTIVITIES)


@dataclass(frozen=True)
class SportCatalog:
    """Immutable sport catalog. Build once, share by reference."""

    outdoor:        Tuple[str, ...]
    indoor:         Tuple[Tuple[str, Tuple[str, ...]], ...]
    athletics:      Tuple[str, ...]
    fun_activities: Tuple[str, ...]
    partner_sports: FrozenSet[str]

    _ordered:     Tuple[str, ...]    = field(init=False, repr=False, compare=False)
    _all:         FrozenSet[str]     = field(init=False, repr=False, compare=False)
    _category_of: Dict[str, str]     = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        groups = (
            (SportCategory.OUTDOOR,        self.outdoor),
            (SportCategory.INDOOR,         self.expand()),
            (SportCategory.ATHLETICS,      self.athletics),
            (SportCategory.FUN_ACTIVITIES, self.fun_activities),
        )
        ordered: list[str] = []
        category_of: dict[str, str] = {}
        for category, sports in groups:
            for sport in sports:
                if sport in category_of:
                    raise ValueError(f"Duplicate sport id in catalog: {sport}")
                category_of[sport] = category
                ordered.append(sport)

        unknown = self.partner_sports - category_of.keys()
        if unknown:
            raise ValueError(
                f"Partner sports missing from catalog: {', '.join(sorted(unknown))}"
            )

        object.__setattr__(self, "_ordered", tuple(ordered))
        object.__setattr__(self, "_all", frozenset(ordered))
        object.__setattr__(self, "_category_of", category_of)

    # ── Queries ───────────────────────────────────────────────────────────────

    def expand(self) -> Tuple[str, ...]:
        """Composite ids "<sport>-<variant>" for every indoor pair, in declaration order."""
        return tuple(
            f"{sport}-{variant}"
            for sport, variants in self.indoor
            for variant in variants
        )

    @property
    def all_sports(self) -> FrozenSet[str]:
        return self._all

    def ordered_sports(self) -> Tuple[str, ...]:
        return self._ordered

    def is_valid_sport(self, sport_id: str) -> bool:
        return sport_id in self._all

    def requires_partner(self, sport_id: str) -> bool:
        return sport_id in self.partner_sports

    def category_of(self, sport_id: str) -> Optional[str]:
        return self._category_of.get(sport_id)

    def sports_in(self, category: str) -> Tuple[str, ...]:
        return tuple(s for s in self._ordered if self._category_of[s] == category)

    @staticmethod
    def label(sport_id: str) -> str:
        """Human-readable title: "badminton-doubles" → "Badminton Doubles"."""
        return " ".join(part.capitalize() for part in sport_id.split("-", 1))


CATALOG = SportCatalog(
    outdoor=("cricket", "football", "volleyball", "kho-kho"),
    indoor=(
        ("badminton",   ("single", "doubles", "mixed")),
        ("tabletennis", ("single", "doubles", "mixed")),
        ("carrom",      ("singles", "doubles")),
        ("chess",       ("singles",)),
    ),
    athletics=("100m", "200m", "650m", "1200m", "relay"),
    fun_activities=(
        "dodgeball", "tugofwar", "lemonspoon", "sackrace", "threelegrace",
        "facepainting", "calligraphy", "creativewriting", "cooking",
        "bestoutofwaste", "mehandi", "poetry", "graphicdesign",
    ),
    partner_sports=frozenset({
        "badminton-doubles", "badminton-mixed",
        "tabletennis-doubles", "tabletennis-mixed",
        "carrom-doubles",
    }),
)

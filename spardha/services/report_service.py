"""
Registration report builder — groups registrations for admin views and
PDF export.

Report layout
-------------
For each selected sport (alphabetical):
    For each year of study (ascending):
        Numbered entries ordered by name, with the partner for that sport

Statistics summarise a list of registrations for the admin panel.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from spardha.catalog import CATALOG, SportCatalog
from spardha.models.models import Gender, Registration
from spardha.services.registration_service import RegistrationFilters


@dataclass
class ReportEntry:
    name:    str
    course:  str
    gender:  str
    partner: Optional[str] = None

    @property
    def line(self) -> str:
        text = f"{self.name} ({self.course}, {self.gender})"
        if self.partner:
            text += f" - Partner: {self.partner}"
        return text


@dataclass
class YearGroup:
    year:    int
    entries: List[ReportEntry] = field(default_factory=list)


@dataclass
class SportGroup:
    sport: str
    label: str
    years: List[YearGroup] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(y.entries) for y in self.years)


@dataclass
class RegistrationReport:
    """Grouped registrations plus the filters that produced them."""
    title:   str
    filters: RegistrationFilters
    total:   int = 0
    sports:  List[SportGroup] = field(default_factory=list)

    @property
    def filter_line(self) -> str:
        return self.filters.describe()


@dataclass
class RegistrationStats:
    total:           int            = 0
    boys:            int            = 0
    girls:           int            = 0
    with_partners:   int            = 0
    by_year:         Dict[int, int] = field(default_factory=dict)
    by_sport:        Dict[str, int] = field(default_factory=dict)
    by_status:       Dict[str, int] = field(default_factory=dict)

    def top_sports(self, n: int = 5) -> List[tuple[str, int]]:
        return sorted(self.by_sport.items(), key=lambda kv: (-kv[1], kv[0]))[:n]


def build_report(
    registrations: Iterable[Registration],
    filters: Optional[RegistrationFilters] = None,
    title: str = "Sports Event Registrations",
    catalog: SportCatalog = CATALOG,
) -> RegistrationReport:
    """
    Group registrations by sport then year. When a sport filter is set only
    that sport's section is produced; otherwise every selected sport appears.
    """
    filters = filters or RegistrationFilters()
    ordered = sorted(registrations, key=lambda r: (r.year, r.name.lower(), r.id or 0))

    by_sport: Dict[str, Dict[int, List[ReportEntry]]] = {}
    for reg in ordered:
        for sport in reg.sport_ids:
            if filters.sport and sport != filters.sport:
                continue
            entry = ReportEntry(
                name=reg.name,
                course=reg.course,
                gender=reg.gender,
                partner=reg.partner_for(sport),
            )
            by_sport.setdefault(sport, {}).setdefault(reg.year, []).append(entry)

    report = RegistrationReport(title=title, filters=filters, total=len(ordered))
    for sport in sorted(by_sport):
        years = by_sport[sport]
        report.sports.append(SportGroup(
            sport=sport,
            label=catalog.label(sport),
            years=[YearGroup(year=y, entries=years[y]) for y in sorted(years)],
        ))
    return report


def compute_stats(registrations: Iterable[Registration]) -> RegistrationStats:
    regs = list(registrations)
    genders  = Counter(r.gender for r in regs)
    years    = Counter(r.year for r in regs)
    statuses = Counter(r.status for r in regs)
    sports   = Counter(s for r in regs for s in r.sport_ids)

    return RegistrationStats(
        total=len(regs),
        boys=genders.get(Gender.BOY, 0),
        girls=genders.get(Gender.GIRL, 0),
        with_partners=sum(1 for r in regs if r.partners),
        by_year=dict(sorted(years.items())),
        by_sport=dict(sports),
        by_status=dict(statuses),
    )


def format_stats_text(stats: RegistrationStats, catalog: SportCatalog = CATALOG) -> str:
    """Markdown summary for the admin panel."""
    lines = [
        "📊 *Statistics*",
        "─────────────────",
        f"👥 Total: *{stats.total}*",
        f"👦 Boys: {stats.boys}   👧 Girls: {stats.girls}",
        f"🤝 With partners: {stats.with_partners}",
    ]
    if stats.by_year:
        years = "  ".join(f"Y{y}: {n}" for y, n in stats.by_year.items())
        lines.append(f"🎓 {years}")
    top = stats.top_sports()
    if top:
        lines.append("")
        lines.append("*Top sports*")
        for sport, n in top:
            lines.append(f"• {catalog.label(sport)} — {n}")
    return "\n".join(lines)

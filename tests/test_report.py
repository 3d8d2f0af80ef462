"""
Unit tests for report grouping and statistics (no database required).

Registrations are built as transient ORM objects; nothing is flushed.
"""
from __future__ import annotations

from spardha.models.models import Registration, RegistrationPartner, RegistrationSport
from spardha.services.registration_service import RegistrationFilters
from spardha.services.report_service import (
    ReportEntry,
    build_report,
    compute_stats,
    format_stats_text,
)


def _reg(rid: int, name: str, year: int, gender: str, sports: list[str],
         partners: dict[str, str] | None = None, status: str = "pending") -> Registration:
    return Registration(
        id=rid,
        name=name,
        email=f"{name.lower()}@example.com",
        course="BCom",
        year=year,
        gender=gender,
        status=status,
        sports=[RegistrationSport(sport=s, position=i) for i, s in enumerate(sports)],
        partners=[RegistrationPartner(sport=s, name=n) for s, n in (partners or {}).items()],
    )


def _sample() -> list[Registration]:
    return [
        _reg(1, "zoya",  2, "girl", ["cricket", "badminton-doubles"], {"badminton-doubles": "Meera"}),
        _reg(2, "Arjun", 1, "boy",  ["cricket"]),
        _reg(3, "Bela",  2, "girl", ["cricket", "100m"], status="approved"),
        _reg(4, "Dev",   1, "boy",  ["badminton-doubles"], {"badminton-doubles": "Kabir"}),
    ]


# ─────────────────────────── build_report ─────────────────────────────────────

class TestBuildReport:

    def test_sports_sorted_alphabetically(self) -> None:
        report = build_report(_sample())
        assert [g.sport for g in report.sports] == ["100m", "badminton-doubles", "cricket"]
        assert report.total == 4

    def test_years_ascending_names_sorted(self) -> None:
        report = build_report(_sample())
        cricket = next(g for g in report.sports if g.sport == "cricket")
        assert [y.year for y in cricket.years] == [1, 2]
        assert [e.name for e in cricket.years[1].entries] == ["Bela", "zoya"]
        assert cricket.total == 3
        assert cricket.label == "Cricket"

    def test_partner_shown_for_that_sport_only(self) -> None:
        report = build_report(_sample())
        badminton = next(g for g in report.sports if g.sport == "badminton-doubles")
        lines = [e.line for y in badminton.years for e in y.entries]
        assert lines == [
            "Dev (BCom, boy) - Partner: Kabir",
            "zoya (BCom, girl) - Partner: Meera",
        ]
        cricket = next(g for g in report.sports if g.sport == "cricket")
        assert all(e.partner is None for y in cricket.years for e in y.entries)

    def test_sport_filter_limits_sections(self) -> None:
        filters = RegistrationFilters(sport="cricket")
        report = build_report(_sample(), filters, title="Spardha 2026")
        assert [g.sport for g in report.sports] == ["cricket"]
        assert report.title == "Spardha 2026"
        assert report.filter_line == "Sport: Cricket"

    def test_empty(self) -> None:
        report = build_report([])
        assert report.total == 0
        assert report.sports == []
        assert report.filter_line == ""

    def test_entry_line_without_partner(self) -> None:
        assert ReportEntry("Asha", "BSc", "girl").line == "Asha (BSc, girl)"


# ─────────────────────────── Statistics ───────────────────────────────────────

class TestStats:

    def test_compute_stats(self) -> None:
        stats = compute_stats(_sample())
        assert stats.total == 4
        assert stats.boys == 2
        assert stats.girls == 2
        assert stats.with_partners == 2
        assert stats.by_year == {1: 2, 2: 2}
        assert stats.by_sport == {"cricket": 3, "badminton-doubles": 2, "100m": 1}
        assert stats.by_status == {"pending": 3, "approved": 1}

    def test_top_sports_order(self) -> None:
        stats = compute_stats(_sample())
        assert stats.top_sports(2) == [("cricket", 3), ("badminton-doubles", 2)]

    def test_format_stats_text(self) -> None:
        text = format_stats_text(compute_stats(_sample()))
        assert "Total: *4*" in text
        assert "Y1: 2  Y2: 2" in text
        assert "• Cricket — 3" in text

    def test_empty_stats(self) -> None:
        stats = compute_stats([])
        assert stats.total == 0
        assert "Top sports" not in format_stats_text(stats)

"""PDF export of a registration report.

Layout (letter, 612 x 792 pt):
- Centered title, optional filter line, total count
- One underlined heading per sport
- "Year N:" sub-headings with numbered, indented participant lines
  ("1. Name (Course, gender) - Partner: X")
- A new page starts whenever the next line would cross the bottom margin
"""
from __future__ import annotations

from datetime import datetime
from typing import List

import fitz  # PyMuPDF

from spardha.services.report_service import RegistrationReport

# --- Page layout constants (letter: 612 x 792 pt) ---
PAGE_W = 612
PAGE_H = 792
MARGIN = 50
BOTTOM_Y = PAGE_H - MARGIN
ENTRY_INDENT = 20

# Font sizes
TITLE_SIZE = 20
FILTER_SIZE = 12
TOTAL_SIZE = 10
SPORT_SIZE = 16
YEAR_SIZE = 12
ENTRY_SIZE = 10

LINE_HEIGHT_RATIO = 1.4

FONT_REGULAR = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'

BLACK = (0, 0, 0)
GREY = (0.35, 0.35, 0.35)


def pdf_filename(now: datetime) -> str:
    """Download name, e.g. sports-registrations-1760841600000.pdf."""
    return f'sports-registrations-{int(now.timestamp() * 1000)}.pdf'


class _Cursor:
    """Tracks the current page and baseline, adding pages as needed."""

    def __init__(self, doc: fitz.Document) -> None:
        self.doc = doc
        self.page = doc.new_page(width=PAGE_W, height=PAGE_H)
        self.y = MARGIN

    def ensure(self, height: float) -> None:
        if self.y + height > BOTTOM_Y:
            self.page = self.doc.new_page(width=PAGE_W, height=PAGE_H)
            self.y = MARGIN

    def gap(self, lines: float, size: float) -> None:
        self.y += lines * size * LINE_HEIGHT_RATIO

    def centered(self, text: str, size: float, font: str = FONT_REGULAR,
                 color=BLACK) -> None:
        self.ensure(size * LINE_HEIGHT_RATIO)
        self.y += size
        tw = fitz.get_text_length(text, fontname=font, fontsize=size)
        self.page.insert_text(fitz.Point(PAGE_W / 2 - tw / 2, self.y), text,
                              fontname=font, fontsize=size, color=color)
        self.y += size * (LINE_HEIGHT_RATIO - 1)

    def left(self, text: str, size: float, font: str = FONT_REGULAR,
             indent: float = 0, underline: bool = False) -> None:
        x = MARGIN + indent
        for line in _wrap(text, PAGE_W - MARGIN - x, font, size):
            self.ensure(size * LINE_HEIGHT_RATIO)
            self.y += size
            self.page.insert_text(fitz.Point(x, self.y), line,
                                  fontname=font, fontsize=size, color=BLACK)
            if underline:
                tw = fitz.get_text_length(line, fontname=font, fontsize=size)
                self.page.draw_line(fitz.Point(x, self.y + 2),
                                    fitz.Point(x + tw, self.y + 2),
                                    color=BLACK, width=0.8)
            self.y += size * (LINE_HEIGHT_RATIO - 1)


def _wrap(text: str, width: float, font: str, size: float) -> List[str]:
    """Greedy word wrap to the given width."""
    words = text.split()
    if not words:
        return ['']
    lines = []
    current = words[0]
    for word in words[1:]:
        candidate = f'{current} {word}'
        if fitz.get_text_length(candidate, fontname=font, fontsize=size) <= width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def render_registrations_pdf(report: RegistrationReport) -> bytes:
    """Render a grouped registration report and return the PDF bytes."""
    doc = fitz.open()
    try:
        cur = _Cursor(doc)

        cur.centered(report.title, TITLE_SIZE, FONT_BOLD)
        cur.gap(0.5, TITLE_SIZE)
        if not report.filters.is_empty:
            cur.centered(f'Filters: {report.filter_line}', FILTER_SIZE, color=GREY)
            cur.gap(0.5, FILTER_SIZE)
        cur.centered(f'Total Registrations: {report.total}', TOTAL_SIZE)
        cur.gap(1.5, TOTAL_SIZE)

        for group in report.sports:
            # Keep the heading with at least its first year line
            cur.ensure((SPORT_SIZE + YEAR_SIZE + ENTRY_SIZE) * LINE_HEIGHT_RATIO)
            cur.left(group.label, SPORT_SIZE, FONT_BOLD, underline=True)
            cur.gap(0.3, SPORT_SIZE)

            for year_group in group.years:
                cur.left(f'Year {year_group.year}:', YEAR_SIZE, FONT_BOLD)
                for index, entry in enumerate(year_group.entries, start=1):
                    cur.left(f'{index}. {entry.line}', ENTRY_SIZE, indent=ENTRY_INDENT)
                cur.gap(0.5, ENTRY_SIZE)

            cur.gap(0.7, SPORT_SIZE)

        return doc.tobytes()
    finally:
        doc.close()

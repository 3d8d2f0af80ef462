"""
ORM models for the SPARDHA registration store.

Domain overview
---------------
Registration           — one participant's sign-up (unique per email)
  ├─ RegistrationSport   — a selected sport id, ordered by position
  └─ RegistrationPartner — partner name for a partner-requiring sport
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spardha.models.base import Base

# ─────────────────────────── Constants ────────────────────────────────────────

class RegistrationStatus:
    PENDING    = "pending"     # Awaiting admin review
    APPROVED   = "approved"
    REJECTED   = "rejected"
    WAITLISTED = "waitlisted"

    ALL = (PENDING, APPROVED, REJECTED, WAITLISTED)

    LABELS = {
        PENDING:    "Pending",
        APPROVED:   "Approved",
        REJECTED:   "Rejected",
        WAITLISTED: "Waitlisted",
    }

    EMOJI = {
        PENDING:    "⚪️",
        APPROVED:   "✅",
        REJECTED:   "❌",
        WAITLISTED: "⏳",
    }


class Gender:
    BOY  = "boy"
    GIRL = "girl"

    ALL = (BOY, GIRL)

    LABELS = {
        BOY:  "Boy",
        GIRL: "Girl",
    }


# ─────────────────────────── Models ───────────────────────────────────────────

class Registration(Base):
    """A participant's event registration."""
    __tablename__ = "registrations"

    id:                Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)
    name:              Mapped[str]           = mapped_column(String(100))
    email:             Mapped[str]           = mapped_column(String(255), unique=True, index=True)
    course:            Mapped[str]           = mapped_column(String(100))
    year:              Mapped[int]           = mapped_column(Integer, index=True)
    gender:            Mapped[str]           = mapped_column(String(10), index=True)   # Gender.*
    status:            Mapped[str]           = mapped_column(
        String(20), default=RegistrationStatus.PENDING, index=True
    )
    notes:             Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    registration_date: Mapped[datetime]      = mapped_column(DateTime, default=func.now())
    last_updated:      Mapped[datetime]      = mapped_column(DateTime, default=func.now())

    sports:   Mapped[List["RegistrationSport"]] = relationship(
        back_populates="registration",
        cascade="all, delete-orphan",
        order_by="RegistrationSport.position",
    )
    partners: Mapped[List["RegistrationPartner"]] = relationship(
        back_populates="registration",
        cascade="all, delete-orphan",
    )

    @property
    def sport_ids(self) -> list[str]:
        return [s.sport for s in self.sports]

    def partner_for(self, sport: str) -> Optional[str]:
        """Partner name entered for the given sport, if any."""
        for p in self.partners:
            if p.sport == sport:
                return p.name
        return None

    @property
    def status_emoji(self) -> str:
        return RegistrationStatus.EMOJI.get(self.status, "❓")

    @property
    def gender_label(self) -> str:
        return Gender.LABELS.get(self.gender, self.gender)


class RegistrationSport(Base):
    """A sport selected in a registration."""
    __tablename__ = "registration_sports"
    __table_args__ = (
        UniqueConstraint("registration_id", "sport", name="uq_registration_sport"),
    )

    id:              Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    registration_id: Mapped[int] = mapped_column(
        ForeignKey("registrations.id", ondelete="CASCADE"), index=True
    )
    sport:           Mapped[str] = mapped_column(String(50), index=True)
    position:        Mapped[int] = mapped_column(Integer, default=0)   # order of selection

    registration: Mapped["Registration"] = relationship(back_populates="sports")


class RegistrationPartner(Base):
    """Partner named for a doubles / mixed sport."""
    __tablename__ = "registration_partners"
    __table_args__ = (
        UniqueConstraint("registration_id", "sport", name="uq_registration_partner"),
    )

    id:              Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    registration_id: Mapped[int] = mapped_column(
        ForeignKey("registrations.id", ondelete="CASCADE"), index=True
    )
    sport:           Mapped[str] = mapped_column(String(50), index=True)
    name:            Mapped[str] = mapped_column(String(100))

    registration: Mapped["Registration"] = relationship(back_populates="partners")

from spardha.models.base import Base, engine, AsyncSessionFactory
from spardha.models.models import (
    Registration,
    RegistrationSport,
    RegistrationPartner,
    RegistrationStatus,
    Gender,
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionFactory",
    "Registration",
    "RegistrationSport",
    "RegistrationPartner",
    "RegistrationStatus",
    "Gender",
]

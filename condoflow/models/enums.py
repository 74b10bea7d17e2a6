"""Enum definitions for units, readings and registrations."""

from enum import Enum


class UtilityType(str, Enum):
    """Metered utility."""

    WATER = "water"
    GAS = "gas"

    @property
    def label(self) -> str:
        return "Água" if self is UtilityType.WATER else "Gás"

    @property
    def precision(self) -> int:
        """Decimal places used when displaying values of this utility."""
        return 2 if self is UtilityType.WATER else 3


class ReadingStatus(str, Enum):
    """Status stored on a ledger entry."""

    LIDO = "LIDO"  # Current value entered
    PENDENTE = "PENDENTE"  # Awaiting current value
    ERRO = "ERRO"  # Saved below the previous value after confirmation


class ResidentRole(str, Enum):
    """Relationship of the resident with the unit."""

    PROPRIETARIO = "Proprietário"
    INQUILINO = "Inquilino"


class RegistrationStatus(str, Enum):
    """Lifecycle of a resident registration request."""

    PENDENTE = "PENDENTE"
    APROVADO = "APROVADO"
    REJEITADO = "REJEITADO"

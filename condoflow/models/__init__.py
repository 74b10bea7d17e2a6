"""Database models."""

from condoflow.models.reading import Reading
from condoflow.models.registration import RegistrationRequest
from condoflow.models.unit import Unit
from condoflow.models.user import User

__all__ = ["Unit", "Reading", "RegistrationRequest", "User"]

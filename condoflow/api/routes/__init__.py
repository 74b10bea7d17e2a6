"""API routers."""

from condoflow.api.routes import (
    auth,
    dashboard,
    health,
    readings,
    registrations,
    reports,
    units,
)

__all__ = ["auth", "dashboard", "health", "readings", "registrations", "reports", "units"]

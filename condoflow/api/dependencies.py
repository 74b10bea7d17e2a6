"""Shared route dependencies."""

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

from condoflow.core.database import get_db
from condoflow.services.auth import get_current_user
from condoflow.store.base import RecordStore
from condoflow.store.sqlalchemy_store import SqlAlchemyStore


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's session."""
    return SqlAlchemyStore(db)


def get_insight_client() -> httpx.Client | None:
    """HTTP client for the insight service; None lets the service open its own."""
    return None


# Applied to every administrative router
require_user = [Depends(get_current_user)]

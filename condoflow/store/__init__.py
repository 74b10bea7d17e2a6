"""Record store port and its SQLAlchemy implementation."""

from condoflow.store.base import RecordStore, RecordStoreError
from condoflow.store.sqlalchemy_store import SqlAlchemyStore

__all__ = ["RecordStore", "RecordStoreError", "SqlAlchemyStore"]

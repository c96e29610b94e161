"""
Single-table schema: the durable key-value slot that holds snapshots.
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

from ..core.record import now_utc

Base = declarative_base()


class SlotRow(Base):
    """One serialized blob per key; last write wins."""

    __tablename__ = "kv_slots"

    key = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)
    updated_ts = Column(DateTime(timezone=True), default=now_utc, nullable=False)

"""SQLAlchemy ORM models for the CDR billing service.

This module defines database models for:
- SubscriberModel: The pool of subscribers calls are generated for
- CallDataRecordModel: Persisted call data records
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class SubscriberModel(Base):
    """A subscriber known to the generator."""

    __tablename__ = "subscriber"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    msisdn: Mapped[str] = mapped_column(String(11), nullable=False, unique=True, index=True)


class CallDataRecordModel(Base):
    """One logged call between two subscribers.

    call_type holds the two-character code ("01" outgoing, "02" incoming),
    read from phone_one's point of view.
    """

    __tablename__ = "cdr"
    __table_args__ = (
        Index("ix_cdr_phone_one_start_time", "phone_one", "start_time"),
        Index("ix_cdr_phone_two_start_time", "phone_two", "start_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    call_type: Mapped[str] = mapped_column(String(2), nullable=False)
    phone_one: Mapped[str] = mapped_column(String(11), nullable=False)
    phone_two: Mapped[str] = mapped_column(String(11), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

"""
Book lock model.

A single row recording the last date of the closed books.
Vouchers dated on or before locked_through can no longer be
posted, edited or deleted. No row means nothing is locked.
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from general_ledger.models.base import Base


class BookLock(Base):
    __tablename__ = "book_locks"

    id: Mapped[int] = mapped_column(primary_key=True)
    locked_through: Mapped[date] = mapped_column(Date, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

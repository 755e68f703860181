"""
Party model.

A customer or supplier. The party points at its ledger through
coa_ledger_id; the reference is weak: the ledger lives on even
if the party record changes.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from general_ledger.models.base import Base
from general_ledger.models.enums import PartyType


class Party(Base):
    __tablename__ = "parties"

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    party_type: Mapped[PartyType] = mapped_column(
        SAEnum(PartyType, name="party_type_enum", create_constraint=True),
        nullable=False,
    )
    coa_ledger_id: Mapped[str | None] = mapped_column(
        ForeignKey("coa_ledgers.id"), nullable=True, default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Party {self.name} ({self.party_type.value})>"

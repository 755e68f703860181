"""
Chart-of-accounts group model.

Groups form a tree. Ledgers hang off groups; reports roll
ledger balances up the tree.
"""

from datetime import datetime

from sqlalchemy import (
    String, Integer, Boolean, DateTime, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from general_ledger.models.base import Base
from general_ledger.models.enums import Nature, GroupRole


class CoaGroup(Base):
    """
    A node in the chart-of-accounts tree.

    parent_id is None for roots. level is derived from the
    parent when the group is created or moved. Groups are
    never deleted once a ledger points at them.
    """

    __tablename__ = "coa_groups"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("coa_groups.id"), nullable=True, index=True
    )
    nature: Mapped[Nature] = mapped_column(
        SAEnum(Nature, name="nature_enum"),
        nullable=False,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sort_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    role: Mapped[GroupRole | None] = mapped_column(
        SAEnum(GroupRole, name="group_role_enum"),
        unique=True,
        nullable=True,
    )
    is_system: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    ledgers: Mapped[list["CoaLedger"]] = relationship(
        back_populates="group"
    )

    @property
    def is_root(self) -> bool:
        return not self.parent_id

    def __repr__(self) -> str:
        return f"<CoaGroup {self.id} {self.name} ({self.nature.value})>"

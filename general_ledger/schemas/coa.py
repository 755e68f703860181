"""
Pydantic schemas for chart-of-accounts operations.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
differ (the opening balance is nested here, flat in storage).
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from general_ledger.models.enums import (
    Nature,
    DrCr,
    LedgerType,
    LedgerStatus,
    GroupRole,
)


# --- Request Schemas ---

class GroupCreate(BaseModel):
    """Request to create a chart-of-accounts group."""
    id: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=150)
    nature: Nature
    parent_id: str | None = None
    sort_order: int = 0
    role: GroupRole | None = None
    is_system: bool = False


class GroupMove(BaseModel):
    """Request to re-parent a group. None makes it a root."""
    parent_id: str | None = None


class OpeningBalance(BaseModel):
    amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=19, decimal_places=4)
    dr_cr: DrCr = DrCr.DR
    as_of: date | None = None


class LedgerCreate(BaseModel):
    """Request to create a postable ledger."""
    id: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=150)
    group_id: str = Field(min_length=1, max_length=50)
    nature: Nature
    ledger_type: LedgerType = LedgerType.OTHER
    opening_balance: OpeningBalance = Field(default_factory=OpeningBalance)
    is_posting: bool = True


class LedgerStatusUpdate(BaseModel):
    status: LedgerStatus


# --- Response Schemas ---

class GroupResponse(BaseModel):
    id: str
    name: str
    parent_id: str | None
    nature: Nature
    level: int
    sort_order: int
    role: GroupRole | None
    is_system: bool

    model_config = {"from_attributes": True}


class LedgerResponse(BaseModel):
    id: str
    name: str
    group_id: str
    nature: Nature
    ledger_type: LedgerType
    opening_amount: Decimal
    opening_dr_cr: DrCr
    opening_as_of: date | None
    is_posting: bool
    status: LedgerStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class SeedResponse(BaseModel):
    groups_created: int
    ledgers_created: int

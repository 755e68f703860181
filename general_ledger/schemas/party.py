"""
Pydantic schemas for parties.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from general_ledger.models.enums import PartyType


class PartyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    party_type: PartyType


class PartyResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    name: str
    party_type: PartyType
    coa_ledger_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}

"""
Party API endpoints.

Parties (customers, suppliers, vendors, partners) get their
ledger lazily, on first resolve.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from general_ledger.exceptions import NotFoundError, PartyLedgerConflictError
from general_ledger.models.base import get_db
from general_ledger.services.party_service import PartyService, PartyLedgerBinder
from general_ledger.schemas.coa import LedgerResponse
from general_ledger.schemas.party import PartyCreate, PartyResponse

router = APIRouter(prefix="/parties", tags=["Parties"])


@router.post("", response_model=PartyResponse, status_code=201)
def create_party(
    request: PartyCreate,
    db: Session = Depends(get_db),
):
    service = PartyService(db)
    try:
        party = service.create_party(request)
        db.commit()
        return party
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{party_id}/ledger", response_model=LedgerResponse)
def resolve_party_ledger(
    party_id: int,
    db: Session = Depends(get_db),
):
    """
    Return the party's ledger, creating it if needed.

    Customers get a receivable ledger under trade receivables,
    everyone else a payable ledger under trade payables.
    Concurrent calls for one party yield the same ledger.
    """
    binder = PartyLedgerBinder(db)
    try:
        return binder.resolve_ledger_for(party_id)
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except PartyLedgerConflictError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

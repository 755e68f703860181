"""
Chart-of-accounts API endpoints.

Setup operations for groups and ledgers. The chart changes
rarely; these endpoints are for administrators and seeding.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from general_ledger.exceptions import NotFoundError
from general_ledger.models.base import get_db
from general_ledger.services.chart_service import ChartService
from general_ledger.schemas.coa import (
    GroupCreate,
    GroupMove,
    GroupResponse,
    LedgerCreate,
    LedgerResponse,
    LedgerStatusUpdate,
    SeedResponse,
)

router = APIRouter(prefix="/coa", tags=["Chart of Accounts"])


# --- Group Endpoints ---

@router.post("/groups", response_model=GroupResponse, status_code=201)
def create_group(
    request: GroupCreate,
    db: Session = Depends(get_db),
):
    """Create a group under an existing parent, or a new root."""
    service = ChartService(db)
    try:
        group = service.create_group(request)
        db.commit()
        return group
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/groups/{group_id}", response_model=GroupResponse)
def get_group(
    group_id: str,
    db: Session = Depends(get_db),
):
    service = ChartService(db)
    try:
        return service.get_group(group_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/groups/{group_id}/parent", response_model=GroupResponse)
def move_group(
    group_id: str,
    request: GroupMove,
    db: Session = Depends(get_db),
):
    """
    Re-parent a group.

    Rejected with 400 when the move would make the group
    its own ancestor.
    """
    service = ChartService(db)
    try:
        group = service.move_group(group_id, request.parent_id)
        db.commit()
        return group
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


# --- Ledger Endpoints ---

@router.post("/ledgers", response_model=LedgerResponse, status_code=201)
def create_ledger(
    request: LedgerCreate,
    db: Session = Depends(get_db),
):
    """Create a postable ledger in an existing group."""
    service = ChartService(db)
    try:
        ledger = service.create_ledger(request)
        db.commit()
        return ledger
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/ledgers/{ledger_id}", response_model=LedgerResponse)
def get_ledger(
    ledger_id: str,
    db: Session = Depends(get_db),
):
    service = ChartService(db)
    try:
        return service.get_ledger(ledger_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/ledgers/{ledger_id}/status", response_model=LedgerResponse)
def set_ledger_status(
    ledger_id: str,
    request: LedgerStatusUpdate,
    db: Session = Depends(get_db),
):
    """Activate or deactivate a ledger. Inactive ledgers reject postings."""
    service = ChartService(db)
    try:
        ledger = service.set_ledger_status(ledger_id, request.status)
        db.commit()
        return ledger
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/seed", response_model=SeedResponse)
def seed_default_chart(db: Session = Depends(get_db)):
    """Install the default chart. Safe to call more than once."""
    service = ChartService(db)
    try:
        groups, ledgers = service.seed_default_chart()
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    return SeedResponse(groups_created=groups, ledgers_created=ledgers)

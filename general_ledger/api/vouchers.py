"""
Voucher API endpoints.

Posting, editing and deleting vouchers, plus the book lock.
All validation lives in the JournalService; this layer maps
its errors to status codes and owns the commit.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from general_ledger.exceptions import NotFoundError, UnbalancedVoucherError
from general_ledger.models.base import get_db
from general_ledger.services.journal_service import JournalService
from general_ledger.schemas.voucher import (
    BookLockRequest,
    BookLockResponse,
    VoucherCreate,
    VoucherResponse,
)

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


def _error(e: ValueError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, UnbalancedVoucherError):
        # Both totals go back so the client can show the difference.
        return HTTPException(status_code=400, detail={
            "message": str(e),
            "total_debit": str(e.total_debit),
            "total_credit": str(e.total_credit),
        })
    return HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=VoucherResponse, status_code=201)
def post_voucher(
    request: VoucherCreate,
    db: Session = Depends(get_db),
):
    """
    Post a balanced voucher.

    Total debits must equal total credits and every line must
    target an active posting ledger. A rejected voucher writes
    nothing.
    """
    service = JournalService(db)
    try:
        voucher = service.append(request)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise _error(e)


@router.get("", response_model=list[VoucherResponse])
def list_vouchers(
    from_date: dt.date | None = None,
    to_date: dt.date | None = None,
    db: Session = Depends(get_db),
):
    """Vouchers dated within the window, in posting order."""
    service = JournalService(db)
    return list(service.list_in_range(from_date, to_date))


@router.get("/{voucher_id}", response_model=VoucherResponse)
def get_voucher(
    voucher_id: int,
    db: Session = Depends(get_db),
):
    service = JournalService(db)
    try:
        return service.get(voucher_id)
    except ValueError as e:
        raise _error(e)


@router.put("/{voucher_id}", response_model=VoucherResponse)
def replace_voucher(
    voucher_id: int,
    request: VoucherCreate,
    db: Session = Depends(get_db),
):
    """Replace a voucher's content. The new content must balance."""
    service = JournalService(db)
    try:
        voucher = service.replace(voucher_id, request)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise _error(e)


@router.delete("/{voucher_id}", status_code=204)
def delete_voucher(
    voucher_id: int,
    db: Session = Depends(get_db),
):
    service = JournalService(db)
    try:
        service.delete(voucher_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise _error(e)


@router.post("/lock", response_model=BookLockResponse)
def lock_books(
    request: BookLockRequest,
    db: Session = Depends(get_db),
):
    """
    Close the books through a date; vouchers on or before it are frozen.

    Sending `locked_through: null` removes the lock.
    """
    service = JournalService(db)
    locked = service.lock_books(request.locked_through)
    db.commit()
    return BookLockResponse(locked_through=locked)

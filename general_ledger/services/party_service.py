"""
Party service and party ledger binder.

Every customer or supplier gets its own ledger the first time
it needs one. Resolution order:
1. the ledger the party already points at,
2. an existing ledger carrying the party's name (legacy or
   hand-made ledgers), which is then bound to the party,
3. a new ledger under Trade Receivables (customers) or Trade
   Payables (everyone else), bound and committed.

Get-or-create must not produce two ledgers for one party.
Inside one process a per-party lock serialises resolvers.
Across processes the new ledger's id is derived from the party
id, so a second insert fails on the primary key; the loser rolls
back and resolves again, finding the winner's ledger.
"""

import logging
import threading
import weakref
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from general_ledger.exceptions import NotFoundError, PartyLedgerConflictError
from general_ledger.models.enums import (
    DrCr,
    GroupRole,
    LedgerType,
    Nature,
)
from general_ledger.models.ledger import CoaLedger
from general_ledger.models.party import Party
from general_ledger.schemas.party import PartyCreate
from general_ledger.services.chart_service import ChartService

logger = logging.getLogger(__name__)

# Attempts before giving up on a contended create.
MAX_RESOLVE_ATTEMPTS = 3

_locks_guard = threading.Lock()
# Entries disappear once no resolver holds the lock.
_party_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = (
    weakref.WeakValueDictionary()
)


def _lock_for(party_id: int) -> threading.Lock:
    with _locks_guard:
        lock = _party_locks.get(party_id)
        if lock is None:
            lock = _party_locks[party_id] = threading.Lock()
        return lock


def party_ledger_id(party: Party) -> str:
    """Deterministic ledger id for a party's own ledger."""
    return f"PARTY-{party.id:05d}"


class PartyService:

    def __init__(self, db: Session):
        self.db = db

    def create_party(self, request: PartyCreate) -> Party:
        party = Party(name=request.name.strip(), party_type=request.party_type)
        self.db.add(party)
        self.db.flush()
        return party

    def get_party(self, party_id: int) -> Party:
        party = self.db.get(Party, party_id)
        if not party:
            raise NotFoundError(f"Party {party_id} not found")
        return party


class PartyLedgerBinder:
    """
    Lazily materialises a party's ledger.

    Unlike the other services this one commits: a freshly created
    ledger must be visible to concurrent resolvers before the call
    returns. Call it before staging other writes on the session.
    """

    def __init__(self, db: Session):
        self.db = db
        self.chart = ChartService(db)

    def resolve_ledger_for(self, party_id: int) -> CoaLedger:
        lock = _lock_for(party_id)
        with lock:
            for attempt in range(1, MAX_RESOLVE_ATTEMPTS + 1):
                try:
                    return self._resolve(party_id)
                except IntegrityError:
                    self.db.rollback()
                    logger.info(
                        "Ledger for party %s created concurrently, "
                        "retrying lookup (attempt %d)",
                        party_id, attempt,
                    )
        # Each retry should find the winner's ledger; getting here
        # means the conflict was not about this party's ledger.
        raise PartyLedgerConflictError(
            f"Could not resolve a ledger for party {party_id}"
        )

    def _resolve(self, party_id: int) -> CoaLedger:
        party = self.db.get(Party, party_id, populate_existing=True)
        if not party:
            raise NotFoundError(f"Party {party_id} not found")

        # 1. Already bound
        if party.coa_ledger_id:
            ledger = self.db.get(CoaLedger, party.coa_ledger_id)
            if ledger:
                return ledger
            logger.warning(
                "Party %s points at missing ledger %s, rebinding",
                party.id, party.coa_ledger_id,
            )

        # 2. The deterministic ledger, or a ledger with the party's name
        ledger = self.db.get(CoaLedger, party_ledger_id(party))
        if ledger is None:
            ledger = self.chart.find_by_name(party.name)
        if ledger:
            party.coa_ledger_id = ledger.id
            self.db.commit()
            logger.info("Bound party %s to ledger %s", party.id, ledger.id)
            return ledger

        # 3. Create
        ledger = self._new_ledger(party)
        self.db.add(ledger)
        self.db.flush()
        party.coa_ledger_id = ledger.id
        self.db.commit()
        logger.info("Created ledger %s for party %s", ledger.id, party.id)
        return ledger

    def _new_ledger(self, party: Party) -> CoaLedger:
        if party.party_type.is_customer:
            role, nature, ledger_type = (
                GroupRole.TRADE_RECEIVABLES, Nature.ASSET, LedgerType.RECEIVABLE
            )
        else:
            role, nature, ledger_type = (
                GroupRole.TRADE_PAYABLES, Nature.LIABILITY, LedgerType.PAYABLE
            )
        group = self.chart.canonical_group(role)

        return CoaLedger(
            id=party_ledger_id(party),
            name=party.name,
            group_id=group.id,
            nature=nature,
            ledger_type=ledger_type,
            opening_amount=Decimal("0"),
            opening_dr_cr=DrCr.DR if nature.is_debit_normal else DrCr.CR,
            is_posting=True,
        )

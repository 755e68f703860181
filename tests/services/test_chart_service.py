"""
Tests for the ChartService.

Tests cover:
- Group creation, levels and uniqueness of ids and roles
- Cycle rejection when creating and moving groups
- Ledger creation and opening balances
- Default chart seeding (idempotent)
- Canonical role lookups
"""

from decimal import Decimal

import pytest

from general_ledger.exceptions import (
    CycleDetectedError,
    DuplicateError,
    NotFoundError,
)
from general_ledger.models.enums import (
    DrCr,
    GroupRole,
    LedgerStatus,
    LedgerType,
    Nature,
)
from general_ledger.schemas.coa import GroupCreate, LedgerCreate, OpeningBalance
from general_ledger.services.chart_service import ChartService
from general_ledger.services.default_chart import DEFAULT_GROUPS, DEFAULT_LEDGERS


# --- Helpers to reduce repetition ---

def make_group(service, id, name, nature=Nature.ASSET, parent_id=None, role=None):
    return service.create_group(GroupCreate(
        id=id, name=name, nature=nature, parent_id=parent_id, role=role,
    ))


def make_ledger(service, id, name, group_id, nature=Nature.ASSET, **kwargs):
    return service.create_ledger(LedgerCreate(
        id=id, name=name, group_id=group_id, nature=nature, **kwargs,
    ))


class TestCreateGroup:

    def test_root_group_has_level_zero(self, db_session):
        service = ChartService(db_session)
        group = make_group(service, "1", "Assets")
        db_session.commit()

        assert group.level == 0
        assert group.is_root is True

    def test_child_level_follows_parent(self, db_session):
        service = ChartService(db_session)
        make_group(service, "1", "Assets")
        make_group(service, "1.1", "Current Assets", parent_id="1")
        child = make_group(service, "1.1.1", "Cash & Bank", parent_id="1.1")

        assert child.level == 2
        assert [g.id for g in service.child_groups("1")] == ["1.1"]

    def test_duplicate_id_rejected(self, db_session):
        service = ChartService(db_session)
        make_group(service, "1", "Assets")

        with pytest.raises(DuplicateError, match="already exists"):
            make_group(service, "1", "Assets Again")

    def test_role_can_only_be_held_once(self, db_session):
        service = ChartService(db_session)
        make_group(service, "1", "Debtors", role=GroupRole.TRADE_RECEIVABLES)

        with pytest.raises(DuplicateError, match="TRADE_RECEIVABLES"):
            make_group(service, "2", "More Debtors", role=GroupRole.TRADE_RECEIVABLES)

    def test_missing_parent_rejected(self, db_session):
        service = ChartService(db_session)

        with pytest.raises(NotFoundError):
            make_group(service, "1.1", "Orphan", parent_id="1")

    def test_group_cannot_be_its_own_parent(self, db_session):
        service = ChartService(db_session)

        with pytest.raises(CycleDetectedError):
            make_group(service, "1", "Loop", parent_id="1")


class TestMoveGroup:

    def _tree(self, service):
        make_group(service, "A", "A")
        make_group(service, "B", "B", parent_id="A")
        make_group(service, "C", "C", parent_id="B")
        make_group(service, "D", "D")

    def test_move_relevels_subtree(self, db_session):
        service = ChartService(db_session)
        self._tree(service)

        service.move_group("B", "D")

        assert service.get_group("B").parent_id == "D"
        assert service.get_group("B").level == 1
        assert service.get_group("C").level == 2

    def test_move_under_descendant_rejected(self, db_session):
        service = ChartService(db_session)
        self._tree(service)

        with pytest.raises(CycleDetectedError, match="own ancestor"):
            service.move_group("A", "C")
        assert service.get_group("A").parent_id is None

    def test_move_to_root(self, db_session):
        service = ChartService(db_session)
        self._tree(service)

        group = service.move_group("C", None)

        assert group.is_root
        assert group.level == 0

    def test_stored_cycle_detected_by_ancestors(self, db_session):
        service = ChartService(db_session)
        self._tree(service)
        # Corrupt the tree behind the service's back.
        service.get_group("A").parent_id = "C"
        db_session.flush()

        with pytest.raises(CycleDetectedError):
            service.ancestors("C")


class TestCreateLedger:

    def test_create_ledger_with_opening_balance(self, db_session):
        service = ChartService(db_session)
        make_group(service, "2", "Liabilities", nature=Nature.LIABILITY)
        ledger = make_ledger(
            service, "LOAN", "Term Loan", "2",
            nature=Nature.LIABILITY,
            ledger_type=LedgerType.LOAN,
            opening_balance=OpeningBalance(amount=Decimal("250"), dr_cr=DrCr.CR),
        )
        db_session.commit()

        assert ledger.status == LedgerStatus.ACTIVE
        assert ledger.signed_opening == Decimal("-250")

    def test_duplicate_ledger_rejected(self, db_session):
        service = ChartService(db_session)
        make_group(service, "1", "Assets")
        make_ledger(service, "CASH", "Cash", "1")

        with pytest.raises(DuplicateError):
            make_ledger(service, "CASH", "Cash Again", "1")

    def test_ledger_needs_existing_group(self, db_session):
        service = ChartService(db_session)

        with pytest.raises(NotFoundError):
            make_ledger(service, "CASH", "Cash", "missing")

    def test_get_missing_ledger_raises(self, db_session):
        with pytest.raises(NotFoundError, match="not found"):
            ChartService(db_session).get_ledger("nope")

    def test_deactivate_ledger(self, db_session):
        service = ChartService(db_session)
        make_group(service, "1", "Assets")
        make_ledger(service, "CASH", "Cash", "1")

        ledger = service.set_ledger_status("CASH", LedgerStatus.INACTIVE)

        assert ledger.is_active is False


class TestSeedDefaultChart:

    def test_seed_creates_everything(self, db_session):
        service = ChartService(db_session)

        groups, ledgers = service.seed_default_chart()

        assert groups == len(DEFAULT_GROUPS)
        assert ledgers == len(DEFAULT_LEDGERS)
        assert len(service.all_ledgers()) == len(DEFAULT_LEDGERS)

    def test_seed_is_idempotent(self, db_session):
        service = ChartService(db_session)
        service.seed_default_chart()
        db_session.commit()

        assert service.seed_default_chart() == (0, 0)

    def test_every_role_is_seeded(self, seeded):
        service = ChartService(seeded)

        for role in GroupRole:
            assert service.canonical_group(role).role == role

    def test_roots_in_display_order(self, seeded):
        roots = ChartService(seeded).root_groups()

        assert [g.id for g in roots] == ["1", "2", "3", "4", "5", "6", "8"]

    def test_missing_role_raises(self, db_session):
        with pytest.raises(NotFoundError, match="COST_OF_GOODS_SOLD"):
            ChartService(db_session).canonical_group(GroupRole.COST_OF_GOODS_SOLD)

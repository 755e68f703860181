"""
Chart of accounts service.

Read side: lookups the engine uses (groups, ledgers, children,
canonical roles). Write side: chart setup (create groups and
ledgers, move groups) with the tree invariants enforced here:
parents exist and no group is its own ancestor.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from general_ledger.exceptions import (
    CycleDetectedError,
    DuplicateError,
    NotFoundError,
)
from general_ledger.models.enums import GroupRole, LedgerStatus
from general_ledger.models.group import CoaGroup
from general_ledger.models.ledger import CoaLedger
from general_ledger.schemas.coa import GroupCreate, LedgerCreate
from general_ledger.services.default_chart import (
    DEFAULT_GROUPS,
    DEFAULT_LEDGERS,
)

logger = logging.getLogger(__name__)


class ChartService:
    """
    Chart-of-accounts store.

    Like every service here it takes the caller's session and
    only flushes; the caller owns the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Lookups ---

    def get_group(self, group_id: str) -> CoaGroup:
        group = self.db.get(CoaGroup, group_id)
        if not group:
            raise NotFoundError(f"Group {group_id} not found")
        return group

    def get_ledger(self, ledger_id: str) -> CoaLedger:
        ledger = self.db.get(CoaLedger, ledger_id)
        if not ledger:
            raise NotFoundError(f"Ledger {ledger_id} not found")
        return ledger

    def child_groups(self, group_id: str) -> list[CoaGroup]:
        groups = self.db.execute(
            select(CoaGroup)
            .where(CoaGroup.parent_id == group_id)
            .order_by(CoaGroup.sort_order, CoaGroup.id)
        ).scalars().all()
        return list(groups)

    def ledgers_of(self, group_id: str) -> list[CoaLedger]:
        ledgers = self.db.execute(
            select(CoaLedger)
            .where(CoaLedger.group_id == group_id)
            .order_by(CoaLedger.id)
        ).scalars().all()
        return list(ledgers)

    def find_by_name(self, name: str) -> CoaLedger | None:
        """Return the first ledger with exactly this name, if any."""
        return self.db.execute(
            select(CoaLedger)
            .where(CoaLedger.name == name)
            .order_by(CoaLedger.id)
            .limit(1)
        ).scalar_one_or_none()

    def canonical_group(self, role: GroupRole) -> CoaGroup:
        group = self.db.execute(
            select(CoaGroup).where(CoaGroup.role == role)
        ).scalar_one_or_none()
        if not group:
            raise NotFoundError(f"No group has the {role.value} role")
        return group

    def root_groups(self) -> list[CoaGroup]:
        groups = self.db.execute(
            select(CoaGroup)
            .where(CoaGroup.parent_id.is_(None))
            .order_by(CoaGroup.sort_order, CoaGroup.id)
        ).scalars().all()
        return list(groups)

    def all_groups(self) -> list[CoaGroup]:
        return list(self.db.execute(select(CoaGroup)).scalars().all())

    def all_ledgers(self) -> list[CoaLedger]:
        return list(
            self.db.execute(
                select(CoaLedger).order_by(CoaLedger.id)
            ).scalars().all()
        )

    def ancestors(self, group_id: str) -> list[str]:
        """
        Ids from the group's parent up to its root.

        Raises CycleDetectedError if the stored parent chain loops.
        """
        chain: list[str] = []
        seen = {group_id}
        current = self.get_group(group_id).parent_id
        while current:
            if current in seen:
                raise CycleDetectedError(
                    f"Group {group_id} has a cyclic ancestry through {current}"
                )
            seen.add(current)
            chain.append(current)
            current = self.get_group(current).parent_id
        return chain

    # --- Chart setup ---

    def create_group(self, request: GroupCreate) -> CoaGroup:
        """
        Create a group under an existing parent (or as a root).

        Raises DuplicateError if the id or role is taken.
        """
        if self.db.get(CoaGroup, request.id):
            raise DuplicateError(f"Group '{request.id}' already exists")

        if request.role is not None:
            taken = self.db.execute(
                select(CoaGroup).where(CoaGroup.role == request.role)
            ).scalar_one_or_none()
            if taken:
                raise DuplicateError(
                    f"Role {request.role.value} already belongs to group {taken.id}"
                )

        level = 0
        if request.parent_id:
            if request.parent_id == request.id:
                raise CycleDetectedError(
                    f"Group {request.id} cannot be its own parent"
                )
            level = self.get_group(request.parent_id).level + 1

        group = CoaGroup(
            id=request.id,
            name=request.name,
            parent_id=request.parent_id or None,
            nature=request.nature,
            level=level,
            sort_order=request.sort_order,
            role=request.role,
            is_system=request.is_system,
        )
        self.db.add(group)
        self.db.flush()
        logger.info("Created group %s (%s)", group.id, group.name)
        return group

    def move_group(self, group_id: str, new_parent_id: str | None) -> CoaGroup:
        """
        Re-parent a group, refusing moves that would create a cycle.

        Levels of the moved subtree are recomputed.
        """
        group = self.get_group(group_id)

        if new_parent_id:
            if new_parent_id == group_id:
                raise CycleDetectedError(
                    f"Group {group_id} cannot be its own parent"
                )
            self.get_group(new_parent_id)
            if group_id in self.ancestors(new_parent_id):
                raise CycleDetectedError(
                    f"Moving group {group_id} under {new_parent_id} "
                    f"would make it its own ancestor"
                )

        group.parent_id = new_parent_id or None
        group.level = (
            self.get_group(new_parent_id).level + 1 if new_parent_id else 0
        )
        self._relevel_children(group)
        self.db.flush()
        logger.info("Moved group %s under %s", group_id, new_parent_id or "root")
        return group

    def _relevel_children(self, group: CoaGroup) -> None:
        for child in self.child_groups(group.id):
            child.level = group.level + 1
            self._relevel_children(child)

    def create_ledger(self, request: LedgerCreate) -> CoaLedger:
        """
        Create a postable ledger in an existing group.

        Raises DuplicateError if the ledger id already exists.
        """
        if self.db.get(CoaLedger, request.id):
            raise DuplicateError(f"Ledger '{request.id}' already exists")

        self.get_group(request.group_id)

        opening = request.opening_balance
        ledger = CoaLedger(
            id=request.id,
            name=request.name,
            group_id=request.group_id,
            nature=request.nature,
            ledger_type=request.ledger_type,
            opening_amount=opening.amount,
            opening_dr_cr=opening.dr_cr,
            opening_as_of=opening.as_of,
            is_posting=request.is_posting,
        )
        self.db.add(ledger)
        self.db.flush()
        logger.info("Created ledger %s (%s)", ledger.id, ledger.name)
        return ledger

    def set_ledger_status(self, ledger_id: str, status: LedgerStatus) -> CoaLedger:
        ledger = self.get_ledger(ledger_id)
        ledger.status = status
        self.db.flush()
        return ledger

    def seed_default_chart(self) -> tuple[int, int]:
        """
        Install the default chart of accounts.

        Idempotent: groups and ledgers whose ids already exist
        are left untouched. Returns (groups_created, ledgers_created).
        """
        groups_created = 0
        for definition in DEFAULT_GROUPS:
            if self.db.get(CoaGroup, definition.id):
                continue
            self.create_group(definition)
            groups_created += 1

        ledgers_created = 0
        for definition in DEFAULT_LEDGERS:
            if self.db.get(CoaLedger, definition.id):
                continue
            self.create_ledger(definition)
            ledgers_created += 1

        logger.info(
            "Seeded default chart: %d groups, %d ledgers",
            groups_created, ledgers_created,
        )
        return groups_created, ledgers_created

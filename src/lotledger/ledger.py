"""Append-only stock ledger.

On-hand quantity is never stored: it is the sum of ``stock_moves.qty`` for
an item. Rows are only ever inserted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from . import catalog
from .database import atomic
from .exceptions import NotFoundError, ValidationError
from .log import get_logger
from .models import MoveReason, StockMove, WorkOrder, as_utc, utcnow
from .validators import require_non_zero

logger = get_logger(__name__)

# Reasons a caller may pass to Ledger.move; the +/- suffixes pick the sign of an adjustment.
MANUAL_REASONS = ("ISSUE", "ADJUST", "ADJUST+", "ADJUST-", "WO-ISSUE", "WO-RETURN")
_OUTBOUND = {"ISSUE", "WO-ISSUE", "ADJUST-"}
_WORK_ORDER_REASONS = {"WO-ISSUE", "WO-RETURN"}


def signed_quantity(qty: float, reason: str) -> float:
    """Outbound reasons store ``-abs(qty)``, every other reason ``+abs(qty)``."""

    return -abs(qty) if reason in _OUTBOUND else abs(qty)


def as_reason(reason: MoveReason | str) -> MoveReason:
    try:
        return MoveReason(reason)
    except ValueError as exc:
        raise ValidationError("reason", "unknown ledger reason", reason) from exc


def stored_reason(reason: str) -> MoveReason:
    """Map a caller reason onto the ledger vocabulary (``ADJUST±`` -> ``ADJUST``)."""

    if reason in ("ADJUST+", "ADJUST-"):
        return MoveReason.ADJUST
    return as_reason(reason)


class Ledger:
    """Ledger store bound to one session."""

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        item_id: int,
        qty: float,
        reason: MoveReason | str,
        *,
        batch_id: Optional[int] = None,
        ref: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> StockMove:
        """Stage one signed move in the current transaction and return it.

        The caller owns the transaction; nothing is committed here.
        """

        reason = as_reason(reason)
        move = StockMove(
            item_id=item_id,
            batch_id=batch_id,
            qty=require_non_zero("qty", qty),
            reason=reason.value,
            ref=ref,
            created_at=as_utc(at) or utcnow(),
        )
        self.db.add(move)
        self.db.flush()
        return move

    def on_hand(self, item_id: int) -> float:
        statement = select(func.coalesce(func.sum(StockMove.qty), 0)).where(StockMove.item_id == item_id)
        return float(self.db.exec(statement).one())

    def moves(
        self,
        *,
        item_id: Optional[int] = None,
        ref: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMove]:
        statement = select(StockMove)
        if item_id is not None:
            statement = statement.where(StockMove.item_id == item_id)
        if ref is not None:
            statement = statement.where(StockMove.ref == ref)
        statement = statement.order_by(StockMove.created_at.desc(), StockMove.id.desc()).offset(offset).limit(limit)
        return list(self.db.exec(statement))

    def move(self, sku: str, qty: float, reason: str, ref: Optional[str] = None) -> StockMove:
        """Record a manual issue or adjustment.

        There is no negative-stock guard: issuing more than is on hand is
        accepted and drives the balance below zero.
        """

        qty = abs(require_non_zero("qty", qty))
        if reason not in MANUAL_REASONS:
            raise ValidationError("reason", f"must be one of {', '.join(MANUAL_REASONS)}", reason)
        item = catalog.require_item(self.db, sku)
        ref = ref or None
        if reason in _WORK_ORDER_REASONS:
            if ref is None:
                raise ValidationError("ref", f"{reason} moves must reference a work order")
            if self.db.exec(select(WorkOrder.id).where(WorkOrder.code == ref)).first() is None:
                raise NotFoundError("WorkOrder", ref)

        with atomic(self.db):
            move = self.append(item.id, signed_quantity(qty, reason), stored_reason(reason), ref=ref)

        logger.info("stock_moved", sku=item.sku, qty=move.qty, reason=move.reason, ref=ref)
        return move

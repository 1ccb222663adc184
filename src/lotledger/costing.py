"""Receipts and moving-average costing.

``Item.avg_cost`` changes only here, once per receipt. Issues consume stock
at the current average without touching it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from . import catalog
from .codes import CodeGenerator
from .database import atomic
from .exceptions import UniquenessError
from .ledger import Ledger
from .log import get_logger
from .models import Batch, MoveReason, StockMove, utcnow
from .validators import require_non_negative, require_positive

logger = get_logger(__name__)


def moving_average(avg_cost: float, onhand_old: float, qty: float, unit_cost: float) -> float:
    """Weighted average of the stock on hand and the incoming receipt.

    A non-positive combined quantity leaves the average undefined, so the
    incoming unit cost is taken as-is.
    """

    denom = onhand_old + qty
    if denom > 0:
        return (avg_cost * onhand_old + qty * unit_cost) / denom
    return unit_cost


@dataclass(slots=True)
class Receipt:
    """Outcome of a receipt."""

    batch: Batch
    move: StockMove
    new_avg_cost: float


class CostingEngine:
    """Books receipts: batch row, RECEIVE move and cost update in one transaction."""

    def __init__(self, db: Session, codes: Optional[CodeGenerator] = None):
        self.db = db
        self.codes = codes or CodeGenerator()
        self.ledger = Ledger(db)

    def receive(
        self,
        sku: str,
        qty: float,
        unit_cost: float,
        *,
        supplier: Optional[str] = None,
        expires_at: Optional[date] = None,
    ) -> Receipt:
        qty = require_positive("qty", qty)
        unit_cost = require_non_negative("unit_cost", unit_cost)
        item = catalog.require_item(self.db, sku)

        code = self.codes.batch()
        try:
            with atomic(self.db):
                # Read before the new move is staged.
                onhand_old = self.ledger.on_hand(item.id)
                now = utcnow()
                batch = Batch(
                    code=code,
                    item_id=item.id,
                    supplier=supplier or None,
                    received_at=now,
                    expires_at=expires_at,
                    qty=qty,
                    unit_cost=unit_cost,
                    created_at=now,
                )
                self.db.add(batch)
                self.db.flush()
                move = self.ledger.append(item.id, qty, MoveReason.RECEIVE, batch_id=batch.id, ref=code, at=now)

                new_avg = moving_average(item.avg_cost, onhand_old, qty, unit_cost)
                item.avg_cost = new_avg
                item.updated_at = now
                self.db.add(item)
        except IntegrityError as exc:
            raise UniquenessError("Batch", code) from exc

        logger.info(
            "stock_received",
            sku=item.sku,
            batch=code,
            qty=qty,
            unit_cost=unit_cost,
            onhand_old=onhand_old,
            new_avg=round(new_avg, 4),
        )
        return Receipt(batch=batch, move=move, new_avg_cost=new_avg)

    def batches(self, sku: str) -> list[Batch]:
        """Receipt history of an item, newest first."""

        item = catalog.require_item(self.db, sku)
        statement = select(Batch).where(Batch.item_id == item.id).order_by(Batch.received_at.desc(), Batch.id.desc())
        return list(self.db.exec(statement))

"""Work orders: OPEN -> DONE on completion, OPEN -> CANCELED on cancellation.

Completing an order explodes the product's BOM into one WO-ISSUE move per
component. The moves and the status change commit together or not at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from . import catalog
from .bom import BomEngine
from .codes import CodeGenerator
from .database import atomic
from .exceptions import InvalidStateError, NotFoundError, UniquenessError, ValidationError
from .ledger import Ledger
from .log import get_logger
from .models import MoveReason, StockMove, WorkOrder, WorkOrderStatus, as_utc, utcnow
from .validators import require_positive, require_text

logger = get_logger(__name__)


@dataclass(slots=True)
class Completion:
    order: WorkOrder
    moves: list[StockMove]


class WorkOrderService:
    def __init__(self, db: Session, codes: Optional[CodeGenerator] = None):
        self.db = db
        self.codes = codes or CodeGenerator()
        self.ledger = Ledger(db)
        self.bom = BomEngine(db)

    def create(self, product_code: str, quantity: float, planned_at: Optional[datetime] = None) -> WorkOrder:
        quantity = require_positive("quantity", quantity)
        product = catalog.require_product(self.db, product_code)
        now = utcnow()
        order = WorkOrder(
            code=self.codes.work_order(),
            product_id=product.id,
            quantity=quantity,
            status=WorkOrderStatus.OPEN.value,
            planned_at=as_utc(planned_at),
            completed_at=None,
            created_at=now,
            updated_at=now,
        )
        try:
            with atomic(self.db):
                self.db.add(order)
        except IntegrityError as exc:
            raise UniquenessError("WorkOrder", order.code) from exc
        logger.info("work_order_created", code=order.code, product=product.code, quantity=quantity)
        return order

    def get(self, code: str) -> WorkOrder:
        code = require_text("code", code)
        order = self.db.exec(select(WorkOrder).where(WorkOrder.code == code)).first()
        if order is None:
            raise NotFoundError("WorkOrder", code)
        return order

    def list_orders(self, status: Optional[str] = None, *, limit: int = 100, offset: int = 0) -> list[WorkOrder]:
        statement = select(WorkOrder)
        if status is not None:
            try:
                statement = statement.where(WorkOrder.status == WorkOrderStatus(status).value)
            except ValueError as exc:
                raise ValidationError("status", "unknown work order status", status) from exc
        statement = statement.order_by(WorkOrder.created_at.desc(), WorkOrder.id.desc()).offset(offset).limit(limit)
        return list(self.db.exec(statement))

    def complete(self, code: str) -> Completion:
        """Issue every BOM component for the order and mark it DONE.

        No sufficiency check is made; components may go negative.
        """

        order = self.get(code)
        self._require_open(order, "complete")
        requirements = self.bom.requirements_for(order.product_id)
        now = utcnow()

        with atomic(self.db):
            moves = [
                self.ledger.append(
                    item.id,
                    -abs(qty_per * order.quantity),
                    MoveReason.WO_ISSUE,
                    ref=order.code,
                    at=now,
                )
                for item, qty_per in requirements
            ]
            self._transition(order, WorkOrderStatus.DONE, now, completed_at=now)

        self.db.refresh(order)
        logger.info("work_order_completed", code=order.code, moves=len(moves), quantity=order.quantity)
        return Completion(order=order, moves=moves)

    def cancel(self, code: str) -> WorkOrder:
        order = self.get(code)
        self._require_open(order, "cancel")
        now = utcnow()
        with atomic(self.db):
            self._transition(order, WorkOrderStatus.CANCELED, now)
        self.db.refresh(order)
        logger.info("work_order_canceled", code=order.code)
        return order

    def _require_open(self, order: WorkOrder, action: str) -> None:
        if order.status != WorkOrderStatus.OPEN.value:
            raise InvalidStateError(
                f"Cannot {action} work order {order.code}: status is {order.status}",
                work_order=order.code,
                status=order.status,
            )

    def _transition(self, order: WorkOrder, status: WorkOrderStatus, now: datetime, **values: object) -> None:
        # Guarded on OPEN so a concurrent transition loses and rolls back.
        statement = (
            update(WorkOrder)
            .where(WorkOrder.id == order.id, WorkOrder.status == WorkOrderStatus.OPEN.value)
            .values(status=status.value, updated_at=now, **values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.exec(statement)
        if result.rowcount != 1:
            raise InvalidStateError(
                f"Work order {order.code} is no longer OPEN",
                work_order=order.code,
            )

"""Database models."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint, event
from sqlmodel import Field, SQLModel

from .exceptions import InvalidStateError


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp; datetime columns reject naive values."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Read a naive client timestamp as UTC; convert aware ones."""
    if value is None:
        return None
    if value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MoveReason(str, Enum):
    """Ledger vocabulary stored in ``stock_moves.reason``."""

    RECEIVE = "RECEIVE"
    ISSUE = "ISSUE"
    ADJUST = "ADJUST"
    WO_ISSUE = "WO-ISSUE"
    WO_RETURN = "WO-RETURN"


class WorkOrderStatus(str, Enum):
    OPEN = "OPEN"
    DONE = "DONE"
    CANCELED = "CANCELED"


class ItemType(SQLModel, table=True):
    __tablename__ = "item_types"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=16)
    name: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Item(SQLModel, table=True):
    __tablename__ = "items"

    id: Optional[int] = Field(default=None, primary_key=True)
    sku: str = Field(index=True, unique=True, max_length=32)
    name: str = Field(index=True)
    type_id: int = Field(foreign_key="item_types.id", index=True)
    unit: str = Field(default="pcs", max_length=16)
    avg_cost: float = Field(default=0.0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Item sku={self.sku!r} avg_cost={self.avg_cost}>"


class Batch(SQLModel, table=True):
    """A receipt record. Never modified after insert."""

    __tablename__ = "batches"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=32)
    item_id: int = Field(foreign_key="items.id", index=True)
    supplier: Optional[str] = Field(default=None)
    received_at: datetime = Field(default_factory=utcnow)
    expires_at: Optional[date] = Field(default=None)
    qty: float
    unit_cost: float
    created_at: datetime = Field(default_factory=utcnow)


class StockMove(SQLModel, table=True):
    """One signed ledger line. Never modified or deleted after insert."""

    __tablename__ = "stock_moves"

    id: Optional[int] = Field(default=None, primary_key=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    batch_id: Optional[int] = Field(default=None, foreign_key="batches.id")
    qty: float
    reason: str = Field(index=True, max_length=16)
    ref: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<StockMove item={self.item_id} qty={self.qty} reason={self.reason} ref={self.ref!r}>"


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=32)
    name: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BomLine(SQLModel, table=True):
    __tablename__ = "bom_lines"
    __table_args__ = (UniqueConstraint("product_id", "item_id", name="uq_bom_product_item"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    item_id: int = Field(foreign_key="items.id", index=True)
    qty_per: float
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class WorkOrder(SQLModel, table=True):
    __tablename__ = "work_orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=32)
    product_id: int = Field(foreign_key="products.id", index=True)
    quantity: float
    status: str = Field(default=WorkOrderStatus.OPEN.value, index=True, max_length=16)
    planned_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


@event.listens_for(StockMove, "before_update")
@event.listens_for(StockMove, "before_delete")
@event.listens_for(Batch, "before_update")
@event.listens_for(Batch, "before_delete")
def _reject_history_rewrite(_mapper, _connection, target) -> None:
    raise InvalidStateError(
        f"{type(target).__name__} rows are append-only",
        entity=type(target).__name__,
        id=target.id,
    )

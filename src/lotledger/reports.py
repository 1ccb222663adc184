"""Derived read views: stock listing and BOM listing."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func
from sqlmodel import Session, select

from . import catalog, schemas
from .models import BomLine, Item, ItemType, StockMove

QTY_DECIMALS = 3
COST_DECIMALS = 4
VALUE_DECIMALS = 2


def round_half_up(value: float, decimals: int) -> float:
    """Round halves away from zero, as shop reports and SQLite ``ROUND`` do."""

    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def stock_listing(db: Session) -> list[schemas.StockRow]:
    """On-hand, average cost and stock value per item, ordered by name.

    Value is computed from the unrounded quantity and cost.
    """

    on_hand = func.coalesce(func.sum(StockMove.qty), 0).label("on_hand")
    statement = (
        select(Item, ItemType.code, on_hand)
        .join(ItemType, ItemType.id == Item.type_id)
        .outerjoin(StockMove, StockMove.item_id == Item.id)
        .group_by(Item.id, ItemType.code)
        .order_by(Item.name, Item.id)
    )
    rows: list[schemas.StockRow] = []
    for item, type_code, qty in db.exec(statement):
        qty = float(qty)
        rows.append(
            schemas.StockRow(
                id=item.id,
                sku=item.sku,
                name=item.name,
                type_code=type_code,
                unit=item.unit,
                on_hand=round_half_up(qty, QTY_DECIMALS),
                avg_cost=round_half_up(item.avg_cost, COST_DECIMALS),
                stock_value=round_half_up(qty * item.avg_cost, VALUE_DECIMALS),
            )
        )
    return rows


def bom_listing(db: Session, product_code: str) -> list[schemas.BomRow]:
    product = catalog.require_product(db, product_code)
    statement = (
        select(BomLine, Item)
        .join(Item, Item.id == BomLine.item_id)
        .where(BomLine.product_id == product.id)
        .order_by(Item.name, Item.id)
    )
    return [
        schemas.BomRow(id=line.id, sku=item.sku, name=item.name, unit=item.unit, qty_per=line.qty_per)
        for line, item in db.exec(statement)
    ]

"""Item types, items and products."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .codes import CodeGenerator
from .database import atomic
from .exceptions import NotFoundError, UniquenessError
from .models import Item, ItemType, Product, utcnow
from .validators import require_text


def list_item_types(db: Session) -> list[ItemType]:
    return list(db.exec(select(ItemType).order_by(ItemType.name)))


def get_item_type_by_code(db: Session, code: str) -> Optional[ItemType]:
    statement = select(ItemType).where(ItemType.code == code.upper())
    return db.exec(statement).first()


def create_item_type(db: Session, code: str, name: str) -> ItemType:
    code = require_text("code", code).upper()
    now = utcnow()
    item_type = ItemType(code=code, name=require_text("name", name), created_at=now, updated_at=now)
    try:
        with atomic(db):
            db.add(item_type)
    except IntegrityError as exc:
        raise UniquenessError("ItemType", code) from exc
    return item_type


def list_items(db: Session) -> list[Item]:
    return list(db.exec(select(Item).order_by(Item.id.desc())))


def get_item_by_sku(db: Session, sku: str) -> Optional[Item]:
    return db.exec(select(Item).where(Item.sku == sku)).first()


def require_item(db: Session, sku: Optional[str]) -> Item:
    """Return the item for *sku* or raise :class:`NotFoundError`."""

    item = get_item_by_sku(db, require_text("sku", sku))
    if item is None:
        raise NotFoundError("Item", sku)
    return item


def create_item(
    db: Session,
    name: str,
    type_code: str,
    unit: Optional[str] = None,
    *,
    codes: Optional[CodeGenerator] = None,
) -> Item:
    name = require_text("name", name)
    item_type = get_item_type_by_code(db, require_text("type_code", type_code))
    if item_type is None:
        raise NotFoundError("ItemType", type_code)
    sku = (codes or CodeGenerator()).sku(item_type.code)
    now = utcnow()
    item = Item(
        sku=sku,
        name=name,
        type_id=item_type.id,
        unit=unit or "pcs",
        avg_cost=0.0,
        created_at=now,
        updated_at=now,
    )
    try:
        with atomic(db):
            db.add(item)
    except IntegrityError as exc:
        raise UniquenessError("Item", sku) from exc
    return item


def list_products(db: Session) -> list[Product]:
    return list(db.exec(select(Product).order_by(Product.name)))


def get_product_by_code(db: Session, code: str) -> Optional[Product]:
    return db.exec(select(Product).where(Product.code == code)).first()


def require_product(db: Session, code: Optional[str]) -> Product:
    product = get_product_by_code(db, require_text("product_code", code))
    if product is None:
        raise NotFoundError("Product", code)
    return product


def create_product(db: Session, name: str, *, codes: Optional[CodeGenerator] = None) -> Product:
    code = (codes or CodeGenerator()).product()
    now = utcnow()
    product = Product(code=code, name=require_text("name", name), created_at=now, updated_at=now)
    try:
        with atomic(db):
            db.add(product)
    except IntegrityError as exc:
        raise UniquenessError("Product", code) from exc
    return product

"""Bills of material: component requirements per unit of product."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from . import catalog
from .database import atomic
from .exceptions import UniquenessError
from .log import get_logger
from .models import BomLine, Item, utcnow
from .validators import require_positive

logger = get_logger(__name__)


class BomEngine:
    def __init__(self, db: Session):
        self.db = db

    def add_line(self, product_code: str, sku: str, qty_per: float) -> BomLine:
        qty_per = require_positive("qty_per", qty_per)
        product = catalog.require_product(self.db, product_code)
        item = catalog.require_item(self.db, sku)
        now = utcnow()
        line = BomLine(product_id=product.id, item_id=item.id, qty_per=qty_per, created_at=now, updated_at=now)
        try:
            with atomic(self.db):
                self.db.add(line)
        except IntegrityError as exc:
            raise UniquenessError("BomLine", f"{product.code}/{item.sku}") from exc
        logger.info("bom_line_added", product=product.code, sku=item.sku, qty_per=qty_per)
        return line

    def requirements_for(self, product_id: int) -> list[tuple[Item, float]]:
        """``(item, qty_per)`` pairs for one product, ordered by item name."""

        statement = (
            select(Item, BomLine.qty_per)
            .join(BomLine, BomLine.item_id == Item.id)
            .where(BomLine.product_id == product_id)
            .order_by(Item.name, Item.id)
        )
        return [(item, qty_per) for item, qty_per in self.db.exec(statement)]

    def list_requirements(self, product_code: str) -> list[tuple[Item, float]]:
        product = catalog.require_product(self.db, product_code)
        return self.requirements_for(product.id)

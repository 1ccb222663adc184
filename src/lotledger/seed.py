"""Demo catalog for a fresh database: aluminium window frames."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from . import catalog
from .bom import BomEngine
from .codes import CodeGenerator
from .log import get_logger
from .models import ItemType, Product

logger = get_logger(__name__)

ITEM_TYPES = (
    ("ALU", "Aluminum Profiles"),
    ("HDW", "Hardware"),
    ("GLS", "Glass"),
    ("GSK", "Gaskets"),
    ("FG", "Finished Goods"),
)

# (name, type code, unit, qty per frame or None)
ITEMS = (
    ("Profile-40x40 Anodized", "ALU", "m", 6),
    ("Corner Bracket L-50", "HDW", "pcs", 8),
    ("IGU 1000x800 LowE", "GLS", "pcs", 1),
    ("EPDM gasket 8x4", "GSK", "m", 7),
    ("FG-Frame", "FG", "pcs", None),
)


def seed_demo_data(db: Session, codes: Optional[CodeGenerator] = None) -> Optional[Product]:
    """Create demo types, items and the Frame-A product with its BOM.

    Does nothing when any item type already exists.
    """

    if db.exec(select(ItemType.id)).first() is not None:
        return None

    codes = codes or CodeGenerator()
    for code, name in ITEM_TYPES:
        catalog.create_item_type(db, code, name)

    product = catalog.create_product(db, "Frame-A", codes=codes)
    bom = BomEngine(db)
    for name, type_code, unit, qty_per in ITEMS:
        item = catalog.create_item(db, name, type_code, unit, codes=codes)
        if qty_per is not None:
            bom.add_line(product.code, item.sku, qty_per)

    logger.info("demo_data_seeded", product=product.code, items=len(ITEMS))
    return product

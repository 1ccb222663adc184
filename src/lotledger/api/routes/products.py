from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ... import catalog, reports
from ...bom import BomEngine
from ...dependencies import get_db
from ...schemas import BomLineCreate, BomRow, ProductCreate, ProductRead

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)):
    return catalog.list_products(db)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return catalog.create_product(db, payload.name)


@router.get("/{code}/bom", response_model=list[BomRow])
def list_bom(code: str, db: Session = Depends(get_db)) -> list[BomRow]:
    return reports.bom_listing(db, code)


@router.post("/{code}/bom", response_model=list[BomRow], status_code=status.HTTP_201_CREATED)
def add_bom_line(code: str, payload: BomLineCreate, db: Session = Depends(get_db)) -> list[BomRow]:
    BomEngine(db).add_line(code, payload.sku, payload.qty_per)
    return reports.bom_listing(db, code)

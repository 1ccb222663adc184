from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ... import catalog
from ...costing import CostingEngine
from ...dependencies import get_db
from ...schemas import BatchRead, ItemCreate, ItemRead, ItemTypeCreate, ItemTypeRead

router = APIRouter(tags=["catalog"])


@router.get("/types", response_model=list[ItemTypeRead])
def list_item_types(db: Session = Depends(get_db)):
    return catalog.list_item_types(db)


@router.post("/types", response_model=ItemTypeRead, status_code=status.HTTP_201_CREATED)
def create_item_type(payload: ItemTypeCreate, db: Session = Depends(get_db)):
    return catalog.create_item_type(db, payload.code, payload.name)


@router.get("/items", response_model=list[ItemRead])
def list_items(db: Session = Depends(get_db)):
    return catalog.list_items(db)


@router.post("/items", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
def create_item(payload: ItemCreate, db: Session = Depends(get_db)):
    return catalog.create_item(db, payload.name, payload.type_code, payload.unit)


@router.get("/items/{sku}/batches", response_model=list[BatchRead])
def list_batches(sku: str, db: Session = Depends(get_db)):
    return CostingEngine(db).batches(sku)

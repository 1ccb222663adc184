from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ... import catalog, reports
from ...costing import CostingEngine
from ...dependencies import get_db, pagination_params
from ...ledger import Ledger
from ...schemas import MoveRead, MoveRequest, ReceiptRead, ReceiveRequest, StockRow

router = APIRouter(tags=["inventory"])


@router.post("/receive", response_model=ReceiptRead, status_code=status.HTTP_201_CREATED)
def receive_stock(payload: ReceiveRequest, db: Session = Depends(get_db)) -> ReceiptRead:
    receipt = CostingEngine(db).receive(
        payload.sku,
        payload.qty,
        payload.unit_cost,
        supplier=payload.supplier,
        expires_at=payload.expires_at,
    )
    return ReceiptRead(batch_code=receipt.batch.code, new_avg_cost=receipt.new_avg_cost)


@router.post("/move", response_model=MoveRead, status_code=status.HTTP_201_CREATED)
def record_move(payload: MoveRequest, db: Session = Depends(get_db)):
    return Ledger(db).move(payload.sku, payload.qty, payload.reason, payload.ref)


@router.get("/moves", response_model=list[MoveRead])
def list_moves(
    sku: str | None = None,
    ref: str | None = None,
    pagination: tuple[int, int] = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    limit, offset = pagination
    item_id = catalog.require_item(db, sku).id if sku else None
    return Ledger(db).moves(item_id=item_id, ref=ref, limit=limit, offset=offset)


@router.get("/stock", response_model=list[StockRow])
def list_stock(db: Session = Depends(get_db)) -> list[StockRow]:
    return reports.stock_listing(db)

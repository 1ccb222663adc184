from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ...dependencies import get_db, pagination_params
from ...schemas import CompletionRead, MoveRead, WorkOrderCreate, WorkOrderRead
from ...workorders import WorkOrderService

router = APIRouter(prefix="/workorders", tags=["workorders"])


@router.get("", response_model=list[WorkOrderRead])
def list_work_orders(
    status_filter: str | None = None,
    pagination: tuple[int, int] = Depends(pagination_params),
    db: Session = Depends(get_db),
):
    limit, offset = pagination
    return WorkOrderService(db).list_orders(status_filter, limit=limit, offset=offset)


@router.post("", response_model=WorkOrderRead, status_code=status.HTTP_201_CREATED)
def create_work_order(payload: WorkOrderCreate, db: Session = Depends(get_db)):
    return WorkOrderService(db).create(payload.product_code, payload.quantity, payload.planned_at)


@router.get("/{code}", response_model=WorkOrderRead)
def get_work_order(code: str, db: Session = Depends(get_db)):
    return WorkOrderService(db).get(code)


@router.post("/{code}/complete", response_model=CompletionRead)
def complete_work_order(code: str, db: Session = Depends(get_db)) -> CompletionRead:
    completion = WorkOrderService(db).complete(code)
    return CompletionRead(
        code=completion.order.code,
        status=completion.order.status,
        completed_at=completion.order.completed_at,
        moves=[MoveRead.model_validate(move) for move in completion.moves],
    )


@router.post("/{code}/cancel", response_model=WorkOrderRead)
def cancel_work_order(code: str, db: Session = Depends(get_db)):
    return WorkOrderService(db).cancel(code)

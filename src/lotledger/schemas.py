"""Pydantic schemas for API payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemTypeCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=16)
    name: str = Field(..., min_length=1, max_length=128)


class ItemTypeRead(ItemTypeCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    type_code: str = Field(..., min_length=1, max_length=16)
    unit: Optional[str] = Field(None, max_length=16)


class ItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    name: str
    type_id: int
    unit: str
    avg_cost: float
    created_at: datetime


class ReceiveRequest(BaseModel):
    sku: Optional[str] = None
    qty: Optional[float] = None
    unit_cost: Optional[float] = None
    supplier: Optional[str] = Field(None, max_length=128)
    expires_at: Optional[date] = None


class BatchRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    supplier: Optional[str] = None
    received_at: datetime
    expires_at: Optional[date] = None
    qty: float
    unit_cost: float


class ReceiptRead(BaseModel):
    batch_code: str
    new_avg_cost: float


class MoveRequest(BaseModel):
    sku: Optional[str] = None
    qty: Optional[float] = None
    reason: Optional[str] = Field(None, description="ISSUE, ADJUST, ADJUST+, ADJUST-, WO-ISSUE or WO-RETURN")
    ref: Optional[str] = Field(None, max_length=64)


class MoveRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    batch_id: Optional[int] = None
    qty: float = Field(..., description="Positive for inbound, negative for outbound")
    reason: str
    ref: Optional[str] = None
    created_at: datetime


class StockRow(BaseModel):
    id: int
    sku: str
    name: str
    type_code: str
    unit: str
    on_hand: float
    avg_cost: float
    stock_value: float


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    created_at: datetime


class BomLineCreate(BaseModel):
    sku: Optional[str] = None
    qty_per: Optional[float] = None


class BomRow(BaseModel):
    id: int
    sku: str
    name: str
    unit: str
    qty_per: float


class WorkOrderCreate(BaseModel):
    product_code: Optional[str] = None
    quantity: Optional[float] = None
    planned_at: Optional[datetime] = None


class WorkOrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    product_id: int
    quantity: float
    status: str
    planned_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime


class CompletionRead(BaseModel):
    code: str
    status: str
    completed_at: Optional[datetime] = None
    moves: list[MoveRead] = Field(default_factory=list)

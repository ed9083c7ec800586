"""Pydantic schemas for order progress and batches."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class OrderProgressResponse(BaseModel):
    """Receipt progress of an order."""

    order_id: str
    ordered_quantity: int
    received_quantity: int
    remaining_quantity: int
    percentage: float
    status: str
    derived_status: str
    batch_count: int


class OrderBatchCreate(BaseModel):
    """A partial receipt to register."""

    received_quantity: int = Field(..., gt=0)
    received_date: date | None = None
    shipping_date: date | None = None
    tracking_code: str | None = Field(None, max_length=100)
    invoice_number: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=2000)


class OrderBatchResponse(BaseModel):
    """A stored order batch."""

    id: str
    order_id: str
    received_quantity: int
    received_date: str | None = None
    shipping_date: str | None = None
    tracking_code: str | None = None
    invoice_number: str | None = None
    notes: str | None = None
    created_at: datetime

# src/server/schemas/transaction.py
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.server.schemas.product import MAX_PRICE, MAX_QUANTITY


class TransactionIn(BaseModel):
    product_id: int
    type: Literal["income", "outcome"]
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
    unit_cost: Optional[float] = Field(default=None, ge=0, le=MAX_PRICE)   # None -> produktens inköps-/försäljningspris
    document_number: Optional[str] = None
    reference: Optional[str] = None
    responsible: Optional[str] = None
    transaction_date: Optional[date] = None
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    type: str
    quantity: int
    unit_cost: float
    document_number: Optional[str] = None
    reference: Optional[str] = None
    responsible: Optional[str] = None
    transaction_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime

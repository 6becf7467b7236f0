# src/server/models/transaction.py
from datetime import date, datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from ._time import utcnow

TRANSACTION_TYPES = ("income", "outcome")


class StockTransaction(SQLModel, table=True):
    """Lagerrörelse. Raderna skrivs bara, de uppdateras aldrig."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    product_id: int = Field(foreign_key="product.id", index=True)
    type: str                               # "income" (inleverans) | "outcome" (försäljning)
    quantity: int
    unit_cost: float = 0.0
    document_number: Optional[str] = None
    reference: Optional[str] = None
    responsible: Optional[str] = None
    transaction_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

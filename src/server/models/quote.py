# src/server/models/quote.py
from datetime import date, datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from ._time import utcnow

QUOTE_STATUSES = ("draft", "sent", "converted", "expired")


class Quote(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    client_id: Optional[int] = Field(default=None, foreign_key="client.id")
    client_name: str = ""                   # visningsnamn vid skapandet
    quote_number: Optional[str] = None      # t.ex. "Q-00042"
    validity_date: Optional[date] = None
    payment_terms: Optional[str] = None
    delivery_details: Optional[str] = None
    notes: Optional[str] = None
    status: str = "draft"                   # draft | sent | converted | expired
    total_amount: float = 0.0               # avrundad summa av radtotaler
    created_at: datetime = Field(default_factory=utcnow)


class QuoteItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: int = Field(foreign_key="quote.id", index=True)
    product_id: int = Field(foreign_key="product.id")
    position: int = 0                       # radordning i offerten
    quantity: int = 1
    unit_price: float = 0.0
    discount: float = 0.0                   # rabatt %, 0–100
    tax_percentage: float = 0.0             # moms %
    total_price: float = 0.0                # avrundad radtotal

# src/server/schemas/quote.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from src.core.quote_calc import clamp_discount
from src.server.schemas.product import MAX_PRICE, MAX_QUANTITY, MAX_TAX_PERCENTAGE


class QuoteItemIn(BaseModel):
    """
    En offertrad som den kommer från formuläret.

    unit_price och tax_percentage är valfria: saknas de hämtas produktens
    pris respektive standardmoms när raden sparas.
    """
    product_id: int
    quantity: int = Field(1, ge=1, le=MAX_QUANTITY)
    unit_price: Optional[float] = Field(default=None, ge=0, le=MAX_PRICE)
    discount: float = 0.0
    tax_percentage: Optional[float] = Field(default=None, ge=0, le=MAX_TAX_PERCENTAGE)

    @field_validator("discount", mode="before")
    @classmethod
    def _clamp_discount(cls, v):
        return clamp_discount(v)


class QuoteCreate(BaseModel):
    client_id: int
    validity_date: date
    payment_terms: Optional[str] = None
    delivery_details: Optional[str] = None
    notes: Optional[str] = None
    items: List[QuoteItemIn] = Field(..., min_length=1)


class QuoteDraftIn(BaseModel):
    """Förhandsberäkning – inget sparas."""
    items: List[QuoteItemIn] = Field(..., min_length=1)


class QuoteStatusIn(BaseModel):
    status: str


class QuoteItemOut(BaseModel):
    id: Optional[int] = None
    product_id: int
    product_name: Optional[str] = None
    position: int
    quantity: int
    unit_price: float
    discount: float
    tax_percentage: float
    total_price: float


class QuoteOut(BaseModel):
    id: int
    quote_number: Optional[str] = None
    client_id: Optional[int] = None
    client_name: str
    validity_date: Optional[date] = None
    payment_terms: Optional[str] = None
    delivery_details: Optional[str] = None
    notes: Optional[str] = None
    status: str
    total_amount: float
    created_at: datetime
    subtotal: float
    total_discount: float
    total_tax: float
    items: List[QuoteItemOut]


class StockMovementOut(BaseModel):
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    quantity_before: int
    quantity_after: int


class ConversionOut(BaseModel):
    quote_id: int
    status: str
    movements: List[StockMovementOut]

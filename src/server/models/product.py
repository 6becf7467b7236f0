# src/server/models/product.py
from datetime import date, datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from ._time import utcnow


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    name: str
    sku: Optional[str] = None
    quantity: int = 0                       # lagersaldo, aldrig negativt
    price: float = 0.0                      # försäljningspris
    cost_price: Optional[float] = None      # inköpspris
    tax_rate: float = 0.0                   # standardmoms % för nya offertrader
    tax_code: Optional[str] = None
    supplier: Optional[str] = None
    purchase_date: Optional[date] = None
    invoice_number: Optional[str] = None
    minimum_stock: Optional[int] = None
    storage_location: Optional[str] = None
    expiration_date: Optional[date] = None
    created_at: datetime = Field(default_factory=utcnow)

# src/server/schemas/product.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Övre gränser så att belopp alltid går att räkna och avrunda
MAX_PRICE = 1_000_000_000.0
MAX_QUANTITY = 1_000_000
MAX_TAX_PERCENTAGE = 1000.0


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    quantity: int = Field(0, ge=0)
    price: float = Field(0.0, ge=0, le=MAX_PRICE)
    cost_price: Optional[float] = Field(default=None, ge=0, le=MAX_PRICE)
    tax_rate: float = Field(0.0, ge=0, le=MAX_TAX_PERCENTAGE)
    tax_code: Optional[str] = None
    supplier: Optional[str] = None
    purchase_date: Optional[date] = None
    invoice_number: Optional[str] = None
    minimum_stock: Optional[int] = Field(default=None, ge=0)
    storage_location: Optional[str] = None
    expiration_date: Optional[date] = None


class ProductOut(ProductIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime

# src/server/schemas/client.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientIn(BaseModel):
    full_name: str = Field(..., min_length=1)
    company_name: Optional[str] = None
    tax_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None


class ClientOut(ClientIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime

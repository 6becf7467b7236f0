# src/server/models/client.py
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from ._time import utcnow


class Client(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    full_name: str
    company_name: Optional[str] = None
    tax_id: Optional[str] = None            # org.nr / CPF / CNPJ
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
    created_at: datetime = Field(default_factory=utcnow)

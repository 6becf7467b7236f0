# src/services/stores.py
"""
Samarbetspartner för konverteringsflödet.

Konverteringen pratar bara med tre små gränssnitt:

  - ProductStore: läs/skriv lagersaldo för en produkt
  - Ledger:       lägg till en lagerrörelse (append-only)
  - QuoteStore:   sätt status på en offert

Sql*-klasserna nedan är de riktiga implementationerna mot databasen. Varje
skrivning committas direkt, så att en rad är kvitterad innan nästa påbörjas.
Databasfel lindas in i StoreFailure.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.core.context import RequestContext
from src.core.errors import StoreFailure
from src.core.money import round_money
from src.server.models import Product, Quote, StockTransaction

log = logging.getLogger("lagerkoll.stores")


class ProductStore(Protocol):
    def read_quantity(self, product_id: int) -> int: ...

    def write_quantity(self, product_id: int, quantity: int) -> None: ...


class Ledger(Protocol):
    def append(
        self,
        product_id: int,
        type: str,
        quantity: int,
        note: str,
        unit_cost: Optional[float] = None,
    ) -> None: ...


class QuoteStore(Protocol):
    def set_status(self, quote_id: int, status: str) -> None: ...


class _SqlStore:
    def __init__(self, session: Session, ctx: RequestContext) -> None:
        self.session = session
        self.ctx = ctx

    def _fail(self, operation: str, exc: Exception) -> StoreFailure:
        # Sessionen är oanvändbar efter ett DB-fel tills den rullats tillbaka
        try:
            self.session.rollback()
        except SQLAlchemyError as rb:
            log.error("Rollback efter %s misslyckades: %s", operation, rb)
        log.warning("%s misslyckades: %s", operation, exc)
        return StoreFailure(operation, str(exc))

    def _owned_product(self, product_id: int, operation: str) -> Product:
        product = self.session.get(Product, product_id)
        if product is None or product.user_id != self.ctx.user_id:
            raise StoreFailure(operation, f"Produkt {product_id} hittades inte")
        return product


class SqlProductStore(_SqlStore):
    def read_quantity(self, product_id: int) -> int:
        try:
            product = self._owned_product(product_id, "product.read")
            # Läs alltid det sparade värdet, inte en cachad identitet i sessionen
            self.session.refresh(product)
            return int(product.quantity)
        except SQLAlchemyError as e:
            raise self._fail("product.read", e) from e

    def write_quantity(self, product_id: int, quantity: int) -> None:
        try:
            product = self._owned_product(product_id, "product.write")
            product.quantity = int(quantity)
            self.session.add(product)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("product.write", e) from e


class SqlLedger(_SqlStore):
    def append(
        self,
        product_id: int,
        type: str,
        quantity: int,
        note: str,
        unit_cost: Optional[float] = None,
    ) -> None:
        try:
            row = StockTransaction(
                user_id=self.ctx.user_id,
                product_id=product_id,
                type=type,
                quantity=int(quantity),
                unit_cost=round_money(unit_cost or 0.0),
                transaction_date=date.today(),
                notes=note,
            )
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("ledger.append", e) from e


class SqlQuoteStore(_SqlStore):
    def set_status(self, quote_id: int, status: str) -> None:
        try:
            quote = self.session.get(Quote, quote_id)
            if quote is None or quote.user_id != self.ctx.user_id:
                raise StoreFailure("quote.set_status", f"Offert {quote_id} hittades inte")
            quote.status = status
            self.session.add(quote)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("quote.set_status", e) from e

# src/services/conversion.py
"""
Konvertering offert -> order.

Flöde per offertrad, i sparad radordning:
  1. Läs produktens aktuella lagersaldo.
  2. nytt saldo = saldo - radens antal.
  3. Negativt saldo -> InsufficientStock, loopen avbryts direkt.
  4. Skriv en lagerrörelse av typen "outcome" med notering om kunden.
  5. Spara nytt saldo på produkten.
När alla rader gått igenom sätts offertens status till "converted".

Ingen återställning görs vid fel: produkter som hann räknas ned i samma anrop
förblir nedräknade och offerten ligger kvar som "draft". Felet (InsufficientStock
eller StoreFailure) går vidare till anroparen.

Funktionen loggar inte själv; det gör anropande tjänst.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from src.core.errors import InsufficientStock, QuoteNotConvertible
from src.core.quote_calc import calc_line
from src.services.stores import Ledger, ProductStore, QuoteStore

DEFAULT_NOTE = "Converted from quote for {client}"


@dataclass(frozen=True)
class ConversionLine:
    product_id: int
    quantity: int
    unit_price: float = 0.0
    discount: float = 0.0
    tax_percentage: float = 0.0
    product_name: Optional[str] = None


@dataclass(frozen=True)
class ConversionQuote:
    id: int
    client_name: str
    status: str
    items: Sequence[ConversionLine] = ()


@dataclass(frozen=True)
class StockMovement:
    product_id: int
    quantity: int
    quantity_before: int
    quantity_after: int
    product_name: Optional[str] = None


@dataclass
class ConversionResult:
    quote_id: int
    status: str
    movements: List[StockMovement] = field(default_factory=list)


def convert_quote(
    quote: ConversionQuote,
    *,
    products: ProductStore,
    ledger: Ledger,
    quotes: QuoteStore,
    note: Optional[str] = None,
) -> ConversionResult:
    if quote.status != "draft":
        raise QuoteNotConvertible(quote.id, quote.status)

    note_text = note if note is not None else DEFAULT_NOTE.format(client=quote.client_name)
    result = ConversionResult(quote_id=quote.id, status=quote.status)

    for item in quote.items:
        current = products.read_quantity(item.product_id)
        new_quantity = current - item.quantity
        if new_quantity < 0:
            raise InsufficientStock(
                product_id=item.product_id,
                available=current,
                requested=item.quantity,
                product_name=item.product_name,
            )

        line = calc_line(item.quantity, item.unit_price, item.discount, item.tax_percentage)
        unit_value = line.total / item.quantity if item.quantity else 0.0

        ledger.append(item.product_id, "outcome", item.quantity, note_text, unit_cost=unit_value)
        products.write_quantity(item.product_id, new_quantity)

        result.movements.append(
            StockMovement(
                product_id=item.product_id,
                quantity=item.quantity,
                quantity_before=current,
                quantity_after=new_quantity,
                product_name=item.product_name,
            )
        )

    quotes.set_status(quote.id, "converted")
    result.status = "converted"
    return result

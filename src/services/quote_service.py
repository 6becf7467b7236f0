# src/services/quote_service.py
"""
Offerter: förhandsberäkning, skapa, läsa, status, konvertering till order
och WhatsApp-meddelande.

Beloppen räknas med src.core.quote_calc och avrundas först när de sparas
(total_price per rad, total_amount för offerten).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from src.core.context import RequestContext
from src.core.errors import InventoryError, InvalidStatusTransition, NotFound
from src.core.money import round_money
from src.core.quote_calc import calc_totals, describe_lines, line_amounts
from src.server.models import Client, Product, Quote, QuoteItem
from src.server.schemas.quote import QuoteCreate, QuoteDraftIn, QuoteItemIn
from src.services.conversion import ConversionLine, ConversionQuote, ConversionResult, convert_quote
from src.services.locales import label
from src.services.stores import SqlLedger, SqlProductStore, SqlQuoteStore
from src.services.whatsapp import format_quote_message, whatsapp_url

log = logging.getLogger("lagerkoll.quotes")

# Statusövergångar som får göras manuellt. "converted" sätts bara av konverteringen.
MANUAL_TRANSITIONS = {
    "draft": {"sent", "expired"},
    "sent": {"expired"},
}


def _resolve_items(
    items: List[QuoteItemIn], *, session: Session, ctx: RequestContext
) -> List[Dict[str, Any]]:
    """
    Fyller i à-pris och moms från produkten där formuläret lämnat dem tomma.

    Rabatten är redan begränsad till 0–100 av schemat.
    """
    out: List[Dict[str, Any]] = []
    for item in items:
        product = session.get(Product, item.product_id)
        if product is None or product.user_id != ctx.user_id:
            raise NotFound("Produkt", item.product_id)

        unit_price = item.unit_price if item.unit_price is not None else float(product.price or 0.0)
        tax = item.tax_percentage if item.tax_percentage is not None else float(product.tax_rate or 0.0)

        out.append(
            {
                "product_id": product.id,
                "product_name": product.name,
                "quantity": item.quantity,
                "unit_price": float(unit_price),
                "discount": float(item.discount),
                "tax_percentage": float(tax),
            }
        )
    return out


def preview_quote(*, payload: QuoteDraftIn, session: Session, ctx: RequestContext) -> Dict[str, Any]:
    """
    Beräknar en offert utan att spara något (formulärets "live"-summor).
    """
    items = _resolve_items(payload.items, session=session, ctx=ctx)
    lines = describe_lines(items)
    for line, item in zip(lines, items):
        line["product_name"] = item["product_name"]

    result: Dict[str, Any] = {"lines": lines}
    result.update(calc_totals(items).rounded())
    return result


def _next_quote_number(quote_id: int) -> str:
    return f"Q-{quote_id:05d}"


def create_quote(*, payload: QuoteCreate, session: Session, ctx: RequestContext) -> Quote:
    client = session.get(Client, payload.client_id)
    if client is None or client.user_id != ctx.user_id:
        raise NotFound("Kund", payload.client_id)

    items = _resolve_items(payload.items, session=session, ctx=ctx)
    totals = calc_totals(items)

    quote = Quote(
        user_id=ctx.user_id,
        client_id=client.id,
        client_name=client.full_name,
        validity_date=payload.validity_date,
        payment_terms=payload.payment_terms or None,
        delivery_details=payload.delivery_details or None,
        notes=payload.notes,
        status="draft",
        total_amount=round_money(totals.grand_total),
    )
    session.add(quote)
    session.flush()  # behöver id för offertnummer och rader

    quote.quote_number = _next_quote_number(quote.id)

    for position, item in enumerate(items):
        session.add(
            QuoteItem(
                quote_id=quote.id,
                product_id=item["product_id"],
                position=position,
                quantity=item["quantity"],
                unit_price=item["unit_price"],
                discount=item["discount"],
                tax_percentage=item["tax_percentage"],
                total_price=round_money(line_amounts(item).total),
            )
        )

    session.add(quote)
    session.commit()
    session.refresh(quote)

    log.info(
        "Offert %s skapad för %s (%s rader, total %.2f)",
        quote.quote_number, quote.client_name, len(items), quote.total_amount,
    )
    return quote


# ==============================
# LÄSNING
# ==============================

def _quote_items(session: Session, quote_id: int) -> List[QuoteItem]:
    stmt = (
        select(QuoteItem)
        .where(QuoteItem.quote_id == quote_id)
        .order_by(QuoteItem.position, QuoteItem.id)
    )
    return list(session.exec(stmt).all())


def get_quote(*, session: Session, ctx: RequestContext, quote_id: int) -> Quote:
    quote = session.get(Quote, quote_id)
    if quote is None or quote.user_id != ctx.user_id:
        raise NotFound("Offert", quote_id)
    return quote


def serialize_quote(q: Quote, session: Session) -> Dict[str, Any]:
    items = _quote_items(session, q.id)

    names: Dict[int, Optional[str]] = {}
    cost_prices: Dict[int, Optional[float]] = {}
    for it in items:
        if it.product_id not in names:
            product = session.get(Product, it.product_id)
            names[it.product_id] = product.name if product else None
            cost_prices[it.product_id] = product.cost_price if product else None

    totals = calc_totals(items).rounded()

    return {
        "id": q.id,
        "quote_number": q.quote_number,
        "client_id": q.client_id,
        "client_name": q.client_name,
        "validity_date": q.validity_date,
        "payment_terms": q.payment_terms,
        "delivery_details": q.delivery_details,
        "notes": q.notes,
        "status": q.status,
        "total_amount": float(q.total_amount or 0),
        "created_at": q.created_at,
        "subtotal": totals["subtotal"],
        "total_discount": totals["total_discount"],
        "total_tax": totals["total_tax"],
        "items": [
            {
                "id": it.id,
                "product_id": it.product_id,
                "product_name": names.get(it.product_id),
                "product_cost_price": cost_prices.get(it.product_id),
                "position": it.position,
                "quantity": it.quantity,
                "unit_price": float(it.unit_price),
                "discount": float(it.discount),
                "tax_percentage": float(it.tax_percentage),
                "total_price": float(it.total_price),
            }
            for it in items
        ],
    }


def list_quotes(
    *, session: Session, ctx: RequestContext, skip: int = 0, limit: int = 50
) -> List[Dict[str, Any]]:
    stmt = (
        select(Quote)
        .where(Quote.user_id == ctx.user_id)
        .order_by(Quote.created_at.desc(), Quote.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return [serialize_quote(q, session) for q in session.exec(stmt).all()]


# ==============================
# ÄNDRINGAR
# ==============================

def delete_quote(*, session: Session, ctx: RequestContext, quote_id: int) -> None:
    """Tar bort offerten och dess rader. Lagerrörelser påverkas inte."""
    quote = get_quote(session=session, ctx=ctx, quote_id=quote_id)
    for it in _quote_items(session, quote.id):
        session.delete(it)
    session.delete(quote)
    session.commit()
    log.info("Offert %s borttagen", quote_id)


def set_quote_status(
    *, session: Session, ctx: RequestContext, quote_id: int, status: str
) -> Quote:
    quote = get_quote(session=session, ctx=ctx, quote_id=quote_id)
    allowed = MANUAL_TRANSITIONS.get(quote.status, set())
    if status not in allowed:
        raise InvalidStatusTransition(quote.status, status)

    quote.status = status
    session.add(quote)
    session.commit()
    session.refresh(quote)
    log.info("Offert %s: status -> %s", quote.quote_number, status)
    return quote


def convert_quote_to_order(
    *, session: Session, ctx: RequestContext, quote_id: int
) -> ConversionResult:
    """
    Kopplar ihop konverteringen med databasen.

    Varje lagerändring committas för sig; vid fel ligger redan gjorda
    ändringar kvar och offerten behåller sin status.
    """
    quote = get_quote(session=session, ctx=ctx, quote_id=quote_id)
    items = _quote_items(session, quote.id)

    lines = []
    for it in items:
        product = session.get(Product, it.product_id)
        lines.append(
            ConversionLine(
                product_id=it.product_id,
                quantity=it.quantity,
                unit_price=float(it.unit_price),
                discount=float(it.discount),
                tax_percentage=float(it.tax_percentage),
                product_name=product.name if product else None,
            )
        )

    conv_quote = ConversionQuote(
        id=quote.id,
        client_name=quote.client_name,
        status=quote.status,
        items=lines,
    )
    note = label(
        ctx.language,
        "conversion_note",
        default="Converted from quote for {client}",
        client=quote.client_name,
    )

    log.info("Konverterar offert %s (%s rader)", quote.quote_number, len(lines))
    try:
        result = convert_quote(
            conv_quote,
            products=SqlProductStore(session, ctx),
            ledger=SqlLedger(session, ctx),
            quotes=SqlQuoteStore(session, ctx),
            note=note,
        )
    except InventoryError as e:
        log.warning("Konvertering av offert %s avbruten: %s", quote.quote_number, e)
        raise

    log.info("Offert %s konverterad till order", quote.quote_number)
    return result


def quote_whatsapp(*, session: Session, ctx: RequestContext, quote_id: int) -> Dict[str, Any]:
    quote = get_quote(session=session, ctx=ctx, quote_id=quote_id)
    data = serialize_quote(quote, session)
    message = format_quote_message(data, ctx.language)

    phone: Optional[str] = None
    if quote.client_id is not None:
        client = session.get(Client, quote.client_id)
        if client is not None:
            phone = client.whatsapp or client.phone

    url: Optional[str] = None
    if phone:
        try:
            url = whatsapp_url(phone, message)
        except ValueError:
            url = None

    return {"quote_id": quote.id, "phone": phone, "message": message, "url": url}

# src/services/inventory.py
"""
Produkter, manuella lagerrörelser och dashboard-siffror.

Alla funktioner tar ett RequestContext och ser bara användarens egna rader.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, List

from sqlmodel import Session, select

from src.core.context import RequestContext
from src.core.errors import InsufficientStock, NotFound
from src.core.money import round_money
from src.server.models import Product, StockTransaction
from src.server.models._time import utcnow
from src.server.schemas.product import ProductIn
from src.server.schemas.transaction import TransactionIn

log = logging.getLogger("lagerkoll.inventory")

RECENT_DAYS = 30


# ==============================
# PRODUKTER
# ==============================

def get_product(*, session: Session, ctx: RequestContext, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if product is None or product.user_id != ctx.user_id:
        raise NotFound("Produkt", product_id)
    return product


def list_products(*, session: Session, ctx: RequestContext) -> List[Product]:
    stmt = (
        select(Product)
        .where(Product.user_id == ctx.user_id)
        .order_by(Product.created_at.desc(), Product.id.desc())
    )
    return list(session.exec(stmt).all())


def create_product(*, session: Session, ctx: RequestContext, payload: ProductIn) -> Product:
    product = Product(user_id=ctx.user_id, **payload.model_dump())
    session.add(product)
    session.commit()
    session.refresh(product)
    log.info("Produkt %s skapad (%s, saldo %s)", product.id, product.name, product.quantity)
    return product


def update_product(
    *, session: Session, ctx: RequestContext, product_id: int, payload: ProductIn
) -> Product:
    product = get_product(session=session, ctx=ctx, product_id=product_id)
    for key, value in payload.model_dump().items():
        setattr(product, key, value)
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def delete_product(*, session: Session, ctx: RequestContext, product_id: int) -> None:
    product = get_product(session=session, ctx=ctx, product_id=product_id)
    session.delete(product)
    session.commit()
    log.info("Produkt %s borttagen", product_id)


def low_stock_products(*, session: Session, ctx: RequestContext) -> List[Product]:
    """Produkter med minimisaldo satt och saldo på eller under det."""
    stmt = (
        select(Product)
        .where(Product.user_id == ctx.user_id)
        .where(Product.minimum_stock.is_not(None))
        .where(Product.quantity <= Product.minimum_stock)
        .order_by(Product.name)
    )
    return list(session.exec(stmt).all())


# ==============================
# LAGERRÖRELSER
# ==============================

def list_transactions(*, session: Session, ctx: RequestContext) -> List[StockTransaction]:
    stmt = (
        select(StockTransaction)
        .where(StockTransaction.user_id == ctx.user_id)
        .order_by(StockTransaction.created_at.desc(), StockTransaction.id.desc())
    )
    return list(session.exec(stmt).all())


def record_transaction(
    *, session: Session, ctx: RequestContext, payload: TransactionIn
) -> StockTransaction:
    """
    Manuell inleverans ("income") eller försäljning ("outcome").

    Lagerrörelsen sparas först, därefter produktens nya saldo.
    En försäljning som skulle ge negativt saldo avvisas innan något skrivs.
    """
    product = get_product(session=session, ctx=ctx, product_id=payload.product_id)

    if payload.type == "income":
        new_quantity = product.quantity + payload.quantity
    else:
        new_quantity = product.quantity - payload.quantity

    if new_quantity < 0:
        raise InsufficientStock(
            product_id=product.id,
            available=product.quantity,
            requested=payload.quantity,
            product_name=product.name,
        )

    unit_cost = payload.unit_cost
    if unit_cost is None:
        unit_cost = product.cost_price or product.price or 0.0

    data = payload.model_dump(exclude={"unit_cost"})
    if data.get("transaction_date") is None:
        data["transaction_date"] = utcnow().date()

    tx = StockTransaction(user_id=ctx.user_id, unit_cost=round_money(unit_cost), **data)
    session.add(tx)
    session.commit()

    product.quantity = new_quantity
    session.add(product)
    session.commit()

    session.refresh(tx)
    log.info(
        "Lagerrörelse %s: %s %s st av produkt %s (nytt saldo %s)",
        tx.id, payload.type, payload.quantity, product.id, new_quantity,
    )
    return tx


# ==============================
# DASHBOARD
# ==============================

def dashboard_stats(*, session: Session, ctx: RequestContext) -> Dict[str, Any]:
    """
    Nyckeltal:
      - total_products: antal produkter
      - total_value: lagervärde till försäljningspris (saldo * pris)
      - recent_sales / recent_purchases: sålda resp. inlevererade enheter
        senaste 30 dagarna
    """
    products = list_products(session=session, ctx=ctx)
    total_value = sum(float(p.quantity) * float(p.price or 0.0) for p in products)

    since = utcnow() - timedelta(days=RECENT_DAYS)
    stmt = (
        select(StockTransaction)
        .where(StockTransaction.user_id == ctx.user_id)
        .where(StockTransaction.created_at >= since)
    )
    sales = 0
    purchases = 0
    for tx in session.exec(stmt).all():
        if tx.type == "outcome":
            sales += tx.quantity
        elif tx.type == "income":
            purchases += tx.quantity

    return {
        "total_products": len(products),
        "total_value": round_money(total_value),
        "recent_sales": sales,
        "recent_purchases": purchases,
        "low_stock_count": len(low_stock_products(session=session, ctx=ctx)),
    }

# src/services/exports.py
"""
Excel-export (xlsx) av lager, lagerrörelser och offerter.

Varje *_frame()-funktion bygger en pandas DataFrame från redan hämtade rader;
export_workbook() hämtar raderna för en användare och skriver en arbetsbok
till bytes (openpyxl som motor).

Belopp i offerterna räknas inte om här: total_amount och total_price är de
värden som sparades när offerten skapades.
"""
from __future__ import annotations

import io
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd
from sqlmodel import Session

from src.core.context import RequestContext
from src.core.money import money_str
from src.server.models import Product, StockTransaction
from src.services.inventory import list_products, list_transactions
from src.services.quote_service import list_quotes

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_KINDS = ("inventory", "transactions", "quotes", "quotes-profit", "monthly-sales")


def _d(value: Any) -> str:
    """yyyy-mm-dd eller tom sträng."""
    if value is None or value == "":
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]


def _tx_date(tx: StockTransaction) -> Any:
    return tx.transaction_date or tx.created_at


# ==============================
# DATAFRAMES
# ==============================

def inventory_frame(products: Iterable[Product]) -> pd.DataFrame:
    rows = []
    for p in products:
        cost = float(p.cost_price or 0.0)
        price = float(p.price or 0.0)
        rows.append(
            {
                "SKU": p.sku or "",
                "Product Name": p.name,
                "Current Stock": p.quantity,
                "Minimum Stock": p.minimum_stock or 0,
                "Sale Price": money_str(price),
                "Cost Price": money_str(cost),
                "Total Value (Cost)": money_str(p.quantity * cost),
                "Total Value (Sale)": money_str(p.quantity * price),
                "Tax Rate (%)": money_str(p.tax_rate or 0.0),
                "Tax Code": p.tax_code or "",
                "Supplier": p.supplier or "",
                "Storage Location": p.storage_location or "",
                "Purchase Date": _d(p.purchase_date),
                "Expiration Date": _d(p.expiration_date),
            }
        )
    return pd.DataFrame(rows)


def transactions_frame(
    transactions: Iterable[StockTransaction], products: Iterable[Product]
) -> pd.DataFrame:
    by_id: Dict[int, Product] = {p.id: p for p in products}
    rows = []
    for tx in transactions:
        product = by_id.get(tx.product_id)
        unit_cost = float(tx.unit_cost or 0.0)
        rows.append(
            {
                "Date": _d(_tx_date(tx)),
                "Product": product.name if product else "Unknown",
                "SKU": (product.sku or "") if product else "",
                "Type": "Restock" if tx.type == "income" else "Sale",
                "Quantity": tx.quantity,
                "Unit Cost": money_str(unit_cost),
                "Total Value": money_str(tx.quantity * unit_cost),
                "Document Number": tx.document_number or "",
                "Reference": tx.reference or "",
                "Responsible": tx.responsible or "",
                "Notes": tx.notes or "",
            }
        )
    return pd.DataFrame(rows)


def quotes_frame(quotes: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for q in quotes:
        rows.append(
            {
                "Quote Number": q.get("quote_number") or "N/A",
                "Client": q.get("client_name") or "",
                "Date": _d(q.get("created_at")),
                "Valid Until": _d(q.get("validity_date")),
                "Status": q.get("status"),
                "Items": len(q.get("items") or []),
                "Total Amount": money_str(q.get("total_amount", 0)),
                "Payment Terms": q.get("payment_terms") or "",
                "Delivery": q.get("delivery_details") or "",
                "Notes": q.get("notes") or "",
            }
        )
    return pd.DataFrame(rows)


def quotes_profit_frame(quotes: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """
    En rad per offertrad:
      intäkt = radtotal, kostnad = inköpspris * antal, marginal = vinst / intäkt.
    """
    rows = []
    for q in quotes:
        for item in q.get("items") or []:
            cost_price = float(item.get("product_cost_price") or 0.0)
            revenue = float(item.get("total_price") or 0.0)
            cost = cost_price * int(item.get("quantity") or 0)
            profit = revenue - cost
            margin = money_str(profit / revenue * 100) if revenue > 0 else "0.00"
            rows.append(
                {
                    "Quote Number": q.get("quote_number") or "N/A",
                    "Client": q.get("client_name") or "",
                    "Date": _d(q.get("created_at")),
                    "Product": item.get("product_name") or "Unknown",
                    "Quantity": item.get("quantity"),
                    "Unit Price": money_str(item.get("unit_price", 0)),
                    "Unit Cost": money_str(cost_price),
                    "Revenue": money_str(revenue),
                    "Cost": money_str(cost),
                    "Profit": money_str(profit),
                    "Profit Margin (%)": margin,
                    "Status": q.get("status"),
                }
            )
    return pd.DataFrame(rows)


def monthly_sales_frames(
    quotes: Iterable[Dict[str, Any]],
    transactions: Iterable[StockTransaction],
    products: Iterable[Product],
    month: Optional[date] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Två blad: "Quotes" och "Sales" (bara försäljningar).
    Med month satt tas bara rader från den kalendermånaden med.
    """
    def in_month(value: Any) -> bool:
        if month is None:
            return True
        if value is None:
            return False
        return value.year == month.year and value.month == month.month

    by_id: Dict[int, Product] = {p.id: p for p in products}

    quote_rows = [
        {
            "Date": _d(q.get("created_at")),
            "Type": "Quote",
            "Client": q.get("client_name") or "",
            "Amount": money_str(q.get("total_amount", 0)),
            "Status": q.get("status"),
            "Quote Number": q.get("quote_number") or "N/A",
        }
        for q in quotes
        if in_month(q.get("created_at"))
    ]

    sale_rows = []
    for tx in transactions:
        if tx.type != "outcome" or not in_month(_tx_date(tx)):
            continue
        product = by_id.get(tx.product_id)
        price = float(product.price or 0.0) if product else 0.0
        sale_rows.append(
            {
                "Date": _d(_tx_date(tx)),
                "Type": "Sale",
                "Product": product.name if product else "Unknown",
                "Quantity": tx.quantity,
                "Unit Price": money_str(price),
                "Amount": money_str(tx.quantity * price),
                "Notes": tx.notes or "",
            }
        )

    return {"Quotes": pd.DataFrame(quote_rows), "Sales": pd.DataFrame(sale_rows)}


# ==============================
# ARBETSBOK
# ==============================

def to_xlsx(sheets: Dict[str, pd.DataFrame]) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)
    return buf.getvalue()


def export_workbook(
    kind: str,
    *,
    session: Session,
    ctx: RequestContext,
    today: Optional[date] = None,
) -> Tuple[str, bytes]:
    """
    Returnerar (filnamn, xlsx-bytes). Höjer ValueError för okänd exporttyp.
    """
    today = today or date.today()
    stamp = today.strftime("%Y-%m-%d")

    if kind == "inventory":
        products = list_products(session=session, ctx=ctx)
        return f"inventory_{stamp}.xlsx", to_xlsx({"Inventory": inventory_frame(products)})

    if kind == "transactions":
        products = list_products(session=session, ctx=ctx)
        txs = list_transactions(session=session, ctx=ctx)
        return (
            f"transactions_{stamp}.xlsx",
            to_xlsx({"Inventory Movements": transactions_frame(txs, products)}),
        )

    if kind in ("quotes", "quotes-profit", "monthly-sales"):
        quotes: List[Dict[str, Any]] = list_quotes(session=session, ctx=ctx, skip=0, limit=10_000)

        if kind == "quotes":
            return f"quotes_{stamp}.xlsx", to_xlsx({"Quotes": quotes_frame(quotes)})

        if kind == "quotes-profit":
            return (
                f"quotes_profit_{stamp}.xlsx",
                to_xlsx({"Quote Profit Analysis": quotes_profit_frame(quotes)}),
            )

        products = list_products(session=session, ctx=ctx)
        txs = list_transactions(session=session, ctx=ctx)
        sheets = monthly_sales_frames(quotes, txs, products, month=today)
        return f"monthly_sales_{today.strftime('%Y-%m')}.xlsx", to_xlsx(sheets)

    raise ValueError(f"Okänd exporttyp: {kind}")

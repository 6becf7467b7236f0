# src/core/quote_calc.py
"""
Offertberäkning: rad- och totalsummor.

Per rad:
  - radsumma       = antal * à-pris
  - rabatt         = radsumma * rabatt% / 100
  - efter rabatt   = radsumma - rabatt
  - moms           = efter rabatt * moms% / 100
  - radtotal       = efter rabatt + moms

För hela offerten summeras respektive del. grand_total är summan av
radtotalerna (= subtotal - total_discount + total_tax, bortsett från
flyttalsavrundning).

Modulen är ren: inga sidoeffekter, ingen avrundning mellan stegen. Avrunda
med round_money() först när värdet ska visas eller sparas.

Rabatt förväntas redan vara begränsad till 0–100 av anroparen (se
clamp_discount). Moms har ingen övre gräns.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from src.core.money import round_money


@dataclass(frozen=True)
class LineAmounts:
    subtotal: float
    discount_amount: float
    after_discount: float
    tax_amount: float
    total: float

    def rounded(self) -> Dict[str, float]:
        return {
            "subtotal": round_money(self.subtotal),
            "discount_amount": round_money(self.discount_amount),
            "after_discount": round_money(self.after_discount),
            "tax_amount": round_money(self.tax_amount),
            "line_total": round_money(self.total),
        }


@dataclass(frozen=True)
class QuoteTotals:
    subtotal: float = 0.0
    total_discount: float = 0.0
    total_tax: float = 0.0
    grand_total: float = 0.0

    def rounded(self) -> Dict[str, float]:
        return {
            "subtotal": round_money(self.subtotal),
            "total_discount": round_money(self.total_discount),
            "total_tax": round_money(self.total_tax),
            "grand_total": round_money(self.grand_total),
        }


def clamp_discount(value: Any) -> float:
    """
    Begränsar rabattprocent till intervallet 0–100. Tomt värde ger 0.
    Höjer ValueError för text som inte är ett tal (och för nan).
    """
    if value is None or value == "":
        return 0.0
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Rabatten måste vara ett tal: {value!r}")
    if math.isnan(v):
        raise ValueError("Rabatten måste vara ett tal: nan")
    return max(0.0, min(100.0, v))


def calc_line(
    quantity: float,
    unit_price: float,
    discount: float = 0.0,
    tax_percentage: float = 0.0,
) -> LineAmounts:
    subtotal = float(quantity) * float(unit_price)
    discount_amount = subtotal * float(discount) / 100
    after_discount = subtotal - discount_amount
    tax_amount = after_discount * float(tax_percentage) / 100
    return LineAmounts(
        subtotal=subtotal,
        discount_amount=discount_amount,
        after_discount=after_discount,
        tax_amount=tax_amount,
        total=after_discount + tax_amount,
    )


def _field(item: Any, name: str) -> float:
    # Rader kan komma som pydantic-modeller, ORM-objekt eller rena dicts
    if isinstance(item, dict):
        raw = item.get(name)
    else:
        raw = getattr(item, name, None)
    try:
        return float(raw or 0.0)
    except (TypeError, ValueError):
        return 0.0


def line_amounts(item: Any) -> LineAmounts:
    """calc_line() för ett radobjekt med quantity, unit_price, discount, tax_percentage."""
    return calc_line(
        _field(item, "quantity"),
        _field(item, "unit_price"),
        _field(item, "discount"),
        _field(item, "tax_percentage"),
    )


def calc_totals(items: Iterable[Any]) -> QuoteTotals:
    subtotal = 0.0
    total_discount = 0.0
    total_tax = 0.0
    grand_total = 0.0

    for item in items:
        amounts = line_amounts(item)
        subtotal += amounts.subtotal
        total_discount += amounts.discount_amount
        total_tax += amounts.tax_amount
        grand_total += amounts.total

    return QuoteTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_tax=total_tax,
        grand_total=grand_total,
    )


def describe_lines(items: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Bygger utdata per rad (avrundade belopp) i samma ordning som indata.
    Används av förhandsberäkningen och CLI:t.
    """
    out: List[Dict[str, Any]] = []
    for idx, item in enumerate(items):
        amounts = line_amounts(item)
        product_id = item.get("product_id") if isinstance(item, dict) else getattr(item, "product_id", None)
        row: Dict[str, Any] = {
            "position": idx,
            "product_id": product_id,
            "quantity": _field(item, "quantity"),
            "unit_price": _field(item, "unit_price"),
            "discount": _field(item, "discount"),
            "tax_percentage": _field(item, "tax_percentage"),
        }
        row.update(amounts.rounded())
        out.append(row)
    return out

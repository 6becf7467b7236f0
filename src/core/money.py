# src/core/money.py
"""
Avrundning och formatering av belopp.

Beräkningar sker alltid med full precision; avrundning till två decimaler görs
EN gång, när ett värde ska visas eller sparas.
"""
from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List

from src.core.errors import AmountOutOfRange

CENT = Decimal("0.01")
# Över detta räcker inte Decimal-precisionen för öresavrundning
MAX_AMOUNT = 1e24


def round_money(value: Any) -> float:
    """
    2 decimaler, halvor avrundas uppåt (1.005 -> 1.01, inte bankers rounding).
    Höjer AmountOutOfRange för inf/nan och orimligt stora belopp.
    """
    f = float(value or 0.0)
    if not math.isfinite(f) or abs(f) >= MAX_AMOUNT:
        raise AmountOutOfRange(value)
    return float(Decimal(repr(f)).quantize(CENT, rounding=ROUND_HALF_UP))


def money_str(value: Any) -> str:
    """28.35 -> "28.35" (alltid två decimaler, punkt som decimaltecken)."""
    return "{:.2f}".format(round_money(value))


def _group_thousands(int_str: str, sep: str) -> str:
    """Grupperar heltalsdelen var 3:e siffra, från höger."""
    s = "".join(ch for ch in int_str if ch.isdigit())
    if len(s) <= 3 or not sep:
        return s
    parts: List[str] = []
    while s:
        parts.append(s[-3:])
        s = s[:-3]
    return sep.join(reversed(parts))


def format_money(
    value: Any,
    symbol: str = "$",
    decimal_sep: str = ".",
    thousands_sep: str = ",",
    symbol_after: bool = False,
) -> str:
    """
    Formaterar ett belopp för visning.

      format_money(1234.5)                          -> "$ 1,234.50"
      format_money(28.35, "R$", ",", ".")           -> "R$ 28,35"
      format_money(1234.5, "kr", ",", " ", True)     -> "1 234,50 kr"
    """
    rounded = round_money(value)
    sign = "-" if rounded < 0 else ""
    cents = "{:.2f}".format(abs(rounded))
    int_part, dec_part = cents.split(".")
    number = "{}{}{}{}".format(sign, _group_thousands(int_part, thousands_sep), decimal_sep, dec_part)
    if not symbol:
        return number
    if symbol_after:
        return "{} {}".format(number, symbol)
    return "{} {}".format(symbol, number)

# src/services/whatsapp.py
"""
Offert som WhatsApp-meddelande.

Meddelandet byggs från en serialiserad offert (samma dict som API:t
returnerar) och använder de redan beräknade beloppen (total_price per rad,
total_amount för offerten). Inga belopp räknas om här.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote as urlquote

from src.services.locales import date_for, label, money_for

WA_BASE_URL = "https://wa.me/"


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def format_quote_message(quote: Dict[str, Any], language: str = "en") -> str:
    def t(key: str) -> str:
        return label(language, f"whatsapp.{key}")

    number = quote.get("quote_number") or ""
    title = f"{t('title')} {number}".strip()
    out: List[str] = [f"🧾 *{title}*"]
    out.append("")
    out.append(f"📅 {t('date')}: {date_for(language, _as_date(quote.get('created_at')))}")
    out.append(f"⏰ {t('valid_until')}: {date_for(language, _as_date(quote.get('validity_date')))}")
    out.append("")
    out.append(f"📦 *{t('items')}:*")

    for idx, item in enumerate(quote.get("items") or [], start=1):
        name = item.get("product_name") or t("product_fallback")
        qty = item.get("quantity", 0)
        total = money_for(language, item.get("total_price", 0))
        out.append(f"{idx}. {name} - {t('qty')}: {qty} - {total}")

    out.append("")
    out.append(f"💰 *{t('total')}: {money_for(language, quote.get('total_amount', 0))}*")

    extras: List[str] = []
    if quote.get("payment_terms"):
        extras.append(f"💳 {t('payment_terms')}: {quote['payment_terms']}")
    if quote.get("delivery_details"):
        extras.append(f"🚚 {t('delivery')}: {quote['delivery_details']}")
    if quote.get("notes"):
        extras.append(f"📝 {t('notes')}: {quote['notes']}")
    if extras:
        out.append("")
        out.extend(extras)

    out.append("")
    out.append(t("closing"))
    return "\n".join(out)


def whatsapp_url(phone_number: str, message: str) -> str:
    """
    wa.me-länk. Telefonnumret rensas till bara siffror.
    Höjer ValueError om numret saknar siffror.
    """
    clean = re.sub(r"\D", "", phone_number or "")
    if not clean:
        raise ValueError("Telefonnummer saknas")
    return f"{WA_BASE_URL}{clean}?text={urlquote(message, safe='')}"

# src/services/locales.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml

from src.core.money import format_money

# Projektroten, där knowledge/ ligger
ROOT = Path(__file__).resolve().parents[2]
LOCALES_DIR = ROOT / "knowledge" / "locales"

FALLBACK_LANGUAGE = "en"


@lru_cache(maxsize=None)
def available_languages() -> List[str]:
    if not LOCALES_DIR.exists():
        return []
    return sorted(p.stem for p in LOCALES_DIR.glob("*.yaml"))


@lru_cache(maxsize=None)
def _load_locale_yaml(language: str) -> Dict[str, Any]:
    """
    Läser knowledge/locales/<språk>.yaml en gång och cache:ar resultatet.
    Trasig eller saknad fil ger tom dict (då används reservspråket).
    """
    path = LOCALES_DIR / f"{language}.yaml"
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def resolve_language(language: str) -> str:
    """
    "pt-BR" -> "pt-BR", "pt" -> "pt-BR", "sv-SE" -> "sv", okänt -> "en".
    Matchningen är skiftlägesokänslig.
    """
    langs = available_languages()
    wanted = (language or "").strip().replace("_", "-")
    if not wanted:
        return FALLBACK_LANGUAGE

    by_lower = {l.lower(): l for l in langs}
    if wanted.lower() in by_lower:
        return by_lower[wanted.lower()]

    base = wanted.split("-")[0].lower()
    if base in by_lower:
        return by_lower[base]
    for l in langs:
        if l.lower().split("-")[0] == base:
            return l
    return FALLBACK_LANGUAGE


def load_locale(language: str) -> Dict[str, Any]:
    resolved = resolve_language(language)
    data = _load_locale_yaml(resolved)
    if not data and resolved != FALLBACK_LANGUAGE:
        data = _load_locale_yaml(FALLBACK_LANGUAGE)
    return data


def label(language: str, key: str, default: str = "", **fmt: Any) -> str:
    """
    Slår upp en text med punktnotation, t.ex. label("sv", "whatsapp.total").
    Saknas nyckeln i språket tas den från reservspråket, annars default.
    """
    for data in (load_locale(language), _load_locale_yaml(FALLBACK_LANGUAGE)):
        node: Any = data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                node = None
                break
            node = node[part]
        if isinstance(node, str):
            return node.format(**fmt) if fmt else node
    return default.format(**fmt) if (fmt and default) else default


def money_for(language: str, value: Any) -> str:
    cur = load_locale(language).get("currency") or {}
    return format_money(
        value,
        symbol=str(cur.get("symbol", "$")),
        decimal_sep=str(cur.get("decimal_sep", ".")),
        thousands_sep=str(cur.get("thousands_sep", ",")),
        symbol_after=bool(cur.get("symbol_after", False)),
    )


def date_for(language: str, value: Any) -> str:
    if value is None:
        return ""
    fmt = load_locale(language).get("date_format") or "%Y-%m-%d"
    return value.strftime(fmt)

# src/server/api/deps.py
from typing import Optional

from fastapi import Header, HTTPException

from src.core.context import RequestContext
from src.core.errors import (
    AmountOutOfRange,
    InsufficientStock,
    InvalidStatusTransition,
    InventoryError,
    NotFound,
    QuoteNotConvertible,
    StoreFailure,
)
from src.server.settings.config import settings

# ==============================
# API KEY + ANVÄNDARE
# ==============================

API_KEY_HEADER_NAME = "X-API-KEY"
USER_HEADER_NAME = "X-User-Id"


def verify_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


def get_context(
    x_user_id: Optional[str] = Header(None),
    accept_language: Optional[str] = Header(None),
) -> RequestContext:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    # "sv-SE,sv;q=0.9,en;q=0.8" -> "sv-SE"
    language = settings.default_language
    if accept_language:
        first = accept_language.split(",")[0].split(";")[0].strip()
        if first and first != "*":
            language = first

    return RequestContext(user_id=user_id, language=language)


# ==============================
# FEL -> HTTP
# ==============================

def http_error(e: InventoryError) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InsufficientStock):
        return HTTPException(status_code=409, detail=e.as_dict())
    if isinstance(e, (QuoteNotConvertible, InvalidStatusTransition)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, AmountOutOfRange):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, StoreFailure):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from src.core.context import RequestContext
from src.core.errors import InventoryError
from src.server.api.deps import get_context, http_error, verify_api_key
from src.server.db.session import get_session
from src.server.models import QUOTE_STATUSES
from src.server.schemas.quote import (
    ConversionOut,
    QuoteCreate,
    QuoteDraftIn,
    QuoteOut,
    QuoteStatusIn,
)
from src.services import quote_service


router = APIRouter(
    prefix="/quotes",
    tags=["quotes"],
    dependencies=[Depends(verify_api_key)],
)


# ==============================
# LISTA
# ==============================

@router.get("", response_model=List[QuoteOut], summary="Lista alla offerter")
@router.get("/", include_in_schema=False)
def list_quotes(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return quote_service.list_quotes(session=session, ctx=ctx, skip=skip, limit=limit)


# ==============================
# SKAPA & DRAFT
# ==============================

@router.post("/draft", summary="Beräkna offert (utkast, sparas inte)")
def draft_quote(
    payload: QuoteDraftIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return quote_service.preview_quote(payload=payload, session=session, ctx=ctx)
    except InventoryError as e:
        raise http_error(e)


@router.post("", response_model=QuoteOut, status_code=201, summary="Spara offert")
def create_quote_endpoint(
    payload: QuoteCreate,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        q = quote_service.create_quote(payload=payload, session=session, ctx=ctx)
    except InventoryError as e:
        raise http_error(e)
    return quote_service.serialize_quote(q, session)


# ==============================
# ENSKILD OFFERT
# ==============================

@router.get("/{quote_id}", response_model=QuoteOut)
def get_quote(
    quote_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        q = quote_service.get_quote(session=session, ctx=ctx, quote_id=quote_id)
    except InventoryError as e:
        raise http_error(e)
    return quote_service.serialize_quote(q, session)


@router.delete("/{quote_id}", status_code=204)
def delete_quote(
    quote_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        quote_service.delete_quote(session=session, ctx=ctx, quote_id=quote_id)
    except InventoryError as e:
        raise http_error(e)


@router.patch("/{quote_id}/status", response_model=QuoteOut, summary="Markera som skickad/utgången")
def update_status(
    quote_id: int,
    payload: QuoteStatusIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    if payload.status not in QUOTE_STATUSES:
        raise HTTPException(status_code=422, detail=f"Okänd status: {payload.status}")
    try:
        q = quote_service.set_quote_status(
            session=session, ctx=ctx, quote_id=quote_id, status=payload.status
        )
    except InventoryError as e:
        raise http_error(e)
    return quote_service.serialize_quote(q, session)


# ==============================
# KONVERTERA TILL ORDER
# ==============================

@router.post("/{quote_id}/convert", response_model=ConversionOut, summary="Konvertera offert till order")
def convert_quote(
    quote_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        result = quote_service.convert_quote_to_order(session=session, ctx=ctx, quote_id=quote_id)
    except InventoryError as e:
        raise http_error(e)

    return {
        "quote_id": result.quote_id,
        "status": result.status,
        "movements": [
            {
                "product_id": m.product_id,
                "product_name": m.product_name,
                "quantity": m.quantity,
                "quantity_before": m.quantity_before,
                "quantity_after": m.quantity_after,
            }
            for m in result.movements
        ],
    }


# ==============================
# WHATSAPP
# ==============================

@router.get("/{quote_id}/whatsapp", summary="Offert som WhatsApp-meddelande")
def quote_whatsapp(
    quote_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return quote_service.quote_whatsapp(session=session, ctx=ctx, quote_id=quote_id)
    except InventoryError as e:
        raise http_error(e)

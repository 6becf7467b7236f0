from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.core.context import RequestContext
from src.core.errors import InventoryError
from src.server.api.deps import get_context, http_error, verify_api_key
from src.server.db.session import get_session
from src.server.schemas.product import ProductIn, ProductOut
from src.services import inventory

router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=List[ProductOut], summary="Lista produkter (nyaste först)")
def list_products(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return inventory.list_products(session=session, ctx=ctx)


@router.post("", response_model=ProductOut, status_code=201, summary="Skapa produkt")
def create_product(
    payload: ProductIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return inventory.create_product(session=session, ctx=ctx, payload=payload)


@router.get("/low-stock", response_model=List[ProductOut], summary="Produkter under minimisaldo")
def low_stock(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return inventory.low_stock_products(session=session, ctx=ctx)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return inventory.get_product(session=session, ctx=ctx, product_id=product_id)
    except InventoryError as e:
        raise http_error(e)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return inventory.update_product(
            session=session, ctx=ctx, product_id=product_id, payload=payload
        )
    except InventoryError as e:
        raise http_error(e)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        inventory.delete_product(session=session, ctx=ctx, product_id=product_id)
    except InventoryError as e:
        raise http_error(e)

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.core.context import RequestContext
from src.core.errors import InventoryError
from src.server.api.deps import get_context, http_error, verify_api_key
from src.server.db.session import get_session
from src.server.schemas.client import ClientIn, ClientOut
from src.services import clients

router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=List[ClientOut], summary="Lista kunder (efter namn)")
def list_clients(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return clients.list_clients(session=session, ctx=ctx)


@router.post("", response_model=ClientOut, status_code=201, summary="Skapa kund")
def create_client(
    payload: ClientIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return clients.create_client(session=session, ctx=ctx, payload=payload)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return clients.get_client(session=session, ctx=ctx, client_id=client_id)
    except InventoryError as e:
        raise http_error(e)


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: int,
    payload: ClientIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return clients.update_client(session=session, ctx=ctx, client_id=client_id, payload=payload)
    except InventoryError as e:
        raise http_error(e)


@router.delete("/{client_id}", status_code=204)
def delete_client(
    client_id: int,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        clients.delete_client(session=session, ctx=ctx, client_id=client_id)
    except InventoryError as e:
        raise http_error(e)

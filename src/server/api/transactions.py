from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.core.context import RequestContext
from src.core.errors import InventoryError
from src.server.api.deps import get_context, http_error, verify_api_key
from src.server.db.session import get_session
from src.server.schemas.transaction import TransactionIn, TransactionOut
from src.services import inventory

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=List[TransactionOut], summary="Lista lagerrörelser")
def list_transactions(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return inventory.list_transactions(session=session, ctx=ctx)


@router.post("", response_model=TransactionOut, status_code=201, summary="Registrera inleverans/försäljning")
def record_transaction(
    payload: TransactionIn,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    try:
        return inventory.record_transaction(session=session, ctx=ctx, payload=payload)
    except InventoryError as e:
        raise http_error(e)

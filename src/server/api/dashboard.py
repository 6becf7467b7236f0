from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.core.context import RequestContext
from src.server.api.deps import get_context, verify_api_key
from src.server.db.session import get_session
from src.services.inventory import dashboard_stats

router = APIRouter(tags=["dashboard"], dependencies=[Depends(verify_api_key)])


@router.get("/dashboard", summary="Nyckeltal för startsidan")
def dashboard(
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    return dashboard_stats(session=session, ctx=ctx)

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlmodel import Session

from src.core.context import RequestContext
from src.server.api.deps import get_context, verify_api_key
from src.server.db.session import get_session
from src.services.exports import EXPORT_KINDS, XLSX_MEDIA_TYPE, export_workbook

router = APIRouter(prefix="/exports", tags=["exports"], dependencies=[Depends(verify_api_key)])


@router.get("/{kind}", summary="Ladda ner Excel-export")
def download_export(
    kind: str,
    session: Session = Depends(get_session),
    ctx: RequestContext = Depends(get_context),
):
    if kind not in EXPORT_KINDS:
        raise HTTPException(status_code=404, detail=f"Okänd exporttyp: {kind}")

    filename, content = export_workbook(kind, session=session, ctx=ctx)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

from fastapi import APIRouter, HTTPException
from models.common_models import ColumnsRequest, PreviewRequest
from services.session_service import get_session
from services.preview_service import get_preview_rows
from services.column_profile_service import get_column_profile

router = APIRouter(prefix="/data", tags=["data"])


@router.post("/preview")
async def preview_data(req: PreviewRequest):
    session = get_session(req.session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found.")

    try:
        return get_preview_rows(req.session_id, req.sheet_name, req.n_rows)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))


@router.post("/columns")
async def column_profile(req: ColumnsRequest):
    session = get_session(req.session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found.")

    try:
        return get_column_profile(req.session_id, req.sheet_name)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))

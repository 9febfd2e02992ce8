from typing import List

from fastapi import APIRouter, HTTPException
from models.common_models import ChartRequest, ChartResponse, DashboardRequest, EvaluateRequest
from services.session_service import get_session
from services.chart_service import render_chart, render_dashboard, render_rows

router = APIRouter(prefix="/charts", tags=["charts"])

# Engine diagnostics are regular 200 responses with result.status == "diagnostic";
# only unknown sessions/sheets are HTTP errors.
# Sync handlers: drawing blocks, so FastAPI runs them in its threadpool.


@router.post("/render", response_model=ChartResponse)
def render(req: ChartRequest):
    session = get_session(req.session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found.")

    try:
        return render_chart(
            req.session_id,
            req.sheet_name,
            req.descriptor,
            show_all=req.show_all,
            dark_mode=req.dark_mode,
            include_image=req.include_image,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))


@router.post("/dashboard", response_model=List[ChartResponse])
def dashboard(req: DashboardRequest):
    session = get_session(req.session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found.")

    try:
        return render_dashboard(
            req.session_id,
            req.sheet_name,
            req.descriptors,
            show_all=req.show_all,
            dark_mode=req.dark_mode,
            include_image=req.include_image,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))


@router.post("/evaluate", response_model=ChartResponse)
def evaluate(req: EvaluateRequest):
    # Rows supplied inline by the caller; no drawing
    return render_rows(req.rows, req.descriptor, show_all=req.show_all, dark_mode=req.dark_mode, include_image=False)

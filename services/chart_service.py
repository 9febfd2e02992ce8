from typing import Any, List, Optional, Sequence

from config import DEFAULT_DARK_MODE
from models.chart_models import DataRow, RenderPlan
from models.common_models import ChartResponse
from services.chart_drawing_service import draw_chart
from services.chart_engine import build_chart
from services.dataset_reader_service import get_sheet_rows


def render_rows(
    rows: Sequence[DataRow],
    descriptor: Any,
    show_all: bool = False,
    dark_mode: Optional[bool] = None,
    include_image: bool = True,
) -> ChartResponse:
    """Run the engine on rows and draw the plan when one comes back."""
    if dark_mode is None:
        dark_mode = DEFAULT_DARK_MODE

    result = build_chart(rows, descriptor, show_all=show_all, dark_mode=dark_mode)

    image_base64 = None
    if include_image and isinstance(result, RenderPlan):
        image_base64 = draw_chart(result)

    return ChartResponse(result=result, image_base64=image_base64)


def render_chart(
    session_id: str,
    sheet_name: str,
    descriptor: Any,
    show_all: bool = False,
    dark_mode: Optional[bool] = None,
    include_image: bool = True,
) -> ChartResponse:
    """
    Render one AI-suggested chart for a sheet of an uploaded file.
    Raises KeyError if the session or sheet is unknown.
    """
    rows = get_sheet_rows(session_id, sheet_name)
    return render_rows(rows, descriptor, show_all=show_all, dark_mode=dark_mode, include_image=include_image)


def render_dashboard(
    session_id: str,
    sheet_name: str,
    descriptors: List[Any],
    show_all: bool = False,
    dark_mode: Optional[bool] = None,
    include_image: bool = True,
) -> List[ChartResponse]:
    """
    Render every chart of a dashboard, in order.
    One bad descriptor yields a diagnostic in its slot; the rest still render.
    """
    rows = get_sheet_rows(session_id, sheet_name)
    return [
        render_rows(rows, descriptor, show_all=show_all, dark_mode=dark_mode, include_image=include_image)
        for descriptor in descriptors
    ]

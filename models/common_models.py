from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from models.chart_models import ChartResult


class SheetInfo(BaseModel):
    sheet_name: str
    n_rows: int
    n_cols: int


class PreviewRequest(BaseModel):
    session_id: str
    sheet_name: str
    n_rows: int = 20


class ColumnsRequest(BaseModel):
    session_id: str
    sheet_name: str


class ChartRequest(BaseModel):
    session_id: str
    sheet_name: str
    # Descriptor comes straight from the AI collaborator; the engine sanitises it
    descriptor: Any = None
    show_all: bool = False
    dark_mode: Optional[bool] = None
    include_image: bool = True


class DashboardRequest(BaseModel):
    session_id: str
    sheet_name: str
    descriptors: List[Any] = Field(default_factory=list)
    show_all: bool = False
    dark_mode: Optional[bool] = None
    include_image: bool = True


class EvaluateRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    descriptor: Any = None
    show_all: bool = False
    dark_mode: bool = False


class ChartResponse(BaseModel):
    result: ChartResult
    image_base64: Optional[str] = None

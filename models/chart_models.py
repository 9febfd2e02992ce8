from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

# One spreadsheet row: column name -> str / number / None
DataRow = Dict[str, Any]


class ChartKind(str, Enum):
    BAR = "BAR"
    HORIZONTAL_BAR = "HORIZONTAL_BAR"
    LINE = "LINE"
    PIE = "PIE"
    DONUT = "DONUT"
    AREA_BAR_COMBO = "AREA_BAR_COMBO"
    TREEMAP = "TREEMAP"
    RADAR = "RADAR"

    @classmethod
    def parse(cls, raw: Any) -> Optional["ChartKind"]:
        """Case-insensitive lookup; None for anything that is not a known tag."""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


# Keys the AI response used before the descriptor contract was normalised.
# When any of them is present, "category_column" means the donut/treemap group key.
_ORIGINAL_SHAPE_KEYS = ("x_axis_column", "y_axis_columns", "y_axis_column", "value_column")


def _clean_name(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _clean_names(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    names: List[str] = []
    for item in value:
        name = _clean_name(item)
        if name is not None:
            names.append(name)
    return names


def _first_present(payload: Dict[str, Any], keys) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


class ChartDescriptor(BaseModel):
    title: str = ""
    kind: str = ""
    category_column: Optional[str] = None
    value_columns: List[str] = Field(default_factory=list)
    group_column: Optional[str] = None
    single_value_column: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ChartDescriptor":
        """
        Build a descriptor from an untrusted, AI-produced payload.
        Every field is optional; wrong-typed or blank references are dropped
        instead of raising.
        """
        if isinstance(payload, ChartDescriptor):
            return payload
        if not isinstance(payload, dict):
            return cls()

        original_shape = any(key in payload for key in _ORIGINAL_SHAPE_KEYS)

        raw_kind = _first_present(payload, ("kind", "type", "chart_type"))
        raw_title = payload.get("title")

        if original_shape:
            category_keys = ("categoryColumn", "x_axis_column")
            group_keys = ("group_column", "groupColumn", "category_column")
        else:
            category_keys = ("category_column", "categoryColumn", "x_axis_column")
            group_keys = ("group_column", "groupColumn")

        return cls(
            title=str(raw_title) if raw_title is not None else "",
            kind=str(raw_kind).strip() if raw_kind is not None else "",
            category_column=_clean_name(_first_present(payload, category_keys)),
            value_columns=_clean_names(
                _first_present(payload, ("value_columns", "valueColumns", "y_axis_columns", "y_axis_column"))
            ),
            group_column=_clean_name(_first_present(payload, group_keys)),
            single_value_column=_clean_name(
                _first_present(payload, ("single_value_column", "singleValueColumn", "value_column"))
            ),
        )

    @property
    def chart_kind(self) -> Optional[ChartKind]:
        return ChartKind.parse(self.kind)

    @property
    def primary_value_column(self) -> Optional[str]:
        if self.value_columns:
            return self.value_columns[0]
        return self.single_value_column

    def referenced_columns(self) -> List[str]:
        candidates = [self.category_column, *self.value_columns, self.group_column, self.single_value_column]
        seen = set()
        names: List[str] = []
        for name in candidates:
            if name and name not in seen:
                seen.add(name)
                names.append(name)
        return names


class DiagnosticKind(str, Enum):
    EMPTY_DATASET = "EmptyDataset"
    MISSING_COLUMNS = "MissingColumns"
    UNPARSEABLE_SERIES = "UnparseableSeries"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    UNSUPPORTED_KIND = "UnsupportedKind"


class ChartDiagnostic(BaseModel):
    status: Literal["diagnostic"] = "diagnostic"
    kind: DiagnosticKind
    title: str = ""
    message: str
    chart_kind: Optional[str] = None
    missing_columns: List[str] = Field(default_factory=list)
    available_columns: List[str] = Field(default_factory=list)
    missing_fields: List[str] = Field(default_factory=list)


class ColumnCheck(BaseModel):
    missing: List[str] = Field(default_factory=list)
    available: List[str] = Field(default_factory=list)


class RenderableDataset(BaseModel):
    rows: List[DataRow] = Field(default_factory=list)
    is_truncated: bool = False
    display_limit: Optional[int] = None
    show_all: bool = False


class ThemeColors(BaseModel):
    dark: bool = False
    grid: str
    text: str
    primary: str
    secondary: str
    background: str
    palette: List[str]


class RenderPlan(BaseModel):
    status: Literal["ok"] = "ok"
    title: str = ""
    kind: ChartKind
    processed_rows: List[DataRow] = Field(default_factory=list)
    series: List[Dict[str, Any]] = Field(default_factory=list)
    field_mapping: Dict[str, str] = Field(default_factory=dict)
    layout: Dict[str, Any] = Field(default_factory=dict)
    colors: ThemeColors
    is_truncated: bool = False
    display_limit: Optional[int] = None
    toggle_label: Optional[str] = None


ChartResult = Annotated[Union[RenderPlan, ChartDiagnostic], Field(discriminator="status")]

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from models.chart_models import (
    ChartDescriptor,
    ChartKind,
    DataRow,
    RenderableDataset,
    RenderPlan,
    ThemeColors,
)
from services.cardinality_reducer import toggle_label

HORIZONTAL_LABEL_WIDTH = 80
ROTATE_LABELS_ABOVE = 3


@dataclass(frozen=True)
class FieldRole:
    """One slot of a chart: which descriptor field feeds it and whether it is mandatory."""

    role: str
    source: str
    required: bool = True
    numeric: bool = False


@dataclass(frozen=True)
class ChartStrategy:
    kind: ChartKind
    roles: Tuple[FieldRole, ...]
    layout: Callable[[int], Dict[str, Any]] = field(default=lambda n_rows: {})
    finish_series: Optional[Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]]] = None

    def field_mapping(self, descriptor: ChartDescriptor) -> Dict[str, str]:
        mapping: Dict[str, str] = {}
        for slot in self.roles:
            column = resolve_field(descriptor, slot.source)
            if column is not None:
                mapping[slot.role] = column
        return mapping

    def missing_fields(self, descriptor: ChartDescriptor) -> List[str]:
        return [slot.source for slot in self.roles if slot.required and resolve_field(descriptor, slot.source) is None]

    def value_columns(self, descriptor: ChartDescriptor) -> List[str]:
        columns = []
        for slot in self.roles:
            column = resolve_field(descriptor, slot.source)
            if slot.numeric and column is not None:
                columns.append(column)
        return columns

    def build_series(self, rows: List[DataRow], mapping: Dict[str, str]) -> List[Dict[str, Any]]:
        series = [{role: row.get(column) for role, column in mapping.items()} for row in rows]
        if self.finish_series is not None:
            series = self.finish_series(series)
        return series


def resolve_field(descriptor: ChartDescriptor, source: str) -> Optional[str]:
    """Read a descriptor field by name; "value_columns[1]" addresses the second value column."""
    if source.startswith("value_columns["):
        index = int(source[len("value_columns["):-1])
        if index < len(descriptor.value_columns):
            return descriptor.value_columns[index]
        return None
    return getattr(descriptor, source)


def _bar_layout(n_rows: int) -> Dict[str, Any]:
    rotate = n_rows > ROTATE_LABELS_ABOVE
    return {"rotate_labels": rotate, "label_angle": 45 if rotate else 0}


def _radar_full_mark(series: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    values = [
        point[key]
        for point in series
        for key in ("A", "B")
        if isinstance(point.get(key), (int, float)) and not isinstance(point.get(key), bool)
    ]
    full_mark = max(values) if values else 0.0
    return [{**point, "full_mark": full_mark} for point in series]


CATEGORY = FieldRole("category", "category_column")
PRIMARY_VALUE = FieldRole("value", "value_columns[0]", numeric=True)

STRATEGIES: Dict[ChartKind, ChartStrategy] = {
    ChartKind.BAR: ChartStrategy(
        kind=ChartKind.BAR,
        roles=(CATEGORY, PRIMARY_VALUE),
        layout=_bar_layout,
    ),
    ChartKind.HORIZONTAL_BAR: ChartStrategy(
        kind=ChartKind.HORIZONTAL_BAR,
        roles=(CATEGORY, PRIMARY_VALUE),
        layout=lambda n_rows: {"label_width": HORIZONTAL_LABEL_WIDTH},
    ),
    ChartKind.LINE: ChartStrategy(
        kind=ChartKind.LINE,
        roles=(CATEGORY, PRIMARY_VALUE),
        layout=lambda n_rows: {"curve": "monotone"},
    ),
    ChartKind.PIE: ChartStrategy(
        kind=ChartKind.PIE,
        roles=(FieldRole("name", "category_column"), FieldRole("value", "value_columns[0]", numeric=True)),
        layout=lambda n_rows: {"outer_radius": 80},
    ),
    ChartKind.DONUT: ChartStrategy(
        kind=ChartKind.DONUT,
        roles=(FieldRole("name", "group_column"), FieldRole("value", "single_value_column", numeric=True)),
        layout=lambda n_rows: {"inner_radius": 60, "outer_radius": 100},
    ),
    ChartKind.AREA_BAR_COMBO: ChartStrategy(
        kind=ChartKind.AREA_BAR_COMBO,
        roles=(
            CATEGORY,
            FieldRole("area", "value_columns[0]", numeric=True),
            FieldRole("bar", "value_columns[1]", required=False, numeric=True),
        ),
        layout=lambda n_rows: {"area_opacity": 0.6},
    ),
    ChartKind.TREEMAP: ChartStrategy(
        kind=ChartKind.TREEMAP,
        roles=(FieldRole("name", "group_column"), FieldRole("value", "single_value_column", numeric=True)),
        layout=lambda n_rows: {"aspect_ratio": 4 / 3},
    ),
    ChartKind.RADAR: ChartStrategy(
        kind=ChartKind.RADAR,
        roles=(
            FieldRole("subject", "category_column"),
            FieldRole("A", "value_columns[0]", numeric=True),
            FieldRole("B", "value_columns[1]", required=False, numeric=True),
        ),
        layout=lambda n_rows: {"outer_radius": "80%"},
        finish_series=_radar_full_mark,
    ),
}


def resolve_strategy(descriptor: ChartDescriptor) -> Optional[ChartStrategy]:
    kind = descriptor.chart_kind
    if kind is None:
        return None
    return STRATEGIES[kind]


def build_plan(
    strategy: ChartStrategy,
    descriptor: ChartDescriptor,
    dataset: RenderableDataset,
    colors: ThemeColors,
) -> RenderPlan:
    mapping = strategy.field_mapping(descriptor)
    return RenderPlan(
        title=descriptor.title,
        kind=strategy.kind,
        processed_rows=dataset.rows,
        series=strategy.build_series(dataset.rows, mapping),
        field_mapping=mapping,
        layout=strategy.layout(len(dataset.rows)),
        colors=colors,
        is_truncated=dataset.is_truncated,
        display_limit=dataset.display_limit,
        toggle_label=toggle_label(dataset),
    )

from typing import Callable, Dict, List, Optional, Sequence
import numbers

from models.chart_models import ChartDescriptor, ChartKind, DataRow, RenderableDataset

BAR_DISPLAY_LIMIT = 10
CIRCULAR_DISPLAY_LIMIT = 5

# Line, area+bar combo and treemap are never truncated
DISPLAY_LIMITS: Dict[ChartKind, int] = {
    ChartKind.BAR: BAR_DISPLAY_LIMIT,
    ChartKind.HORIZONTAL_BAR: BAR_DISPLAY_LIMIT,
    ChartKind.PIE: CIRCULAR_DISPLAY_LIMIT,
    ChartKind.DONUT: CIRCULAR_DISPLAY_LIMIT,
    ChartKind.RADAR: CIRCULAR_DISPLAY_LIMIT,
}


def display_limit_for(kind: Optional[ChartKind]) -> Optional[int]:
    if kind is None:
        return None
    return DISPLAY_LIMITS.get(kind)


def _primary_column(descriptor: ChartDescriptor) -> Optional[str]:
    # Donut and treemap plot the single-value column, not value_columns
    if descriptor.chart_kind in (ChartKind.DONUT, ChartKind.TREEMAP) and descriptor.single_value_column:
        return descriptor.single_value_column
    return descriptor.primary_value_column


def _sort_value(row: DataRow, column: Optional[str]) -> float:
    value = row.get(column) if column else None
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return float(value)
    return float("-inf")


def reduce_rows(rows: Sequence[DataRow], descriptor: ChartDescriptor, show_all: bool = False) -> RenderableDataset:
    """
    Keep the top-N rows (by primary value, descending) for category charts
    that have more rows than their display limit.

    With show_all the full set is returned but is_truncated stays True so
    the UI can still offer the "top N only" view.
    """
    limit = display_limit_for(descriptor.chart_kind)
    rows = list(rows)

    if limit is None or len(rows) <= limit:
        return RenderableDataset(rows=rows, is_truncated=False, display_limit=limit, show_all=show_all)

    if show_all:
        return RenderableDataset(rows=rows, is_truncated=True, display_limit=limit, show_all=True)

    primary = _primary_column(descriptor)
    # sorted() is stable, also with reverse=True
    ranked = sorted(rows, key=lambda row: _sort_value(row, primary), reverse=True)
    return RenderableDataset(rows=ranked[:limit], is_truncated=True, display_limit=limit, show_all=False)


def toggle_label(dataset: RenderableDataset) -> Optional[str]:
    if not dataset.is_truncated:
        return None
    if dataset.show_all:
        return f"View Top {dataset.display_limit}"
    return "View All"


class TruncationToggle:
    """
    Component-local "show all / top N" flag.
    `toggle` takes no arguments so it can be handed to a button callback.
    """

    def __init__(self, show_all: bool = False, on_change: Optional[Callable[[bool], None]] = None):
        self.show_all = show_all
        self._on_change = on_change

    def toggle(self) -> bool:
        self.show_all = not self.show_all
        if self._on_change is not None:
            self._on_change(self.show_all)
        return self.show_all

    def apply(self, rows: Sequence[DataRow], descriptor: ChartDescriptor) -> RenderableDataset:
        return reduce_rows(rows, descriptor, show_all=self.show_all)

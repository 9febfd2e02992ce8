"""
Chart rendering engine.

Turns (rows, AI descriptor, show_all, dark_mode) into either a RenderPlan
ready to draw or a ChartDiagnostic explaining why no chart can be drawn.
Nothing in here raises for bad input and nothing is cached between calls.
"""
from typing import Any, List, Optional, Sequence
import logging
import numbers

from models.chart_models import (
    ChartDescriptor,
    ChartDiagnostic,
    DataRow,
    DiagnosticKind,
    RenderPlan,
)
from services.cardinality_reducer import reduce_rows
from services.chart_dispatcher import build_plan, resolve_strategy
from services.column_validator import validate_columns
from services.theme_service import theme_colors
from services.value_coercer import coerce_rows, numeric_columns_for

logger = logging.getLogger(__name__)


def _has_plottable_values(rows: Sequence[DataRow], columns: List[str]) -> bool:
    for row in rows:
        for col in columns:
            value = row.get(col)
            if isinstance(value, numbers.Real) and not isinstance(value, bool) and value != 0:
                return True
    return False


def _diagnostic(kind: DiagnosticKind, descriptor: ChartDescriptor, message: str, **extra) -> ChartDiagnostic:
    logger.warning("Chart '%s' (%s) not rendered: %s", descriptor.title, descriptor.kind or "?", message)
    return ChartDiagnostic(kind=kind, title=descriptor.title, message=message, chart_kind=descriptor.kind or None, **extra)


def build_chart(
    rows: Optional[Sequence[DataRow]],
    descriptor: Any,
    show_all: bool = False,
    dark_mode: bool = False,
):
    """
    Run the full pipeline for one chart.

    Steps:
    - empty dataset check
    - column validation against the first row
    - numeric coercion of every value column
    - chart kind lookup and required field check
    - "nothing to plot" check
    - top-N truncation for category charts
    - series shaping and colour selection

    Returns a RenderPlan or a ChartDiagnostic (discriminated by `status`).
    """
    descriptor = ChartDescriptor.from_payload(descriptor)

    if not rows:
        return _diagnostic(DiagnosticKind.EMPTY_DATASET, descriptor, "There is no data to display for this chart.")

    check = validate_columns(rows, descriptor)
    if check.missing:
        return _diagnostic(
            DiagnosticKind.MISSING_COLUMNS,
            descriptor,
            f"The suggested columns ({', '.join(check.missing)}) were not found in the data.",
            missing_columns=check.missing,
            available_columns=check.available,
        )

    processed = coerce_rows(rows, numeric_columns_for(descriptor))

    strategy = resolve_strategy(descriptor)
    if strategy is None:
        return _diagnostic(
            DiagnosticKind.UNSUPPORTED_KIND,
            descriptor,
            f"Chart type '{descriptor.kind}' is not supported.",
        )

    missing_fields = strategy.missing_fields(descriptor)
    if missing_fields:
        return _diagnostic(
            DiagnosticKind.MISSING_REQUIRED_FIELD,
            descriptor,
            f"A {strategy.kind.value} chart needs {', '.join(missing_fields)} to be set.",
            missing_fields=missing_fields,
            available_columns=check.available,
        )

    if not _has_plottable_values(processed, strategy.value_columns(descriptor)):
        return _diagnostic(
            DiagnosticKind.UNPARSEABLE_SERIES,
            descriptor,
            "The chart data could not be processed: no numeric values were found.",
            available_columns=check.available,
        )

    dataset = reduce_rows(processed, descriptor, show_all=show_all)
    plan: RenderPlan = build_plan(strategy, descriptor, dataset, theme_colors(dark_mode))

    logger.info(
        "Chart '%s' planned as %s with %d of %d rows (truncated=%s)",
        plan.title,
        plan.kind.value,
        len(plan.processed_rows),
        len(processed),
        plan.is_truncated,
    )
    return plan

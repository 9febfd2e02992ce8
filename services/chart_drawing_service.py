from typing import Any, Callable, Dict, List, Optional
import io
import base64
import logging
import math
import threading
import warnings

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from models.chart_models import ChartKind, RenderPlan
from services.label_formatter import format_label

warnings.filterwarnings("ignore", category=UserWarning)

logger = logging.getLogger(__name__)

FIGSIZE = (8, 5)

# pyplot and rcParams are process-wide
_DRAW_LOCK = threading.Lock()


def _number(value) -> float:
    # series values are coerced floats; None means the row lacked the column
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _labels(plan: RenderPlan, role: str) -> List[Any]:
    return [format_label(point.get(role)) for point in plan.series]


def _values(plan: RenderPlan, role: str) -> List[float]:
    return [_number(point.get(role)) for point in plan.series]


def _style_axes(ax, plan: RenderPlan):
    colors = plan.colors
    ax.set_facecolor(colors.background)
    ax.tick_params(colors=colors.text, labelsize=9)
    for spine in ax.spines.values():
        spine.set_color(colors.grid)


# Cartesian charts
def _draw_bar(fig, plan: RenderPlan):
    ax = fig.add_subplot(111)
    positions = list(range(len(plan.series)))
    sns.barplot(x=positions, y=_values(plan, "value"), color=plan.colors.primary, ax=ax)

    angle = plan.layout.get("label_angle", 0)
    ax.set_xticks(positions)
    ax.set_xticklabels(_labels(plan, "category"), rotation=angle, ha="right" if angle else "center")
    ax.set_xlabel(plan.field_mapping.get("category", ""))
    ax.set_ylabel(plan.field_mapping.get("value", ""))
    ax.grid(axis="y", color=plan.colors.grid, linestyle="--")
    _style_axes(ax, plan)


def _draw_horizontal_bar(fig, plan: RenderPlan):
    ax = fig.add_subplot(111)
    positions = list(range(len(plan.series)))
    sns.barplot(x=_values(plan, "value"), y=positions, orient="h", color=plan.colors.primary, ax=ax)

    ax.set_yticks(positions)
    ax.set_yticklabels(_labels(plan, "category"))
    ax.set_ylabel(plan.field_mapping.get("category", ""))
    ax.set_xlabel(plan.field_mapping.get("value", ""))
    ax.grid(axis="x", color=plan.colors.grid, linestyle="--")
    _style_axes(ax, plan)


def _draw_line(fig, plan: RenderPlan):
    ax = fig.add_subplot(111)
    positions = list(range(len(plan.series)))
    sns.lineplot(x=positions, y=_values(plan, "value"), color=plan.colors.primary, marker="o", ax=ax)

    ax.set_xticks(positions)
    ax.set_xticklabels(_labels(plan, "category"), rotation=45 if len(positions) > 3 else 0)
    ax.set_xlabel(plan.field_mapping.get("category", ""))
    ax.set_ylabel(plan.field_mapping.get("value", ""))
    ax.grid(color=plan.colors.grid, linestyle="--")
    _style_axes(ax, plan)


def _draw_area_bar_combo(fig, plan: RenderPlan):
    ax = fig.add_subplot(111)
    positions = list(range(len(plan.series)))

    ax.fill_between(
        positions,
        _values(plan, "area"),
        color=plan.colors.primary,
        alpha=plan.layout.get("area_opacity", 0.6),
        label=plan.field_mapping["area"],
    )
    if "bar" in plan.field_mapping:
        ax.bar(positions, _values(plan, "bar"), width=0.5, color=plan.colors.secondary, label=plan.field_mapping["bar"])

    ax.set_xticks(positions)
    ax.set_xticklabels(_labels(plan, "category"), rotation=45 if len(positions) > 3 else 0)
    ax.grid(color=plan.colors.grid, linestyle="--")
    ax.legend(fontsize=9)
    _style_axes(ax, plan)


# Circular charts
def _draw_pie(fig, plan: RenderPlan, inner_ratio: float = 0.0):
    ax = fig.add_subplot(111)
    # wedges cannot be negative
    values = [max(value, 0.0) for value in _values(plan, "value")]
    palette = plan.colors.palette
    wedge_colors = [palette[i % len(palette)] for i in range(len(values))]

    wedgeprops = {"edgecolor": plan.colors.background}
    if inner_ratio > 0:
        wedgeprops["width"] = 1 - inner_ratio

    ax.pie(values, colors=wedge_colors, startangle=90, counterclock=False, wedgeprops=wedgeprops)
    ax.legend(
        [str(label) for label in _labels(plan, "name")],
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        fontsize=9,
        frameon=False,
        labelcolor=plan.colors.text,
    )
    ax.axis("equal")


def _draw_donut(fig, plan: RenderPlan):
    inner = plan.layout.get("inner_radius", 60)
    outer = plan.layout.get("outer_radius", 100)
    _draw_pie(fig, plan, inner_ratio=inner / outer)


def _draw_radar(fig, plan: RenderPlan):
    ax = fig.add_subplot(111, polar=True)
    subjects = _labels(plan, "subject")
    n = len(subjects)

    angles = [i / float(n) * 2 * math.pi for i in range(n)]
    angles += angles[:1]

    for role, color in (("A", plan.colors.primary), ("B", plan.colors.secondary)):
        if role not in plan.field_mapping:
            continue
        values = _values(plan, role)
        values += values[:1]
        ax.plot(angles, values, "o-", linewidth=2, color=color, label=plan.field_mapping[role])
        ax.fill(angles, values, alpha=0.6 if role == "A" else 0.4, color=color)

    ax.set_xticks(angles[:-1])
    ax.set_xticklabels([str(s) for s in subjects], fontsize=9, color=plan.colors.text)
    full_mark = plan.series[0].get("full_mark", 0) if plan.series else 0
    if full_mark > 0:
        ax.set_ylim(0, full_mark)
    ax.legend(loc="upper right", bbox_to_anchor=(1.25, 1.1), fontsize=9)


def _draw_treemap(fig, plan: RenderPlan):
    ax = fig.add_subplot(111)
    items = sorted(
        zip(_labels(plan, "name"), _values(plan, "value")),
        key=lambda item: item[1],
        reverse=True,
    )
    items = [(name, value) for name, value in items if value > 0]

    height = 10.0
    width = height * plan.layout.get("aspect_ratio", 4 / 3)
    total = sum(value for _, value in items)
    palette = plan.colors.palette

    # slice-and-dice along the longer side
    x = 0.0
    for i, (name, value) in enumerate(items):
        w = (value / total) * width
        ax.add_patch(
            plt.Rectangle((x, 0), w, height, facecolor=palette[i % len(palette)], edgecolor="white", linewidth=2)
        )
        if w > 0.8:
            ax.text(x + w / 2, height / 2, f"{name}\n{value:,.0f}", ha="center", va="center", fontsize=8, color="white")
        x += w

    ax.set_xlim(0, width)
    ax.set_ylim(0, height)
    ax.axis("off")


DRAWERS: Dict[ChartKind, Callable] = {
    ChartKind.BAR: _draw_bar,
    ChartKind.HORIZONTAL_BAR: _draw_horizontal_bar,
    ChartKind.LINE: _draw_line,
    ChartKind.PIE: _draw_pie,
    ChartKind.DONUT: _draw_donut,
    ChartKind.AREA_BAR_COMBO: _draw_area_bar_combo,
    ChartKind.TREEMAP: _draw_treemap,
    ChartKind.RADAR: _draw_radar,
}


def draw_chart(plan: RenderPlan) -> Optional[str]:
    """
    Draw a render plan and return a base64-encoded PNG string.
    Returns None if drawing fails.
    """
    logger.debug("Drawing %s chart '%s' with %d points", plan.kind.value, plan.title, len(plan.series))

    style = "darkgrid" if plan.colors.dark else "whitegrid"

    with _DRAW_LOCK, sns.axes_style(style):
        fig = plt.figure(figsize=FIGSIZE, facecolor=plan.colors.background)

        try:
            DRAWERS[plan.kind](fig, plan)
            if plan.title:
                fig.suptitle(plan.title, color=plan.colors.text, fontsize=12, fontweight="bold")

            buffer = io.BytesIO()
            fig.tight_layout()
            fig.savefig(buffer, format="png", facecolor=fig.get_facecolor())
            buffer.seek(0)

            data = buffer.read()
            logger.debug("PNG bytes length: %d", len(data))
            return base64.b64encode(data).decode("utf-8")

        except Exception:
            logger.exception("Failed to draw %s chart '%s'", plan.kind.value, plan.title)
            return None
        finally:
            plt.close(fig)

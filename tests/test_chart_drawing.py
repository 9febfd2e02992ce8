import base64

import matplotlib
import pytest

from models.chart_models import ChartKind
from services.chart_drawing_service import DRAWERS, draw_chart
from services.chart_engine import build_chart

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

ROWS = [
    {"region": "North America", "sales": "1,200.50", "cost": "900", "segment": "Retail"},
    {"region": "South", "sales": "R$800", "cost": "650", "segment": "Online"},
    {"region": "East", "sales": "450", "cost": "300", "segment": "Wholesale"},
    {"region": "West", "sales": "975,5", "cost": "700", "segment": "Partners"},
]

DESCRIPTORS = {
    ChartKind.BAR: {"categoryColumn": "region", "valueColumns": ["sales"]},
    ChartKind.HORIZONTAL_BAR: {"categoryColumn": "region", "valueColumns": ["sales"]},
    ChartKind.LINE: {"categoryColumn": "region", "valueColumns": ["sales"]},
    ChartKind.PIE: {"categoryColumn": "region", "valueColumns": ["sales"]},
    ChartKind.DONUT: {"groupColumn": "segment", "singleValueColumn": "sales"},
    ChartKind.AREA_BAR_COMBO: {"categoryColumn": "region", "valueColumns": ["sales", "cost"]},
    ChartKind.TREEMAP: {"groupColumn": "segment", "singleValueColumn": "sales"},
    ChartKind.RADAR: {"categoryColumn": "region", "valueColumns": ["sales", "cost"]},
}


def test_every_kind_has_a_drawer():
    assert set(DRAWERS) == set(ChartKind)


@pytest.mark.parametrize("kind", list(ChartKind))
@pytest.mark.parametrize("dark_mode", [False, True])
def test_every_kind_draws_a_png(kind, dark_mode):
    plan = build_chart(ROWS, {"kind": kind.value, "title": f"{kind.value} chart", **DESCRIPTORS[kind]}, dark_mode=dark_mode)

    image = draw_chart(plan)

    assert image is not None
    assert base64.b64decode(image).startswith(PNG_SIGNATURE)


def test_single_series_combo_and_radar_draw():
    for kind in ("AREA_BAR_COMBO", "RADAR"):
        plan = build_chart(ROWS, {"kind": kind, "categoryColumn": "region", "valueColumns": ["sales"]})
        assert draw_chart(plan) is not None


def test_drawing_failure_returns_none(monkeypatch):
    plan = build_chart(ROWS, {"kind": "BAR", **DESCRIPTORS[ChartKind.BAR]})

    def broken(fig, plan):
        raise RuntimeError("boom")

    monkeypatch.setitem(DRAWERS, ChartKind.BAR, broken)

    assert draw_chart(plan) is None


@pytest.mark.parametrize("kind", ["PIE", "DONUT"])
def test_negative_wedges_still_draw(kind):
    rows = [{"region": "North", "sales": 120}, {"region": "South", "sales": -40}, {"region": "East", "sales": 60}]
    descriptor = {"kind": kind, "categoryColumn": "region", "valueColumns": ["sales"]}
    if kind == "DONUT":
        descriptor = {"kind": kind, "groupColumn": "region", "singleValueColumn": "sales"}

    assert draw_chart(build_chart(rows, descriptor)) is not None


def test_drawing_leaves_global_style_untouched():
    before = matplotlib.rcParams["axes.facecolor"]

    draw_chart(build_chart(ROWS, {"kind": "BAR", **DESCRIPTORS[ChartKind.BAR]}, dark_mode=True))

    assert matplotlib.rcParams["axes.facecolor"] == before

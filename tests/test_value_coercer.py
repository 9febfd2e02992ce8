import math

import numpy as np
import pytest

from models.chart_models import ChartDescriptor
from services.value_coercer import coerce_number, coerce_rows, looks_numeric, numeric_columns_for


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,200.50", 1200.5),
        ("R$800", 800.0),
        ("12,5%", 12.5),
        ("-42", -42.0),
        ("$ 3.75", 3.75),
        ("1.2.3", 1.2),
        (250, 250.0),
        (np.int64(7), 7.0),
        (2.5, 2.5),
    ],
)
def test_coerce_number_reads_common_cell_formats(raw, expected):
    assert coerce_number(raw) == pytest.approx(expected)


def test_comma_without_period_is_a_decimal_separator():
    # documented ambiguity: "1,200" reads as 1.2
    assert coerce_number("1,200") == pytest.approx(1.2)


@pytest.mark.parametrize("raw", ["abc", "", "-", "--5", None, float("nan"), float("inf"), True, "N/A", 10**400, -(10**400)])
def test_unparseable_values_become_zero(raw):
    assert coerce_number(raw) == 0.0


def test_coercion_is_total_and_finite():
    cells = ["12", "x", None, "1e5", "€ 9,99", -3, float("-inf"), "..", "7-8", {"nested": 1}, 10**400, "9" * 400]
    rows = [{"v": cell} for cell in cells]

    coerced = coerce_rows(rows, ["v"])

    assert len(coerced) == len(rows)
    for row in coerced:
        assert isinstance(row["v"], float)
        assert math.isfinite(row["v"])


def test_coerce_rows_does_not_mutate_input():
    rows = [{"region": "North", "sales": "1,200.50"}]

    coerced = coerce_rows(rows, ["sales"])

    assert rows == [{"region": "North", "sales": "1,200.50"}]
    assert coerced[0] is not rows[0]
    assert coerced[0]["sales"] == pytest.approx(1200.5)


def test_coerce_rows_leaves_absent_keys_absent():
    rows = [{"region": "North"}, {"region": "South", "sales": "5"}]

    coerced = coerce_rows(rows, ["sales"])

    assert "sales" not in coerced[0]
    assert coerced[1]["sales"] == 5.0


def test_coerce_rows_only_touches_numeric_columns():
    rows = [{"region": "100", "sales": "100"}]

    coerced = coerce_rows(rows, ["sales"])

    assert coerced[0]["region"] == "100"


def test_numeric_columns_for_collects_value_roles_in_order():
    descriptor = ChartDescriptor(
        kind="AREA_BAR_COMBO",
        category_column="month",
        value_columns=["revenue", "orders", "revenue"],
        single_value_column="margin",
    )

    assert numeric_columns_for(descriptor) == ["revenue", "orders", "margin"]


@pytest.mark.parametrize("value", ["R$ 1.200,50", "12%", "3", 4.5, "-8"])
def test_looks_numeric_accepts_number_like_cells(value):
    assert looks_numeric(value) is True


@pytest.mark.parametrize("value", ["North", "", None, "Q1 2024 sales", True, 10**400])
def test_looks_numeric_rejects_text(value):
    assert looks_numeric(value) is False

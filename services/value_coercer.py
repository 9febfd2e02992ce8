from typing import Iterable, List, Sequence
import math
import numbers
import re

from models.chart_models import ChartDescriptor, DataRow

_NOT_NUMERIC_CHARS = re.compile(r"[^0-9.\-]+")
# Leading float, the way a lenient parser reads "12.5.1" as 12.5
_LEADING_FLOAT = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
# Optional currency prefix ("$", "R$", "US$"), digits with separators, optional percent sign
_NUMERIC_TEXT = re.compile(r"^(?:[A-Za-z]{0,3}[$€£¥])?\s*-?[\d.,\s]*\d[\d.,\s]*%?$")


def coerce_number(value) -> float:
    """
    Turn a cell value ("R$800", "1,200.50", "12,5%", 42) into a finite float.
    Anything that cannot be read becomes 0.0.
    """
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range
            return 0.0
        return number if math.isfinite(number) else 0.0

    text = str(value)

    # "12,5" style locales: a comma with no period is the decimal separator
    if "," in text and "." not in text:
        text = text.replace(",", ".")

    text = _NOT_NUMERIC_CHARS.sub("", text)

    match = _LEADING_FLOAT.match(text)
    if match is None:
        return 0.0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def looks_numeric(value) -> bool:
    """True for numbers and number-like text such as "R$ 1.200,50" or "12%"."""
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        try:
            return math.isfinite(float(value))
        except OverflowError:
            return False
    if not isinstance(value, str):
        return False
    return _NUMERIC_TEXT.match(value.strip()) is not None


def numeric_columns_for(descriptor: ChartDescriptor) -> List[str]:
    """Every value-role column of the descriptor, in order, without duplicates."""
    names: List[str] = []
    for name in [*descriptor.value_columns, descriptor.single_value_column]:
        if name and name not in names:
            names.append(name)
    return names


def coerce_rows(rows: Sequence[DataRow], numeric_columns: Iterable[str]) -> List[DataRow]:
    """
    Return new rows with every numeric column coerced to a float.
    Rows are never dropped and keys a row does not have are not added.
    """
    numeric_columns = list(numeric_columns)
    coerced: List[DataRow] = []

    for row in rows:
        new_row = dict(row)
        for col in numeric_columns:
            if col in new_row:
                new_row[col] = coerce_number(new_row[col])
        coerced.append(new_row)

    return coerced

from typing import Dict, Any
import pandas as pd
from .dataset_reader_service import get_sheet_df
from .value_coercer import looks_numeric

# Share of non-null text cells that must look numeric for a column to count as numeric
NUMERIC_TEXT_THRESHOLD = 0.7


def infer_column_role(name: str, series: pd.Series) -> str:
    if pd.api.types.is_bool_dtype(series):
        return "categorical"
    if pd.api.types.is_numeric_dtype(series):
        return "numeric"
    if pd.api.types.is_datetime64_any_dtype(series) or any(k in name.lower() for k in ["date", "time"]):
        return "datetime"

    non_null = series.dropna()
    if len(non_null) > 0:
        numeric_share = sum(1 for value in non_null if looks_numeric(value)) / len(non_null)
        if numeric_share >= NUMERIC_TEXT_THRESHOLD:
            return "numeric"

    count = int(series.count())
    unique = int(series.nunique())
    lowered = name.lower()
    if lowered == "id" or lowered.endswith("_id") or lowered.startswith("id_"):
        return "identifier"
    if count == unique:
        return "distinct_categorical"
    return "categorical"


def get_column_profile(session_id: str, sheet_name: str) -> Dict[str, Any]:
    """
    Describe every column of a sheet so a caller can repair a chart descriptor:
    which columns exist and which can feed a value role.
    """
    df = get_sheet_df(session_id, sheet_name)

    columns = []
    for col in df.columns:
        series = df[col]
        name = str(col)
        role = infer_column_role(name, series)

        entry = {
            "name": name,
            "role": role,
            "count": int(series.count()),
            "unique": int(series.nunique()),
            "missing": int(series.isna().sum()),
        }
        if role != "numeric" and series.count() > 0:
            entry["most_frequent"] = str(series.value_counts().idxmax())
        columns.append(entry)

    return {
        "columns": columns,
        "numeric_columns": [c["name"] for c in columns if c["role"] == "numeric"],
        "category_columns": [c["name"] for c in columns if c["role"] in ("categorical", "distinct_categorical", "datetime")],
        "n_rows": int(df.shape[0]),
        "n_cols": int(df.shape[1])
    }

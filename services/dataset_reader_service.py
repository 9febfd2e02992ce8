from typing import Any, Dict, List, Optional
import datetime
import logging
import os

import numpy as np
import pandas as pd

from models.chart_models import DataRow
from models.common_models import SheetInfo

logger = logging.getLogger(__name__)

# In-memory cache of loaded datasets per session: {session_id: {sheet_name: df}}
_DATASET_CACHE: Dict[str, Dict[str, pd.DataFrame]] = {}


def _read_sheets(file_path: str, file_name: Optional[str] = None) -> Dict[str, pd.DataFrame]:
    ext = os.path.splitext(file_path)[1].lower()
    if ext == ".csv":
        # A CSV is one sheet, named after the file the user uploaded
        sheet_name = os.path.splitext(os.path.basename(file_name or file_path))[0] or "data"
        return {sheet_name: pd.read_csv(file_path)}

    with pd.ExcelFile(file_path) as xls:
        return {str(sheet_name): xls.parse(sheet_name) for sheet_name in xls.sheet_names}


def load_dataset_for_session(session_id: str, file_path: str, file_name: Optional[str] = None) -> List[SheetInfo]:
    """
    Read an Excel workbook or CSV file and store per-session sheet dataframes in cache.
    Returns metadata for all sheets.
    Raises ValueError when the file cannot be read or holds no sheets.
    """
    try:
        sheet_dfs = _read_sheets(file_path, file_name)
    except Exception as e:
        # pandas, openpyxl and xlrd each raise their own parse errors
        logger.warning("Could not read %s: %s", file_path, e)
        raise ValueError(f"Could not read '{file_name or os.path.basename(file_path)}' as a spreadsheet: {e}") from e

    if not sheet_dfs:
        raise ValueError("Uploaded file has no sheets.")

    sheet_infos: List[SheetInfo] = []

    for sheet_name, df in sheet_dfs.items():
        sheet_infos.append(
            SheetInfo(
                sheet_name=sheet_name,
                n_rows=int(df.shape[0]),
                n_cols=int(df.shape[1])
            )
        )

    _DATASET_CACHE[session_id] = sheet_dfs
    logger.info("Loaded %d sheet(s) from %s for session %s", len(sheet_infos), file_path, session_id)
    return sheet_infos


def drop_dataset(session_id: str) -> None:
    _DATASET_CACHE.pop(session_id, None)


def get_sheet_df(session_id: str, sheet_name: str) -> pd.DataFrame:
    if session_id not in _DATASET_CACHE:
        raise KeyError("Data not loaded for this session.")
    sheets = _DATASET_CACHE[session_id]
    if sheet_name not in sheets:
        raise KeyError(f"Sheet '{sheet_name}' not found for this session.")
    return sheets[sheet_name]


def to_jsonable(value: Any) -> Any:
    """Convert a pandas/numpy cell into a plain str / int / float / bool / None."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        # list-like cells; pd.isna returns an array for those
        pass
    if isinstance(value, (pd.Timestamp, datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    return value


def df_to_rows(df: pd.DataFrame) -> List[DataRow]:
    """Rows as dicts keyed by column name; blank cells become None."""
    columns = [str(col) for col in df.columns]
    return [
        {col: to_jsonable(value) for col, value in zip(columns, record)}
        for record in df.itertuples(index=False, name=None)
    ]


def get_sheet_rows(session_id: str, sheet_name: str) -> List[DataRow]:
    return df_to_rows(get_sheet_df(session_id, sheet_name))

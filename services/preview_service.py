from typing import Dict, Any
from .dataset_reader_service import df_to_rows, get_sheet_df


def get_preview_rows(session_id: str, sheet_name: str, n_rows: int = 20) -> Dict[str, Any]:
    # Raw cells, before any chart coercion
    df = get_sheet_df(session_id, sheet_name)
    preview_df = df.head(n_rows)
    return {
        "columns": [str(col) for col in preview_df.columns],
        "rows": df_to_rows(preview_df)
    }

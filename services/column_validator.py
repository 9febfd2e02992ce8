from typing import List, Sequence

from models.chart_models import ChartDescriptor, ColumnCheck, DataRow

# Cap on how many real column names a diagnostic carries back to the UI
MAX_AVAILABLE_COLUMNS = 10


def validate_columns(rows: Sequence[DataRow], descriptor: ChartDescriptor) -> ColumnCheck:
    """
    Compare every column the descriptor references against the first row.
    The first row is the schema probe: datasets are column-homogeneous.
    Callers handle the empty-dataset case before calling this.
    """
    first_row = rows[0]
    available: List[str] = [str(key) for key in first_row.keys()]

    missing = [name for name in descriptor.referenced_columns() if name not in first_row]

    return ColumnCheck(missing=missing, available=available[:MAX_AVAILABLE_COLUMNS])

"""
Filing data loader for validation.

Reads a CSV of filings: one row per filing, one column per entered field id,
plus ``expected_<field_id>`` columns holding reference values (from a
prepared return or tax software) and an optional ``expected_risk_level``.
Blank cells are fields the filer never entered.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

EXPECTED_PREFIX = "expected_"
PROFILE_COL = "profile"


def load_filings(
    csv_path: str,
    sample_size: Optional[int] = None,
    random_state: int = 42,
    id_col: str = "filing_id",
) -> pd.DataFrame:
    """
    Load filings from CSV.

    Args:
        csv_path: Path to CSV file
        sample_size: If set, randomly sample this many filings
        random_state: Random seed for reproducible sampling
        id_col: Column identifying each filing

    Returns:
        DataFrame with one row per filing
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Filing data not found: {path}")

    df = pd.read_csv(path)

    if id_col not in df.columns:
        raise ValueError(f"CSV must have a '{id_col}' column")

    if sample_size and sample_size < len(df):
        df = df.sample(n=sample_size, random_state=random_state)

    return df.reset_index(drop=True)


def input_columns(df: pd.DataFrame, id_col: str = "filing_id") -> list:
    """Columns that hold entered field values."""
    skip = {id_col, PROFILE_COL}
    return [
        col for col in df.columns
        if col not in skip and not col.startswith(EXPECTED_PREFIX)
    ]


def expected_fields(df: pd.DataFrame) -> list:
    """Field ids with an expected_ column, excluding the risk level."""
    return [
        col[len(EXPECTED_PREFIX):]
        for col in df.columns
        if col.startswith(EXPECTED_PREFIX) and col != f"{EXPECTED_PREFIX}risk_level"
    ]


def row_to_values(row: pd.Series, columns: list) -> Dict[str, Any]:
    """Convert a filing row to a field value map, dropping blank cells."""
    values = {}
    for col in columns:
        value = row[col]
        if value is None or (isinstance(value, float) and np.isnan(value)):
            continue
        if isinstance(value, np.generic):
            value = value.item()
        values[col] = value
    return values

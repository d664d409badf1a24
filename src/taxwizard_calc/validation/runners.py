"""
Runners for validation: execute the engine on filing data.

Each filing row becomes a value map; every bound field is resolved and the
SSDI checks run for the row's profile.
"""

from typing import Mapping, Optional

import pandas as pd
import structlog
from tqdm import tqdm

from ..constants import TaxConstants
from ..registry import DEFAULT_FIELD_CALCULATIONS, compute_derived_fields
from ..ssdi import check_ssdi_safeguards
from .loader import EXPECTED_PREFIX, PROFILE_COL, input_columns, row_to_values

logger = structlog.get_logger(__name__)

CALC_PREFIX = "calc_"


def run_engine(
    df: pd.DataFrame,
    constants: Optional[TaxConstants] = None,
    field_calculations: Optional[Mapping[str, str]] = None,
    id_col: str = "filing_id",
    show_progress: bool = True,
) -> pd.DataFrame:
    """
    Run the calculation engine on filing data.

    Args:
        df: DataFrame of filings (from load_filings)
        constants: Constants table for the tax year
        field_calculations: Field -> calculation bindings
        id_col: Column identifying each filing
        show_progress: Show progress bar

    Returns:
        DataFrame with id_col, calc_<field_id> per bound field, and
        calc_risk_level
    """
    bindings = field_calculations or DEFAULT_FIELD_CALCULATIONS
    columns = input_columns(df, id_col)
    results = []
    iterator = (
        tqdm(df.iterrows(), total=len(df), desc="taxwizard")
        if show_progress
        else df.iterrows()
    )

    for _, row in iterator:
        values = row_to_values(row, columns)
        fields = compute_derived_fields(values, constants, bindings)
        profile = row.get(PROFILE_COL) if PROFILE_COL in df.columns else None
        risk = check_ssdi_safeguards(values, profile, constants)

        record = {id_col: row[id_col]}
        record.update({f"{CALC_PREFIX}{field_id}": value for field_id, value in fields.items()})
        record[f"{CALC_PREFIX}risk_level"] = risk.risk_level.value
        results.append(record)

    logger.info("engine_run", filings=len(results))
    return pd.DataFrame(results)


def run_both(
    df: pd.DataFrame,
    constants: Optional[TaxConstants] = None,
    id_col: str = "filing_id",
    show_progress: bool = True,
) -> pd.DataFrame:
    """
    Run the engine and join its output to the expected columns.

    Returns:
        DataFrame with id_col, calc_* and expected_* columns
    """
    calculated = run_engine(df, constants, id_col=id_col, show_progress=show_progress)
    expected_cols = [col for col in df.columns if col.startswith(EXPECTED_PREFIX)]
    expected = df[[id_col] + expected_cols]
    return calculated.merge(expected, on=id_col, how="left")

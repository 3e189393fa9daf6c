"""Helper functions for column detection in chart data."""

from __future__ import annotations

import pandas as pd

_NUMERIC_KINDS = {"i", "u", "f"}  # int, unsigned, float (pandas dtype.kind)


def numeric_columns(df: pd.DataFrame) -> list[str]:
    """Extract list of numeric column names from dataframe.

    Args:
        df: DataFrame to analyze.

    Returns:
        List of column names that are numeric (int, unsigned, float).
    """
    out: list[str] = []
    for c in df.columns:
        s = df[c]
        if getattr(s.dtype, "kind", None) in _NUMERIC_KINDS:
            out.append(str(c))
    return out


def categorical_candidates(df: pd.DataFrame) -> list[str]:
    """Heuristic: object/category/bool, or low-ish cardinality.

    Identifies columns that are good candidates for coloring 3D scatter
    markers by group:
    - Object, category, or boolean dtype columns
    - Numeric columns with low cardinality (<= 20 or <= 5% of rows)

    Args:
        df: DataFrame to analyze.

    Returns:
        List of column names that are categorical candidates.
    """
    out: list[str] = []
    n = len(df)
    for c in df.columns:
        s = df[c]
        kind = getattr(s.dtype, "kind", None)
        if kind in {"O", "b"} or str(s.dtype) == "category":
            out.append(str(c))
            continue
        nunique = s.nunique(dropna=True)
        if n > 0 and nunique <= max(20, int(0.05 * n)):
            out.append(str(c))
    return out


def default_axis_columns(df: pd.DataFrame) -> tuple[str, str, str]:
    """Pick default x, y and z columns from the numeric columns of df.

    Missing positions repeat the last available numeric column.

    Raises:
        ValueError: If df has no numeric column.
    """
    num_cols = numeric_columns(df)
    if not num_cols:
        raise ValueError("Need at least one numeric column for x/y.")
    x_default = num_cols[0]
    y_default = num_cols[1] if len(num_cols) >= 2 else num_cols[0]
    z_default = num_cols[2] if len(num_cols) >= 3 else y_default
    return x_default, y_default, z_default

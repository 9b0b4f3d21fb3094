"""Input-shape and domain-value checks shared by all components.

Each ``require_*`` check raises ValidationError naming the offending
variable; each ``warn_*`` check records a WARNING on the given log and
returns the number of affected rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from ostrc.models.questionnaire import InstrumentVersion
from ostrc.validation.diagnostics import (
    E_ALL_MISSING,
    E_CI_LEVEL,
    E_LENGTH_MISMATCH,
    E_MISSING_COLUMN,
    E_NOT_NUMERIC,
    E_OUT_OF_DOMAIN,
    E_UNKNOWN_VERSION,
    DiagnosticCategory,
    DiagnosticLog,
    fail,
)


def as_series(values: object, name: str) -> pd.Series:
    """Coerce a list, array or Series of responses to a pandas Series.

    A vector holding nothing but missing values is returned as float64 so
    that it passes the numeric check and fails the all-missing check instead.
    Other object vectors get their dtype inferred, so numbers mixed with
    ``pd.NA`` become nullable numeric while strings stay non-numeric.
    """
    series = values if isinstance(values, pd.Series) else pd.Series(values, name=name)
    if series.dtype == object:
        if series.isna().all():
            return series.astype("float64")
        return series.convert_dtypes()
    return series


def to_float(series: pd.Series) -> pd.Series:
    """Convert a numeric (possibly nullable) Series to float64 with NaN for missing."""
    return series.astype("float64")


def require_columns(df: pd.DataFrame, columns: Iterable[str | None]) -> None:
    """Check that every named column exists in the response table."""
    missing = [c for c in columns if c is not None and c not in df.columns]
    if missing:
        fail(
            E_MISSING_COLUMN,
            DiagnosticCategory.MISSING,
            f"Missing required columns: {missing}",
            variable=missing[0],
        )


def require_numeric(series: pd.Series, name: str) -> None:
    """Check that a vector is numeric (booleans and strings are rejected)."""
    if is_bool_dtype(series) or not is_numeric_dtype(series):
        fail(
            E_NOT_NUMERIC,
            DiagnosticCategory.TYPE,
            f"Variable {name} is not numeric or integer. "
            f"Make sure {name} is of class numeric or integer.",
            variable=name,
            affected_count=len(series),
        )


def require_not_all_missing(series: pd.Series, name: str) -> None:
    """Check that a vector has at least one non-missing value."""
    if series.isna().all():
        fail(
            E_ALL_MISSING,
            DiagnosticCategory.MISSING,
            f"Variable {name} has only missing (NA) observations.",
            variable=name,
            affected_count=len(series),
        )


def require_values_in(
    series: pd.Series,
    name: str,
    allowed: Iterable[float],
    *,
    fix_suggestion: str | None = None,
) -> None:
    """Check that every non-missing value of a vector is in the allowed set."""
    allowed_set = set(allowed)
    present = series.dropna()
    bad = present[~present.isin(allowed_set)]
    if not bad.empty:
        allowed_str = ", ".join(_format_code(v) for v in sorted(allowed_set))
        fail(
            E_OUT_OF_DOMAIN,
            DiagnosticCategory.DOMAIN,
            f"Variable {name} has values outside the accepted codes "
            f"({allowed_str}, NA): {sorted(bad.unique().tolist())}.",
            variable=name,
            affected_count=len(bad),
            fix_suggestion=fix_suggestion,
        )


def require_same_length(vectors: dict[str, pd.Series]) -> None:
    """Check that parallel question vectors have equal length."""
    lengths = {name: len(v) for name, v in vectors.items()}
    if len(set(lengths.values())) > 1:
        fail(
            E_LENGTH_MISMATCH,
            DiagnosticCategory.CARDINALITY,
            f"Input vectors must have the same length, got {lengths}",
            variable=next(iter(lengths)),
        )


def require_ci_level(ci_level: float) -> None:
    """Check that a confidence level lies strictly between 0 and 1."""
    if not 0.0 < ci_level < 1.0:
        fail(
            E_CI_LEVEL,
            DiagnosticCategory.CONFIGURATION,
            f"ci_level must be between 0 and 1 (exclusive), got {ci_level}",
            variable="ci_level",
        )


def require_version(version: str | InstrumentVersion) -> InstrumentVersion:
    """Parse an instrument version string, failing on unknown versions."""
    try:
        return InstrumentVersion(str(version))
    except ValueError:
        valid = ", ".join(f"'{v.value}'" for v in InstrumentVersion)
        fail(
            E_UNKNOWN_VERSION,
            DiagnosticCategory.CONFIGURATION,
            f"Unknown OSTRC version '{version}'. Must be one of: {valid}",
            variable="version",
        )


def warn_if_missing(
    mask: pd.Series,
    log: DiagnosticLog,
    code: str,
    message: str,
    *,
    variable: str | None = None,
    category: DiagnosticCategory = DiagnosticCategory.MISSING,
) -> int:
    """Record a warning when any row of ``mask`` is True."""
    n_affected = int(mask.sum())
    if n_affected:
        log.warn(code, category, message, variable=variable, affected_count=n_affected)
    return n_affected


def distinct_non_missing(series: pd.Series) -> Sequence[object]:
    """Return the distinct non-missing values of a vector, in order of appearance."""
    return series.dropna().unique().tolist()


def _format_code(value: float) -> str:
    """Render 8.0 as '8' for messages."""
    return str(int(value)) if float(value).is_integer() else str(value)

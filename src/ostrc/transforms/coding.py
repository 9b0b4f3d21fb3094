"""Response classifier: code normalization and health problem indicators.

OSTRC answers are conventionally coded 0, 8, 17, 25 for replies 1-4.
Exports often use other codings (1-4, 0-3); these are detected and mapped
to the standard codes by rank before any classification.

All functions are deterministic and never modify their inputs.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from ostrc.models.questionnaire import RECOGNIZED_NONZERO_CODES, STANDARD_CODES
from ostrc.validation.checks import as_series, distinct_non_missing, require_numeric, to_float
from ostrc.validation.diagnostics import (
    E_ALREADY_STANDARD,
    E_CODE_CARDINALITY,
    W_NO_PROBLEMS,
    W_NONSTANDARD_CODES,
    DiagnosticCategory,
    DiagnosticLog,
    fail,
    resolve_log,
)


def has_nonstandard_codes(values: pd.Series) -> bool:
    """Return True if any non-missing, non-zero code is outside the recognized set."""
    nonzero = values[values.notna() & (values != 0)]
    return not nonzero.isin(RECOGNIZED_NONZERO_CODES).all()


def normalize_codes(values: object, name: str = "ostrc_q") -> pd.Series:
    """Map a four-level coding onto the standard 0, 8, 17, 25 codes.

    The four distinct non-missing values are sorted ascending and assigned
    0, 8, 17 and 25 in that order, so any rank-consistent coding (1-4,
    0-3, ...) is accepted. Missing values pass through.

    Args:
        values: Responses to a four-level OSTRC question (all of version
            2.0, or question 1 / 4 of version 1.0).
        name: Variable name used in error messages.

    Returns:
        Int64 Series with codes 0, 8, 17, 25 or <NA>, indexed like the input.

    Raises:
        ValidationError: If the input is not numeric, is already coded with
            recognized OSTRC codes, or does not have exactly four distinct
            non-missing values.

    Examples:
        >>> normalize_codes([0, 1, 2, 3, 2, 2, 3]).tolist()
        [0, 8, 17, 25, 17, 17, 25]
    """
    series = as_series(values, name)
    require_numeric(series, name)
    codes = to_float(series)

    if not has_nonstandard_codes(codes):
        fail(
            E_ALREADY_STANDARD,
            DiagnosticCategory.CODING,
            f"All the values of {name} are already coded as 0, 8, 17 or 25, "
            "or 0, 13, 17, 19, 25.",
            variable=name,
        )

    distinct = distinct_non_missing(codes)
    if len(distinct) > 4:
        fail(
            E_CODE_CARDINALITY,
            DiagnosticCategory.CARDINALITY,
            f"{name} has {len(distinct)} distinct codes, more than the 4 possible responses. "
            "Only version 2.0 questions and version 1.0 questions 1 and 4 can be normalized.",
            variable=name,
            fix_suggestion="Convert missing data coded as a number to NA.",
        )
    if len(distinct) < 4:
        fail(
            E_CODE_CARDINALITY,
            DiagnosticCategory.CARDINALITY,
            f"{name} has {len(distinct)} distinct codes, fewer than the 4 possible responses. "
            "Perhaps no participant gave a certain reply?",
            variable=name,
            fix_suggestion="Convert the vector to 0, 8, 17, 25 manually.",
        )

    rank_map = dict(zip(sorted(distinct), STANDARD_CODES, strict=True))
    return codes.map(rank_map).astype("Int64")


def standardize_if_needed(
    codes: pd.Series,
    name: str,
    log: DiagnosticLog,
    purpose: str,
) -> pd.Series:
    """Normalize a float vector with non-standard codes and record a warning.

    Returns the (possibly normalized) codes as float64.
    """
    if not has_nonstandard_codes(codes):
        return codes
    normalized = to_float(normalize_codes(codes, name))
    log.warn(
        W_NONSTANDARD_CODES,
        DiagnosticCategory.CODING,
        f"{name} had non-standard values (not in 0, 8, 17, 25 or 0, 13, 17, 19, 25). "
        f"Lowest value was assumed 0, highest value assumed 25, before {purpose}.",
        variable=name,
        affected_count=int(codes.notna().sum()),
    )
    return normalized


def classify_problem(
    values: object,
    diagnostics: DiagnosticLog | None = None,
    name: str = "ostrc_1",
) -> pd.Series:
    """Flag health problems from question 1 responses.

    Any reply other than "Full participation without health problems"
    (code 0) is a health problem.

    Args:
        values: Responses to OSTRC question 1.
        diagnostics: Log receiving advisory findings.
        name: Variable name used in messages.

    Returns:
        Int64 Series: 1 = health problem, 0 = no health problem, <NA> = missing.

    Raises:
        ValidationError: If the input is not numeric, or has a non-standard
            coding that cannot be normalized.
    """
    log = resolve_log(diagnostics)
    series = as_series(values, name)
    require_numeric(series, name)

    codes = standardize_if_needed(to_float(series), name, log, "finding health problems")

    if ((codes == 0) | codes.isna()).all():
        log.warn(
            W_NO_PROBLEMS,
            DiagnosticCategory.CODING,
            f"All of the responses to {name} are 0 or missing (NA), "
            "meaning no health problems were found.",
            variable=name,
            affected_count=len(codes),
        )

    indicator = np.where(codes.isna(), np.nan, (codes > 0).astype("float64"))
    return pd.Series(indicator, index=series.index, name=series.name).astype("Int64")

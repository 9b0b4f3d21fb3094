"""OSTRC severity score.

The severity score is the sum of the four question codes (0-100), as in
the OSTRC validation paper (doi.org/10.1136/bjsports-2012-091524).
"""

from __future__ import annotations

import pandas as pd

from ostrc.models.questionnaire import SEVERITY_CODES
from ostrc.validation.checks import (
    as_series,
    require_numeric,
    require_same_length,
    require_values_in,
    to_float,
)


def severity_score(
    q1: object,
    q2: object,
    q3: object,
    q4: object,
    names: tuple[str, str, str, str] = ("ostrc_1", "ostrc_2", "ostrc_3", "ostrc_4"),
) -> pd.Series:
    """Sum the four OSTRC question codes into a severity score.

    Args:
        q1: Responses to question 1.
        q2: Responses to question 2.
        q3: Responses to question 3.
        q4: Responses to question 4.
        names: Variable names used in error messages.

    Returns:
        Int64 Series indexed like ``q1``. A missing answer on any question
        gives a missing score.

    Raises:
        ValidationError: If any value is not one of 0, 6, 8, 13, 17, 19, 25
            or missing; the message names the offending variable.

    Examples:
        >>> severity_score([17, 8, 8, 0], [25, 17, 17, 0], [25, 8, 17, 0], [25, 8, 0, 0]).tolist()
        [92, 41, 42, 0]
    """
    vectors = {
        name: as_series(v, name) for name, v in zip(names, (q1, q2, q3, q4), strict=True)
    }
    require_same_length(vectors)

    columns: list[pd.Series] = []
    for name, series in vectors.items():
        require_numeric(series, name)
        codes = to_float(series)
        require_values_in(
            codes,
            name,
            SEVERITY_CODES,
            fix_suggestion="If responses use another coding, consider normalize_codes().",
        )
        columns.append(codes.reset_index(drop=True))

    total = columns[0] + columns[1] + columns[2] + columns[3]
    total.index = vectors[names[0]].index
    return total.astype("Int64")

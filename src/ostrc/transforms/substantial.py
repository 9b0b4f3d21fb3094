"""Substantial health problem classification.

Follows the OSTRC definition (doi.org/10.1136/bjsports-2012-091524):
a substantial health problem is one that reduced training volume or
performance to a moderate extent or worse, or prevented participation.

Version 2.0:
    Q1 "Could not participate" (25) is always substantial. Otherwise a
    reply of "moderate" or "major" (>= 17) on Q2 or Q3 is substantial.

Version 1.0:
    A reply of >= 13 on Q2 or Q3 is substantial, regardless of Q1.

Comparisons with missing values never match, so rows whose outcome
depends on a missing answer come out missing.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from loguru import logger

from ostrc.models.questionnaire import (
    FULL_TIMELOSS_CODE,
    V1_SUBSTANTIAL_THRESHOLD,
    V2_SUBSTANTIAL_THRESHOLD,
    InstrumentVersion,
)
from ostrc.transforms.coding import standardize_if_needed
from ostrc.validation.checks import (
    as_series,
    require_numeric,
    require_same_length,
    require_version,
    to_float,
)
from ostrc.validation.diagnostics import (
    E_ALL_MISSING,
    W_ITEM_LOGIC,
    DiagnosticCategory,
    DiagnosticLog,
    fail,
    resolve_log,
)


def _classify_v2(q1: np.ndarray, q2: np.ndarray, q3: np.ndarray) -> np.ndarray:
    q1_partial = (q1 == 8) | (q1 == 17)
    q1_missing = np.isnan(q1)
    high = (q2 >= V2_SUBSTANTIAL_THRESHOLD) | (q3 >= V2_SUBSTANTIAL_THRESHOLD)
    low = (q2 < V2_SUBSTANTIAL_THRESHOLD) & (q3 < V2_SUBSTANTIAL_THRESHOLD)
    conditions = [
        q1 == 0,
        q1 == FULL_TIMELOSS_CODE,
        (q1_partial | q1_missing) & high,
        q1_partial & low,
    ]
    return np.select(conditions, [np.nan, 1.0, 1.0, 0.0], default=np.nan)


def _classify_v1(q1: np.ndarray, q2: np.ndarray, q3: np.ndarray) -> np.ndarray:
    conditions = [
        q1 == 0,
        (q2 >= V1_SUBSTANTIAL_THRESHOLD) | (q3 >= V1_SUBSTANTIAL_THRESHOLD),
        (q2 < V1_SUBSTANTIAL_THRESHOLD) & (q3 < V1_SUBSTANTIAL_THRESHOLD),
    ]
    return np.select(conditions, [np.nan, 1.0, 0.0], default=np.nan)


def _item_logic_breaches(q1: np.ndarray, q2: np.ndarray, q3: np.ndarray) -> int:
    """Count rows reporting full participation on Q1 but reduced training on Q2/Q3."""
    return int(np.sum((q1 <= 8) & ((q2 >= 8) | (q3 == FULL_TIMELOSS_CODE))))


def classify_substantial(
    q1: object,
    q2: object,
    q3: object,
    version: str | InstrumentVersion = InstrumentVersion.V2,
    diagnostics: DiagnosticLog | None = None,
    names: tuple[str, str, str] = ("ostrc_1", "ostrc_2", "ostrc_3"),
) -> pd.Series:
    """Flag substantial health problems from OSTRC questions 1-3.

    Args:
        q1: Responses to question 1 (participation).
        q2: Responses to question 2 (modified training / reduced volume).
        q3: Responses to question 3 (performance).
        version: OSTRC questionnaire version, "2.0" (default) or "1.0".
        diagnostics: Log receiving advisory findings.
        names: Variable names used in messages.

    Returns:
        Int64 Series indexed like ``q1``: 1 = substantial, 0 = not
        substantial, <NA> = no health problem or undetermined.

    Raises:
        ValidationError: On an unknown version, non-numeric input, vectors of
            different lengths, all three vectors entirely missing, or a
            non-standard coding that cannot be normalized.

    Examples:
        >>> classify_substantial([8, 8, 8, 8], [0, 0, 0, 25], [0, 0, 17, 0]).tolist()
        [0, 0, 1, 1]
    """
    log = resolve_log(diagnostics)
    parsed_version = require_version(version)

    vectors = {name: as_series(v, name) for name, v in zip(names, (q1, q2, q3), strict=True)}
    for name, series in vectors.items():
        require_numeric(series, name)
    require_same_length(vectors)

    if all(series.isna().all() for series in vectors.values()):
        fail(
            E_ALL_MISSING,
            DiagnosticCategory.MISSING,
            "All input vectors consist of only missing values",
            variable=names[0],
            affected_count=len(vectors[names[0]]),
        )

    codes = [
        standardize_if_needed(to_float(series), name, log, "finding substantial health problems")
        for name, series in vectors.items()
    ]
    a1, a2, a3 = (c.to_numpy(dtype="float64") for c in codes)

    if parsed_version == InstrumentVersion.V2:
        result = _classify_v2(a1, a2, a3)
    else:
        n_breaches = _item_logic_breaches(a1, a2, a3)
        if n_breaches:
            log.warn(
                W_ITEM_LOGIC,
                DiagnosticCategory.ITEM_LOGIC,
                "Breach in item logic. At least one response to OSTRC question 1 indicates "
                "no reduced participation, while a response to question 2 or 3 "
                "indicates the opposite.",
                variable=names[0],
                affected_count=n_breaches,
            )
        result = _classify_v1(a1, a2, a3)

    logger.debug(
        "Classified {} responses (version {}): {} substantial",
        len(result),
        parsed_version.value,
        int(np.nansum(result)),
    )
    index = vectors[names[0]].index
    return pd.Series(result, index=index).astype("Int64")

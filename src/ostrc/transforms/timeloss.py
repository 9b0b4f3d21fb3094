"""Time-loss per health problem case.

Time-loss is the number of questionnaire responses within a case where
question 1 was answered "Could not participate due to health problems"
(code 25). With weekly questionnaires this is the number of weeks lost.
"""

from __future__ import annotations

import pandas as pd

from ostrc.models.incidence import TIMELOSS
from ostrc.models.questionnaire import FULL_TIMELOSS_CODE
from ostrc.validation.checks import require_columns, require_numeric, to_float
from ostrc.validation.diagnostics import (
    E_MISSING_CASE_ID,
    W_CASE_ID_WITHOUT_PROBLEM,
    DiagnosticCategory,
    DiagnosticLog,
    fail,
    resolve_log,
)


def require_case_ids(
    responses: pd.DataFrame,
    problem_mask: pd.Series,
    case_key: str,
) -> None:
    """Fail if any health problem row lacks a case identifier."""
    unassigned = problem_mask & responses[case_key].isna()
    if unassigned.any():
        fail(
            E_MISSING_CASE_ID,
            DiagnosticCategory.CASE_ID,
            "Health problems were detected that did not have a case ID.",
            variable=case_key,
            affected_count=int(unassigned.sum()),
            fix_suggestion=(
                f"Assign a {case_key} to every response where a health problem was reported."
            ),
        )


def warn_case_ids_without_problem(
    not_problem_mask: pd.Series,
    case_key: str,
    q1_key: str,
    log: DiagnosticLog,
) -> None:
    """Warn about rows that carry a case ID but report no health problem."""
    if not_problem_mask.any():
        log.warn(
            W_CASE_ID_WITHOUT_PROBLEM,
            DiagnosticCategory.CASE_ID,
            "One or more questionnaire responses have a case ID but a response of 0 "
            f"on {q1_key}, meaning no health problem. These are removed from the calculations.",
            variable=case_key,
            affected_count=int(not_problem_mask.sum()),
        )


def count_timeloss(q1_codes: pd.Series) -> int:
    """Count the "could not participate" responses in one case."""
    return int((q1_codes == FULL_TIMELOSS_CODE).sum())


def case_timeloss(
    responses: pd.DataFrame,
    participant_key: str,
    case_key: str,
    q1_key: str,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate time-loss for every health problem case.

    Rows sharing a (participant, case) pair are the same health problem
    followed over time. Rows with a case ID but a question 1 answer of 0
    are not health problems and are left out.

    Args:
        responses: Response table, one row per questionnaire response.
        participant_key: Participant identifier column.
        case_key: Case identifier column.
        q1_key: Question 1 column.
        diagnostics: Log receiving advisory findings.

    Returns:
        DataFrame with columns [participant_key, case_key, "timeloss"], one
        row per case in order of first appearance.

    Raises:
        ValidationError: If a column is missing, question 1 is not numeric,
            or a health problem row has no case ID.
    """
    log = resolve_log(diagnostics)
    require_columns(responses, [participant_key, case_key, q1_key])
    require_numeric(responses[q1_key], q1_key)

    q1 = to_float(responses[q1_key])
    require_case_ids(responses, q1 > 0, case_key)

    has_case = responses[case_key].notna()
    warn_case_ids_without_problem(has_case & (q1 == 0), case_key, q1_key, log)

    in_case = has_case & (q1 > 0)
    case_rows = responses.loc[in_case, [participant_key, case_key]].assign(_q1=q1[in_case])
    result = (
        case_rows.groupby([participant_key, case_key], sort=False, dropna=False)["_q1"]
        .agg(count_timeloss)
        .rename(TIMELOSS)
        .reset_index()
    )
    result[TIMELOSS] = result[TIMELOSS].astype("int64")
    return result

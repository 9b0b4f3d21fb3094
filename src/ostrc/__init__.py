"""Epidemiological metrics from longitudinal OSTRC questionnaire data.

    from ostrc import build_cases, incidence_all, DiagnosticLog
"""

from ostrc.epidemiology import (
    build_cases,
    incidence_all,
    incidence_per_period,
    incidence_summary,
    prevalence_all,
    prevalence_per_period,
    prevalence_summary,
)
from ostrc.transforms import (
    case_timeloss,
    classify_problem,
    classify_substantial,
    normalize_codes,
    severity_score,
)
from ostrc.validation import DiagnosticLog, ValidationError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DiagnosticLog",
    "ValidationError",
    "normalize_codes",
    "classify_problem",
    "classify_substantial",
    "severity_score",
    "case_timeloss",
    "build_cases",
    "incidence_per_period",
    "incidence_summary",
    "incidence_all",
    "prevalence_per_period",
    "prevalence_summary",
    "prevalence_all",
]

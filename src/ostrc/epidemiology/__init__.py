"""Case construction and per-period incidence / prevalence.

Re-exports:
    from ostrc.epidemiology import build_cases
    from ostrc.epidemiology import incidence_per_period, incidence_summary, incidence_all
    from ostrc.epidemiology import prevalence_per_period, prevalence_summary, prevalence_all
"""

from ostrc.epidemiology.cases import build_cases
from ostrc.epidemiology.incidence import (
    incidence_all,
    incidence_per_period,
    incidence_summary,
    summarize_incidence,
)
from ostrc.epidemiology.prevalence import (
    prevalence_all,
    prevalence_per_period,
    prevalence_summary,
    summarize_prevalence,
)

__all__ = [
    # cases
    "build_cases",
    # incidence
    "incidence_per_period",
    "incidence_summary",
    "incidence_all",
    "summarize_incidence",
    # prevalence
    "prevalence_per_period",
    "prevalence_summary",
    "prevalence_all",
    "summarize_prevalence",
]

"""Pydantic data models and constants shared across ostrc components.

Re-exported for convenient imports:
    from ostrc.models import InstrumentVersion, ColumnRoles, IncidenceSummary
"""

from ostrc.models.incidence import (
    DEFAULT_CI_LEVEL,
    IncidenceSummary,
    PeriodSummary,
    PrevalenceSummary,
)
from ostrc.models.metadata import DatasetMetadata, VariableMetadata
from ostrc.models.questionnaire import (
    DEFAULT_VERSION,
    RECOGNIZED_NONZERO_CODES,
    SEVERITY_CODES,
    STANDARD_CODES,
    V1_Q23_CODES,
    ColumnRoles,
    InstrumentVersion,
)

__all__ = [
    # questionnaire
    "InstrumentVersion",
    "DEFAULT_VERSION",
    "STANDARD_CODES",
    "V1_Q23_CODES",
    "RECOGNIZED_NONZERO_CODES",
    "SEVERITY_CODES",
    "ColumnRoles",
    # incidence
    "DEFAULT_CI_LEVEL",
    "PeriodSummary",
    "IncidenceSummary",
    "PrevalenceSummary",
    # metadata
    "VariableMetadata",
    "DatasetMetadata",
]

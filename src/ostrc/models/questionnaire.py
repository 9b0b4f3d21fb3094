"""OSTRC instrument code sets and column-role models.

The OSTRC questionnaire has four questions. Version 2.0 codes every answer
as 0, 8, 17 or 25; version 1.0 uses 0, 13, 17, 19, 25 on questions 2 and 3.
Severity scores accept the union of both code sets (plus 6).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class InstrumentVersion(StrEnum):
    """OSTRC questionnaire version.

    V1: original OSTRC-O (2013), five-level questions 2 and 3.
    V2: revised OSTRC-O2/H2, four levels on every question.
    """

    V1 = "1.0"
    V2 = "2.0"


DEFAULT_VERSION = InstrumentVersion.V2

# Version 2.0 codes for replies 1..4 on any question.
STANDARD_CODES: tuple[float, ...] = (0, 8, 17, 25)

# Version 1.0 codes on questions 2 and 3.
V1_Q23_CODES: frozenset[float] = frozenset({0, 13, 17, 19, 25})

# Non-zero codes that mark a vector as already using a recognized coding.
RECOGNIZED_NONZERO_CODES: frozenset[float] = (frozenset(STANDARD_CODES) | V1_Q23_CODES) - {0}

# Every code a severity score may be summed from.
SEVERITY_CODES: frozenset[float] = frozenset(STANDARD_CODES) | V1_Q23_CODES | {6}

# Question 1 reply "Could not participate due to health problems".
FULL_TIMELOSS_CODE = 25

# Substantiality thresholds on questions 2 and 3.
V2_SUBSTANTIAL_THRESHOLD = 17
V1_SUBSTANTIAL_THRESHOLD = 13


class ColumnRoles(BaseModel):
    """Names of the columns that play each role in a response table.

    Only the roles needed by a given operation have to be set; the case
    builder needs all of them, the incidence engine only participant and
    period.
    """

    participant: str = Field(..., description="Participant / athlete identifier column")
    period: str | None = Field(default=None, description="Time period column (week, date)")
    case: str | None = Field(default=None, description="Health problem case identifier column")
    date: str | None = Field(default=None, description="Questionnaire date column")
    q1: str | None = Field(default=None, description="Question 1 (participation) column")
    q2: str | None = Field(default=None, description="Question 2 (modified training) column")
    q3: str | None = Field(default=None, description="Question 3 (performance) column")
    q4: str | None = Field(default=None, description="Question 4 (symptoms) column")

    def questions(self) -> list[str | None]:
        """Return the four question column names in order."""
        return [self.q1, self.q2, self.q3, self.q4]

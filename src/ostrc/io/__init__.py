"""Questionnaire export reader (CSV, Excel via openpyxl, SAS via pyreadstat)."""

from ostrc.io.reader import SUPPORTED_SUFFIXES, read_responses

__all__ = [
    "read_responses",
    "SUPPORTED_SUFFIXES",
]

"""Metadata models for loaded questionnaire exports."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class VariableMetadata(BaseModel):
    """Metadata for a single column of a questionnaire export."""

    name: str = Field(..., description="Column name as stored in the file")
    label: str = Field(default="", description="Variable label, if the format carries one")
    dtype: Literal["numeric", "character", "date"] = Field(
        ..., description="Column type after loading"
    )
    n_missing: int = Field(default=0, ge=0, description="Number of missing values")


class DatasetMetadata(BaseModel):
    """Structural information about a loaded questionnaire export."""

    filename: str = Field(..., description="Source filename (e.g., 'ostrc_2023.csv')")
    row_count: int = Field(..., ge=0, description="Number of responses")
    col_count: int = Field(..., ge=0, description="Number of columns")
    variables: list[VariableMetadata] = Field(
        default_factory=list, description="Ordered list of column metadata"
    )
    file_encoding: str | None = Field(default=None, description="Character encoding of the file")

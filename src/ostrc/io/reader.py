"""Questionnaire export reader with metadata extraction.

Reads OSTRC response exports from CSV, Excel (openpyxl) or SAS .sas7bdat
files (pyreadstat) into a DataFrame plus a DatasetMetadata describing each
column. SAS date formats are converted to pandas datetimes on read;
CSV date columns must be named explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Literal

import pandas as pd
import pyreadstat
from loguru import logger
from pandas.api.types import is_datetime64_any_dtype, is_numeric_dtype

from ostrc.models.metadata import DatasetMetadata, VariableMetadata

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".sas7bdat")


def _column_dtype(values: pd.Series) -> Literal["numeric", "character", "date"]:
    if is_datetime64_any_dtype(values):
        return "date"
    if is_numeric_dtype(values) and not values.dtype == bool:
        return "numeric"
    return "character"


def _read_csv(filepath: Path) -> tuple[pd.DataFrame, dict[str, str], str | None]:
    df = pd.read_csv(filepath)
    return df, {}, None


def _read_excel(filepath: Path) -> tuple[pd.DataFrame, dict[str, str], str | None]:
    df = pd.read_excel(filepath, engine="openpyxl")
    return df, {}, None


def _read_sas(filepath: Path) -> tuple[pd.DataFrame, dict[str, str], str | None]:
    df, meta = pyreadstat.read_sas7bdat(str(filepath), dates_as_pandas_datetime=True)
    labels = {
        name: label for name, label in meta.column_names_to_labels.items() if label
    }
    return df, labels, meta.file_encoding


def read_responses(
    filepath: str | Path,
    date_columns: Sequence[str] | None = None,
) -> tuple[pd.DataFrame, DatasetMetadata]:
    """Read a questionnaire export, returning a DataFrame and its metadata.

    Args:
        filepath: Path to a .csv, .xlsx or .sas7bdat file.
        date_columns: Columns to parse as dates. Columns the file already
            stores as dates are left as they are.

    Returns:
        Tuple of (DataFrame with one row per response, DatasetMetadata).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file type is not supported, a date column is
            absent, or a date column cannot be parsed.
        pyreadstat.ReadstatError: If a .sas7bdat file cannot be read.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Response file not found: {filepath}")

    suffix = filepath.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported file type {filepath.suffix!r}; expected one of "
            f"{', '.join(SUPPORTED_SUFFIXES)}"
        )

    logger.info("Reading responses: {}", filepath.name)
    if suffix == ".csv":
        df, labels, encoding = _read_csv(filepath)
    elif suffix == ".xlsx":
        df, labels, encoding = _read_excel(filepath)
    else:
        df, labels, encoding = _read_sas(filepath)

    for col in date_columns or ():
        if col not in df.columns:
            raise ValueError(f"Date column {col!r} not found in {filepath.name}")
        if is_datetime64_any_dtype(df[col]):
            continue
        try:
            df[col] = pd.to_datetime(df[col])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Column {col!r} in {filepath.name} is not a date: {exc}") from exc

    variables = [
        VariableMetadata(
            name=str(col),
            label=labels.get(col, ""),
            dtype=_column_dtype(df[col]),
            n_missing=int(df[col].isna().sum()),
        )
        for col in df.columns
    ]
    dataset_meta = DatasetMetadata(
        filename=filepath.name,
        row_count=len(df),
        col_count=len(df.columns),
        variables=variables,
        file_encoding=encoding,
    )

    logger.info(
        "Read {}: {} rows x {} cols",
        filepath.name,
        dataset_meta.row_count,
        dataset_meta.col_count,
    )
    return df, dataset_meta

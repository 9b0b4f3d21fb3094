"""Tests for substantial health problem classification."""

from __future__ import annotations

import pandas as pd
import pytest

from ostrc.transforms.substantial import classify_substantial
from ostrc.validation.diagnostics import (
    E_ALL_MISSING,
    E_LENGTH_MISMATCH,
    E_UNKNOWN_VERSION,
    W_ITEM_LOGIC,
    W_NONSTANDARD_CODES,
    DiagnosticLog,
    ValidationError,
)


def _as_list(result: pd.Series) -> list[object]:
    return [None if pd.isna(v) else int(v) for v in result]


class TestVersion2:
    def test_reference_example(self) -> None:
        result = classify_substantial([8, 8, 8, 8], [0, 0, 0, 25], [0, 0, 17, 0])
        assert result.tolist() == [0, 0, 1, 1]

    def test_no_problem_is_missing(self) -> None:
        result = classify_substantial([0, 8], [0, 0], [0, 0])
        assert _as_list(result) == [None, 0]

    def test_could_not_participate_is_substantial(self) -> None:
        result = classify_substantial([25, 25], [0, None], [0, None])
        assert _as_list(result) == [1, 1]

    def test_moderate_reduction_is_substantial(self) -> None:
        result = classify_substantial([17, 8], [17, 8], [0, 25])
        assert _as_list(result) == [1, 1]

    def test_missing_q1_with_high_q2_is_substantial(self) -> None:
        result = classify_substantial([None, 8], [25, 8], [0, 8])
        assert _as_list(result) == [1, 0]

    def test_missing_q2_low_q3_is_undetermined(self) -> None:
        result = classify_substantial([8, 8], [None, 8], [8, 8])
        assert _as_list(result) == [None, 0]

    def test_returns_int64_indexed_like_q1(self) -> None:
        q1 = pd.Series([8, 25], index=[5, 6])
        result = classify_substantial(q1, [0, 0], [0, 0])
        assert str(result.dtype) == "Int64"
        assert result.index.tolist() == [5, 6]

    def test_nonstandard_coding_is_normalized(self) -> None:
        log = DiagnosticLog()
        result = classify_substantial([1, 2, 3, 4], [1, 2, 3, 4], [0, 0, 0, 0], diagnostics=log)
        # q1 and q2 become 0, 8, 17, 25
        assert _as_list(result) == [None, 0, 1, 1]
        assert log.has(W_NONSTANDARD_CODES)


class TestVersion1:
    def test_threshold_is_13(self) -> None:
        result = classify_substantial([8, 8, 8], [13, 0, 0], [0, 0, 19], version="1.0")
        assert _as_list(result) == [1, 0, 1]

    def test_q1_not_needed_when_problem_reported(self) -> None:
        result = classify_substantial([25, None], [0, 17], [0, 0], version="1.0")
        assert _as_list(result) == [0, 1]

    def test_item_logic_breach_warns(self) -> None:
        log = DiagnosticLog()
        classify_substantial([8, 17], [13, 0], [0, 0], version="1.0", diagnostics=log)
        assert log.has(W_ITEM_LOGIC)

    def test_consistent_responses_do_not_warn(self) -> None:
        log = DiagnosticLog()
        classify_substantial([17, 25], [13, 17], [0, 0], version="1.0", diagnostics=log)
        assert not log.has(W_ITEM_LOGIC)


class TestErrors:
    def test_unknown_version(self) -> None:
        with pytest.raises(ValidationError, match="Unknown OSTRC version") as exc_info:
            classify_substantial([8], [8], [8], version="3.0")
        assert exc_info.value.code == E_UNKNOWN_VERSION

    def test_all_missing(self) -> None:
        with pytest.raises(ValidationError, match="only missing") as exc_info:
            classify_substantial([None, None], [None, None], [None, None])
        assert exc_info.value.code == E_ALL_MISSING

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            classify_substantial([8, 8], [8], [8, 8])
        assert exc_info.value.code == E_LENGTH_MISMATCH

    def test_non_numeric(self) -> None:
        with pytest.raises(ValidationError, match="ostrc_2"):
            classify_substantial([8], ["high"], [8])


class TestPurity:
    def test_repeated_calls_agree(self) -> None:
        args = ([8, 17, 25, None], [0, 17, 0, 25], [8, 0, 0, 0])
        pd.testing.assert_series_equal(classify_substantial(*args), classify_substantial(*args))

"""Unit tests for the DataFrame assertions module."""

from __future__ import annotations

import pandas as pd  # type: ignore[import-untyped]
import pandera.errors
import pytest

from bracket_pool.utils.assertions import assert_columns, assert_unique

# ---------------------------------------------------------------------------
# assert_columns
# ---------------------------------------------------------------------------


@pytest.mark.smoke
class TestAssertColumns:
    """Tests for `assert_columns`."""

    def test_all_present_passes(self) -> None:
        df = pd.DataFrame({"game_id": ["East-r64-1"], "winner_id": ["east-1"], "extra": [1]})
        assert_columns(df, ["game_id", "winner_id"])

    def test_empty_required_passes(self) -> None:
        assert_columns(pd.DataFrame(), [])

    def test_missing_column_raises(self) -> None:
        df = pd.DataFrame({"game_id": ["East-r64-1"]})
        with pytest.raises(pandera.errors.SchemaError, match="winner_id"):
            assert_columns(df, ["game_id", "winner_id"])


# ---------------------------------------------------------------------------
# assert_unique
# ---------------------------------------------------------------------------


class TestAssertUnique:
    """Tests for `assert_unique`."""

    def test_unique_passes(self) -> None:
        assert_unique(pd.DataFrame({"game_id": ["East-r64-1", "East-r64-2"]}), "game_id")

    def test_duplicates_raise(self) -> None:
        df = pd.DataFrame({"game_id": ["East-r64-1", "East-r64-1"]})
        with pytest.raises(pandera.errors.SchemaError):
            assert_unique(df, "game_id")

    def test_missing_column_raises(self) -> None:
        with pytest.raises(pandera.errors.SchemaError):
            assert_unique(pd.DataFrame({"other": [1]}), "game_id")

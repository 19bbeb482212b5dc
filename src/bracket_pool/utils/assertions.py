"""DataFrame validation helpers backed by Pandera.

Used by the results loader to check CSV feeds before they are turned into
a ``{game_id: winner_id}`` mapping.  Every helper delegates to Pandera and
propagates `pandera.errors.SchemaError` on failure.

Usage:
    >>> import pandas as pd
    >>> from bracket_pool.utils.assertions import assert_columns, assert_unique
    >>> df = pd.DataFrame({"game_id": ["East-r64-1"], "winner_id": ["duke"]})
    >>> assert_columns(df, ["game_id", "winner_id"])
    >>> assert_unique(df, "game_id")
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd  # type: ignore[import-untyped]
import pandera.pandas as pa


def assert_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    """Validate that all required columns exist in the DataFrame.

    Raises:
        pa.errors.SchemaError: If any required columns are missing.
    """
    if not required:
        return
    pa.DataFrameSchema(
        {col: pa.Column(required=True) for col in required},
        strict=False,
    ).validate(df)


def assert_unique(df: pd.DataFrame, column: str) -> None:
    """Validate that *column* holds no duplicate values.

    Raises:
        pa.errors.SchemaError: If duplicates are found or the column is missing.
    """
    pa.DataFrameSchema(
        {column: pa.Column(unique=True)},
        strict=False,
    ).validate(df)

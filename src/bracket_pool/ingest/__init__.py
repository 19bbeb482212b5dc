"""Data ingestion module: schemas, bracket-record storage, and loaders."""

from __future__ import annotations

from bracket_pool.ingest.repository import (
    BracketNotFoundError,
    BracketRepository,
    DataFormatError,
    InvalidBracketIdError,
    JsonBracketRepository,
    load_results,
    load_tournament_data,
)
from bracket_pool.ingest.schema import (
    BRACKET_ID_PATTERN,
    BracketRecord,
    BracketStatus,
    RegionPosition,
    Team,
    TournamentData,
    TournamentRegion,
)

__all__ = [
    "BRACKET_ID_PATTERN",
    "BracketNotFoundError",
    "BracketRecord",
    "BracketRepository",
    "BracketStatus",
    "DataFormatError",
    "InvalidBracketIdError",
    "JsonBracketRepository",
    "RegionPosition",
    "Team",
    "TournamentData",
    "TournamentRegion",
    "load_results",
    "load_tournament_data",
]

"""Repository pattern for bracket records, plus tournament and results loaders.

Defines an abstract ``BracketRepository`` interface and a concrete
``JsonBracketRepository`` backed by one JSON file per record.  The engine
never touches storage: callers load a :class:`BracketRecord`, hand its
``picks`` to the engine, and save the result back.
"""

from __future__ import annotations

import abc
import datetime
import json
import re
from pathlib import Path

import pandas as pd  # type: ignore[import-untyped]
import pandera.errors
from pydantic import ValidationError

from bracket_pool.ingest.schema import BRACKET_ID_PATTERN, BracketRecord, TournamentData
from bracket_pool.utils.assertions import assert_columns, assert_unique
from bracket_pool.utils.logger import VERBOSE, get_logger

logger = get_logger(__name__)

_BRACKET_ID_RE = re.compile(BRACKET_ID_PATTERN)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BracketNotFoundError(KeyError):
    """Raised when a requested bracket record does not exist."""


class DataFormatError(ValueError):
    """Raw data (JSON / CSV) does not match the expected schema."""


class InvalidBracketIdError(ValueError):
    """A bracket id that cannot be used as a record file name."""


# ---------------------------------------------------------------------------
# Abstract Repository
# ---------------------------------------------------------------------------


class BracketRepository(abc.ABC):
    """Abstract base class for bracket record persistence."""

    @abc.abstractmethod
    def get(self, bracket_id: str) -> BracketRecord:
        """Return the record with *bracket_id*.

        Raises:
            BracketNotFoundError: If no such record exists.
        """

    @abc.abstractmethod
    def save(self, record: BracketRecord) -> BracketRecord:
        """Persist *record* (overwrite) and return the stored version."""

    @abc.abstractmethod
    def list(self) -> list[BracketRecord]:
        """Return all stored records, ordered by id."""

    @abc.abstractmethod
    def delete(self, bracket_id: str) -> None:
        """Remove the record with *bracket_id*; missing records are ignored."""


# ---------------------------------------------------------------------------
# JSON Repository
# ---------------------------------------------------------------------------


class JsonBracketRepository(BracketRepository):
    """Bracket repository backed by JSON files.

    Directory layout::

        {base_path}/
            brackets/
                {bracket_id}.json

    Bracket ids must match ``BRACKET_ID_PATTERN`` so that every record stays
    inside ``brackets/``.
    """

    def __init__(self, base_path: Path) -> None:
        self._brackets_dir = base_path / "brackets"

    def _path(self, bracket_id: str) -> Path:
        if not _BRACKET_ID_RE.fullmatch(bracket_id):
            msg = f"Invalid bracket id {bracket_id!r}: use letters, digits, '.', '_' or '-'"
            raise InvalidBracketIdError(msg)
        return self._brackets_dir / f"{bracket_id}.json"

    @staticmethod
    def _read(path: Path) -> BracketRecord:
        try:
            return BracketRecord.model_validate_json(path.read_text())
        except ValidationError as exc:
            msg = f"Corrupt bracket record {path}: {exc}"
            raise DataFormatError(msg) from exc

    def get(self, bracket_id: str) -> BracketRecord:
        path = self._path(bracket_id)
        if not path.exists():
            msg = f"No bracket record with id {bracket_id!r} under {self._brackets_dir}"
            raise BracketNotFoundError(msg)
        return self._read(path)

    def save(self, record: BracketRecord) -> BracketRecord:
        path = self._path(record.id)
        stored = record.model_copy(update={"last_saved": datetime.datetime.now(datetime.timezone.utc)})
        self._brackets_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(stored.model_dump_json(indent=2, by_alias=True))
        logger.log(VERBOSE, "Saved bracket %s (%d picks, %s)", stored.id, len(stored.picks), stored.status)
        return stored

    def list(self) -> list[BracketRecord]:
        if not self._brackets_dir.exists():
            return []
        return [self._read(path) for path in sorted(self._brackets_dir.glob("*.json"))]

    def delete(self, bracket_id: str) -> None:
        self._path(bracket_id).unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------

_RESULT_COLUMNS: tuple[str, ...] = ("game_id", "winner_id")


def load_tournament_data(path: Path) -> TournamentData:
    """Load and validate tournament data from a JSON file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        DataFormatError: If the file is not valid tournament data.
    """
    if not path.exists():
        msg = f"Tournament file not found: {path}"
        raise FileNotFoundError(msg)
    try:
        return TournamentData.model_validate_json(path.read_text())
    except ValidationError as exc:
        msg = f"Invalid tournament data in {path}: {exc}"
        raise DataFormatError(msg) from exc


def _load_results_csv(path: Path) -> dict[str, str]:
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        msg = f"Unreadable results CSV {path}: {exc}"
        raise DataFormatError(msg) from exc
    try:
        assert_columns(df, _RESULT_COLUMNS)
        assert_unique(df, "game_id")
    except pandera.errors.SchemaError as exc:
        msg = f"Invalid results CSV {path}: {exc}"
        raise DataFormatError(msg) from exc
    df = df[df["winner_id"].str.strip() != ""]
    return {str(row.game_id).strip(): str(row.winner_id).strip() for row in df.itertuples(index=False)}


def _load_results_json(path: Path) -> dict[str, str]:
    try:
        raw = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        msg = f"Unreadable results JSON {path}: {exc}"
        raise DataFormatError(msg) from exc
    if not isinstance(raw, dict) or not all(isinstance(k, str) and isinstance(v, str | None) for k, v in raw.items()):
        msg = f"Results JSON {path} must be an object mapping game id to winning team id"
        raise DataFormatError(msg)
    return {k: v for k, v in raw.items() if v}


def load_results(path: Path) -> dict[str, str]:
    """Load actual results (``{game_id: winner_id}``) from JSON or CSV.

    CSV files need ``game_id`` and ``winner_id`` columns; rows with a blank
    winner (unplayed games) are skipped.

    Raises:
        FileNotFoundError: If *path* does not exist.
        DataFormatError: If the file does not match the expected shape.
    """
    if not path.exists():
        msg = f"Results file not found: {path}"
        raise FileNotFoundError(msg)
    results = _load_results_csv(path) if path.suffix.lower() == ".csv" else _load_results_json(path)
    logger.info("Loaded %d result(s) from %s", len(results), path)
    return results

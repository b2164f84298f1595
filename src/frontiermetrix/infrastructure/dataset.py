"""Dataset loading from JSON seed files.

A data directory holds two JSON arrays: asset signals and asset flows.
Load-level problems (missing file, unreadable JSON, wrong top-level shape)
raise a :class:`DatasetError` subclass and abort the attempt. Record-level
problems drop only that record and are reported as warnings.

INVARIANT: One malformed record never aborts the rest of the file.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from frontiermetrix.domain.models import AssetFlow, AssetSignal

logger = logging.getLogger(__name__)

SIGNALS_FILENAME = "seed_assets.json"
FLOWS_FILENAME = "seed_flows.json"

_TIMESTAMP_FIELDS = {"ts", "timestamp"}

_EntityT = TypeVar("_EntityT", AssetSignal, AssetFlow)


class DatasetError(Exception):
    """Base class for load-level dataset failures."""

    code = "DATASET_ERROR"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class SourceNotFoundError(DatasetError):
    """A seed file does not exist."""

    code = "SOURCE_NOT_FOUND"


class DatasetDecodeError(DatasetError):
    """A seed file is not a JSON array."""

    code = "DECODE_ERROR"


@dataclass(frozen=True)
class Dataset:
    """Decoded entities plus one warning per dropped record."""

    signals: tuple[AssetSignal, ...] = ()
    flows: tuple[AssetFlow, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Record decoding
# ---------------------------------------------------------------------------


def _describe_failure(exc: ValidationError) -> str:
    errors = exc.errors()
    if any(err["loc"] and err["loc"][0] in _TIMESTAMP_FIELDS for err in errors):
        return "invalid timestamp"
    fields = sorted({str(err["loc"][0]) for err in errors if err["loc"]})
    return f"invalid fields: {', '.join(fields)}" if fields else "invalid record"


def _decode_records(
    records: Iterable[Any],
    model: type[_EntityT],
    label: str,
) -> tuple[list[_EntityT], list[str]]:
    entities: list[_EntityT] = []
    warnings: list[str] = []
    seen: set[str] = set()

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            warnings.append(f"{label}[{index}]: dropped, record is not an object")
            continue
        try:
            entity = model.model_validate(record)
        except ValidationError as exc:
            record_id = record.get("id", "?")
            warnings.append(f"{label}[{index}] ({record_id}): dropped, {_describe_failure(exc)}")
            continue
        if entity.id in seen:
            warnings.append(f"{label}[{index}] ({entity.id}): dropped, duplicate id")
            continue
        seen.add(entity.id)
        entities.append(entity)

    if warnings:
        logger.warning("Dropped %d of %s records", len(warnings), label)
    return entities, warnings


def decode_signals(records: Iterable[Any]) -> tuple[list[AssetSignal], list[str]]:
    """Decode signal records, returning ``(signals, warnings)``."""
    return _decode_records(records, AssetSignal, "signals")


def decode_flows(records: Iterable[Any]) -> tuple[list[AssetFlow], list[str]]:
    """Decode flow records, returning ``(flows, warnings)``."""
    return _decode_records(records, AssetFlow, "flows")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def _read_array(path: Path) -> list[Any]:
    if not path.is_file():
        raise SourceNotFoundError(f"Could not find data file: {path.name}", path=path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetDecodeError(f"Failed to decode data: {exc}", path=path) from exc
    if not isinstance(raw, list):
        raise DatasetDecodeError(
            f"Failed to decode data: {path.name} must contain a JSON array",
            path=path,
        )
    return raw


class DatasetLoader:
    """Read the signal and flow seed files from *data_dir*."""

    def __init__(
        self,
        data_dir: Path,
        *,
        signals_file: str = SIGNALS_FILENAME,
        flows_file: str = FLOWS_FILENAME,
    ) -> None:
        self.data_dir = data_dir
        self.signals_path = data_dir / signals_file
        self.flows_path = data_dir / flows_file

    def read(self) -> Dataset:
        """Load both files synchronously. Raises :class:`DatasetError`."""
        signal_records = _read_array(self.signals_path)
        flow_records = _read_array(self.flows_path)

        signals, signal_warnings = decode_signals(signal_records)
        flows, flow_warnings = decode_flows(flow_records)

        logger.debug(
            "Loaded %d signals and %d flows from %s",
            len(signals),
            len(flows),
            self.data_dir,
        )
        return Dataset(
            signals=tuple(signals),
            flows=tuple(flows),
            warnings=tuple(signal_warnings + flow_warnings),
        )

    async def load(self) -> Dataset:
        """Load without blocking the event loop."""
        return await asyncio.to_thread(self.read)


def dump_records(entities: Iterable[BaseModel]) -> list[dict[str, Any]]:
    """Serialize entities back to their record form (aliased keys, ISO timestamps)."""
    return [entity.model_dump(mode="json", by_alias=True) for entity in entities]

"""Archive format for guild campaign saves.

A save is a zip archive holding two members: a small metadata document,
read on its own when listing saves, and the full campaign snapshot.
"""

from __future__ import annotations

import json
import os
import tempfile
import zipfile
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from guildhall.domain import models as dm
from guildhall.domain.enums import SeasonPhase

CAMPAIGN_ADAPTER: TypeAdapter[dm.Campaign] = TypeAdapter(dm.Campaign)

FORMAT_VERSION = 1
METADATA_PATH = "guildhall/metadata.json"
CAMPAIGN_PATH = "guildhall/campaign.json"


class SaveError(RuntimeError):
    """Base class for persistence failures."""


class SaveNotFoundError(SaveError):
    pass


class CorruptSaveError(SaveError):
    """The archive or one of its members could not be decoded."""


class SaveWriteError(SaveError):
    """The filesystem refused to store an archive."""


class IncompatibleSaveError(SaveError):
    """The archive was written with a different format version."""

    def __init__(self, found: int, expected: int = FORMAT_VERSION) -> None:
        super().__init__(f"save format version {found} is not supported (expected {expected})")
        self.found = found
        self.expected = expected


class SaveMetadata(BaseModel):
    """Summary stored beside the snapshot for cheap listing."""

    name: str
    saved_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    format_version: int = FORMAT_VERSION
    campaign_name: str
    guild_name: str
    season: int
    month: int
    week: int
    season_phase: SeasonPhase
    treasury: int
    roster_size: int
    active_quests: int


def build_metadata(name: str, campaign: dm.Campaign) -> SaveMetadata:
    state, guild = campaign.state, campaign.guild
    return SaveMetadata(
        name=name,
        campaign_name=state.campaign_name,
        guild_name=guild.name,
        season=state.current_season,
        month=state.current_month,
        week=state.current_week,
        season_phase=state.season_phase,
        treasury=guild.finances.treasury,
        roster_size=len(guild.roster_ids),
        active_quests=len(state.active_quests),
    )


def write_save(path: Path | str, metadata: SaveMetadata, campaign: dm.Campaign) -> Path:
    """Write an archive atomically; an existing file is replaced wholesale.

    Raises:
        SaveWriteError: If the filesystem refuses the write; no partial
            archive or temp file is left behind
    """

    target = Path(path)
    metadata_payload = json.dumps(metadata.model_dump(mode="json"), indent=2, sort_keys=True)
    campaign_payload = CAMPAIGN_ADAPTER.dump_json(campaign, indent=2)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        os.close(handle)
    except OSError as exc:
        raise SaveWriteError(f"cannot write to {target.parent}: {exc}") from exc
    try:
        with zipfile.ZipFile(temp_name, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(METADATA_PATH, metadata_payload.encode("utf-8"))
            archive.writestr(CAMPAIGN_PATH, campaign_payload)
        os.replace(temp_name, target)
    except OSError as exc:
        Path(temp_name).unlink(missing_ok=True)
        raise SaveWriteError(f"cannot write {target.name}: {exc}") from exc
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return target


def _read_member(path: Path, member: str) -> bytes:
    if not path.exists():
        raise SaveNotFoundError(f"no save at {path}")
    try:
        with zipfile.ZipFile(path, "r") as archive:
            return archive.read(member)
    except KeyError as exc:
        raise CorruptSaveError(f"{member} missing from {path.name}") from exc
    except (zipfile.BadZipFile, OSError) as exc:
        raise CorruptSaveError(f"{path.name} is not a readable save archive") from exc


def read_metadata(path: Path | str) -> SaveMetadata:
    """Read only the metadata member of an archive."""

    target = Path(path)
    raw = _read_member(target, METADATA_PATH)
    try:
        metadata = SaveMetadata.model_validate_json(raw)
    except ValidationError as exc:
        raise CorruptSaveError(f"metadata in {target.name} is invalid") from exc
    if metadata.format_version != FORMAT_VERSION:
        raise IncompatibleSaveError(metadata.format_version)
    return metadata


def read_save(path: Path | str) -> tuple[SaveMetadata, dm.Campaign]:
    """Decode a full archive, checking the format version first."""

    target = Path(path)
    metadata = read_metadata(target)
    raw = _read_member(target, CAMPAIGN_PATH)
    try:
        campaign = CAMPAIGN_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise CorruptSaveError(f"campaign snapshot in {target.name} is invalid") from exc
    return metadata, campaign

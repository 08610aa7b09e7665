"""Named save slots stored as archives on disk."""

from __future__ import annotations

import logging
from pathlib import Path

from guildhall import savegame
from guildhall.domain import models as dm
from guildhall.savegame import SaveError, SaveMetadata, SaveNotFoundError

logger = logging.getLogger(__name__)

SAVE_SUFFIX = ".guildsave"


class InvalidSaveNameError(SaveError, ValueError):
    pass


def normalize_save_name(name: str) -> str:
    """Turn a display name into a slot name; spaces become underscores."""

    slug = name.strip().replace(" ", "_")
    if not slug:
        raise InvalidSaveNameError("save name cannot be empty")
    if "/" in slug or "\\" in slug or slug in {".", ".."} or slug.startswith("."):
        raise InvalidSaveNameError(f"invalid save name: {name!r}")
    return slug


class SaveSlotRepository:
    """Persist campaigns as named archives under ``base_path``."""

    def __init__(self, base_path: Path, *, quicksave_name: str = "quicksave") -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.quicksave_name = normalize_save_name(quicksave_name)

    def _path_for(self, name: str) -> Path:
        return self.base_path / f"{normalize_save_name(name)}{SAVE_SUFFIX}"

    def save(
        self,
        name: str,
        state: dm.GameState,
        guild: dm.Guild,
        parties: dict[dm.QuestID, dm.QuestParty],
    ) -> SaveMetadata:
        """Snapshot the campaign under ``name``, replacing any previous save."""

        slug = normalize_save_name(name)
        campaign = dm.Campaign(state=state, guild=guild, parties=parties)
        metadata = savegame.build_metadata(slug, campaign)
        path = savegame.write_save(self._path_for(slug), metadata, campaign)
        logger.info("saved campaign %r to %s", state.campaign_name, path)
        return metadata

    def save_campaign(self, name: str, campaign: dm.Campaign) -> SaveMetadata:
        return self.save(name, campaign.state, campaign.guild, campaign.parties)

    def load(self, name: str) -> dm.Campaign:
        """Decode the save stored under ``name``."""

        _, campaign = savegame.read_save(self._path_for(name))
        return campaign

    def quick_save(self, campaign: dm.Campaign) -> SaveMetadata:
        return self.save_campaign(self.quicksave_name, campaign)

    def quick_load(self) -> dm.Campaign:
        return self.load(self.quicksave_name)

    def exists(self, name: str) -> bool:
        return self._path_for(name).exists()

    def list_saved_games(self) -> list[SaveMetadata]:
        """Return metadata for every readable save, newest first."""

        saves: list[SaveMetadata] = []
        for path in self.base_path.glob(f"*{SAVE_SUFFIX}"):
            try:
                saves.append(savegame.read_metadata(path))
            except SaveError as exc:
                logger.warning("skipping unreadable save %s: %s", path.name, exc)
        return sorted(saves, key=lambda metadata: metadata.saved_at, reverse=True)

    def delete_save(self, name: str) -> None:
        path = self._path_for(name)
        if not path.exists():
            raise SaveNotFoundError(f"no save named {name!r}")
        path.unlink()
        logger.info("deleted save %s", path.name)

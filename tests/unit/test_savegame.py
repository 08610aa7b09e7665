"""Tests for the save archive format."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest

from guildhall import savegame
from guildhall.domain import models as dm
from guildhall.domain import quests, setup, tick
from guildhall.domain.enums import (
    AdventurerLevel,
    ItemCategory,
    ItemRarity,
    QuestStakes,
    QuestType,
    StaffRole,
)


def _post(campaign: dm.Campaign, name: str) -> dm.QuestID:
    quest = dm.Quest(
        id=campaign.state.store.allocate_quest_id(),
        name=name,
        quest_type=QuestType.COMBAT,
        stakes=QuestStakes.LOW,
        minimum_party_size=2,
        maximum_party_size=4,
        recommended_level=AdventurerLevel.APPRENTICE,
        base_gold_reward=120,
        experience_reward=12,
    )
    quests.post_quests(campaign.state, [quest])
    return quest.id


def _send_party(campaign: dm.Campaign, quest_id: dm.QuestID) -> None:
    idle = [
        aid for aid in campaign.guild.roster_ids if campaign.state.store.adventurer(aid).is_available
    ]
    quests.accept_quest(campaign, quest_id, dm.QuestParty(adventurer_ids=idle[:2]))


def _played_campaign() -> dm.Campaign:
    campaign = setup.new_campaign("Border Marches", "Iron Wolves", seed=21, roster_size=12)
    for week in range(3):
        _send_party(campaign, _post(campaign, f"Clear the Old Mill {week}"))
        tick.advance_week(campaign)
    # one quest left in flight so the snapshot carries a party
    _send_party(campaign, _post(campaign, "Guard the Ford"))
    return campaign


def test_round_trip_preserves_every_field(tmp_path: Path):
    campaign = _played_campaign()
    assert campaign.state.completed_quests and campaign.parties
    assert campaign.state.free_agents
    campaign.guild.inventory.append(
        dm.Item(
            id=campaign.state.store.allocate_item_id(),
            name="Runed Circlet",
            category=ItemCategory.ACCESSORY,
            rarity=ItemRarity.RARE,
            value=300,
            source_quest_id=campaign.state.completed_quests[0],
        )
    )
    campaign.guild.staff.append(
        dm.StaffMember(campaign.state.store.allocate_staff_id(), "Hale", StaffRole.HEALER, 150)
    )

    metadata = savegame.build_metadata("slot", campaign)
    path = savegame.write_save(tmp_path / "slot.guildsave", metadata, campaign)
    loaded_metadata, loaded = savegame.read_save(path)

    assert loaded == campaign
    assert loaded_metadata == metadata
    assert isinstance(next(iter(loaded.state.store.adventurers)), int)


def test_metadata_summarises_campaign():
    campaign = _played_campaign()
    metadata = savegame.build_metadata("slot", campaign)
    assert metadata.campaign_name == "Border Marches"
    assert metadata.guild_name == "Iron Wolves"
    assert metadata.week == campaign.state.current_week
    assert metadata.treasury == campaign.guild.finances.treasury
    assert metadata.format_version == savegame.FORMAT_VERSION


def test_metadata_readable_without_campaign_member(tmp_path: Path):
    campaign = _played_campaign()
    metadata = savegame.build_metadata("slot", campaign)
    path = tmp_path / "slot.guildsave"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(savegame.METADATA_PATH, metadata.model_dump_json())

    assert savegame.read_metadata(path) == metadata
    with pytest.raises(savegame.CorruptSaveError):
        savegame.read_save(path)


def test_missing_file_raises_not_found(tmp_path: Path):
    with pytest.raises(savegame.SaveNotFoundError):
        savegame.read_save(tmp_path / "absent.guildsave")


def test_garbage_file_is_corrupt(tmp_path: Path):
    path = tmp_path / "junk.guildsave"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(savegame.CorruptSaveError) as excinfo:
        savegame.read_save(path)
    assert excinfo.value.__cause__ is not None


def test_malformed_snapshot_is_corrupt(tmp_path: Path):
    campaign = _played_campaign()
    metadata = savegame.build_metadata("slot", campaign)
    path = tmp_path / "slot.guildsave"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(savegame.METADATA_PATH, metadata.model_dump_json())
        archive.writestr(savegame.CAMPAIGN_PATH, "{\"state\": 5}")
    with pytest.raises(savegame.CorruptSaveError):
        savegame.read_save(path)


def test_future_format_is_incompatible(tmp_path: Path):
    campaign = _played_campaign()
    payload = json.loads(savegame.build_metadata("slot", campaign).model_dump_json())
    payload["format_version"] = savegame.FORMAT_VERSION + 1
    path = tmp_path / "slot.guildsave"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(savegame.METADATA_PATH, json.dumps(payload))
        archive.writestr(savegame.CAMPAIGN_PATH, savegame.CAMPAIGN_ADAPTER.dump_json(campaign))

    with pytest.raises(savegame.IncompatibleSaveError) as excinfo:
        savegame.read_save(path)
    assert excinfo.value.found == savegame.FORMAT_VERSION + 1


def test_write_replaces_existing_archive(tmp_path: Path):
    first = setup.new_campaign("First", "Iron Wolves", seed=1)
    second = setup.new_campaign("Second", "Iron Wolves", seed=2)
    path = tmp_path / "slot.guildsave"
    savegame.write_save(path, savegame.build_metadata("slot", first), first)
    savegame.write_save(path, savegame.build_metadata("slot", second), second)

    _, loaded = savegame.read_save(path)
    assert loaded.state.campaign_name == "Second"
    assert [p.name for p in tmp_path.iterdir()] == ["slot.guildsave"]


def test_write_over_a_directory_raises_save_error_and_cleans_up(tmp_path: Path):
    campaign = setup.new_campaign("Blocked", "Iron Wolves", seed=4)
    blocker = tmp_path / "slot.guildsave"
    blocker.mkdir()
    (blocker / "keep.txt").write_text("occupied")

    with pytest.raises(savegame.SaveWriteError) as excinfo:
        savegame.write_save(blocker, savegame.build_metadata("slot", campaign), campaign)

    assert isinstance(excinfo.value, savegame.SaveError)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["slot.guildsave"]
    assert [p.name for p in blocker.iterdir()] == ["keep.txt"]

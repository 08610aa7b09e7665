"""Exception hierarchy raised by the rules layer.

Validation errors are raised before any mutation, so a caller that catches
one can rely on the campaign being exactly as it was.
"""

from __future__ import annotations


class GuildError(RuntimeError):
    """Base class for rule violations in the guild simulation."""


class EntityNotFoundError(GuildError, KeyError):
    """Lookup of an identifier absent from the entity store."""

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id

    def __str__(self) -> str:
        return str(self.args[0])


class QuestAcceptanceError(GuildError):
    """Party or quest failed acceptance validation."""


class QuestNotAvailableError(QuestAcceptanceError):
    pass


class PartyTooSmallError(QuestAcceptanceError):
    pass


class PartyTooLargeError(QuestAcceptanceError):
    pass


class DuplicateMemberError(QuestAcceptanceError):
    pass


class MemberUnavailableError(QuestAcceptanceError):
    """Member is off the roster, not healthy, injured or already deployed."""

    def __init__(self, adventurer_id: int, reason: str) -> None:
        super().__init__(f"adventurer {adventurer_id} unavailable: {reason}")
        self.adventurer_id = adventurer_id
        self.reason = reason


class RequirementsNotMetError(QuestAcceptanceError):
    """Guild reputation or tier below the quest's gate."""


class QuestCancellationError(GuildError):
    """In-progress quests cannot be cancelled."""


class QuestAlreadyResolvedError(GuildError):
    """Results were already applied to this quest."""


class RosterFullError(GuildError):
    pass


class NotAFreeAgentError(GuildError):
    """Only adventurers in the free-agent pool can be hired."""


class AdventurerDeployedError(GuildError):
    """The adventurer is out with an active quest party."""

    def __init__(self, adventurer_id: int, quest_id: int) -> None:
        super().__init__(f"adventurer {adventurer_id} is deployed on quest {quest_id}")
        self.adventurer_id = adventurer_id
        self.quest_id = quest_id


class InsufficientFundsError(GuildError):
    """The treasury cannot cover an up-front cost."""

    def __init__(self, cost: int, treasury: int) -> None:
        super().__init__(f"costs {cost} gold but the treasury holds {treasury}")
        self.cost = cost
        self.treasury = treasury


class FacilityMaxedError(GuildError):
    pass


class StaffRoleFilledError(GuildError):
    """The guild already employs someone in a role that allows only one."""

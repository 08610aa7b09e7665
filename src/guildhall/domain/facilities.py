"""Guild facilities and staff: upgrades, maintenance and payroll changes.

Every operation here charges the treasury up front, so each one checks
funds before touching the guild and raises :class:`InsufficientFundsError`
when the treasury falls short.
"""

from __future__ import annotations

from guildhall.utils.rng import Sampler

from . import finances
from .enums import EventType, FacilityType, StaffRole, TransactionCategory
from .errors import (
    EntityNotFoundError,
    FacilityMaxedError,
    InsufficientFundsError,
    StaffRoleFilledError,
)
from .events import record_event
from .models import Campaign, Facility, StaffID, StaffMember
from .roster import random_name
from .rules_config import DEFAULT_RULES, RulesConfig


def facility_maintenance(
    facility_type: FacilityType, rating: int, *, rules: RulesConfig = DEFAULT_RULES
) -> int:
    table = rules.facilities
    return int(table.base_maintenance[facility_type] * rating * table.maintenance_factor)


def build_facility(facility_type: FacilityType, *, rules: RulesConfig = DEFAULT_RULES) -> Facility:
    return Facility(
        facility_type=facility_type,
        rating=1,
        weekly_maintenance=facility_maintenance(facility_type, 1, rules=rules),
    )


def find_facility(campaign: Campaign, facility_type: FacilityType) -> Facility | None:
    return next(
        (f for f in campaign.guild.facilities if f.facility_type is facility_type), None
    )


def facility_upgrade_cost(
    campaign: Campaign, facility_type: FacilityType, *, rules: RulesConfig = DEFAULT_RULES
) -> int:
    """Price of the next rating step; building a missing facility is step one."""

    facility = find_facility(campaign, facility_type)
    target = 1 if facility is None else facility.rating + 1
    if target > rules.facilities.max_rating:
        raise FacilityMaxedError(f"{facility_type} is already at the highest rating")
    return rules.facilities.upgrade_cost[target]


def upgrade_facility(
    campaign: Campaign, facility_type: FacilityType, *, rules: RulesConfig = DEFAULT_RULES
) -> Facility:
    """Raise a facility one rating step, or build it at rating 1.

    Maintenance is recomputed for the new rating.

    Raises:
        FacilityMaxedError: If the facility is at the maximum rating
        InsufficientFundsError: If the treasury cannot cover the cost
    """

    cost = facility_upgrade_cost(campaign, facility_type, rules=rules)
    treasury = campaign.guild.finances.treasury
    if treasury < cost:
        raise InsufficientFundsError(cost, treasury)

    facility = find_facility(campaign, facility_type)
    if facility is None:
        facility = build_facility(facility_type, rules=rules)
        campaign.guild.facilities.append(facility)
    else:
        facility.rating += 1
        facility.weekly_maintenance = facility_maintenance(
            facility_type, facility.rating, rules=rules
        )

    label = facility_type.replace("_", " ")
    finances.post_transaction(
        campaign,
        -cost,
        TransactionCategory.FACILITY_UPGRADE,
        f"Upgraded {label} to rating {facility.rating}",
    )
    record_event(
        campaign.state,
        EventType.FACILITY_UPGRADED,
        f"The {label} now stands at rating {facility.rating}",
    )
    return facility


def hire_staff(
    campaign: Campaign,
    role: StaffRole,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> StaffMember:
    """Take on a staff member, paying a signing fee of several weeks' salary.

    Raises:
        StaffRoleFilledError: If ``role`` is unique and already filled
        InsufficientFundsError: If the treasury cannot cover the signing fee
    """

    table = rules.facilities
    guild = campaign.guild
    if role in table.unique_roles and any(member.role is role for member in guild.staff):
        raise StaffRoleFilledError(f"the guild already has a {role.replace('_', ' ')}")

    skill = rng.randint(*table.skill_range)
    salary = table.staff_salary[role] + rng.randint(-table.salary_variance, table.salary_variance)
    first_name, last_name = random_name(rng)
    signing_fee = salary * table.signing_weeks
    if guild.finances.treasury < signing_fee:
        raise InsufficientFundsError(signing_fee, guild.finances.treasury)

    member = StaffMember(
        id=campaign.state.store.allocate_staff_id(),
        name=f"{first_name} {last_name}",
        role=role,
        weekly_salary=salary,
        skill=skill,
    )
    guild.staff.append(member)
    finances.post_transaction(
        campaign,
        -signing_fee,
        TransactionCategory.STAFF_HIRING,
        f"Hired {member.name} as {role.replace('_', ' ')}",
        int(member.id),
    )
    record_event(
        campaign.state,
        EventType.STAFF_HIRED,
        f"{member.name} joins the staff as {role.replace('_', ' ')}",
        related_entity_id=int(member.id),
    )
    return member


def dismiss_staff(campaign: Campaign, staff_id: StaffID) -> StaffMember:
    guild = campaign.guild
    member = next((m for m in guild.staff if m.id == staff_id), None)
    if member is None:
        raise EntityNotFoundError("staff member", staff_id)
    guild.staff.remove(member)
    record_event(
        campaign.state,
        EventType.STAFF_DISMISSED,
        f"{member.name} has left the staff",
        related_entity_id=int(staff_id),
    )
    return member

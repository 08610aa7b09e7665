"""Treasury bookkeeping: ledger, weekly settlement and loans."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .enums import EventType, TransactionCategory
from .events import record_event
from .models import Campaign, FinancialTransaction, Loan
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SettlementSummary:
    """Totals from one weekly settlement."""

    income: int
    wages: int
    salaries: int
    maintenance: int
    loan_payments: int
    treasury: int
    in_financial_trouble: bool

    @property
    def operating_costs(self) -> int:
        return self.wages + self.salaries + self.maintenance


def post_transaction(
    campaign: Campaign,
    amount: int,
    category: TransactionCategory,
    description: str,
    related_entity_id: int | None = None,
) -> FinancialTransaction:
    """Apply ``amount`` to the treasury and record it in the ledger."""

    finances = campaign.guild.finances
    transaction = FinancialTransaction(
        week=campaign.state.total_weeks_elapsed,
        amount=amount,
        category=category,
        description=description,
        related_entity_id=related_entity_id,
    )
    finances.treasury += amount
    if amount >= 0:
        finances.season_income += amount
    else:
        finances.season_expenses += -amount
    finances.ledger.append(transaction)
    return transaction


def weekly_wages(campaign: Campaign) -> int:
    """Wages of roster adventurers present in the entity store."""

    adventurers = campaign.state.store.adventurers
    return sum(
        adventurers[adventurer_id].weekly_wage
        for adventurer_id in campaign.guild.roster_ids
        if adventurer_id in adventurers
    )


def weekly_operating_costs(campaign: Campaign) -> int:
    guild = campaign.guild
    return (
        weekly_wages(campaign)
        + sum(member.weekly_salary for member in guild.staff)
        + sum(facility.weekly_maintenance for facility in guild.facilities)
    )


def settle_week(campaign: Campaign, *, rules: RulesConfig = DEFAULT_RULES) -> SettlementSummary:
    """Collect income, pay operating costs and service loans.

    Never blocks: a treasury driven below zero sets the guild's
    ``in_financial_trouble`` flag instead of raising.
    """

    state, guild = campaign.state, campaign.guild
    finances = guild.finances

    wages = weekly_wages(campaign)
    salaries = sum(member.weekly_salary for member in guild.staff)
    maintenance = sum(facility.weekly_maintenance for facility in guild.facilities)
    costs = wages + salaries + maintenance

    if finances.weekly_income:
        post_transaction(
            campaign, finances.weekly_income, TransactionCategory.RECURRING_INCOME, "Weekly income"
        )
    if costs:
        post_transaction(
            campaign,
            -costs,
            TransactionCategory.OPERATING_COSTS,
            f"Wages {wages}, salaries {salaries}, maintenance {maintenance}",
        )
    finances.last_week_costs = costs

    loan_payments = 0
    for loan in list(guild.loans):
        payment = min(loan.weekly_payment, loan.remaining_balance)
        if payment > 0:
            post_transaction(
                campaign, -payment, TransactionCategory.LOAN_PAYMENT, f"Payment to {loan.lender}"
            )
            loan.remaining_balance -= payment
            loan_payments += payment
        if loan.remaining_balance <= 0:
            guild.loans.remove(loan)
            record_event(state, EventType.LOAN_REPAID, f"Loan from {loan.lender} repaid in full")

    guild.in_financial_trouble = finances.treasury < 0
    if guild.in_financial_trouble:
        record_event(
            state, EventType.TREASURY_LOW, f"Guild is in debt! Treasury: {finances.treasury} gold"
        )
        logger.warning("guild %s in debt: %s gold", guild.id, finances.treasury)
    elif costs and finances.treasury < costs * rules.finance.low_reserve_weeks:
        record_event(
            state,
            EventType.TREASURY_LOW,
            f"Low reserves: {finances.treasury} gold covers fewer than "
            f"{rules.finance.low_reserve_weeks} weeks of costs",
        )

    return SettlementSummary(
        income=finances.weekly_income,
        wages=wages,
        salaries=salaries,
        maintenance=maintenance,
        loan_payments=loan_payments,
        treasury=finances.treasury,
        in_financial_trouble=guild.in_financial_trouble,
    )


def take_loan(
    campaign: Campaign,
    lender: str,
    amount: int,
    weeks: int,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> Loan:
    """Borrow ``amount`` now, repaid with interest over ``weeks`` settlements."""

    if amount <= 0:
        raise ValueError("loan amount must be positive")
    if weeks <= 0:
        raise ValueError("loan term must be at least one week")

    balance = int(round(amount * (1.0 + rules.finance.loan_interest)))
    loan = Loan(lender=lender, remaining_balance=balance, weekly_payment=-(-balance // weeks))
    post_transaction(campaign, amount, TransactionCategory.LOAN, f"Loan from {lender}")
    campaign.guild.loans.append(loan)
    campaign.guild.in_financial_trouble = campaign.guild.finances.treasury < 0
    record_event(
        campaign.state,
        EventType.LOAN_TAKEN,
        f"Borrowed {amount} gold from {lender}; {balance} due over {weeks} weeks",
    )
    return loan

"""
Withdrawal tax helpers — what the trader actually receives.

A firm withholds WithdrawalRules.tax_rate of every payout. These helpers
split a gross amount into tax and net, sum a history of payouts, and invert
the calculation to find the gross profit needed for a target net amount.

Usage:
    info = calculate_withdrawal_tax(1000, strategy.get_withdrawal_rules(25_000, "FUNDED"))
    info.net_amount  # 800.0 for a 20% split
"""

from collections.abc import Iterable

from pydantic import BaseModel

from src.propfirm.models import WithdrawalRules


class WithdrawalTaxInfo(BaseModel):
    """Gross / tax / net breakdown of one withdrawal."""

    gross_amount: float
    tax_rate: float
    tax_amount: float
    net_amount: float
    has_tax: bool


def calculate_withdrawal_tax(amount: float, rules: WithdrawalRules) -> WithdrawalTaxInfo:
    tax_amount = amount * rules.tax_rate
    return WithdrawalTaxInfo(
        gross_amount=amount,
        tax_rate=rules.tax_rate,
        tax_amount=tax_amount,
        net_amount=amount - tax_amount,
        has_tax=rules.tax_rate > 0,
    )


def total_net_withdrawals(withdrawals: Iterable[tuple[float, WithdrawalRules]]) -> float:
    """Net amount received over (gross amount, rules) pairs."""
    return sum(calculate_withdrawal_tax(amount, rules).net_amount for amount, rules in withdrawals)


def gross_needed_for_net(net_amount: float, rules: WithdrawalRules) -> float:
    """Profit required to take home net_amount.

    Undoes the tax and, for cycle-based firms, the share of profit a
    completed cycle unlocks.
    """
    if rules.tax_rate >= 1:
        return float("inf")
    gross = net_amount / (1 - rules.tax_rate)
    if rules.requires_cycles and rules.cycle_requirements is not None:
        percentage = rules.cycle_requirements.withdrawal_percentage
        if percentage > 0:
            gross = gross / percentage
    return gross

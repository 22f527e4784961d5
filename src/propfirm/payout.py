"""
Shared payout template — the four steps every funded-account calculator follows.

1. Build the per-day PnL aggregate (caller, via src.propfirm.ledger).
2. Evaluate independent gates (day count, consistency, balance floor).
   Any failing gate forces the payout to 0.
3. Compute capacity numbers (remaining profit, balance above floor, caps).
4. Return max(0, min(capacities)), floored to 0 below the minimum payout.

Strategies describe a PayoutPlan and hand it to resolve_payout().

Usage:
    plan = PayoutPlan(
        gates=[gate("PROFITABLE_DAYS", days >= 5, f"{days}/5 days")],
        capacities=[Capacity(name="PROFIT", amount=profit), Capacity(name="CAP", amount=2000)],
        min_payout=500,
    )
    amount = resolve_payout(plan, label="Lucid FLEX").amount
"""

from typing import Any

from loguru import logger
from pydantic import BaseModel

# ── Data Models ─────────────────────────────────────────────────────────────


class GateResult(BaseModel):
    """Result of one payout gate."""

    passed: bool
    rule_name: str = ""
    reason: str = ""
    details: dict[str, Any] = {}


class Capacity(BaseModel):
    """One upper bound on the payout amount."""

    name: str
    amount: float


class PayoutPlan(BaseModel):
    """Gates and capacities describing one payout computation."""

    gates: list[GateResult] = []
    capacities: list[Capacity] = []
    min_payout: float = 0.0


class PayoutDecision(BaseModel):
    """Outcome of resolve_payout()."""

    amount: float
    blocked_by: str = ""
    limited_by: str = ""


def gate(rule_name: str, passed: bool, reason: str = "", **details: Any) -> GateResult:
    """Shorthand for building a GateResult."""
    return GateResult(passed=passed, rule_name=rule_name, reason=reason, details=details)


# ── Template ────────────────────────────────────────────────────────────────


def resolve_payout(plan: PayoutPlan, label: str = "") -> PayoutDecision:
    """Run the gates in order, then bound the payout by every capacity.

    Returns the first failing gate as blocked_by with amount 0. A plan
    without capacities pays 0.
    """
    for result in plan.gates:
        if not result.passed:
            logger.debug("Payout {}: blocked by {} — {}", label, result.rule_name, result.reason)
            return PayoutDecision(amount=0.0, blocked_by=result.rule_name)

    if not plan.capacities:
        return PayoutDecision(amount=0.0, blocked_by="NO_CAPACITY")

    limiting = min(plan.capacities, key=lambda capacity: capacity.amount)
    amount = max(0.0, limiting.amount)

    if amount < plan.min_payout:
        logger.debug(
            "Payout {}: ${:.2f} below minimum payout ${:.2f}",
            label,
            amount,
            plan.min_payout,
        )
        return PayoutDecision(amount=0.0, blocked_by="MIN_PAYOUT", limited_by=limiting.name)

    return PayoutDecision(amount=amount, limited_by=limiting.name)


# ── Profit Split ────────────────────────────────────────────────────────────


def tiered_profit(
    profit: float,
    first_tier: float = 10_000.0,
    first_tier_share: float = 1.0,
    remainder_share: float = 0.9,
) -> float:
    """Trader's share of a profit amount paid at two rates.

    The first first_tier dollars pay first_tier_share, the remainder pays
    remainder_share. Negative profit is returned unchanged.
    """
    if profit <= first_tier:
        return profit * first_tier_share if profit > 0 else profit
    return first_tier * first_tier_share + (profit - first_tier) * remainder_share

"""
Evaluation checks shared by the tier-table firms (TopStep, Apex, Bulenox).

These firms publish one static AccountRules row per account size and judge
graduation the same way: profit target, trading days, optional consistency
and a per-entry trailing drawdown that must never have been exceeded.
"""

from collections.abc import Sequence

from loguru import logger

from src.propfirm import ledger
from src.propfirm.models import AccountRules, PnlEntry


def lookup_rules(table: dict[float, AccountRules], account_size: float) -> AccountRules | None:
    """Row for account_size, None for unsupported tiers."""
    return table.get(account_size)


def passes_evaluation(
    label: str,
    account_size: float,
    pnl_entries: Sequence[PnlEntry],
    rules: AccountRules,
    check_consistency: bool = False,
) -> bool:
    """Run the tier-table graduation checks in order, first failure wins."""
    total = ledger.total_pnl(pnl_entries)
    if total < rules.profit_target:
        logger.debug(
            "{}: profit ${:.2f} below target ${:.2f}", label, total, rules.profit_target
        )
        return False

    trading_days = ledger.trading_day_count(pnl_entries)
    if trading_days < rules.min_trading_days:
        logger.debug(
            "{}: {} trading days < {} required", label, trading_days, rules.min_trading_days
        )
        return False

    if check_consistency and rules.consistency_rule > 0:
        daily = ledger.daily_pnl(pnl_entries)
        if not ledger.within_consistency(daily, total, rules.consistency_rule):
            logger.debug(
                "{}: best day ${:.2f} exceeds {:.0f}% of ${:.2f}",
                label,
                ledger.best_positive_day(daily),
                rules.consistency_rule,
                total,
            )
            return False

    return not ledger.trailing_drawdown_breached(account_size, pnl_entries, rules.max_drawdown)

"""
Rule progress snapshot — how far an account is along each of its rules.

Complements is_eligible_for_validation() with the per-rule numbers a
dashboard needs: profit progress, trading days, best day share, today's loss
against the daily limit and the worst drawdown seen so far, measured with
the firm's DrawdownMeasure (trailing when none is given).
A rule whose threshold is 0 is treated as not applicable and always met.

Usage:
    rules = get_strategy("TOPSTEP").get_account_rules(50_000)
    progress = compute_rule_progress(rules, 50_000, entries, today=date(2026, 3, 6))
    progress.all_met
"""

from collections.abc import Sequence
from datetime import date

from pydantic import BaseModel

from src.propfirm import ledger
from src.propfirm.models import AccountRules, DrawdownMeasure, PnlEntry


class RuleProgress(BaseModel):
    """Per-rule progress of one account against its AccountRules."""

    total_pnl: float
    profit_target: float
    profit_progress_pct: float
    profit_target_met: bool

    trading_days: int
    min_trading_days: int
    min_trading_days_met: bool

    best_day: float
    consistency_pct: float
    consistency_rule: float
    consistency_met: bool

    today_pnl: float
    daily_loss_limit: float
    daily_loss_used_pct: float
    daily_loss_met: bool

    worst_drawdown: float
    max_drawdown: float
    drawdown_used_pct: float
    drawdown_met: bool

    @property
    def all_met(self) -> bool:
        return (
            self.profit_target_met
            and self.min_trading_days_met
            and self.consistency_met
            and self.daily_loss_met
            and self.drawdown_met
        )


def _pct(used: float, limit: float) -> float:
    """used as a percentage of limit, clamped to [0, 100]."""
    if limit <= 0:
        return 0.0
    return min(max(used / limit * 100, 0.0), 100.0)


def compute_rule_progress(
    rules: AccountRules,
    account_size: float,
    pnl_entries: Sequence[PnlEntry],
    today: date | None = None,
    measure: DrawdownMeasure | None = None,
) -> RuleProgress:
    """Snapshot every rule of an account. today defaults to the local date."""
    today = today or date.today()
    total = ledger.total_pnl(pnl_entries)
    daily = ledger.daily_pnl(pnl_entries)

    if rules.profit_target > 0:
        profit_progress = _pct(total, rules.profit_target)
    else:
        profit_progress = 100.0

    trading_days = len(daily)
    consistency = ledger.consistency_pct(daily, total)
    today_pnl = daily.get(today, 0.0)
    worst_drawdown = ledger.worst_drawdown(account_size, pnl_entries, measure or DrawdownMeasure())

    return RuleProgress(
        total_pnl=total,
        profit_target=rules.profit_target,
        profit_progress_pct=profit_progress,
        profit_target_met=rules.profit_target <= 0 or total >= rules.profit_target,
        trading_days=trading_days,
        min_trading_days=rules.min_trading_days,
        min_trading_days_met=trading_days >= rules.min_trading_days,
        best_day=ledger.best_positive_day(daily),
        consistency_pct=consistency,
        consistency_rule=rules.consistency_rule,
        consistency_met=rules.consistency_rule <= 0 or consistency <= rules.consistency_rule,
        today_pnl=today_pnl,
        daily_loss_limit=rules.daily_loss_limit,
        daily_loss_used_pct=_pct(-min(today_pnl, 0.0), rules.daily_loss_limit),
        daily_loss_met=rules.daily_loss_limit <= 0 or today_pnl > -rules.daily_loss_limit,
        worst_drawdown=worst_drawdown,
        max_drawdown=rules.max_drawdown,
        drawdown_used_pct=_pct(worst_drawdown, rules.max_drawdown),
        drawdown_met=rules.max_drawdown <= 0 or worst_drawdown <= rules.max_drawdown,
    )

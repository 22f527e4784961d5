"""
Lucid Trading — FLEX and PRO evaluations, DIRECT / LIVE instant funded.

Funded payouts share a lifetime profit split: the first $10,000 of profit
pays 100%, everything above pays 90%. The split is recomputed on every call
against total PnL minus total withdrawals.

Payout gates by sub-type:
- FLEX: 5 days meeting the size's minimum daily profit, capped by a
  payout-index schedule (max 6 payouts). The index is approximated as one
  payout per $1,000 already withdrawn.
- PRO: 5 such days and a consistency cap of 35% (<= $50k) or 40%.
- DIRECT / LIVE: 8 such days and a 20% consistency cap, no payout cap.
"""

from collections.abc import Sequence

from loguru import logger

from src.propfirm import ledger
from src.propfirm.models import (
    AccountRules,
    AccountType,
    DrawdownMeasure,
    CycleRequirements,
    MaxContracts,
    PnlEntry,
    WithdrawalRules,
    is_funded,
)
from src.propfirm.payout import Capacity, PayoutPlan, gate, resolve_payout, tiered_profit
from src.propfirm.strategies.tier_table import lookup_rules
from src.propfirm.subtypes import LucidSubType, detect_lucid_sub_type, parse_sub_type

_CONTRACTS: dict[float, MaxContracts] = {
    25_000: MaxContracts(mini=2, micro=20),
    50_000: MaxContracts(mini=4, micro=40),
    100_000: MaxContracts(mini=6, micro=60),
    150_000: MaxContracts(mini=10, micro=100),
}
_DRAWDOWNS: dict[float, float] = {25_000: 1000, 50_000: 2000, 100_000: 3000, 150_000: 4500}
_TARGETS: dict[float, float] = {25_000: 1250, 50_000: 3000, 100_000: 6000, 150_000: 9000}
_DAILY_LOSS: dict[float, float] = {25_000: 600, 50_000: 800, 100_000: 1000, 150_000: 1200}
_PRO_CONSISTENCY: dict[float, float] = {25_000: 35, 50_000: 35, 100_000: 40, 150_000: 40}


def _flex(size: float) -> AccountRules:
    return AccountRules(
        profit_target=_TARGETS[size],
        max_drawdown=_DRAWDOWNS[size],
        daily_loss_limit=0,
        consistency_rule=50,
        min_trading_days=0,
        max_contracts=_CONTRACTS[size],
    )


def _pro(size: float) -> AccountRules:
    return AccountRules(
        profit_target=_TARGETS[size],
        max_drawdown=_DRAWDOWNS[size],
        daily_loss_limit=_DAILY_LOSS[size],
        consistency_rule=_PRO_CONSISTENCY[size],
        min_trading_days=5,
        max_contracts=_CONTRACTS[size],
    )


def _direct(size: float) -> AccountRules:
    return AccountRules(
        profit_target=0,
        max_drawdown=_DRAWDOWNS[size],
        daily_loss_limit=_DAILY_LOSS[size],
        consistency_rule=20,
        min_trading_days=0,
        max_contracts=_CONTRACTS[size],
    )


_SIZES = (25_000, 50_000, 100_000, 150_000)

RULES: dict[LucidSubType, dict[float, AccountRules]] = {
    LucidSubType.FLEX: {size: _flex(size) for size in _SIZES},
    LucidSubType.PRO: {size: _pro(size) for size in _SIZES},
    LucidSubType.DIRECT: {size: _direct(size) for size in _SIZES},
    LucidSubType.LIVE: {size: _direct(size) for size in _SIZES},
}

MIN_DAILY_PROFIT: dict[float, float] = {25_000: 150, 50_000: 200, 100_000: 250, 150_000: 300}
DEFAULT_MIN_DAILY_PROFIT = 200.0

# Max payout per payout index 0..5
FLEX_PAYOUT_CAPS: dict[float, tuple[float, ...]] = {
    25_000: (2000, 2000, 2500, 3000, 3500, 4000),
    50_000: (3000, 3000, 4000, 4500, 5000, 5000),
    100_000: (4000, 4000, 5000, 5000, 5000, 5000),
    150_000: (5000, 5000, 5000, 5000, 5000, 5000),
}
DEFAULT_FLEX_CAP = 5000.0
MAX_PAYOUT_INDEX = 5
PAYOUT_INDEX_STEP = 1000.0

TAX_RATE = 0.1
MIN_WITHDRAWAL = 500.0
PROFITABLE_DAYS = 5
DIRECT_PROFITABLE_DAYS = 8
DIRECT_CONSISTENCY = 20.0


class LucidStrategy:
    """Lucid Trading FLEX, PRO, DIRECT and LIVE accounts."""

    def get_name(self) -> str:
        return "Lucid"

    def resolve_sub_type(
        self,
        name: str | None = None,
        notes: str | None = None,
        sub_type: str | None = None,
    ) -> LucidSubType:
        return parse_sub_type(LucidSubType, sub_type) or detect_lucid_sub_type(name, notes)

    def min_daily_profit(self, account_size: float | None) -> float:
        if account_size is None:
            return DEFAULT_MIN_DAILY_PROFIT
        return MIN_DAILY_PROFIT.get(account_size, DEFAULT_MIN_DAILY_PROFIT)

    def flex_payout_cap(self, account_size: float, payout_index: int) -> float:
        """FLEX cap for the given payout number (0-based, clamped to 5)."""
        caps = FLEX_PAYOUT_CAPS.get(account_size)
        if caps is None:
            return DEFAULT_FLEX_CAP
        return caps[min(max(0, payout_index), MAX_PAYOUT_INDEX)]

    def get_account_rules(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> AccountRules | None:
        resolved = self.resolve_sub_type(name, notes, sub_type)
        rules = lookup_rules(RULES[resolved], account_size)
        if rules is not None and is_funded(account_type):
            # FLEX has no consistency rule once funded
            return rules.for_funded(keep_consistency=resolved != LucidSubType.FLEX)
        return rules

    def get_withdrawal_rules(
        self,
        account_size: float | None = None,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> WithdrawalRules:
        if not is_funded(account_type):
            return WithdrawalRules.not_applicable()

        resolved = self.resolve_sub_type(name, notes, sub_type)
        min_daily = self.min_daily_profit(account_size)

        if resolved == LucidSubType.FLEX:
            return WithdrawalRules(
                tax_rate=TAX_RATE,
                requires_cycles=False,
                cycle_requirements=CycleRequirements(
                    days_per_cycle=0, min_daily_profit=min_daily, withdrawal_percentage=1.0
                ),
                has_buffer=False,
                min_withdrawal=MIN_WITHDRAWAL,
                max_withdrawal=self.flex_payout_cap(account_size or 0.0, 0),
                frequency="daily",
            )

        if resolved == LucidSubType.PRO:
            return WithdrawalRules(
                tax_rate=TAX_RATE,
                requires_cycles=False,
                cycle_requirements=CycleRequirements(
                    days_per_cycle=0, min_daily_profit=min_daily, withdrawal_percentage=1.0
                ),
                has_buffer=False,
                min_withdrawal=MIN_WITHDRAWAL,
                frequency="daily",
            )

        return WithdrawalRules(
            tax_rate=TAX_RATE,
            requires_cycles=True,
            cycle_requirements=CycleRequirements(
                days_per_cycle=DIRECT_PROFITABLE_DAYS,
                min_daily_profit=min_daily,
                withdrawal_percentage=1.0,
            ),
            has_buffer=False,
            min_withdrawal=MIN_WITHDRAWAL,
            frequency="daily",
        )

    def calculate_buffer(self, account_size: float) -> float:
        return 0.0

    def calculate_available_for_withdrawal(
        self,
        account_size: float,
        total_pnl: float,
        total_withdrawals: float,
        pnl_entries: Sequence[PnlEntry],
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> float:
        if not is_funded(account_type):
            return 0.0

        resolved = self.resolve_sub_type(name, notes, sub_type)
        daily = ledger.daily_pnl(pnl_entries)
        profitable_days = ledger.qualifying_day_count(daily, self.min_daily_profit(account_size))
        trader_share = tiered_profit(total_pnl - total_withdrawals)
        label = f"{self.get_name()} {resolved.value}"

        if resolved == LucidSubType.FLEX:
            payout_index = int(total_withdrawals // PAYOUT_INDEX_STEP)
            plan = PayoutPlan(
                gates=[
                    gate(
                        "PROFITABLE_DAYS",
                        profitable_days >= PROFITABLE_DAYS,
                        f"{profitable_days}/{PROFITABLE_DAYS} days",
                    )
                ],
                capacities=[
                    Capacity(name="PROFIT_SPLIT", amount=trader_share),
                    Capacity(
                        name="PAYOUT_CAP", amount=self.flex_payout_cap(account_size, payout_index)
                    ),
                ],
            )
            return resolve_payout(plan, label=label).amount

        if resolved == LucidSubType.PRO:
            required_days = PROFITABLE_DAYS
            consistency_cap = 35.0 if account_size <= 50_000 else 40.0
        else:
            required_days = DIRECT_PROFITABLE_DAYS
            consistency_cap = DIRECT_CONSISTENCY

        consistency = ledger.consistency_pct(daily, ledger.total_pnl(pnl_entries))
        plan = PayoutPlan(
            gates=[
                gate(
                    "PROFITABLE_DAYS",
                    profitable_days >= required_days,
                    f"{profitable_days}/{required_days} days",
                ),
                gate(
                    "CONSISTENCY",
                    consistency <= consistency_cap,
                    f"best day {consistency:.1f}% > {consistency_cap:.0f}%",
                ),
            ],
            capacities=[Capacity(name="PROFIT_SPLIT", amount=trader_share)],
        )
        return resolve_payout(plan, label=label).amount

    def get_drawdown_measure(
        self,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> DrawdownMeasure:
        return DrawdownMeasure()

    def is_eligible_for_validation(
        self,
        account_size: float,
        pnl_entries: Sequence[PnlEntry],
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> bool:
        resolved = self.resolve_sub_type(name, notes, sub_type)
        if resolved in (LucidSubType.DIRECT, LucidSubType.LIVE) or is_funded(account_type):
            return False
        rules = lookup_rules(RULES[resolved], account_size)
        if rules is None:
            return False

        total = ledger.total_pnl(pnl_entries)
        if rules.profit_target > 0 and total < rules.profit_target:
            return False

        trading_days = ledger.trading_day_count(pnl_entries)
        if trading_days < rules.min_trading_days:
            logger.debug(
                "Lucid {}: {} trading days < {} required",
                resolved.value,
                trading_days,
                rules.min_trading_days,
            )
            return False

        if rules.consistency_rule > 0:
            daily = ledger.daily_pnl(pnl_entries)
            if not ledger.within_consistency(daily, total, rules.consistency_rule):
                logger.debug(
                    "Lucid {}: best day ${:.2f} exceeds {:.0f}% of ${:.2f}",
                    resolved.value,
                    ledger.best_positive_day(daily),
                    rules.consistency_rule,
                    total,
                )
                return False

        return not ledger.trailing_drawdown_breached(account_size, pnl_entries, rules.max_drawdown)

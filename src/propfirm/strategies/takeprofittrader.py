"""
TakeProfitTrader — end-of-day trailing drawdown and two funded products.

PRO keeps a buffer (initial balance + max drawdown) and withholds 20%.
PRO+ has no buffer and withholds 10%. Drawdown is tracked on end-of-day
balances: entries are summed per calendar day before the peak moves, so two
entries on the same date never breach on their intraday path.
"""

from collections.abc import Sequence

from loguru import logger

from src.propfirm import ledger
from src.propfirm.models import (
    AccountRules,
    AccountType,
    DrawdownMeasure,
    DrawdownStyle,
    PnlEntry,
    WithdrawalRules,
    is_funded,
)
from src.propfirm.payout import Capacity, PayoutPlan, resolve_payout
from src.propfirm.strategies.tier_table import lookup_rules
from src.propfirm.subtypes import (
    TakeProfitTraderSubType,
    detect_takeprofittrader_sub_type,
    parse_sub_type,
)


def _tier(profit_target: float, max_drawdown: float) -> AccountRules:
    return AccountRules(
        profit_target=profit_target,
        max_drawdown=max_drawdown,
        daily_loss_limit=max_drawdown,
        consistency_rule=50,
        min_trading_days=5,
    )


RULES: dict[float, AccountRules] = {
    25_000: _tier(1500, 1500),
    50_000: _tier(3000, 2000),
    75_000: _tier(4500, 2500),
    100_000: _tier(6000, 3000),
    150_000: _tier(9000, 4500),
}

PRO_WITHDRAWAL_RULES = WithdrawalRules(tax_rate=0.2, requires_cycles=False, has_buffer=True)
PRO_PLUS_WITHDRAWAL_RULES = WithdrawalRules(tax_rate=0.1, requires_cycles=False, has_buffer=False)


class TakeProfitTraderStrategy:
    """TakeProfitTrader Test and PRO / PRO+ funded accounts."""

    def get_name(self) -> str:
        return "TakeProfitTrader"

    def resolve_sub_type(
        self,
        name: str | None = None,
        notes: str | None = None,
        sub_type: str | None = None,
    ) -> TakeProfitTraderSubType:
        """Stored sub-type when valid, keyword heuristic otherwise."""
        return parse_sub_type(TakeProfitTraderSubType, sub_type) or (
            detect_takeprofittrader_sub_type(name, notes)
        )

    def get_account_rules(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> AccountRules | None:
        rules = lookup_rules(RULES, account_size)
        if rules is not None and is_funded(account_type):
            return rules.for_funded()
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
        if account_type is not None and not is_funded(account_type):
            return WithdrawalRules.not_applicable()
        if self.resolve_sub_type(name, notes, sub_type) == TakeProfitTraderSubType.PRO_PLUS:
            return PRO_PLUS_WITHDRAWAL_RULES
        return PRO_WITHDRAWAL_RULES

    def calculate_buffer(self, account_size: float) -> float:
        """PRO buffer: initial balance + max drawdown, 0 for unsupported sizes."""
        rules = lookup_rules(RULES, account_size)
        if rules is None:
            return 0.0
        return account_size + rules.max_drawdown

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
        resolved = self.resolve_sub_type(name, notes, sub_type)
        balance = ledger.current_balance(account_size, total_pnl, total_withdrawals)

        if resolved == TakeProfitTraderSubType.PRO_PLUS:
            floor = account_size
        else:
            floor = self.calculate_buffer(account_size)
            if floor == 0:
                return 0.0

        plan = PayoutPlan(capacities=[Capacity(name="ABOVE_FLOOR", amount=balance - floor)])
        return resolve_payout(plan, label=f"{self.get_name()} {resolved.value}").amount

    def get_drawdown_measure(
        self,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> DrawdownMeasure:
        return DrawdownMeasure(style=DrawdownStyle.END_OF_DAY)

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
        if is_funded(account_type):
            return False
        rules = lookup_rules(RULES, account_size)
        if rules is None:
            return False

        total = ledger.total_pnl(pnl_entries)
        if total < rules.profit_target:
            return False

        trading_days = ledger.trading_day_count(pnl_entries)
        if trading_days < rules.min_trading_days:
            logger.debug(
                "TakeProfitTrader: {} trading days < {} required",
                trading_days,
                rules.min_trading_days,
            )
            return False

        daily = ledger.daily_pnl(pnl_entries)
        if not ledger.within_consistency(daily, total, rules.consistency_rule):
            logger.debug(
                "TakeProfitTrader: best day ${:.2f} exceeds {:.0f}% of ${:.2f}",
                ledger.best_positive_day(daily),
                rules.consistency_rule,
                total,
            )
            return False

        return not ledger.end_of_day_drawdown_breached(
            account_size, pnl_entries, rules.max_drawdown
        )

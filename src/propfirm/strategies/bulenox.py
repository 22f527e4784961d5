"""
Bulenox — trailing drawdown, no consistency rule, no buffer, no cycles.

Any positive realized profit of a funded account is withdrawable.
"""

from collections.abc import Sequence

from src.propfirm.models import (
    AccountRules,
    AccountType,
    DrawdownMeasure,
    MaxContracts,
    PnlEntry,
    WithdrawalRules,
    is_funded,
)
from src.propfirm.payout import Capacity, PayoutPlan, resolve_payout
from src.propfirm.strategies.tier_table import lookup_rules, passes_evaluation


def _tier(profit_target: float, max_drawdown: float, mini: int) -> AccountRules:
    return AccountRules(
        profit_target=profit_target,
        max_drawdown=max_drawdown,
        daily_loss_limit=0,
        consistency_rule=0,
        min_trading_days=1,
        max_contracts=MaxContracts(mini=mini, micro=mini * 10),
    )


RULES: dict[float, AccountRules] = {
    25_000: _tier(1500, 1500, 3),
    50_000: _tier(3000, 2500, 7),
    100_000: _tier(6000, 3000, 12),
    150_000: _tier(9000, 4500, 15),
    250_000: _tier(15000, 5500, 25),
}

FUNDED_WITHDRAWAL_RULES = WithdrawalRules(tax_rate=0.0, requires_cycles=False, has_buffer=False)


class BulenoxStrategy:
    def get_name(self) -> str:
        return "Bulenox"

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
        return FUNDED_WITHDRAWAL_RULES

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
        plan = PayoutPlan(capacities=[Capacity(name="REALIZED", amount=total_pnl)])
        return resolve_payout(plan, label=self.get_name()).amount

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
        if is_funded(account_type):
            return False
        rules = lookup_rules(RULES, account_size)
        if rules is None:
            return False
        return passes_evaluation(self.get_name(), account_size, pnl_entries, rules)

"""
TopStep — tier-table evaluation with a 50% consistency rule and 5-day payout cycles.

Payouts unlock per completed cycle: a cycle is 5 days each netting at least
$150. Once a cycle is complete, 50% of realized profit is withdrawable; after
$10,000 of cumulative withdrawals the share rises to 90%. Withdrawals only
grow, so the higher share never reverts.
"""

from collections.abc import Sequence

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
from src.propfirm.payout import Capacity, PayoutPlan, gate, resolve_payout
from src.propfirm.strategies.tier_table import lookup_rules, passes_evaluation

RULES: dict[float, AccountRules] = {
    50_000: AccountRules(
        profit_target=3000,
        max_drawdown=2000,
        daily_loss_limit=2000,
        consistency_rule=50,
        min_trading_days=1,
        max_contracts=MaxContracts(mini=5, micro=50),
    ),
    100_000: AccountRules(
        profit_target=6000,
        max_drawdown=3000,
        daily_loss_limit=3000,
        consistency_rule=50,
        min_trading_days=1,
        max_contracts=MaxContracts(mini=10, micro=100),
    ),
    150_000: AccountRules(
        profit_target=9000,
        max_drawdown=4500,
        daily_loss_limit=4500,
        consistency_rule=50,
        min_trading_days=1,
        max_contracts=MaxContracts(mini=15, micro=150),
    ),
}

CYCLE = CycleRequirements(days_per_cycle=5, min_daily_profit=150, withdrawal_percentage=0.5)
RATCHET_WITHDRAWALS = 10_000.0
RATCHET_PERCENTAGE = 0.9

FUNDED_WITHDRAWAL_RULES = WithdrawalRules(
    tax_rate=0.0, requires_cycles=True, cycle_requirements=CYCLE, has_buffer=False
)


class TopStepStrategy:
    """TopStep Trading Combine and funded accounts."""

    def get_name(self) -> str:
        return "TopStep"

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

    def withdrawal_percentage(self, total_withdrawals: float) -> float:
        """Share of realized profit unlocked by a completed cycle."""
        if total_withdrawals >= RATCHET_WITHDRAWALS:
            return RATCHET_PERCENTAGE
        return CYCLE.withdrawal_percentage

    def completed_cycles(self, pnl_entries: Sequence[PnlEntry]) -> int:
        daily = ledger.daily_pnl(pnl_entries)
        qualifying = ledger.qualifying_day_count(daily, CYCLE.min_daily_profit)
        return qualifying // CYCLE.days_per_cycle

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
        cycles = self.completed_cycles(pnl_entries)
        percentage = self.withdrawal_percentage(total_withdrawals)
        plan = PayoutPlan(
            gates=[gate("CYCLES", cycles > 0, f"{cycles} completed cycles", cycles=cycles)],
            capacities=[Capacity(name="REALIZED_SHARE", amount=max(0.0, total_pnl) * percentage)],
        )
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
        return passes_evaluation(
            self.get_name(), account_size, pnl_entries, rules, check_consistency=True
        )

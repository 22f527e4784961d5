"""
Apex Trader Funding — trailing drawdown, 1-day minimum, buffer and 8-day cycles.

Funded withdrawals need the balance to reach the buffer (initial balance +
max drawdown) and at least one completed 8-trading-day cycle. Everything
above the buffer is then withdrawable, with no tax.
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
    25_000: _tier(1500, 1500, 4),
    50_000: _tier(3000, 2500, 10),
    100_000: _tier(6000, 3000, 14),
    150_000: _tier(9000, 5000, 17),
    250_000: _tier(15000, 6500, 27),
    300_000: _tier(20000, 7500, 35),
}

CYCLE = CycleRequirements(days_per_cycle=8, min_daily_profit=0, withdrawal_percentage=1.0)

FUNDED_WITHDRAWAL_RULES = WithdrawalRules(
    tax_rate=0.0, requires_cycles=True, cycle_requirements=CYCLE, has_buffer=True
)


class ApexStrategy:
    """Apex Trader Funding evaluation and performance accounts."""

    def get_name(self) -> str:
        return "Apex Trader Funding"

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
        """Balance level that must stay untouched: initial balance + max drawdown."""
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
        buffer = self.calculate_buffer(account_size)
        balance = ledger.current_balance(account_size, total_pnl, total_withdrawals)
        cycles = ledger.trading_day_count(pnl_entries) // CYCLE.days_per_cycle

        plan = PayoutPlan(
            gates=[
                gate("BUFFER", buffer > 0 and balance >= buffer, f"balance ${balance:.2f}"),
                gate("CYCLES", cycles > 0, f"{cycles} completed cycles"),
            ],
            capacities=[Capacity(name="ABOVE_BUFFER", amount=balance - buffer)],
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
        return passes_evaluation(self.get_name(), account_size, pnl_entries, rules)

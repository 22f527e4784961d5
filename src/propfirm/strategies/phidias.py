"""
Phidias — static drawdown evaluations, CASH and LIVE funded accounts.

Sub-types:
1. EVAL: profit target with a static drawdown measured from the initial
   balance (never trailing), no consistency rule.
2. CASH: same rule table. The 25k Static account withdraws unwithdrawn
   profit from the next day on. 50k/100k/150k accounts need a minimum
   balance to request a payout, keep a post-withdrawal floor and are capped
   per period.
3. LIVE: no evaluation. Daily payouts of at least $500 while the balance
   stays above initial balance + $100.

All funded payouts are split 80/20 (20% withheld).

Usage:
    strategy = PhidiasStrategy()
    strategy.calculate_available_for_withdrawal(25_000, 600, 0, [], "FUNDED", sub_type="LIVE")
    # → 500.0
"""

from collections.abc import Sequence

from loguru import logger

from src.propfirm import ledger
from src.propfirm.models import (
    AccountRules,
    AccountType,
    CycleRequirements,
    DrawdownMeasure,
    DrawdownStyle,
    PnlEntry,
    WithdrawalRules,
)
from src.propfirm.payout import Capacity, PayoutPlan, gate, resolve_payout
from src.propfirm.strategies.tier_table import lookup_rules
from src.propfirm.subtypes import PhidiasSubType, detect_phidias_sub_type, parse_sub_type

TAX_RATE = 0.2
STATIC_CASH_SIZE = 25_000.0

RULES: dict[float, AccountRules] = {
    25_000: AccountRules(profit_target=1500, max_drawdown=500, min_trading_days=0),
    50_000: AccountRules(profit_target=3000, max_drawdown=2500, min_trading_days=1),
    100_000: AccountRules(profit_target=6000, max_drawdown=3000, min_trading_days=1),
    150_000: AccountRules(profit_target=9000, max_drawdown=4500, min_trading_days=1),
}

LIVE_RULES = AccountRules(
    profit_target=0, max_drawdown=0, daily_loss_limit=0, consistency_rule=0, min_trading_days=0
)

# ── CASH 50k/100k/150k Payout Table ─────────────────────────────────────────

REQUEST_THRESHOLDS: dict[float, float] = {50_000: 52_600, 100_000: 103_700, 150_000: 154_500}
FLOOR_AFTER_WITHDRAWAL: dict[float, float] = {50_000: 50_100, 100_000: 100_100, 150_000: 150_100}
PERIOD_CAPS: dict[float, float] = {50_000: 2000, 100_000: 2500, 150_000: 2750}
CYCLE_MIN_DAILY_PROFIT: dict[float, float] = {50_000: 150, 100_000: 200, 150_000: 250}
CYCLE_DAYS = 10

# ── LIVE / Static CASH Constants ────────────────────────────────────────────

LIVE_FLOOR_MARGIN = 100.0
LIVE_MIN_WITHDRAWAL = 500.0
VALIDATION_BONUS = 1000.0
LIVE_CREDIT = 500.0
MAX_LIVE_CREDIT_ACCOUNTS = 5


class PhidiasStrategy:
    """Phidias Propfirm EVAL, CASH and LIVE accounts."""

    def get_name(self) -> str:
        return "Phidias"

    def resolve_sub_type(
        self,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        sub_type: str | None = None,
    ) -> PhidiasSubType:
        """Stored sub-type when valid, keyword heuristic otherwise. No account type means EVAL."""
        parsed = parse_sub_type(PhidiasSubType, sub_type)
        if parsed is not None:
            return parsed
        if account_type is None:
            return PhidiasSubType.EVAL
        return detect_phidias_sub_type(account_type, name, notes)

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
        if rules is None:
            return None
        if self.resolve_sub_type(account_type, name, notes, sub_type) == PhidiasSubType.LIVE:
            return LIVE_RULES
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
        resolved = self.resolve_sub_type(account_type, name, notes, sub_type)
        if resolved != PhidiasSubType.CASH or account_size == STATIC_CASH_SIZE:
            return WithdrawalRules.not_applicable(tax_rate=TAX_RATE)

        return WithdrawalRules(
            tax_rate=TAX_RATE,
            requires_cycles=True,
            cycle_requirements=CycleRequirements(
                days_per_cycle=CYCLE_DAYS,
                min_daily_profit=CYCLE_MIN_DAILY_PROFIT.get(account_size or 0.0, 250),
                withdrawal_percentage=1.0,
            ),
            has_buffer=False,
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
        resolved = self.resolve_sub_type(account_type, name, notes, sub_type)
        balance = ledger.current_balance(account_size, total_pnl, total_withdrawals)
        unwithdrawn_profit = max(0.0, total_pnl) - total_withdrawals
        label = f"{self.get_name()} {resolved.value}"

        if resolved == PhidiasSubType.LIVE:
            live_floor = account_size + LIVE_FLOOR_MARGIN
            plan = PayoutPlan(
                capacities=[Capacity(name="ABOVE_FLOOR", amount=balance - live_floor)],
                min_payout=LIVE_MIN_WITHDRAWAL,
            )
            return resolve_payout(plan, label=label).amount

        if resolved == PhidiasSubType.CASH:
            if account_size == STATIC_CASH_SIZE:
                plan = PayoutPlan(capacities=[Capacity(name="PROFIT", amount=unwithdrawn_profit)])
                return resolve_payout(plan, label=label).amount

            threshold = REQUEST_THRESHOLDS.get(account_size)
            if threshold is None:
                logger.debug("{}: no payout table for size {}", label, account_size)
                return 0.0

            floor = FLOOR_AFTER_WITHDRAWAL[account_size]
            plan = PayoutPlan(
                gates=[
                    gate(
                        "REQUEST_THRESHOLD",
                        balance >= threshold,
                        f"balance ${balance:.2f} < ${threshold:.2f}",
                    )
                ],
                capacities=[
                    Capacity(name="PROFIT", amount=unwithdrawn_profit),
                    Capacity(name="ABOVE_FLOOR", amount=balance - floor),
                    Capacity(name="PERIOD_CAP", amount=PERIOD_CAPS[account_size]),
                ],
            )
            return resolve_payout(plan, label=label).amount

        return 0.0

    def get_drawdown_measure(
        self,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> DrawdownMeasure:
        return DrawdownMeasure(style=DrawdownStyle.STATIC)

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
        if self.resolve_sub_type(account_type, name, notes, sub_type) != PhidiasSubType.EVAL:
            return False
        rules = lookup_rules(RULES, account_size)
        if rules is None:
            return False

        total = ledger.total_pnl(pnl_entries)
        if total < rules.profit_target:
            return False

        return not ledger.static_drawdown_breached(account_size, pnl_entries, rules.max_drawdown)

    # ── Credits Outside The Contract ────────────────────────────────────────

    def get_validation_bonus(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> float:
        """One-time bonus paid when a 25k Static CASH account is validated."""
        resolved = self.resolve_sub_type(account_type, name, notes, sub_type)
        if account_size == STATIC_CASH_SIZE and resolved == PhidiasSubType.CASH:
            return VALIDATION_BONUS
        return 0.0

    def get_live_credit(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> float:
        """Credit a validated 25k Static CASH account brings to the LIVE account.

        Applying the credit to the LIVE account is the caller's job.
        """
        resolved = self.resolve_sub_type(account_type, name, notes, sub_type)
        if account_size == STATIC_CASH_SIZE and resolved == PhidiasSubType.CASH:
            return LIVE_CREDIT
        return 0.0

    def total_live_credit(self, validated_accounts: int) -> float:
        """LIVE credit accumulated from validated CASH accounts, capped at five accounts."""
        counted = min(max(0, validated_accounts), MAX_LIVE_CREDIT_ACCOUNTS)
        return counted * LIVE_CREDIT

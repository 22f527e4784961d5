"""
Tradeify — GROWTH and SELECT evaluations, LIGHTNING instant funded.

The trader keeps 90% of every payout. Withdrawal logic per product:
1. GROWTH: minimum balance to request, 35% consistency, 5 profitable days,
   min/max payout keyed by payout number (the 4th cap repeats).
2. SELECT Flex: unlocks on every 5th profitable day, 50% of net profit
   up to a size cap.
3. SELECT Daily: needs profit since the last payout and a buffer-adjusted
   minimum balance, pays up to 2x that profit, capped, $250 minimum.
4. LIGHTNING: profit goal and consistency thresholds that loosen after the
   first payout, payout-number keyed caps and a flat $1,000 minimum.

Payout numbers are approximated as one payout per $1,000 withdrawn.
"""

from collections.abc import Sequence
from datetime import date

from loguru import logger

from src.propfirm import ledger
from src.propfirm.models import (
    AccountRules,
    AccountType,
    CycleRequirements,
    DrawdownMeasure,
    DrawdownStyle,
    MaxContracts,
    PnlEntry,
    WithdrawalRules,
    is_funded,
)
from src.propfirm.payout import Capacity, PayoutPlan, gate, resolve_payout
from src.propfirm.strategies.tier_table import lookup_rules
from src.propfirm.subtypes import (
    SelectPayoutOption,
    TradeifySubType,
    detect_select_payout_option,
    detect_tradeify_sub_type,
    parse_sub_type,
)

TAX_RATE = 0.1
TRADER_SHARE = 1 - TAX_RATE
PAYOUT_INDEX_STEP = 1000.0
SELECT_LOCK_AMOUNT = 100.0
PROFITABLE_DAYS = 5

_CONTRACTS: dict[float, MaxContracts] = {
    50_000: MaxContracts(mini=4, micro=40),
    100_000: MaxContracts(mini=8, micro=80),
    150_000: MaxContracts(mini=12, micro=120),
}

GROWTH_RULES: dict[float, AccountRules] = {
    size: AccountRules(
        profit_target=target,
        max_drawdown=drawdown,
        daily_loss_limit=daily_loss,
        consistency_rule=0,
        min_trading_days=1,
        max_contracts=_CONTRACTS[size],
    )
    for size, target, drawdown, daily_loss in (
        (50_000, 3000, 2000, 1250),
        (100_000, 6000, 3500, 2500),
        (150_000, 9000, 5000, 3750),
    )
}

SELECT_RULES: dict[float, AccountRules] = {
    size: AccountRules(
        profit_target=target,
        max_drawdown=drawdown,
        daily_loss_limit=0,
        consistency_rule=40,
        min_trading_days=3,
        max_contracts=_CONTRACTS[size],
    )
    for size, target, drawdown in (
        (50_000, 2500, 2000),
        (100_000, 6000, 3000),
        (150_000, 9000, 4500),
    )
}

LIGHTNING_RULES = AccountRules(
    profit_target=0, max_drawdown=0, daily_loss_limit=0, consistency_rule=0, min_trading_days=0
)

MIN_DAILY_PROFIT: dict[float, float] = {50_000: 150, 100_000: 200, 150_000: 250}
DEFAULT_MIN_DAILY_PROFIT = 250.0
BUFFERS: dict[float, float] = {50_000: 2100, 100_000: 2600, 150_000: 3600}

# ── GROWTH Payout Table ─────────────────────────────────────────────────────

GROWTH_REQUEST_BALANCE: dict[float, float] = {50_000: 53_000, 100_000: 104_500, 150_000: 156_500}
GROWTH_CONSISTENCY = 35.0
# Max payout for payouts 1..4, the last entry repeats
GROWTH_MAX_PAYOUTS: dict[float, tuple[float, ...]] = {
    50_000: (1500, 2000, 2500, 3000),
    100_000: (2000, 2500, 3000, 4000),
    150_000: (2500, 3000, 4000, 5000),
}
GROWTH_MIN_PAYOUT: dict[float, float] = {50_000: 500, 100_000: 1000, 150_000: 1500}

# ── SELECT Payout Tables ────────────────────────────────────────────────────

SELECT_FLEX_SHARE = 0.5
SELECT_FLEX_CAPS: dict[float, float] = {50_000: 3000, 100_000: 4000, 150_000: 5000}
SELECT_DAILY_MULTIPLIER = 2.0
SELECT_DAILY_CAPS: dict[float, float] = {50_000: 1000, 100_000: 1500, 150_000: 2500}
SELECT_DAILY_DRAWDOWN: dict[float, float] = {50_000: 2000, 100_000: 2500, 150_000: 3500}
SELECT_DAILY_MIN_PAYOUT = 250.0

# ── LIGHTNING Payout Tables ─────────────────────────────────────────────────

LIGHTNING_CONSISTENCY = (20.0, 25.0, 30.0)
# (first payout, later payouts)
LIGHTNING_PROFIT_GOALS: dict[float, tuple[float, float]] = {
    25_000: (1500, 1000),
    50_000: (3000, 2000),
    100_000: (6000, 3500),
    150_000: (9000, 4500),
}
# (payouts 1-3, payouts 4+)
LIGHTNING_MAX_PAYOUTS: dict[float, tuple[float, float]] = {
    25_000: (1000, 1000),
    50_000: (2000, 2500),
    100_000: (2500, 3000),
    150_000: (3000, 3500),
}
LIGHTNING_MIN_PAYOUT = 1000.0


def _payout_count(total_withdrawals: float) -> int:
    return int(total_withdrawals // PAYOUT_INDEX_STEP)


class TradeifyStrategy:
    """Tradeify GROWTH, SELECT (Flex / Daily) and LIGHTNING accounts."""

    def get_name(self) -> str:
        return "Tradeify"

    def resolve_sub_type(
        self,
        name: str | None = None,
        notes: str | None = None,
        sub_type: str | None = None,
    ) -> tuple[TradeifySubType, SelectPayoutOption | None]:
        """Product and, for SELECT, payout option.

        Accepts the stored values "GROWTH", "LIGHTNING", "SELECT",
        "SELECT_FLEX" and "SELECT_DAILY". Anything else falls back to the
        keyword heuristic.
        """
        product: TradeifySubType | None = None
        option: SelectPayoutOption | None = None
        if sub_type is not None:
            head, _, tail = str(getattr(sub_type, "value", sub_type)).upper().partition("_")
            product = parse_sub_type(TradeifySubType, head)
            option = parse_sub_type(SelectPayoutOption, tail or None)

        if product is None:
            product = detect_tradeify_sub_type(name, notes)
        if product != TradeifySubType.SELECT:
            return product, None
        return product, option or detect_select_payout_option(name, notes)

    def min_daily_profit(self, account_size: float | None) -> float:
        if account_size is None:
            return DEFAULT_MIN_DAILY_PROFIT
        return MIN_DAILY_PROFIT.get(account_size, DEFAULT_MIN_DAILY_PROFIT)

    def get_account_rules(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> AccountRules | None:
        product, _ = self.resolve_sub_type(name, notes, sub_type)
        if product == TradeifySubType.LIGHTNING:
            return LIGHTNING_RULES

        table = SELECT_RULES if product == TradeifySubType.SELECT else GROWTH_RULES
        rules = lookup_rules(table, account_size)
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
            return WithdrawalRules.not_applicable(tax_rate=TAX_RATE)
        if not account_size:
            return WithdrawalRules(tax_rate=TAX_RATE)

        product, option = self.resolve_sub_type(name, notes, sub_type)
        if product != TradeifySubType.SELECT:
            return WithdrawalRules(tax_rate=TAX_RATE, requires_cycles=False, has_buffer=False)

        if option == SelectPayoutOption.DAILY:
            return WithdrawalRules(tax_rate=TAX_RATE, requires_cycles=False, has_buffer=True)

        return WithdrawalRules(
            tax_rate=TAX_RATE,
            requires_cycles=True,
            cycle_requirements=CycleRequirements(
                days_per_cycle=PROFITABLE_DAYS,
                min_daily_profit=self.min_daily_profit(account_size),
                withdrawal_percentage=SELECT_FLEX_SHARE,
            ),
            has_buffer=False,
        )

    def calculate_buffer(self, account_size: float) -> float:
        """Cushion a SELECT Daily account keeps above its drawdown floor."""
        return BUFFERS.get(account_size, 0.0)

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
        product, option = self.resolve_sub_type(name, notes, sub_type)
        daily = ledger.daily_pnl(pnl_entries)
        balance = ledger.current_balance(account_size, total_pnl, total_withdrawals)

        if product == TradeifySubType.GROWTH:
            plan = self._growth_plan(account_size, total_pnl, total_withdrawals, daily, balance)
        elif product == TradeifySubType.LIGHTNING:
            plan = self._lightning_plan(account_size, total_pnl, total_withdrawals, daily)
        elif option == SelectPayoutOption.DAILY:
            plan = self._select_daily_plan(account_size, total_pnl, total_withdrawals, balance)
        else:
            plan = self._select_flex_plan(account_size, total_pnl, total_withdrawals, daily)

        label = f"{self.get_name()} {product.value}"
        if option is not None:
            label = f"{label} {option.value}"
        return resolve_payout(plan, label=label).amount

    # ── Payout Plans ────────────────────────────────────────────────────────

    def _growth_plan(
        self,
        account_size: float,
        total_pnl: float,
        total_withdrawals: float,
        daily: dict[date, float],
        balance: float,
    ) -> PayoutPlan:
        request_balance = GROWTH_REQUEST_BALANCE.get(account_size)
        max_payouts = GROWTH_MAX_PAYOUTS.get(account_size)
        if request_balance is None or max_payouts is None:
            return PayoutPlan(gates=[gate("SIZE", False, f"unsupported size {account_size}")])

        consistency = ledger.consistency_pct(daily, total_pnl)
        min_daily = self.min_daily_profit(account_size)
        profitable_days = ledger.qualifying_day_count(daily, min_daily)
        payout_number = min(_payout_count(total_withdrawals) + 1, len(max_payouts))

        return PayoutPlan(
            gates=[
                gate(
                    "REQUEST_BALANCE",
                    balance >= request_balance,
                    f"balance ${balance:.2f} < ${request_balance:.2f}",
                ),
                gate(
                    "CONSISTENCY",
                    consistency <= GROWTH_CONSISTENCY,
                    f"best day {consistency:.1f}% > {GROWTH_CONSISTENCY:.0f}%",
                ),
                gate(
                    "PROFITABLE_DAYS",
                    profitable_days >= PROFITABLE_DAYS,
                    f"{profitable_days}/{PROFITABLE_DAYS} days >= ${min_daily:.0f}",
                ),
            ],
            capacities=[
                Capacity(
                    name="PROFIT_SHARE",
                    amount=max(0.0, total_pnl - total_withdrawals) * TRADER_SHARE,
                ),
                Capacity(name="MAX_PAYOUT", amount=max_payouts[payout_number - 1]),
            ],
            min_payout=GROWTH_MIN_PAYOUT[account_size],
        )

    def _select_flex_plan(
        self,
        account_size: float,
        total_pnl: float,
        total_withdrawals: float,
        daily: dict[date, float],
    ) -> PayoutPlan:
        profitable_days = ledger.qualifying_day_count(daily, self.min_daily_profit(account_size))
        on_cycle = profitable_days >= PROFITABLE_DAYS and profitable_days % PROFITABLE_DAYS == 0
        return PayoutPlan(
            gates=[
                gate(
                    "CYCLE",
                    on_cycle,
                    f"{profitable_days} profitable days is not a multiple of {PROFITABLE_DAYS}",
                )
            ],
            capacities=[
                Capacity(
                    name="PROFIT_SHARE",
                    amount=(total_pnl - total_withdrawals) * SELECT_FLEX_SHARE * TRADER_SHARE,
                ),
                Capacity(name="CAP", amount=SELECT_FLEX_CAPS.get(account_size, 0.0)),
            ],
        )

    def _select_daily_plan(
        self,
        account_size: float,
        total_pnl: float,
        total_withdrawals: float,
        balance: float,
    ) -> PayoutPlan:
        profit_since_payout = total_pnl - total_withdrawals
        drawdown = SELECT_DAILY_DRAWDOWN.get(account_size, 0.0)
        min_balance = account_size - drawdown + self.calculate_buffer(account_size)
        return PayoutPlan(
            gates=[
                gate(
                    "PROFIT_SINCE_PAYOUT",
                    profit_since_payout > 0,
                    f"no profit since last payout (${profit_since_payout:.2f})",
                ),
                gate(
                    "MIN_BALANCE",
                    balance >= min_balance,
                    f"balance ${balance:.2f} < ${min_balance:.2f}",
                ),
            ],
            capacities=[
                Capacity(
                    name="PROFIT_MULTIPLE",
                    amount=profit_since_payout * SELECT_DAILY_MULTIPLIER * TRADER_SHARE,
                ),
                Capacity(name="CAP", amount=SELECT_DAILY_CAPS.get(account_size, 0.0)),
            ],
            min_payout=SELECT_DAILY_MIN_PAYOUT,
        )

    def _lightning_plan(
        self,
        account_size: float,
        total_pnl: float,
        total_withdrawals: float,
        daily: dict[date, float],
    ) -> PayoutPlan:
        payouts_taken = _payout_count(total_withdrawals)
        consistency_cap = LIGHTNING_CONSISTENCY[min(payouts_taken, len(LIGHTNING_CONSISTENCY) - 1)]
        consistency = ledger.consistency_pct(daily, total_pnl)

        first_goal, later_goal = LIGHTNING_PROFIT_GOALS.get(account_size, (0.0, 0.0))
        profit_goal = first_goal if payouts_taken == 0 else later_goal
        profit_since_payout = total_pnl - total_withdrawals

        early_cap, late_cap = LIGHTNING_MAX_PAYOUTS.get(account_size, (0.0, 0.0))
        max_payout = early_cap if payouts_taken < 3 else late_cap

        return PayoutPlan(
            gates=[
                gate(
                    "CONSISTENCY",
                    consistency <= consistency_cap,
                    f"best day {consistency:.1f}% > {consistency_cap:.0f}%",
                ),
                gate(
                    "PROFIT_GOAL",
                    profit_since_payout >= profit_goal,
                    f"${profit_since_payout:.2f} < goal ${profit_goal:.2f}",
                ),
            ],
            capacities=[
                Capacity(name="PROFIT_SHARE", amount=profit_since_payout * TRADER_SHARE),
                Capacity(name="MAX_PAYOUT", amount=max_payout),
            ],
            min_payout=LIGHTNING_MIN_PAYOUT,
        )

    def get_drawdown_measure(
        self,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> DrawdownMeasure:
        product, _ = self.resolve_sub_type(name, notes, sub_type)
        if product == TradeifySubType.SELECT:
            return DrawdownMeasure(style=DrawdownStyle.FLOORED, lock_amount=SELECT_LOCK_AMOUNT)
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
        product, _ = self.resolve_sub_type(name, notes, sub_type)
        if product == TradeifySubType.LIGHTNING or is_funded(account_type):
            return False
        rules = self.get_account_rules(account_size, account_type, name, notes, sub_type=sub_type)
        if rules is None:
            return False

        total = ledger.total_pnl(pnl_entries)
        if total < rules.profit_target:
            return False

        trading_days = ledger.trading_day_count(pnl_entries)
        if trading_days < max(rules.min_trading_days, 1):
            return False

        if product == TradeifySubType.SELECT:
            breached = ledger.floored_drawdown_breached(
                account_size, pnl_entries, rules.max_drawdown, SELECT_LOCK_AMOUNT
            )
        else:
            breached = ledger.trailing_drawdown_breached(
                account_size, pnl_entries, rules.max_drawdown
            )
        if breached:
            return False

        daily = ledger.daily_pnl(pnl_entries)
        if product == TradeifySubType.SELECT and rules.consistency_rule > 0:
            consistency = ledger.consistency_pct(daily, total)
            if consistency > rules.consistency_rule:
                logger.debug(
                    "Tradeify SELECT: best day {:.1f}% > {:.0f}%",
                    consistency,
                    rules.consistency_rule,
                )
                return False

        if product == TradeifySubType.GROWTH and rules.daily_loss_limit > 0:
            worst = ledger.worst_day(daily)
            if worst < -rules.daily_loss_limit:
                logger.debug(
                    "Tradeify GROWTH: worst day ${:.2f} beyond daily loss limit ${:.2f}",
                    worst,
                    rules.daily_loss_limit,
                )
                return False

        return True

"""
Ledger folds — derived values computed from PnL and withdrawal entries.

This is a pure calculation module — no I/O, no state. Every fold sorts its
input by date first, so callers may pass entries in any order. Entries that
share a timestamp are applied losses first, so swapping two same-day entries
never turns a breach into a pass. Aware datetimes are compared in UTC.

Three drawdown flavours are supported because firms disagree on them:
1. Trailing (per entry): peak follows every simulated balance.
2. End-of-day trailing: entries are aggregated per calendar day first,
   then the peak follows end-of-day balances only.
3. Static: loss measured from the fixed initial balance.
4. Floored: trailing, but also measured from initial balance + a lock amount.

All breach checks are sticky: once a prefix breaches, later recovery
does not clear it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from loguru import logger

from src.propfirm.models import DrawdownMeasure, DrawdownStyle, PnlEntry, WithdrawalEntry

# ── Ordering & Aggregation ──────────────────────────────────────────────────


def _sort_key(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def sort_entries(entries: Iterable[PnlEntry]) -> list[PnlEntry]:
    """Return entries in ascending date order, losses first on equal dates."""
    return sorted(entries, key=lambda entry: (_sort_key(entry.date), entry.amount))


def total_pnl(entries: Iterable[PnlEntry]) -> float:
    return sum(entry.amount for entry in entries)


def daily_pnl(entries: Iterable[PnlEntry]) -> dict[date, float]:
    """Group entries by calendar day, ascending by day."""
    days: dict[date, float] = {}
    for entry in sort_entries(entries):
        days[entry.day] = days.get(entry.day, 0.0) + entry.amount
    return days


def trading_day_count(entries: Iterable[PnlEntry]) -> int:
    """Number of distinct calendar days with at least one entry."""
    return len({entry.day for entry in entries})


def qualifying_day_count(daily: dict[date, float], min_daily_profit: float) -> int:
    """Days whose net PnL meets the threshold."""
    return sum(1 for amount in daily.values() if amount >= min_daily_profit)


def best_positive_day(daily: dict[date, float]) -> float:
    """Largest positive day, 0.0 when no day was positive."""
    positives = [amount for amount in daily.values() if amount > 0]
    if not positives:
        return 0.0
    return max(positives)


def consistency_pct(daily: dict[date, float], total: float) -> float:
    """Best day as a percentage of total profit, 0.0 when total is not positive."""
    if total <= 0:
        return 0.0
    return best_positive_day(daily) / total * 100


def within_consistency(daily: dict[date, float], total: float, rule_pct: float) -> bool:
    """Best positive day must not exceed rule_pct% of total profit."""
    return best_positive_day(daily) <= total * (rule_pct / 100)


def worst_day(daily: dict[date, float]) -> float:
    """Most negative day, 0.0 when no day lost money."""
    negatives = [amount for amount in daily.values() if amount < 0]
    if not negatives:
        return 0.0
    return min(negatives)


# ── Balance Folds ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BalancePoint:
    """Simulated balance after one step of a fold."""

    day: date
    balance: float
    peak: float

    @property
    def drawdown(self) -> float:
        return self.peak - self.balance


def balance_path(initial_balance: float, entries: Iterable[PnlEntry]) -> list[BalancePoint]:
    """Fold entries one by one into running balance and running peak."""
    balance = initial_balance
    peak = initial_balance
    path: list[BalancePoint] = []
    for entry in sort_entries(entries):
        balance += entry.amount
        peak = max(peak, balance)
        path.append(BalancePoint(day=entry.day, balance=balance, peak=peak))
    return path


def end_of_day_path(initial_balance: float, entries: Iterable[PnlEntry]) -> list[BalancePoint]:
    """Fold per-day aggregates into end-of-day balance and peak."""
    balance = initial_balance
    peak = initial_balance
    path: list[BalancePoint] = []
    for day, amount in daily_pnl(entries).items():
        balance += amount
        peak = max(peak, balance)
        path.append(BalancePoint(day=day, balance=balance, peak=peak))
    return path


def account_balance_path(
    initial_balance: float,
    entries: Iterable[PnlEntry],
    withdrawals: Iterable[WithdrawalEntry] = (),
) -> list[BalancePoint]:
    """Running balance of an account, PnL credited and withdrawals debited in date order.

    On equal dates PnL is applied before the withdrawal taken out of it, and
    losses before gains.
    """
    events: list[tuple[datetime, int, date, float]] = []
    for entry in entries:
        events.append((_sort_key(entry.date), 0, entry.day, entry.amount))
    for withdrawal in withdrawals:
        day = withdrawal.date.date() if isinstance(withdrawal.date, datetime) else withdrawal.date
        events.append((_sort_key(withdrawal.date), 1, day, -withdrawal.amount))
    events.sort(key=lambda event: (event[0], event[1], event[3]))

    balance = initial_balance
    peak = initial_balance
    path: list[BalancePoint] = []
    for _, _, day, delta in events:
        balance += delta
        peak = max(peak, balance)
        path.append(BalancePoint(day=day, balance=balance, peak=peak))
    return path


def current_balance(account_size: float, total: float, total_withdrawals: float) -> float:
    return account_size + total - total_withdrawals


# ── Drawdown Breach Detection ───────────────────────────────────────────────


def max_trailing_drawdown(path: list[BalancePoint]) -> float:
    """Worst peak-to-balance distance seen along a path."""
    if not path:
        return 0.0
    return max(point.drawdown for point in path)


def trailing_drawdown_breached(
    initial_balance: float, entries: Iterable[PnlEntry], max_drawdown: float
) -> bool:
    """True if peak − balance ever exceeded max_drawdown, entry by entry."""
    for point in balance_path(initial_balance, entries):
        if point.drawdown > max_drawdown:
            logger.debug(
                "Ledger: trailing drawdown ${:.2f} > ${:.2f} on {}",
                point.drawdown,
                max_drawdown,
                point.day,
            )
            return True
    return False


def end_of_day_drawdown_breached(
    initial_balance: float, entries: Iterable[PnlEntry], max_drawdown: float
) -> bool:
    """True if the end-of-day trailing drawdown ever exceeded max_drawdown."""
    for point in end_of_day_path(initial_balance, entries):
        if point.drawdown > max_drawdown:
            logger.debug(
                "Ledger: EOD drawdown ${:.2f} > ${:.2f} on {}",
                point.drawdown,
                max_drawdown,
                point.day,
            )
            return True
    return False


def static_drawdown_breached(
    initial_balance: float, entries: Iterable[PnlEntry], max_drawdown: float
) -> bool:
    """True if the balance ever fell more than max_drawdown below the initial balance."""
    for point in balance_path(initial_balance, entries):
        loss = initial_balance - point.balance
        if loss > max_drawdown:
            logger.debug(
                "Ledger: static loss ${:.2f} > ${:.2f} on {}", loss, max_drawdown, point.day
            )
            return True
    return False


def floored_drawdown_breached(
    initial_balance: float,
    entries: Iterable[PnlEntry],
    max_drawdown: float,
    lock_amount: float,
) -> bool:
    """Trailing drawdown that is also measured from initial_balance + lock_amount.

    The worse of the two distances counts, entry by entry.
    """
    reference = initial_balance + lock_amount
    for point in balance_path(initial_balance, entries):
        drawdown = max(point.drawdown, reference - point.balance)
        if drawdown > max_drawdown:
            logger.debug(
                "Ledger: locked drawdown ${:.2f} > ${:.2f} on {}",
                drawdown,
                max_drawdown,
                point.day,
            )
            return True
    return False


def worst_drawdown(
    initial_balance: float, entries: Iterable[PnlEntry], measure: DrawdownMeasure
) -> float:
    """Largest drawdown along the history, measured the way the firm measures it.

    The matching breach check above fires exactly when this exceeds max_drawdown.
    """
    if measure.style == DrawdownStyle.END_OF_DAY:
        return max_trailing_drawdown(end_of_day_path(initial_balance, entries))

    path = balance_path(initial_balance, entries)
    if not path:
        return 0.0
    if measure.style == DrawdownStyle.STATIC:
        return max(0.0, max(initial_balance - point.balance for point in path))
    if measure.style == DrawdownStyle.FLOORED:
        reference = initial_balance + measure.lock_amount
        return max(max(point.drawdown, reference - point.balance) for point in path)
    return max_trailing_drawdown(path)

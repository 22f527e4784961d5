"""
Cross-firm behaviour every strategy shares.

Covers:
- Entry order never changes an answer, same-day entries included
- Repeated calls give the same answer and leave the entries untouched
- A drawdown breach early in the history is never undone by later profit
- Capped payouts saturate, uncapped ones grow with profit
"""

from datetime import date, timedelta

import pytest

from src.propfirm.models import PnlEntry
from src.propfirm.selector import clear_cache, get_strategy

# ── Helpers ─────────────────────────────────────────────────────────────────

GRADUATING_ACCOUNTS = [
    ("TOPSTEP", None),
    ("APEX", None),
    ("BULENOX", None),
    ("TAKEPROFITTRADER", None),
    ("PHIDIAS", None),
    ("LUCID", "FLEX"),
    ("LUCID", "PRO"),
    ("TRADEIFY", "GROWTH"),
    ("TRADEIFY", "SELECT"),
]

FUNDED_ACCOUNTS = [
    ("TOPSTEP", None),
    ("APEX", None),
    ("BULENOX", None),
    ("TAKEPROFITTRADER", "PRO"),
    ("PHIDIAS", "CASH"),
    ("LUCID", "FLEX"),
    ("LUCID", "DIRECT"),
    ("TRADEIFY", "GROWTH"),
    ("TRADEIFY", "SELECT_FLEX"),
    ("TRADEIFY", "LIGHTNING"),
]


def _days(*amounts: float, start: date = date(2026, 3, 2)) -> list[PnlEntry]:
    return [PnlEntry(date=start + timedelta(days=i), amount=a) for i, a in enumerate(amounts)]


@pytest.fixture(autouse=True)
def _fresh_selector() -> None:
    clear_cache()


# ── Order Independence ──────────────────────────────────────────────────────


class TestOrderIndependence:
    @pytest.mark.parametrize("firm,sub_type", GRADUATING_ACCOUNTS)
    def test_eligibility(self, firm: str, sub_type: str | None) -> None:
        entries = _days(900, -400, 1200, 700, -300, 1100, 800, 900)
        strategy = get_strategy(firm)
        forward = strategy.is_eligible_for_validation(50_000, entries, "EVAL", sub_type=sub_type)
        backward = strategy.is_eligible_for_validation(
            50_000, list(reversed(entries)), "EVAL", sub_type=sub_type
        )
        assert forward == backward

    @pytest.mark.parametrize("firm,sub_type", GRADUATING_ACCOUNTS)
    def test_eligibility_with_same_day_entries(self, firm: str, sub_type: str | None) -> None:
        entries = _days(1000, -1000, 1000, 1000, 1000, 1000, 1000)
        busy_day = entries[2].date
        gain_first = [*entries, PnlEntry(date=busy_day, amount=-1500)]
        loss_first = [*entries[:2], gain_first[-1], *entries[2:]]
        strategy = get_strategy(firm)
        assert strategy.is_eligible_for_validation(
            50_000, gain_first, "EVAL", sub_type=sub_type
        ) == strategy.is_eligible_for_validation(50_000, loss_first, "EVAL", sub_type=sub_type)

    @pytest.mark.parametrize("firm,sub_type", FUNDED_ACCOUNTS)
    def test_available(self, firm: str, sub_type: str | None) -> None:
        entries = _days(*([600] * 10))
        shuffled = entries[5:] + entries[:5]
        strategy = get_strategy(firm)
        args = (50_000, 6000, 1000)
        assert strategy.calculate_available_for_withdrawal(
            *args, entries, "FUNDED", sub_type=sub_type
        ) == strategy.calculate_available_for_withdrawal(
            *args, shuffled, "FUNDED", sub_type=sub_type
        )


# ── Idempotence ─────────────────────────────────────────────────────────────


class TestIdempotence:
    @pytest.mark.parametrize("firm,sub_type", FUNDED_ACCOUNTS)
    def test_repeat_calls_and_no_mutation(self, firm: str, sub_type: str | None) -> None:
        entries = list(reversed(_days(*([700] * 10))))
        snapshot = [entry.model_copy() for entry in entries]
        strategy = get_strategy(firm)

        first = strategy.calculate_available_for_withdrawal(
            50_000, 7000, 0, entries, "FUNDED", sub_type=sub_type
        )
        second = strategy.calculate_available_for_withdrawal(
            50_000, 7000, 0, entries, "FUNDED", sub_type=sub_type
        )
        assert first == second
        assert entries == snapshot


# ── Sticky Breach ───────────────────────────────────────────────────────────


class TestStickyBreach:
    @pytest.mark.parametrize("firm,sub_type", GRADUATING_ACCOUNTS)
    def test_clean_history_graduates(self, firm: str, sub_type: str | None) -> None:
        entries = _days(*([1000] * 8))
        assert get_strategy(firm).is_eligible_for_validation(
            50_000, entries, "EVAL", sub_type=sub_type
        )

    @pytest.mark.parametrize("firm,sub_type", GRADUATING_ACCOUNTS)
    def test_early_breach_blocks_graduation(self, firm: str, sub_type: str | None) -> None:
        """-3,100 on day one exceeds every 50k drawdown; 8,000 of later profit changes nothing."""
        entries = _days(-3100, *([1000] * 8))
        assert not get_strategy(firm).is_eligible_for_validation(
            50_000, entries, "EVAL", sub_type=sub_type
        )


# ── Payout Shape ────────────────────────────────────────────────────────────


class TestPayoutShape:
    @pytest.mark.parametrize(
        "firm,sub_type,cap",
        [("LUCID", "FLEX", 3000), ("PHIDIAS", "CASH", 2000), ("TRADEIFY", "SELECT_DAILY", 1000)],
    )
    def test_capped_payout_saturates(self, firm: str, sub_type: str, cap: float) -> None:
        entries = _days(*([2500] * 10))
        strategy = get_strategy(firm)
        for pnl in (25_000, 50_000):
            available = strategy.calculate_available_for_withdrawal(
                50_000, pnl, 0, entries, "FUNDED", sub_type=sub_type
            )
            assert available == cap

    @pytest.mark.parametrize("firm", ["TOPSTEP", "BULENOX"])
    def test_uncapped_payout_grows_with_profit(self, firm: str) -> None:
        entries = _days(*([1000] * 8))
        strategy = get_strategy(firm)
        amounts = [
            strategy.calculate_available_for_withdrawal(50_000, pnl, 0, entries, "FUNDED")
            for pnl in (1000, 4000, 8000, 20_000)
        ]
        assert amounts == sorted(amounts)
        assert amounts[0] < amounts[-1]

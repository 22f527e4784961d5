"""Tests for Lucid — FLEX / PRO / DIRECT / LIVE rules, payouts and graduation."""

from datetime import date, timedelta

from src.propfirm.models import AccountType, PnlEntry, WithdrawalRules
from src.propfirm.strategies.lucid import LucidStrategy

# ── Helpers ─────────────────────────────────────────────────────────────────


def _days(*amounts: float, start: date = date(2026, 3, 2)) -> list[PnlEntry]:
    return [PnlEntry(date=start + timedelta(days=i), amount=a) for i, a in enumerate(amounts)]


def _strategy() -> LucidStrategy:
    return LucidStrategy()


# ── Rules ───────────────────────────────────────────────────────────────────


class TestRules:
    def test_flex_25k(self) -> None:
        rules = _strategy().get_account_rules(25_000, AccountType.EVAL, "Lucid Flex 25K")
        assert rules is not None
        assert rules.profit_target == 1250
        assert rules.consistency_rule == 50
        assert rules.min_trading_days == 0

    def test_pro_consistency_by_size(self) -> None:
        small = _strategy().get_account_rules(50_000, sub_type="PRO")
        large = _strategy().get_account_rules(100_000, sub_type="PRO")
        assert small is not None and small.consistency_rule == 35
        assert large is not None and large.consistency_rule == 40

    def test_direct_and_live_identical(self) -> None:
        direct = _strategy().get_account_rules(50_000, sub_type="DIRECT")
        live = _strategy().get_account_rules(50_000, sub_type="LIVE")
        assert direct == live
        assert direct is not None and direct.profit_target == 0

    def test_funded_flex_drops_consistency_pro_keeps_it(self) -> None:
        flex = _strategy().get_account_rules(50_000, "FUNDED", sub_type="FLEX")
        pro = _strategy().get_account_rules(50_000, "FUNDED", sub_type="PRO")
        assert flex is not None and flex.consistency_rule == 0
        assert pro is not None and pro.consistency_rule == 35
        assert pro.profit_target == 0 and pro.min_trading_days == 0

    def test_eval_withdrawal_rules_not_applicable(self) -> None:
        rules = _strategy().get_withdrawal_rules(50_000, AccountType.EVAL)
        assert rules == WithdrawalRules.not_applicable()

    def test_flex_withdrawal_rules(self) -> None:
        rules = _strategy().get_withdrawal_rules(50_000, "FUNDED", sub_type="FLEX")
        assert rules.tax_rate == 0.1
        assert rules.min_withdrawal == 500
        assert rules.max_withdrawal == 3000
        assert rules.frequency == "daily"
        assert rules.cycle_requirements is not None
        assert rules.cycle_requirements.min_daily_profit == 200

    def test_direct_withdrawal_rules_require_cycles(self) -> None:
        rules = _strategy().get_withdrawal_rules(100_000, "FUNDED", sub_type="DIRECT")
        assert rules.requires_cycles is True
        assert rules.cycle_requirements is not None
        assert rules.cycle_requirements.days_per_cycle == 8
        assert rules.cycle_requirements.min_daily_profit == 250

    def test_flex_payout_cap_schedule(self) -> None:
        strategy = _strategy()
        assert strategy.flex_payout_cap(25_000, 0) == 2000
        assert strategy.flex_payout_cap(25_000, 5) == 4000
        assert strategy.flex_payout_cap(25_000, 12) == 4000
        assert strategy.flex_payout_cap(60_000, 0) == 5000


# ── Withdrawals ─────────────────────────────────────────────────────────────


class TestFlexWithdrawal:
    def test_needs_five_qualifying_days(self) -> None:
        entries = _days(300, 300, 300, 300, 199)
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 1399, 0, entries, "FUNDED", sub_type="FLEX"
        )
        assert available == 0.0

    def test_limited_by_profit(self) -> None:
        entries = _days(300, 300, 300, 300, 300)
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 1500, 0, entries, "FUNDED", sub_type="FLEX"
        )
        assert available == 1500

    def test_limited_by_payout_index_cap(self) -> None:
        """2,000 withdrawn → payout index 2 → 50k cap 4,000."""
        entries = _days(2000, 2000, 2000, 2000, 2000)
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 10_000, 2000, entries, "FUNDED", sub_type="FLEX"
        )
        assert available == 4000

    def test_eval_account_pays_nothing(self) -> None:
        entries = _days(300, 300, 300, 300, 300)
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 1500, 0, entries, "EVAL", sub_type="FLEX"
        )
        assert available == 0.0


class TestProWithdrawal:
    def test_consistency_gate(self) -> None:
        """Best day 1,000 of 2,000 = 50% > 35% at 50k."""
        entries = _days(1000, 250, 250, 250, 250)
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 2000, 0, entries, "FUNDED", sub_type="PRO"
        )
        assert available == 0.0

    def test_pays_tiered_profit_without_cap(self) -> None:
        """12,000 profit: 10,000 at 100% + 2,000 at 90%."""
        entries = _days(*([1200] * 10))
        available = _strategy().calculate_available_for_withdrawal(
            100_000, 12_000, 0, entries, "FUNDED", sub_type="PRO"
        )
        assert available == 10_000 + 2000 * 0.9


class TestDirectWithdrawal:
    def test_needs_eight_days(self) -> None:
        entries = _days(*([300] * 7))
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 2100, 0, entries, "FUNDED", "LucidDirect 50K"
        )
        assert available == 0.0

    def test_strict_consistency(self) -> None:
        """Best day 600 of 2,700 = 22% > 20%."""
        entries = _days(600, 300, 300, 300, 300, 300, 300, 300)
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 2700, 0, entries, "FUNDED", sub_type="LIVE"
        )
        assert available == 0.0

    def test_pays_unwithdrawn_profit(self) -> None:
        entries = _days(*([300] * 8))
        available = _strategy().calculate_available_for_withdrawal(
            50_000, 2400, 400, entries, "FUNDED", sub_type="DIRECT"
        )
        assert available == 2000


# ── Eligibility ─────────────────────────────────────────────────────────────


class TestEligibility:
    def test_flex_graduates(self) -> None:
        entries = _days(700, 600, 500, 400, 800)
        assert _strategy().is_eligible_for_validation(50_000, entries, "EVAL", "Lucid Flex")

    def test_flex_consistency(self) -> None:
        """Best day 2,000 of 3,000 > 50%."""
        entries = _days(2000, 500, 500)
        assert not _strategy().is_eligible_for_validation(50_000, entries, "EVAL", "Lucid Flex")

    def test_pro_needs_five_days(self) -> None:
        entries = _days(800, 800, 700, 700)
        assert not _strategy().is_eligible_for_validation(50_000, entries, "EVAL", "LucidPro")

    def test_trailing_breach(self) -> None:
        entries = _days(1000, -2100, 1500, 1500, 1500)
        assert not _strategy().is_eligible_for_validation(50_000, entries, "EVAL", sub_type="FLEX")

    def test_instant_funded_never_graduates(self) -> None:
        entries = _days(700, 600, 500, 400, 800)
        assert not _strategy().is_eligible_for_validation(50_000, entries, sub_type="DIRECT")
        assert not _strategy().is_eligible_for_validation(50_000, entries, sub_type="LIVE")

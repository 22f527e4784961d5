"""
Tests for the tier-table firms — TopStep, Apex and Bulenox.

Covers:
- Rule tables and FUNDED zeroing of evaluation fields
- Graduation: target, trading days, consistency (TopStep only), sticky trailing drawdown
- TopStep 5-day cycles and the 50% → 90% withdrawal ratchet
- Apex buffer + 8-day cycle and Bulenox realized-profit withdrawals
"""

from datetime import date, timedelta

from src.propfirm.models import AccountType, PnlEntry, WithdrawalRules
from src.propfirm.strategies.apex import ApexStrategy
from src.propfirm.strategies.bulenox import BulenoxStrategy
from src.propfirm.strategies.topstep import TopStepStrategy

# ── Helpers ─────────────────────────────────────────────────────────────────


def _days(*amounts: float, start: date = date(2026, 3, 2)) -> list[PnlEntry]:
    """One entry per consecutive day with the given amounts."""
    return [PnlEntry(date=start + timedelta(days=i), amount=a) for i, a in enumerate(amounts)]


# ── TopStep ─────────────────────────────────────────────────────────────────


class TestTopStepRules:
    def test_50k_rules(self) -> None:
        rules = TopStepStrategy().get_account_rules(50_000, AccountType.EVAL)
        assert rules is not None
        assert rules.profit_target == 3000
        assert rules.max_drawdown == 2000
        assert rules.consistency_rule == 50
        assert rules.min_trading_days == 1
        assert rules.max_contracts is not None and rules.max_contracts.mini == 5

    def test_unsupported_size_is_none(self) -> None:
        assert TopStepStrategy().get_account_rules(25_000) is None

    def test_funded_zeroes_evaluation_fields(self) -> None:
        rules = TopStepStrategy().get_account_rules(50_000, AccountType.FUNDED)
        assert rules is not None
        assert rules.profit_target == 0
        assert rules.consistency_rule == 0
        assert rules.min_trading_days == 0
        assert rules.max_drawdown == 2000

    def test_eval_withdrawal_rules_not_applicable(self) -> None:
        rules = TopStepStrategy().get_withdrawal_rules(50_000, AccountType.EVAL)
        assert rules == WithdrawalRules.not_applicable()

    def test_funded_withdrawal_rules_use_cycles(self) -> None:
        rules = TopStepStrategy().get_withdrawal_rules(50_000, AccountType.FUNDED)
        assert rules.requires_cycles is True
        assert rules.cycle_requirements is not None
        assert rules.cycle_requirements.days_per_cycle == 5
        assert rules.cycle_requirements.min_daily_profit == 150


class TestTopStepEligibility:
    def test_50k_eval_graduates(self) -> None:
        """+3,200 over four days, best day 1,000 (31%), drawdown never > 2,000."""
        entries = _days(800, 1000, 700, 700)
        assert TopStepStrategy().is_eligible_for_validation(50_000, entries, "EVAL") is True

    def test_below_target(self) -> None:
        entries = _days(1000, 1000, 900)
        assert TopStepStrategy().is_eligible_for_validation(50_000, entries) is False

    def test_single_day_fails_consistency(self) -> None:
        """Two fills on one day make that day 100% of the profit."""
        entries = [PnlEntry(date=date(2026, 3, 2), amount=1600)] * 2
        assert TopStepStrategy().is_eligible_for_validation(50_000, entries) is False

    def test_consistency_failure(self) -> None:
        """Best day 2,000 of 3,200 total = 62.5% > 50%."""
        entries = _days(2000, 600, 600)
        assert TopStepStrategy().is_eligible_for_validation(50_000, entries) is False

    def test_sticky_trailing_breach(self) -> None:
        entries = _days(1000, -2100, 1500, 1500, 1500)
        assert TopStepStrategy().is_eligible_for_validation(50_000, entries) is False

    def test_funded_account_never_eligible(self) -> None:
        entries = _days(800, 1000, 700, 700)
        assert TopStepStrategy().is_eligible_for_validation(50_000, entries, "FUNDED") is False

    def test_same_day_order_does_not_change_answer(self) -> None:
        """Day three holds +1,000 and -1,500; loss first, the peak gap is 2,500."""
        entries = _days(1000, -1000, 1000, 1000, 1000, 1000, 1000)
        late_loss = PnlEntry(date=entries[2].date, amount=-1500)
        gain_first = [*entries[:3], late_loss, *entries[3:]]
        loss_first = [*entries[:2], late_loss, *entries[2:]]
        strategy = TopStepStrategy()
        assert strategy.is_eligible_for_validation(50_000, gain_first, "EVAL") is False
        assert strategy.is_eligible_for_validation(50_000, loss_first, "EVAL") is False

    def test_empty_entries(self) -> None:
        assert TopStepStrategy().is_eligible_for_validation(50_000, []) is False


class TestTopStepWithdrawal:
    def test_no_cycle_nothing_available(self) -> None:
        entries = _days(200, 200, 200, 200)
        available = TopStepStrategy().calculate_available_for_withdrawal(
            50_000, 800, 0, entries, AccountType.FUNDED
        )
        assert available == 0.0

    def test_one_cycle_unlocks_half(self) -> None:
        entries = _days(150, 200, 300, 150, 200)
        available = TopStepStrategy().calculate_available_for_withdrawal(
            50_000, 1000, 0, entries, AccountType.FUNDED
        )
        assert TopStepStrategy().completed_cycles(entries) == 1
        assert available == 500

    def test_non_qualifying_days_do_not_count(self) -> None:
        entries = _days(150, 200, 300, 149, 200)
        assert TopStepStrategy().completed_cycles(entries) == 0

    def test_ratio_ratchets_to_ninety_percent(self) -> None:
        strategy = TopStepStrategy()
        entries = _days(500, 500, 500, 500, 500)
        assert strategy.withdrawal_percentage(9_999) == 0.5
        assert strategy.withdrawal_percentage(10_000) == 0.9
        assert strategy.withdrawal_percentage(25_000) == 0.9
        available = strategy.calculate_available_for_withdrawal(
            50_000, 2500, 10_000, entries, AccountType.FUNDED
        )
        assert available == 2500 * 0.9

    def test_negative_profit_is_zero(self) -> None:
        entries = _days(150, 150, 150, 150, 150, -2000)
        available = TopStepStrategy().calculate_available_for_withdrawal(
            50_000, -1250, 0, entries, AccountType.FUNDED
        )
        assert available == 0.0


# ── Apex ────────────────────────────────────────────────────────────────────


class TestApex:
    def test_rules_and_buffer(self) -> None:
        strategy = ApexStrategy()
        rules = strategy.get_account_rules(300_000)
        assert rules is not None and rules.profit_target == 20_000
        assert strategy.calculate_buffer(50_000) == 52_500
        assert strategy.calculate_buffer(75_000) == 0.0

    def test_eligible_without_consistency_check(self) -> None:
        """A single 2,900 day out of 3,000 is fine for Apex (no consistency rule)."""
        entries = _days(2900, 100)
        assert ApexStrategy().is_eligible_for_validation(50_000, entries) is True

    def test_trailing_breach_blocks_graduation(self) -> None:
        entries = _days(2000, -2600, 4000)
        assert ApexStrategy().is_eligible_for_validation(50_000, entries) is False

    def test_withdrawal_needs_eight_days_and_buffer(self) -> None:
        strategy = ApexStrategy()
        seven_days = _days(500, 500, 500, 500, 500, 500, 500)
        eight_days = _days(500, 500, 500, 500, 500, 500, 500, 500)
        assert strategy.calculate_available_for_withdrawal(50_000, 4000, 0, seven_days) == 0.0
        # balance 54,000, buffer 52,500
        assert strategy.calculate_available_for_withdrawal(50_000, 4000, 0, eight_days) == 1500

    def test_withdrawal_below_buffer_is_zero(self) -> None:
        entries = _days(*([250] * 8))
        assert ApexStrategy().calculate_available_for_withdrawal(50_000, 2000, 0, entries) == 0.0


# ── Bulenox ─────────────────────────────────────────────────────────────────


class TestBulenox:
    def test_rules(self) -> None:
        rules = BulenoxStrategy().get_account_rules(250_000)
        assert rules is not None
        assert rules.max_drawdown == 5500
        assert BulenoxStrategy().get_account_rules(300_000) is None

    def test_withdrawal_is_realized_profit(self) -> None:
        strategy = BulenoxStrategy()
        assert strategy.calculate_available_for_withdrawal(25_000, 1200, 0, []) == 1200
        assert strategy.calculate_available_for_withdrawal(25_000, -300, 0, []) == 0.0

    def test_no_tax_no_buffer(self) -> None:
        rules = BulenoxStrategy().get_withdrawal_rules(25_000, AccountType.FUNDED)
        assert rules.tax_rate == 0.0
        assert rules.has_buffer is False
        assert BulenoxStrategy().calculate_buffer(25_000) == 0.0

    def test_eligibility(self) -> None:
        assert BulenoxStrategy().is_eligible_for_validation(25_000, _days(800, 700)) is True
        assert BulenoxStrategy().is_eligible_for_validation(25_000, _days(800, 600)) is False

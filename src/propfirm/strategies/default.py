"""Fallback for unknown or unsupported firms: no rules, nothing withdrawable, never eligible."""

from collections.abc import Sequence

from src.propfirm.models import (
    AccountRules,
    AccountType,
    DrawdownMeasure,
    PnlEntry,
    WithdrawalRules,
)


class DefaultStrategy:
    def get_name(self) -> str:
        return "Default"

    def get_account_rules(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> AccountRules | None:
        return None

    def get_withdrawal_rules(
        self,
        account_size: float | None = None,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> WithdrawalRules:
        return WithdrawalRules.not_applicable()

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
        return 0.0

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
        return False

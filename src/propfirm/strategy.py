"""
The operation set every propfirm strategy implements.

All operations are pure and synchronous. "Not applicable" is expressed as
None / 0.0 / False, never as an exception:
- get_account_rules() returns None for an unsupported size tier.
- calculate_available_for_withdrawal() returns 0.0 both when rules block a
  payout and when payouts do not apply; callers gate on account_type first.
- is_eligible_for_validation() is advisory and never changes an account.
- get_drawdown_measure() names the drawdown flavour is_eligible_for_validation()
  checks, so progress reports measure drawdown the same way.

sub_type is the stored product sub-type of the account. When it is None,
strategies with several products infer it from name/notes keywords.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from src.propfirm.models import (
    AccountRules,
    AccountType,
    DrawdownMeasure,
    PnlEntry,
    WithdrawalRules,
)


@runtime_checkable
class PropfirmStrategy(Protocol):
    def get_name(self) -> str: ...

    def get_account_rules(
        self,
        account_size: float,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> AccountRules | None: ...

    def get_withdrawal_rules(
        self,
        account_size: float | None = None,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> WithdrawalRules: ...

    def calculate_buffer(self, account_size: float) -> float: ...

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
    ) -> float: ...

    def is_eligible_for_validation(
        self,
        account_size: float,
        pnl_entries: Sequence[PnlEntry],
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> bool: ...

    def get_drawdown_measure(
        self,
        account_type: AccountType | str | None = None,
        name: str | None = None,
        notes: str | None = None,
        *,
        sub_type: str | None = None,
    ) -> DrawdownMeasure: ...

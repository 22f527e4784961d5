"""
Account evaluation facade — every contract operation for one account in one call.

Applies the account-type gating callers would otherwise repeat: withdrawal
availability is only computed for FUNDED accounts and graduation eligibility
only for EVAL accounts. The result is advisory, nothing here mutates the
account.

Usage:
    account = load_account("config/accounts/topstep_50k_eval.yaml")
    evaluation = evaluate_account(account)
    print(evaluation.model_dump_json(indent=2))
"""

from datetime import date

from loguru import logger
from pydantic import BaseModel

from src.propfirm.account import Account
from src.propfirm.models import AccountRules, WithdrawalRules, is_funded
from src.propfirm.progress import RuleProgress, compute_rule_progress
from src.propfirm.selector import get_strategy
from src.propfirm.withdrawals import WithdrawalTaxInfo, calculate_withdrawal_tax


class AccountEvaluation(BaseModel):
    """Combined rule engine answers for one account."""

    account_name: str
    firm: str
    strategy: str
    account_type: str
    sub_type: str | None = None
    current_balance: float
    total_pnl: float
    total_withdrawals: float
    rules: AccountRules | None = None
    withdrawal_rules: WithdrawalRules
    buffer: float = 0.0
    available_for_withdrawal: float = 0.0
    withdrawal_tax: WithdrawalTaxInfo | None = None
    eligible_for_validation: bool = False
    progress: RuleProgress | None = None


def evaluate_account(account: Account, today: date | None = None) -> AccountEvaluation:
    """Run the firm's strategy over one account snapshot."""
    strategy = get_strategy(account.firm)
    context = {
        "account_type": account.account_type,
        "name": account.name,
        "notes": account.notes,
    }
    total_pnl = account.total_pnl
    total_withdrawals = account.total_withdrawals

    rules = strategy.get_account_rules(account.size, sub_type=account.sub_type, **context)
    withdrawal_rules = strategy.get_withdrawal_rules(
        account.size, sub_type=account.sub_type, **context
    )

    available = 0.0
    withdrawal_tax = None
    eligible = False
    if is_funded(account.account_type):
        available = strategy.calculate_available_for_withdrawal(
            account.size,
            total_pnl,
            total_withdrawals,
            account.pnl_entries,
            sub_type=account.sub_type,
            **context,
        )
        withdrawal_tax = calculate_withdrawal_tax(available, withdrawal_rules)
    else:
        eligible = strategy.is_eligible_for_validation(
            account.size, account.pnl_entries, sub_type=account.sub_type, **context
        )

    progress = None
    if rules is not None:
        measure = strategy.get_drawdown_measure(sub_type=account.sub_type, **context)
        progress = compute_rule_progress(
            rules, account.size, account.pnl_entries, today=today, measure=measure
        )

    logger.info(
        "Evaluated {} ({} {} {}): balance=${:.2f} available=${:.2f} eligible={}",
        account.name,
        strategy.get_name(),
        account.account_type.value,
        account.sub_type or "-",
        account.current_balance,
        available,
        eligible,
    )

    return AccountEvaluation(
        account_name=account.name,
        firm=account.firm,
        strategy=strategy.get_name(),
        account_type=account.account_type.value,
        sub_type=account.sub_type,
        current_balance=account.current_balance,
        total_pnl=total_pnl,
        total_withdrawals=total_withdrawals,
        rules=rules,
        withdrawal_rules=withdrawal_rules,
        buffer=strategy.calculate_buffer(account.size),
        available_for_withdrawal=available,
        withdrawal_tax=withdrawal_tax,
        eligible_for_validation=eligible,
        progress=progress,
    )
